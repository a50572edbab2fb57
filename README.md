# notpass

Command-line tools and a small library for password vaults:

- `pwsafe` opens a Password Safe v3 (`.psafe3`) database, finds the entry you
  ask for and prints its password.
- `phrases` generates random passphrases made of dictionary words and a
  numeric suffix, optionally reporting their entropy.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Generating passphrases

```
phrases --dictionary words.txt
```

prints 20 passphrases of three words followed by a five-digit hexadecimal
suffix, joined with `-`. Options may be written with one or two dashes
(`-words` or `--words`):

| Option         | Default          | Meaning                                           |
|----------------|------------------|---------------------------------------------------|
| `--words`      | 3                | number of words                                   |
| `--digits`     | 5                | length of the suffix (0 for none)                 |
| `--count`      | 20               | number of passphrases to generate                 |
| `--base`       | 16               | suffix type: 16 (hexadecimal) or 10 (decimal)     |
| `--separator`  | `-`              | string placed between the parts                   |
| `--dictionary` | `dictionary.txt` | word list, one word per line; `#` starts a comment |
| `--verbose`    | off              | also print the length and bits of entropy         |

Any base other than 10 or 16, a negative number of digits, or more than 19
decimal digits is rejected with a message and exit status 1. For example:

```
phrases --dictionary words.txt --words 4 --digits 6 --base 10 --separator . --count 5 --verbose
```

Each word adds log2(size of the word list) bits of entropy, each hexadecimal
digit 4 bits and each decimal digit log2(10) bits.

## Reading a Password Safe database

```
pwsafe --vault personal.psafe3 [ACCOUNT [USERNAME]]
```

You are asked for the database's master password (read without echo on a
terminal, or as one line from standard input otherwise). Entries whose group
or name contains `ACCOUNT` and whose username contains `USERNAME` are
selected:

- if none match, a message says so;
- if exactly one matches, its password is printed;
- if several match, a numbered menu sorted by group and name is shown; enter
  a number to print that entry's password, or `exit` (the default) to quit.

A wrong password, an unreadable file or a database that is not version 3 is
reported as `error: ...` with exit status 1. Without `--vault` the usage line
is printed.

## Library use

Generate a passphrase from your own word list:

```python
from notpass.random import load_dictionary, passphrase

with open("words.txt", encoding="utf-8") as stream:
    dictionary = load_dictionary(stream)

phrase = passphrase(dictionary, 4, 5, 16, "-")
print(phrase.value, f"{phrase.entropy:.1f} bits")
```

`notpass.random` also offers `choice`, `hex_digits` and `decimal_digits`, each
returning a `RandomValue` with `value` and `entropy`.

Open a vault and search it:

```python
from notpass.backend import open_vault
from notpass.query import all_of, any_of, where

password = "password"
with open_vault("personal.psafe3", password) as vault:
    condition = all_of(
        any_of(where("group").contains("Finance"), where("name").contains("Finance")),
        where("username").contains(""),
    )
    for entry in vault.find(condition):
        full = vault.get(entry.id())
        print(entry.group(), entry.name(), full.password().as_string())
```

Entries returned by `find` and `list` never carry secret fields; use `get`
with the entry's id to obtain the full entry. Secret values are
`SensitiveString`s that print as `**********` unless you call `as_string()`.

Besides `contains`, a field condition can use `equals` or
`matches_wildcard`: `where("name").matches_wildcard("bank*")` matches names
starting with `bank`, and `?` matches any single character. `match_any` and
`match_none` match every or no entry.

`notpass.formats.guess_format` tells version 3 files from version 1/2 files
(the latter only when the password is right). Malformed header or entry
fields are reported together as an `ExceptionGroup`.

For databases protected with a YubiKey challenge-response slot, 
`notpass.backend.password_from_emulated_yubikey(credential, user_password)`
computes the database password from the slot's 20-byte HMAC-SHA1 secret,
using the software `notpass.yubikey.EmulatedYubiKey`.

## What it does not do

- No word list is shipped. `phrases` looks for `dictionary.txt` inside the
  package directory when `--dictionary` is not given, and fails if it is not
  there, so pass your own word list.
- There is no support for a physical YubiKey over USB; only the software
  emulation above is available, and `pwsafe` has no YubiKey option.
- Only Password Safe v3 databases can be opened; older v1/v2 files are
  recognised but rejected as unsupported.
- Databases are read only: entries cannot be added, changed or saved.