"""Cryptographically random words, digits and passphrases."""

from __future__ import annotations

import math
import secrets
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DICTIONARY_PATH = Path(__file__).with_name("dictionary.txt")


@dataclass(frozen=True)
class RandomValue:
    """A random string and the bits of entropy it carries."""

    value: str = ""
    entropy: float = 0.0


def choice(options: Sequence[str]) -> RandomValue:
    """Pick one option uniformly; an empty sequence gives an empty value."""
    if not options:
        return RandomValue()
    picked = options[secrets.randbelow(len(options))]
    return RandomValue(picked, math.log2(len(options)))


def hex_digits(length: int) -> RandomValue:
    """Return ``length`` random lower-case hexadecimal digits."""
    if length < 0:
        raise ValueError("length must be non-negative")
    if length == 0:
        return RandomValue()
    raw = secrets.token_bytes((length + 1) // 2)
    return RandomValue(raw.hex()[:length], float(4 * length))


def decimal_digits(length: int) -> RandomValue:
    """Return ``length`` random decimal digits, zero padded."""
    if length < 0 or length > 99:
        raise ValueError("length must be between 0 and 99, inclusive")
    if length == 0:
        return RandomValue()
    number = secrets.randbelow(10**length)
    return RandomValue(str(number).zfill(length), length / math.log10(2))


def passphrase(
    dictionary: Sequence[str], words: int, digits: int, base: int, separator: str
) -> RandomValue:
    """Join random dictionary words and an optional numeric suffix.

    The suffix is hexadecimal for base 16 and decimal for base 10; any other
    base gives an empty suffix.
    """
    if words < 0:
        raise ValueError("number of words must be non-negative")

    parts: list[str] = []
    entropy = 0.0
    for _ in range(words):
        word = choice(dictionary)
        parts.append(word.value)
        entropy += word.entropy

    if digits > 0:
        if base == 16:
            suffix = hex_digits(digits)
        elif base == 10:
            suffix = decimal_digits(digits)
        else:
            suffix = RandomValue()
        parts.append(suffix.value)
        entropy += suffix.entropy

    return RandomValue(separator.join(parts), entropy)


def load_dictionary(stream: Iterable[str] | Iterable[bytes] | str | bytes) -> list[str]:
    """Read one word per line, skipping blank lines and "#" comments."""
    if isinstance(stream, bytes):
        stream = stream.decode("utf-8", errors="replace")
    if isinstance(stream, str):
        stream = stream.splitlines()

    words = []
    for line in stream:
        if isinstance(line, bytes):
            line = line.decode("utf-8", errors="replace")
        word = line.strip()
        if word and not word.startswith("#"):
            words.append(word)
    return words