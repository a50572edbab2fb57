"""Command that prints random passphrases."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from .random import DEFAULT_DICTIONARY_PATH, load_dictionary, passphrase


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="phrases", description="Generate random passphrases.")
    parser.add_argument("-words", "--words", type=int, default=3, help="number of words")
    parser.add_argument("-digits", "--digits", type=int, default=5, help="length of suffix")
    parser.add_argument(
        "-count", "--count", type=int, default=20, help="number of passwords to generate"
    )
    parser.add_argument(
        "-base",
        "--base",
        type=int,
        default=16,
        help="type of suffix: hexadecimal (base 16) or decimal (base 10)",
    )
    parser.add_argument("-separator", "--separator", default="-", help="separator string")
    parser.add_argument("-dictionary", "--dictionary", default="", help="dictionary file")
    parser.add_argument(
        "-verbose", "--verbose", action="store_true", help="print additional information"
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _parser().parse_args(argv)

    if args.base not in (10, 16):
        print("invalid base: expected 10 or 16")
        return 1

    if args.digits < 0 or (args.base == 10 and args.digits > 19):
        print("invalid number of digits: expected 0 or more (max 19 for base 10)")
        return 1

    path = args.dictionary or DEFAULT_DICTIONARY_PATH
    with open(path, encoding="utf-8") as stream:
        dictionary = load_dictionary(stream)

    for _ in range(args.count):
        try:
            phrase = passphrase(dictionary, args.words, args.digits, args.base, args.separator)
        except ValueError as err:
            print(f"failed to generate passphrase: {err}", file=sys.stderr)
            return 1
        if args.verbose:
            print(
                f"{phrase.value}\t({len(phrase.value)} characters, "
                f"{phrase.entropy:.1f} bits of entropy)"
            )
        else:
            print(phrase.value)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())