"""Command that looks up a password in a database."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from .backend import open_vault
from .menu import numbered_menu
from .prompt import read_password
from .query import all_of, any_of, where
from .vault import GROUP_FIELD, NAME_FIELD, USERNAME_FIELD, Entry

_PROMPT = "Password: "


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pwsafe", description="Print the password of a matching database entry."
    )
    parser.add_argument("-vault", "--vault", default="", help="read vault from this file (required)")
    parser.add_argument(
        "terms", nargs="*", metavar="TERM", help="account, then optionally a username"
    )
    return parser


def _menu_line(number: int, entry: Entry) -> str:
    return f"{number} {entry.group()}/{entry.name()}\t{entry.username()}"


def main(argv: Sequence[str] | None = None) -> int:
    parser = _parser()
    args = parser.parse_args(argv)

    if not args.vault:
        parser.print_usage(sys.stderr)
        return 1

    account = args.terms[0] if args.terms else ""
    username = args.terms[1] if len(args.terms) > 1 else ""

    try:
        password = read_password(_PROMPT)
        vault = open_vault(args.vault, password)
    except (OSError, EOFError, ValueError, ExceptionGroup) as err:
        print(f"error: {err}", file=sys.stderr)
        return 1

    with vault:
        matches = vault.find(
            all_of(
                any_of(
                    where(GROUP_FIELD).contains(account),
                    where(NAME_FIELD).contains(account),
                ),
                where(USERNAME_FIELD).contains(username),
            )
        )

        if not matches:
            print(f'No entries matched "{account}"')
            return 0

        if len(matches) == 1:
            chosen = matches[0]
        else:
            matches.sort(key=lambda entry: (entry.group(), entry.name()))
            try:
                index = numbered_menu(matches, _menu_line, "exit", "exit")
            except (OSError, EOFError) as err:
                print(f"error: {err}", file=sys.stderr)
                return 1
            if index is None:
                return 0
            chosen = matches[index]

        entry = vault.get(chosen.id())
        if entry is not None:
            print(entry.password().as_string())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())