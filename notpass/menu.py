"""A numbered selection menu for the terminal."""

from __future__ import annotations

import re
import sys
from collections.abc import Callable, Sequence
from typing import TextIO, TypeVar

T = TypeVar("T")

_INTEGER = re.compile(r"[+-]?[0-9]+")


def numbered_menu(
    choices: Sequence[T],
    format_choice: Callable[[int, T], str],
    default_choice: str,
    abort: str,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int | None:
    """Show the numbered choices and ask until a valid one is picked.

    Returns the zero-based index of the chosen item, or None when the answer
    is ``abort``. An empty answer stands for ``default_choice``. Raises
    EOFError when input ends before a full line is read.
    """
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout

    for number, choice in enumerate(choices, start=1):
        print(format_choice(number, choice), file=stdout)
    print(file=stdout)

    while True:
        print(f"Selection [{default_choice}]: ", end="", file=stdout, flush=True)
        line = stdin.readline()
        if not line.endswith("\n"):
            raise EOFError("input ended before a selection was made")

        response = line.strip() or default_choice
        if response == abort:
            return None

        if _INTEGER.fullmatch(response):
            number = int(response)
            if 1 <= number <= len(choices):
                return number - 1