"""Reading passwords and one-time codes from the user."""

from __future__ import annotations

import getpass
import sys
from typing import TextIO


def _is_terminal(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def read_password(prompt: str = "", stdin: TextIO | None = None, stdout: TextIO | None = None) -> str:
    """Read a password.

    On a terminal the prompt is shown and the input is not echoed. Otherwise
    one line is read silently and returned without its line ending; input
    that ends early gives what was read.
    """
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout

    if _is_terminal(stdin):
        return getpass.getpass(prompt, stream=stdout)

    line = stdin.readline()
    return line.removesuffix("\n").removesuffix("\r")


def read_otp(prompt: str = "", stdin: TextIO | None = None, stdout: TextIO | None = None) -> str:
    """Show ``prompt`` if given and read one line, without surrounding whitespace."""
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout

    if prompt:
        print(prompt, end="", file=stdout, flush=True)
    return stdin.readline().strip()