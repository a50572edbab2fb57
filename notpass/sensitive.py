"""Strings whose printed form hides their content."""

from __future__ import annotations

REDACTED = "**********"


class SensitiveString(str):
    """A string that prints as a redaction mark.

    Comparison, hashing and slicing behave like ``str``; ``str()``, ``repr()``
    and formatting give :data:`REDACTED`. Use :meth:`as_string` for the text.
    """

    __slots__ = ()

    def __new__(cls, value: object = "") -> SensitiveString:
        if isinstance(value, str):
            # str.__str__ copies the characters without going through an
            # overridden __str__, so wrapping a redacted string keeps its text.
            value = str.__str__(value)
        return super().__new__(cls, value)

    def as_string(self) -> str:
        """Return the real text as a plain ``str``."""
        return str.__str__(self)

    def __str__(self) -> str:
        return REDACTED

    def __repr__(self) -> str:
        return REDACTED

    def __format__(self, format_spec: str) -> str:
        return format(REDACTED, format_spec)