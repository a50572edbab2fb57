"""Composable conditions for selecting vault entries."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from .vault import Entry

Condition = Callable[[Entry], bool]

_META_CHARACTERS = frozenset("\\.+*?()|[]{}^$")


def all_of(*args: Condition) -> Condition:
    """Match entries for which every condition holds."""
    conditions = tuple(args)

    def condition(entry: Entry) -> bool:
        return all(c(entry) for c in conditions)

    return condition


def any_of(*args: Condition) -> Condition:
    """Match entries for which at least one condition holds."""
    conditions = tuple(args)

    def condition(entry: Entry) -> bool:
        return any(c(entry) for c in conditions)

    return condition


_ALWAYS = all_of()
_NEVER = any_of()


def match_any(entry: Entry) -> bool:
    """Match every entry."""
    return _ALWAYS(entry)


def match_none(entry: Entry) -> bool:
    """Match no entry."""
    return _NEVER(entry)


@dataclass(frozen=True)
class Field:
    """A named entry field that conditions can be built on."""

    name: str

    def equals(self, value: str) -> Condition:
        def condition(entry: Entry) -> bool:
            return entry.get_as_string(self.name) == value

        return condition

    def contains(self, value: str) -> Condition:
        def condition(entry: Entry) -> bool:
            return value in entry.get_as_string(self.name)

        return condition

    def matches_wildcard(self, pattern: str) -> Condition:
        """Match with "*" for any run of characters and "?" for one character."""
        try:
            regex = re.compile(wildcard_to_regex_pattern(pattern))
        except re.error as err:
            raise ValueError(f"invalid wildcard pattern ({pattern}): {err}") from err

        def condition(entry: Entry) -> bool:
            return regex.search(entry.get_as_string(self.name)) is not None

        return condition


def where(name: str) -> Field:
    return Field(name)


def _quote_meta(text: str) -> str:
    return "".join("\\" + ch if ch in _META_CHARACTERS else ch for ch in text)


def wildcard_to_regex_pattern(pattern: str) -> str:
    """Turn a wildcard pattern into an equivalent regular expression."""
    expr = re.sub(r"\*+", "*", pattern)
    expr = _quote_meta(expr)
    expr = expr.replace("\\*", ".*").replace("\\?", ".")
    if expr.startswith(".*"):
        expr = expr[2:]
    else:
        expr = "^" + expr
    if expr.endswith(".*"):
        expr = expr[:-2]
    else:
        expr = expr + "$"
    return expr