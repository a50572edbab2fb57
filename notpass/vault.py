"""Vault entries, their values and the interfaces a vault offers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime

from .sensitive import SensitiveString

DEFAULT_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

GROUP_FIELD = "group"
ID_FIELD = "id"
NAME_FIELD = "name"
NOTE_FIELD = "note"
PASSWORD_FIELD = "password"
URL_FIELD = "url"
USERNAME_FIELD = "username"


class Value(ABC):
    """Anything that can be stored in an entry field."""

    @abstractmethod
    def as_string(self) -> str:
        """Return the value as text."""


class Secret(Value):
    """A value that must not be revealed when printed."""


Secret.register(SensitiveString)


class String(str, Value):
    """A plain, non-secret text value."""

    __slots__ = ()

    def __new__(cls, value: object = "") -> String:
        if isinstance(value, str):
            value = str.__str__(value)
        return super().__new__(cls, value)

    def as_string(self) -> str:
        return str.__str__(self)


@dataclass(frozen=True)
class Timestamp(Value):
    """A point in time, shown in :data:`DEFAULT_TIME_FORMAT`."""

    time: datetime

    def as_string(self) -> str:
        return self.time.strftime(DEFAULT_TIME_FORMAT)


class Entry:
    """An item in a password manager datastore.

    Entries are treated as immutable: the ``with_*`` methods return a new
    entry and leave the original untouched.
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping[str, Value] | None = None) -> None:
        self._fields: dict[str, Value] = dict(fields or {})

    def fields(self) -> dict[str, Value]:
        """Return a copy of all fields."""
        return dict(self._fields)

    def without_secrets(self) -> Entry:
        """Return a copy of the entry holding no secret fields."""
        return Entry({k: v for k, v in self._fields.items() if not isinstance(v, Secret)})

    def get(self, field: str) -> Value | None:
        return self._fields.get(field)

    def get_as_string(self, field: str) -> str:
        value = self.get(field)
        return value.as_string() if value is not None else ""

    def get_as_sensitive_string(self, field: str) -> SensitiveString:
        value = self.get(field)
        return SensitiveString(value.as_string() if value is not None else "")

    def with_field(self, field: str, value: Value) -> Entry:
        fields = dict(self._fields)
        fields[field] = value
        return Entry(fields)

    def with_id(self, value: str) -> Entry:
        return self.with_field(ID_FIELD, String(value))

    def with_group(self, value: str) -> Entry:
        return self.with_field(GROUP_FIELD, String(value))

    def with_name(self, value: str) -> Entry:
        return self.with_field(NAME_FIELD, String(value))

    def with_note(self, value: str) -> Entry:
        return self.with_field(NOTE_FIELD, SensitiveString(value))

    def with_password(self, value: str) -> Entry:
        return self.with_field(PASSWORD_FIELD, SensitiveString(value))

    def with_username(self, value: str) -> Entry:
        return self.with_field(USERNAME_FIELD, String(value))

    def with_url(self, value: str) -> Entry:
        return self.with_field(URL_FIELD, String(value))

    def id(self) -> str:
        return self.get_as_string(ID_FIELD)

    def group(self) -> str:
        """Return the group; levels are separated by "/", with "\\" escaping."""
        return self.get_as_string(GROUP_FIELD)

    def name(self) -> str:
        return self.get_as_string(NAME_FIELD)

    def note(self) -> SensitiveString:
        return self.get_as_sensitive_string(NOTE_FIELD)

    def password(self) -> SensitiveString:
        return self.get_as_sensitive_string(PASSWORD_FIELD)

    def username(self) -> str:
        return self.get_as_string(USERNAME_FIELD)

    def url(self) -> str:
        return self.get_as_string(URL_FIELD)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entry):
            return NotImplemented
        return self._fields == other._fields

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Entry({self._fields!r})"


class ReadableVault(ABC):
    """Read-only access to a vault.

    ``get`` returns a fully decrypted entry, or None. ``list`` returns all
    entries without their secret fields.
    """

    @abstractmethod
    def get(self, entry_id: str) -> Entry | None:
        """Return the entry with this id, or None."""

    @abstractmethod
    def list(self) -> list[Entry]:
        """Return every entry, without secret fields."""

    @abstractmethod
    def close(self) -> None:
        """Release the vault."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class SearchableVault(ABC):
    """Search over a vault; results carry no secret fields."""

    @abstractmethod
    def find(self, condition: Callable[[Entry], bool]) -> list[Entry]:
        """Return the entries for which ``condition`` holds."""


class WritableVault(ABC):
    """Changes to the entries of a vault."""

    @abstractmethod
    def put(self, entry_id: str, entry: Entry) -> None:
        """Add or replace an entry."""

    @abstractmethod
    def delete(self, entry_id: str) -> None:
        """Remove an entry."""

    @abstractmethod
    def close(self) -> None:
        """Release the vault."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()