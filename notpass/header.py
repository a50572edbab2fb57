"""The header record of a version 3 database."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum

from .records import Record
from .timestamps import parse_timestamp


class HeaderFieldType(IntEnum):
    VERSION = 0x00
    UUID = 0x01
    NON_DEFAULT_PREFERENCES = 0x02
    TREE_DISPLAY_STATUS = 0x03
    LAST_SAVED_AT = 0x04
    LAST_SAVED_BY = 0x05
    LAST_SAVED_BY_WHAT = 0x06
    LAST_SAVED_BY_WHOM = 0x07
    LAST_SAVED_ON_HOST = 0x08
    DATABASE_NAME = 0x09
    DATABASE_DESCRIPTION = 0x0A
    DATABASE_FILTERS = 0x0B
    RECENTLY_USED_ENTRIES = 0x0F
    NAMED_PASSWORD_POLICIES = 0x10
    EMPTY_GROUPS = 0x11
    YUBICO = 0x12
    MASTER_PASSWORD_CHANGED_AT = 0x13
    END_OF_HEADER = 0xFF


END_OF_HEADER = int(HeaderFieldType.END_OF_HEADER)


def _text(data: bytes) -> str:
    return bytes(data).decode("utf-8", errors="replace")


@dataclass
class Header:
    """Database-wide properties stored before the entries."""

    version: int = 0
    uuid: uuid.UUID | None = None
    name: str = ""
    description: str = ""
    last_saved_at: datetime | None = None
    last_saved_by_what: str = ""
    last_saved_by_whom: str = ""
    last_saved_on_host: str = ""
    empty_groups: list[str] = field(default_factory=list)
    ignored_fields: dict[int, bytes] = field(default_factory=dict)

    def set(self, typ: int, data: bytes) -> None:
        """Store one header field; raise ValueError if its data is malformed."""
        data = bytes(data)
        if typ == HeaderFieldType.VERSION:
            if len(data) < 2:
                raise ValueError("expected 2 bytes for version")
            self.version = int.from_bytes(data[:2], "little")
        elif typ == HeaderFieldType.UUID:
            if len(data) != 16:
                raise ValueError(f"invalid UUID (got {len(data)} bytes)")
            self.uuid = uuid.UUID(bytes=data)
        elif typ == HeaderFieldType.LAST_SAVED_AT:
            self.last_saved_at = _parse_saved_at(data)
        elif typ == HeaderFieldType.LAST_SAVED_BY_WHAT:
            self.last_saved_by_what = _text(data)
        elif typ == HeaderFieldType.LAST_SAVED_BY_WHOM:
            self.last_saved_by_whom = _text(data)
        elif typ == HeaderFieldType.LAST_SAVED_ON_HOST:
            self.last_saved_on_host = _text(data)
        elif typ == HeaderFieldType.DATABASE_NAME:
            self.name = _text(data)
        elif typ == HeaderFieldType.DATABASE_DESCRIPTION:
            self.description = _text(data)
        elif typ == HeaderFieldType.EMPTY_GROUPS:
            self.empty_groups.append(_text(data))
        else:
            self.ignored_fields[typ] = data


def _parse_saved_at(data: bytes) -> datetime:
    # Older files store the time as 8 hex digits, most significant byte first.
    if len(data) == 4:
        return parse_timestamp(data)
    if len(data) == 8:
        return parse_timestamp(bytes.fromhex(data.decode("ascii"))[::-1])
    raise ValueError("expected 4 or 8 bytes for timestamp")


def parse_header(record: Record) -> Header:
    """Build a header from its record; all malformed fields are reported together."""
    header = Header()
    errors: list[Exception] = []
    for current in record.fields:
        try:
            header.set(current.typ, current.data)
        except ValueError as err:
            errors.append(err)
    if errors:
        raise ExceptionGroup("invalid header", errors)
    return header