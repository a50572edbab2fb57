"""Fields and records of a decrypted version 3 database."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import BinaryIO, Protocol

from .sensitive import SensitiveString
from .timestamps import parse_timestamp
from .twofish import BLOCK_SIZE
from .vault import String, Timestamp, Value

CHUNK_SIZE = BLOCK_SIZE
_FIELD_HEADER_SIZE = 5


class _Mac(Protocol):
    def update(self, data: bytes, /) -> None: ...


@dataclass(frozen=True)
class Field:
    """One typed field: its type byte and raw data."""

    typ: int
    data: bytes


@dataclass
class Record:
    """The fields between two end markers."""

    fields: list[Field] = field(default_factory=list)


def read_field(stream: BinaryIO, mac: _Mac) -> Field:
    """Read one field and its padding, feeding its data to ``mac``.

    Raises EOFError when the stream is exhausted before the field starts.
    """
    head = stream.read(_FIELD_HEADER_SIZE)
    if not head:
        raise EOFError("no more fields")
    if len(head) < _FIELD_HEADER_SIZE:
        raise ValueError("truncated field header")

    length = int.from_bytes(head[:4], "little")
    data = stream.read(length)
    if length and not data:
        raise EOFError("field data missing")
    if len(data) < length:
        raise ValueError("truncated field data")

    padding = CHUNK_SIZE - (_FIELD_HEADER_SIZE + length) % CHUNK_SIZE
    if padding != CHUNK_SIZE:
        stream.read(padding)

    mac.update(data)
    return Field(head[4], data)


def read_record(stream: BinaryIO, mac: _Mac, end_marker: int) -> Record:
    """Read fields up to and including one of type ``end_marker``."""
    record = Record()
    while True:
        current = read_field(stream, mac)
        if current.typ == end_marker:
            return record
        record.fields.append(current)


def _text(data: bytes) -> str:
    return bytes(data).decode("utf-8", errors="replace")


def as_timestamp(data: bytes) -> Timestamp:
    return Timestamp(parse_timestamp(data))


def as_uuid_string(data: bytes) -> String:
    if len(data) != 16:
        raise ValueError(f"invalid UUID (got {len(data)} bytes)")
    return String(str(uuid.UUID(bytes=bytes(data))))


def as_sensitive_string(data: bytes) -> SensitiveString:
    return SensitiveString(_text(data))


def as_string(data: bytes) -> String:
    return String(_text(data))


def as_hex_string(data: bytes) -> String:
    return String(bytes(data).hex())


FieldParser = "Callable[[bytes], Value]"
__all__ = [
    "Field",
    "Record",
    "Value",
    "as_hex_string",
    "as_sensitive_string",
    "as_string",
    "as_timestamp",
    "as_uuid_string",
    "read_field",
    "read_record",
]