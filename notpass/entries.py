"""Turning version 3 database records into vault entries."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from .records import (
    Record,
    as_hex_string,
    as_sensitive_string,
    as_string,
    as_timestamp,
    as_uuid_string,
)
from .vault import (
    GROUP_FIELD,
    ID_FIELD,
    NAME_FIELD,
    NOTE_FIELD,
    PASSWORD_FIELD,
    URL_FIELD,
    USERNAME_FIELD,
    Entry,
    Value,
)

END_OF_RECORD = 0xFF

FIELD_MAP: dict[int, tuple[str, Callable[[bytes], Value]]] = {
    0x01: (ID_FIELD, as_uuid_string),
    0x02: (GROUP_FIELD, as_string),
    0x03: (NAME_FIELD, as_string),
    0x04: (USERNAME_FIELD, as_string),
    0x05: (NOTE_FIELD, as_sensitive_string),
    0x06: (PASSWORD_FIELD, as_sensitive_string),
    0x07: ("creationTime", as_timestamp),
    0x08: ("passwordModificationTime", as_timestamp),
    0x09: ("lastAccessTime", as_timestamp),
    0x0A: ("passwordExpiryTime", as_timestamp),
    0x0C: ("lastModificationTime", as_timestamp),
    0x0D: (URL_FIELD, as_string),
    0x0E: ("autotype", as_hex_string),
    0x0F: ("passwordHistory", as_hex_string),
    0x10: ("passwordPolicy", as_hex_string),
    0x11: ("passwordExpiryInterval", as_hex_string),
    0x12: ("runCommand", as_hex_string),
    0x13: ("doubleClickAction", as_hex_string),
    0x14: ("email", as_string),
    0x15: ("protectedEntry", as_hex_string),
    0x16: ("ownSymbolsForPassword", as_hex_string),
    0x17: ("shiftDoubleClickAction", as_hex_string),
    0x18: ("passwordPolicyName", as_hex_string),
    0x19: ("entryKeyboardShortcut", as_hex_string),
    # Reserved by the format but not written by current applications.
    0x1B: ("twoFactorKeyField", as_hex_string),
    0x1C: ("creditCardNumberField", as_hex_string),
    0x1D: ("creditCardExpirationField", as_hex_string),
    0x1E: ("creditCardCVVField", as_hex_string),
    0x1F: ("creditCardPINField", as_hex_string),
    0x20: ("qrCodeField", as_hex_string),
    0xDF: ("unknownField", as_hex_string),
}


def parse_entries(records: Iterable[Record]) -> list[Entry]:
    """Build one entry per record.

    Unknown field types are kept under their "0xNN" type as hex text. All
    malformed fields are reported together in an ExceptionGroup.
    """
    entries: list[Entry] = []
    errors: list[Exception] = []
    for record in records:
        fields: dict[str, Value] = {}
        for current in record.fields:
            known = FIELD_MAP.get(current.typ)
            if known is None:
                fields[f"0x{current.typ:02x}"] = as_hex_string(current.data)
                continue
            name, parser = known
            try:
                fields[name] = parser(current.data)
            except ValueError as err:
                errors.append(err)
        entries.append(Entry(fields))
    if errors:
        raise ExceptionGroup("invalid entries", errors)
    return entries