"""Opening, decrypting and querying version 3 databases."""

from __future__ import annotations

import hashlib
import hmac
import io
from collections.abc import Callable
from dataclasses import dataclass, field
from os import PathLike
from uuid import UUID

from .dbfile import DbFile, read_db_file
from .entries import END_OF_RECORD, parse_entries
from .header import END_OF_HEADER, Header, parse_header
from .keys import derive_key_sha256
from .records import Record, read_record
from .twofish import decrypt_cbc, decrypt_ecb
from .vault import Entry, ReadableVault, SearchableVault


@dataclass(eq=False)
class Database(ReadableVault, SearchableVault):
    """A decrypted database: its header and its entries by id."""

    header: Header
    entries: dict[str, Entry] = field(default_factory=dict)
    closed: bool = field(default=False, init=False)

    def uuid(self) -> UUID | None:
        return self.header.uuid

    def name(self) -> str:
        return self.header.name

    def description(self) -> str:
        return self.header.description

    def get(self, entry_id: str) -> Entry | None:
        """Return the full entry with this id, secrets included, or None."""
        return self.entries.get(entry_id)

    def list(self) -> list[Entry]:
        """Return every entry without its secret fields."""
        return [entry.without_secrets() for entry in self.entries.values()]

    def find(self, condition: Callable[[Entry], bool]) -> list[Entry]:
        """Return the entries, without secrets, for which ``condition`` holds."""
        return [entry for entry in self.list() if condition(entry)]

    def close(self) -> None:
        """Mark the database closed; no file is held open after reading."""
        self.closed = True

    def __enter__(self) -> Database:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def open_db(path: str | PathLike[str], password: str | bytes) -> Database:
    """Read and decrypt the database at ``path``."""
    return decrypt(read_db_file(path), password)


def decrypt(dbf: DbFile, password: str | bytes) -> Database:
    """Decrypt and authenticate an already read database file."""
    master_key = derive_key_sha256(password, dbf.salt, dbf.iterations(), dbf.master_key_hash)
    encryption_key = decrypt_ecb(master_key, dbf.encryption_key())
    hmac_key = decrypt_ecb(master_key, dbf.hmac_key())
    plaintext = decrypt_cbc(encryption_key, dbf.iv, dbf.ciphertext)
    return parse(plaintext, hmac_key, dbf.hmac)


def parse(data: bytes, hmac_key: bytes, mac: bytes) -> Database:
    """Parse decrypted records and check them against ``mac``.

    Malformed header or entry fields are reported together in an ExceptionGroup.
    """
    digest = hmac.new(bytes(hmac_key), digestmod=hashlib.sha256)
    stream = io.BytesIO(bytes(data))

    try:
        header_record = read_record(stream, digest, END_OF_HEADER)
    except EOFError as err:
        raise ValueError("database header is truncated") from err

    records: list[Record] = []
    while True:
        try:
            records.append(read_record(stream, digest, END_OF_RECORD))
        except EOFError:
            break

    if not hmac.compare_digest(bytes(mac), digest.digest()):
        raise ValueError("failed to authenticate data")

    errors: list[Exception] = []
    header = Header()
    try:
        header = parse_header(header_record)
    except ExceptionGroup as group:
        errors.extend(group.exceptions)

    entries: list[Entry] = []
    try:
        entries = parse_entries(records)
    except ExceptionGroup as group:
        errors.extend(group.exceptions)

    if errors:
        raise ExceptionGroup("invalid database", errors)

    return Database(header, {entry.id(): entry for entry in entries})