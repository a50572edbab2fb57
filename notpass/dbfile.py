"""The outer layout of a version 3 database file."""

from __future__ import annotations

import io
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

TAG = b"PWS3"
MAGIC = TAG
EOF_MARKER = b"PWS3-EOFPWS3-EOF"

SALT_SIZE = 32
ITERATIONS_SIZE = 4
HASH_SIZE = 32
KEY_BLOCK_SIZE = 16
IV_SIZE = 16

PREFIX_LEN = len(TAG) + SALT_SIZE + ITERATIONS_SIZE + HASH_SIZE + 4 * KEY_BLOCK_SIZE + IV_SIZE
SUFFIX_LEN = len(EOF_MARKER) + HASH_SIZE


@dataclass(frozen=True)
class DbFile:
    """An undecrypted database: TAG|SALT|ITER|H(P')|B1|B2|B3|B4|IV|...|EOF|HMAC."""

    tag: bytes
    salt: bytes
    iter_bytes: bytes
    master_key_hash: bytes
    b1: bytes
    b2: bytes
    b3: bytes
    b4: bytes
    iv: bytes
    ciphertext: bytes
    eof: bytes
    hmac: bytes

    def iterations(self) -> int:
        """Return the key-stretching iteration count (unsigned little endian)."""
        return int.from_bytes(self.iter_bytes, "little")

    def encryption_key(self) -> bytes:
        """Return the encrypted record key, B1 followed by B2."""
        return self.b1 + self.b2

    def hmac_key(self) -> bytes:
        """Return the encrypted HMAC key, B3 followed by B4."""
        return self.b3 + self.b4

    @classmethod
    def from_bytes(cls, data: bytes) -> DbFile:
        """Split raw file contents into their parts; raise ValueError if malformed."""
        data = bytes(data)
        if len(data) < PREFIX_LEN + SUFFIX_LEN:
            raise ValueError("invalid PasswordSafe db file (too short)")

        read = io.BytesIO(data).read
        dbf = cls(
            tag=read(len(TAG)),
            salt=read(SALT_SIZE),
            iter_bytes=read(ITERATIONS_SIZE),
            master_key_hash=read(HASH_SIZE),
            b1=read(KEY_BLOCK_SIZE),
            b2=read(KEY_BLOCK_SIZE),
            b3=read(KEY_BLOCK_SIZE),
            b4=read(KEY_BLOCK_SIZE),
            iv=read(IV_SIZE),
            ciphertext=read(len(data) - PREFIX_LEN - SUFFIX_LEN),
            eof=read(len(EOF_MARKER)),
            hmac=read(HASH_SIZE),
        )

        if dbf.tag != TAG:
            raise ValueError(f"invalid PasswordSafe db file (expected tag: {TAG.decode()})")
        if dbf.eof != EOF_MARKER:
            raise ValueError(f"invalid PasswordSafe db file (expected eof: {EOF_MARKER.decode()})")
        return dbf


def read_db_file(path: str | PathLike[str]) -> DbFile:
    """Read and split a database file."""
    return DbFile.from_bytes(Path(path).read_bytes())