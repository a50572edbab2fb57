"""Telling database file formats apart."""

from __future__ import annotations

import hmac
from enum import IntEnum
from os import PathLike

from .dbfile import MAGIC
from .mac import RND_SIZE, v1v2_mac

_SHA1_SIZE = 20


class Format(IntEnum):
    UNKNOWN = 0
    V1V2 = 1  # versions 1 and 2 cannot be told apart before decryption
    V3 = 3


def guess_format(db_path: str | PathLike[str], password: str | bytes) -> Format:
    """Return the format of the database at ``db_path``.

    Version 3 files are recognised by their tag; older files only when
    ``password`` reproduces their stored hash. Raises ValueError for a file
    too short to hold either header.
    """
    with open(db_path, "rb") as f:
        head = f.read(RND_SIZE + _SHA1_SIZE)

    if head.startswith(MAGIC):
        return Format.V3
    if len(head) < RND_SIZE + _SHA1_SIZE:
        raise ValueError(f"{db_path}: file is too short to be a database")

    rnd, expected = head[:RND_SIZE], head[RND_SIZE:]
    if hmac.compare_digest(v1v2_mac(password, rnd), expected):
        return Format.V1V2
    return Format.UNKNOWN