"""Timestamps as stored in database fields."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_timestamp(ts: bytes) -> datetime:
    """Read a 4-byte signed little-endian count of seconds since the epoch.

    The result is an aware datetime in the local time zone.
    """
    if len(ts) != 4:
        raise ValueError("expected 4 bytes for timestamp")
    seconds = int.from_bytes(bytes(ts), "little", signed=True)
    return (_EPOCH + timedelta(seconds=seconds)).astimezone()