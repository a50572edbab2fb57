from datetime import datetime, timezone

import pytest

from notpass.timestamps import parse_timestamp


@pytest.mark.parametrize(
    "ts, expected",
    [
        (bytes([0xBC, 0x95, 0x27, 0xFF]), datetime(1969, 7, 20, 20, 17, tzinfo=timezone.utc)),
        (bytes([0, 0, 0, 0]), datetime(1970, 1, 1, tzinfo=timezone.utc)),
        (bytes([0xE0, 0x63, 0x71, 0x0E]), datetime(1977, 9, 5, 12, 56, tzinfo=timezone.utc)),
    ],
)
def test_parse_timestamp(ts, expected):
    actual = parse_timestamp(ts)
    assert actual == expected
    assert actual.tzinfo is not None


@pytest.mark.parametrize("ts", [bytes([0x01]), b"", bytes(8)])
def test_parse_timestamp_wrong_length(ts):
    with pytest.raises(ValueError, match="4 bytes"):
        parse_timestamp(ts)