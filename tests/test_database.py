import hashlib
import hmac
import uuid
from datetime import datetime, timezone

import pytest

from notpass.database import Database, decrypt, open_db, parse
from notpass.dbfile import DbFile
from notpass.keys import IncorrectPasswordError
from notpass.twofish import Twofish

PASSWORD = "password"
SALT = bytes(range(32))
IV = bytes(range(100, 116))
ENCRYPTION_KEY = bytes(range(32, 64))
HMAC_KEY = bytes(range(64, 96))
ITERATIONS = 8

DB_UUID = uuid.UUID("a662b655-2b16-4e37-b5a7-789caa7828d0")
SAVED_AT = datetime(2023, 4, 2, 19, 31, 36, tzinfo=timezone.utc)
OLD_SAVED_AT = datetime(2023, 4, 2, 19, 43, 53, tzinfo=timezone.utc)

FIRST_ID = "bcdc6634-9e1a-4657-8cbf-36a4bc1a09cd"
SECOND_ID = "18f02841-6278-4b04-b357-d0a8b783e142"
THIRD_ID = "0b7b6c3e-1111-4222-8333-444455556666"
FOURTH_ID = "0b7b6c3e-7777-4888-9999-aaaabbbbcccc"


def _seconds(moment):
    return int(moment.timestamp())


def _header(saved_at=_seconds(SAVED_AT).to_bytes(4, "little")):
    return [
        (0x00, b"\x0d\x03"),
        (0x01, DB_UUID.bytes),
        (0x04, saved_at),
        (0x06, b"Password Safe V3.58"),
        (0x07, b"luke"),
        (0x08, b"OWENS-PC"),
        (0x09, b"Test database"),
        (0x0A, b"For testing purposes only!"),
        (0x11, b"Empty"),
        (0x11, b"Empty/Nested"),
        (0x11, b"Other"),
    ]


def _entry(entry_id, group, name, username, secret_text, url, note):
    return [
        (0x01, uuid.UUID(entry_id).bytes),
        (0x02, group.encode()),
        (0x03, name.encode()),
        (0x04, username.encode()),
        (0x05, note.encode()),
        (0x06, secret_text.encode()),
        (0x0D, url.encode()),
        (0x14, b"[email]"),
    ]


RECORDS = [
    _entry(FIRST_ID, "Finance", "Imperial Crypto Exchange", "lskywalker", "password",
           "https://palpatine-coin.example.com/", "This is a note."),
    _entry(SECOND_ID, "Ūňıćöɗɘ", "トッシェ駅", "ɭṳĸɛ", "secret",
           "http://toschestation.example.com/", "?????"),
    _entry(THIRD_ID, "Home", "Mail", "luke", "token", "https://mail.example.com/", "first"),
    _entry(FOURTH_ID, "Home", "Chat", "luke", "placeholder", "https://chat.example.com/", ""),
]


def _field(typ, data=b""):
    raw = len(data).to_bytes(4, "little") + bytes([typ]) + data
    return raw + bytes(-len(raw) % 16)


def _plaintext(header, records):
    parts = [_field(typ, data) for typ, data in header]
    parts.append(_field(0xFF))
    for record in records:
        parts.extend(_field(typ, data) for typ, data in record)
        parts.append(_field(0xFF))
    return b"".join(parts)


def _mac(header, records):
    digest = hmac.new(HMAC_KEY, digestmod=hashlib.sha256)
    for _, data in header:
        digest.update(data)
    for record in records:
        for _, data in record:
            digest.update(data)
    return digest.digest()


def _chunks(data):
    view = memoryview(data)
    return (bytes(view[start : start + 16]) for start in range(0, len(view), 16))


def _ecb(key, data):
    cipher = Twofish(key)
    return b"".join(cipher.encrypt_block(block) for block in _chunks(data))


def _cbc(key, iv, data):
    cipher = Twofish(key)
    previous = iv
    out = bytearray()
    for block in _chunks(data):
        previous = cipher.encrypt_block(bytes(a ^ b for a, b in zip(block, previous)))
        out += previous
    return bytes(out)


def _build_db(header, records, mac=None):
    stretched = hashlib.sha256(PASSWORD.encode() + SALT).digest()
    for _ in range(ITERATIONS):
        stretched = hashlib.sha256(stretched).digest()
    return (
        b"PWS3"
        + SALT
        + ITERATIONS.to_bytes(4, "little")
        + hashlib.sha256(stretched).digest()
        + _ecb(stretched, ENCRYPTION_KEY)
        + _ecb(stretched, HMAC_KEY)
        + IV
        + _cbc(ENCRYPTION_KEY, IV, _plaintext(header, records))
        + b"PWS3-EOFPWS3-EOF"
        + (mac if mac is not None else _mac(header, records))
    )


@pytest.fixture(scope="module")
def db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "test.psafe3"
    path.write_bytes(_build_db(_header(), RECORDS))
    return path


@pytest.fixture(scope="module")
def db(db_path):
    return open_db(db_path, PASSWORD)


def test_open_db(db):
    assert db.uuid() == DB_UUID
    assert db.name() == "Test database"
    assert db.description() == "For testing purposes only!"
    assert len(db.list()) == 4

    assert db.header.last_saved_at == SAVED_AT
    assert db.header.last_saved_by_what == "Password Safe V3.58"
    assert db.header.last_saved_by_whom == "luke"
    assert db.header.last_saved_on_host == "OWENS-PC"
    assert len(db.header.empty_groups) == 3


def test_open_db_old_timestamp_format(tmp_path):
    old = f"{_seconds(OLD_SAVED_AT):08x}".encode()
    path = tmp_path / "test-3.08.psafe3"
    path.write_bytes(_build_db(_header(saved_at=old), RECORDS[:1]))

    with open_db(path, PASSWORD) as db:
        assert db.header.last_saved_at == OLD_SAVED_AT


def test_open_db_nonexistent(tmp_path):
    with pytest.raises(FileNotFoundError):
        open_db(tmp_path / "nonexistent", PASSWORD)


def test_open_db_bad_hmac(tmp_path):
    path = tmp_path / "test-bad-hmac.psafe3"
    path.write_bytes(_build_db(_header(), RECORDS, mac=bytes(32)))
    with pytest.raises(ValueError, match="authenticate"):
        open_db(path, PASSWORD)


def test_open_db_short_ciphertext(tmp_path):
    data = _build_db(_header(), RECORDS)
    path = tmp_path / "test-short-ciphertext.psafe3"
    path.write_bytes(data[:200] + data[205:])
    with pytest.raises(ValueError, match="ciphertext"):
        open_db(path, PASSWORD)


def test_open_db_wrong_password(db_path):
    with pytest.raises(IncorrectPasswordError):
        open_db(db_path, "secret")


def test_get(db):
    first = db.get(FIRST_ID)
    assert first.id() == FIRST_ID
    assert first.group() == "Finance"
    assert first.name() == "Imperial Crypto Exchange"
    assert first.username() == "lskywalker"
    assert first.password().as_string() == "password"
    assert first.url() == "https://palpatine-coin.example.com/"
    assert first.get("email").as_string() == "[email]"
    assert first.note().as_string() == "This is a note."

    second = db.get(SECOND_ID)
    assert second.group() == "Ūňıćöɗɘ"
    assert second.name() == "トッシェ駅"
    assert second.username() == "ɭṳĸɛ"
    assert second.password().as_string() == "secret"
    assert second.note().as_string() == "?????"


@pytest.mark.parametrize("entry_id", ["", "12345"])
def test_get_missing(db, entry_id):
    assert db.get(entry_id) is None


def test_list_omits_secrets(db):
    entries = db.list()
    assert len(entries) == 4
    for entry in entries:
        assert entry.id()
        assert entry.name()
        assert entry.password().as_string() == ""
        assert entry.note().as_string() == ""


def test_find(db):
    entries = db.find(lambda e: e.username() == "luke")
    assert sorted(e.id() for e in entries) == sorted([THIRD_ID, FOURTH_ID])
    for entry in entries:
        assert entry.name()
        assert entry.password().as_string() == ""
        assert entry.note().as_string() == ""


def test_find_nothing(db):
    assert db.find(lambda e: False) == []


def test_decrypt(db_path):
    dbf = DbFile.from_bytes(db_path.read_bytes())
    assert decrypt(dbf, PASSWORD).description() == "For testing purposes only!"


def test_parse_plaintext():
    header, records = _header(), RECORDS[:2]
    result = parse(_plaintext(header, records), HMAC_KEY, _mac(header, records))
    assert isinstance(result, Database)
    assert result.name() == "Test database"
    assert set(result.entries) == {FIRST_ID, SECOND_ID}


def test_parse_wrong_mac():
    header, records = _header(), RECORDS[:1]
    with pytest.raises(ValueError, match="authenticate"):
        parse(_plaintext(header, records), bytes(32), _mac(header, records))


def test_parse_truncated_header():
    with pytest.raises(ValueError, match="truncated"):
        parse(b"", HMAC_KEY, bytes(32))


def test_malformed_fields_reported_together(tmp_path):
    header = _header() + [(0x01, b"short")]
    records = [[(0x01, b"bad")]]
    path = tmp_path / "malformed.psafe3"
    path.write_bytes(_build_db(header, records))
    with pytest.raises(ExceptionGroup) as info:
        open_db(path, PASSWORD)
    assert len(info.value.exceptions) == 2
    assert all(isinstance(err, ValueError) for err in info.value.exceptions)


def test_close_keeps_data(db_path):
    db = open_db(db_path, PASSWORD)
    db.close()
    assert db.get(FIRST_ID).name() == "Imperial Crypto Exchange"