import pytest

from notpass.formats import Format, guess_format
from notpass.mac import v1v2_mac

PASSWORD = "password"
RND = bytes.fromhex("859f894709ddc59e")


def _write(tmp_path, name, data):
    path = tmp_path / name
    path.write_bytes(data)
    return path


def test_guessed_format_numbers(tmp_path):
    v3 = _write(tmp_path, "a.psafe3", b"PWS3" + bytes(200))
    v1 = _write(tmp_path, "b.dat", RND + v1v2_mac(PASSWORD, RND) + bytes(64))
    noise = _write(tmp_path, "c.dat", bytes(range(40)))
    assert guess_format(v3, PASSWORD) == 3
    assert guess_format(v1, PASSWORD) == 1
    assert guess_format(noise, PASSWORD) == 0


def test_nonexistent_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        guess_format(tmp_path / "does-not-exist", PASSWORD)


def test_empty_file(tmp_path):
    path = _write(tmp_path, "empty.dat", b"")
    with pytest.raises(ValueError):
        guess_format(path, PASSWORD)


def test_short_file(tmp_path):
    path = _write(tmp_path, "short.dat", bytes(10))
    with pytest.raises(ValueError, match="too short"):
        guess_format(path, PASSWORD)


def test_v3_file(tmp_path):
    path = _write(tmp_path, "test-v3.psafe3", b"PWS3" + bytes(200))
    assert guess_format(path, PASSWORD) is Format.V3


def test_v3_needs_no_password(tmp_path):
    path = _write(tmp_path, "test-v3.psafe3", b"PWS3" + bytes(200))
    assert guess_format(path, "secret") is Format.V3


def test_v1v2_file(tmp_path):
    path = _write(tmp_path, "test-v1.dat", RND + v1v2_mac(PASSWORD, RND) + bytes(64))
    assert guess_format(path, PASSWORD) is Format.V1V2


def test_v1v2_file_bad_password(tmp_path):
    path = _write(tmp_path, "test-v1.dat", RND + v1v2_mac(PASSWORD, RND) + bytes(64))
    assert guess_format(path, "secret") is Format.UNKNOWN


def test_unrecognised_file(tmp_path):
    path = _write(tmp_path, "noise.dat", bytes(range(40)))
    assert guess_format(path, PASSWORD) is Format.UNKNOWN