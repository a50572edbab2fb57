"""Opening password databases and deriving passwords with a YubiKey."""

from __future__ import annotations

from os import PathLike

from .database import Database, open_db
from .formats import Format, guess_format
from .yubikey import MAX_CHALLENGE_LEN, EmulatedYubiKey

_YUBIKEY_SLOT = 2


def open_vault(db_file: str | PathLike[str], password: str) -> Database:
    """Open the database at ``db_file``; only version 3 files are supported."""
    if guess_format(db_file, password) is Format.V3:
        return open_db(db_file, password)
    raise ValueError(
        "unsupported PasswordSafe database format (only v3 databases are supported)"
    )


def password_from_emulated_yubikey(credential: bytes, user_password: str) -> str:
    """Return the database password a YubiKey holding ``credential`` would yield."""
    challenge = encode_challenge(user_password)
    with EmulatedYubiKey({_YUBIKEY_SLOT: credential}) as key:
        return key.challenge_response_hmac_sha1(_YUBIKEY_SLOT, challenge).hex()


def encode_challenge(challenge: str) -> bytes:
    """Encode text as UTF-16LE, cut to the longest challenge a YubiKey takes."""
    return challenge.encode("utf-16-le")[:MAX_CHALLENGE_LEN]