"""Key derivation and YubiKey-compatible HMAC-SHA1 responses."""

from __future__ import annotations

import hashlib
import hmac

CREDENTIAL_SIZE = 20
MAX_CHALLENGE_SIZE = 64


class IncorrectPasswordError(ValueError):
    """The password does not produce the stored key hash."""


def derive_key_sha256(
    password: bytes | str, salt: bytes, iterations: int, master_key_hash: bytes
) -> bytes:
    """Stretch ``password`` with iterated SHA-256 and check it against the stored hash."""
    material = password.encode() if isinstance(password, str) else bytes(password)
    key = hashlib.sha256(material + bytes(salt)).digest()
    for _ in range(iterations):
        key = hashlib.sha256(key).digest()

    if hmac.compare_digest(hashlib.sha256(key).digest(), bytes(master_key_hash)):
        return key
    raise IncorrectPasswordError("incorrect password")


def yubi_hmac_sha1(credential: bytes, challenge: bytes) -> bytes:
    """Compute the response a YubiKey slot holding ``credential`` gives to ``challenge``.

    A challenge of the full 64 bytes loses its trailing run of equal bytes, as
    the device treats it as padding; a shorter one loses trailing zero bytes.
    """
    if len(credential) != CREDENTIAL_SIZE:
        raise ValueError(f"expected credential to be exactly {CREDENTIAL_SIZE} bytes")
    if len(challenge) > MAX_CHALLENGE_SIZE:
        raise ValueError(f"expected challenge to be no more than {MAX_CHALLENGE_SIZE} bytes")

    challenge = bytes(challenge)
    if len(challenge) == MAX_CHALLENGE_SIZE or (challenge and challenge[-1] == 0):
        challenge = challenge.rstrip(challenge[-1:])

    return hmac.new(bytes(credential), challenge, hashlib.sha1).digest()