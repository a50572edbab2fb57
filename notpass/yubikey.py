"""YubiKey wire helpers and a software YubiKey for HMAC-SHA1 challenge-response."""

from __future__ import annotations

import hashlib
import hmac
from collections.abc import Mapping
from dataclasses import dataclass

SLOT_DATA_SIZE = 64
MAX_CHALLENGE_LEN = SLOT_DATA_SIZE
CRC_OK_RESIDUAL = 0xF0B8

RESPONSE_TIMEOUT_WAIT_MASK = 0x1F
RESPONSE_TIMEOUT_WAIT_FLAG = 0x20
RESPONSE_PENDING_FLAG = 0x40
SLOT_WRITE_FLAG = 0x80

_HMAC_SLOT_SIZE = 20


def crc16(data: bytes) -> int:
    """Compute the reflected CRC-16 (polynomial 0x8408, initial value 0xffff)."""
    crc = 0xFFFF
    for byte in bytes(data):
        crc ^= byte
        for _ in range(8):
            low_bit = crc & 1
            crc >>= 1
            if low_bit:
                crc ^= 0x8408
    return crc


def verify_crc(data: bytes) -> bool:
    """Return True if ``data`` ends with a checksum that makes it valid."""
    return crc16(data) == CRC_OK_RESIDUAL


@dataclass(frozen=True)
class Frame:
    """A payload addressed to one device slot."""

    payload: bytes = b""
    slot: int = 0

    def to_bytes(self) -> bytes:
        """Return the payload padded to the slot size, then the slot and CRC."""
        payload = bytes(self.payload)
        if len(payload) < SLOT_DATA_SIZE:
            payload += bytes(SLOT_DATA_SIZE - len(payload))
        crc = crc16(payload)
        return payload + bytes((self.slot & 0xFF, crc & 0xFF, (crc >> 8) & 0xFF))


class StatusFlags(int):
    """The status byte that ends every feature report."""

    __slots__ = ()

    def __new__(cls, value: int = 0) -> StatusFlags:
        if not 0 <= value <= 0xFF:
            raise ValueError("status flags must fit in one byte")
        return super().__new__(cls, value)

    def response_pending(self) -> bool:
        return self & RESPONSE_PENDING_FLAG == RESPONSE_PENDING_FLAG

    def slot_write(self) -> bool:
        return self & SLOT_WRITE_FLAG == SLOT_WRITE_FLAG

    def timeout_wait(self) -> int:
        """Return the seconds the device asks to wait, or 0."""
        if self & RESPONSE_TIMEOUT_WAIT_FLAG == RESPONSE_TIMEOUT_WAIT_FLAG:
            return int(self & RESPONSE_TIMEOUT_WAIT_MASK)
        return 0


class EmulatedYubiKey:
    """A software YubiKey whose slots hold HMAC-SHA1 keys."""

    def __init__(self, secrets: Mapping[int, bytes]) -> None:
        slots: dict[int, bytes] = {}
        for slot, slot_key in secrets.items():
            if len(slot_key) != _HMAC_SLOT_SIZE:
                raise ValueError(f"expected secret to be exactly {_HMAC_SLOT_SIZE} bytes")
            slots[slot] = bytes(slot_key)
        self._slots = slots
        self.closed = False

    def challenge_response_hmac_sha1(self, slot: int, challenge: bytes) -> bytes:
        """Return the HMAC-SHA1 of ``challenge`` keyed with the slot's key.

        A full-length challenge loses its trailing run of equal bytes, which a
        device takes as padding; a shorter one loses its trailing zero bytes.
        """
        challenge = bytes(challenge)
        if len(challenge) > MAX_CHALLENGE_LEN:
            raise ValueError(f"expected challenge to be no more than {MAX_CHALLENGE_LEN} bytes")
        if len(challenge) == MAX_CHALLENGE_LEN or (challenge and challenge[-1] == 0):
            challenge = challenge.rstrip(challenge[-1:])
        return hmac.new(self._slots.get(slot, b""), challenge, hashlib.sha1).digest()

    def serial(self) -> str:
        return "000000"

    def device_type(self) -> str:
        return "Emulator"

    def version(self) -> str:
        return "0.0.0"

    def close(self) -> None:
        """Mark the device as closed."""
        self.closed = True

    def __enter__(self) -> EmulatedYubiKey:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()