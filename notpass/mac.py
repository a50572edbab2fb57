"""The H(RND) value that authenticates version 1 and 2 databases."""

from __future__ import annotations

import hashlib
import struct

from Crypto.Cipher import Blowfish

RND_SIZE = 8
_ITERATIONS = 1000
_MASK = 0xFFFFFFFF


def _rol(x: int, n: int) -> int:
    return ((x << n) | (x >> (32 - n))) & _MASK


def _sha1_from_zero_state(data: bytes) -> bytes:
    """SHA-1 whose chaining state starts at all zeros instead of the standard IV.

    This matches the digest produced when a finalised SHA-1 context is reused
    without being reinitialised.
    """
    state = [0, 0, 0, 0, 0]
    padded = (
        data + b"\x80" + bytes((55 - len(data)) % 64) + (8 * len(data)).to_bytes(8, "big")
    )
    for start in range(0, len(padded), 64):
        w = list(struct.unpack(">16I", padded[start : start + 64]))
        for i in range(16, 80):
            w.append(_rol(w[i - 3] ^ w[i - 8] ^ w[i - 14] ^ w[i - 16], 1))

        a, b, c, d, e = state
        for i, word in enumerate(w):
            if i < 20:
                f, k = (b & c) | (~b & d), 0x5A827999
            elif i < 40:
                f, k = b ^ c ^ d, 0x6ED9EBA1
            elif i < 60:
                f, k = (b & c) | (b & d) | (c & d), 0x8F1BBCDC
            else:
                f, k = b ^ c ^ d, 0xCA62C1D6
            temp = (_rol(a, 5) + (f & _MASK) + e + k + word) & _MASK
            a, b, c, d, e = temp, a, _rol(b, 30), c, d

        state = [(x + y) & _MASK for x, y in zip(state, (a, b, c, d, e))]
    return struct.pack(">5I", *state)


def _swap_words(block: bytes) -> bytes:
    return block[3::-1] + block[7:3:-1]


def v1v2_mac(passphrase: bytes | str, rnd: bytes) -> bytes:
    """Compute H(RND) from the database passphrase and the 8-byte random nonce."""
    material = passphrase.encode() if isinstance(passphrase, str) else bytes(passphrase)
    rnd = bytes(rnd)
    if len(rnd) != RND_SIZE:
        raise ValueError(f"expected random nonce to be exactly {RND_SIZE} bytes")

    cipher_key = hashlib.sha1(rnd + b"\x00\x00" + material).digest()
    cipher = Blowfish.new(cipher_key, Blowfish.MODE_ECB)

    buf = _swap_words(rnd)
    for _ in range(_ITERATIONS):
        buf = cipher.encrypt(buf)
    buf = _swap_words(buf) + b"\x00\x00"

    return _sha1_from_zero_state(buf)