"""The Twofish block cipher and the ECB and CBC decryption modes."""

from __future__ import annotations

import struct
from collections.abc import Iterator, Sequence

BLOCK_SIZE = 16

_MASK = 0xFFFFFFFF
_MDS_POLYNOMIAL = 0x169  # x^8 + x^6 + x^5 + x^3 + 1
_RS_POLYNOMIAL = 0x14D  # x^8 + x^6 + x^3 + x^2 + 1

_MDS = (
    (0x01, 0xEF, 0x5B, 0x5B),
    (0x5B, 0xEF, 0xEF, 0x01),
    (0xEF, 0x5B, 0x01, 0xEF),
    (0xEF, 0x01, 0xEF, 0x5B),
)

_RS = (
    (0x01, 0xA4, 0x55, 0x87, 0x5A, 0x58, 0xDB, 0x9E),
    (0xA4, 0x56, 0x82, 0xF3, 0x1E, 0xC6, 0x68, 0xE5),
    (0x02, 0xA1, 0xFC, 0xC1, 0x47, 0xAE, 0x3D, 0x19),
    (0xA4, 0x55, 0x87, 0x5A, 0x58, 0xDB, 0x9E, 0x03),
)


def _gf_mult(a: int, b: int, polynomial: int) -> int:
    result = 0
    while b:
        if b & 1:
            result ^= a
        a <<= 1
        if a & 0x100:
            a ^= polynomial
        b >>= 1
    return result


def _build_q(t0: Sequence[int], t1: Sequence[int], t2: Sequence[int], t3: Sequence[int]) -> bytes:
    def ror4(x: int) -> int:
        return ((x >> 1) | (x << 3)) & 0xF

    table = bytearray()
    for x in range(256):
        a0, b0 = x >> 4, x & 0xF
        a1 = a0 ^ b0
        b1 = a0 ^ ror4(b0) ^ ((8 * a0) & 0xF)
        a2, b2 = t0[a1], t1[b1]
        a3 = a2 ^ b2
        b3 = a2 ^ ror4(b2) ^ ((8 * a2) & 0xF)
        a4, b4 = t2[a3], t3[b3]
        table.append((b4 << 4) | a4)
    return bytes(table)


_Q0 = _build_q(
    (0x8, 0x1, 0x7, 0xD, 0x6, 0xF, 0x3, 0x2, 0x0, 0xB, 0x5, 0x9, 0xE, 0xC, 0xA, 0x4),
    (0xE, 0xC, 0xB, 0x8, 0x1, 0x2, 0x3, 0x5, 0xF, 0x4, 0xA, 0x6, 0x7, 0x0, 0x9, 0xD),
    (0xB, 0xA, 0x5, 0xE, 0x6, 0xD, 0x9, 0x0, 0xC, 0x8, 0xF, 0x3, 0x2, 0x4, 0x7, 0x1),
    (0xD, 0x7, 0xF, 0x4, 0x1, 0x2, 0x6, 0xE, 0x9, 0xB, 0x3, 0x0, 0x8, 0x5, 0xC, 0xA),
)
_Q1 = _build_q(
    (0x2, 0x8, 0xB, 0xD, 0xF, 0x7, 0x6, 0xE, 0x3, 0x1, 0x9, 0x4, 0x0, 0xA, 0xC, 0x5),
    (0x1, 0xE, 0x2, 0xB, 0x4, 0xC, 0x3, 0x7, 0x6, 0xD, 0xA, 0x5, 0xF, 0x9, 0x0, 0x8),
    (0x4, 0xC, 0x7, 0x5, 0x1, 0x6, 0x9, 0xA, 0x0, 0xE, 0xD, 0x8, 0x2, 0xB, 0x3, 0xF),
    (0xB, 0x9, 0x5, 0x1, 0xC, 0x3, 0xD, 0xE, 0x6, 0x4, 0x7, 0xF, 0x2, 0x0, 0x8, 0xA),
)

# Permutations applied to each of the four byte positions, by stage.
_STAGE4 = (_Q1, _Q0, _Q0, _Q1)
_STAGE3 = (_Q1, _Q1, _Q0, _Q0)
_INNER = (_Q0, _Q1, _Q0, _Q1)
_MIDDLE = (_Q0, _Q0, _Q1, _Q1)
_OUTER = (_Q1, _Q0, _Q1, _Q0)

_MDS_COLUMNS = tuple(
    tuple(
        sum(_gf_mult(row[column], y, _MDS_POLYNOMIAL) << (8 * i) for i, row in enumerate(_MDS))
        for y in range(256)
    )
    for column in range(4)
)


def _rol(x: int, n: int) -> int:
    return ((x << n) | (x >> (32 - n))) & _MASK


def _ror(x: int, n: int) -> int:
    return ((x >> n) | (x << (32 - n))) & _MASK


def _q_chain(position: int, y: int, words: Sequence[bytes]) -> int:
    if len(words) == 4:
        y = _STAGE4[position][y] ^ words[3][position]
    if len(words) >= 3:
        y = _STAGE3[position][y] ^ words[2][position]
    y = _INNER[position][y] ^ words[1][position]
    y = _MIDDLE[position][y] ^ words[0][position]
    return _OUTER[position][y]


def _h(x: bytes, words: Sequence[bytes]) -> int:
    result = 0
    for position, value in enumerate(x):
        result ^= _MDS_COLUMNS[position][_q_chain(position, value, words)]
    return result


def _rs_word(chunk: bytes) -> bytes:
    out = bytearray()
    for row in _RS:
        value = 0
        for coefficient, byte in zip(row, chunk):
            value ^= _gf_mult(coefficient, byte, _RS_POLYNOMIAL)
        out.append(value)
    return bytes(out)


def _xor(a: bytes, b: bytes) -> bytes:
    return bytes(x ^ y for x, y in zip(a, b))


def _blocks(data: bytes) -> Iterator[bytes]:
    view = memoryview(data)
    for start in range(0, len(view), BLOCK_SIZE):
        yield bytes(view[start : start + BLOCK_SIZE])


class Twofish:
    """A Twofish cipher keyed with a 128, 192 or 256 bit key."""

    def __init__(self, key: bytes) -> None:
        key = bytes(key)
        if len(key) not in (16, 24, 32):
            raise ValueError(f"invalid Twofish key size: {len(key)} bytes")
        k = len(key) // 8
        words = [key[4 * i : 4 * i + 4] for i in range(2 * k)]
        even, odd = words[0::2], words[1::2]
        s_vector = [_rs_word(key[8 * i : 8 * i + 8]) for i in range(k)][::-1]

        subkeys: list[int] = []
        for i in range(20):
            a = _h(bytes([2 * i] * 4), even)
            b = _rol(_h(bytes([2 * i + 1] * 4), odd), 8)
            subkeys.append((a + b) & _MASK)
            subkeys.append(_rol((a + 2 * b) & _MASK, 9))
        self._k = tuple(subkeys)
        self._s = tuple(
            tuple(_MDS_COLUMNS[position][_q_chain(position, x, s_vector)] for x in range(256))
            for position in range(4)
        )

    def _g(self, x: int) -> int:
        s0, s1, s2, s3 = self._s
        return s0[x & 0xFF] ^ s1[(x >> 8) & 0xFF] ^ s2[(x >> 16) & 0xFF] ^ s3[x >> 24]

    def _round_function(self, r0: int, r1: int, rnd: int) -> tuple[int, int]:
        t0 = self._g(r0)
        t1 = self._g(_rol(r1, 8))
        f0 = (t0 + t1 + self._k[2 * rnd + 8]) & _MASK
        f1 = (t0 + 2 * t1 + self._k[2 * rnd + 9]) & _MASK
        return f0, f1

    @staticmethod
    def _check_block(block: bytes) -> None:
        if len(block) != BLOCK_SIZE:
            raise ValueError(f"invalid block: expected {BLOCK_SIZE} bytes")

    def encrypt_block(self, block: bytes) -> bytes:
        """Encrypt one 16-byte block."""
        self._check_block(block)
        k = self._k
        p0, p1, p2, p3 = struct.unpack("<4I", bytes(block))
        r0, r1, r2, r3 = p0 ^ k[0], p1 ^ k[1], p2 ^ k[2], p3 ^ k[3]
        for rnd in range(16):
            f0, f1 = self._round_function(r0, r1, rnd)
            r2 = _ror(r2 ^ f0, 1)
            r3 = _rol(r3, 1) ^ f1
            r0, r1, r2, r3 = r2, r3, r0, r1
        return struct.pack("<4I", r2 ^ k[4], r3 ^ k[5], r0 ^ k[6], r1 ^ k[7])

    def decrypt_block(self, block: bytes) -> bytes:
        """Decrypt one 16-byte block."""
        self._check_block(block)
        k = self._k
        c0, c1, c2, c3 = struct.unpack("<4I", bytes(block))
        r2, r3, r0, r1 = c0 ^ k[4], c1 ^ k[5], c2 ^ k[6], c3 ^ k[7]
        for rnd in reversed(range(16)):
            r0, r1, r2, r3 = r2, r3, r0, r1
            f0, f1 = self._round_function(r0, r1, rnd)
            r2 = _rol(r2, 1) ^ f0
            r3 = _ror(r3 ^ f1, 1)
        return struct.pack("<4I", r0 ^ k[0], r1 ^ k[1], r2 ^ k[2], r3 ^ k[3])


def decrypt_ecb(key: bytes, ciphertext: bytes) -> bytes:
    """Decrypt ``ciphertext`` block by block in ECB mode."""
    if len(ciphertext) % BLOCK_SIZE != 0:
        raise ValueError(f"invalid ciphertext: expected a multiple of {BLOCK_SIZE}")
    cipher = Twofish(key)
    return b"".join(cipher.decrypt_block(block) for block in _blocks(ciphertext))


def decrypt_cbc(key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
    """Decrypt ``ciphertext`` in CBC mode with the given initialisation vector."""
    if len(iv) != BLOCK_SIZE:
        raise ValueError(f"invalid iv: expected {BLOCK_SIZE} bytes")
    if len(ciphertext) % BLOCK_SIZE != 0:
        raise ValueError(f"invalid ciphertext: expected a multiple of {BLOCK_SIZE}")
    cipher = Twofish(key)
    previous = bytes(iv)
    plaintext = bytearray()
    for block in _blocks(ciphertext):
        plaintext += _xor(cipher.decrypt_block(block), previous)
        previous = block
    return bytes(plaintext)