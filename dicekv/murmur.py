"""MurmurHash3 (x64, 128-bit variant) reduced to its first 64-bit half."""

from __future__ import annotations

import struct

_MASK = (1 << 64) - 1
_C1 = 0x87C37B91114253D5
_C2 = 0x4CF5AD432745937F
_BLOCK = 16
_BLOCKS = struct.Struct("<QQ")


def _rotl(x: int, r: int) -> int:
    return ((x << r) | (x >> (64 - r))) & _MASK


def _fmix(k: int) -> int:
    k ^= k >> 33
    k = (k * 0xFF51AFD7ED558CCD) & _MASK
    k ^= k >> 33
    k = (k * 0xC4CEB9FE1A85EC53) & _MASK
    k ^= k >> 33
    return k


def _scramble_k1(k1: int) -> int:
    k1 = (k1 * _C1) & _MASK
    k1 = _rotl(k1, 31)
    return (k1 * _C2) & _MASK


def _scramble_k2(k2: int) -> int:
    k2 = (k2 * _C2) & _MASK
    k2 = _rotl(k2, 33)
    return (k2 * _C1) & _MASK


def _mix_block(h1: int, h2: int, k1: int, k2: int) -> tuple[int, int]:
    h1 ^= _scramble_k1(k1)
    h1 = _rotl(h1, 27)
    h1 = (h1 + h2) & _MASK
    h1 = (h1 * 5 + 0x52DCE729) & _MASK

    h2 ^= _scramble_k2(k2)
    h2 = _rotl(h2, 31)
    h2 = (h2 + h1) & _MASK
    h2 = (h2 * 5 + 0x38495AB5) & _MASK
    return h1, h2


class Murmur3Hash64:
    """Incremental MurmurHash3 x64-128 hasher whose sum is the first 64 bits.

    Both internal lanes start from ``seed``.
    """

    def __init__(self, seed: int = 0):
        self.seed = seed & _MASK
        self.reset()

    def reset(self) -> None:
        """Forget everything written so far."""
        self._h1 = self.seed
        self._h2 = self.seed
        self._tail = b""
        self._length = 0

    def write(self, data) -> int:
        """Feed ``data`` into the hash; return the number of bytes taken."""
        data = bytes(data)
        self._length += len(data)
        buf = self._tail + data
        full = len(buf) - len(buf) % _BLOCK
        h1, h2 = self._h1, self._h2
        for k1, k2 in _BLOCKS.iter_unpack(buf[:full]):
            h1, h2 = _mix_block(h1, h2, k1, k2)
        self._h1, self._h2 = h1, h2
        self._tail = buf[full:]
        return len(data)

    def sum64(self) -> int:
        """Return the hash of the data written so far."""
        h1, h2 = self._h1, self._h2
        tail = self._tail
        if len(tail) > 8:
            h2 ^= _scramble_k2(int.from_bytes(tail[8:], "little"))
        if tail:
            h1 ^= _scramble_k1(int.from_bytes(tail[:8], "little"))

        length = self._length & _MASK
        h1 ^= length
        h2 ^= length
        h1 = (h1 + h2) & _MASK
        h2 = (h2 + h1) & _MASK
        h1 = _fmix(h1)
        h2 = _fmix(h2)
        h1 = (h1 + h2) & _MASK
        return h1


def murmur3_64(data, seed: int = 0) -> int:
    """Return the 64-bit MurmurHash3 of ``data`` with ``seed``."""
    hasher = Murmur3Hash64(seed)
    hasher.write(data)
    return hasher.sum64()