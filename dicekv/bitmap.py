"""Resizable byte arrays with bit-level access."""

from __future__ import annotations


def popcount(x: int) -> int:
    """Return the number of set bits in the byte ``x``."""
    return (x & 0xFF).bit_count()


def reverse_byte(b: int) -> int:
    """Return the byte ``b`` with the order of its eight bits reversed."""
    return int(f"{b & 0xFF:08b}"[::-1], 2)


class ByteArray:
    """An array of bytes addressed bit by bit.

    Bit 0 is the most significant bit of the first byte, bit 8 the most
    significant bit of the second byte, and so on.
    """

    __slots__ = ("data",)

    def __init__(self, size: int = 0):
        if size < 0:
            raise ValueError("size must not be negative")
        self.data = bytearray(size)

    @property
    def length(self) -> int:
        """Number of bytes held."""
        return len(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"ByteArray({bytes(self.data)!r})"

    @staticmethod
    def _locate(pos: int) -> tuple[int, int]:
        if pos < 0:
            raise IndexError(f"bit position {pos} is negative")
        return pos >> 3, 0x80 >> (pos & 7)

    def set_bit(self, pos: int, value: bool) -> None:
        """Set the bit at ``pos`` to ``value``."""
        index, mask = self._locate(pos)
        if value:
            self.data[index] |= mask
        else:
            self.data[index] &= ~mask & 0xFF

    def get_bit(self, pos: int) -> bool:
        """Return whether the bit at ``pos`` is set."""
        index, mask = self._locate(pos)
        return bool(self.data[index] & mask)

    def bit_count(self) -> int:
        """Return the number of bits set to 1."""
        return sum(map(popcount, self.data))

    def increase_size(self, size: int) -> ByteArray:
        """Grow the array with zero bytes to ``size`` bytes; never shrinks it."""
        if len(self.data) < size:
            self.data.extend(bytes(size - len(self.data)))
        return self

    def resize_if_necessary(self) -> ByteArray:
        """Drop trailing zero bytes."""
        trimmed = self.data.rstrip(b"\x00")
        if len(trimmed) != len(self.data):
            self.data = bytearray(trimmed)
        return self

    def deep_copy(self) -> ByteArray:
        """Return an independent copy."""
        clone = ByteArray()
        clone.data = bytearray(self.data)
        return clone