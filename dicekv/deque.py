"""Double-ended queues of strings stored as compactly encoded entries.

Each entry is laid out as ``[encoding + data + backlen]`` where ``backlen``
is a reversed varint of the size of ``encoding + data``, so entries can be
walked from either end.
"""

from __future__ import annotations

import re
from typing import Optional

from . import varint
from .bytelist import ByteList, ByteListNode

MIN_NODE_SIZE = 256

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_MAX_INT_TEXT_LEN = 21
_BAD_ENCODING_BASE = 12345678900000000

_INT_RE = re.compile(r"[+-]?[0-9]+")

# (lowest, highest, tag byte, payload bytes) for the wider integer encodings.
_INT_WIDTHS = (
    (-32768, 32767, 0xF1, 2),
    (-8388608, 8388607, 0xF2, 3),
    (-2147483648, 2147483647, 0xF3, 4),
    (_INT64_MIN, _INT64_MAX, 0xF4, 8),
)
_INT_TAGS = {tag: width for _, _, tag, width in _INT_WIDTHS}


class DequeEmptyError(IndexError):
    """Raised when popping from an empty deque."""

    def __init__(self, message: str = "deque is empty"):
        super().__init__(message)


def _to_bytes(text: str) -> bytes:
    return text.encode("utf-8", "surrogateescape")


def _to_text(data) -> str:
    return bytes(data).decode("utf-8", "surrogateescape")


def _parse_int64(text: str) -> Optional[int]:
    """Parse a base-10 signed 64-bit integer, or return None."""
    if not _INT_RE.fullmatch(text):
        return None
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return None
    return value


def _as_integer(x: str) -> Optional[int]:
    if len(_to_bytes(x)) >= _MAX_INT_TEXT_LEN:
        return None
    return _parse_int64(x)


def _str_header(length: int) -> bytes:
    if length <= 63:
        return bytes([0x80 | length])
    if length <= 4095:
        return bytes([0xE0 | (length >> 8), length & 0xFF])
    if length > 0xFFFFFFFF:
        raise ValueError(f"string of {length} bytes is too long to encode")
    return b"\xf0" + length.to_bytes(4, "little")


def encode_entry(x: str) -> bytes:
    """Encode ``x`` as an integer entry if it is a short integer, else as a string."""
    value = _as_integer(x)
    if value is None:
        return encode_str(x)
    return encode_int(value)


def encode_str(x: str) -> bytes:
    """Encode ``x`` as a string entry."""
    data = _to_bytes(x)
    header = _str_header(len(data))
    backlen = len(header) + len(data)
    return header + data + varint.encode_uint_rev(backlen, varint.encoded_uint_size(backlen))


def encode_int(v: int) -> bytes:
    """Encode the signed 64-bit integer ``v`` as an integer entry."""
    if 0 <= v <= 127:
        body = bytes([v])
    elif -4096 <= v <= 4095:
        u = v & 0x1FFF
        body = bytes([0xC0 | (u >> 8), u & 0xFF])
    else:
        for low, high, tag, width in _INT_WIDTHS:
            if low <= v <= high:
                body = bytes([tag]) + v.to_bytes(width, "little", signed=True)
                break
        else:
            raise ValueError(f"value {v} does not fit in a signed 64-bit integer")
    return body + bytes([len(body)])


def encoded_entry_size(x: str) -> int:
    """Return the number of bytes :func:`encode_entry` produces for ``x``."""
    value = _as_integer(x)
    if value is None:
        return encoded_str_size(x)
    return encoded_int_size(value)


def encoded_str_size(x: str) -> int:
    """Return the number of bytes :func:`encode_str` produces for ``x``."""
    length = len(_to_bytes(x))
    if length <= 63:
        header = 1
    elif length <= 4095:
        header = 2
    else:
        header = 5
    return header + length + varint.encoded_uint_size(header + length)


def encoded_int_size(v: int) -> int:
    """Return the number of bytes :func:`encode_int` produces for ``v``."""
    if 0 <= v <= 127:
        return 2
    if -4096 <= v <= 4095:
        return 3
    for low, high, _, width in _INT_WIDTHS:
        if low <= v <= high:
            return width + 2
    raise ValueError(f"value {v} does not fit in a signed 64-bit integer")


def _decode_str(data, header: int, length: int) -> tuple[str, int]:
    backlen_size = varint.encoded_uint_size(header + length)
    return _to_text(data[header : header + length]), header + length + backlen_size


def decode_entry(data) -> tuple[str, int]:
    """Decode the entry at the start of ``data``.

    Returns the value and the full length of the entry. An unknown encoding
    byte yields a recognisable marker value and a length of zero.
    """
    first = data[0]
    if first & 0x80 == 0:
        value, bits, entry_len = first & 0x7F, 8, 2
    elif first & 0xE0 == 0xC0:
        value, bits, entry_len = ((first & 0x1F) << 8) | data[1], 13, 3
    elif first in _INT_TAGS:
        width = _INT_TAGS[first]
        value = int.from_bytes(bytes(data[1 : 1 + width]), "little")
        bits, entry_len = 8 * width, width + 2
    elif first & 0xC0 == 0x80:
        return _decode_str(data, 1, first & 0x3F)
    elif first & 0xF0 == 0xE0:
        return _decode_str(data, 2, ((first & 0x0F) << 8) | data[1])
    elif first == 0xF0:
        return _decode_str(data, 5, int.from_bytes(bytes(data[1:5]), "little"))
    else:
        value, bits, entry_len = _BAD_ENCODING_BASE + first, 64, 0

    if value & (1 << (bits - 1)):
        value -= 1 << bits
    return str(value), entry_len


def _last_entry(buf: bytearray) -> tuple[str, int]:
    """Decode the last entry in ``buf``; return it and where it starts."""
    idx = len(buf) - 1
    while buf[idx] & 0x80:
        idx -= 1
    backlen = varint.decode_uint_rev(bytes(buf[idx:]))
    start = idx - backlen
    value, _ = decode_entry(buf[start:idx])
    return value, start


class BasicDeque:
    """A deque keeping all entries in a single contiguous buffer."""

    def __init__(self):
        self._buf = bytearray()
        self._length = 0

    def lpush(self, x: str) -> None:
        """Push ``x`` onto the left end."""
        self._buf[0:0] = encode_entry(x)
        self._length += 1

    def rpush(self, x: str) -> None:
        """Push ``x`` onto the right end."""
        self._buf += encode_entry(x)
        self._length += 1

    def lpop(self) -> str:
        """Remove and return the leftmost value."""
        if not self._length:
            raise DequeEmptyError()
        value, entry_len = decode_entry(self._buf)
        del self._buf[:entry_len]
        self._length -= 1
        return value

    def rpop(self) -> str:
        """Remove and return the rightmost value."""
        if not self._length:
            raise DequeEmptyError()
        value, start = _last_entry(self._buf)
        del self._buf[start:]
        self._length -= 1
        return value

    def __len__(self) -> int:
        return self._length


class Deque:
    """A deque storing entries in a linked list of fixed-size buffers.

    The head buffer is filled from its right end, so ``_left`` marks where
    its first entry begins.
    """

    def __init__(self):
        self._list = ByteList(MIN_NODE_SIZE)
        self._length = 0
        self._left = 0

    def _new_node(self, entry_size: int) -> ByteListNode:
        if entry_size > MIN_NODE_SIZE:
            return self._list.new_node_with_capacity(entry_size)
        return self._list.new_node()

    def lpush(self, x: str) -> None:
        """Push ``x`` onto the left end."""
        entry = encode_entry(x)
        size = len(entry)
        head = self._list.head

        if self._left >= size:
            self._left -= size
            head.buf[self._left : self._left + size] = entry
        elif self._left > 0:
            head.buf = bytearray(entry) + head.buf[self._left :]
            head.capacity = max(size + MIN_NODE_SIZE - self._left, len(head.buf))
            self._left = 0
        else:
            head = self._new_node(size)
            self._list.prepend(head)
            head.buf = bytearray(head.capacity)
            self._left = head.capacity - size
            head.buf[self._left :] = entry

        self._length += 1

    def rpush(self, x: str) -> None:
        """Push ``x`` onto the right end."""
        entry = encode_entry(x)
        size = len(entry)
        tail = self._list.tail

        if tail is None or len(tail.buf) >= tail.capacity:
            tail = self._new_node(size)
            self._list.append(tail)
            tail.buf = bytearray(entry)
        elif tail.capacity - len(tail.buf) < size:
            tail.buf += entry
            tail.capacity = len(tail.buf)
        else:
            tail.buf += entry

        self._length += 1

    def lpop(self) -> str:
        """Remove and return the leftmost value."""
        if not self._length:
            raise DequeEmptyError()

        head = self._list.head
        value, entry_len = decode_entry(head.buf[self._left :])
        self._left += entry_len
        if self._left == len(head.buf):
            self._list.delete(head)
            self._left = 0
        self._length -= 1
        return value

    def rpop(self) -> str:
        """Remove and return the rightmost value."""
        if not self._length:
            raise DequeEmptyError()

        tail = self._list.tail
        value, start = _last_entry(tail.buf)
        del tail.buf[start:]
        if not tail.buf:
            self._list.delete(tail)
            if self._list.tail is None:
                self._left = 0
        self._length -= 1
        return value

    def __len__(self) -> int:
        return self._length