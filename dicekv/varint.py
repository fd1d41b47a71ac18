"""Variable-length integer encoding (little-endian base-128 varints)."""

from __future__ import annotations

_UINT64_MAX = (1 << 64) - 1
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1

# Nine groups of seven bits plus a final single bit cover all 64 bits.
_BIT_SHIFTS = (7, 7, 7, 7, 7, 7, 7, 7, 7, 1)
_CONTINUATION = 0x80
_PAYLOAD = 0x7F


def _check_uint64(x: int) -> None:
    if not 0 <= x <= _UINT64_MAX:
        raise ValueError(f"value {x} does not fit in an unsigned 64-bit integer")


def _groups(x: int):
    """Yield the bit groups of ``x`` from least to most significant."""
    for shift in _BIT_SHIFTS:
        yield x & ((1 << shift) - 1)
        x >>= shift
        if x == 0:
            return


def encode_uint(x: int) -> bytes:
    """Encode an unsigned 64-bit integer as a little-endian varint."""
    _check_uint64(x)
    out = bytearray(group | _CONTINUATION for group in _groups(x))
    out[-1] &= _PAYLOAD
    return bytes(out)


def decode_uint(data: bytes) -> int:
    """Decode a little-endian varint into an unsigned 64-bit integer."""
    value = 0
    for i, byte in enumerate(data):
        value |= (byte & _PAYLOAD) << (7 * i)
    return value & _UINT64_MAX


def encode_int(x: int) -> bytes:
    """Encode a signed 64-bit integer using zig-zag varint encoding."""
    if not _INT64_MIN <= x <= _INT64_MAX:
        raise ValueError(f"value {x} does not fit in a signed 64-bit integer")
    return encode_uint(((x << 1) ^ (x >> 63)) & _UINT64_MAX)


def decode_int(data: bytes) -> int:
    """Decode a zig-zag varint into a signed 64-bit integer."""
    ux = decode_uint(data)
    return (ux >> 1) ^ -(ux & 1)


def encode_uint_rev(x: int, size: int | None = None) -> bytes:
    """Encode ``x`` as a reversed varint filling ``size`` bytes.

    With the exact size this equals ``encode_uint(x)`` reversed. Unused
    leading bytes stay zero.
    """
    _check_uint64(x)
    groups = list(_groups(x))
    if size is None:
        size = len(groups)
    if len(groups) > size:
        raise ValueError(f"value {x} needs {len(groups)} bytes, only {size} given")
    buf = bytearray(size)
    for i, group in enumerate(groups):
        buf[size - 1 - i] = group | _CONTINUATION
    buf[0] &= _PAYLOAD
    return bytes(buf)


def encoded_uint_size(x: int) -> int:
    """Return the number of bytes reserved for a reversed varint of ``x``."""
    if x <= 127:
        return 1
    if x < 16383:
        return 2
    if x < 2097151:
        return 3
    if x < 268435455:
        return 4
    return 5


def decode_uint_rev(data: bytes) -> int:
    """Decode a varint written by :func:`encode_uint_rev`."""
    value = 0
    for i, byte in enumerate(reversed(data)):
        value |= (byte & _PAYLOAD) << (7 * i)
    return value & _UINT64_MAX