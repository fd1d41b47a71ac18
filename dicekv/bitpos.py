"""The BITPOS command: find the first set or clear bit in a value."""

from __future__ import annotations

import re
from typing import Any

from .bitmap import ByteArray
from .errors import INT_OR_OUT_OF_RANGE_ERR, SYNTAX_ERR, new_err_arity, new_err_with_message
from .resp import encode

BYTE = "BYTE"
BIT = "BIT"

AND = "AND"
OR = "OR"
XOR = "XOR"
NOT = "NOT"

EX = "EX"
PX = "PX"
PXAT = "PXAT"
EXAT = "EXAT"
XX = "XX"
NX = "NX"
GT = "GT"
LT = "LT"
KEEPTTL = "KEEPTTL"
SYNC = "SYNC"
ASYNC = "ASYNC"
HELP = "HELP"
MEMORY = "MEMORY"
COUNT = "COUNT"
GETKEYS = "GETKEYS"
LIST = "LIST"
NULL = "null"

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1


def _atoi(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(INT_OR_OUT_OF_RANGE_ERR)
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(INT_OR_OUT_OF_RANGE_ERR)
    return value


def parse_bit_to_find(arg: str) -> int:
    """Parse the bit argument, which must be 0 or 1."""
    value = _atoi(arg)
    if value not in (0, 1):
        raise ValueError("The bit argument must be 1 or 0")
    return value


def parse_optional_params(args: list[str], byte_len: int) -> tuple[int, int, str, bool]:
    """Parse ``[start [end [BYTE|BIT]]]``.

    Returns ``(start, end, range_type, end_range_provided)``.
    """
    start, end, range_type = 0, byte_len - 1, BYTE
    end_range_provided = False
    if len(args) > 0:
        start = _atoi(args[0])
    if len(args) > 1:
        end = _atoi(args[1])
        end_range_provided = True
    if len(args) > 2:
        range_type = args[2].upper()
        if range_type not in (BYTE, BIT):
            raise ValueError(SYNTAX_ERR)
    return start, end, range_type, end_range_provided


def adjust_search_range(start: int, end: int, byte_len: int) -> tuple[int, int]:
    """Resolve negative indices and clamp the range to the data."""
    if start < 0:
        start += byte_len
    if end < 0:
        end += byte_len
    return max(0, start), min(byte_len - 1, end)


def _find_in_bytes(data: bytes, bit: int, start: int, end: int) -> int:
    skip = 0x00 if bit == 1 else 0xFF
    for index, byte in enumerate(data[start : end + 1], start):
        if byte == skip:
            continue
        for offset in range(8):
            if (byte >> (7 - offset)) & 1 == bit:
                return index * 8 + offset
    return -1


def _find_in_bits(data: bytes, bit: int, start: int, end: int) -> int:
    return next(
        (pos for pos in range(start, end + 1) if (data[pos >> 3] >> (7 - (pos & 7))) & 1 == bit),
        -1,
    )


def get_bit_pos(
    data: bytes,
    bit_to_find: int,
    start: int,
    end: int,
    range_type: str,
    end_range_provided: bool,
) -> int:
    """Return the position of the first ``bit_to_find`` bit in the range, or -1."""
    byte_len = len(data)
    bit_len = byte_len * 8
    if range_type == BIT and start > bit_len:
        return -1

    start, end = adjust_search_range(start, end, byte_len)
    if start > end or start >= byte_len:
        return -1

    if range_type == BYTE:
        result = _find_in_bytes(data, bit_to_find, start, end)
    else:
        result = _find_in_bits(data, bit_to_find, start * 8, min(end * 8 + 7, bit_len - 1))

    # A clear bit past the end of the value counts when no end was given.
    if bit_to_find == 0 and result == -1 and not end_range_provided:
        return bit_len
    return result


def _as_bytes(value: Any) -> bytes:
    if isinstance(value, ByteArray):
        return bytes(value.data)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8", "surrogateescape")
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value).encode("ascii")
    raise TypeError("ERR unsopported type")


def eval_bitpos(args: list[str], value: Any) -> bytes:
    """Evaluate ``BITPOS key bit [start [end [BYTE|BIT]]]`` against ``value``.

    ``value`` is what the key holds, or None when the key does not exist.
    Returns the RESP-encoded reply.
    """
    if not 2 <= len(args) <= 5:
        return new_err_arity("BITPOS")

    try:
        bit_to_find = parse_bit_to_find(args[1])
    except ValueError as exc:
        return new_err_with_message(str(exc))

    if value is None:
        return encode(0 if bit_to_find == 0 else -1, True)

    try:
        data = _as_bytes(value)
        start, end, range_type, end_range_provided = parse_optional_params(args[2:], len(data))
    except (TypeError, ValueError) as exc:
        return new_err_with_message(str(exc))

    return encode(get_bit_pos(data, bit_to_find, start, end, range_type, end_range_provided), True)