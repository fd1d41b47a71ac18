"""Encoding and streaming decoding of the RESP wire protocol."""

from __future__ import annotations

import logging
import math
import re
from decimal import Decimal
from typing import Any, Callable

_log = logging.getLogger(__name__)

RESP_NIL = b"$-1\r\n"
RESP_OK = b"+OK\r\n"
RESP_QUEUED = b"+QUEUED\r\n"
RESP_ZERO = b":0\r\n"
RESP_ONE = b":1\r\n"
RESP_MINUS_ONE = b":-1\r\n"
RESP_MINUS_TWO = b":-2\r\n"
RESP_EMPTY_ARRAY = b"*0\r\n"

NIL_STRING = "(nil)"
DEFAULT_BUFFER_SIZE = 512

_CRLF = b"\r\n"
_INT_RE = re.compile(rb"[+-]?[0-9]+")
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1


class RespError(Exception):
    """Malformed RESP data."""


class ConnectionClosedError(RespError):
    """The peer closed the connection without signalling end of stream."""


class CrossProtocolError(RespError):
    """Data that is not RESP, such as an HTTP request sent to the server."""


def _to_text(data: bytes) -> str:
    return data.decode("utf-8", "surrogateescape")


def _to_bytes(text: str) -> bytes:
    return text.encode("utf-8", "surrogateescape")


def _parse_int64(data: bytes) -> int:
    if not _INT_RE.fullmatch(data):
        raise RespError(f"invalid integer: {data!r}")
    value = int(data)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise RespError(f"integer out of range: {data!r}")
    return value


class RespParser:
    """Decode RESP values from a stream.

    ``stream`` needs a ``read(size)`` (or ``read1(size)``) method returning
    up to ``size`` bytes. Raising :class:`EOFError` signals the end of the
    stream; returning no bytes means the connection was closed.
    """

    def __init__(self, stream: Any, initial: bytes = b"", buffer_size: int = DEFAULT_BUFFER_SIZE):
        if buffer_size < 1:
            raise ValueError("buffer_size must be positive")
        self._read: Callable[[int], bytes] = getattr(stream, "read1", None) or stream.read
        self._buf = bytearray(initial)
        self._buffer_size = buffer_size
        self._decoders = {
            ord("+"): self._read_line,
            ord("-"): self._read_line,
            ord(":"): self._read_int,
            ord("$"): self._read_bulk_string,
            ord("*"): self._read_array,
        }

    def decode_one(self) -> Any:
        """Decode and return the next value from the stream."""
        while not (self._buf and _CRLF in self._buf):
            try:
                chunk = self._read(self._buffer_size)
            except EOFError:
                if self._buf:
                    break
                raise
            if not chunk:
                raise ConnectionClosedError("use of closed network connection")
            self._buf += chunk

        marker = self._buf[0]
        del self._buf[0]
        decoder = self._decoders.get(marker)
        if decoder is None:
            _log.warning("possible cross protocol scripting attack detected. dropping the request.")
            raise CrossProtocolError("possible cross protocol scripting attack detected")
        return decoder()

    def decode_multiple(self) -> list:
        """Decode values until the buffered data is used up."""
        values = []
        while True:
            values.append(self.decode_one())
            if not self._buf:
                return values

    def _read_line(self) -> str:
        end = self._buf.find(b"\r")
        if end < 0:
            self._buf.clear()
            raise EOFError("unterminated RESP line")
        line = bytes(self._buf[:end])
        if end + 1 >= len(self._buf):
            self._buf.clear()
            raise EOFError("unterminated RESP line")
        # Skip the '\r' and the byte after it.
        del self._buf[: end + 2]
        return _to_text(line)

    def _read_int(self) -> int:
        return _parse_int64(_to_bytes(self._read_line()))

    def _read_bulk_string(self) -> str:
        length = self._read_int()
        if length == -1:
            return NIL_STRING
        if length < 0:
            raise RespError(f"invalid bulk string length: {length}")

        remaining = length + 2 - len(self._buf)
        while remaining > 0:
            try:
                chunk = self._read(remaining)
            except EOFError:
                return ""
            if not chunk:
                raise ConnectionClosedError("use of closed network connection")
            self._buf += chunk
            remaining -= len(chunk)

        data = bytes(self._buf[:length])
        del self._buf[: length + 2]
        return _to_text(data)

    def _read_array(self) -> list:
        count = self._read_int()
        if count < 0:
            raise RespError(f"invalid array length: {count}")
        return [self.decode_one() for _ in range(count)]


def _format_float(value: float) -> str:
    """Format a float the way the server prints numbers in replies."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    sign = "-" if math.copysign(1.0, value) < 0 else ""
    if value == 0:
        return sign + "0"

    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(map(str, digit_tuple))
    point = len(digits) + exponent
    exp = point - 1

    if exp < -4 or exp >= 6:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        exp_sign = "-" if exp < 0 else "+"
        return f"{sign}{mantissa}e{exp_sign}{abs(exp):02d}"
    if point <= 0:
        return f"{sign}0.{'0' * -point}{digits}"
    if point >= len(digits):
        return sign + digits + "0" * (point - len(digits))
    return f"{sign}{digits[:point]}.{digits[point:]}"


def encode(value: Any, is_simple: bool = False) -> bytes:
    """Encode ``value`` as RESP.

    Strings become bulk strings, or simple strings when ``is_simple`` is set;
    numbers become integers, exceptions errors, and lists or tuples arrays.
    Anything else encodes as the nil reply.
    """
    if isinstance(value, str):
        data = _to_bytes(value)
        if is_simple:
            return b"+" + data + _CRLF
        return b"$%d\r\n" % len(data) + data + _CRLF
    if isinstance(value, bool):
        return RESP_NIL
    if isinstance(value, int):
        return b":%d\r\n" % value
    if isinstance(value, float):
        return b":" + _format_float(value).encode("ascii") + _CRLF
    if isinstance(value, BaseException):
        return b"-" + _to_bytes(str(value)) + _CRLF
    if isinstance(value, (list, tuple)):
        body = b"".join(encode(elem, False) for elem in value)
        return b"*%d\r\n" % len(value) + body
    return RESP_NIL