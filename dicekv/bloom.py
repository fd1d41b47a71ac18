"""Bloom filters and the BFINIT, BFADD, BFEXISTS and BFINFO commands."""

from __future__ import annotations

import copy
import math
import random
import re
from dataclasses import dataclass
from typing import Any, MutableMapping, Optional, Sequence

from .errors import new_err_arity, new_err_with_message
from .murmur import murmur3_64
from .resp import RESP_OK, encode

DEFAULT_ERROR_RATE = 0.01
DEFAULT_CAPACITY = 1024

LN2 = math.log(2)
LN2_POWER = LN2 * LN2

ERR_INVALID_ERROR_RATE_TYPE = "only float values can be provided for error rate"
ERR_INVALID_ERROR_RATE = "invalid error rate value provided"
ERR_INVALID_CAPACITY_TYPE = "only integer values can be provided for capacity"
ERR_INVALID_CAPACITY = "invalid capacity value provided"
ERR_INVALID_KEY = "invalid key: no bloom filter found"
ERR_EMPTY_VALUE = "empty value provided"
ERR_WRONG_TYPE = "WRONGTYPE Operation against a key holding the wrong kind of value"

_UINT64_MAX = (1 << 64) - 1
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?)",
    re.IGNORECASE,
)
_UINT_RE = re.compile(r"[0-9]+")


class BloomError(Exception):
    """A bloom filter command or operation failed."""


def _parse_error_rate(text: str) -> float:
    if not _FLOAT_RE.fullmatch(text):
        raise BloomError(ERR_INVALID_ERROR_RATE_TYPE)
    value = float(text)
    if math.isinf(value) and "inf" not in text.lower():
        raise BloomError(ERR_INVALID_ERROR_RATE_TYPE)
    if not 0 < value < 1.0:
        raise BloomError(ERR_INVALID_ERROR_RATE)
    return value


def _parse_capacity(text: str) -> int:
    if not _UINT_RE.fullmatch(text):
        raise BloomError(ERR_INVALID_CAPACITY_TYPE)
    value = int(text)
    if value > _UINT64_MAX:
        raise BloomError(ERR_INVALID_CAPACITY_TYPE)
    if value < 1:
        raise BloomError(ERR_INVALID_CAPACITY)
    return value


@dataclass(frozen=True)
class BloomOptions:
    """User-chosen parameters of a bloom filter."""

    error_rate: float = DEFAULT_ERROR_RATE
    capacity: int = DEFAULT_CAPACITY

    @classmethod
    def from_args(cls, args: Sequence[str], use_defaults: bool = False) -> BloomOptions:
        """Build options from ``[error_rate, capacity]``, or the defaults."""
        if use_defaults:
            return cls()
        if len(args) < 2:
            raise BloomError("error rate and capacity are required")
        return cls(_parse_error_rate(args[0]), _parse_capacity(args[1]))


def set_bit(buf: bytearray, index: int) -> None:
    """Set bit ``index`` of ``buf``; indexes past the end are ignored."""
    byte, offset = divmod(index, 8)
    if byte < len(buf):
        buf[byte] |= 0x80 >> offset


def is_bit_set(buf, index: int) -> bool:
    """Return whether bit ``index`` of ``buf`` is set; False past the end."""
    byte, offset = divmod(index, 8)
    if byte >= len(buf):
        return False
    return bool(buf[byte] & (0x80 >> offset))


class BloomFilter:
    """A bloom filter sized from its options, hashed with seeded murmur3."""

    def __init__(self, opts: BloomOptions, rng: Optional[random.Random] = None):
        rng = rng or random.Random()
        self.opts = opts
        self.bpe = -math.log(opts.error_rate) / LN2_POWER
        hash_count = math.ceil(LN2 * self.bpe)
        self.seeds = tuple(rng.getrandbits(64) for _ in range(hash_count))
        bits = math.ceil(float(hash_count) * opts.capacity / LN2)
        byte_count = -(-bits // 8)
        self.bits = byte_count * 8
        self.bitset = bytearray(byte_count)

    @property
    def hash_count(self) -> int:
        """Number of hash functions used."""
        return len(self.seeds)

    def _indexes(self, value: str) -> list[int]:
        data = value.encode("utf-8", "surrogateescape")
        return [murmur3_64(data, seed) % self.bits for seed in self.seeds]

    def add(self, value: str) -> int:
        """Add ``value``; return 1 if any bit was newly set, else 0."""
        if value == "":
            raise BloomError(ERR_EMPTY_VALUE)
        already_set = 0
        for index in self._indexes(value):
            if is_bit_set(self.bitset, index):
                already_set += 1
            else:
                set_bit(self.bitset, index)
        return 0 if already_set == self.hash_count else 1

    def exists(self, value: str) -> int:
        """Return 0 if ``value`` is surely absent, 1 if it may be present."""
        if value == "":
            raise BloomError(ERR_EMPTY_VALUE)
        return int(all(is_bit_set(self.bitset, index) for index in self._indexes(value)))

    def info(self, name: str = "") -> str:
        """Describe the filter's parameters."""
        prefix = f"name: {name}, " if name else ""
        return (
            f"{prefix}error rate: {self.opts.error_rate:.6f}, "
            f"capacity: {self.opts.capacity}, "
            f"total bits reserved: {self.bits}, "
            f"bits per element: {self.bpe:.6f}, "
            f"hash functions: {self.hash_count}"
        )

    def deep_copy(self) -> BloomFilter:
        """Return a copy with its own bitset and the same hash functions."""
        clone = copy.copy(self)
        clone.bitset = bytearray(self.bitset)
        return clone


def get_or_create_bloom_filter(
    key: str, opts: Optional[BloomOptions], store: MutableMapping[str, Any]
) -> BloomFilter:
    """Return the filter under ``key``, creating it from ``opts`` if missing."""
    value = store.get(key)
    if value is None:
        if opts is None:
            raise BloomError(ERR_INVALID_KEY)
        value = BloomFilter(opts)
        store[key] = value
    if not isinstance(value, BloomFilter):
        raise BloomError(ERR_WRONG_TYPE)
    return value


def _failure(exc: Exception, command: str) -> bytes:
    return new_err_with_message(f"{exc} for '{command}' command")


def bf_init(args: Sequence[str], store: MutableMapping[str, Any]) -> bytes:
    """BFINIT key [error_rate capacity]."""
    if len(args) not in (1, 3):
        return new_err_arity("BFINIT")
    try:
        opts = BloomOptions.from_args(args[1:], len(args) == 1)
        get_or_create_bloom_filter(args[0], opts, store)
    except BloomError as exc:
        return _failure(exc, "BFINIT")
    return RESP_OK


def bf_add(args: Sequence[str], store: MutableMapping[str, Any]) -> bytes:
    """BFADD key value, creating a default filter when the key is missing."""
    if len(args) != 2:
        return new_err_arity("BFADD")
    try:
        bloom = get_or_create_bloom_filter(args[0], BloomOptions(), store)
        return encode(bloom.add(args[1]), False)
    except BloomError as exc:
        return _failure(exc, "BFADD")


def bf_exists(args: Sequence[str], store: MutableMapping[str, Any]) -> bytes:
    """BFEXISTS key value."""
    if len(args) != 2:
        return new_err_arity("BFEXISTS")
    try:
        bloom = get_or_create_bloom_filter(args[0], None, store)
        return encode(bloom.exists(args[1]), False)
    except BloomError as exc:
        return _failure(exc, "BFEXISTS")


def bf_info(args: Sequence[str], store: MutableMapping[str, Any]) -> bytes:
    """BFINFO key."""
    if len(args) != 1:
        return new_err_arity("BFINFO")
    try:
        bloom = get_or_create_bloom_filter(args[0], None, store)
    except BloomError as exc:
        return _failure(exc, "BFINFO")
    return encode(bloom.info(args[0]), False)