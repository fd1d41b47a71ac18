import pytest
from hypothesis import given
from hypothesis import strategies as st

from dicekv.varint import (
    decode_int,
    decode_uint,
    decode_uint_rev,
    encode_int,
    encode_uint,
    encode_uint_rev,
    encoded_uint_size,
)

MAX_UINT64 = (1 << 64) - 1
MIN_INT64 = -(1 << 63)
MAX_INT64 = (1 << 63) - 1


def _wrap_uint64(v):
    return v & MAX_UINT64


def _wrap_int64(v):
    v &= MAX_UINT64
    return v - (1 << 64) if v > MAX_INT64 else v


def _uint_cases():
    cases = [0]
    for i in range(64):
        cases += [_wrap_uint64(1 << i), _wrap_uint64((1 << i) - 1), _wrap_uint64((1 << i) + 1)]
    return cases


def _int_cases():
    cases = [0]
    for i in range(64):
        cases += [
            _wrap_int64(1 << i),
            _wrap_int64((1 << i) - 1),
            _wrap_int64((1 << i) + 1),
            _wrap_int64(-1 << i),
            _wrap_int64(-(1 << i) - 1),
            _wrap_int64(-(1 << i) + 1),
        ]
    return cases


@pytest.mark.parametrize("value", _uint_cases())
def test_uint_round_trip(value):
    assert decode_uint(encode_uint(value)) == value


@pytest.mark.parametrize("value,length", [(0, 1), (127, 1), (128, 2), (129, 2)])
def test_uint_encoded_length(value, length):
    assert len(encode_uint(value)) == length


@pytest.mark.parametrize(
    "value,expected",
    [
        (1, bytes([0b00000001])),
        (2, bytes([0b00000010])),
        (127, bytes([0b01111111])),
        (128, bytes([0b10000000, 0b00000001])),
        (129, bytes([0b10000001, 0b00000001])),
        (130, bytes([0b10000010, 0b00000001])),
        (131, bytes([0b10000011, 0b00000001])),
    ],
)
def test_uint_specific_encodings(value, expected):
    assert encode_uint(value) == expected


@pytest.mark.parametrize("value", _int_cases())
def test_int_round_trip(value):
    assert decode_int(encode_int(value)) == value


@pytest.mark.parametrize("value,length", [(0, 1), (127, 2), (128, 2), (129, 2)])
def test_int_encoded_length(value, length):
    assert len(encode_int(value)) == length


@pytest.mark.parametrize(
    "value,expected",
    [
        (0, bytes([0x00])),
        (1, bytes([0x02])),
        (-1, bytes([0x01])),
        (63, bytes([0x7E])),
        (-64, bytes([0x7F])),
        (64, bytes([0x80, 0x01])),
        (-65, bytes([0x81, 0x01])),
        (127, bytes([0xFE, 0x01])),
        (128, bytes([0x80, 0x02])),
        (-128, bytes([0xFF, 0x01])),
        (-129, bytes([0x81, 0x02])),
    ],
)
def test_int_specific_encodings(value, expected):
    assert encode_int(value) == expected


def test_int64_min_round_trip():
    assert decode_int(encode_int(MIN_INT64)) == MIN_INT64


@pytest.mark.parametrize(
    "value",
    [MAX_INT64 - k for k in range(0, 1000, 97)] + [MIN_INT64 + k for k in range(0, 1000, 97)],
)
def test_int_extremes_round_trip(value):
    assert decode_int(encode_int(value)) == value


def test_uint_max_round_trip():
    encoded = encode_uint(MAX_UINT64)
    assert len(encoded) == 10
    assert decode_uint(encoded) == MAX_UINT64


@given(st.integers(min_value=0, max_value=MAX_UINT64))
def test_uint_round_trip_property(value):
    encoded = encode_uint(value)
    assert decode_uint(encoded) == value
    assert all(b & 0x80 for b in encoded[:-1])
    assert encoded[-1] & 0x80 == 0


@given(st.integers(min_value=MIN_INT64, max_value=MAX_INT64))
def test_int_round_trip_property(value):
    assert decode_int(encode_int(value)) == value


def test_encode_uint_rejects_out_of_range():
    with pytest.raises(ValueError):
        encode_uint(-1)
    with pytest.raises(ValueError):
        encode_uint(1 << 64)


def test_encode_int_rejects_out_of_range():
    with pytest.raises(ValueError):
        encode_int(MAX_INT64 + 1)


@given(st.integers(min_value=0, max_value=MAX_UINT64))
def test_rev_matches_reversed_forward_encoding(value):
    assert encode_uint_rev(value) == bytes(reversed(encode_uint(value)))
    assert decode_uint_rev(encode_uint_rev(value)) == value


@given(st.integers(min_value=0, max_value=(1 << 35) - 1))
def test_rev_round_trip_with_reserved_size(value):
    size = encoded_uint_size(value)
    encoded = encode_uint_rev(value, size)
    assert len(encoded) == size
    assert encoded[0] & 0x80 == 0
    assert decode_uint_rev(encoded) == value


def test_rev_size_too_small_raises():
    with pytest.raises(ValueError):
        encode_uint_rev(1 << 40, encoded_uint_size(1 << 40))


@pytest.mark.parametrize(
    "value,size",
    [
        (0, 1),
        (127, 1),
        (128, 2),
        (16382, 2),
        (16383, 3),
        (2097150, 3),
        (2097151, 4),
        (268435454, 4),
        (268435455, 5),
    ],
)
def test_encoded_uint_size(value, size):
    assert encoded_uint_size(value) == size