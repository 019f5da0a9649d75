import pytest

from iavl.encoding import (
    DecodeError,
    decode_bytes,
    decode_uvarint,
    decode_varint,
    encode_32bytes_hash,
    encode_bytes,
    encode_bytes_size,
    encode_uvarint,
    encode_uvarint_size,
    encode_varint,
    encode_varint_size,
)

MAX_INT32 = 2**31 - 1
MAX_UINT32 = 2**32 - 1
MAX_INT64 = 2**63 - 1
MIN_INT64 = -(2**63)
MAX_UINT64 = 2**64 - 1

BZ = bytes([0, 1, 2, 3, 4, 5, 6, 7])

DECODE_CASES = {
    "full": (BZ, 8, False),
    "empty": (BZ, 0, False),
    "partial": (BZ, 3, False),
    "out of bounds": (BZ, 9, True),
    "empty input": (b"", 0, False),
    "empty input out of bounds": (b"", 1, True),
    "max int32": (BZ, MAX_INT32, True),
    "max int32 -1": (BZ, MAX_INT32 - 1, True),
    "max int32 -10": (BZ, MAX_INT32 - 10, True),
    "max int32 +1": (BZ, MAX_INT32 + 1, True),
    "max int32 +10": (BZ, MAX_INT32 + 10, True),
    "max int32*2": (BZ, MAX_INT32 * 2, True),
    "max int32*2 -1": (BZ, MAX_INT32 * 2 - 1, True),
    "max int32*2 -10": (BZ, MAX_INT32 * 2 - 10, True),
    "max int32*2 +1": (BZ, MAX_INT32 * 2 + 1, True),
    "max int32*2 +10": (BZ, MAX_INT32 * 2 + 10, True),
    "max uint32": (BZ, MAX_UINT32, True),
    "max uint32 -1": (BZ, MAX_UINT32 - 1, True),
    "max uint32 -10": (BZ, MAX_UINT32 - 10, True),
    "max uint32 +1": (BZ, MAX_UINT32 + 1, True),
    "max uint32 +10": (BZ, MAX_UINT32 + 10, True),
    "max uint32*2": (BZ, MAX_UINT32 * 2, True),
    "max uint32*2 -1": (BZ, MAX_UINT32 * 2 - 1, True),
    "max uint32*2 -10": (BZ, MAX_UINT32 * 2 - 10, True),
    "max uint32*2 +1": (BZ, MAX_UINT32 * 2 + 1, True),
    "max uint32*2 +10": (BZ, MAX_UINT32 * 2 + 10, True),
    "max int64": (BZ, MAX_INT64, True),
    "max int64 -1": (BZ, MAX_INT64 - 1, True),
    "max int64 -10": (BZ, MAX_INT64 - 10, True),
    "max int64 +1": (BZ, MAX_INT64 + 1, True),
    "max int64 +10": (BZ, MAX_INT64 + 10, True),
    "max uint64": (BZ, MAX_UINT64, True),
    "max uint64 -1": (BZ, MAX_UINT64 - 1, True),
    "max uint64 -10": (BZ, MAX_UINT64 - 10, True),
}


@pytest.mark.parametrize("name", sorted(DECODE_CASES))
def test_decode_bytes(name):
    bz, length_prefix, expect_err = DECODE_CASES[name]
    prefix = encode_uvarint(length_prefix)
    buf = prefix + bz
    if expect_err:
        with pytest.raises(DecodeError) as info:
            decode_bytes(buf)
        assert info.value.consumed == len(prefix)
    else:
        out, n = decode_bytes(buf)
        assert n == len(prefix) + length_prefix
        assert out == bz[:length_prefix]


def test_decode_bytes_invalid_varint():
    with pytest.raises(DecodeError):
        decode_bytes(b"\xff")


ENC_VALUES = [
    -1, -100, -(1 << 32),
    0, 1, 100, 1 << 32,
    -(1 << 52), 1 << 52, 17,
    19, 28, 37, 388888888,
    -99999999999, 99999999999,
    MAX_INT64, MIN_INT64,
]


@pytest.mark.parametrize("value", ENC_VALUES)
def test_varint_round_trip(value):
    encoded = encode_varint(value)
    decoded, n = decode_varint(encoded)
    assert decoded == value
    assert n == len(encoded)
    assert encode_varint_size(value) == len(encoded)


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, b"\x00"),
        (1, b"\x02"),
        (-1, b"\x01"),
        (MAX_INT64, b"\xfe" + b"\xff" * 8 + b"\x01"),
        (MIN_INT64, b"\xff" * 9 + b"\x01"),
    ],
)
def test_varint_wire_values(value, expected):
    assert encode_varint(value) == expected


@pytest.mark.parametrize("value", [0, 1, 127, 128, 300, MAX_UINT32, MAX_UINT64])
def test_uvarint_round_trip(value):
    encoded = encode_uvarint(value)
    assert decode_uvarint(encoded) == (value, len(encoded))
    assert encode_uvarint_size(value) == len(encoded)


def test_uvarint_wire_value():
    assert encode_uvarint(300) == b"\xac\x02"


def test_uvarint_overflow():
    with pytest.raises(DecodeError) as info:
        decode_uvarint(b"\xff" * 11)
    assert info.value.consumed == 11


def test_uvarint_empty_buffer():
    with pytest.raises(DecodeError) as info:
        decode_uvarint(b"")
    assert info.value.consumed == 0


def test_uvarint_out_of_range():
    with pytest.raises(ValueError):
        encode_uvarint(-1)


def test_encode_bytes_round_trip():
    data = b"hello"
    encoded = encode_bytes(data)
    assert encoded[0] == len(data)
    assert decode_bytes(encoded) == (data, len(encoded))
    assert encode_bytes_size(data) == len(encoded)


def test_encode_32bytes_hash():
    digest = bytes(range(32))
    encoded = encode_32bytes_hash(digest)
    assert decode_bytes(encoded) == (digest, 33)