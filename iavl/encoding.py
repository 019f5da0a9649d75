"""Varint and length-prefixed byte encodings used by the node formats."""

from __future__ import annotations

MAX_VARINT_LEN64 = 10

_MASK64 = (1 << 64) - 1
_MAX_INT = (1 << 63) - 1
_HASH_LEN_PREFIX = b"\x20"


class DecodeError(ValueError):
    """Raised when encoded data cannot be decoded.

    ``consumed`` is the number of input bytes read before the failure.
    """

    def __init__(self, message: str, consumed: int = 0) -> None:
        super().__init__(message)
        self.consumed = consumed


def _uvarint(bz: bytes) -> tuple[int, int]:
    """Decode an unsigned varint; n is 0 when short and negative on overflow."""
    x = 0
    shift = 0
    for i, b in enumerate(bz):
        if i == MAX_VARINT_LEN64:
            return 0, -(i + 1)
        if b < 0x80:
            if i == MAX_VARINT_LEN64 - 1 and b > 1:
                return 0, -(i + 1)
            return x | (b << shift), i + 1
        x |= (b & 0x7F) << shift
        shift += 7
    return 0, 0


def decode_uvarint(bz: bytes) -> tuple[int, int]:
    """Decode an unsigned varint, returning the value and the bytes read."""
    value, n = _uvarint(bz)
    if n == 0:
        raise DecodeError("buffer too small", 0)
    if n < 0:
        raise DecodeError("EOF decoding uvarint", -n)
    return value, n


def decode_varint(bz: bytes) -> tuple[int, int]:
    """Decode a zig-zag signed varint, returning the value and the bytes read."""
    ux, n = _uvarint(bz)
    if n == 0:
        raise DecodeError("buffer too small", 0)
    if n < 0:
        raise DecodeError("EOF decoding varint", -n)
    value = ux >> 1
    if ux & 1:
        value = ~value
    return value, n


def decode_bytes(bz: bytes) -> tuple[bytes, int]:
    """Decode a varint length-prefixed byte string.

    Returns the bytes and the offset just past them.
    """
    size, n = decode_uvarint(bz)
    if size >= _MAX_INT:
        raise DecodeError(f"invalid out of range length {size} decoding bytes", n)
    end = n + size
    if len(bz) < end:
        raise DecodeError(f"insufficient bytes decoding bytes of length {size}", n)
    return bytes(bz[n:end]), end


def encode_uvarint(u: int) -> bytes:
    """Encode an unsigned 64-bit integer as a varint."""
    if u < 0 or u > _MASK64:
        raise ValueError(f"value {u} out of range for uint64")
    out = bytearray()
    while u >= 0x80:
        out.append((u & 0x7F) | 0x80)
        u >>= 7
    out.append(u)
    return bytes(out)


def _zigzag(i: int) -> int:
    if i < -(1 << 63) or i > _MAX_INT:
        raise ValueError(f"value {i} out of range for int64")
    ux = ((i & _MASK64) << 1) & _MASK64
    if i < 0:
        ux = ~ux & _MASK64
    return ux


def encode_varint(i: int) -> bytes:
    """Encode a signed 64-bit integer as a zig-zag varint."""
    return encode_uvarint(_zigzag(i))


def encode_bytes(bz: bytes) -> bytes:
    """Return the varint length-prefixed form of ``bz``."""
    return encode_uvarint(len(bz)) + bytes(bz)


def encode_32bytes_hash(bz: bytes) -> bytes:
    """Length-prefix a 32-byte hash."""
    return _HASH_LEN_PREFIX + bytes(bz)


def encode_uvarint_size(u: int) -> int:
    """Return the size in bytes of ``u`` encoded as a varint."""
    if u == 0:
        return 1
    return (u.bit_length() + 6) // 7


def encode_varint_size(i: int) -> int:
    """Return the size in bytes of ``i`` encoded as a zig-zag varint."""
    return encode_uvarint_size(_zigzag(i))


def encode_bytes_size(bz: bytes) -> int:
    """Return the size of ``bz`` including its length prefix."""
    return encode_uvarint_size(len(bz)) + len(bz)