"""Byte helpers: hex-encoded byte strings and key increment."""

from __future__ import annotations

import binascii


class HexBytes(bytes):
    """Bytes that render and serialise to JSON as upper-case hex."""

    def to_json(self) -> str:
        """Return the JSON string literal holding the upper-case hex."""
        return f'"{self.hex().upper()}"'

    @classmethod
    def from_json(cls, data: str | bytes) -> "HexBytes":
        """Parse a JSON string literal holding hex digits."""
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("ascii", errors="replace")
        if len(data) < 2 or data[0] != '"' or data[-1] != '"':
            raise ValueError(f"invalid hex string: {data}")
        return cls(binascii.unhexlify(data[1:-1]))

    def __str__(self) -> str:
        return self.hex().upper()


def cp_incr(bz: bytes) -> bytes | None:
    """Return ``bz`` as a big-endian number plus one, same length.

    Returns None on overflow (all bytes 0xFF).
    """
    if not bz:
        raise ValueError("cp_incr expects non-zero length")
    ret = bytearray(bz)
    for i in reversed(range(len(ret))):
        if ret[i] < 0xFF:
            ret[i] += 1
            return bytes(ret)
        ret[i] = 0
    return None