"""Fast nodes: the latest value of a key with the version that last set it."""

from __future__ import annotations

from dataclasses import dataclass

from iavl.encoding import (
    DecodeError,
    decode_bytes,
    decode_varint,
    encode_bytes,
    encode_bytes_size,
    encode_varint,
    encode_varint_size,
)


@dataclass
class FastNode:
    """A key's live value and the version at which it was last updated."""

    key: bytes = b""
    version_last_updated_at: int = 0
    value: bytes = b""

    @classmethod
    def deserialize(cls, key: bytes, buf: bytes) -> "FastNode":
        """Build a node for ``key`` from its serialised form ``buf``."""
        try:
            version, n = decode_varint(buf)
        except DecodeError as exc:
            raise DecodeError(f"decoding fastnode.version, {exc}", exc.consumed) from exc
        try:
            value, _ = decode_bytes(buf[n:])
        except DecodeError as exc:
            raise DecodeError(f"decoding fastnode.value, {exc}", exc.consumed) from exc
        return cls(key=key, version_last_updated_at=version, value=value)

    def encoded_size(self) -> int:
        """Return the length of :meth:`to_bytes` without building it."""
        return encode_varint_size(self.version_last_updated_at) + encode_bytes_size(
            self.value
        )

    def to_bytes(self) -> bytes:
        """Serialise the version and value; the key is stored separately."""
        if self.value is None:
            raise ValueError("cannot write node without a value")
        return encode_varint(self.version_last_updated_at) + encode_bytes(self.value)