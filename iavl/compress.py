"""Exported tree nodes and the compression applied to export streams.

Nodes are exported depth-first in post-order (left, right, node). The
compressed form drops branch keys, which are recovered on import from the
smallest key of each right subtree, stores leaf keys as deltas against the
previous leaf key, and stores branch versions relative to the highest
version among their two children.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Iterator, Optional, Protocol

from iavl.encoding import DecodeError, decode_uvarint, encode_uvarint


@dataclass
class ExportNode:
    """One node of an exported tree."""

    key: Optional[bytes] = None
    value: Optional[bytes] = None
    version: int = 0
    height: int = 0


class ExportDone(StopIteration):
    """Raised when every node has been exported."""

    def __init__(self) -> None:
        super().__init__("export is complete")


class NodeImporter(Protocol):
    """Anything that accepts exported nodes in post-order."""

    def add(self, node: ExportNode) -> None: ...


def diff_offset(a: bytes, b: bytes) -> int:
    """Return the index of the first byte at which ``a`` and ``b`` differ."""
    off = 0
    for x, y in zip(a, b):
        if x != y:
            break
        off += 1
    return off


def delta_encode(key: bytes, last_key: Optional[bytes]) -> bytes:
    """Encode ``key`` as the length shared with ``last_key`` and the rest."""
    shared = diff_offset(last_key or b"", key)
    return encode_uvarint(shared) + bytes(key[shared:])


def delta_decode(key: bytes, last_key: Optional[bytes]) -> bytes:
    """Rebuild a key encoded by :func:`delta_encode` against ``last_key``."""
    try:
        shared, n = decode_uvarint(key)
    except DecodeError as exc:
        raise DecodeError(f"uvarint parse failed: {exc}", exc.consumed) from exc
    rest = bytes(key[n:])
    if shared == 0:
        return rest
    previous = last_key or b""
    if shared > len(previous):
        raise DecodeError(
            f"shared prefix length {shared} exceeds previous key length {len(previous)}",
            n,
        )
    return bytes(previous[:shared]) + rest


def _pop_child_versions(stack: list[int]) -> int:
    if len(stack) < 2:
        raise ValueError("branch node without two exported children")
    right = stack.pop()
    return max(right, stack[-1])


class CompressExporter:
    """Iterator that compresses the nodes produced by another exporter."""

    def __init__(self, inner: Iterable[ExportNode]) -> None:
        self._inner: Iterator[ExportNode] = iter(inner)
        self._last_key: Optional[bytes] = None
        self._version_stack: list[int] = []

    def __iter__(self) -> "CompressExporter":
        return self

    def __next__(self) -> ExportNode:
        try:
            node = next(self._inner)
        except StopIteration:
            raise ExportDone() from None

        if node.height == 0:
            key = node.key or b""
            encoded = delta_encode(key, self._last_key)
            self._last_key = key
            self._version_stack.append(node.version)
            return replace(node, key=encoded)

        max_version = _pop_child_versions(self._version_stack)
        self._version_stack[-1] = node.version
        return replace(node, key=None, version=node.version - max_version)


class CompressImporter:
    """Importer that decompresses nodes before passing them on."""

    def __init__(self, inner: NodeImporter) -> None:
        self._inner = inner
        self._last_key: Optional[bytes] = None
        self._min_key_stack: list[bytes] = []
        self._version_stack: list[int] = []

    def add(self, node: ExportNode) -> None:
        """Decompress ``node`` and add it to the wrapped importer."""
        if node.height == 0:
            key = delta_decode(node.key or b"", self._last_key)
            self._last_key = key
            self._min_key_stack.append(key)
            self._version_stack.append(node.version)
            decoded = replace(node, key=key)
        else:
            if len(self._min_key_stack) < 2:
                raise ValueError("branch node without two imported children")
            # The branch key is the smallest key of its right subtree; the
            # left subtree's smallest key stays on the stack for the parent.
            key = self._min_key_stack.pop()
            max_version = _pop_child_versions(self._version_stack)
            version = node.version + max_version
            self._version_stack[-1] = version
            decoded = replace(node, key=key, version=version)
        self._inner.add(decoded)