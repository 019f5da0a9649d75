"""Least-recently-used cache of nodes keyed by their byte keys."""

from __future__ import annotations

from collections import OrderedDict
from typing import Optional, Protocol


class CacheNode(Protocol):
    """Anything cacheable: it exposes its key."""

    @property
    def key(self) -> bytes: ...


class LRUCache:
    """LRU cache bounded by a maximum number of nodes."""

    def __init__(self, max_element_count: int) -> None:
        self.max_element_count = max_element_count
        self._items: OrderedDict[bytes, CacheNode] = OrderedDict()

    def add(self, node: CacheNode) -> Optional[CacheNode]:
        """Add ``node``; return the node it replaced or evicted, if any."""
        key = bytes(node.key)
        if key in self._items:
            old = self._items[key]
            self._items[key] = node
            self._items.move_to_end(key)
            return old
        self._items[key] = node
        if len(self._items) > self.max_element_count:
            _, removed = self._items.popitem(last=False)
            return removed
        return None

    def get(self, key: bytes) -> Optional[CacheNode]:
        """Return the node for ``key`` and mark it recently used, or None."""
        key = bytes(key)
        node = self._items.get(key)
        if node is not None:
            self._items.move_to_end(key)
        return node

    def has(self, key: bytes) -> bool:
        """Return whether ``key`` is cached, without touching its recency."""
        return bytes(key) in self._items

    __contains__ = has

    def remove(self, key: bytes) -> Optional[CacheNode]:
        """Remove and return the node for ``key``, or None."""
        return self._items.pop(bytes(key), None)

    def __len__(self) -> int:
        return len(self._items)