"""In-memory ordered key-value database with iterators and write batches."""

from __future__ import annotations

import enum
import sys
import threading
from dataclasses import dataclass
from typing import IO, Iterator, Optional

from sortedcontainers import SortedDict


class DBError(Exception):
    """Base class for database errors."""


class BatchClosedError(DBError):
    """A closed or already written batch was used."""

    def __init__(self) -> None:
        super().__init__("batch has been written or closed")


class KeyEmptyError(DBError):
    """An empty or missing key was given."""

    def __init__(self) -> None:
        super().__init__("key cannot be empty")


class ValueNilError(DBError):
    """A missing value was given to a set operation."""

    def __init__(self) -> None:
        super().__init__("value cannot be nil")


def _check_key(key: Optional[bytes]) -> bytes:
    if not key:
        raise KeyEmptyError()
    return bytes(key)


def _check_domain(start: Optional[bytes], end: Optional[bytes]) -> None:
    if (start is not None and len(start) == 0) or (end is not None and len(end) == 0):
        raise KeyEmptyError()


class MemDB:
    """In-memory database kept in key order.

    Keys must be non-empty and values must not be None.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._data: SortedDict = SortedDict()
        self._closed = False

    @property
    def closed(self) -> bool:
        """Whether :meth:`close` has been called; the data stays readable."""
        return self._closed

    def get(self, key: bytes) -> Optional[bytes]:
        """Return the value stored at ``key``, or None."""
        key = _check_key(key)
        with self._lock:
            return self._data.get(key)

    def has(self, key: bytes) -> bool:
        """Return whether ``key`` is stored."""
        key = _check_key(key)
        with self._lock:
            return key in self._data

    def set(self, key: bytes, value: bytes) -> None:
        """Store ``value`` at ``key``."""
        key = _check_key(key)
        if value is None:
            raise ValueNilError()
        with self._lock:
            self._set(key, value)

    def _set(self, key: bytes, value: bytes) -> None:
        self._data[key] = bytes(value)

    def set_sync(self, key: bytes, value: bytes) -> None:
        """Same as :meth:`set`; there is nothing to flush."""
        self.set(key, value)

    def delete(self, key: bytes) -> None:
        """Remove ``key`` if present."""
        key = _check_key(key)
        with self._lock:
            self._delete(key)

    def _delete(self, key: bytes) -> None:
        self._data.pop(key, None)

    def delete_sync(self, key: bytes) -> None:
        """Same as :meth:`delete`; there is nothing to flush."""
        self.delete(key)

    def close(self) -> None:
        """Mark the database closed; in-memory data is kept, not lost."""
        with self._lock:
            self._closed = True

    def dump(self, out: Optional[IO[str]] = None) -> None:
        """Write every pair as hex, one per line, to ``out`` (stdout by default)."""
        stream = sys.stdout if out is None else out
        with self._lock:
            for key, value in self._data.items():
                stream.write(f"[{key.hex().upper()}]:\t[{value.hex().upper()}]\n")

    def stats(self) -> dict[str, str]:
        """Return the backend type and the number of stored keys."""
        with self._lock:
            return {"database.type": "memDB", "database.size": str(len(self._data))}

    def new_batch(self) -> "MemDBBatch":
        """Create a batch of writes applied together by :meth:`MemDBBatch.write`."""
        return MemDBBatch(self)

    def new_batch_with_size(self, size: int) -> "MemDBBatch":
        """Create a batch; the size hint has no effect in memory."""
        return MemDBBatch(self)

    def iterator(self, start: Optional[bytes], end: Optional[bytes]) -> "MemDBIterator":
        """Iterate keys in ``[start, end)`` in ascending order; None is open."""
        _check_domain(start, end)
        return MemDBIterator(self, start, end, reverse=False)

    def reverse_iterator(
        self, start: Optional[bytes], end: Optional[bytes]
    ) -> "MemDBIterator":
        """Iterate keys in ``[start, end)`` in descending order; None is open."""
        _check_domain(start, end)
        return MemDBIterator(self, start, end, reverse=True)

    def _snapshot(
        self, start: Optional[bytes], end: Optional[bytes], reverse: bool
    ) -> list[tuple[bytes, bytes]]:
        lo = None if start is None else bytes(start)
        hi = None if end is None else bytes(end)
        with self._lock:
            keys = list(
                self._data.irange(lo, hi, inclusive=(True, False), reverse=reverse)
            )
            return [(k, self._data[k]) for k in keys]


class MemDBIterator:
    """Cursor over a key range of a :class:`MemDB`.

    The range is captured when the iterator is created.
    """

    def __init__(
        self,
        db: MemDB,
        start: Optional[bytes],
        end: Optional[bytes],
        reverse: bool,
    ) -> None:
        self._start = start
        self._end = end
        self._items = db._snapshot(start, end, reverse)
        self._pos = 0
        self._error: Optional[Exception] = None

    def domain(self) -> tuple[Optional[bytes], Optional[bytes]]:
        """Return the start (inclusive) and end (exclusive) of the range."""
        return self._start, self._end

    def valid(self) -> bool:
        """Return whether the iterator points at a pair."""
        return self._pos < len(self._items)

    def _assert_valid(self) -> None:
        if not self.valid():
            raise RuntimeError("iterator is invalid")

    def next(self) -> None:
        """Advance to the next pair."""
        self._assert_valid()
        self._pos += 1

    def key(self) -> bytes:
        """Return the current key."""
        self._assert_valid()
        return self._items[self._pos][0]

    def value(self) -> bytes:
        """Return the current value."""
        self._assert_valid()
        return self._items[self._pos][1]

    def error(self) -> Optional[Exception]:
        """Return the last error recorded by the iterator, if any."""
        return self._error

    def close(self) -> None:
        """Release the captured range; the iterator becomes invalid."""
        self._items = []
        self._pos = 0

    def __iter__(self) -> Iterator[tuple[bytes, bytes]]:
        while self.valid():
            pair = self._items[self._pos]
            self._pos += 1
            yield pair

    def __enter__(self) -> "MemDBIterator":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class _OpType(enum.Enum):
    SET = 1
    DELETE = 2


@dataclass(frozen=True)
class _Operation:
    op: _OpType
    key: bytes
    value: Optional[bytes] = None


class MemDBBatch:
    """Group of writes to a :class:`MemDB`, applied on :meth:`write`."""

    def __init__(self, db: MemDB) -> None:
        self._db = db
        self._ops: Optional[list[_Operation]] = []
        self._size = 0

    def set(self, key: bytes, value: bytes) -> None:
        """Queue storing ``value`` at ``key``."""
        key = _check_key(key)
        if value is None:
            raise ValueNilError()
        if self._ops is None:
            raise BatchClosedError()
        self._size += len(key) + len(value)
        self._ops.append(_Operation(_OpType.SET, key, bytes(value)))

    def delete(self, key: bytes) -> None:
        """Queue removing ``key``."""
        key = _check_key(key)
        if self._ops is None:
            raise BatchClosedError()
        self._size += len(key)
        self._ops.append(_Operation(_OpType.DELETE, key))

    def write(self) -> None:
        """Apply all queued operations in order and close the batch."""
        if self._ops is None:
            raise BatchClosedError()
        with self._db._lock:
            for op in self._ops:
                if op.op is _OpType.SET:
                    self._db._set(op.key, op.value)
                else:
                    self._db._delete(op.key)
        self.close()

    def write_sync(self) -> None:
        """Same as :meth:`write`."""
        self.write()

    def close(self) -> None:
        """Discard queued operations; later use raises BatchClosedError."""
        self._ops = None
        self._size = 0

    def byte_size(self) -> int:
        """Return the total size of queued keys and values."""
        if self._ops is None:
            raise BatchClosedError()
        return self._size

    def __enter__(self) -> "MemDBBatch":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()