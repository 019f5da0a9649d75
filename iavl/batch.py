"""Write batch that flushes itself once it grows past a size threshold."""

from __future__ import annotations

import threading

# Some backends add per-entry overhead beyond the key and value; this
# over-accounts for it when checking the threshold.
_ENTRY_OVERHEAD = 100


class BatchWithFlusher:
    """Batch wrapper that writes to the database when a threshold is reached.

    ``db`` must provide ``new_batch_with_size``; the batches it returns must
    provide ``set``, ``delete``, ``write``, ``write_sync``, ``close`` and
    ``byte_size``.
    """

    def __init__(self, db, flush_threshold: int) -> None:
        self._lock = threading.RLock()
        self._db = db
        self._flush_threshold = flush_threshold
        self._batch = db.new_batch_with_size(flush_threshold)

    def _estimate_size_after(self, key: bytes, value: bytes) -> int:
        return self._batch.byte_size() + len(key) + len(value) + _ENTRY_OVERHEAD

    def _flush_if_needed(self, key: bytes, value: bytes) -> None:
        if self._estimate_size_after(key, value) > self._flush_threshold:
            self.write()

    def set(self, key: bytes, value: bytes) -> None:
        """Queue a set, flushing first if it would exceed the threshold."""
        with self._lock:
            self._flush_if_needed(key, value)
            self._batch.set(key, value)

    def delete(self, key: bytes) -> None:
        """Queue a delete, flushing first if it would exceed the threshold."""
        with self._lock:
            self._flush_if_needed(key, b"")
            self._batch.delete(key)

    def write(self) -> None:
        """Write the queued operations and start a fresh batch."""
        with self._lock:
            self._batch.write()
            self._batch.close()
            self._batch = self._db.new_batch_with_size(self._flush_threshold)

    def write_sync(self) -> None:
        """Write and flush the queued operations and start a fresh batch."""
        with self._lock:
            self._batch.write_sync()
            self._batch.close()
            self._batch = self._db.new_batch_with_size(self._flush_threshold)

    def close(self) -> None:
        """Close the current batch, discarding unwritten operations."""
        with self._lock:
            self._batch.close()

    def byte_size(self) -> int:
        """Return the size of the current batch."""
        return self._batch.byte_size()

    def __enter__(self) -> "BatchWithFlusher":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()