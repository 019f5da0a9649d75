"""Pseudo-random helpers for tests and tools; not for cryptographic use."""

from __future__ import annotations

import os
import random
import threading
from datetime import datetime, timedelta, timezone
from typing import Optional

_STR_CHARS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MIN_SECONDS = int((datetime(1, 1, 1, tzinfo=timezone.utc) - _EPOCH).total_seconds())
_MAX_SECONDS = int(
    (datetime(9999, 12, 31, 23, 59, 59, tzinfo=timezone.utc) - _EPOCH).total_seconds()
)


def _signed(value: int, bits: int) -> int:
    value &= (1 << bits) - 1
    if value >= 1 << (bits - 1):
        value -= 1 << bits
    return value


def _os_seed() -> int:
    return int.from_bytes(os.urandom(8), "big")


class Rand:
    """Thread-safe PRNG, seeded from OS randomness unless a seed is given."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self._lock = threading.Lock()
        self._rng = random.Random(_os_seed() if seed is None else seed)

    def seed(self, seed: int) -> None:
        """Reset the generator to a deterministic state."""
        with self._lock:
            self._rng = random.Random(seed)

    def _bits(self, n: int) -> int:
        with self._lock:
            return self._rng.getrandbits(n)

    def random_str(self, length: int) -> str:
        """Return a random alphanumeric string of ``length`` characters."""
        chars: list[str] = []
        while len(chars) < length:
            val = self.int63()
            for _ in range(10):
                v = val & 0x3F
                val >>= 6
                if v >= len(_STR_CHARS):
                    continue
                chars.append(_STR_CHARS[v])
                if len(chars) == length:
                    break
        return "".join(chars)

    def uint16(self) -> int:
        return self.uint32() & 0xFFFF

    def uint32(self) -> int:
        return self._bits(32)

    def uint64(self) -> int:
        return (self.uint32() << 32) + self.uint32()

    def uint(self) -> int:
        return self._bits(63)

    def int16(self) -> int:
        return _signed(self.uint32(), 16)

    def int32(self) -> int:
        return _signed(self.uint32(), 32)

    def int64(self) -> int:
        return _signed(self.uint64(), 64)

    def integer(self) -> int:
        """Return a non-negative 63-bit integer."""
        return self._bits(63)

    def int31(self) -> int:
        return self._bits(31)

    def int31n(self, n: int) -> int:
        """Return an integer in ``[0, n)``; ``n`` must be positive."""
        if n <= 0:
            raise ValueError("invalid argument to int31n")
        with self._lock:
            return self._rng.randrange(n)

    def int63(self) -> int:
        return self._bits(63)

    def int63n(self, n: int) -> int:
        """Return an integer in ``[0, n)``; ``n`` must be positive."""
        if n <= 0:
            raise ValueError("invalid argument to int63n")
        with self._lock:
            return self._rng.randrange(n)

    def float32(self) -> float:
        with self._lock:
            return self._rng.random()

    def float64(self) -> float:
        with self._lock:
            return self._rng.random()

    def random_time(self) -> datetime:
        """Return a random UTC time.

        The random 64-bit count of seconds is wrapped into the range that
        :class:`datetime` can represent.
        """
        span = _MAX_SECONDS - _MIN_SECONDS + 1
        seconds = _MIN_SECONDS + self.uint64() % span
        return _EPOCH + timedelta(seconds=seconds)

    def random_bytes(self, n: int) -> bytes:
        """Return ``n`` bytes from the internal generator."""
        return bytes(self.integer() & 0xFF for _ in range(n))

    def intn(self, n: int) -> int:
        """Return an integer in ``[0, n)``; ``n`` must be positive."""
        if n <= 0:
            raise ValueError("invalid argument to intn")
        with self._lock:
            return self._rng.randrange(n)

    def random_bool(self) -> bool:
        return self.int63() % 2 == 0

    def perm(self, n: int) -> list[int]:
        """Return a random permutation of ``range(n)``."""
        items = list(range(n))
        with self._lock:
            self._rng.shuffle(items)
        return items


_grand = Rand()


def seed(seed: int) -> None:
    """Reset the shared generator."""
    _grand.seed(seed)


def rand_str(length: int) -> str:
    return _grand.random_str(length)


def rand_int() -> int:
    return _grand.integer()


def rand_int31() -> int:
    return _grand.int31()


def rand_bytes(n: int) -> bytes:
    return _grand.random_bytes(n)


def rand_perm(n: int) -> list[int]:
    return _grand.perm(n)