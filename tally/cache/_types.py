"""
Cache types: the tier protocol, an in-process tier, lookup metadata.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from typing import Protocol

# ═══════════════════════════════════════════════════════════════════════════════
# Tier Protocol — Backends Implement This
# ═══════════════════════════════════════════════════════════════════════════════


class Tier[T](Protocol):
    """
    Storage behind a cache.

    LocalTier covers a single process. A shared store (Redis and the like)
    only needs these five members to let geocodes survive restarts.
    `get` returns None both on a miss and on an expired entry.
    """

    @property
    def name(self) -> str: ...

    async def get(self, key: str) -> T | None: ...

    async def set(self, key: str, value: T) -> None: ...

    async def delete(self, key: str) -> bool: ...

    async def expires_in(self, key: str) -> timedelta | None: ...


# ═══════════════════════════════════════════════════════════════════════════════
# Local Tier — In-Memory LRU with TTL
# ═══════════════════════════════════════════════════════════════════════════════

type _Entry[T] = tuple[T, float | None]


class LocalTier[T]:
    """
    Bounded in-process tier: least recently used entries go first, and
    entries older than `ttl` read as misses.

    `clock` returns seconds; swap it in tests to expire entries on demand.

    Example:
        tier = LocalTier[Coordinates](max_size=500, ttl=timedelta(hours=6))
    """

    __slots__ = ("_capacity", "_ttl_seconds", "_clock", "_store")

    def __init__(
        self,
        max_size: int = 1000,
        ttl: timedelta | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self._capacity = max_size
        self._ttl_seconds = None if ttl is None else ttl.total_seconds()
        self._clock = clock
        self._store: OrderedDict[str, _Entry[T]] = OrderedDict()

    @property
    def name(self) -> str:
        return "local"

    def __len__(self) -> int:
        return len(self._store)

    def _fresh(self, key: str) -> _Entry[T] | None:
        entry = self._store.get(key)
        if entry is not None and entry[1] is not None and self._clock() >= entry[1]:
            del self._store[key]
            return None
        return entry

    async def get(self, key: str) -> T | None:
        entry = self._fresh(key)
        if entry is None:
            return None
        self._store.move_to_end(key)
        return entry[0]

    async def set(self, key: str, value: T) -> None:
        if key not in self._store and len(self._store) >= self._capacity:
            self._store.popitem(last=False)
        deadline = None if self._ttl_seconds is None else self._clock() + self._ttl_seconds
        self._store[key] = (value, deadline)
        self._store.move_to_end(key)

    async def delete(self, key: str) -> bool:
        return self._store.pop(key, None) is not None

    async def expires_in(self, key: str) -> timedelta | None:
        entry = self._fresh(key)
        if entry is None or entry[1] is None:
            return None
        return timedelta(seconds=max(entry[1] - self._clock(), 0.0))


# ═══════════════════════════════════════════════════════════════════════════════
# Results
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CacheResult[T]:
    """Fetched or cached value; `tier` names where a hit came from."""

    value: T
    hit: bool
    tier: str | None
    ttl_remaining: timedelta | None


@dataclass(slots=True)
class CacheStats:
    """Running counters for one executor."""

    hits: int = 0
    misses: int = 0
    errors: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


__all__ = ("Tier", "LocalTier", "CacheResult", "CacheStats")
