"""
Cache builder: tiers in front of a fallible fetch.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from kungfu import LazyCoroResult, Result, Ok, Error

from tally.cache._types import Tier, CacheResult, CacheStats

logger = logging.getLogger(__name__)

type KeyFn[K] = Callable[[K], str]
type Fetch[K, T, E] = Callable[[K], LazyCoroResult[T, E]]
type StorePredicate[T] = Callable[[T], bool]


def _keep_all(_: object) -> bool:
    return True


# ═══════════════════════════════════════════════════════════════════════════════
# Builder
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True, frozen=True)
class Cache[K, T, E]:
    """
    Immutable builder; each step returns a new one.

    Example:
        geocodes = (
            C.cache(Address.cache_key, fetch_coordinates)
            .tier(C.LocalTier(max_size=500))
            .store_if(lambda coords: coords is not None)
            .build()
        )
    """

    key_fn: KeyFn[K]
    fetch: Fetch[K, T, E]
    tiers: tuple[Tier[T], ...] = ()
    keep: StorePredicate[T] = _keep_all

    def tier(self, t: Tier[T]) -> Cache[K, T, E]:
        """Append a tier. Reads go through tiers in the order added."""
        return Cache(self.key_fn, self.fetch, (*self.tiers, t), self.keep)

    def store_if(self, predicate: StorePredicate[T]) -> Cache[K, T, E]:
        """Only fetched values passing `predicate` populate the tiers."""
        return Cache(self.key_fn, self.fetch, self.tiers, predicate)

    def build(self) -> CacheExecutor[K, T, E]:
        return CacheExecutor(self.key_fn, self.fetch, self.tiers, self.keep)


def cache[K, T, E](key: KeyFn[K], fetch: Fetch[K, T, E]) -> Cache[K, T, E]:
    """Start a builder from a key function and a fetch."""
    return Cache(key, fetch)


# ═══════════════════════════════════════════════════════════════════════════════
# Executor
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True)
class CacheExecutor[K, T, E]:
    """
    Read-through cache.

    A failing tier is logged and skipped, never fatal: the fetch still
    answers. Fetch errors pass through untouched and are never stored.
    """

    key_fn: KeyFn[K]
    fetch: Fetch[K, T, E]
    tiers: tuple[Tier[T], ...]
    keep: StorePredicate[T]
    stats: CacheStats = field(default_factory=CacheStats)

    async def _read(self, key: str) -> CacheResult[T] | None:
        for t in self.tiers:
            try:
                value = await t.get(key)
                if value is None:
                    continue
                ttl = await t.expires_in(key)
            except Exception:
                logger.warning("cache tier %s failed on read", t.name, exc_info=True)
                continue
            logger.debug("cache hit in %s", t.name)
            return CacheResult(value=value, hit=True, tier=t.name, ttl_remaining=ttl)
        return None

    async def _write(self, key: str, value: T) -> None:
        for t in self.tiers:
            try:
                await t.set(key, value)
            except Exception:
                logger.warning("cache tier %s failed on write", t.name, exc_info=True)

    def get(self, item: K) -> LazyCoroResult[CacheResult[T], E]:
        """Tiers first, then fetch. Lazy: nothing runs until awaited."""
        key = self.key_fn(item)

        async def execute() -> Result[CacheResult[T], E]:
            cached = await self._read(key)
            if cached is not None:
                self.stats.hits += 1
                return Ok(cached)

            self.stats.misses += 1
            logger.debug("cache miss, fetching")
            match await self.fetch(item):
                case Ok(value):
                    if self.keep(value):
                        await self._write(key, value)
                    return Ok(CacheResult(value=value, hit=False, tier=None, ttl_remaining=None))
                case Error(e):
                    self.stats.errors += 1
                    return Error(e)

        return LazyCoroResult(execute)

    async def invalidate(self, item: K) -> bool:
        """Drop `item` from every tier. True if any tier held it."""
        key = self.key_fn(item)
        dropped = [await t.delete(key) for t in self.tiers]
        return any(dropped)


__all__ = ("Cache", "CacheExecutor", "cache")
