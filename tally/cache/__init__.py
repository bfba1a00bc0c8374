"""
Cache: read-through tiers in front of a fallible async fetch.

    from tally import cache as C

    geocodes = (
        C.cache(Address.cache_key, fetch_coordinates)
        .tier(C.LocalTier(max_size=500, ttl=timedelta(hours=6)))
        .store_if(lambda coords: coords is not None)
        .build()
    )
    result = await geocodes.get(address)
    geocodes.stats.hit_rate
"""

from __future__ import annotations

from tally.cache._types import Tier, LocalTier, CacheResult, CacheStats
from tally.cache._builder import cache, Cache, CacheExecutor

__all__ = (
    "Tier",
    "LocalTier",
    "CacheResult",
    "CacheStats",
    "cache",
    "Cache",
    "CacheExecutor",
)
