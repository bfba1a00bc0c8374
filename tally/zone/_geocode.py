"""
Zone resolution — network part.

Address -> geocoder (cached) -> resolve_zone().
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import timedelta
from typing import Protocol

from combinators import lift as L
from kungfu import LazyCoroResult, Result, Ok, Error

from tally import cache as C
from tally._types import Lookup
from tally.zone._types import Address, Coordinates, ZoneMatch, ZoneError, ZoneErrorKind
from tally.zone._table import ZoneTable
from tally.zone._resolve import resolve_zone

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Geocoder Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class Geocoder(Protocol):
    """
    Address-to-coordinates lookup.

    Return None when the address cannot be found. Raise for transport
    failures; the resolver maps those to LOOKUP_FAILED.
    """

    async def geocode(self, address: Address) -> Coordinates | None: ...


class StaticGeocoder:
    """
    Geocoder backed by a fixed table keyed on Address.cache_key().

    Example:
        geo = StaticGeocoder({home.cache_key(): Coordinates(41.78, -88.14)})
    """

    def __init__(self, table: Mapping[str, Coordinates]) -> None:
        self._table = dict(table)
        self.calls = 0

    async def geocode(self, address: Address) -> Coordinates | None:
        self.calls += 1
        return self._table.get(address.cache_key())


# ═══════════════════════════════════════════════════════════════════════════════
# Zone Resolver
# ═══════════════════════════════════════════════════════════════════════════════


def _lookup_failed(e: Exception) -> ZoneError:
    logger.warning("geocode lookup failed: %s", e)
    return ZoneError(ZoneErrorKind.LOOKUP_FAILED, detail=str(e))


class ZoneResolver:
    """
    Geocode an address and map it onto the zone table.

    Successful geocodes are cached per normalized address. Not-found
    results and lookup failures are never cached.

    Example:
        resolver = ZoneResolver(geocoder, store=Coordinates(41.77, -88.15), table=table)
        match await resolver.resolve(address):
            case Ok(m):
                print(m.zone.label, m.distance_km)
            case Error(e):
                print(e.message)
    """

    def __init__(
        self,
        geocoder: Geocoder,
        store: Coordinates,
        table: ZoneTable,
        *,
        cache_size: int = 1000,
        cache_ttl: timedelta | None = timedelta(hours=6),
    ) -> None:
        self.store = store
        self.table = table
        self._geocoder = geocoder
        self._cache = (
            C.cache(Address.cache_key, self._fetch)
            .tier(C.LocalTier(max_size=cache_size, ttl=cache_ttl))
            .store_if(lambda coords: coords is not None)
            .build()
        )

    @property
    def cache_stats(self) -> C.CacheStats:
        return self._cache.stats

    def _fetch(self, address: Address) -> LazyCoroResult[Coordinates | None, ZoneError]:
        return L.catching_async(
            lambda: self._geocoder.geocode(address),
            on_error=_lookup_failed,
        )

    def resolve(self, address: Address) -> Lookup[ZoneMatch, ZoneError]:
        """Resolve `address` to a delivery tier. Lazy: nothing runs until awaited."""
        store = self.store
        table = self.table
        geocode = self._cache

        async def execute() -> Result[ZoneMatch, ZoneError]:
            if address.is_blank():
                return Error(ZoneError(ZoneErrorKind.INVALID_ADDRESS))
            if not len(table):
                return Error(ZoneError(ZoneErrorKind.NO_ZONES_CONFIGURED))
            match await geocode.get(address):
                case Ok(hit):
                    return resolve_zone(hit.value, store, table)
                case Error(e):
                    return Error(e)

        return LazyCoroResult(execute)

    async def forget(self, address: Address) -> bool:
        """Drop a cached geocode for `address`."""
        return await self._cache.invalidate(address)


__all__ = ("Geocoder", "StaticGeocoder", "ZoneResolver")
