"""
Delivery zones — distance tiers, minimums and address resolution.

Usage:
    from tally import zone as Z

    table = Z.ZoneTable([
        Z.DeliveryZone("Nearby", 2.0, 299, 1500, 25),
        Z.DeliveryZone("Standard", 5.0, 499, 2000, 35),
    ])

    # Pure: coordinates already known
    match Z.resolve_zone(coords, store, table):
        case Ok(m): ...
        case Error(e): print(e.message)

    # Network: geocode first (cached)
    resolver = Z.ZoneResolver(geocoder, store, table)
    result = await resolver.resolve(address)

    # Minimum order is checked separately
    Z.check_minimum(subtotal_cents, m.zone)
"""

from tally.zone._types import (
    Coordinates,
    Address,
    DeliveryZone,
    ZoneMatch,
    ZoneErrorKind,
    ZoneError,
    BelowMinimumOrder,
)
from tally.zone._distance import EARTH_RADIUS_KM, haversine_km, format_distance
from tally.zone._table import ZoneTable
from tally.zone._resolve import resolve_zone, check_minimum
from tally.zone._geocode import Geocoder, StaticGeocoder, ZoneResolver

__all__ = (
    # Types
    "Coordinates",
    "Address",
    "DeliveryZone",
    "ZoneMatch",
    "ZoneErrorKind",
    "ZoneError",
    "BelowMinimumOrder",
    # Distance
    "EARTH_RADIUS_KM",
    "haversine_km",
    "format_distance",
    # Resolution
    "ZoneTable",
    "resolve_zone",
    "check_minimum",
    "Geocoder",
    "StaticGeocoder",
    "ZoneResolver",
)
