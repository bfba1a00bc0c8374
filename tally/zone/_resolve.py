"""
Zone resolution — pure part.

Coordinates in, Result out. Geocoding lives in _geocode.py.
"""

from __future__ import annotations

import logging

from kungfu import Result, Ok, Error

from tally._money import ensure_cents
from tally._types import Cents
from tally.zone._types import (
    Coordinates,
    DeliveryZone,
    ZoneMatch,
    ZoneError,
    ZoneErrorKind,
    BelowMinimumOrder,
)
from tally.zone._distance import haversine_km
from tally.zone._table import ZoneTable

logger = logging.getLogger(__name__)


def resolve_zone(
    coords: Coordinates | None,
    store: Coordinates,
    table: ZoneTable,
) -> Result[ZoneMatch, ZoneError]:
    """
    Map customer coordinates to a delivery tier.

    None coordinates mean geocoding found nothing: INVALID_ADDRESS.
    Beyond every tier's radius: OUT_OF_ZONE (with the distance).

    The zone minimum is NOT checked here; see check_minimum().
    """
    if coords is None:
        return Error(ZoneError(ZoneErrorKind.INVALID_ADDRESS))
    if not len(table):
        return Error(ZoneError(ZoneErrorKind.NO_ZONES_CONFIGURED))

    distance = haversine_km(store, coords)
    zone = table.match(distance)
    if zone is None:
        logger.info(
            "address %.2fkm away is beyond service radius %.2fkm",
            distance,
            table.service_radius_km,
        )
        return Error(ZoneError(ZoneErrorKind.OUT_OF_ZONE, distance_km=distance))

    return Ok(ZoneMatch(zone=zone, distance_km=distance))


def check_minimum(
    subtotal_cents: Cents,
    zone: DeliveryZone,
) -> Result[None, BelowMinimumOrder]:
    """
    Check the zone minimum against the subtotal.

    Independent of resolution: a resolved zone can still fail this check.

        check_minimum(1800, zone_with_2000_minimum)
        # Error(BelowMinimumOrder) -> deficit_cents == 200, "Add $2.00 more ..."
    """
    ensure_cents("subtotal", subtotal_cents)
    if subtotal_cents >= zone.min_order_cents:
        return Ok(None)
    return Error(BelowMinimumOrder(subtotal_cents, zone.min_order_cents))


__all__ = ("resolve_zone", "check_minimum")
