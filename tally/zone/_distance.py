"""
Great-circle distance.
"""

from __future__ import annotations

import math

from tally.zone._types import Coordinates

EARTH_RADIUS_KM = 6371.0


def haversine_km(a: Coordinates, b: Coordinates) -> float:
    """Haversine distance between two points, in kilometers."""
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.lat)) * math.cos(math.radians(b.lat)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def format_distance(km: float) -> str:
    """"850m" under a kilometer, "3.2km" otherwise."""
    if km < 1:
        return f"{round(km * 1000)}m"
    return f"{km:.1f}km"


__all__ = ("EARTH_RADIUS_KM", "haversine_km", "format_distance")
