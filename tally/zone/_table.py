"""
Zone table — ordered delivery tiers with a fixed tie-break.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from tally.zone._types import DeliveryZone


def _rank(zone: DeliveryZone) -> tuple[float, int, str]:
    return (zone.radius_km, zone.fee_cents, zone.label)


class ZoneTable:
    """
    Delivery tiers sorted narrowest first.

    When several tiers cover a distance, the narrowest radius wins, then
    the lower fee, then the label. Input order never matters.
    """

    __slots__ = ("_zones",)

    def __init__(self, zones: Iterable[DeliveryZone]) -> None:
        self._zones: tuple[DeliveryZone, ...] = tuple(sorted(zones, key=_rank))

    def __iter__(self) -> Iterator[DeliveryZone]:
        return iter(self._zones)

    def __len__(self) -> int:
        return len(self._zones)

    @property
    def service_radius_km(self) -> float:
        return max((z.radius_km for z in self._zones), default=0.0)

    def match(self, distance_km: float) -> DeliveryZone | None:
        """First tier (in rank order) whose radius covers `distance_km`."""
        return next((z for z in self._zones if distance_km <= z.radius_km), None)


__all__ = ("ZoneTable",)
