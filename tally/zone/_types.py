"""
Zone types — addresses, delivery tiers, resolution errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from tally._money import format_cents
from tally._types import Cents

# ═══════════════════════════════════════════════════════════════════════════════
# Geography
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Coordinates:
    lat: float
    lng: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"latitude out of range: {self.lat}")
        if not -180.0 <= self.lng <= 180.0:
            raise ValueError(f"longitude out of range: {self.lng}")


@dataclass(frozen=True, slots=True)
class Address:
    line1: str
    city: str
    state: str
    zip: str
    line2: str = ""

    def is_blank(self) -> bool:
        return not (self.line1.strip() and (self.zip.strip() or self.city.strip()))

    def cache_key(self) -> str:
        parts = (self.line1, self.line2, self.city, self.state, self.zip)
        return "geo:" + "|".join(" ".join(p.lower().split()) for p in parts)


# ═══════════════════════════════════════════════════════════════════════════════
# Delivery Zones
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class DeliveryZone:
    """Radius tier around the store: fee, minimum order and ETA."""

    label: str
    radius_km: float
    fee_cents: Cents
    min_order_cents: Cents
    eta_minutes: int

    def __post_init__(self) -> None:
        if self.radius_km <= 0:
            raise ValueError(f"zone {self.label!r} radius must be positive")
        if self.fee_cents < 0 or self.min_order_cents < 0:
            raise ValueError(f"zone {self.label!r} amounts must be non-negative")


@dataclass(frozen=True, slots=True)
class ZoneMatch:
    zone: DeliveryZone
    distance_km: float


# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


class ZoneErrorKind(Enum):
    OUT_OF_ZONE = auto()
    INVALID_ADDRESS = auto()
    NO_ZONES_CONFIGURED = auto()
    LOOKUP_FAILED = auto()


_ZONE_MESSAGES: dict[ZoneErrorKind, str] = {
    ZoneErrorKind.OUT_OF_ZONE: (
        "This address is outside our delivery area. Choose pickup instead?"
    ),
    ZoneErrorKind.INVALID_ADDRESS: (
        "We couldn't find that address. Check it and try again, or choose pickup."
    ),
    ZoneErrorKind.NO_ZONES_CONFIGURED: (
        "Delivery isn't available right now. Pickup is still open."
    ),
    ZoneErrorKind.LOOKUP_FAILED: (
        "We couldn't check this address right now. Try again, or choose pickup."
    ),
}


@dataclass(frozen=True, slots=True)
class ZoneError:
    """Zone resolution failure, surfaced to the user."""

    kind: ZoneErrorKind
    distance_km: float | None = None
    detail: str | None = None

    @property
    def message(self) -> str:
        return _ZONE_MESSAGES[self.kind]


@dataclass(frozen=True, slots=True)
class BelowMinimumOrder:
    """
    Subtotal is short of the zone minimum.

    Blocks checkout; does not undo the zone match.
    """

    subtotal_cents: Cents
    min_order_cents: Cents

    @property
    def deficit_cents(self) -> Cents:
        return self.min_order_cents - self.subtotal_cents

    @property
    def message(self) -> str:
        return (
            f"Add {format_cents(self.deficit_cents)} more to reach the "
            f"{format_cents(self.min_order_cents)} delivery minimum."
        )


__all__ = (
    "Coordinates",
    "Address",
    "DeliveryZone",
    "ZoneMatch",
    "ZoneErrorKind",
    "ZoneError",
    "BelowMinimumOrder",
)
