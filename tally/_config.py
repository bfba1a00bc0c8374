"""
Settings — environment-driven defaults for a store.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal

from tally._money import as_decimal
from tally.tip import DEFAULT_DELIVERY_TIP_CAP_CENTS, DEFAULT_PRESETS, TipPolicy
from tally.window import DEFAULT_WINDOW_SECONDS
from tally.zone import Coordinates, DeliveryZone, ZoneTable

DEFAULT_ZONES: tuple[DeliveryZone, ...] = (
    DeliveryZone("Nearby", radius_km=2.0, fee_cents=299, min_order_cents=1500, eta_minutes=25),
    DeliveryZone("Standard", radius_km=5.0, fee_cents=499, min_order_cents=2000, eta_minutes=35),
    DeliveryZone("Extended", radius_km=10.0, fee_cents=799, min_order_cents=3000, eta_minutes=45),
)


def _env_or(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _decimal(name: str, default: str) -> Decimal:
    raw = _env_or(name, default)
    try:
        value = as_decimal(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {raw!r}")
    return value


def _int(name: str, default: int) -> int:
    raw = _env_or(name, str(default))
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {raw!r}")
    return value


def _float(name: str, default: float) -> float:
    raw = _env_or(name, str(default))
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def _tip_cap(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None:
        return DEFAULT_DELIVERY_TIP_CAP_CENTS
    if not raw.strip() or raw.strip().lower() == "none":
        return None
    return _int(name, DEFAULT_DELIVERY_TIP_CAP_CENTS)


def _presets(name: str) -> tuple[int, ...]:
    raw = _env_or(name, ",".join(str(p) for p in DEFAULT_PRESETS))
    try:
        presets = tuple(int(part) for part in raw.split(",") if part.strip())
    except ValueError as e:
        raise ValueError(f"{name} must be comma-separated integers, got {raw!r}") from e
    if not presets or any(p < 0 for p in presets):
        raise ValueError(f"{name} must list non-negative percentages, got {raw!r}")
    return presets


@dataclass(frozen=True, slots=True)
class Settings:
    """
    Store-level pricing settings.

    Environment:
        TALLY_TAX_RATE                fraction, default 0.0875
        TALLY_SERVICE_FEE_RATE        fraction, default 0
        TALLY_DELIVERY_TIP_CAP_CENTS  default 2000; empty or "none" disables
        TALLY_EDIT_WINDOW_SECONDS     default 180
        TALLY_STORE_LAT / _LNG        store location
        TALLY_TIP_PRESETS             default "10,15,20"
    """

    tax_rate: Decimal = Decimal("0.0875")
    service_fee_rate: Decimal = Decimal(0)
    delivery_tip_cap_cents: int | None = DEFAULT_DELIVERY_TIP_CAP_CENTS
    edit_window_seconds: int = DEFAULT_WINDOW_SECONDS
    store: Coordinates = Coordinates(41.77, -88.15)
    tip_presets: tuple[int, ...] = DEFAULT_PRESETS
    zones: tuple[DeliveryZone, ...] = DEFAULT_ZONES

    @classmethod
    def from_env(cls) -> Settings:
        try:
            store = Coordinates(
                _float("TALLY_STORE_LAT", 41.77),
                _float("TALLY_STORE_LNG", -88.15),
            )
        except ValueError as e:
            raise ValueError(f"TALLY_STORE_LAT/TALLY_STORE_LNG: {e}") from e
        return cls(
            tax_rate=_decimal("TALLY_TAX_RATE", "0.0875"),
            service_fee_rate=_decimal("TALLY_SERVICE_FEE_RATE", "0"),
            delivery_tip_cap_cents=_tip_cap("TALLY_DELIVERY_TIP_CAP_CENTS"),
            edit_window_seconds=_int("TALLY_EDIT_WINDOW_SECONDS", DEFAULT_WINDOW_SECONDS),
            store=store,
            tip_presets=_presets("TALLY_TIP_PRESETS"),
        )

    @property
    def tip_policy(self) -> TipPolicy:
        return TipPolicy(delivery_cap_cents=self.delivery_tip_cap_cents)

    @property
    def zone_table(self) -> ZoneTable:
        return ZoneTable(self.zones)


__all__ = ("DEFAULT_ZONES", "Settings")
