"""
Item types — cart lines and their modifiers.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from tally._types import Cents
from tally.units import PriceUnit, QuantityLike, clamp, normalize_unit


@dataclass(frozen=True, slots=True)
class Modifier:
    """Add-on or variant choice with a fixed price delta (not unit-scaled)."""

    name: str
    price_cents: Cents = 0


@dataclass(slots=True)
class CartItem:
    """
    One line in the cart.

    `qty` is always a Decimal at the unit's precision and never below the
    unit minimum; out-of-range quantities are clamped on construction.
    """

    id: str
    sku: str
    name: str
    unit_price_cents: Cents
    qty: Decimal
    price_unit: PriceUnit = PriceUnit.EACH
    modifiers: tuple[Modifier, ...] = ()
    note: str = ""
    image_ref: str | None = None
    unit_label: str | None = None

    def __post_init__(self) -> None:
        if self.unit_price_cents < 0:
            raise ValueError(f"unit price must be non-negative, got {self.unit_price_cents}")
        self.price_unit = normalize_unit(self.price_unit)
        self.qty = clamp(self.qty, self.price_unit)
        self.modifiers = tuple(self.modifiers)


def make_item(
    id: str,
    sku: str,
    name: str,
    unit_price_cents: Cents,
    qty: QuantityLike = 1,
    price_unit: PriceUnit | str | None = None,
    modifiers: tuple[Modifier, ...] | list[Modifier] = (),
    note: str = "",
    image_ref: str | None = None,
    unit_label: str | None = None,
) -> CartItem:
    """Build a CartItem from loosely typed input (unit names, string quantities)."""
    unit = normalize_unit(price_unit)
    return CartItem(
        id=id,
        sku=sku,
        name=name,
        unit_price_cents=unit_price_cents,
        qty=clamp(qty, unit),
        price_unit=unit,
        modifiers=tuple(modifiers),
        note=note,
        image_ref=image_ref,
        unit_label=unit_label,
    )


__all__ = ("Modifier", "CartItem", "make_item")
