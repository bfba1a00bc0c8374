"""
Unit types — price units and their quantity rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

# ═══════════════════════════════════════════════════════════════════════════════
# Unit Spec
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class UnitSpec:
    """
    Quantity rules for one price unit.

    Discrete units step by 1 from 1 with no decimals.
    Continuous (weight/volume) units use fractional or coarse steps.
    """

    is_continuous: bool
    step: Decimal
    minimum: Decimal
    decimal_places: int
    quantity_suffix: str
    price_suffix: str
    aria_suffix: str
    quantity_label: str

    @property
    def quantum(self) -> Decimal:
        """Smallest representable quantity at this unit's precision."""
        return Decimal(1).scaleb(-self.decimal_places)


def _discrete(suffix: str, label: str, price_suffix: str | None = None) -> UnitSpec:
    per = price_suffix or f"per {suffix}"
    return UnitSpec(
        is_continuous=False,
        step=Decimal(1),
        minimum=Decimal(1),
        decimal_places=0,
        quantity_suffix=suffix,
        price_suffix=per,
        aria_suffix=per,
        quantity_label=label,
    )


def _continuous(
    step: str,
    minimum: str,
    decimal_places: int,
    suffix: str,
    aria: str,
    label: str,
) -> UnitSpec:
    return UnitSpec(
        is_continuous=True,
        step=Decimal(step),
        minimum=Decimal(minimum),
        decimal_places=decimal_places,
        quantity_suffix=suffix,
        price_suffix=f"/{suffix}",
        aria_suffix=aria,
        quantity_label=label,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Price Unit
# ═══════════════════════════════════════════════════════════════════════════════


class PriceUnit(Enum):
    """Unit a line item is priced in."""

    EACH = "each"
    PACK = "pack"
    DOZEN = "dozen"
    BUNCH = "bunch"
    PIECE = "piece"
    LB = "lb"
    OZ = "oz"
    KG = "kg"
    G = "g"
    L = "l"
    ML = "ml"

    @property
    def spec(self) -> UnitSpec:
        return UNIT_SPECS[self]

    @property
    def is_continuous(self) -> bool:
        return UNIT_SPECS[self].is_continuous


UNIT_SPECS: dict[PriceUnit, UnitSpec] = {
    PriceUnit.EACH: UnitSpec(
        is_continuous=False,
        step=Decimal(1),
        minimum=Decimal(1),
        decimal_places=0,
        quantity_suffix="",
        price_suffix="each",
        aria_suffix="each",
        quantity_label="Quantity",
    ),
    PriceUnit.PACK: _discrete("pack", "Packs"),
    PriceUnit.DOZEN: _discrete("dozen", "Dozens"),
    PriceUnit.BUNCH: _discrete("bunch", "Bunches"),
    PriceUnit.PIECE: _discrete("piece", "Pieces"),
    PriceUnit.LB: _continuous("0.25", "0.25", 2, "lb", "per pound", "Weight (lb)"),
    # oz steps a quarter pound at a time
    PriceUnit.OZ: _continuous("4", "4", 2, "oz", "per ounce", "Weight (oz)"),
    PriceUnit.KG: _continuous("0.5", "1", 2, "kg", "per kilogram", "Weight (kg)"),
    PriceUnit.G: _continuous("50", "50", 0, "g", "per gram", "Weight (g)"),
    PriceUnit.L: _continuous("0.5", "1", 2, "L", "per liter", "Volume (L)"),
    PriceUnit.ML: _continuous("50", "50", 0, "mL", "per milliliter", "Volume (mL)"),
}

DEFAULT_UNIT = PriceUnit.EACH

# ═══════════════════════════════════════════════════════════════════════════════
# Aliases
# ═══════════════════════════════════════════════════════════════════════════════

UNIT_ALIASES: dict[str, PriceUnit] = {
    "lbs": PriceUnit.LB,
    "pound": PriceUnit.LB,
    "pounds": PriceUnit.LB,
    "ounce": PriceUnit.OZ,
    "ounces": PriceUnit.OZ,
    "floz": PriceUnit.OZ,
    "fl oz": PriceUnit.OZ,
    "fluidounce": PriceUnit.OZ,
    "kgs": PriceUnit.KG,
    "kilogram": PriceUnit.KG,
    "kilograms": PriceUnit.KG,
    "gram": PriceUnit.G,
    "grams": PriceUnit.G,
    "liter": PriceUnit.L,
    "liters": PriceUnit.L,
    "litre": PriceUnit.L,
    "litres": PriceUnit.L,
    "ltr": PriceUnit.L,
    "milliliter": PriceUnit.ML,
    "milliliters": PriceUnit.ML,
    "millilitre": PriceUnit.ML,
    "millilitres": PriceUnit.ML,
    "ea": PriceUnit.EACH,
    "pcs": PriceUnit.PIECE,
    "pc": PriceUnit.PIECE,
    "pieces": PriceUnit.PIECE,
    "packs": PriceUnit.PACK,
    "bunches": PriceUnit.BUNCH,
}


def normalize_unit(unit: str | PriceUnit | None) -> PriceUnit:
    """
    Map free-text unit names onto a PriceUnit.

        normalize_unit("Lbs.")   -> PriceUnit.LB
        normalize_unit("fl oz")  -> PriceUnit.OZ
        normalize_unit(None)     -> PriceUnit.EACH

    Unknown names fall back to EACH.
    """
    if isinstance(unit, PriceUnit):
        return unit
    if not unit:
        return DEFAULT_UNIT

    cleaned = unit.strip().lower().replace(".", "")
    collapsed = "".join(cleaned.split())

    for candidate in (cleaned, collapsed):
        if candidate in UNIT_ALIASES:
            return UNIT_ALIASES[candidate]
        try:
            return PriceUnit(candidate)
        except ValueError:
            continue

    return DEFAULT_UNIT


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "UnitSpec",
    "PriceUnit",
    "UNIT_SPECS",
    "UNIT_ALIASES",
    "DEFAULT_UNIT",
    "normalize_unit",
)
