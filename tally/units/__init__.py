"""
Units — price units and quantity rules.

    from tally import units as U

    qty = U.clamp("1.337", U.PriceUnit.LB)                      # Decimal("1.34")
    nxt = U.step_quantity(qty, U.PriceUnit.LB, U.StepDirection.UP)
    U.format_quantity(nxt, U.PriceUnit.LB)                      # "1.59 lb"

A decrement below the unit minimum returns None: remove the line.
"""

from __future__ import annotations

from tally.units._types import (
    UnitSpec,
    PriceUnit,
    UNIT_SPECS,
    UNIT_ALIASES,
    DEFAULT_UNIT,
    normalize_unit,
)
from tally.units._ops import (
    QuantityLike,
    to_quantity,
    clamp,
    StepDirection,
    step_quantity,
    format_quantity_value,
    format_quantity,
    format_price_suffix,
    format_aria_suffix,
    format_unit_price,
)
from tally.units._draft import QuantityDraft

__all__ = (
    "UnitSpec",
    "PriceUnit",
    "UNIT_SPECS",
    "UNIT_ALIASES",
    "DEFAULT_UNIT",
    "normalize_unit",
    "QuantityLike",
    "to_quantity",
    "clamp",
    "StepDirection",
    "step_quantity",
    "format_quantity_value",
    "format_quantity",
    "format_price_suffix",
    "format_aria_suffix",
    "format_unit_price",
    "QuantityDraft",
)
