"""
Quantity operations — clamp, step, format.

Quantities are Decimals. Raw floats are refused at the boundary so that
repeated +/- on a weight item never accumulates binary error.
"""

from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from enum import Enum

from tally._money import format_cents
from tally.units._types import PriceUnit, UnitSpec

logger = logging.getLogger(__name__)

type QuantityLike = Decimal | int | str

# ═══════════════════════════════════════════════════════════════════════════════
# Conversion
# ═══════════════════════════════════════════════════════════════════════════════


def to_quantity(raw: QuantityLike) -> Decimal:
    """
    Convert a quantity crossing the API boundary to Decimal.

        to_quantity("1.5")  -> Decimal("1.5")
        to_quantity(2)      -> Decimal("2")
        to_quantity(1.5)    -> TypeError
    """
    if isinstance(raw, bool) or isinstance(raw, float):
        raise TypeError(
            f"quantity must be Decimal, int or decimal string, got {type(raw).__name__}"
        )
    if isinstance(raw, Decimal):
        value = raw
    else:
        try:
            value = Decimal(str(raw).strip())
        except InvalidOperation as e:
            raise ValueError(f"not a quantity: {raw!r}") from e
    if not value.is_finite():
        raise ValueError(f"not a finite quantity: {raw!r}")
    return value


def _quantize(value: Decimal, spec: UnitSpec) -> Decimal:
    return value.quantize(spec.quantum, rounding=ROUND_HALF_UP)


# ═══════════════════════════════════════════════════════════════════════════════
# clamp() — Round + Bound
# ═══════════════════════════════════════════════════════════════════════════════


def clamp(
    value: QuantityLike,
    unit: PriceUnit,
    maximum: QuantityLike | None = None,
) -> Decimal:
    """
    Round to the unit's precision and clamp into [minimum, maximum].

    Out-of-bounds input is recovered here, never reported as an error.

        clamp("1.337", PriceUnit.LB)  -> Decimal("1.34")
        clamp("0", PriceUnit.LB)      -> Decimal("0.25")
        clamp("7", PriceUnit.EACH, 5) -> Decimal("5")
    """
    spec = unit.spec
    result = _quantize(to_quantity(value), spec)
    if maximum is not None:
        result = min(result, _quantize(to_quantity(maximum), spec))
    result = max(result, spec.minimum)
    if result != _quantize(to_quantity(value), spec):
        logger.debug("quantity %s clamped to %s %s", value, result, unit.value)
    return _quantize(result, spec)


# ═══════════════════════════════════════════════════════════════════════════════
# step_quantity() — +/- One Step
# ═══════════════════════════════════════════════════════════════════════════════


class StepDirection(Enum):
    UP = 1
    DOWN = -1


def step_quantity(
    value: QuantityLike,
    unit: PriceUnit,
    direction: StepDirection,
    maximum: QuantityLike | None = None,
) -> Decimal | None:
    """
    Add or subtract one step.

    Returns None when a decrement would fall below the unit minimum; the
    cart treats that as "remove this line", not as a clamp.

        step_quantity("1.50", PriceUnit.LB, StepDirection.UP)    -> Decimal("1.75")
        step_quantity("0.25", PriceUnit.LB, StepDirection.DOWN)  -> None
    """
    spec = unit.spec
    current = _quantize(to_quantity(value), spec)
    moved = current + spec.step * direction.value

    if direction is StepDirection.DOWN:
        if moved < spec.minimum:
            return None
        return _quantize(moved, spec)

    if maximum is not None:
        moved = min(moved, _quantize(to_quantity(maximum), spec))
    return _quantize(max(moved, spec.minimum), spec)


# ═══════════════════════════════════════════════════════════════════════════════
# Formatting
# ═══════════════════════════════════════════════════════════════════════════════


def format_quantity_value(value: QuantityLike, unit: PriceUnit) -> str:
    """Quantity digits at the unit's precision, no suffix."""
    spec = unit.spec
    return f"{_quantize(to_quantity(value), spec):.{spec.decimal_places}f}"


def format_quantity(value: QuantityLike, unit: PriceUnit) -> str:
    """
    Quantity with suffix.

        format_quantity("1.5", PriceUnit.LB)  -> "1.50 lb"
        format_quantity(3, PriceUnit.EACH)    -> "3"
        format_quantity(2, PriceUnit.PACK)    -> "2 pack"
    """
    text = format_quantity_value(value, unit)
    suffix = unit.spec.quantity_suffix
    return f"{text} {suffix}" if suffix else text


def _label_or(unit: PriceUnit, unit_label: str | None, fallback: str) -> str:
    if unit_label and unit_label.strip():
        label = unit_label.strip()
        # a label that just repeats the unit name gets the canonical suffix
        if label.lower() == unit.value:
            return fallback
        return label
    return fallback


def format_price_suffix(unit: PriceUnit, unit_label: str | None = None) -> str:
    """Price suffix: "/lb", "each", "per pack", or a custom label."""
    return _label_or(unit, unit_label, unit.spec.price_suffix)


def format_aria_suffix(unit: PriceUnit, unit_label: str | None = None) -> str:
    """Spoken suffix: "per pound", "each", or a custom label."""
    return _label_or(unit, unit_label, unit.spec.aria_suffix)


def format_unit_price(
    unit_price_cents: int,
    unit: PriceUnit,
    unit_label: str | None = None,
) -> str:
    """
    Shelf price text.

        format_unit_price(999, PriceUnit.LB)     -> "$9.99/lb"
        format_unit_price(1200, PriceUnit.EACH)  -> "$12.00 each"
    """
    suffix = format_price_suffix(unit, unit_label)
    joiner = "" if suffix.startswith("/") else " "
    return f"{format_cents(unit_price_cents)}{joiner}{suffix}"


__all__ = (
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
)
