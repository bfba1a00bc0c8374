"""
Money — integer-cent arithmetic.

Every multiplication by a rate or percentage is rounded to the cent
immediately (half-up), so a multi-item cart cannot drift.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

from tally._types import Cents, InvariantViolation

_ONE = Decimal(1)
_HUNDRED = Decimal(100)

# ═══════════════════════════════════════════════════════════════════════════════
# Conversion
# ═══════════════════════════════════════════════════════════════════════════════


def as_decimal(value: Decimal | int | float | str) -> Decimal:
    """
    Convert a rate, percentage or currency value to Decimal.

    Floats go through their shortest repr, so 0.08 becomes Decimal("0.08")
    and not the binary expansion.
    """
    if isinstance(value, bool):
        raise TypeError("bool is not a number")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        value = repr(value)
    try:
        result = Decimal(value)
    except InvalidOperation as e:
        raise ValueError(f"not a number: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"not a finite number: {value!r}")
    return result


def round_cents(amount: Decimal) -> Cents:
    """Round a fractional cent amount to the nearest cent, halves up."""
    return int(amount.quantize(_ONE, rounding=ROUND_HALF_UP))


def apply_rate(cents: Cents, rate: Decimal | int | float | str) -> Cents:
    """cents * rate, rounded. `rate` is a fraction (0.08 for 8%)."""
    return round_cents(Decimal(cents) * as_decimal(rate))


def percent_of(cents: Cents, percent: Decimal | int | float | str) -> Cents:
    """cents * percent / 100, rounded."""
    return round_cents(Decimal(cents) * as_decimal(percent) / _HUNDRED)


def dollars_to_cents(dollars: Decimal | int | float | str) -> Cents:
    """Currency units to cents, rounded."""
    return round_cents(as_decimal(dollars) * _HUNDRED)


# ═══════════════════════════════════════════════════════════════════════════════
# Invariants
# ═══════════════════════════════════════════════════════════════════════════════


def ensure_cents(field: str, value: object) -> Cents:
    """Return value if it is a non-negative int, else raise InvariantViolation."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvariantViolation(field, value)
    return value


# ═══════════════════════════════════════════════════════════════════════════════
# Formatting
# ═══════════════════════════════════════════════════════════════════════════════


def format_cents(cents: Cents) -> str:
    """
    Render cents as US currency.

        format_cents(200)     -> "$2.00"
        format_cents(123456)  -> "$1,234.56"
        format_cents(-50)     -> "-$0.50"
    """
    sign = "-" if cents < 0 else ""
    dollars, rem = divmod(abs(cents), 100)
    return f"{sign}${dollars:,}.{rem:02d}"


def format_price_delta(cents: Cents) -> str | None:
    """Modifier price text: "+$0.50", "-$1.00", or None for zero."""
    if cents == 0:
        return None
    sign = "+" if cents > 0 else "-"
    return f"{sign}{format_cents(abs(cents))}"


__all__ = (
    "as_decimal",
    "round_cents",
    "apply_rate",
    "percent_of",
    "dollars_to_cents",
    "ensure_cents",
    "format_cents",
    "format_price_delta",
)
