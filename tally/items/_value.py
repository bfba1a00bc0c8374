"""
Line item valuation.

    line_total = round((unit_price + sum(modifier prices)) * qty)

Pure functions, no side effects.
"""

from __future__ import annotations

from decimal import Decimal

from tally._money import round_cents, format_price_delta
from tally._types import Cents
from tally.items._types import CartItem


def modifiers_total(item: CartItem) -> Cents:
    """Sum of modifier deltas for one unit."""
    return sum((m.price_cents for m in item.modifiers), 0)


def line_total(item: CartItem) -> Cents:
    """Line contribution in cents, rounded half-up."""
    per_unit = item.unit_price_cents + modifiers_total(item)
    return round_cents(Decimal(per_unit) * item.qty)


def modifier_lines(item: CartItem) -> tuple[tuple[str, str | None], ...]:
    """
    Display pairs (name, price text).

    Zero-price modifiers are listed with no price text.
    """
    return tuple((m.name, format_price_delta(m.price_cents)) for m in item.modifiers)


def line_key(item: CartItem) -> tuple[str, tuple[tuple[str, Cents], ...], str]:
    """Identity for merging: same sku, same modifiers at the same prices, same note."""
    return (
        item.sku,
        tuple(sorted((m.name, m.price_cents) for m in item.modifiers)),
        item.note.strip(),
    )


__all__ = ("modifiers_total", "line_total", "modifier_lines", "line_key")
