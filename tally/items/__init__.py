"""
Items — cart lines and line valuation.

    from tally import items as I

    item = I.make_item("l1", "RIBEYE", "Ribeye", 999, qty="1.5", price_unit="lb")
    I.line_total(item)  # 1499
"""

from __future__ import annotations

from tally.items._types import Modifier, CartItem, make_item
from tally.items._value import modifiers_total, line_total, modifier_lines, line_key

__all__ = (
    "Modifier",
    "CartItem",
    "make_item",
    "modifiers_total",
    "line_total",
    "modifier_lines",
    "line_key",
)
