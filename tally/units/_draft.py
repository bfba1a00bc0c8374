"""
Quantity draft — free-text editing buffer for weight inputs.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

from tally.units._types import PriceUnit
from tally.units._ops import QuantityLike, clamp, format_quantity_value, to_quantity

_PARTIAL_NUMBER = re.compile(r"^\d*(?:\.\d*)?$")


class QuantityDraft:
    """
    Text buffer that tolerates half-typed numbers while editing.

    `edit()` accepts "", "." and "1." so the user can keep typing; only
    `commit()` (on blur or confirm) parses, clamps and publishes a value.
    Unparseable text on commit reverts to the last committed quantity.

    Example:
        draft = QuantityDraft(Decimal("1.50"), PriceUnit.LB)
        draft.edit("2.")      # True, draft.text == "2."
        draft.edit("2.x")     # False, rejected
        draft.commit()        # Decimal("2.00")
    """

    __slots__ = ("_unit", "_maximum", "_committed", "_text")

    def __init__(
        self,
        committed: QuantityLike,
        unit: PriceUnit,
        maximum: QuantityLike | None = None,
    ) -> None:
        self._unit = unit
        self._maximum = maximum
        self._committed = clamp(committed, unit, maximum)
        self._text = format_quantity_value(self._committed, unit)

    @property
    def text(self) -> str:
        return self._text

    @property
    def committed(self) -> Decimal:
        return self._committed

    def edit(self, text: str) -> bool:
        """Replace the buffer if `text` is a (possibly partial) number."""
        if not _PARTIAL_NUMBER.match(text):
            return False
        self._text = text
        return True

    def commit(self) -> Decimal:
        """Parse, clamp and publish the buffer."""
        try:
            parsed = to_quantity(self._text)
        except (ValueError, InvalidOperation):
            self._text = format_quantity_value(self._committed, self._unit)
            return self._committed

        self._committed = clamp(parsed, self._unit, self._maximum)
        self._text = format_quantity_value(self._committed, self._unit)
        return self._committed

    def sync(self, committed: QuantityLike) -> None:
        """Adopt a quantity changed elsewhere (e.g. the +/- buttons)."""
        self._committed = clamp(committed, self._unit, self._maximum)
        self._text = format_quantity_value(self._committed, self._unit)


__all__ = ("QuantityDraft",)
