"""
Tip types — selection, policy, result.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from tally._money import as_decimal, format_cents
from tally._types import Cents

# ═══════════════════════════════════════════════════════════════════════════════
# Selection — Tagged Union
# ═══════════════════════════════════════════════════════════════════════════════


class TipMode(Enum):
    PERCENT = "percent"
    AMOUNT = "amount"


@dataclass(frozen=True, slots=True)
class TipSelection:
    """
    Active tip choice.

    PERCENT: `value` is a percentage of the gross subtotal.
    AMOUNT:  `value` is in currency units (dollars), not cents.

    Negative values are treated as zero.
    """

    mode: TipMode
    value: Decimal

    def __init__(self, mode: TipMode, value: Decimal | int | float | str) -> None:
        object.__setattr__(self, "mode", mode)
        object.__setattr__(self, "value", max(as_decimal(value), Decimal(0)))

    @staticmethod
    def percent(value: Decimal | int | float | str) -> TipSelection:
        return TipSelection(TipMode.PERCENT, value)

    @staticmethod
    def amount(value: Decimal | int | float | str) -> TipSelection:
        return TipSelection(TipMode.AMOUNT, value)

    @staticmethod
    def none() -> TipSelection:
        return TipSelection(TipMode.PERCENT, 0)


# ═══════════════════════════════════════════════════════════════════════════════
# Policy
# ═══════════════════════════════════════════════════════════════════════════════

DEFAULT_DELIVERY_TIP_CAP_CENTS: Cents = 2000
"""Courier integration rejects tips above $20.00."""


@dataclass(frozen=True, slots=True)
class TipPolicy:
    """
    Platform tip limits.

    `delivery_cap_cents` applies to delivery orders only; None disables it.
    Pickup tips are never capped.
    """

    delivery_cap_cents: Cents | None = DEFAULT_DELIVERY_TIP_CAP_CENTS


# ═══════════════════════════════════════════════════════════════════════════════
# Result
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class TipResult:
    """
    Nominal and charged tip.

    Receipts and payment capture need both: `tip_cents` is what the customer
    picked, `capped_tip_cents` is what is actually charged and paid out.
    """

    tip_cents: Cents
    exceeds_cap: bool
    capped_tip_cents: Cents
    cap_cents: Cents | None = None

    @property
    def excess_cents(self) -> Cents:
        return self.tip_cents - self.capped_tip_cents

    def warning(self) -> str | None:
        """User-facing notice when the cap kicks in. Not an error."""
        if not self.exceeds_cap:
            return None
        return (
            f"Delivery tips are limited to {format_cents(self.capped_tip_cents)}. "
            f"Your tip of {format_cents(self.tip_cents)} exceeds this limit; "
            f"the courier will receive {format_cents(self.capped_tip_cents)} "
            "and you won't be charged for the excess."
        )

    def auto_correct(self) -> TipSelection | None:
        """Selection that sets the tip to exactly the cap."""
        if not self.exceeds_cap:
            return None
        return TipSelection.amount(Decimal(self.capped_tip_cents) / 100)


__all__ = (
    "TipMode",
    "TipSelection",
    "DEFAULT_DELIVERY_TIP_CAP_CENTS",
    "TipPolicy",
    "TipResult",
)
