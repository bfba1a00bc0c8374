"""
Totals types.
"""

from __future__ import annotations

from dataclasses import dataclass

from tally._money import ensure_cents, format_cents
from tally._types import Cents, Fulfillment, InvariantViolation
from tally.tip import TipResult

_CENT_FIELDS = ("subtotal", "discount", "tax", "fees", "delivery_fee", "tips", "grand_total")


@dataclass(frozen=True, slots=True)
class CartTotals:
    """
    Authoritative money snapshot of a cart. All amounts are int cents.

    grand_total == subtotal - discount + tax + fees + delivery_fee + tips
    holds for every instance; construction fails loudly otherwise.
    """

    subtotal: Cents
    discount: Cents
    tax: Cents
    fees: Cents
    delivery_fee: Cents
    tips: Cents
    grand_total: Cents
    tip: TipResult
    fulfillment: Fulfillment
    promo_code: str | None = None

    def __post_init__(self) -> None:
        for name in _CENT_FIELDS:
            ensure_cents(name, getattr(self, name))
        if self.discount > self.subtotal:
            raise InvariantViolation("discount", self.discount)
        expected = (
            self.subtotal - self.discount + self.tax + self.fees + self.delivery_fee + self.tips
        )
        if self.grand_total != expected:
            raise InvariantViolation("grand_total", self.grand_total)

    @property
    def taxable(self) -> Cents:
        return self.subtotal - self.discount

    def display(self) -> dict[str, str]:
        """Formatted amounts keyed by field name."""
        return {name: format_cents(getattr(self, name)) for name in _CENT_FIELDS}


@dataclass(frozen=True, slots=True)
class FeeBreakdown:
    """Estimated card processing cost and what the store keeps."""

    processing_fee_estimate: Cents
    net_payout_estimate: Cents


__all__ = ("CartTotals", "FeeBreakdown")
