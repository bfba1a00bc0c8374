"""
Checkout readiness.
"""

from __future__ import annotations

from dataclasses import dataclass

from kungfu import Error

from tally._types import Fulfillment
from tally.totals import CartTotals, FeeBreakdown, fee_breakdown
from tally.zone import BelowMinimumOrder, ZoneMatch, check_minimum


@dataclass(frozen=True, slots=True)
class CheckoutQuote:
    """Totals plus whatever currently blocks checkout."""

    totals: CartTotals
    zone: ZoneMatch | None
    below_minimum: BelowMinimumOrder | None
    line_count: int

    @property
    def needs_zone(self) -> bool:
        return self.totals.fulfillment is Fulfillment.DELIVERY and self.zone is None

    @property
    def can_checkout(self) -> bool:
        return self.line_count > 0 and not self.needs_zone and self.below_minimum is None

    @property
    def fees(self) -> FeeBreakdown:
        return fee_breakdown(self.totals)

    def blockers(self) -> tuple[str, ...]:
        reasons: list[str] = []
        if self.line_count == 0:
            reasons.append("Your cart is empty.")
        if self.needs_zone:
            reasons.append("Enter a delivery address or choose pickup.")
        if self.below_minimum is not None:
            reasons.append(self.below_minimum.message)
        return tuple(reasons)


def build_quote(totals: CartTotals, zone: ZoneMatch | None, line_count: int) -> CheckoutQuote:
    below: BelowMinimumOrder | None = None
    if totals.fulfillment is Fulfillment.DELIVERY and zone is not None:
        match check_minimum(totals.subtotal, zone.zone):
            case Error(short):
                below = short
    return CheckoutQuote(totals=totals, zone=zone, below_minimum=below, line_count=line_count)


__all__ = ("CheckoutQuote", "build_quote")
