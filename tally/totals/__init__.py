"""
Totals — subtotal, discount, tax, fees, delivery, tip, grand total.

Usage:
    from tally import totals as Tot

    totals = Tot.compute_totals(
        items,
        tax_rate=Decimal("0.08"),
        tip_selection=TipSelection.percent(15),
    )
    totals.grand_total  # int cents

    Tot.fee_breakdown(totals).net_payout_estimate
"""

from tally.totals._types import CartTotals, FeeBreakdown
from tally.totals._compute import (
    compute_totals,
    processing_fee_estimate,
    fee_breakdown,
    PROCESSING_RATE,
    PROCESSING_FIXED_CENTS,
)

__all__ = (
    "CartTotals",
    "FeeBreakdown",
    "compute_totals",
    "processing_fee_estimate",
    "fee_breakdown",
    "PROCESSING_RATE",
    "PROCESSING_FIXED_CENTS",
)
