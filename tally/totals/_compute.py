"""
compute_totals() — the one place a cart becomes money.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal

from tally._money import apply_rate, as_decimal
from tally._types import Cents, Fulfillment
from tally.items import CartItem, line_total
from tally.promo import Promo, discount_for
from tally.tip import TipPolicy, TipSelection, resolve_tip
from tally.totals._types import CartTotals, FeeBreakdown
from tally.zone import DeliveryZone

logger = logging.getLogger(__name__)

type Rate = Decimal | int | float | str

PROCESSING_RATE = Decimal("0.029")
PROCESSING_FIXED_CENTS = 30

# ═══════════════════════════════════════════════════════════════════════════════
# compute_totals()
# ═══════════════════════════════════════════════════════════════════════════════


def compute_totals(
    items: Iterable[CartItem],
    tax_rate: Rate,
    tip_selection: TipSelection,
    promo: Promo | None = None,
    zone: DeliveryZone | None = None,
    fulfillment: Fulfillment = Fulfillment.PICKUP,
    *,
    service_fee_rate: Rate = 0,
    tip_policy: TipPolicy = TipPolicy(),
) -> CartTotals:
    """
    Compose the cart total in a fixed order.

        1. subtotal      sum of line totals
        2. discount      promo amount, 0 if the subtotal fell below its minimum
        3. tax           round(taxable * tax_rate), taxable = subtotal - discount
        4. fees          round(taxable * service_fee_rate)
        5. delivery_fee  zone fee on delivery orders with a resolved zone
        6. tips          capped tip, based on the gross subtotal
        7. grand_total   subtotal - discount + tax + fees + delivery_fee + tips

    Every rate multiplication is rounded to the cent on the spot.
    Same inputs, same output: no hidden state.

    Example:
        compute_totals(items, Decimal("0.08"), TipSelection.percent(15))
    """
    tax = as_decimal(tax_rate)
    service = as_decimal(service_fee_rate)
    if tax < 0 or service < 0:
        raise ValueError("rates must be non-negative")

    subtotal = sum((line_total(item) for item in items), 0)

    discount = 0
    if promo is not None and subtotal >= promo.min_subtotal_cents:
        discount = discount_for(promo, subtotal)
    discount = min(discount, subtotal)

    taxable = subtotal - discount
    tax_cents = apply_rate(taxable, tax)
    fee_cents = apply_rate(taxable, service)

    delivery_fee = 0
    if fulfillment is Fulfillment.DELIVERY and zone is not None:
        delivery_fee = zone.fee_cents

    tip = resolve_tip(tip_selection, subtotal, fulfillment, tip_policy)

    grand_total = subtotal - discount + tax_cents + fee_cents + delivery_fee + tip.capped_tip_cents
    logger.debug(
        "totals subtotal=%d discount=%d tax=%d tips=%d grand_total=%d",
        subtotal,
        discount,
        tax_cents,
        tip.capped_tip_cents,
        grand_total,
    )

    return CartTotals(
        subtotal=subtotal,
        discount=discount,
        tax=tax_cents,
        fees=fee_cents,
        delivery_fee=delivery_fee,
        tips=tip.capped_tip_cents,
        grand_total=grand_total,
        tip=tip,
        fulfillment=fulfillment,
        promo_code=promo.code if promo is not None else None,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# fee_breakdown()
# ═══════════════════════════════════════════════════════════════════════════════


def processing_fee_estimate(grand_total_cents: Cents) -> Cents:
    """Card processing estimate: 2.9% + 30 cents, 0 for an empty charge."""
    if grand_total_cents <= 0:
        return 0
    return apply_rate(grand_total_cents, PROCESSING_RATE) + PROCESSING_FIXED_CENTS


def fee_breakdown(totals: CartTotals) -> FeeBreakdown:
    """
    Processing estimate and store net payout for a totals snapshot.

    The courier keeps the delivery tip, so it is excluded from the payout.
    Pickup tips stay with the store.
    """
    processing = processing_fee_estimate(totals.grand_total)
    courier_tip = totals.tips if totals.fulfillment is Fulfillment.DELIVERY else 0
    net = totals.grand_total - processing - totals.fees - totals.delivery_fee - courier_tip
    return FeeBreakdown(
        processing_fee_estimate=processing,
        net_payout_estimate=max(net, 0),
    )


__all__ = (
    "compute_totals",
    "processing_fee_estimate",
    "fee_breakdown",
    "PROCESSING_RATE",
    "PROCESSING_FIXED_CENTS",
)
