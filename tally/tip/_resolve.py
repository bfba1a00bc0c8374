"""
resolve_tip() — selection to cents, with the delivery cap.
"""

from __future__ import annotations

import logging

from tally._money import dollars_to_cents, percent_of, ensure_cents
from tally._types import Cents, Fulfillment
from tally.tip._types import TipMode, TipSelection, TipPolicy, TipResult

logger = logging.getLogger(__name__)


def resolve_tip(
    selection: TipSelection,
    subtotal_cents: Cents,
    fulfillment: Fulfillment,
    policy: TipPolicy = TipPolicy(),
) -> TipResult:
    """
    Resolve a tip selection into cents.

    PERCENT: round(subtotal * value / 100)
    AMOUNT:  round(value * 100)

    Delivery tips above `policy.delivery_cap_cents` are flagged and capped.

    Example:
        r = resolve_tip(TipSelection.amount(70), 10_000, Fulfillment.DELIVERY)
        r.tip_cents         # 7000
        r.exceeds_cap       # True
        r.capped_tip_cents  # 2000
    """
    ensure_cents("subtotal", subtotal_cents)

    match selection.mode:
        case TipMode.PERCENT:
            tip = percent_of(subtotal_cents, selection.value)
        case TipMode.AMOUNT:
            tip = dollars_to_cents(selection.value)

    cap = policy.delivery_cap_cents if fulfillment is Fulfillment.DELIVERY else None
    if cap is not None and tip > cap:
        logger.info("tip %d exceeds delivery cap %d, charging cap", tip, cap)
        return TipResult(tip_cents=tip, exceeds_cap=True, capped_tip_cents=cap, cap_cents=cap)

    return TipResult(tip_cents=tip, exceeds_cap=False, capped_tip_cents=tip, cap_cents=cap)


__all__ = ("resolve_tip",)
