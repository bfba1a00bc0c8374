"""
Tip — percent or fixed tips with a delivery-only cap.

    from tally import tip as T

    result = T.resolve_tip(T.TipSelection.percent(15), 3899, Fulfillment.PICKUP)
    result.capped_tip_cents  # 585
"""

from __future__ import annotations

from tally.tip._types import (
    TipMode,
    TipSelection,
    DEFAULT_DELIVERY_TIP_CAP_CENTS,
    TipPolicy,
    TipResult,
)
from tally.tip._resolve import resolve_tip
from tally.tip._state import DEFAULT_PRESETS, TipState

__all__ = (
    "TipMode",
    "TipSelection",
    "DEFAULT_DELIVERY_TIP_CAP_CENTS",
    "TipPolicy",
    "TipResult",
    "resolve_tip",
    "DEFAULT_PRESETS",
    "TipState",
)
