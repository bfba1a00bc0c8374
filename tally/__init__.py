"""
tally — order pricing and fulfillment eligibility for a storefront.

    from tally import units as U    # Quantities, steps, unit suffixes
    from tally import items as I    # Line totals and modifiers
    from tally import tip as T      # Tip selection and delivery cap
    from tally import zone as Z     # Delivery zones and geocoding
    from tally import promo as P    # Promo codes
    from tally import totals as Tot # compute_totals()
    from tally import window as W   # Edit/cancel window
    from tally import cart as Ct    # Cart aggregate and checkout session
    from tally import cache as C    # Tiered async cache

Money is int cents everywhere. Quantities are Decimal.
"""

from tally import cache
from tally import units
from tally import items
from tally import tip
from tally import zone
from tally import promo
from tally import totals
from tally import window
from tally import cart
from tally._types import (
    Result,
    Ok,
    Error,
    LazyCoroResult,
    Cents,
    Lookup,
    Fulfillment,
    InvariantViolation,
)
from tally._money import format_cents
from tally._config import DEFAULT_ZONES, Settings
from tally._logging import JsonFormatter, setup_json_logging
from tally.totals import CartTotals, compute_totals
from tally.cart import Cart, CheckoutSession

__version__ = "0.1.0"

__all__ = (
    # Sub-packages
    "cache",
    "units",
    "items",
    "tip",
    "zone",
    "promo",
    "totals",
    "window",
    "cart",
    # Core types
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    "Cents",
    "Lookup",
    "Fulfillment",
    "InvariantViolation",
    # Entry points
    "format_cents",
    "compute_totals",
    "CartTotals",
    "Cart",
    "CheckoutSession",
    # Ambient
    "DEFAULT_ZONES",
    "Settings",
    "JsonFormatter",
    "setup_json_logging",
)
