"""
Promo codes — eligibility rules and discount amounts.

Usage:
    from tally import promo as P

    catalog = P.PromoCatalog([
        P.Promo("SAVE10", P.DiscountType.PERCENTAGE, Decimal(10), min_subtotal_cents=2000),
    ])

    match P.apply_promo("save10", catalog, subtotal_cents=5000):
        case Ok(d):
            d.discount_cents  # 500
        case Error(e):
            e.message

    # Against a remote source
    result = await P.validate_promo(code, source, subtotal_cents)
"""

from tally.promo._types import (
    DiscountType,
    normalize_code,
    Promo,
    CustomerHistory,
    NEW_CUSTOMER,
    Discount,
    PromoErrorKind,
    PromoError,
)
from tally.promo._catalog import PromoSource, PromoCatalog
from tally.promo._validate import discount_for, check_promo, apply_promo, validate_promo

__all__ = (
    # Types
    "DiscountType",
    "normalize_code",
    "Promo",
    "CustomerHistory",
    "NEW_CUSTOMER",
    "Discount",
    "PromoErrorKind",
    "PromoError",
    # Lookup
    "PromoSource",
    "PromoCatalog",
    # Validation
    "discount_for",
    "check_promo",
    "apply_promo",
    "validate_promo",
)
