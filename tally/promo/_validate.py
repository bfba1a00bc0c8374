"""
Promo validation and discount computation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from combinators import lift as L
from kungfu import LazyCoroResult, Result, Ok, Error

from tally._money import ensure_cents, percent_of, round_cents
from tally._types import Cents, Lookup, as_utc
from tally.promo._types import (
    CustomerHistory,
    Discount,
    DiscountType,
    NEW_CUSTOMER,
    Promo,
    PromoError,
    PromoErrorKind,
    normalize_code,
)
from tally.promo._catalog import PromoCatalog, PromoSource

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# discount_for() — Amount Off
# ═══════════════════════════════════════════════════════════════════════════════


def discount_for(promo: Promo, subtotal_cents: Cents) -> Cents:
    """
    Discount in cents at `subtotal_cents`.

    Percentage: round(subtotal * value / 100). Fixed: the literal amount.
    Either way capped by max_discount_cents and then by the subtotal.
    """
    ensure_cents("subtotal", subtotal_cents)
    if promo.discount_type is DiscountType.PERCENTAGE:
        amount = percent_of(subtotal_cents, promo.discount_value)
    else:
        amount = round_cents(promo.discount_value)
    if promo.max_discount_cents is not None:
        amount = min(amount, promo.max_discount_cents)
    return min(amount, subtotal_cents)


# ═══════════════════════════════════════════════════════════════════════════════
# check_promo() — Eligibility
# ═══════════════════════════════════════════════════════════════════════════════


def check_promo(
    promo: Promo | None,
    code: str,
    subtotal_cents: Cents,
    history: CustomerHistory,
    now: datetime,
) -> Result[Discount, PromoError]:
    """Run the eligibility rules against an already looked-up record."""
    norm = normalize_code(code)
    now = as_utc(now)

    def reject(kind: PromoErrorKind, min_subtotal: Cents | None = None) -> Error[PromoError]:
        logger.info("promo %s rejected: %s", norm, kind.name)
        return Error(PromoError(kind, code=norm, min_subtotal_cents=min_subtotal))

    if promo is None or not promo.is_active:
        return reject(PromoErrorKind.NOT_FOUND)
    if promo.start_date is not None and now < promo.start_date:
        return reject(PromoErrorKind.NOT_STARTED)
    if promo.expire_date is not None and now > promo.expire_date:
        return reject(PromoErrorKind.EXPIRED)
    if promo.usage_limit is not None and promo.usage_count >= promo.usage_limit:
        return reject(PromoErrorKind.USAGE_LIMIT)
    if promo.first_time_only and history.has_completed_order:
        return reject(PromoErrorKind.NOT_FIRST_TIME)
    if promo.one_per_customer and history.has_redeemed(promo.code):
        return reject(PromoErrorKind.ALREADY_USED)
    if subtotal_cents < promo.min_subtotal_cents:
        return reject(PromoErrorKind.BELOW_MINIMUM, promo.min_subtotal_cents)

    return Ok(Discount(promo=promo, discount_cents=discount_for(promo, subtotal_cents)))


# ═══════════════════════════════════════════════════════════════════════════════
# apply_promo() — Sync Entry
# ═══════════════════════════════════════════════════════════════════════════════


def apply_promo(
    code: str,
    catalog: PromoCatalog,
    subtotal_cents: Cents,
    history: CustomerHistory = NEW_CUSTOMER,
    now: datetime | None = None,
) -> Result[Discount, PromoError]:
    """
    Validate `code` against `catalog` and compute the discount.

    Short-circuits at the first failing rule: blank code, unknown or
    inactive, not started, expired, usage limit, first-time only, already
    redeemed, below minimum subtotal.

        apply_promo("save10", catalog, 5000)
        # Ok(Discount(promo=..., discount_cents=500))
    """
    ensure_cents("subtotal", subtotal_cents)
    if not code.strip():
        return Error(PromoError(PromoErrorKind.EMPTY_CODE))
    return check_promo(
        catalog.get(code),
        code,
        subtotal_cents,
        history,
        now or datetime.now(timezone.utc),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# validate_promo() — Async Entry
# ═══════════════════════════════════════════════════════════════════════════════


def _lookup_failed(code: str) -> Callable[[Exception], PromoError]:
    def on_error(e: Exception) -> PromoError:
        logger.warning("promo lookup for %s failed: %s", code, e)
        return PromoError(PromoErrorKind.LOOKUP_FAILED, code=code, detail=str(e))

    return on_error


def validate_promo(
    code: str,
    source: PromoSource,
    subtotal_cents: Cents,
    history: CustomerHistory = NEW_CUSTOMER,
    now: datetime | None = None,
) -> Lookup[Discount, PromoError]:
    """
    apply_promo() against an async source.

    Source exceptions become LOOKUP_FAILED. Lazy: nothing runs until awaited.
    """
    ensure_cents("subtotal", subtotal_cents)
    norm = normalize_code(code)
    lookup = L.catching_async(lambda: source.find(norm), on_error=_lookup_failed(norm))

    async def execute() -> Result[Discount, PromoError]:
        if not norm:
            return Error(PromoError(PromoErrorKind.EMPTY_CODE))
        match await lookup:
            case Ok(promo):
                return check_promo(
                    promo,
                    norm,
                    subtotal_cents,
                    history,
                    now or datetime.now(timezone.utc),
                )
            case Error(e):
                return Error(e)

    return LazyCoroResult(execute)


__all__ = ("discount_for", "check_promo", "apply_promo", "validate_promo")
