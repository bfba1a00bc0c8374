from datetime import datetime, timezone
from decimal import Decimal

import pytest

from tally import Error, Ok
from tally.promo import (
    CustomerHistory,
    DiscountType,
    Promo,
    PromoCatalog,
    PromoError,
    PromoErrorKind,
    apply_promo,
    discount_for,
    validate_promo,
)


def _discount(result):
    match result:
        case Ok(d):
            return d.discount_cents
        case Error(e):
            pytest.fail(f"unexpected promo error: {e.kind}")


def _kind(result):
    match result:
        case Error(e):
            return e.kind
        case Ok(d):
            pytest.fail(f"expected rejection, got {d}")


class BrokenSource:
    async def find(self, code):
        raise TimeoutError("promo service timed out")


def test_percentage_discount(catalog, now):
    assert _discount(apply_promo("SAVE10", catalog, 5000, now=now)) == 500


def test_codes_are_case_insensitive(catalog, now):
    lower = apply_promo("save10", catalog, 3899, now=now)
    upper = apply_promo("  SAVE10 ", catalog, 3899, now=now)
    assert _discount(lower) == _discount(upper) == 390


def test_fixed_discount_is_capped_by_subtotal(catalog, now):
    assert _discount(apply_promo("FIVEOFF", catalog, 5000, now=now)) == 500
    assert _discount(apply_promo("FIVEOFF", catalog, 350, now=now)) == 350


def test_percentage_discount_is_capped_by_max(catalog, now):
    assert _discount(apply_promo("BIGCAP", catalog, 10_000, now=now)) == 1000
    assert _discount(apply_promo("BIGCAP", catalog, 1000, now=now)) == 500


def test_full_discount(catalog, now):
    assert _discount(apply_promo("FREE", catalog, 3899, now=now)) == 3899


@pytest.mark.parametrize(
    "code, subtotal, history, kind",
    [
        ("", 5000, CustomerHistory(), PromoErrorKind.EMPTY_CODE),
        ("NOPE", 5000, CustomerHistory(), PromoErrorKind.NOT_FOUND),
        ("PAUSED", 5000, CustomerHistory(), PromoErrorKind.NOT_FOUND),
        ("SOON", 5000, CustomerHistory(), PromoErrorKind.NOT_STARTED),
        ("OLD", 5000, CustomerHistory(), PromoErrorKind.EXPIRED),
        ("GONE", 5000, CustomerHistory(), PromoErrorKind.USAGE_LIMIT),
        ("WELCOME", 5000, CustomerHistory(has_completed_order=True), PromoErrorKind.NOT_FIRST_TIME),
        ("ONCE", 5000, CustomerHistory(redeemed_codes=frozenset({"once"})), PromoErrorKind.ALREADY_USED),
        ("SAVE10", 1999, CustomerHistory(), PromoErrorKind.BELOW_MINIMUM),
    ],
)
def test_rejections(catalog, now, code, subtotal, history, kind):
    assert _kind(apply_promo(code, catalog, subtotal, history, now)) is kind


def test_rejection_order_short_circuits(now):
    promo = Promo(
        "STRICT",
        DiscountType.PERCENTAGE,
        Decimal(10),
        min_subtotal_cents=10_000,
        first_time_only=True,
        expire_date=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )
    catalog = PromoCatalog([promo])
    history = CustomerHistory(has_completed_order=True)
    # expired wins over first-time and minimum
    assert _kind(apply_promo("STRICT", catalog, 100, history, now)) is PromoErrorKind.EXPIRED


def test_each_rejection_has_its_own_message():
    messages = set()
    for kind in PromoErrorKind:
        messages.add(PromoError(kind).message)
    assert len(messages) == len(PromoErrorKind)


def test_below_minimum_message_names_the_minimum(catalog, now):
    match apply_promo("SAVE10", catalog, 1000, now=now):
        case Error(e):
            assert "$20.00" in e.message
        case Ok(_):
            pytest.fail("expected BELOW_MINIMUM")


def test_naive_promo_dates_are_utc(now):
    spring = Promo("SPRING", DiscountType.PERCENTAGE, Decimal(10), start_date=datetime(2020, 1, 1))
    summer = Promo("SUMMER", DiscountType.PERCENTAGE, Decimal(10), expire_date=datetime(2026, 5, 31))
    catalog = PromoCatalog([spring, summer])

    assert spring.start_date.tzinfo is timezone.utc
    assert _discount(apply_promo("spring", catalog, 5000)) == 500
    assert _kind(apply_promo("SUMMER", catalog, 5000, now=now)) is PromoErrorKind.EXPIRED
    # a naive `now` is read as UTC too
    naive_now = now.replace(tzinfo=None)
    assert _kind(apply_promo("SUMMER", catalog, 5000, now=naive_now)) is PromoErrorKind.EXPIRED


def test_percentage_out_of_range_is_rejected_at_construction():
    with pytest.raises(ValueError):
        Promo("BAD", DiscountType.PERCENTAGE, Decimal(120))
    with pytest.raises(ValueError):
        Promo("BAD", DiscountType.FIXED_AMOUNT, Decimal("1.5"))


def test_discount_for_never_exceeds_subtotal():
    promo = Promo("X", DiscountType.FIXED_AMOUNT, Decimal(10_000))
    for subtotal in (0, 1, 999, 10_000, 20_000):
        assert 0 <= discount_for(promo, subtotal) <= subtotal


@pytest.mark.asyncio
async def test_validate_promo_against_async_source(catalog, now):
    result = await validate_promo("save10", catalog, 5000, now=now)
    assert _discount(result) == 500


@pytest.mark.asyncio
async def test_validate_promo_maps_source_failures(now):
    result = await validate_promo("SAVE10", BrokenSource(), 5000, now=now)
    assert _kind(result) is PromoErrorKind.LOOKUP_FAILED


@pytest.mark.asyncio
async def test_validate_promo_blank_code(catalog, now):
    assert _kind(await validate_promo("  ", catalog, 5000, now=now)) is PromoErrorKind.EMPTY_CODE
