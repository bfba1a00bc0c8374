import asyncio
from datetime import datetime
from decimal import Decimal

import pytest

from tally import Error, Fulfillment, Ok, Settings
from tally.cart import Cart, CheckoutSession, Superseded
from tally.items import Modifier, make_item
from tally.promo import DiscountType, Promo, PromoCatalog, PromoErrorKind
from tally.units import StepDirection
from tally.zone import Coordinates, ZoneErrorKind, ZoneResolver


def _value(result):
    match result:
        case Ok(value):
            return value
        case Error(e):
            pytest.fail(f"unexpected error: {e}")


class SlowGeocoder:
    """Answers each address after its own delay, so responses can arrive out of order."""

    def __init__(self, answers):
        self._answers = answers

    async def geocode(self, address):
        coords, delay = self._answers[address.cache_key()]
        await asyncio.sleep(delay)
        return coords


class SlowPromoSource:
    def __init__(self, catalog, delay):
        self._catalog = catalog
        self._delay = delay

    async def find(self, code):
        await asyncio.sleep(self._delay)
        return self._catalog.get(code)


@pytest.fixture
def cart():
    return Cart(tax_rate=Decimal("0.08"))


class TestCartLines:
    def test_end_to_end(self, cart, bread, cheese):
        cart.add_item(bread)
        cart.add_item(cheese)
        totals = cart.select_tip_percent(15)
        assert totals.grand_total == 4796

    def test_identical_lines_merge(self, cart):
        cart.add_item(make_item("a", "SUB", "Sub", 800, modifiers=[Modifier("Cheese")]))
        cart.add_item(make_item("b", "SUB", "Sub", 800, qty=2, modifiers=[Modifier("Cheese")]))
        cart.add_item(make_item("c", "SUB", "Sub", 800))
        assert len(cart.items) == 2
        assert cart.find("a").qty == 3
        assert cart.find("b") is None

    def test_same_modifier_at_another_price_is_a_new_line(self, cart):
        cart.add_item(make_item("a", "LATTE", "Latte", 500, modifiers=[Modifier("Milk")]))
        totals = cart.add_item(make_item("b", "LATTE", "Latte", 500, modifiers=[Modifier("Milk", 75)]))
        assert len(cart.items) == 2
        assert totals.subtotal == 500 + 575

    def test_taken_id_gets_a_fresh_one(self, cart):
        cart.add_item(make_item("x", "A", "Apple", 100))
        cart.add_item(make_item("x", "B", "Banana", 200))
        assert [item.id for item in cart.items] == ["x", "x-2"]
        totals = cart.remove_item("x")
        assert [item.sku for item in cart.items] == ["B"]
        assert totals.subtotal == 200

    def test_items_are_snapshots(self, cart, bread):
        cart.add_item(bread)
        cart.items[0].qty = Decimal(0)
        cart.find(bread.id).qty = Decimal(0)
        bread.qty = Decimal(9)
        assert cart.find(bread.id).qty == 2
        assert cart.totals().subtotal == 2400

    def test_set_quantity_rounds(self, cart, cheese):
        cart.add_item(cheese)
        cart.set_quantity(cheese.id, "2.337")
        assert cart.find(cheese.id).qty == Decimal("2.34")

    def test_set_quantity_below_minimum_removes(self, cart, cheese):
        cart.add_item(cheese)
        totals = cart.set_quantity(cheese.id, "0.1")
        assert cart.is_empty()
        assert totals.subtotal == 0

    def test_step_down_past_minimum_removes(self, cart):
        cart.add_item(make_item("w", "HAM", "Ham", 1299, qty="0.50", price_unit="lb"))
        cart.step_quantity("w", StepDirection.DOWN)
        assert cart.find("w").qty == Decimal("0.25")
        cart.step_quantity("w", StepDirection.DOWN)
        assert cart.find("w") is None

    def test_rapid_steps_are_not_lost(self, cart, bread):
        cart.add_item(bread)
        for _ in range(10):
            cart.step_quantity(bread.id, StepDirection.UP)
        assert cart.find(bread.id).qty == 12
        assert cart.totals().subtotal == 12 * 1200

    def test_missing_line_is_ignored(self, cart, bread):
        cart.add_item(bread)
        before = cart.totals()
        assert cart.set_quantity("missing", 3) == before
        assert cart.remove_item("missing") == before

    def test_note(self, cart, bread):
        cart.add_item(bread)
        cart.set_note(bread.id, "sliced")
        assert cart.find(bread.id).note == "sliced"

    def test_clear(self, cart, bread, catalog):
        cart.add_item(bread)
        cart.select_tip_percent(20)
        cart.apply_promo("FIVEOFF", catalog)
        totals = cart.clear()
        assert totals.grand_total == 0
        assert cart.promo is None
        assert cart.tip.percent == 0

    def test_item_count(self, cart, bread, cheese):
        cart.add_item(bread)
        cart.add_item(cheese)
        assert cart.item_count == Decimal("3.50")


class TestCartPromo:
    def test_apply_and_replace(self, cart, bread, cheese, catalog, now):
        cart.add_item(bread)
        cart.add_item(cheese)
        assert _value(cart.apply_promo("save10", catalog, now=now)).discount == 390
        totals = _value(cart.apply_promo("FIVEOFF", catalog, now=now))
        assert totals.discount == 500
        assert cart.promo.code == "FIVEOFF"

    def test_rejected_code_drops_previous_promo(self, cart, bread, catalog, now):
        cart.add_item(bread)
        _value(cart.apply_promo("FIVEOFF", catalog, now=now))
        match cart.apply_promo("OLD", catalog, now=now):
            case Error(e):
                assert e.kind is PromoErrorKind.EXPIRED
            case Ok(_):
                pytest.fail("expected EXPIRED")
        assert cart.promo is None
        assert cart.totals().discount == 0

    def test_discount_follows_subtotal(self, cart, bread, cheese, catalog, now):
        cart.add_item(bread)
        cart.add_item(cheese)
        _value(cart.apply_promo("SAVE10", catalog, now=now))
        # subtotal drops below the promo minimum of $20
        totals = cart.remove_item(bread.id)
        assert totals.subtotal == 1499
        assert totals.discount == 0

    def test_naive_promo_dates_are_utc(self, cart, bread):
        catalog = PromoCatalog([Promo("SPRING", DiscountType.PERCENTAGE, Decimal(10), start_date=datetime(2020, 1, 1))])
        cart.add_item(bread)
        assert _value(cart.apply_promo("spring", catalog)).discount == 240

    def test_clear_promo(self, cart, bread, catalog, now):
        cart.add_item(bread)
        _value(cart.apply_promo("FIVEOFF", catalog, now=now))
        assert cart.clear_promo().discount == 0


class TestCheckoutQuote:
    def test_empty_cart_cannot_check_out(self, cart):
        quote = cart.quote()
        assert not quote.can_checkout
        assert "Your cart is empty." in quote.blockers()

    def test_delivery_needs_zone(self, cart, bread):
        cart.add_item(bread)
        cart.set_fulfillment(Fulfillment.DELIVERY)
        assert cart.quote().needs_zone
        assert not cart.quote().can_checkout

    @pytest.mark.asyncio
    async def test_below_minimum_blocks_checkout_not_resolution(self, cart, resolver, catalog, near_address):
        cart.add_item(make_item("c", "COOKIE", "Cookie", 300, qty=3))
        cart.set_fulfillment(Fulfillment.DELIVERY)
        session = CheckoutSession(cart, resolver, catalog)
        totals = _value(await session.resolve_address(near_address))
        assert totals.delivery_fee == 299
        quote = cart.quote()
        assert quote.zone is not None
        assert quote.below_minimum.deficit_cents == 600
        assert not quote.can_checkout
        cart.step_quantity("c", StepDirection.UP)
        cart.step_quantity("c", StepDirection.UP)
        assert cart.quote().can_checkout

    def test_accept_tip_cap(self, cart, bread):
        cart.add_item(bread)
        cart.set_fulfillment(Fulfillment.DELIVERY)
        cart.select_tip_amount(40)
        assert cart.totals().tip.exceeds_cap
        totals = cart.accept_tip_cap()
        assert not totals.tip.exceeds_cap
        assert totals.tips == 2000


class TestCheckoutSession:
    @pytest.mark.asyncio
    async def test_out_of_zone_clears_zone(self, cart, bread, resolver, catalog, near_address, far_address):
        cart.add_item(bread)
        session = CheckoutSession(cart, resolver, catalog)
        _value(await session.resolve_address(near_address))
        match await session.resolve_address(far_address):
            case Error(e):
                assert e.kind is ZoneErrorKind.OUT_OF_ZONE
            case Ok(_):
                pytest.fail("expected OUT_OF_ZONE")
        assert cart.zone is None

    @pytest.mark.asyncio
    async def test_stale_address_response_is_dropped(self, cart, bread, store, zones, catalog, near_address, far_address):
        geocoder = SlowGeocoder({
            near_address.cache_key(): (Coordinates(41.78, -88.14), 0.05),
            far_address.cache_key(): (Coordinates(41.90, -87.62), 0.0),
        })
        cart.add_item(bread)
        session = CheckoutSession(cart, ZoneResolver(geocoder, store, zones), catalog)

        slow = asyncio.create_task(session.resolve_address(near_address))
        await asyncio.sleep(0)
        fast = await session.resolve_address(far_address)
        stale = await slow

        assert isinstance(fast, Error)
        match stale:
            case Error(Superseded(seq=seq, latest=latest)):
                assert (seq, latest) == (1, 2)
            case _:
                pytest.fail("older response must be superseded")
        # the newer (out of zone) answer stands
        assert cart.zone is None

    @pytest.mark.asyncio
    async def test_apply_promo_code(self, cart, bread, resolver, catalog, now):
        cart.add_item(bread)
        session = CheckoutSession(cart, resolver, catalog)
        totals = _value(await session.apply_promo_code("fiveoff", now=now))
        assert totals.discount == 500

    @pytest.mark.asyncio
    async def test_inflight_code_does_not_override_newer_cart_promo(self, cart, bread, resolver, catalog, now):
        cart.add_item(bread)
        session = CheckoutSession(cart, resolver, SlowPromoSource(catalog, 0.05))

        pending = asyncio.create_task(session.apply_promo_code("SAVE10", now=now))
        await asyncio.sleep(0)
        _value(cart.apply_promo("FIVEOFF", catalog, now=now))

        match await pending:
            case Error(Superseded()):
                pass
            case other:
                pytest.fail(f"older promo response must be superseded, got {other}")
        assert cart.promo.code == "FIVEOFF"
        assert cart.totals().discount == 500

    @pytest.mark.asyncio
    async def test_refresh_runs_both_lookups(self, cart, bread, cheese, resolver, catalog, near_address, now):
        cart.add_item(bread)
        cart.add_item(cheese)
        cart.set_fulfillment(Fulfillment.DELIVERY)
        session = CheckoutSession(cart, resolver, catalog)
        result = await session.refresh(address=near_address, code="SAVE10", now=now)
        assert isinstance(result.zone, Ok)
        assert isinstance(result.promo, Ok)
        assert result.totals.delivery_fee == 299
        assert result.totals.discount == 390

    @pytest.mark.asyncio
    async def test_refresh_with_nothing_to_do(self, cart, resolver, catalog):
        session = CheckoutSession(cart, resolver, catalog)
        result = await session.refresh()
        assert result.zone is None
        assert result.promo is None


def test_cart_from_settings(monkeypatch, bread):
    monkeypatch.setenv("TALLY_TAX_RATE", "0.10")
    monkeypatch.setenv("TALLY_DELIVERY_TIP_CAP_CENTS", "1000")
    cart = Cart.from_settings(Settings.from_env())
    cart.add_item(bread)
    cart.set_fulfillment(Fulfillment.DELIVERY)
    totals = cart.select_tip_amount(15)
    assert totals.tax == 240
    assert totals.tips == 1000
