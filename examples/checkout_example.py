"""
Checkout — a cart from first item to a payable total.

Key concepts:
- Cart = the only place state changes; every mutation returns totals
- CheckoutSession = async lookups (geocode, promo), latest request wins
- CheckoutQuote = totals plus whatever blocks checkout

Level 4: tally.cart
Level 3: tally.totals / tally.zone / tally.promo
Level 2: kungfu.Result
"""

import asyncio
from datetime import datetime, timezone
from decimal import Decimal

from kungfu import Ok, Error

from tally import Fulfillment, Settings, format_cents, setup_json_logging
from tally import cart as Ct
from tally import items as I
from tally import promo as P
from tally import window as W
from tally import zone as Z
from tally.units import StepDirection


def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


def show(label: str, totals) -> None:
    print(f"   {label}: subtotal={format_cents(totals.subtotal)} "
          f"discount={format_cents(totals.discount)} tax={format_cents(totals.tax)} "
          f"delivery={format_cents(totals.delivery_fee)} tip={format_cents(totals.tips)} "
          f"→ {format_cents(totals.grand_total)}")


# ═══════════════════════════════════════════════════════════════════════════════
# Collaborators (in a real app: a geocoding API and the promo service)
# ═══════════════════════════════════════════════════════════════════════════════

settings = Settings.from_env()

home = Z.Address(line1="100 Main St", city="Naperville", state="IL", zip="60540")
geocoder = Z.StaticGeocoder({home.cache_key(): Z.Coordinates(41.78, -88.14)})
resolver = Z.ZoneResolver(geocoder, settings.store, settings.zone_table)

promos = P.PromoCatalog([
    P.Promo("SAVE10", P.DiscountType.PERCENTAGE, Decimal(10), min_subtotal_cents=2000),
])


async def main() -> None:
    banner("Checkout: cart → zone → promo → tip")

    cart = Ct.Cart.from_settings(settings)
    session = Ct.CheckoutSession(cart, resolver, promos)

    print("\n1. Add items (weight items take decimal quantities):")
    cart.add_item(I.make_item("l1", "BREAD", "Sourdough", 1200, qty=2))
    show("added", cart.add_item(I.make_item("l2", "GOUDA", "Gouda", 999, qty="1.5", price_unit="lb")))

    print("\n2. Tap + on the cheese twice:")
    cart.step_quantity("l2", StepDirection.UP)
    show("stepped", cart.step_quantity("l2", StepDirection.UP))

    print("\n3. Switch to delivery, resolve address and promo together:")
    cart.set_fulfillment(Fulfillment.DELIVERY)
    refreshed = await session.refresh(address=home, code="save10")
    match refreshed.zone:
        case Ok(_):
            zm = cart.zone
            print(f"   zone={zm.zone.label} distance={Z.format_distance(zm.distance_km)}")
        case Error(e):
            print(f"   zone error: {e.message}")
    show("refreshed", refreshed.totals)

    print("\n4. Generous tip on delivery (capped):")
    totals = cart.select_tip_amount(30)
    print(f"   {totals.tip.warning()}")
    show("auto-corrected", cart.accept_tip_cap())

    quote = cart.quote()
    print(f"\n5. Ready: can_checkout={quote.can_checkout} "
          f"net payout≈{format_cents(quote.fees.net_payout_estimate)}")

    print("\n6. Order placed; cancel window:")
    placed_at = datetime.now(timezone.utc)
    state = W.get_edit_window_state(placed_at, window_seconds=settings.edit_window_seconds)
    print(f"   {state.formatted} left to cancel")

    print("\nDone!")


if __name__ == "__main__":
    setup_json_logging("WARNING")
    asyncio.run(main())
