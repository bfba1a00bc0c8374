"""
Cart — the aggregate, checkout readiness, and async checkout lookups.

Usage:
    from tally import cart as Ct

    cart = Ct.Cart(tax_rate=Decimal("0.08"))
    cart.add_item(item)
    cart.select_tip_percent(15)

    quote = cart.quote()
    quote.can_checkout, quote.blockers()

    session = Ct.CheckoutSession(cart, resolver, promo_source)
    await session.refresh(address=address, code="SAVE10")
"""

from tally.cart._quote import CheckoutQuote, build_quote
from tally.cart._cart import Cart
from tally.cart._session import RequestSequencer, Superseded, RefreshResult, CheckoutSession

__all__ = (
    "Cart",
    "CheckoutQuote",
    "build_quote",
    "RequestSequencer",
    "Superseded",
    "RefreshResult",
    "CheckoutSession",
)
