"""
Checkout session — async lookups against a cart, latest request wins.

A user who retypes an address before the first geocode returns must never
see the older answer land on top of the newer one. Each lookup takes a
sequence number; a response whose number is no longer the latest is
discarded and the cart is left untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Never

import combinators as C
from kungfu import LazyCoroResult, Result, Ok, Error

from tally.promo import CustomerHistory, NEW_CUSTOMER, PromoError, PromoSource, validate_promo
from tally.totals import CartTotals
from tally.zone import Address, ZoneError, ZoneResolver
from tally.cart._cart import Cart

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Sequencing
# ═══════════════════════════════════════════════════════════════════════════════


class RequestSequencer:
    """Monotonically increasing request numbers for one kind of lookup."""

    __slots__ = ("_latest",)

    def __init__(self) -> None:
        self._latest = 0

    @property
    def latest(self) -> int:
        return self._latest

    def next(self) -> int:
        self._latest += 1
        return self._latest

    def is_latest(self, seq: int) -> bool:
        return seq == self._latest


@dataclass(frozen=True, slots=True)
class Superseded:
    """A newer request of the same kind was issued; this response was dropped."""

    seq: int
    latest: int

    @property
    def message(self) -> str:
        return "A newer request replaced this one."


@dataclass(frozen=True, slots=True)
class RefreshResult:
    zone: Result[CartTotals, ZoneError | Superseded] | None
    promo: Result[CartTotals, PromoError | Superseded] | None
    totals: CartTotals


def _settled[T](run: Callable[[], Awaitable[T]]) -> LazyCoroResult[T, Never]:
    async def execute() -> Result[T, Never]:
        return Ok(await run())

    return LazyCoroResult(execute)


# ═══════════════════════════════════════════════════════════════════════════════
# Checkout Session
# ═══════════════════════════════════════════════════════════════════════════════


class CheckoutSession:
    """
    Cart plus the async collaborators checkout needs.

    Example:
        session = CheckoutSession(cart, resolver, promo_source)
        match await session.resolve_address(address):
            case Ok(totals): ...
            case Error(Superseded()): pass  # a newer address is in flight
            case Error(e): show(e.message)
    """

    def __init__(
        self,
        cart: Cart,
        resolver: ZoneResolver,
        promo_source: PromoSource,
        history: CustomerHistory = NEW_CUSTOMER,
    ) -> None:
        self.cart = cart
        self.resolver = resolver
        self.promo_source = promo_source
        self.history = history
        self.zone_requests = RequestSequencer()
        self.promo_requests = RequestSequencer()

    async def resolve_address(
        self,
        address: Address,
    ) -> Result[CartTotals, ZoneError | Superseded]:
        """Geocode `address` and set the cart's zone. A failed lookup clears it."""
        seq = self.zone_requests.next()
        result = await self.resolver.resolve(address)

        if not self.zone_requests.is_latest(seq):
            logger.debug("zone response %d dropped, latest is %d", seq, self.zone_requests.latest)
            return Error(Superseded(seq, self.zone_requests.latest))

        match result:
            case Ok(zone_match):
                logger.debug("zone %s at %.2fkm", zone_match.zone.label, zone_match.distance_km)
                return Ok(self.cart.set_zone(zone_match))
            case Error(e):
                self.cart.set_zone(None)
                return Error(e)

    async def apply_promo_code(
        self,
        code: str,
        now: datetime | None = None,
    ) -> Result[CartTotals, PromoError | Superseded]:
        """
        Validate `code` against the promo source and attach it.

        The response is also dropped when the cart's promo changed while the
        lookup was in flight, e.g. through a synchronous `Cart.apply_promo`.
        """
        seq = self.promo_requests.next()
        revision = self.cart.promo_revision
        result = await validate_promo(
            code,
            self.promo_source,
            self.cart.subtotal,
            self.history,
            now,
        )

        if not self.promo_requests.is_latest(seq):
            logger.debug("promo response %d dropped, latest is %d", seq, self.promo_requests.latest)
            return Error(Superseded(seq, self.promo_requests.latest))
        if self.cart.promo_revision != revision:
            logger.debug("promo response %d dropped, cart promo changed meanwhile", seq)
            return Error(Superseded(seq, self.promo_requests.latest))

        match result:
            case Ok(discount):
                return Ok(self.cart.attach_promo(discount.promo))
            case Error(e):
                self.cart.clear_promo()
                return Error(e)

    async def refresh(
        self,
        address: Address | None = None,
        code: str | None = None,
        now: datetime | None = None,
    ) -> RefreshResult:
        """Run the address and promo lookups concurrently, then snapshot totals."""
        ops: list[LazyCoroResult[object, Never]] = []
        if address is not None:
            ops.append(_settled(lambda: self.resolve_address(address)))
        if code is not None:
            ops.append(_settled(lambda: self.apply_promo_code(code, now)))
        if not ops:
            return RefreshResult(zone=None, promo=None, totals=self.cart.totals())

        match await C.parallel(*ops):
            case Ok(results):
                outcomes = iter(results)
                zone = next(outcomes) if address is not None else None
                promo = next(outcomes) if code is not None else None
                return RefreshResult(
                    zone=zone,  # type: ignore[arg-type]
                    promo=promo,  # type: ignore[arg-type]
                    totals=self.cart.totals(),
                )
            case Error(e):
                raise e


__all__ = ("RequestSequencer", "Superseded", "RefreshResult", "CheckoutSession")
