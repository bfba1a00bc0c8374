"""
Cart aggregate — the only place cart state changes.

Every named mutation applies fully, then returns a fresh CartTotals from
compute_totals(). Nothing else recomputes money.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from decimal import Decimal

from kungfu import Result, Ok, Error

from tally._config import Settings
from tally._money import as_decimal
from tally._types import Fulfillment
from tally.items import CartItem, line_key, line_total
from tally import promo as P
from tally.promo import CustomerHistory, NEW_CUSTOMER, Promo, PromoCatalog, PromoError
from tally.tip import DEFAULT_PRESETS, TipPolicy, TipState
from tally.totals import CartTotals, compute_totals
from tally.units import QuantityLike, StepDirection, clamp, step_quantity as step_value, to_quantity
from tally.zone import ZoneMatch
from tally.cart._quote import CheckoutQuote, build_quote

logger = logging.getLogger(__name__)


class Cart:
    """
    Mutable cart owned by one session.

    Example:
        cart = Cart(tax_rate=Decimal("0.08"))
        cart.add_item(make_item("a", "BREAD", "Bread", 1200, qty=2))
        totals = cart.select_tip_percent(15)
        totals.grand_total
    """

    def __init__(
        self,
        tax_rate: Decimal | int | str = 0,
        *,
        service_fee_rate: Decimal | int | str = 0,
        tip_policy: TipPolicy = TipPolicy(),
        tip_presets: tuple[int, ...] = DEFAULT_PRESETS,
        fulfillment: Fulfillment = Fulfillment.PICKUP,
    ) -> None:
        self.tax_rate = as_decimal(tax_rate)
        self.service_fee_rate = as_decimal(service_fee_rate)
        self.tip_policy = tip_policy
        self.tip = TipState(presets=tip_presets)
        self._items: list[CartItem] = []
        self._promo: Promo | None = None
        self._promo_revision = 0
        self._zone: ZoneMatch | None = None
        self._fulfillment = fulfillment

    @classmethod
    def from_settings(cls, settings: Settings) -> Cart:
        return cls(
            settings.tax_rate,
            service_fee_rate=settings.service_fee_rate,
            tip_policy=settings.tip_policy,
            tip_presets=settings.tip_presets,
        )

    # ═══════════════════════════════════════════════════════════════════════════
    # Reads
    # ═══════════════════════════════════════════════════════════════════════════

    @property
    def items(self) -> tuple[CartItem, ...]:
        """Snapshot copies; quantities change only through the named mutations."""
        return tuple(replace(item) for item in self._items)

    @property
    def promo(self) -> Promo | None:
        return self._promo

    @property
    def promo_revision(self) -> int:
        """Bumped on every promo change, so async lookups can detect a newer one."""
        return self._promo_revision

    @property
    def zone(self) -> ZoneMatch | None:
        return self._zone

    @property
    def fulfillment(self) -> Fulfillment:
        return self._fulfillment

    @property
    def subtotal(self) -> int:
        return sum((line_total(item) for item in self._items), 0)

    @property
    def item_count(self) -> Decimal:
        return sum((item.qty for item in self._items), Decimal(0))

    def is_empty(self) -> bool:
        return not self._items

    def find(self, item_id: str) -> CartItem | None:
        line = self._line(item_id)
        return replace(line) if line is not None else None

    def _line(self, item_id: str) -> CartItem | None:
        return next((item for item in self._items if item.id == item_id), None)

    def _fresh_id(self, base: str) -> str:
        taken = {item.id for item in self._items}
        n = 2
        while f"{base}-{n}" in taken:
            n += 1
        return f"{base}-{n}"

    def totals(self) -> CartTotals:
        return compute_totals(
            self._items,
            self.tax_rate,
            self.tip.selection,
            promo=self._promo,
            zone=self._zone.zone if self._zone is not None else None,
            fulfillment=self._fulfillment,
            service_fee_rate=self.service_fee_rate,
            tip_policy=self.tip_policy,
        )

    def quote(self) -> CheckoutQuote:
        return build_quote(self.totals(), self._zone, line_count=len(self._items))

    # ═══════════════════════════════════════════════════════════════════════════
    # Lines
    # ═══════════════════════════════════════════════════════════════════════════

    def add_item(self, item: CartItem) -> CartTotals:
        """
        Add a line, or grow the matching line (same sku, modifiers, note).

        The cart keeps its own copy. A new line whose id is already taken
        gets a fresh one ("x" -> "x-2"), so every line id stays unique.
        """
        key = line_key(item)
        for existing in self._items:
            if line_key(existing) == key and existing.price_unit is item.price_unit:
                existing.qty = clamp(existing.qty + item.qty, existing.price_unit)
                logger.debug("merged %s into line %s, qty=%s", item.sku, existing.id, existing.qty)
                return self.totals()
        line = replace(item)
        if self._line(line.id) is not None:
            line.id = self._fresh_id(item.id)
            logger.debug("line id %s taken, using %s", item.id, line.id)
        self._items.append(line)
        logger.debug("added line %s (%s), qty=%s", line.id, line.sku, line.qty)
        return self.totals()

    def remove_item(self, item_id: str) -> CartTotals:
        before = len(self._items)
        self._items = [item for item in self._items if item.id != item_id]
        if len(self._items) != before:
            logger.debug("removed line %s", item_id)
        return self.totals()

    def set_quantity(self, item_id: str, qty: QuantityLike) -> CartTotals:
        """
        Set a line's quantity.

        Anything below the unit minimum (zero included) removes the line;
        otherwise the value is rounded to the unit's precision.
        """
        item = self._line(item_id)
        if item is None:
            logger.debug("set_quantity on missing line %s ignored", item_id)
            return self.totals()
        value = to_quantity(qty)
        if value < item.price_unit.spec.minimum:
            return self.remove_item(item_id)
        item.qty = clamp(value, item.price_unit)
        logger.debug("line %s qty=%s", item_id, item.qty)
        return self.totals()

    def step_quantity(self, item_id: str, direction: StepDirection) -> CartTotals:
        """+/- one unit step; stepping below the minimum removes the line."""
        item = self._line(item_id)
        if item is None:
            logger.debug("step_quantity on missing line %s ignored", item_id)
            return self.totals()
        moved = step_value(item.qty, item.price_unit, direction)
        if moved is None:
            return self.remove_item(item_id)
        item.qty = moved
        logger.debug("line %s stepped %s to %s", item_id, direction.name, moved)
        return self.totals()

    def set_note(self, item_id: str, note: str) -> CartTotals:
        item = self._line(item_id)
        if item is not None:
            item.note = note
        return self.totals()

    def clear(self) -> CartTotals:
        """Empty the cart and reset tip, promo, zone and fulfillment."""
        self._items.clear()
        self.tip = TipState(presets=self.tip.presets)
        self._set_promo(None)
        self._zone = None
        self._fulfillment = Fulfillment.PICKUP
        logger.debug("cart cleared")
        return self.totals()

    # ═══════════════════════════════════════════════════════════════════════════
    # Tip
    # ═══════════════════════════════════════════════════════════════════════════

    def select_tip_percent(self, percent: Decimal | int | str) -> CartTotals:
        self.tip.select_percent(percent)
        return self.totals()

    def select_tip_preset(self, percent: int) -> CartTotals:
        self.tip.select_preset(percent)
        return self.totals()

    def select_tip_amount(self, amount: Decimal | int | str) -> CartTotals:
        self.tip.select_amount(amount)
        return self.totals()

    def accept_tip_cap(self) -> CartTotals:
        """Apply the auto-correct offered by an over-cap delivery tip."""
        correction = self.totals().tip.auto_correct()
        if correction is not None:
            self.tip.select(correction)
        return self.totals()

    # ═══════════════════════════════════════════════════════════════════════════
    # Promo
    # ═══════════════════════════════════════════════════════════════════════════

    def attach_promo(self, promo: Promo) -> CartTotals:
        """Attach an already validated promo, replacing any previous one."""
        if self._promo is not None and self._promo.code != promo.code:
            logger.debug("promo %s replaced by %s", self._promo.code, promo.code)
        self._set_promo(promo)
        return self.totals()

    def apply_promo(
        self,
        code: str,
        catalog: PromoCatalog,
        history: CustomerHistory = NEW_CUSTOMER,
        now: datetime | None = None,
    ) -> Result[CartTotals, PromoError]:
        """
        Validate `code` and attach it.

        A rejected code also drops the previously attached promo.
        """
        match P.apply_promo(code, catalog, self.subtotal, history, now):
            case Ok(discount):
                return Ok(self.attach_promo(discount.promo))
            case Error(e):
                self._set_promo(None)
                return Error(e)

    def clear_promo(self) -> CartTotals:
        self._set_promo(None)
        return self.totals()

    def _set_promo(self, promo: Promo | None) -> None:
        self._promo = promo
        self._promo_revision += 1

    # ═══════════════════════════════════════════════════════════════════════════
    # Fulfillment
    # ═══════════════════════════════════════════════════════════════════════════

    def set_fulfillment(self, fulfillment: Fulfillment) -> CartTotals:
        self._fulfillment = fulfillment
        logger.debug("fulfillment=%s", fulfillment.value)
        return self.totals()

    def set_zone(self, match: ZoneMatch | None) -> CartTotals:
        self._zone = match
        return self.totals()


__all__ = ("Cart",)
