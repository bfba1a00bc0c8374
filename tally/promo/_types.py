"""
Promo types — coupon records, customer history, validation errors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum, auto

from tally._money import as_decimal, format_cents
from tally._types import Cents, as_utc

# ═══════════════════════════════════════════════════════════════════════════════
# Promo
# ═══════════════════════════════════════════════════════════════════════════════


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"


def normalize_code(code: str) -> str:
    """Codes match case-insensitively: " save10 " -> "SAVE10"."""
    return code.strip().upper()


@dataclass(frozen=True, slots=True)
class Promo:
    """
    Coupon record.

    `discount_value` is a percentage (0-100) for PERCENTAGE promos and an
    amount in cents for FIXED_AMOUNT promos.
    """

    code: str
    discount_type: DiscountType
    discount_value: Decimal
    min_subtotal_cents: Cents = 0
    max_discount_cents: Cents | None = None
    first_time_only: bool = False
    one_per_customer: bool = False
    start_date: datetime | None = None
    expire_date: datetime | None = None
    usage_limit: int | None = None
    usage_count: int = 0
    is_active: bool = True
    name: str = ""
    description: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", normalize_code(self.code))
        value = as_decimal(self.discount_value)
        object.__setattr__(self, "discount_value", value)
        for name in ("start_date", "expire_date"):
            moment = getattr(self, name)
            if moment is not None:
                object.__setattr__(self, name, as_utc(moment))

        if not self.code:
            raise ValueError("promo code must not be blank")
        if self.discount_type is DiscountType.PERCENTAGE:
            if not 0 <= value <= 100:
                raise ValueError(f"percentage discount must be within 0-100, got {value}")
        elif value < 0 or value != value.to_integral_value():
            raise ValueError(f"fixed discount must be whole non-negative cents, got {value}")
        if self.min_subtotal_cents < 0:
            raise ValueError("min_subtotal_cents must be non-negative")
        if self.max_discount_cents is not None and self.max_discount_cents < 0:
            raise ValueError("max_discount_cents must be non-negative")
        if self.usage_limit is not None and self.usage_limit < 0:
            raise ValueError("usage_limit must be non-negative")


@dataclass(frozen=True, slots=True)
class CustomerHistory:
    """What the validator needs to know about the customer."""

    has_completed_order: bool = False
    redeemed_codes: frozenset[str] = field(default_factory=frozenset)

    def has_redeemed(self, code: str) -> bool:
        return normalize_code(code) in {normalize_code(c) for c in self.redeemed_codes}


NEW_CUSTOMER = CustomerHistory()


@dataclass(frozen=True, slots=True)
class Discount:
    """Validated promo plus the discount it yields at the given subtotal."""

    promo: Promo
    discount_cents: Cents

    @property
    def code(self) -> str:
        return self.promo.code


# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


class PromoErrorKind(Enum):
    EMPTY_CODE = auto()
    NOT_FOUND = auto()
    NOT_STARTED = auto()
    EXPIRED = auto()
    USAGE_LIMIT = auto()
    NOT_FIRST_TIME = auto()
    ALREADY_USED = auto()
    BELOW_MINIMUM = auto()
    LOOKUP_FAILED = auto()


_PROMO_MESSAGES: dict[PromoErrorKind, str] = {
    PromoErrorKind.EMPTY_CODE: "Please enter a promo code.",
    PromoErrorKind.NOT_FOUND: "That promo code isn't valid.",
    PromoErrorKind.NOT_STARTED: "This promo code isn't active yet.",
    PromoErrorKind.EXPIRED: "This promo code has expired.",
    PromoErrorKind.USAGE_LIMIT: "This promo code has reached its usage limit.",
    PromoErrorKind.NOT_FIRST_TIME: "This promo code is for first-time customers only.",
    PromoErrorKind.ALREADY_USED: "You've already used this promo code.",
    PromoErrorKind.BELOW_MINIMUM: "Your order doesn't meet this code's minimum.",
    PromoErrorKind.LOOKUP_FAILED: "We couldn't check this promo code right now. Try again.",
}


@dataclass(frozen=True, slots=True)
class PromoError:
    kind: PromoErrorKind
    code: str = ""
    min_subtotal_cents: Cents | None = None
    detail: str | None = None

    @property
    def message(self) -> str:
        if self.kind is PromoErrorKind.BELOW_MINIMUM and self.min_subtotal_cents:
            return (
                f"This promo code requires a minimum order of "
                f"{format_cents(self.min_subtotal_cents)}."
            )
        return _PROMO_MESSAGES[self.kind]


__all__ = (
    "DiscountType",
    "normalize_code",
    "Promo",
    "CustomerHistory",
    "NEW_CUSTOMER",
    "Discount",
    "PromoErrorKind",
    "PromoError",
)
