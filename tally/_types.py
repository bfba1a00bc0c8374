"""
Core types for tally.

Re-exports from kungfu + money, fulfillment and lookup aliases.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Money
# ═══════════════════════════════════════════════════════════════════════════════

type Cents = int
"""Monetary amount in integer cents. Never a float."""

# ═══════════════════════════════════════════════════════════════════════════════
# Lazy Lookup Alias
# ═══════════════════════════════════════════════════════════════════════════════

type Lookup[T, E] = LazyCoroResult[T, E]
"""Network-bound lookup (geocode, promo) that may fail."""

# ═══════════════════════════════════════════════════════════════════════════════
# Fulfillment
# ═══════════════════════════════════════════════════════════════════════════════


class Fulfillment(Enum):
    """How the order reaches the customer."""

    PICKUP = "pickup"
    DELIVERY = "delivery"


# ═══════════════════════════════════════════════════════════════════════════════
# Time
# ═══════════════════════════════════════════════════════════════════════════════


def as_utc(moment: datetime) -> datetime:
    """Naive timestamps are taken as UTC; aware ones pass through."""
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=timezone.utc)


# ═══════════════════════════════════════════════════════════════════════════════
# Invariant Guard
# ═══════════════════════════════════════════════════════════════════════════════


class InvariantViolation(Exception):
    """
    Arithmetic invariant broken (negative or non-integer cents).

    Indicates a logic bug, not a user error. Never caught inside tally.
    """

    def __init__(self, field: str, value: object) -> None:
        super().__init__(f"{field} violated cent invariant: {value!r}")
        self.field = field
        self.value = value


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Aliases
    "Cents",
    "Lookup",
    # Domain
    "Fulfillment",
    "InvariantViolation",
    "as_utc",
)
