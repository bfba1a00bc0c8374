"""
Promo lookup — in-memory catalog and the async source protocol.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from tally.promo._types import Promo, normalize_code


class PromoSource(Protocol):
    """Async promo lookup (server, database). Return None when unknown."""

    async def find(self, code: str) -> Promo | None: ...


class PromoCatalog:
    """
    Promo records keyed by normalized code.

    Satisfies PromoSource, so the same catalog serves both apply_promo()
    and validate_promo().
    """

    __slots__ = ("_promos",)

    def __init__(self, promos: Iterable[Promo] = ()) -> None:
        self._promos: dict[str, Promo] = {p.code: p for p in promos}

    def __len__(self) -> int:
        return len(self._promos)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and normalize_code(code) in self._promos

    def get(self, code: str) -> Promo | None:
        return self._promos.get(normalize_code(code))

    def put(self, promo: Promo) -> None:
        self._promos[promo.code] = promo

    async def find(self, code: str) -> Promo | None:
        return self.get(code)


__all__ = ("PromoSource", "PromoCatalog")
