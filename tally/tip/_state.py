"""
Tip state — explicit mode switching for the tip picker.
"""

from __future__ import annotations

from decimal import Decimal

from tally._money import as_decimal
from tally.tip._types import TipMode, TipSelection

DEFAULT_PRESETS: tuple[int, ...] = (10, 15, 20)


class TipState:
    """
    Tip picker state.

    Both the percent and the amount are stored, but only one mode is active.
    Switching mode resets the other value to its neutral default (0), so a
    stale custom amount can never resurface after picking a preset.

    Example:
        state = TipState()
        state.select_amount("5")
        state.select_percent(15)
        state.amount        # Decimal("0")
        state.selection     # TipSelection(PERCENT, 15)
    """

    __slots__ = ("_mode", "_percent", "_amount", "_presets", "_custom_open")

    def __init__(
        self,
        presets: tuple[int, ...] = DEFAULT_PRESETS,
        percent: Decimal | int | str = 0,
    ) -> None:
        self._presets = tuple(presets)
        self._mode = TipMode.PERCENT
        self._percent = max(as_decimal(percent), Decimal(0))
        self._amount = Decimal(0)
        self._custom_open = False

    @property
    def mode(self) -> TipMode:
        return self._mode

    @property
    def percent(self) -> Decimal:
        return self._percent

    @property
    def amount(self) -> Decimal:
        return self._amount

    @property
    def presets(self) -> tuple[int, ...]:
        return self._presets

    @property
    def custom_open(self) -> bool:
        return self._custom_open

    @property
    def selection(self) -> TipSelection:
        if self._mode is TipMode.AMOUNT:
            return TipSelection.amount(self._amount)
        return TipSelection.percent(self._percent)

    def select_preset(self, percent: int) -> TipSelection:
        """Pick a preset button; closes the custom input."""
        self._custom_open = False
        return self.select_percent(percent)

    def select_percent(self, percent: Decimal | int | float | str) -> TipSelection:
        self._mode = TipMode.PERCENT
        self._percent = max(as_decimal(percent), Decimal(0))
        self._amount = Decimal(0)
        return self.selection

    def select_amount(self, amount: Decimal | int | float | str) -> TipSelection:
        self._mode = TipMode.AMOUNT
        self._amount = max(as_decimal(amount), Decimal(0))
        self._percent = Decimal(0)
        return self.selection

    def select(self, selection: TipSelection) -> TipSelection:
        match selection.mode:
            case TipMode.PERCENT:
                return self.select_percent(selection.value)
            case TipMode.AMOUNT:
                return self.select_amount(selection.value)

    def open_custom(self) -> TipSelection:
        """Open the custom input; clears any preset so none looks selected."""
        self._custom_open = True
        return self.select_percent(0)

    def is_preset_selected(self, percent: int) -> bool:
        return (
            not self._custom_open
            and self._mode is TipMode.PERCENT
            and self._percent == percent
        )

    def is_custom_selected(self) -> bool:
        if self._custom_open or self._mode is TipMode.AMOUNT:
            return True
        return self._percent not in self._presets and self._percent != 0


__all__ = ("DEFAULT_PRESETS", "TipState")
