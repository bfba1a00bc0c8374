"""
Edit/cancel window — a countdown from order creation.

Remaining time is always recomputed from the absolute creation timestamp,
never decremented, so a paused or throttled poller cannot drift.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from datetime import datetime, timezone

from kungfu import Result, Ok, Error

from tally._types import as_utc
from tally.window._types import (
    DEFAULT_WINDOW_SECONDS,
    WindowPhase,
    WindowState,
    WindowErrorKind,
    WindowError,
)

logger = logging.getLogger(__name__)

type Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def remaining_seconds(
    order_created_at: datetime,
    now: datetime,
    window_seconds: int = DEFAULT_WINDOW_SECONDS,
) -> int:
    """max(0, ceil(window - elapsed)) in whole seconds."""
    elapsed = (as_utc(now) - as_utc(order_created_at)).total_seconds()
    return max(0, math.ceil(window_seconds - elapsed))


def get_edit_window_state(
    order_created_at: datetime,
    now: datetime | None = None,
    window_seconds: int = DEFAULT_WINDOW_SECONDS,
) -> WindowState:
    """
    Stateless window query, safe to poll once a second.

        get_edit_window_state(created, now=created + timedelta(seconds=55))
        # WindowState(remaining_seconds=125, phase=EDITABLE) -> formatted "2:05"
    """
    remaining = remaining_seconds(order_created_at, now or _utc_now(), window_seconds)
    phase = WindowPhase.EDITABLE if remaining > 0 else WindowPhase.LOCKED
    return WindowState(remaining_seconds=remaining, phase=phase)


class EditWindow:
    """
    Window state machine for one order.

        EDITABLE --time--> LOCKED
        EDITABLE --cancel()--> CANCELLED

    Both end states are terminal. Remaining time never increases, even if
    the clock is set back.
    """

    __slots__ = ("order_created_at", "window_seconds", "_clock", "_phase", "_floor")

    def __init__(
        self,
        order_created_at: datetime,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
        clock: Clock = _utc_now,
    ) -> None:
        if window_seconds < 0:
            raise ValueError("window_seconds must be non-negative")
        self.order_created_at = as_utc(order_created_at)
        self.window_seconds = window_seconds
        self._clock = clock
        self._phase = WindowPhase.EDITABLE
        self._floor = window_seconds

    @property
    def phase(self) -> WindowPhase:
        return self.state().phase

    def state(self) -> WindowState:
        if self._phase is WindowPhase.EDITABLE:
            remaining = remaining_seconds(self.order_created_at, self._clock(), self.window_seconds)
            self._floor = min(self._floor, remaining)
            if self._floor <= 0:
                logger.debug("edit window for order at %s locked", self.order_created_at)
                self._phase = WindowPhase.LOCKED
        return WindowState(
            remaining_seconds=self._floor if self._phase is WindowPhase.EDITABLE else 0,
            phase=self._phase,
        )

    def cancel(self) -> Result[WindowState, WindowError]:
        """Cancel while editable. Ok carries the final CANCELLED state."""
        match self.state().phase:
            case WindowPhase.CANCELLED:
                return Error(WindowError(WindowErrorKind.ALREADY_CANCELLED))
            case WindowPhase.LOCKED:
                logger.info("cancel refused: window closed")
                return Error(WindowError(WindowErrorKind.LOCKED))
            case WindowPhase.EDITABLE:
                self._phase = WindowPhase.CANCELLED
                return Ok(WindowState(remaining_seconds=0, phase=WindowPhase.CANCELLED))


__all__ = ("Clock", "remaining_seconds", "get_edit_window_state", "EditWindow")
