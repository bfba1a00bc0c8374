"""
Window types — phases, snapshots, cancellation errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

DEFAULT_WINDOW_SECONDS = 180


class WindowPhase(Enum):
    EDITABLE = auto()
    LOCKED = auto()
    CANCELLED = auto()


def format_countdown(seconds: int) -> str:
    """Countdown text: 125 -> "2:05"."""
    minutes, secs = divmod(max(seconds, 0), 60)
    return f"{minutes}:{secs:02d}"


@dataclass(frozen=True, slots=True)
class WindowState:
    remaining_seconds: int
    phase: WindowPhase

    @property
    def expired(self) -> bool:
        return self.remaining_seconds <= 0

    @property
    def can_cancel(self) -> bool:
        return self.phase is WindowPhase.EDITABLE

    @property
    def formatted(self) -> str:
        return format_countdown(self.remaining_seconds)


class WindowErrorKind(Enum):
    LOCKED = auto()
    ALREADY_CANCELLED = auto()


_WINDOW_MESSAGES: dict[WindowErrorKind, str] = {
    WindowErrorKind.LOCKED: "The cancellation window for this order has closed.",
    WindowErrorKind.ALREADY_CANCELLED: "This order has already been cancelled.",
}


@dataclass(frozen=True, slots=True)
class WindowError:
    kind: WindowErrorKind

    @property
    def message(self) -> str:
        return _WINDOW_MESSAGES[self.kind]


__all__ = (
    "DEFAULT_WINDOW_SECONDS",
    "WindowPhase",
    "format_countdown",
    "WindowState",
    "WindowErrorKind",
    "WindowError",
)
