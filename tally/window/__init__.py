"""
Order edit/cancel window.

Usage:
    from tally import window as W

    W.get_edit_window_state(order.created_at).formatted  # "2:05"

    win = W.EditWindow(order.created_at)
    match win.cancel():
        case Ok(state): ...
        case Error(e): e.message
"""

from tally.window._types import (
    DEFAULT_WINDOW_SECONDS,
    WindowPhase,
    format_countdown,
    WindowState,
    WindowErrorKind,
    WindowError,
)
from tally.window._window import Clock, remaining_seconds, get_edit_window_state, EditWindow

__all__ = (
    "DEFAULT_WINDOW_SECONDS",
    "WindowPhase",
    "format_countdown",
    "WindowState",
    "WindowErrorKind",
    "WindowError",
    "Clock",
    "remaining_seconds",
    "get_edit_window_state",
    "EditWindow",
)
