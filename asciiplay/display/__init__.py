"""Render targets painting frames at a fixed refresh rate.

- Display: Base class with the refresh cycle and status line
- TerminalDisplay: Full screen terminal display built on blessed
- RefreshTicker: asyncio timer driving the refresh cycle
"""

from .ticker import RefreshTicker
from .display import Display, DEFAULT_TITLE, format_bytes
from .terminal_display import HelpOverlay, KeyboardHandler, TerminalDisplay

__all__ = [
    "RefreshTicker",
    "Display",
    "DEFAULT_TITLE",
    "format_bytes",
    "TerminalDisplay",
    "KeyboardHandler",
    "HelpOverlay",
]
