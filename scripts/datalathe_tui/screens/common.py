"""
Common constants and helper functions for TUI screens.
"""

import logging

# Import shared palette and glyphs from widgets
from ..widgets.theme import (
    CYAN, VIOLET, MUTED, BORDER, SUCCESS, ERROR,
    PROMPT, DOT, MIDDLE_DOT,
)

# Debug logger for TUI
_log = logging.getLogger("datalathe.tui.screens")

SIDEBAR_MAX_WIDTH = 50
SIDEBAR_SHARE = 0.38


def sidebar_width(columns: int) -> int:
    """Sidebar gets 38% of the terminal, capped at 50 columns."""
    return min(SIDEBAR_MAX_WIDTH, int(columns * SIDEBAR_SHARE))


def main_panel_width(columns: int) -> int:
    """Inner width of the main panel: terminal minus sidebar, border and padding."""
    return max(1, columns - sidebar_width(columns) - 4)


def copy_to_clipboard(widget, text: str, label: str = "Copied to clipboard") -> None:
    """Copy ``text`` via pyperclip and report the outcome with a toast."""
    try:
        import pyperclip
        pyperclip.copy(text)
        widget.notify(label)
    except ImportError:
        widget.notify("pyperclip not installed", severity="warning")
    except Exception as e:
        widget.notify(f"Copy failed: {e}", severity="error")
