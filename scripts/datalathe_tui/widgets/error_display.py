"""Inline error block with retry/back hints."""

from rich.text import Text
from textual.widgets import Static

from .theme import ERROR, MUTED


def error_text(message: str, retry: bool = True, back: bool = True) -> Text:
    text = Text()
    text.append("Error\n", style=f"bold {ERROR}")
    text.append(message + "\n", style=ERROR)
    hints = []
    if retry:
        hints.append("r:retry")
    if back:
        hints.append("b:back")
    text.append("  ".join(hints), style=MUTED)
    return text


class ErrorDisplay(Static):
    """Shows a failed request. The owning view binds ``r`` and ``b``."""

    DEFAULT_CSS = """
    ErrorDisplay {
        padding: 1 0;
        height: auto;
    }
    """

    def __init__(self, message: str, retry: bool = True, back: bool = True, **kwargs):
        super().__init__(error_text(message, retry, back), **kwargs)
        self.message = message
