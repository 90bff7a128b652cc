"""
Formatting utilities for DataLathe TUI.

Provides pure functions for fitting, truncating and formatting cell values.
These functions don't depend on Textual or any UI framework.
"""

from datetime import datetime

from rich.cells import cell_len, get_character_cell_size, set_cell_size

ELLIPSIS = "\u2026"  # …
EM_DASH = "\u2014"  # —

SHORT_MONTHS = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]


def cell_text(value) -> str:
    """
    Render any cell value as display text.

    Args:
        value: Raw value from a result row

    Returns:
        "" for None, otherwise str(value) with newlines flattened
    """
    if value is None:
        return ""
    text = str(value)
    if "\n" in text or "\r" in text:
        text = text.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")
    return text


def truncate_string(s: str, max_length: int, suffix: str = ELLIPSIS) -> str:
    """
    Truncate a string to a maximum display width.

    Widths are terminal cells, so wide (CJK, emoji) characters count as two.

    Args:
        s: String to truncate
        max_length: Maximum width in cells (including suffix)
        suffix: Suffix to add when truncating (default "…")

    Returns:
        Truncated string with suffix if needed
    """
    if max_length <= 0:
        return ""
    if cell_len(s) <= max_length:
        return s
    suffix_width = cell_len(suffix)
    if max_length <= suffix_width:
        return set_cell_size(suffix, max_length)
    return set_cell_size(s, max_length - suffix_width) + suffix


def pad_string(s: str, width: int, align: str = "left") -> str:
    """
    Pad a string to a specific display width.

    Args:
        s: String to pad
        width: Target width in cells
        align: "left", "right", or "center"

    Returns:
        Padded string
    """
    current = cell_len(s)
    if current >= width:
        return set_cell_size(s, width)

    gap = width - current
    if align == "right":
        return " " * gap + s
    elif align == "center":
        return " " * (gap // 2) + s + " " * (gap - gap // 2)
    else:  # left
        return s + " " * gap


def fit(s: str, width: int) -> str:
    """Pad or truncate a string to exactly ``width`` cells."""
    return pad_string(truncate_string(s, width), width)


def slice_cells(s: str, start: int, width: int) -> str:
    """
    Cut the cells ``[start, start + width)`` out of a string.

    A wide character split by either edge is replaced by spaces so the
    result never exceeds ``width`` cells.
    """
    end = start + width
    parts = []
    position = 0
    for character in s:
        if position >= end:
            break
        size = get_character_cell_size(character)
        following = position + size
        if following > start:
            if position < start or following > end:
                parts.append(" " * (min(following, end) - max(position, start)))
            else:
                parts.append(character)
        position = following
    return "".join(parts)


def format_date(epoch: float | None) -> str:
    """
    Format a Unix-seconds epoch as "Mon DD, YYYY".

    The result is always 12 characters wide so it can sit in a fixed column.
    Returns an em dash for missing values.
    """
    if epoch is None:
        return EM_DASH
    d = datetime.fromtimestamp(epoch)
    return f"{SHORT_MONTHS[d.month - 1]} {d.day:>2}, {d.year}"


def format_timestamp(epoch: float | None) -> str:
    """Format a Unix-seconds epoch as a local date and time."""
    if epoch is None:
        return EM_DASH
    return datetime.fromtimestamp(epoch).strftime("%Y-%m-%d %H:%M:%S")


def short_id(chip_id: str, length: int = 8) -> str:
    """Shorten an opaque identifier for display, e.g. "3f2a9c1d…"."""
    if len(chip_id) <= length:
        return chip_id
    return chip_id[:length] + ELLIPSIS


def pluralize(count: int, word: str) -> str:
    """Return "1 chip" / "3 chips"."""
    return f"{count} {word}{'' if count == 1 else 's'}"
