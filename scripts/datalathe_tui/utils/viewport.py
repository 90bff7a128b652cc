"""
Grid viewport arithmetic for DataLathe TUI.

A GridViewport renders a matrix of named-column cells into a bounded
character region with vertical pagination and horizontal panning. Only the
rows inside the visible window are ever formatted, so large result sets cost
nothing beyond the column width scan.

ListWindow is the one-dimensional variant used by selection lists: a cursor
plus a scroll offset that keeps the cursor on screen.

Pure functions and dataclasses, no Textual dependency.
"""

import math
from dataclasses import dataclass, replace
from typing import Any, Iterable, Optional, Sequence

from rich.cells import cell_len

from .formatting import cell_text, fit, slice_cells

MAX_COLUMN_WIDTH = 30
SCROLL_STEP = 8
# header + separator + status + spacer
RESERVED_LINES = 4

COLUMN_SEPARATOR = " \u2502 "  # " │ "
RULE = "\u2500"  # ─
RULE_CROSS = "\u2500\u253c\u2500"  # ─┼─
PAN_MARKER = "col \u25c4\u25ba"  # col ◄►

SCROLL_ACTIONS = ("up", "down", "page_up", "page_down", "left", "right", "home", "end")


@dataclass(frozen=True)
class ViewportState:
    """Scroll offsets into a grid: first visible row and first visible cell column."""
    scroll_row: int = 0
    scroll_col: int = 0


def compute_column_widths(
    columns: Sequence[str],
    rows: Iterable[dict],
    max_width: int = MAX_COLUMN_WIDTH,
) -> list[int]:
    """
    Width of each column in cells: the widest of its header and every cell, capped.

    Args:
        columns: Column names
        rows: Row mappings keyed by column name
        max_width: Cap applied to every column

    Returns:
        One width per column
    """
    widths = [cell_len(col) for col in columns]
    for row in rows:
        for i, col in enumerate(columns):
            n = cell_len(cell_text(row.get(col)))
            if n > widths[i]:
                widths[i] = n
    return [min(w, max_width) for w in widths]


class GridViewport:
    """A logical grid of rows and the arithmetic for viewing it through a window."""

    def __init__(
        self,
        rows: Sequence[dict[str, Any]],
        columns: Optional[Sequence[str]] = None,
        empty_message: str = "No data",
    ):
        self.rows = list(rows)
        if columns is None:
            columns = list(self.rows[0]) if self.rows else []
        self.columns = list(columns)
        self.empty_message = empty_message
        self.widths = compute_column_widths(self.columns, self.rows)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.columns)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    @property
    def total_width(self) -> int:
        """Rendered width of one full row, separators included."""
        if not self.widths:
            return 0
        return sum(self.widths) + cell_len(COLUMN_SEPARATOR) * (len(self.widths) - 1)

    # --- Window arithmetic ---

    @staticmethod
    def page_size(height: int) -> int:
        return max(1, height - RESERVED_LINES)

    def max_scroll_row(self, height: int) -> int:
        return max(0, self.row_count - self.page_size(height))

    def max_scroll_col(self, width: int) -> int:
        return max(0, self.total_width - width)

    def clamp(self, state: ViewportState, width: int, height: int) -> ViewportState:
        """Clamp both offsets into range. Applying it twice changes nothing."""
        row = min(max(0, state.scroll_row), self.max_scroll_row(height))
        col = min(max(0, state.scroll_col), self.max_scroll_col(width))
        if row == state.scroll_row and col == state.scroll_col:
            return state
        return ViewportState(scroll_row=row, scroll_col=col)

    def scroll(self, state: ViewportState, action: str, width: int, height: int) -> ViewportState:
        """
        Apply one navigation action and clamp the result.

        Args:
            state: Current offsets
            action: One of SCROLL_ACTIONS
            width: Visible width in characters
            height: Visible height in lines

        Returns:
            New, clamped ViewportState. Unknown actions only clamp.
        """
        state = self.clamp(state, width, height)
        page = self.page_size(height)
        if action == "up":
            state = replace(state, scroll_row=state.scroll_row - 1)
        elif action == "down":
            state = replace(state, scroll_row=state.scroll_row + 1)
        elif action == "page_up":
            state = replace(state, scroll_row=state.scroll_row - page)
        elif action == "page_down":
            state = replace(state, scroll_row=state.scroll_row + page)
        elif action == "left":
            state = replace(state, scroll_col=state.scroll_col - SCROLL_STEP)
        elif action == "right":
            state = replace(state, scroll_col=state.scroll_col + SCROLL_STEP)
        elif action == "home":
            state = ViewportState()
        elif action == "end":
            state = replace(state, scroll_row=self.max_scroll_row(height))
        return self.clamp(state, width, height)

    def page(self, state: ViewportState, height: int) -> tuple[int, int]:
        """Return (current page, total pages), both 1-based."""
        page = self.page_size(height)
        row = self.clamp(state, 0, height).scroll_row
        total = max(1, math.ceil(self.row_count / page))
        return row // page + 1, total

    # --- Rendering ---

    def _format_cells(self, values: Sequence[str]) -> str:
        return COLUMN_SEPARATOR.join(
            fit(value, w)
            for value, w in zip(values, self.widths)
        )

    def header_line(self) -> str:
        return self._format_cells(self.columns)

    def separator_line(self) -> str:
        return RULE_CROSS.join(RULE * w for w in self.widths)

    def row_line(self, index: int) -> str:
        row = self.rows[index]
        return self._format_cells([cell_text(row.get(col)) for col in self.columns])

    def status(self, state: ViewportState, width: int, height: int) -> str:
        """
        Status line: column count, row count, page, and pan availability.

        Example: "3 cols · 500 rows · pg 2/25 · col ◄►"
        """
        page, total = self.page(state, height)
        parts = [f"{self.column_count} cols", f"{self.row_count} rows"]
        if total > 1:
            parts.append(f"pg {page}/{total}")
        if self.max_scroll_col(width) > 0:
            parts.append(PAN_MARKER)
        return " · ".join(parts)

    def hints(self, width: int, height: int) -> str:
        hints = []
        if self.page(ViewportState(), height)[1] > 1:
            hints.append("↑↓:scroll  PgUp/PgDn:page")
        if self.max_scroll_col(width) > 0:
            hints.append("←→:pan")
        return "  ".join(hints)

    def visible_rows(self, state: ViewportState, height: int) -> range:
        state = self.clamp(state, 0, height)
        end = min(self.row_count, state.scroll_row + self.page_size(height))
        return range(state.scroll_row, end)

    def render(self, state: ViewportState, width: int, height: int) -> list[str]:
        """
        Render the visible window as plain lines.

        The header, separator and each visible row are sliced to the cells
        ``[scroll_col, scroll_col + width)``; the status line is last.
        An empty grid renders only the placeholder message.
        """
        if self.is_empty:
            return [self.empty_message]

        state = self.clamp(state, width, height)
        start = state.scroll_col
        lines = [
            slice_cells(self.header_line(), start, width),
            slice_cells(self.separator_line(), start, width),
        ]
        for index in self.visible_rows(state, height):
            lines.append(slice_cells(self.row_line(index), start, width))
        lines.append(self.status(state, width, height))
        return lines


@dataclass
class ListWindow:
    """Cursor and scroll offset over a list of ``count`` items, ``visible`` at a time."""
    cursor: int = 0
    offset: int = 0

    def clamp(self, count: int, visible: int) -> None:
        visible = max(1, visible)
        if count <= 0:
            self.cursor = 0
            self.offset = 0
            return
        self.cursor = min(max(0, self.cursor), count - 1)
        if self.cursor >= self.offset + visible:
            self.offset = self.cursor - visible + 1
        if self.cursor < self.offset:
            self.offset = self.cursor
        self.offset = min(max(0, self.offset), max(0, count - visible))

    def move(self, delta: int, count: int, visible: int) -> None:
        self.cursor += delta
        self.clamp(count, visible)

    def visible_range(self, count: int, visible: int) -> range:
        self.clamp(count, visible)
        return range(self.offset, min(count, self.offset + max(1, visible)))

    def can_scroll_up(self) -> bool:
        return self.offset > 0

    def can_scroll_down(self, count: int, visible: int) -> bool:
        return self.offset + max(1, visible) < count
