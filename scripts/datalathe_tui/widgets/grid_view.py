"""
Scrollable grid widget for query results and schema listings.

Renders a GridViewport into the widget's own content region. Only visible
rows are formatted on each refresh.
"""

from typing import Any, Optional, Sequence

from rich.text import Text
from textual.actions import SkipAction
from textual.binding import Binding
from textual.widget import Widget

from ..utils.viewport import GridViewport, ViewportState
from .theme import BORDER, CYAN, MUTED


class GridView(Widget, can_focus=True):
    """A grid with vertical paging and horizontal panning.

    Each result set gets its own GridView, so scrolling starts at the origin.
    """

    BINDINGS = [
        Binding("up", "scroll_grid('up')", "Up", show=False),
        Binding("down", "scroll_grid('down')", "Down", show=False),
        Binding("pageup", "scroll_grid('page_up')", "Page Up", show=False),
        Binding("pagedown", "scroll_grid('page_down')", "Page Down", show=False),
        Binding("left", "scroll_grid('left')", "Left", show=False),
        Binding("right", "scroll_grid('right')", "Right", show=False),
        Binding("home", "scroll_grid('home')", "Top", show=False),
        Binding("end", "scroll_grid('end')", "Bottom", show=False),
    ]

    DEFAULT_CSS = """
    GridView {
        height: 1fr;
        min-height: 3;
    }
    """

    def __init__(
        self,
        rows: Sequence[dict[str, Any]] = (),
        columns: Optional[Sequence[str]] = None,
        empty_message: str = "No data",
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.viewport = GridViewport(rows, columns, empty_message)
        self.state = ViewportState()

    @property
    def view_width(self) -> int:
        return max(1, self.size.width)

    @property
    def view_height(self) -> int:
        return max(1, self.size.height)

    def action_scroll_grid(self, action: str) -> None:
        if action == "left" and self.state.scroll_col == 0:
            # Nothing to pan; let the parent view use the key
            raise SkipAction()
        self.state = self.viewport.scroll(self.state, action, self.view_width, self.view_height)
        self.refresh()

    def status_text(self) -> str:
        return self.viewport.status(self.state, self.view_width, self.view_height)

    def render(self) -> Text:
        width, height = self.view_width, self.view_height
        if self.viewport.is_empty:
            return Text(self.viewport.empty_message, style=MUTED)

        self.state = self.viewport.clamp(self.state, width, height)
        lines = self.viewport.render(self.state, width, height)
        header, separator, *rows, status = lines

        text = Text(no_wrap=True, overflow="crop")
        text.append(header + "\n", style=f"bold {CYAN}")
        text.append(separator + "\n", style=BORDER)
        for line in rows:
            text.append(line + "\n")
        text.append(status, style=MUTED)
        hints = self.viewport.hints(width, height)
        if hints:
            text.append("  " + hints, style=f"dim {MUTED}")
        return text
