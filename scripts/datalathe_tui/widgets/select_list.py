"""
Keyboard-driven selection list with a windowed viewport.

Single mode: Enter picks the row under the cursor (posts Selected).
Multiple mode: Space toggles a checkbox, Enter submits the checked values
(posts Submitted).
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from rich.text import Text
from textual.binding import Binding
from textual.message import Message
from textual.widget import Widget

from ..utils.viewport import ListWindow
from .theme import (
    ARROW_DOWN, ARROW_UP, CHECKED, CURSOR, CYAN, MUTED, SUCCESS, UNCHECKED, VIOLET,
)


@dataclass
class SelectOption:
    label: str
    value: Any
    description: str = ""


class SelectList(Widget, can_focus=True):
    """A list of options navigated with the arrow keys."""

    BINDINGS = [
        Binding("up", "move(-1)", "Up", show=False),
        Binding("down", "move(1)", "Down", show=False),
        Binding("pageup", "page(-1)", "Page Up", show=False),
        Binding("pagedown", "page(1)", "Page Down", show=False),
        Binding("enter", "select", "Select", show=False),
        Binding("space", "toggle", "Toggle", show=False),
    ]

    DEFAULT_CSS = """
    SelectList {
        height: 1fr;
        min-height: 1;
    }
    """

    class Selected(Message):
        """An option was picked in single-select mode."""

        def __init__(self, select_list: "SelectList", value: Any) -> None:
            super().__init__()
            self.select_list = select_list
            self.value = value

    class Submitted(Message):
        """Checked values were submitted in multi-select mode."""

        def __init__(self, select_list: "SelectList", values: list[Any]) -> None:
            super().__init__()
            self.select_list = select_list
            self.values = values

    def __init__(
        self,
        options: Iterable[SelectOption] = (),
        multiple: bool = False,
        header: Optional[str] = None,
        checked: Iterable[Any] = (),
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.options = list(options)
        self.multiple = multiple
        self.header = header
        self.checked: list[Any] = [v for v in checked if any(o.value == v for o in self.options)]
        self.window = ListWindow()

    @property
    def indicator_width(self) -> int:
        """Characters before each label: "› " or "› ☑ "."""
        return 4 if self.multiple else 2

    @property
    def highlighted(self) -> Optional[SelectOption]:
        if not self.options:
            return None
        self.window.clamp(len(self.options), self._visible_rows())
        return self.options[self.window.cursor]

    def set_options(self, options: Iterable[SelectOption], header: Optional[str] = None) -> None:
        self.options = list(options)
        if header is not None:
            self.header = header
        values = {o.value for o in self.options}
        self.checked = [v for v in self.checked if v in values]
        self.window.clamp(len(self.options), self._visible_rows())
        self.refresh(layout=True)

    def _visible_rows(self) -> int:
        height = self.size.height or len(self.options) + 2
        reserved = 1 if self.header else 0
        if len(self.options) > height - reserved:
            reserved += 1  # scroll indicator line
        return max(1, height - reserved)

    # --- Actions ---

    def action_move(self, delta: int) -> None:
        self.window.move(delta, len(self.options), self._visible_rows())
        self.refresh()

    def action_page(self, direction: int) -> None:
        self.action_move(direction * self._visible_rows())

    def action_toggle(self) -> None:
        option = self.highlighted
        if not self.multiple or option is None:
            return
        if option.value in self.checked:
            self.checked.remove(option.value)
        else:
            self.checked.append(option.value)
        self.refresh()

    def action_select(self) -> None:
        option = self.highlighted
        if option is None:
            return
        if self.multiple:
            order = [o.value for o in self.options]
            values = sorted(self.checked, key=order.index)
            self.post_message(self.Submitted(self, values))
        else:
            self.post_message(self.Selected(self, option.value))

    # --- Rendering ---

    def render(self) -> Text:
        text = Text(no_wrap=True, overflow="ellipsis")
        if self.header:
            text.append(self.header + "\n", style=f"bold {VIOLET}")
        if not self.options:
            text.append("No options", style=MUTED)
            return text

        visible = self._visible_rows()
        count = len(self.options)
        lines = []
        for index in self.window.visible_range(count, visible):
            option = self.options[index]
            is_cursor = index == self.window.cursor and self.has_focus
            line = Text()
            line.append(f"{CURSOR} " if is_cursor else "  ", style=CYAN)
            if self.multiple:
                is_checked = option.value in self.checked
                line.append(
                    f"{CHECKED if is_checked else UNCHECKED} ",
                    style=SUCCESS if is_checked else MUTED,
                )
            line.append(option.label, style=f"bold {CYAN}" if is_cursor else "")
            if option.description:
                line.append(f"  {option.description}", style=MUTED)
            lines.append(line)

        if self.window.can_scroll_up() or self.window.can_scroll_down(count, visible):
            first = self.window.offset + 1
            last = min(self.window.offset + visible, count)
            up = ARROW_UP if self.window.can_scroll_up() else " "
            down = ARROW_DOWN if self.window.can_scroll_down(count, visible) else " "
            lines.append(Text(f" {up} {first}\u2013{last}/{count} {down}", style=MUTED))

        text.append(Text("\n").join(lines))
        return text

    def on_focus(self) -> None:
        self.refresh()

    def on_blur(self) -> None:
        self.refresh()
