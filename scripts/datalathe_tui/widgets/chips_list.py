"""
Sidebar list of main chips with a checked set.

Each chip takes two lines: checkbox and name, then tables, created date and
sub-chip count. The checked set lives in the Session so every screen sees it.
"""

from dataclasses import dataclass

from rich.text import Text
from textual.binding import Binding
from textual.message import Message
from textual.widget import Widget

from ..client import ChipListing, DatalatheClient
from ..loading import LoadCoordinator, LoadState, threaded
from ..session import Session
from ..utils.chip_columns import has_any_sub_chips, sub_chip_count
from ..utils.formatting import EM_DASH, format_date, pluralize
from ..utils.viewport import ListWindow
from .theme import (
    ARROW_DOWN, ARROW_UP, CHECKED, CYAN, ERROR, MIDDLE_DOT, MUTED, SUCCESS, UNCHECKED, VIOLET,
)

LINES_PER_CHIP = 2


@dataclass
class ChipEntry:
    chip_id: str
    name: str
    tables: str
    created: str
    sub_chips: int


def chip_entries(listing: ChipListing) -> list[ChipEntry]:
    """One entry per main chip, in listing order."""
    meta = listing.metadata_map()
    entries = []
    for chip_id in listing.main_chip_ids():
        m = meta.get(chip_id)
        entries.append(ChipEntry(
            chip_id=chip_id,
            name=m.name if m and m.name else chip_id[:12],
            tables=", ".join(listing.tables_for(chip_id)) or EM_DASH,
            created=format_date(m.created_at) if m else EM_DASH,
            sub_chips=sub_chip_count(chip_id, listing.chips),
        ))
    return entries


class ChipsList(Widget, can_focus=True):
    """Main chips, toggled with space and opened with enter."""

    BINDINGS = [
        Binding("up", "move(-1)", "Up", show=False),
        Binding("down", "move(1)", "Down", show=False),
        Binding("enter", "open", "Open", show=False),
        Binding("space", "toggle", "Toggle", show=False),
        Binding("r", "reload", "Refresh", show=False),
    ]

    DEFAULT_CSS = """
    ChipsList {
        height: 1fr;
    }
    """

    class ChipSelected(Message):
        def __init__(self, chip_id: str) -> None:
            super().__init__()
            self.chip_id = chip_id

    def __init__(self, client: DatalatheClient, session: Session, **kwargs):
        super().__init__(**kwargs)
        self.client = client
        self.session = session
        self.window = ListWindow()
        self.chips = LoadCoordinator(
            on_change=self._on_load_change,
            spawn=lambda coro: self.run_worker(coro, group="chips-list", exit_on_error=False),
            name="chips",
        )

    def on_mount(self) -> None:
        self.session.subscribe(self._on_checked_change)
        self.reload()

    def on_unmount(self) -> None:
        self.session.unsubscribe(self._on_checked_change)
        self.chips.dispose()

    def reload(self) -> None:
        self.chips.load(threaded(self.client.list_chips), key="chips")

    def _on_load_change(self, state: LoadState) -> None:
        self.refresh()

    def _on_checked_change(self, checked: list[str]) -> None:
        self.refresh()

    @property
    def entries(self) -> list[ChipEntry]:
        listing = self.chips.data
        return chip_entries(listing) if listing else []

    def _visible_chips(self) -> int:
        # one line stays free for the scroll indicator
        return max(1, ((self.size.height or LINES_PER_CHIP + 1) - 1) // LINES_PER_CHIP)

    def action_move(self, delta: int) -> None:
        self.window.move(delta, len(self.entries), self._visible_chips())
        self.refresh()

    def _current(self):
        entries = self.entries
        if not entries:
            return None
        self.window.clamp(len(entries), self._visible_chips())
        return entries[self.window.cursor]

    def action_open(self) -> None:
        entry = self._current()
        if entry is not None:
            self.post_message(self.ChipSelected(entry.chip_id))

    def action_toggle(self) -> None:
        entry = self._current()
        if entry is not None:
            self.session.toggle_checked(entry.chip_id)

    def action_reload(self) -> None:
        self.reload()

    def render(self) -> Text:
        if self.chips.loading and self.chips.data is None:
            return Text("Loading...", style=MUTED)
        if self.chips.error and self.chips.data is None:
            return Text.assemble((self.chips.error, ERROR), ("\nr:retry", MUTED))

        entries = self.entries
        if not entries:
            return Text("No chips", style=MUTED)

        listing = self.chips.data
        show_subs = has_any_sub_chips(listing.chips)
        visible = self._visible_chips()
        lines = []
        for index in self.window.visible_range(len(entries), visible):
            entry = entries[index]
            is_cursor = self.has_focus and index == self.window.cursor
            is_checked = self.session.is_checked(entry.chip_id)

            first = Text(no_wrap=True, overflow="ellipsis")
            first.append(f"{'>' if is_cursor else ' '} ", style=CYAN if is_cursor else MUTED)
            first.append(f"{CHECKED if is_checked else UNCHECKED} ", style=SUCCESS if is_checked else MUTED)
            first.append(entry.name, style=CYAN if is_cursor else "")

            second = Text(no_wrap=True, overflow="ellipsis")
            second.append("     ")
            second.append(entry.tables, style=VIOLET)
            second.append(f" {MIDDLE_DOT} {entry.created}", style=MUTED)
            if show_subs:
                second.append(f" {MIDDLE_DOT} {pluralize(entry.sub_chips, 'sub')}", style=MUTED)
            lines.extend([first, second])

        if self.window.can_scroll_up() or self.window.can_scroll_down(len(entries), visible):
            up = ARROW_UP if self.window.can_scroll_up() else " "
            down = ARROW_DOWN if self.window.can_scroll_down(len(entries), visible) else " "
            last = min(self.window.offset + visible, len(entries))
            lines.append(Text(
                f" {up} {self.window.offset + 1}\u2013{last}/{len(entries)} {down}", style=MUTED
            ))
        return Text("\n").join(lines)

    def on_focus(self) -> None:
        self.refresh()

    def on_blur(self) -> None:
        self.refresh()
