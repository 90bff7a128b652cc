"""Home view: welcome text and the action menu."""

from rich.text import Text
from textual.widgets import Static

from ..navigation import CREATE_CHIP, CREATE_CHIP_FROM_CHIP, DELETE_CHIP, QUERY
from ..screens.common import MUTED, VIOLET
from ..widgets.select_list import SelectList, SelectOption
from .base import View

MENU = [
    SelectOption("Create Chip", CREATE_CHIP, "Stage data from a source into a new chip"),
    SelectOption("Create Chip from Chip", CREATE_CHIP_FROM_CHIP, "Derive a chip from existing chips"),
    SelectOption("Query Chips", QUERY, "Run SQL queries against chips"),
    SelectOption("Delete Chip", DELETE_CHIP, "Remove a chip and its associated data"),
]


class HomeView(View):
    heading = "Welcome to DataLathe"

    def build(self):
        yield Static(Text(
            "Browse databases and chips in the sidebar. Use Tab to switch panels.",
            style=MUTED,
        ))
        yield Static(Text("\nActions:", style=f"bold {VIOLET}"))
        yield SelectList(MENU, id="home-menu")

    def on_select_list_selected(self, event: SelectList.Selected) -> None:
        event.stop()
        self.go(event.value)
