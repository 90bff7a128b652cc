"""Delete Chip: pick a chip from an aligned list, confirm, delete."""

from rich.text import Text
from textual.binding import Binding
from textual.widgets import Static

from ..loading import LoadState, LoadStatus, threaded
from ..screens.common import BORDER, ERROR, MUTED, SUCCESS, VIOLET, main_panel_width
from ..screens.modals import DeleteConfirmModal
from ..utils.chip_columns import (
    chip_columns, chip_header, chip_label, has_any_sub_chips, sub_chip_count,
)
from ..utils.viewport import RULE
from ..widgets.error_display import ErrorDisplay
from ..widgets.select_list import SelectList, SelectOption
from .base import View, hint

SELECT = "select"
DELETING = "deleting"
DONE = "done"
FAILED = "error"

INDICATOR_WIDTH = 2  # "› "


class DeleteChipView(View):
    heading = "Delete Chip"

    BINDINGS = [
        Binding("r", "retry", "Retry", show=False),
    ]

    def __init__(self, entry, **kwargs):
        super().__init__(entry, **kwargs)
        self.phase = SELECT
        self.selected_chip_id = ""
        self.chips = self.loader("chips")
        self.deletion = self.loader("delete", on_change=self._on_delete_change)

    def start(self) -> None:
        self.chips.set_key(threaded(self.client.list_chips), key="chips")

    def build(self):
        if self.chips.loading and self.chips.data is None:
            yield Static(Text("Loading chips...", style=MUTED))
            return
        if self.chips.error:
            yield ErrorDisplay(self.chips.error)
            return

        if self.phase == DELETING:
            yield Static(Text("Deleting chip...", style=MUTED))
            return
        if self.phase == DONE:
            yield Static(Text("Chip deleted successfully.", style=f"bold {SUCCESS}"))
            yield hint("Press b to go back.")
            return
        if self.phase == FAILED:
            yield Static(Text(f"Delete failed: {self.deletion.error}", style=ERROR))
            yield hint("Press b to go back.")
            return

        listing = self.chips.data
        chip_ids = listing.main_chip_ids() if listing else []
        if not chip_ids:
            yield Static(Text("No chips to delete.", style=MUTED))
            yield hint("b:back")
            return

        panel_width = main_panel_width(self.app.size.width)
        cols = chip_columns(panel_width, INDICATOR_WIDTH, has_any_sub_chips(listing.chips))
        meta = listing.metadata_map()

        yield Static(Text("Select a chip to delete:", style=MUTED))
        yield Static(Text(chip_header(cols, INDICATOR_WIDTH), style=f"bold {VIOLET}"))
        yield Static(Text("  " + RULE * max(0, panel_width - 4), style=BORDER))
        yield SelectList([
            SelectOption(chip_label(cid, meta.get(cid), listing.chips, cols), cid)
            for cid in chip_ids
        ])

    def on_select_list_selected(self, event: SelectList.Selected) -> None:
        event.stop()
        chip_id = event.value
        listing = self.chips.data
        meta = listing.metadata_map().get(chip_id)
        self.selected_chip_id = chip_id

        def on_confirm(confirmed: bool) -> None:
            if confirmed:
                self.phase = DELETING
                self.deletion.load(threaded(self.client.delete_chip, chip_id))
            else:
                self.selected_chip_id = ""

        self.app.push_screen(
            DeleteConfirmModal(
                chip_id,
                meta.name if meta and meta.name else None,
                sub_chip_count(chip_id, listing.chips),
            ),
            on_confirm,
        )

    def _on_delete_change(self, state: LoadState) -> None:
        if state.status == LoadStatus.SUCCESS:
            self.phase = DONE
            self.session.forget_chip(self.selected_chip_id)
            self.chips_changed()
        elif state.status == LoadStatus.FAILURE:
            self.phase = FAILED
        self.schedule_rebuild()

    def action_retry(self) -> None:
        if self.chips.error:
            self.chips.reload()
