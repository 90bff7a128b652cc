"""Chip detail: metadata, main chip, and the query/delete/copy actions."""

from rich.text import Text
from textual.binding import Binding
from textual.widgets import Static

from ..loading import LoadState, LoadStatus, threaded
from ..navigation import QUERY
from ..screens.common import CYAN, ERROR, MUTED, VIOLET, copy_to_clipboard
from ..screens.modals import DeleteConfirmModal
from ..utils.chip_columns import sub_chip_count
from ..utils.formatting import EM_DASH, format_timestamp, pluralize, short_id
from ..widgets.error_display import ErrorDisplay
from .base import View, hint


class ChipDetailView(View):
    heading = "Chip Detail"

    BINDINGS = [
        Binding("s", "query", "Query", show=False),
        Binding("d", "delete", "Delete", show=False),
        Binding("y", "copy_id", "Copy ID", show=False),
        Binding("r", "retry", "Retry", show=False),
    ]

    def __init__(self, entry, **kwargs):
        super().__init__(entry, **kwargs)
        self.chip_id: str = entry.get("chip_id", "")
        self.chips = self.loader("chips")
        self.deletion = self.loader("delete", on_change=self._on_delete_change)

    def start(self) -> None:
        self.session.subscribe(self._on_checked_change)
        self.chips.set_key(threaded(self.client.list_chips), key=self.chip_id)

    def on_unmount(self) -> None:
        self.session.unsubscribe(self._on_checked_change)

    def _on_checked_change(self, checked: list[str]) -> None:
        self.schedule_rebuild()

    def other_checked(self) -> list[str]:
        return [c for c in self.session.checked_chip_ids if c != self.chip_id]

    # --- Rendering ---

    def build(self):
        if self.chips.loading and self.chips.data is None:
            yield Static(Text("Loading chip details...", style=MUTED))
            return
        if self.chips.error:
            yield ErrorDisplay(self.chips.error)
            return

        yield Static(Text(f"Chip: {short_id(self.chip_id)}", style=f"bold {CYAN}"))
        yield Static(self._details())

        others = self.other_checked()
        if others:
            yield Static(Text(
                f"Also querying with {pluralize(len(others), 'checked chip')} from sidebar",
                style=f"dim {MUTED}",
            ))

        if self.deletion.busy:
            yield Static(Text("Deleting chip...", style=MUTED))
        elif self.deletion.error:
            yield Static(Text(f"Delete failed: {self.deletion.error}", style=ERROR))

        target = f"({len(others) + 1} chips)" if others else "this chip"
        yield hint(f"s:query {target}  d:delete  y:copy id  b:back")

    def _details(self) -> Text:
        listing = self.chips.data
        meta = listing.metadata_map().get(self.chip_id) if listing else None
        main = None
        if listing:
            main = next(
                (c for c in listing.chips if c.chip_id == self.chip_id and c.is_main), None
            )

        text = Text()

        def row(label: str, value: str, style: str = "") -> None:
            text.append(f"{label}: ", style=MUTED)
            text.append(value + "\n", style=style)

        if meta:
            row("Name", meta.name)
            row("Description", meta.description)
            if meta.query:
                row("Query", meta.query, VIOLET)
            row("Created", format_timestamp(meta.created_at))

        if main:
            text.append("\nMain Chip\n", style=f"bold {CYAN}")
            row("Table", main.table_name, VIOLET)
            row("Partition", main.partition_value or EM_DASH)
            if main.created_at:
                row("Created", format_timestamp(main.created_at))
            subs = sub_chip_count(self.chip_id, listing.chips)
            if subs:
                row("Sub-chips", str(subs))

        if not meta and not main:
            text.append("Chip not found.", style=MUTED)
        text.rstrip()
        return text

    # --- Actions ---

    def action_query(self) -> None:
        self.go(QUERY, query_chip_ids=self.session.query_chip_ids(self.chip_id))

    def action_copy_id(self) -> None:
        copy_to_clipboard(self, self.chip_id, "Chip ID copied")

    def action_retry(self) -> None:
        if self.chips.error:
            self.chips.reload()

    def action_delete(self) -> None:
        if self.deletion.busy:
            return
        listing = self.chips.data
        meta = listing.metadata_map().get(self.chip_id) if listing else None
        subs = sub_chip_count(self.chip_id, listing.chips) if listing else 0

        def on_confirm(confirmed: bool) -> None:
            if confirmed:
                self.deletion.load(threaded(self.client.delete_chip, self.chip_id))

        self.app.push_screen(
            DeleteConfirmModal(self.chip_id, meta.name if meta else None, subs),
            on_confirm,
        )

    def _on_delete_change(self, state: LoadState) -> None:
        if state.status == LoadStatus.SUCCESS:
            self.session.forget_chip(self.chip_id)
            self.chips_changed()
            self.notify("Chip deleted")
            self.back()
            return
        self.schedule_rebuild()
