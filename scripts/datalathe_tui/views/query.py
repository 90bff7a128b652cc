"""
Query Chips: pick chips, enter SQL, browse the result grid.
"""

from rich.text import Text
from textual.binding import Binding
from textual.widgets import Input, Static

from ..loading import LoadState, LoadStatus, threaded
from ..screens.common import ERROR, MIDDLE_DOT, MUTED, SUCCESS, VIOLET, main_panel_width
from ..utils.chip_columns import chip_columns, chip_header, chip_label, has_any_sub_chips
from ..utils.formatting import format_date, pluralize
from ..widgets.error_display import ErrorDisplay
from ..widgets.grid_view import GridView
from ..widgets.select_list import SelectList, SelectOption
from .base import View, hint, prompt_label

SELECT_CHIPS = "select-chips"
SQL = "sql"
EXECUTING = "executing"
RESULTS = "results"


class QueryView(View):
    heading = "Query Chips"

    BINDINGS = [
        Binding("r", "again", "Run Another", show=False),
        Binding("c", "change_chips", "Change Chips", show=False),
    ]

    def __init__(self, entry, **kwargs):
        super().__init__(entry, **kwargs)
        self.selected_chip_ids: list[str] = list(entry.get("query_chip_ids") or [])
        self.step = SQL if self.selected_chip_ids else SELECT_CHIPS
        self.query_text = ""
        self.result = None
        self.error = ""
        self.chips = self.loader("chips")
        self.report = self.loader("report", on_change=self._on_report_change)

    def start(self) -> None:
        if not self.selected_chip_ids and self.session.checked_chip_ids:
            self.selected_chip_ids = list(self.session.checked_chip_ids)
            self.step = SQL
        self.chips.set_key(threaded(self.client.list_chips), key="chips")

    def input_active_now(self) -> bool:
        return self.step in (SELECT_CHIPS, SQL)

    def set_step(self, step: str) -> None:
        self.step = step
        self.schedule_rebuild()

    # --- Rendering ---

    def build(self):
        if self.step == SELECT_CHIPS:
            yield from self._build_select()
        elif self.step == SQL:
            yield Static(self._chip_summary())
            yield prompt_label("Enter SQL:")
            yield Input(value=self.query_text, placeholder="SELECT * FROM ...")
            if self.error:
                yield Static(Text(self.error, style=ERROR))
        elif self.step == EXECUTING:
            yield Static(Text("Executing query...", style=MUTED))
        elif self.step == RESULTS:
            result = self.result
            yield Static(Text("Query Results", style=f"bold {SUCCESS}"))
            yield Static(Text(
                f"{len(result.columns)} columns {MIDDLE_DOT} {len(result.rows)} rows", style=MUTED
            ))
            yield GridView(result.rows, result.columns, empty_message="Query returned no rows")
            yield hint("r:run another  c:change chips  b:back")

    def _build_select(self):
        if self.chips.loading:
            yield Static(Text("Loading chips...", style=MUTED))
            return
        if self.chips.error:
            yield ErrorDisplay(self.chips.error)
            return
        listing = self.chips.data
        chip_ids = listing.main_chip_ids() if listing else []
        if not chip_ids:
            yield Static(Text("No chips available. Create one first!", style=MUTED))
            return

        meta = listing.metadata_map()
        cols = chip_columns(
            main_panel_width(self.app.size.width), 4, has_any_sub_chips(listing.chips)
        )
        yield Static(Text("Space to toggle, Enter to confirm", style=MUTED))
        yield SelectList(
            [
                SelectOption(chip_label(cid, meta.get(cid), listing.chips, cols), cid)
                for cid in chip_ids
            ],
            multiple=True,
            header=chip_header(cols, 4),
            checked=self.selected_chip_ids,
        )

    def _chip_summary(self) -> Text:
        listing = self.chips.data
        meta = listing.metadata_map() if listing else {}
        text = Text()
        for chip_id in self.selected_chip_ids:
            m = meta.get(chip_id)
            tables = listing.tables_for(chip_id) if listing else []
            text.append(f"  {m.name if m and m.name else chip_id[:12]}", style=MUTED)
            text.append(f" [{', '.join(tables)}]", style=VIOLET)
            if m:
                text.append(f" {format_date(m.created_at)}", style=f"dim {MUTED}")
            text.append("\n")
        text.append(f"{pluralize(len(self.selected_chip_ids), 'chip')} selected", style=MUTED)
        return text

    # --- Events ---

    def on_select_list_submitted(self, event: SelectList.Submitted) -> None:
        event.stop()
        if event.values:
            self.selected_chip_ids = list(event.values)
            self.set_step(SQL)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        query = event.value.strip()
        if self.step != SQL or not query:
            return
        self.query_text = query
        self.error = ""
        self.set_step(EXECUTING)
        self.report.load(threaded(self.client.generate_report, list(self.selected_chip_ids), [query]))

    def _on_report_change(self, state: LoadState) -> None:
        if state.status == LoadStatus.FAILURE:
            self.error = state.error or "Query failed"
            self.set_step(SQL)
        elif state.status == LoadStatus.SUCCESS:
            entry = (state.value or {}).get(0)
            if entry is None:
                self.error = "No results returned"
                self.set_step(SQL)
            elif entry.error:
                self.error = entry.error
                self.set_step(SQL)
            else:
                self.result = entry
                self.set_step(RESULTS)

    # --- Actions ---

    def action_again(self) -> None:
        if self.step == SELECT_CHIPS and self.chips.error:
            self.chips.reload()
        elif self.step == RESULTS:
            self.result = None
            self.set_step(SQL)

    def action_change_chips(self) -> None:
        if self.step == RESULTS:
            self.result = None
            self.selected_chip_ids = []
            self.set_step(SELECT_CHIPS)
