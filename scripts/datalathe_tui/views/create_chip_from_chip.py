"""Derive a new chip from one or more existing chips (CACHE source)."""

from rich.text import Text
from textual.binding import Binding
from textual.widgets import Input, Static

from ..loading import LoadState, LoadStatus, threaded
from ..navigation import CHIP_DETAIL
from ..screens.common import CYAN, ERROR, MUTED, SUCCESS, VIOLET, main_panel_width
from ..utils.chip_columns import chip_columns, chip_header, chip_label, has_any_sub_chips
from ..utils.formatting import pluralize, short_id
from ..utils.viewport import RULE
from ..widgets.error_display import ErrorDisplay
from ..widgets.select_list import SelectList, SelectOption
from .base import View, hint, prompt_label

SELECT_CHIPS = "select-chips"
QUERY = "query"
TABLE_NAME = "table-name"
CHIP_NAME = "chip-name"
CONFIRM = "confirm"
CREATING = "creating"
DONE = "done"

INPUT_STEPS = {QUERY, TABLE_NAME, CHIP_NAME}

DEFAULT_TABLE_NAME = "data"
DEFAULT_CHIP_NAME = "chip_from_cache"

CONFIRM_OPTIONS = [
    SelectOption("Create Chip", "create"),
    SelectOption("Go Back", "back"),
]


class CreateChipFromChipView(View):
    heading = "Create Chip from Chip"

    BINDINGS = [
        Binding("enter", "open_chip", "Open Chip", show=False),
        Binding("r", "retry", "Retry", show=False),
    ]

    def __init__(self, entry, **kwargs):
        super().__init__(entry, **kwargs)
        self.selected_chip_ids: list[str] = list(entry.get("chip_ids") or [])
        self.step = QUERY if self.selected_chip_ids else SELECT_CHIPS
        self.query_text = ""
        self.table_name = ""
        self.chip_name = ""
        self.chip_id = ""
        self.error = ""
        self.chips = self.loader("chips")
        self.create = self.loader("create", on_change=self._on_create_change)

    def start(self) -> None:
        self.chips.set_key(threaded(self.client.list_chips), key="chips")

    def input_active_now(self) -> bool:
        return self.step in INPUT_STEPS

    def default_chip_name(self) -> str:
        return self.table_name or DEFAULT_CHIP_NAME

    def set_step(self, step: str) -> None:
        self.step = step
        self.schedule_rebuild()

    # --- Rendering ---

    def build(self):
        step = self.step
        if step == SELECT_CHIPS:
            yield from self._build_select()
        elif step == QUERY:
            yield Static(Text(
                f"Source chips: {len(self.selected_chip_ids)} selected", style=MUTED
            ))
            yield prompt_label("SQL query (Enter to copy all data):")
            yield Input(placeholder="SELECT * FROM table_name WHERE ...")
            yield hint("Query runs against the source chip tables. Leave empty to copy all data.")
        elif step == TABLE_NAME:
            yield prompt_label("Table name (Enter for default):")
            yield Input(placeholder=DEFAULT_TABLE_NAME)
        elif step == CHIP_NAME:
            yield prompt_label("Chip name (Enter for default):")
            yield Input(placeholder=self.default_chip_name())
        elif step == CONFIRM:
            yield Static(self._summary())
            yield SelectList(CONFIRM_OPTIONS)
            if self.error:
                yield Static(Text(self.error, style=ERROR))
        elif step == CREATING:
            yield Static(Text("Creating chip from source chips...", style=MUTED))
        elif step == DONE:
            yield Static(Text("Chip created successfully!", style=f"bold {SUCCESS}"))
            yield Static(Text.assemble("Chip ID: ", (self.chip_id, CYAN)))
            yield hint("\u21b5:open chip  b:back")

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
            yield Static(Text("No chips found. Create a chip first.", style=MUTED))
            return

        meta = listing.metadata_map()
        cols = chip_columns(
            main_panel_width(self.app.size.width), 4, has_any_sub_chips(listing.chips)
        )
        options = [
            SelectOption(chip_label(chip_id, meta.get(chip_id), listing.chips, cols), chip_id)
            for chip_id in chip_ids
        ]
        yield Static("Select source chip(s):  (space to toggle, Enter to confirm)")
        yield SelectList(
            options,
            multiple=True,
            header=chip_header(cols, 4),
            checked=self.selected_chip_ids or self.session.checked_chip_ids,
        )

    def _summary(self) -> Text:
        listing = self.chips.data
        meta = listing.metadata_map() if listing else {}
        text = Text()
        text.append(f"{RULE * 3} Confirm Settings {RULE * 3}\n", style=f"bold {CYAN}")

        def row(label: str, value: str, style: str = "") -> None:
            text.append(f" {label:<14}", style=MUTED)
            text.append(value + "\n", style=style)

        row("Name", self.chip_name or self.default_chip_name())
        row("Source Type", "Chip (CACHE)")
        row("Source Chips", pluralize(len(self.selected_chip_ids), "chip"))
        for chip_id in self.selected_chip_ids:
            m = meta.get(chip_id)
            text.append(" " * 15)
            text.append(m.name if m and m.name else chip_id[:12], style=VIOLET)
            text.append(f" ({short_id(chip_id)})\n", style=MUTED)
        row("Query", self.query_text or "(copy all data)")
        row("Table Name", self.table_name or DEFAULT_TABLE_NAME)
        return text

    # --- Events ---

    def on_select_list_submitted(self, event: SelectList.Submitted) -> None:
        event.stop()
        if self.step == SELECT_CHIPS and event.values:
            self.selected_chip_ids = list(event.values)
            self.set_step(QUERY)

    def on_select_list_selected(self, event: SelectList.Selected) -> None:
        event.stop()
        if self.step != CONFIRM:
            return
        if event.value == "create":
            self.start_create()
        else:
            self.set_step(QUERY)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        value = event.value.strip()
        if self.step == QUERY:
            self.query_text = value
            self.set_step(TABLE_NAME)
        elif self.step == TABLE_NAME:
            self.table_name = value
            self.set_step(CHIP_NAME)
        elif self.step == CHIP_NAME:
            self.chip_name = value or self.default_chip_name()
            self.set_step(CONFIRM)

    def start_create(self) -> None:
        self.error = ""
        self.set_step(CREATING)
        self.create.load(threaded(
            self.client.create_chip_from_chip,
            list(self.selected_chip_ids),
            self.query_text or None,
            self.table_name or None,
            self.chip_name or self.default_chip_name(),
        ))

    def _on_create_change(self, state: LoadState) -> None:
        if state.status == LoadStatus.SUCCESS:
            self.chip_id = state.value
            self.set_step(DONE)
            self.chips_changed()
        elif state.status == LoadStatus.FAILURE:
            self.error = state.error or "Failed to create chip"
            self.set_step(CONFIRM)

    # --- Actions ---

    def action_open_chip(self) -> None:
        if self.step == DONE and self.chip_id:
            self.go(CHIP_DETAIL, chip_id=self.chip_id)

    def action_retry(self) -> None:
        if self.step == SELECT_CHIPS and self.chips.error:
            self.chips.reload()
