"""
Create Chip wizard.

Database branch: choose source -> database -> table -> query -> partition.
File branch: choose source -> file path (Tab completes) -> partition.
The partition step is optional; a blank answer creates the chip straight away.
"""

from rich.text import Text
from textual.binding import Binding
from textual.widgets import Input, Static

from ..client import Partition
from ..loading import LoadState, LoadStatus, threaded
from ..navigation import CHIP_DETAIL
from ..screens.common import CYAN, ERROR, MIDDLE_DOT, MUTED, SUCCESS, _log
from ..widgets.error_display import ErrorDisplay
from ..widgets.path_input import PathInput
from ..widgets.select_list import SelectList, SelectOption
from .base import View, hint, prompt_label

CHOOSE_SOURCE = "choose-source"
SELECT_DB = "select-db"
TABLE = "table"
QUERY = "query"
FILE_PATH = "file-path"
PARTITION = "partition"
PARTITION_QUERY = "partition-query"
PARTITION_VALUES = "partition-values"
CREATING = "creating"
DONE = "done"

INPUT_STEPS = {
    CHOOSE_SOURCE, SELECT_DB, TABLE, QUERY, FILE_PATH,
    PARTITION, PARTITION_QUERY, PARTITION_VALUES,
}

SOURCE_OPTIONS = [
    SelectOption("Database", "database"),
    SelectOption("File (CSV, Parquet, etc.)", "file"),
]


def parse_partition_values(text: str) -> list[str]:
    """Split "a, b,,c" into ["a", "b", "c"]."""
    return [v.strip() for v in text.split(",") if v.strip()]


class CreateChipView(View):
    heading = "Create Chip"

    BINDINGS = [
        Binding("enter", "open_chip", "Open Chip", show=False),
        Binding("r", "retry", "Retry", show=False),
    ]

    def __init__(self, entry, **kwargs):
        super().__init__(entry, **kwargs)
        self.source: str = entry.get("initial_source") or ""
        self.table_name: str = entry.get("initial_table") or ""
        self.step = QUERY if self.source else CHOOSE_SOURCE
        self.source_type = "database"
        self.query_text = ""
        self.file_path = ""
        self.partition_by = ""
        self.partition_query = ""
        self.partition_values: list[str] = []
        self.chip_id = ""
        self.error = ""
        self.databases = self.loader("databases")
        self.create = self.loader("create", on_change=self._on_create_change)

    def input_active_now(self) -> bool:
        return self.step in INPUT_STEPS

    def set_step(self, step: str) -> None:
        _log.debug(f"create-chip step {self.step} -> {step}")
        self.step = step
        if step == SELECT_DB:
            self.databases.set_key(threaded(self.client.get_databases), key="databases")
        self.schedule_rebuild()

    def build_partition(self):
        if not self.partition_by:
            return None
        return Partition(
            partition_by=self.partition_by,
            partition_query=self.partition_query or None,
            partition_values=list(self.partition_values),
        )

    # --- Rendering ---

    def build(self):
        step = self.step
        if step == CHOOSE_SOURCE:
            yield Static("Select source type:")
            yield SelectList(SOURCE_OPTIONS)

        elif step == SELECT_DB:
            yield from self._build_select_db()

        elif step == TABLE:
            yield Static(Text(f"Database: {self.source}", style=MUTED))
            yield prompt_label("Table name:")
            yield Input(value=self.table_name, placeholder="my_table")

        elif step == QUERY:
            yield Static(Text(
                f"Database: {self.source} {MIDDLE_DOT} Table: {self.table_name}", style=MUTED
            ))
            yield prompt_label("SQL query:")
            yield Input(placeholder=f"SELECT * FROM {self.table_name or 'table'}")

        elif step == FILE_PATH:
            yield prompt_label("File path (Tab to complete):")
            yield PathInput(self.file_path)
            yield Static("", id="completions")

        elif step == PARTITION:
            yield prompt_label("Partition by column (Enter to skip):")
            yield Input(placeholder="optional")

        elif step == PARTITION_QUERY:
            yield Static(Text(f"Partition by: {self.partition_by}", style=MUTED))
            yield prompt_label("Partition query (Enter to skip):")
            yield Input(placeholder="optional: SQL to derive partition values")

        elif step == PARTITION_VALUES:
            yield Static(Text(f"Partition by: {self.partition_by}", style=MUTED))
            if self.partition_query:
                yield Static(Text(f"Partition query: {self.partition_query}", style=MUTED))
            yield prompt_label("Partition values, comma-separated (Enter to skip):")
            yield Input(placeholder="optional: e.g. val1,val2,val3")

        elif step == CREATING:
            yield Static(Text("Creating chip...", style=MUTED))

        elif step == DONE:
            yield Static(Text("Chip created successfully!", style=f"bold {SUCCESS}"))
            yield Static(Text.assemble("Chip ID: ", (self.chip_id, CYAN)))
            yield hint("\u21b5:open chip  b:back")

        if self.error and step in (QUERY, FILE_PATH, PARTITION):
            yield Static(Text(self.error, style=ERROR))

    def _build_select_db(self):
        if self.databases.loading:
            yield Static(Text("Loading databases...", style=MUTED))
            return
        if self.databases.error:
            yield ErrorDisplay(self.databases.error)
            return
        databases = [db for db in self.databases.data or [] if not db.internal]
        if not databases:
            yield Static(Text("No databases found.", style=MUTED))
            return
        yield Static("Select database:")
        yield SelectList([SelectOption(db.database_name, db.database_name) for db in databases])

    # --- Events ---

    def on_select_list_selected(self, event: SelectList.Selected) -> None:
        event.stop()
        if self.step == CHOOSE_SOURCE:
            if event.value == "file":
                self.source_type = "file"
                self.set_step(FILE_PATH)
            else:
                self.source_type = "database"
                self.set_step(SELECT_DB)
        elif self.step == SELECT_DB:
            self.source = event.value
            self.set_step(TABLE)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        value = event.value.strip()
        step = self.step
        if step == TABLE:
            if value:
                self.table_name = value
                self.set_step(QUERY)
        elif step == QUERY:
            if value:
                self.query_text = value
                self.set_step(PARTITION)
        elif step == FILE_PATH:
            if value:
                self.file_path = value
                self.set_step(PARTITION)
        elif step == PARTITION:
            if value:
                self.partition_by = value
                self.set_step(PARTITION_QUERY)
            else:
                self.partition_by = ""
                self.start_create()
        elif step == PARTITION_QUERY:
            self.partition_query = value
            self.set_step(PARTITION_VALUES)
        elif step == PARTITION_VALUES:
            self.partition_values = parse_partition_values(value)
            self.start_create()

    def on_path_input_completed(self, event: PathInput.Completed) -> None:
        event.stop()
        for widget in self.query("#completions"):
            widget.update(Text("\n".join(event.completions), style=MUTED))

    def start_create(self) -> None:
        self.error = ""
        partition = self.build_partition()
        if self.source_type == "file":
            producer = threaded(self.client.create_chip_from_file, self.file_path, None, partition)
        else:
            producer = threaded(
                self.client.create_chip, self.source, self.query_text, self.table_name, partition
            )
        self.set_step(CREATING)
        self.create.load(producer)

    def _on_create_change(self, state: LoadState) -> None:
        if state.status == LoadStatus.SUCCESS:
            self.chip_id = state.value
            self.set_step(DONE)
            self.chips_changed()
        elif state.status == LoadStatus.FAILURE:
            self.error = state.error or "Failed to create chip"
            self.set_step(PARTITION)

    # --- Actions ---

    def action_open_chip(self) -> None:
        if self.step == DONE and self.chip_id:
            self.go(CHIP_DETAIL, chip_id=self.chip_id)

    def action_retry(self) -> None:
        if self.step == SELECT_DB and self.databases.error:
            self.databases.reload()
