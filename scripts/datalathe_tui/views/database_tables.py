"""Schema browser for one database: table list, then a table's columns."""

from typing import Optional

from rich.text import Text
from textual.binding import Binding
from textual.widgets import Static

from ..client import group_by_table
from ..loading import threaded
from ..navigation import CREATE_CHIP
from ..screens.common import CYAN, MUTED
from ..utils.formatting import EM_DASH, pluralize
from ..widgets.error_display import ErrorDisplay
from ..widgets.grid_view import GridView
from ..widgets.select_list import SelectList, SelectOption
from .base import View, hint


class DatabaseTablesView(View):
    """Tables of ``database_name``; selecting one shows its columns."""

    heading = "Database Schema"

    BINDINGS = [
        Binding("left", "back_to_tables", "Tables", show=False),
        Binding("c", "create_chip", "Create Chip", show=False),
        Binding("r", "retry", "Retry", show=False),
    ]

    def __init__(self, entry, **kwargs):
        super().__init__(entry, **kwargs)
        self.database_name: str = entry.get("database_name", "")
        self.selected_table: Optional[str] = entry.get("table_name")
        self.schema = self.loader("schema")

    def start(self) -> None:
        self.schema.set_key(
            threaded(self.client.get_database_schema, self.database_name),
            key=self.database_name,
        )

    @property
    def tables(self):
        return group_by_table(self.schema.data or [])

    def build(self):
        if self.schema.loading:
            yield Static(Text(f"Loading schema for {self.database_name}...", style=MUTED))
            return
        if self.schema.error:
            yield ErrorDisplay(self.schema.error)
            return

        tables = self.tables
        if not tables:
            yield Static(Text(f"No tables found in {self.database_name}.", style=MUTED))
            return

        if self.selected_table and self.selected_table not in tables:
            # Bare table names match the last part of "schema.table"
            matches = [name for name in tables if name.split(".")[-1] == self.selected_table]
            self.selected_table = matches[0] if matches else None

        if self.selected_table:
            columns = tables[self.selected_table]
            yield Static(Text.assemble(
                (self.selected_table, f"bold {CYAN}"),
                (f"  ({pluralize(len(columns), 'column')})", MUTED),
            ))
            rows = [
                {
                    "column": col.column_name,
                    "type": col.data_type,
                    "nullable": col.is_nullable,
                    "default": col.column_default or "",
                }
                for col in columns
            ]
            yield GridView(rows, empty_message="No columns")
            yield hint("\u2190:back to tables  c:create chip from this table")
            return

        options = [
            SelectOption(name, name, pluralize(len(cols), "column"))
            for name, cols in tables.items()
        ]
        yield Static(Text(
            f"{self.database_name} {EM_DASH} Tables ({len(tables)})", style=f"bold {CYAN}"
        ))
        yield SelectList(options)

    def on_select_list_selected(self, event: SelectList.Selected) -> None:
        event.stop()
        self.selected_table = event.value
        self.schedule_rebuild()

    def action_back_to_tables(self) -> None:
        if self.selected_table:
            self.selected_table = None
            self.schedule_rebuild()

    def action_create_chip(self) -> None:
        if not self.selected_table:
            return
        table_name = self.selected_table.split(".")[-1]
        self.go(CREATE_CHIP, initial_source=self.database_name, initial_table=table_name)

    def action_retry(self) -> None:
        if self.schema.error:
            self.schema.reload()
