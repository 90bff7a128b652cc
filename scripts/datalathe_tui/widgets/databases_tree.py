"""
Sidebar tree of databases and their tables.

Databases are listed on mount; a database's tables are fetched the first time
it is expanded and cached until the tree is refreshed.
"""

from dataclasses import dataclass

from rich.text import Text
from textual.binding import Binding
from textual.message import Message
from textual.widget import Widget

from ..client import Database, DatabaseColumn, DatalatheClient, group_by_table
from ..loading import LoadCoordinator, LoadState, LoadStatus, threaded
from ..utils.viewport import ListWindow
from .theme import (
    ARROW_DOWN, ARROW_UP, BORDER, COLLAPSED, CYAN, ERROR, EXPANDED, LAST_BRANCH, BRANCH, MUTED,
)


@dataclass
class TreeNode:
    kind: str  # "database" or "table"
    name: str
    database_name: str
    column_count: int = 0


class DatabasesTree(Widget, can_focus=True):
    """Databases with lazily expanded table lists."""

    BINDINGS = [
        Binding("up", "move(-1)", "Up", show=False),
        Binding("down", "move(1)", "Down", show=False),
        Binding("enter", "activate", "Open", show=False),
        Binding("right", "activate", "Expand", show=False),
        Binding("left", "collapse", "Collapse", show=False),
        Binding("r", "refresh_tree", "Refresh", show=False),
    ]

    DEFAULT_CSS = """
    DatabasesTree {
        height: 1fr;
    }
    """

    class TableSelected(Message):
        def __init__(self, database_name: str, table_name: str) -> None:
            super().__init__()
            self.database_name = database_name
            self.table_name = table_name

    def __init__(self, client: DatalatheClient, **kwargs):
        super().__init__(**kwargs)
        self.client = client
        self.window = ListWindow()
        self.databases = LoadCoordinator(
            on_change=self._on_load_change, spawn=self._spawn, name="databases"
        )
        self._schemas: dict[str, list[DatabaseColumn]] = {}
        self._schema_loads: dict[str, LoadCoordinator] = {}
        self._expanded: set[str] = set()

    def _spawn(self, coro) -> None:
        self.run_worker(coro, group="databases-tree", exit_on_error=False)

    def on_mount(self) -> None:
        self.databases.load(threaded(self.client.get_databases), key="databases")

    def on_unmount(self) -> None:
        self.databases.dispose()
        for loader in self._schema_loads.values():
            loader.dispose()

    def _on_load_change(self, state: LoadState) -> None:
        self.refresh()

    # --- Tree model ---

    def visible_databases(self) -> list[Database]:
        return [db for db in self.databases.data or [] if not db.internal]

    def nodes(self) -> list[TreeNode]:
        """Flat list of visible rows: each database, then its tables if expanded."""
        nodes = []
        for db in self.visible_databases():
            name = db.database_name
            nodes.append(TreeNode("database", name, name))
            if name in self._expanded and name in self._schemas:
                for table, cols in group_by_table(self._schemas[name]).items():
                    nodes.append(TreeNode("table", table, name, len(cols)))
        return nodes

    def is_expanded(self, database_name: str) -> bool:
        return database_name in self._expanded

    def toggle(self, database_name: str) -> None:
        if database_name in self._expanded:
            self._expanded.discard(database_name)
            self.refresh()
            return
        if database_name in self._schemas:
            self._expanded.add(database_name)
            self.refresh()
            return

        loader = self._schema_loads.get(database_name)
        if loader is None:
            loader = LoadCoordinator(
                on_change=lambda state, db=database_name: self._on_schema_change(db, state),
                spawn=self._spawn,
                name=f"schema:{database_name}",
            )
            self._schema_loads[database_name] = loader
        if not loader.busy:
            loader.load(threaded(self.client.get_database_schema, database_name), key=database_name)

    def _on_schema_change(self, database_name: str, state: LoadState) -> None:
        if state.status == LoadStatus.SUCCESS:
            self._schemas[database_name] = state.value or []
            self._expanded.add(database_name)
        elif state.error:
            self.notify(f"{database_name}: {state.error}", severity="error")
        self.refresh()

    def _visible_rows(self) -> int:
        return max(1, (self.size.height or 2) - 1)

    # --- Actions ---

    def action_move(self, delta: int) -> None:
        self.window.move(delta, len(self.nodes()), self._visible_rows())
        self.refresh()

    def action_activate(self) -> None:
        nodes = self.nodes()
        if not nodes:
            return
        self.window.clamp(len(nodes), self._visible_rows())
        node = nodes[self.window.cursor]
        if node.kind == "database":
            self.toggle(node.database_name)
        else:
            self.post_message(self.TableSelected(node.database_name, node.name))

    def action_collapse(self) -> None:
        nodes = self.nodes()
        if not nodes:
            return
        node = nodes[min(self.window.cursor, len(nodes) - 1)]
        if node.kind == "database" and node.database_name in self._expanded:
            self.toggle(node.database_name)

    def action_refresh_tree(self) -> None:
        for loader in self._schema_loads.values():
            loader.dispose()
        self._schema_loads.clear()
        self._schemas.clear()
        self._expanded.clear()
        self.databases.reload()

    # --- Rendering ---

    def render(self) -> Text:
        if self.databases.loading and self.databases.data is None:
            return Text("Loading...", style=MUTED)
        if self.databases.error:
            return Text.assemble((self.databases.error, ERROR), ("\nr:retry", MUTED))

        nodes = self.nodes()
        if not nodes:
            return Text("No databases", style=MUTED)

        visible = self._visible_rows()
        lines = []
        for index in self.window.visible_range(len(nodes), visible):
            node = nodes[index]
            selected = self.has_focus and index == self.window.cursor
            prefix = ">" if selected else " "
            line = Text(no_wrap=True, overflow="ellipsis")
            if node.kind == "database":
                icon = EXPANDED if node.database_name in self._expanded else COLLAPSED
                line.append(f"{prefix} ", style=CYAN if selected else MUTED)
                line.append(f"{icon} {node.name}", style=CYAN if selected else "")
                loader = self._schema_loads.get(node.database_name)
                if loader is not None and loader.busy:
                    line.append(" ...", style=MUTED)
            else:
                is_last = index + 1 >= len(nodes) or nodes[index + 1].kind == "database"
                line.append(f"{prefix}   ", style=CYAN if selected else MUTED)
                line.append(f"{LAST_BRANCH if is_last else BRANCH} ", style=BORDER)
                line.append(node.name, style=CYAN if selected else "")
                line.append(f" ({node.column_count})", style=MUTED)
            lines.append(line)

        if len(nodes) > visible:
            up = ARROW_UP if self.window.can_scroll_up() else " "
            down = ARROW_DOWN if self.window.can_scroll_down(len(nodes), visible) else " "
            lines.append(Text(f"   {up} {down}", style=f"dim {MUTED}"))
        return Text("\n").join(lines)

    def on_focus(self) -> None:
        self.refresh()

    def on_blur(self) -> None:
        self.refresh()
