"""
WorkspaceScreen for DataLathe TUI.

Header, main panel hosting the view for the current navigation entry,
sidebar with the Databases tree and Chips list, and a status bar.

The navigation stack decides which view is mounted in the main panel and
PanelFocus decides which panel holds keyboard focus. Both are owned by the
app; this screen subscribes to them and mirrors their state in the widgets.
"""

from rich.text import Text
from textual import events
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Static

from ..focus import Panel
from ..navigation import CHIP_DETAIL, DATABASE_TABLES, NavigationEntry
from .. import views  # module import: views depend on screens.common
from ..widgets.chips_list import ChipsList
from ..widgets.databases_tree import DatabasesTree
from ..widgets.logo import wordmark
from ..widgets.sidebar import Sidebar
from .common import BORDER, CYAN, DOT, MUTED, _log, sidebar_width


class WorkspaceScreen(Screen):
    """Paneled layout shown once connected."""

    # Focus is placed by PanelFocus, not by the first focusable widget
    AUTO_FOCUS = ""

    BINDINGS = [
        Binding("tab", "noop", "", show=False),  # Disable tab
        Binding("shift+tab", "noop", "", show=False),
    ]

    CSS = f"""
    WorkspaceScreen {{
        layout: vertical;
    }}

    #header {{
        height: 1;
        padding: 0 1;
    }}

    #header-title {{
        width: 1fr;
        text-align: center;
        color: {MUTED};
    }}

    #header-brand, #header-url {{
        width: auto;
    }}

    #workspace {{
        height: 1fr;
    }}

    #main-panel {{
        width: 1fr;
        height: 1fr;
        border: solid {BORDER};
        padding: 0 1;
    }}

    #main-panel.active {{
        border: solid {CYAN};
    }}

    #sidebar {{
        width: 40;
    }}

    #status-bar {{
        height: 1;
        padding: 0 1;
    }}

    #status-url {{
        width: 1fr;
    }}

    #status-keys {{
        width: auto;
    }}
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._view = None
        self.header_title = ""

    def compose(self) -> ComposeResult:
        session = self.app.session
        with Horizontal(id="header"):
            yield Static(wordmark(), id="header-brand")
            yield Static(self.app.nav.title(), id="header-title")
            yield Static(Text(session.url, style=MUTED), id="header-url")
        with Horizontal(id="workspace"):
            yield Vertical(id="main-panel")
            yield Sidebar(session.client, session, id="sidebar")
        with Horizontal(id="status-bar"):
            yield Static(
                Text.assemble((DOT, CYAN), (f" {session.url}", MUTED)), id="status-url"
            )
            yield Static(Text("Tab:panels  q:quit  b:back", style=f"dim {MUTED}"), id="status-keys")

    async def on_mount(self) -> None:
        self.app.nav.subscribe(self._on_navigate)
        self.app.panel_focus.subscribe(self._on_panel_change)
        self._apply_widths(self.app.size.width)
        self._activate(self.app.nav.current)
        await self._show(self._view)
        self._sync_panel(self.app.panel_focus.active)

    def on_unmount(self) -> None:
        self.app.nav.unsubscribe(self._on_navigate)
        self.app.panel_focus.unsubscribe(self._on_panel_change)

    def on_resize(self, event: events.Resize) -> None:
        self._apply_widths(event.size.width)

    def _apply_widths(self, columns: int) -> None:
        self.query_one("#sidebar", Sidebar).styles.width = sidebar_width(columns)

    def action_noop(self) -> None:
        pass

    # --- Main panel ---

    @property
    def current_view(self):
        """The view for the current navigation entry, possibly still mounting."""
        return self._view

    def _on_navigate(self, entry: NavigationEntry) -> None:
        self._activate(entry)
        self.app.panel_focus.focus_panel(Panel.MAIN)
        self.call_later(self._show, self._view)

    def _activate(self, entry: NavigationEntry) -> None:
        """Swap the active view and title now; mounting the new view follows."""
        _log.debug(f"workspace show {entry.screen} params={dict(entry.params)}")
        # Clear focus first so hiding the old view cannot hand it to the sidebar
        self.set_focus(None)
        self.app.panel_focus.set_input_active(False)
        old = self._view
        if old is not None:
            # Queued keys must not reach the outgoing view
            old.disabled = True
            old.display = False
        self._view = views.view_for(entry)
        self.header_title = self.app.nav.title()
        self.query_one("#header-title", Static).update(self.header_title)

    async def _show(self, view) -> None:
        """Mount ``view`` in place of whatever the main panel holds."""
        if view is not self._view:
            return
        main = self.query_one("#main-panel", Vertical)
        await main.remove_children()
        await main.mount(view)

    # --- Panel focus ---

    def _on_panel_change(self, panel: Panel) -> None:
        self._sync_panel(panel)

    def _sync_panel(self, panel: Panel) -> None:
        sidebar = self.query_one("#sidebar", Sidebar)
        sidebar.set_active(panel)
        self.query_one("#main-panel", Vertical).set_class(panel == Panel.MAIN, "active")

        focused = self.focused
        if focused is not None and self.panel_for(focused) == panel:
            return
        if panel == Panel.MAIN:
            view = self.current_view
            # A view still mounting focuses itself after its first rebuild
            if view is not None and view.is_mounted:
                view.focus_default()
        else:
            widget = sidebar.widget_for(panel)
            if widget is not None:
                widget.focus()

    def panel_for(self, widget) -> Panel | None:
        """Which panel ``widget`` lives in."""
        sidebar = self.query_one("#sidebar", Sidebar)
        panel = sidebar.panel_of(widget)
        if panel is not None:
            return panel
        main = self.query_one("#main-panel", Vertical)
        if widget is main or main in widget.ancestors:
            return Panel.MAIN
        return None

    def on_descendant_focus(self, event: events.DescendantFocus) -> None:
        # Mouse clicks move focus without going through PanelFocus
        panel = self.panel_for(event.widget)
        if panel is not None and panel != self.app.panel_focus.active:
            self.app.panel_focus.focus_panel(panel)

    # --- Sidebar messages ---

    def on_databases_tree_table_selected(self, message: DatabasesTree.TableSelected) -> None:
        self.app.nav.push(
            DATABASE_TABLES,
            {"database_name": message.database_name, "table_name": message.table_name},
        )

    def on_chips_list_chip_selected(self, message: ChipsList.ChipSelected) -> None:
        self.app.nav.push(CHIP_DETAIL, {"chip_id": message.chip_id})

    def on_chips_changed(self, message) -> None:
        self.query_one("#sidebar", Sidebar).refresh_chips()
