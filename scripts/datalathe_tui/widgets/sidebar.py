"""
Workspace sidebar: Databases tree above, Chips list below.

The panel that holds keyboard focus gets the ``active`` class (highlighted
border) and shows its key hints along the bottom border.
"""

from textual.app import ComposeResult
from textual.containers import Vertical

from ..client import DatalatheClient
from ..focus import Panel
from ..session import Session
from .chips_list import ChipsList
from .databases_tree import DatabasesTree
from .theme import BORDER, CYAN, MUTED

PANEL_HINTS = {
    Panel.DATABASES: "\u21b5:open  \u2190:collapse  r:refresh",  # ↵ ←
    Panel.CHIPS: "space:check  \u21b5:detail  r:refresh",
}


class SidebarPanel(Vertical):
    """Bordered titled box around one sidebar widget."""

    def __init__(self, title: str, panel: Panel, **kwargs):
        super().__init__(**kwargs)
        self.label = title
        self.panel = panel
        self.border_title = title

    def set_active(self, active: bool) -> None:
        self.set_class(active, "active")
        if active:
            self.border_subtitle = PANEL_HINTS.get(self.panel, "")
        else:
            self.border_subtitle = ""


class Sidebar(Vertical):
    """The two sidebar panels."""

    DEFAULT_CSS = f"""
    Sidebar {{
        height: 1fr;
    }}

    SidebarPanel {{
        border: round {BORDER};
        border-title-color: {MUTED};
        border-subtitle-color: {MUTED};
        padding: 0 1;
    }}

    SidebarPanel.active {{
        border: round {CYAN};
        border-title-color: {CYAN};
    }}

    #databases-panel {{
        height: 3fr;
    }}

    #chips-panel {{
        height: 2fr;
    }}
    """

    def __init__(self, client: DatalatheClient, session: Session, **kwargs):
        super().__init__(**kwargs)
        self.client = client
        self.session = session

    def compose(self) -> ComposeResult:
        with SidebarPanel("Databases", Panel.DATABASES, id="databases-panel"):
            yield DatabasesTree(self.client, id="databases-tree")
        with SidebarPanel("Chips", Panel.CHIPS, id="chips-panel"):
            yield ChipsList(self.client, self.session, id="chips-list")

    def set_active(self, panel: Panel) -> None:
        for box in self.query(SidebarPanel):
            box.set_active(box.panel == panel)

    def widget_for(self, panel: Panel):
        if panel == Panel.DATABASES:
            return self.query_one(DatabasesTree)
        if panel == Panel.CHIPS:
            return self.query_one(ChipsList)
        return None

    def panel_of(self, widget) -> Panel | None:
        """Which sidebar panel contains ``widget``, if any."""
        node = widget
        while node is not None and node is not self:
            if isinstance(node, SidebarPanel):
                return node.panel
            node = node.parent
        return None

    def refresh_chips(self) -> None:
        self.query_one(ChipsList).reload()
