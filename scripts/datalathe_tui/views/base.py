"""
Base class for views hosted in the workspace main panel.

A view is rebuilt from scratch whenever its state changes: the body container
is emptied and refilled with the widgets returned by ``build()``. Views own
their LoadCoordinators, which are disposed when the view unmounts so late
responses never reach a dead view.
"""

from typing import Iterable, Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Static

from ..focus import Panel
from ..loading import LoadCoordinator, LoadState
from ..navigation import NavigationEntry
from ..screens.common import CYAN, MUTED, PROMPT, VIOLET, _log


class ChipsChanged(Message):
    """A chip was created or deleted; the sidebar should reload."""


def prompt_label(text: str) -> Static:
    return Static(Text.assemble((f"{PROMPT} ", VIOLET), text))


def hint(text: str) -> Static:
    return Static(Text(text, style=MUTED), classes="hint")


class View(Vertical, can_focus=True):
    """A main-panel screen bound to one navigation entry."""

    heading = ""

    DEFAULT_CSS = f"""
    View {{
        height: 1fr;
        padding: 1 0 0 0;
    }}

    View .view-title {{
        color: {CYAN};
        text-style: bold;
        margin-bottom: 1;
    }}

    View #view-body {{
        height: 1fr;
    }}

    View #view-body > Input {{
        margin: 0 0 1 0;
    }}

    View .hint {{
        margin-top: 1;
    }}
    """

    def __init__(self, entry: NavigationEntry, **kwargs):
        super().__init__(**kwargs)
        self.entry = entry
        self._loaders: list[LoadCoordinator] = []

    # --- App state ---

    @property
    def nav(self):
        return self.app.nav

    @property
    def session(self):
        return self.app.session

    @property
    def client(self):
        return self.app.session.client

    @property
    def panel_focus(self):
        return self.app.panel_focus

    # --- Loading ---

    def loader(self, name: str, on_change=None) -> LoadCoordinator:
        """Create a coordinator owned by this view; by default any change triggers a rebuild."""
        coordinator = LoadCoordinator(
            on_change=on_change or self._on_load_change,
            spawn=self._spawn,
            name=f"{self.entry.screen}:{name}",
        )
        self._loaders.append(coordinator)
        return coordinator

    def _spawn(self, coro) -> None:
        self.run_worker(coro, group=f"view-{self.entry.screen}", exit_on_error=False)

    def _on_load_change(self, state: LoadState) -> None:
        self.schedule_rebuild()

    def on_unmount(self) -> None:
        for coordinator in self._loaders:
            coordinator.dispose()

    # --- Rendering ---

    def compose(self) -> ComposeResult:
        yield Static(self.heading, classes="view-title")
        yield Vertical(id="view-body")

    def build(self) -> Iterable[Widget]:
        """Widgets for the current state."""
        return []

    def input_active_now(self) -> bool:
        """Whether the current state shows a text field that owns Tab and q/b."""
        return False

    def schedule_rebuild(self) -> None:
        if self.is_mounted:
            self.call_later(self.rebuild)

    async def rebuild(self) -> None:
        if not self.is_attached or self.nav.current is not self.entry:
            return
        body = self.query_one("#view-body", Vertical)
        focused = self.screen.focused
        if focused is not None and body in focused.ancestors:
            # Park focus on the view so it does not fall through to the sidebar
            self.screen.set_focus(self)
        await body.remove_children()
        widgets = list(self.build())
        if widgets:
            await body.mount_all(widgets)
        self.set_input_active(self.input_active_now())
        if self.panel_focus.is_focused(Panel.MAIN):
            self.focus_default()

    async def on_mount(self) -> None:
        self.start()
        await self.rebuild()

    def start(self) -> None:
        """Issue initial requests. Called once on mount."""

    # --- Focus ---

    def set_input_active(self, active: bool) -> None:
        self.panel_focus.set_input_active(active)

    def default_focus_target(self) -> Optional[Widget]:
        for widget in self.query("#view-body *"):
            if widget.focusable:
                return widget
        return None

    def focus_default(self) -> None:
        target = self.default_focus_target()
        if target is not None:
            target.focus()
        else:
            self.focus()

    # --- Navigation ---

    def go(self, screen: str, **params) -> None:
        _log.debug(f"{self.entry.screen} -> {screen} {params}")
        self.nav.push(screen, params)

    def back(self) -> None:
        self.nav.pop()

    def chips_changed(self) -> None:
        # Posted to the screen so it survives this view being replaced
        self.screen.post_message(ChipsChanged())
