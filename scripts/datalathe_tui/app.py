"""
Main Textual application for DataLathe TUI.
"""

import logging
from typing import Callable

from textual.actions import SkipAction
from textual.app import App
from textual.binding import Binding
from textual.screen import ModalScreen

from .client import DEFAULT_URL, DatalatheClient
from .focus import PanelFocus
from .navigation import CONNECT, HOME, NavigationStack
from .screens import ConnectScreen, WorkspaceScreen
from .session import Session

# Debug logger for TUI
_log = logging.getLogger("datalathe.tui.app")

LOGGER_NAMES = [
    'datalathe.tui.app',
    'datalathe.tui.screens',
    'datalathe.tui.loading',
    'datalathe.client',
]


class DatalatheApp(App):
    """DataLathe TUI Application.

    Owns the session, the navigation stack and the panel focus controller;
    screens and views reach them through ``self.app``.
    """

    TITLE = "DataLathe"

    CSS = """
    Screen {
        background: $surface;
    }
    """

    BINDINGS = [
        Binding("tab", "cycle_panel('tab')", "Next Panel", show=False, priority=True),
        Binding("shift+tab", "cycle_panel('shift+tab')", "Previous Panel", show=False, priority=True),
        Binding("q", "quit", "Quit"),
        Binding("b", "back", "Back"),
        Binding("escape", "escape", "Back", show=False),
    ]

    def __init__(
        self,
        url: str = DEFAULT_URL,
        client_factory: Callable[[str], DatalatheClient] = DatalatheClient,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.url = url
        self.client_factory = client_factory
        self.session = Session(url=url)
        self.nav = NavigationStack(CONNECT)
        self.panel_focus = PanelFocus()

    def on_mount(self) -> None:
        _log.debug(f"DatalatheApp.on_mount url={self.url}")
        self.push_screen(ConnectScreen(self.url))

    def connected(self, client: DatalatheClient, url: str) -> None:
        """Called by the connect screen once the engine answered."""
        _log.debug(f"connected to {url}, entering workspace")
        self.session.connect(client, url)
        self.nav.reset_to(HOME)
        self.switch_screen(WorkspaceScreen())

    # --- Global keys ---

    def _modal_open(self) -> bool:
        return isinstance(self.screen, ModalScreen)

    def action_cycle_panel(self, key: str) -> None:
        if not isinstance(self.screen, WorkspaceScreen):
            raise SkipAction()
        if not self.panel_focus.handle_key(key):
            # Suppressed: let the focused widget have the key
            raise SkipAction()

    def action_quit(self) -> None:
        """Quit the application."""
        if self.panel_focus.input_active or self._modal_open():
            return
        _log.debug("DatalatheApp.action_quit called")
        self.exit()

    def action_back(self) -> None:
        if self.panel_focus.input_active or self._modal_open():
            return
        self.nav.pop()

    def action_escape(self) -> None:
        if self._modal_open():
            return
        if not self.nav.pop():
            _log.debug("escape at root, quitting")
            self.exit()


def run_tui(url: str = DEFAULT_URL, debug: bool = False) -> None:
    """Run the TUI application.

    Args:
        url: Engine URL prefilled on the connect screen
        debug: Enable debug logging to tui_debug.log
    """
    if debug:
        # Create a custom handler that flushes immediately
        class FlushingHandler(logging.FileHandler):
            def emit(self, record):
                super().emit(record)
                self.flush()

        handler = FlushingHandler("tui_debug.log", mode='w')
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))

        # Add handler to all our loggers
        for logger_name in LOGGER_NAMES:
            logger = logging.getLogger(logger_name)
            logger.setLevel(logging.DEBUG)
            logger.addHandler(handler)

        _log.debug(f"Starting TUI with url={url}")
    app = DatalatheApp(url)
    app.run()

    # Force reset terminal state even if Textual crashes mid-cleanup.
    import os
    if os.name != 'nt':
        os.system('stty sane 2>/dev/null')
