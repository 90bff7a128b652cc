"""
ConnectScreen for DataLathe TUI.

Full-screen logo and URL prompt. Submitting probes the engine by listing its
databases; on success the app switches to the workspace.
"""

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Center, Vertical
from textual.screen import Screen
from textual.widgets import Input, Static

from ..loading import LoadCoordinator, LoadState, LoadStatus, threaded
from ..widgets.logo import Logo
from .common import ERROR, MUTED, _log


class ConnectScreen(Screen):
    """Prompt for the engine URL and connect."""

    BINDINGS = [
        Binding("tab", "noop", "", show=False),  # Disable tab
    ]

    CSS = """
    ConnectScreen {
        align: center middle;
    }

    #connect-box {
        width: auto;
        height: auto;
        align: center middle;
    }

    #connect-prompt {
        width: auto;
        margin-top: 1;
    }

    #url-input {
        width: 60;
    }

    #connect-status {
        width: auto;
        height: auto;
    }
    """

    def __init__(self, url: str, **kwargs):
        super().__init__(**kwargs)
        self.initial_url = url
        self.target_url = url
        self._client = None
        self.probe = LoadCoordinator(
            on_change=self._on_probe_change,
            spawn=lambda coro: self.run_worker(coro, group="connect", exit_on_error=False),
            name="connect",
        )

    def compose(self) -> ComposeResult:
        with Vertical(id="connect-box"):
            with Center():
                yield Logo(id="logo")
            with Center():
                yield Static("Enter DataLathe URL:", id="connect-prompt")
            with Center():
                yield Input(value=self.initial_url, placeholder=self.initial_url, id="url-input")
            with Center():
                yield Static(self._status_text(), id="connect-status")

    def on_mount(self) -> None:
        self.query_one("#url-input", Input).focus()

    def on_unmount(self) -> None:
        self.probe.dispose()

    def action_noop(self) -> None:
        pass

    def _status_text(self) -> Text:
        if self.probe.busy:
            return Text(f"Connecting to {self.target_url}...", style=MUTED)
        text = Text()
        if self.probe.error:
            text.append(self.probe.error + "\n", style=ERROR)
        text.append("Press Enter to connect", style=f"dim {MUTED}")
        return text

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        if self.probe.busy:
            return
        url = event.value.strip() or self.initial_url
        self.target_url = url
        self._client = self.app.client_factory(url)
        _log.debug(f"connecting to {url}")
        self.query_one("#url-input", Input).disabled = True
        self.probe.load(threaded(self._client.get_databases), key=url)

    def _on_probe_change(self, state: LoadState) -> None:
        if state.status == LoadStatus.SUCCESS:
            _log.debug(f"connected to {self.target_url}")
            self.app.connected(self._client, self.target_url)
            return
        if state.status == LoadStatus.FAILURE:
            _log.debug(f"connect failed: {state.error}")
            url_input = self.query_one("#url-input", Input)
            url_input.disabled = False
            url_input.focus()
        self.query_one("#connect-status", Static).update(self._status_text())
