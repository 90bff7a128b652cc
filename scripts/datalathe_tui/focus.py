"""Panel focus controller: which region of the workspace owns the keyboard."""

import logging
from enum import Enum
from typing import Callable, Sequence

_log = logging.getLogger("datalathe.tui.app")


class Panel(str, Enum):
    MAIN = "main"
    DATABASES = "databases"
    CHIPS = "chips"


PANEL_ORDER = (Panel.MAIN, Panel.DATABASES, Panel.CHIPS)

NEXT_KEYS = {"tab"}
PREVIOUS_KEYS = {"shift+tab", "backtab"}


class PanelFocus:
    """Tracks the active panel and cycles among panels.

    While ``input_active`` is set (a text field of the active screen has the
    keyboard), cycle commands are refused here rather than by callers, so the
    global key layer can route every raw key through ``handle_key`` first.
    """

    def __init__(
        self,
        order: Sequence[Panel] = PANEL_ORDER,
        initial: Panel = Panel.MAIN,
    ):
        if initial not in order:
            raise ValueError(f"{initial} is not in the panel order")
        self.order = tuple(order)
        self._active = initial
        self._input_active = False
        self._listeners: list[Callable[[Panel], None]] = []

    @property
    def active(self) -> Panel:
        return self._active

    @property
    def input_active(self) -> bool:
        return self._input_active

    def set_input_active(self, active: bool) -> None:
        """Called by the active screen when a text field claims (or releases) input."""
        self._input_active = bool(active)

    def is_focused(self, panel: Panel) -> bool:
        return self._active == panel

    def focus_next(self) -> bool:
        """Advance to the next panel. Returns False if suppressed."""
        return self._cycle(1)

    def focus_previous(self) -> bool:
        """Go back to the previous panel. Returns False if suppressed."""
        return self._cycle(-1)

    def focus_panel(self, panel: Panel) -> None:
        """Jump straight to ``panel``. Never suppressed."""
        if panel not in self.order:
            raise ValueError(f"Unknown panel: {panel}")
        self._set(panel)

    def handle_key(self, key: str) -> bool:
        """
        Route a raw key through the controller.

        Returns:
            True if the key was a cycle command and was processed. Suppressed
            or unrelated keys return False so they reach the focused widget.
        """
        if key in NEXT_KEYS:
            return self.focus_next()
        if key in PREVIOUS_KEYS:
            return self.focus_previous()
        return False

    def subscribe(self, listener: Callable[[Panel], None]) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Callable[[Panel], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _cycle(self, step: int) -> bool:
        if self._input_active:
            _log.debug("panel cycle suppressed: input active")
            return False
        idx = self.order.index(self._active)
        self._set(self.order[(idx + step) % len(self.order)])
        return True

    def _set(self, panel: Panel) -> None:
        previous = self._active
        self._active = panel
        if panel != previous:
            _log.debug(f"panel focus {previous.value} -> {panel.value}")
            for listener in list(self._listeners):
                listener(panel)
