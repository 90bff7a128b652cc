"""Navigation stack for screen-based routing."""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

_log = logging.getLogger("datalathe.tui.app")

# Screen identifiers
CONNECT = "connect"
HOME = "home"
DATABASE_TABLES = "database-tables"
CREATE_CHIP = "create-chip"
CREATE_CHIP_FROM_CHIP = "create-chip-from-chip"
CHIP_DETAIL = "chip-detail"
QUERY = "query"
DELETE_CHIP = "delete-chip"

# Screen ID to human-readable title mapping
SCREEN_TITLES = {
    CONNECT: "Connect",
    HOME: "Home",
    DATABASE_TABLES: "Database Schema",
    CREATE_CHIP: "Create Chip",
    CREATE_CHIP_FROM_CHIP: "Create Chip from Chip",
    CHIP_DETAIL: "Chip Detail",
    QUERY: "Query Chips",
    DELETE_CHIP: "Delete Chip",
}


@dataclass(frozen=True)
class NavigationEntry:
    """One screen in the history: its identifier and its parameter bag."""
    screen: str
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Read-only view so callers cannot mutate history in place
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def get(self, name: str, default: Any = None) -> Any:
        return self.params.get(name, default)


Listener = Callable[[NavigationEntry], None]


class NavigationStack:
    """Stack-based navigation history.

    - Push on enter: navigating forward appends an entry
    - Pop on Back: returns to the previous screen; the root cannot be popped
    - Reset on Home: replaces the whole history with a single entry

    Listeners are called synchronously after every change, so the very next
    keystroke is already handled by the new screen.
    """

    def __init__(self, initial: str = CONNECT, params: Optional[Mapping[str, Any]] = None):
        self._stack: list[NavigationEntry] = [NavigationEntry(initial, params or {})]
        self._listeners: list[Listener] = []

    @property
    def current(self) -> NavigationEntry:
        """The top entry."""
        return self._stack[-1]

    @property
    def entries(self) -> tuple[NavigationEntry, ...]:
        return tuple(self._stack)

    def push(self, screen: str, params: Optional[Mapping[str, Any]] = None) -> None:
        """Navigate to a new screen by pushing onto the stack."""
        self._stack.append(NavigationEntry(screen, params or {}))
        _log.debug(f"nav push {screen} depth={len(self._stack)}")
        self._notify()

    def pop(self) -> bool:
        """Go back to the previous screen.

        Returns:
            True if an entry was removed, False at the root (no-op)
        """
        if len(self._stack) <= 1:
            return False
        popped = self._stack.pop()
        _log.debug(f"nav pop {popped.screen} depth={len(self._stack)}")
        self._notify()
        return True

    def reset_to(self, screen: str, params: Optional[Mapping[str, Any]] = None) -> None:
        """Replace the whole history with a single fresh entry."""
        self._stack = [NavigationEntry(screen, params or {})]
        _log.debug(f"nav reset {screen}")
        self._notify()

    def depth(self) -> int:
        return len(self._stack)

    def title(self) -> str:
        return SCREEN_TITLES.get(self.current.screen, self.current.screen)

    def breadcrumbs(self) -> str:
        """Breadcrumb path like "Home > Chip Detail > Query Chips"."""
        return " > ".join(SCREEN_TITLES.get(e.screen, e.screen) for e in self._stack)

    # --- Observers ---

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        current = self.current
        for listener in list(self._listeners):
            listener(current)
