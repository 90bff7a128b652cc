"""Session state shared across screens for the lifetime of the app."""

from dataclasses import dataclass, field
from typing import Callable, Optional

from .client import DEFAULT_URL, DatalatheClient


@dataclass
class Session:
    """Connection and cross-screen selections.

    Owned by the app and handed to screens by reference. Nothing here is
    persisted between runs.
    """

    url: str = DEFAULT_URL
    client: Optional[DatalatheClient] = None

    # Chips checked in the sidebar, in check order
    checked_chip_ids: list[str] = field(default_factory=list)

    _listeners: list[Callable[[list[str]], None]] = field(default_factory=list, repr=False)

    @property
    def connected(self) -> bool:
        return self.client is not None

    def connect(self, client: DatalatheClient, url: str) -> None:
        self.client = client
        self.url = url

    def is_checked(self, chip_id: str) -> bool:
        return chip_id in self.checked_chip_ids

    def toggle_checked(self, chip_id: str) -> bool:
        """Flip a chip's checked state. Returns the new state."""
        if chip_id in self.checked_chip_ids:
            self.checked_chip_ids.remove(chip_id)
            checked = False
        else:
            self.checked_chip_ids.append(chip_id)
            checked = True
        self._notify()
        return checked

    def forget_chip(self, chip_id: str) -> None:
        """Drop a deleted chip from the checked set."""
        if chip_id in self.checked_chip_ids:
            self.checked_chip_ids.remove(chip_id)
            self._notify()

    def query_chip_ids(self, chip_id: str) -> list[str]:
        """``chip_id`` first, then every other checked chip, without duplicates."""
        return list(dict.fromkeys([chip_id, *self.checked_chip_ids]))

    def subscribe(self, listener: Callable[[list[str]], None]) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Callable[[list[str]], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(list(self.checked_chip_ids))
