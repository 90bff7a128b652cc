"""
Modal dialogs for DataLathe TUI.
"""

from typing import Optional

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Static

from ..utils.formatting import short_id


class DeleteConfirmModal(ModalScreen):
    """Modal for confirming chip deletion. Dismisses with True to delete."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("y", "confirm", "Yes"),
        Binding("n", "cancel", "No"),
    ]

    CSS = """
    DeleteConfirmModal {
        align: center middle;
    }

    #delete-modal {
        width: 60%;
        height: auto;
        border: solid $error;
        background: $surface;
        padding: 1;
    }

    #delete-title {
        text-align: center;
        text-style: bold;
        color: $error;
        margin-bottom: 1;
    }

    .delete-detail {
        color: $text-muted;
    }

    #button-row {
        height: auto;
        align: center middle;
        margin-top: 1;
    }

    Button {
        margin: 0 1;
    }
    """

    def __init__(
        self,
        chip_id: str,
        chip_name: Optional[str] = None,
        sub_chips: int = 0,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.chip_id = chip_id
        self.chip_name = chip_name
        self.sub_chips = sub_chips

    def compose(self) -> ComposeResult:
        if self.chip_name:
            title = f'Delete "{self.chip_name}"?'
        else:
            title = f"Delete chip {short_id(self.chip_id)}?"
        with Vertical(id="delete-modal"):
            yield Static(title, id="delete-title", markup=False)
            yield Static(f"ID: {self.chip_id}", classes="delete-detail", markup=False)
            if self.sub_chips > 0:
                yield Static(f"Sub-chips: {self.sub_chips}", classes="delete-detail")
            yield Static(
                "This will remove the chip metadata, local files, and S3 objects.",
                classes="delete-detail",
            )
            with Horizontal(id="button-row"):
                yield Button("Delete (y)", variant="error", id="delete-btn")
                yield Button("Cancel (n)", variant="default", id="cancel-btn")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "delete-btn")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)
