"""
Screens package for DataLathe TUI.

Contains ConnectScreen, WorkspaceScreen, and DeleteConfirmModal.
"""

from .common import (
    CYAN, VIOLET, MUTED, BORDER, SUCCESS, ERROR,
    sidebar_width,
    main_panel_width,
    copy_to_clipboard,
)

from .connect_screen import ConnectScreen
from .modals import DeleteConfirmModal
from .workspace_screen import WorkspaceScreen

__all__ = [
    # Screens
    'ConnectScreen',
    'WorkspaceScreen',
    'DeleteConfirmModal',
    # Palette
    'CYAN', 'VIOLET', 'MUTED', 'BORDER', 'SUCCESS', 'ERROR',
    # Helper functions
    'sidebar_width',
    'main_panel_width',
    'copy_to_clipboard',
]
