"""
Reusable widgets for DataLathe TUI.

This package contains widgets that can be used across multiple screens.
"""

from .chips_list import ChipsList, chip_entries
from .databases_tree import DatabasesTree
from .error_display import ErrorDisplay
from .grid_view import GridView
from .path_input import PathInput, path_completions
from .select_list import SelectList, SelectOption
from .sidebar import Sidebar

__all__ = [
    'ChipsList',
    'chip_entries',
    'DatabasesTree',
    'ErrorDisplay',
    'GridView',
    'PathInput',
    'path_completions',
    'SelectList',
    'SelectOption',
    'Sidebar',
]
