"""
Main-panel views for DataLathe TUI, one per navigation screen id.
"""

from ..navigation import (
    CHIP_DETAIL, CREATE_CHIP, CREATE_CHIP_FROM_CHIP, DATABASE_TABLES, DELETE_CHIP, HOME, QUERY,
)
from .base import ChipsChanged, View
from .chip_detail import ChipDetailView
from .create_chip import CreateChipView
from .create_chip_from_chip import CreateChipFromChipView
from .database_tables import DatabaseTablesView
from .delete_chip import DeleteChipView
from .home import HomeView
from .query import QueryView

VIEWS = {
    HOME: HomeView,
    DATABASE_TABLES: DatabaseTablesView,
    CREATE_CHIP: CreateChipView,
    CREATE_CHIP_FROM_CHIP: CreateChipFromChipView,
    CHIP_DETAIL: ChipDetailView,
    QUERY: QueryView,
    DELETE_CHIP: DeleteChipView,
}


def view_for(entry) -> View:
    """Instantiate the view for a navigation entry; unknown screens fall back to Home."""
    return VIEWS.get(entry.screen, HomeView)(entry)


__all__ = [
    'ChipsChanged',
    'View',
    'VIEWS',
    'view_for',
    'HomeView',
    'DatabaseTablesView',
    'CreateChipView',
    'CreateChipFromChipView',
    'ChipDetailView',
    'QueryView',
    'DeleteChipView',
]
