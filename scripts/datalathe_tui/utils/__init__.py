"""
Utility modules for DataLathe TUI.
"""

from .formatting import (
    cell_text,
    truncate_string,
    pad_string,
    fit,
    format_date,
    format_timestamp,
    short_id,
    pluralize,
    ELLIPSIS,
    EM_DASH,
)

from .chip_columns import (
    ChipColumns,
    chip_columns,
    rendered_width,
    has_any_sub_chips,
    sub_chip_count,
    chip_label,
    chip_header,
)

from .viewport import (
    ViewportState,
    GridViewport,
    ListWindow,
    compute_column_widths,
    COLUMN_SEPARATOR,
    RULE,
)

__all__ = [
    # Formatting utilities
    'cell_text',
    'truncate_string',
    'pad_string',
    'fit',
    'format_date',
    'format_timestamp',
    'short_id',
    'pluralize',
    'ELLIPSIS',
    'EM_DASH',
    # Chip list layout
    'ChipColumns',
    'chip_columns',
    'rendered_width',
    'has_any_sub_chips',
    'sub_chip_count',
    'chip_label',
    'chip_header',
    # Grid viewport
    'ViewportState',
    'GridViewport',
    'ListWindow',
    'compute_column_widths',
    'COLUMN_SEPARATOR',
    'RULE',
]
