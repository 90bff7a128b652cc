"""
Fixed-width column layout for chip rows.

Every widget that renders chips as aligned rows (selection lists, headers)
computes its widths here so header and data rows stay column-aligned.
Pure functions, no Textual dependency.
"""

from dataclasses import dataclass

from .formatting import EM_DASH, fit, format_date

GAP = 2
DATE_WIDTH = 12
SUB_CHIPS_WIDTH = 8
MIN_COLUMN_WIDTH = 10
MIN_DESCRIPTION_WIDTH = 6

NAME_SHARE = 30  # percent of flex space
TABLE_SHARE = 35


@dataclass(frozen=True)
class ChipColumns:
    """Column widths for a chip row. A zero width means the column is omitted."""
    name_w: int
    table_w: int
    sub_chips_w: int
    date_w: int
    desc_w: int

    @property
    def widths(self) -> list[int]:
        """Widths of the columns that are actually rendered, in order."""
        widths = [self.name_w, self.table_w]
        if self.sub_chips_w > 0:
            widths.append(self.sub_chips_w)
        widths.append(self.date_w)
        if self.desc_w > 0:
            widths.append(self.desc_w)
        return widths


def chip_columns(
    available_width: int,
    indicator_width: int = 2,
    show_sub_chips: bool = True,
) -> ChipColumns:
    """
    Compute column widths for chip rows from the available width.

    Args:
        available_width: Characters available for the whole row
        indicator_width: Space reserved for the cursor/checkbox glyphs
        show_sub_chips: Whether the sub-chip count badge is wanted

    Returns:
        ChipColumns. Name and table columns never drop below
        MIN_COLUMN_WIDTH, even when that overflows a narrow row. The
        sub-chip badge is dropped when it would squeeze them below the
        floor, and the description column only appears when at least
        MIN_DESCRIPTION_WIDTH characters remain.
    """
    usable = available_width - indicator_width

    if show_sub_chips:
        room = usable - (DATE_WIDTH + SUB_CHIPS_WIDTH + 4 * GAP)
        show_sub_chips = room >= 2 * MIN_COLUMN_WIDTH

    sub_chips_w = SUB_CHIPS_WIDTH if show_sub_chips else 0
    gap_count = 4 if show_sub_chips else 3
    fixed = DATE_WIDTH + sub_chips_w + gap_count * GAP
    flex = max(0, usable - fixed)

    name_w = max(MIN_COLUMN_WIDTH, flex * NAME_SHARE // 100)
    table_w = max(MIN_COLUMN_WIDTH, flex * TABLE_SHARE // 100)

    leftover = usable - name_w - table_w - sub_chips_w - DATE_WIDTH - gap_count * GAP
    desc_w = leftover if leftover >= MIN_DESCRIPTION_WIDTH else 0

    return ChipColumns(
        name_w=name_w,
        table_w=table_w,
        sub_chips_w=sub_chips_w,
        date_w=DATE_WIDTH,
        desc_w=desc_w,
    )


def rendered_width(cols: ChipColumns, indicator_width: int = 2) -> int:
    """Total characters a row built from ``cols`` occupies, indicator included."""
    widths = cols.widths
    return indicator_width + sum(widths) + GAP * (len(widths) - 1)


def has_any_sub_chips(chips) -> bool:
    """Check whether any chip in the list has sub-chips."""
    return any(c.chip_id != c.sub_chip_id for c in chips)


def sub_chip_count(chip_id: str, chips) -> int:
    """Count sub-chips belonging to ``chip_id``."""
    return sum(1 for c in chips if c.chip_id == chip_id and c.chip_id != c.sub_chip_id)


def _join(parts: list[str]) -> str:
    return (" " * GAP).join(parts)


def chip_label(chip_id: str, meta, chips, cols: ChipColumns) -> str:
    """
    Build a fixed-width label for one chip row.

    Args:
        chip_id: Chip identifier
        meta: ChipMetadata for the chip, or None
        chips: All chip rows (used for table names and sub-chip counts)
        cols: Widths from chip_columns()
    """
    name = meta.name if meta and meta.name else chip_id[:12]
    tables = list(dict.fromkeys(c.table_name for c in chips if c.chip_id == chip_id))
    table = ", ".join(tables) if tables else EM_DASH
    created = format_date(meta.created_at) if meta else EM_DASH

    parts = [fit(name, cols.name_w), fit(table, cols.table_w)]
    if cols.sub_chips_w > 0:
        count = sub_chip_count(chip_id, chips)
        parts.append(fit(f"{count} subs" if count > 0 else EM_DASH, cols.sub_chips_w))
    parts.append(fit(created, cols.date_w))
    if cols.desc_w > 0:
        parts.append(fit(meta.description if meta else "", cols.desc_w))
    return _join(parts)


def chip_header(cols: ChipColumns, indicator_width: int = 2) -> str:
    """Build a header string matching chip_label's column layout."""
    parts = [fit("Name", cols.name_w), fit("Tables", cols.table_w)]
    if cols.sub_chips_w > 0:
        parts.append(fit("Sub-chips", cols.sub_chips_w))
    parts.append(fit("Created", cols.date_w))
    if cols.desc_w > 0:
        parts.append(fit("Description", cols.desc_w))
    return " " * indicator_width + _join(parts)
