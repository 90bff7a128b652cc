"""
Tests for chip column allocation and the grid viewport.
"""

import sys
from pathlib import Path

import pytest
from rich.cells import cell_len

# Add scripts directory to path so datalathe_tui package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

from datalathe_tui.client import Chip, ChipListing, ChipMetadata  # noqa: E402
from datalathe_tui.utils.chip_columns import (  # noqa: E402
    DATE_WIDTH, MIN_COLUMN_WIDTH, MIN_DESCRIPTION_WIDTH,
    chip_columns, chip_header, chip_label, has_any_sub_chips, rendered_width, sub_chip_count,
)
from datalathe_tui.utils.formatting import ELLIPSIS, fit, slice_cells, truncate_string  # noqa: E402
from datalathe_tui.utils.viewport import (  # noqa: E402
    SCROLL_STEP, GridViewport, ListWindow, ViewportState, compute_column_widths,
)
from datalathe_tui.widgets.chips_list import chip_entries  # noqa: E402


CHIPS = [
    Chip("c1", "c1", "orders"),
    Chip("c1", "s1", "orders", "2024-01"),
    Chip("c1", "s2", "orders", "2024-02"),
    Chip("c2", "c2", "users"),
]


class TestChipColumns:
    """Width allocation for aligned chip rows."""

    def test_sixty_wide_with_four_char_indicator(self):
        cols = chip_columns(60, 4, True)
        assert cols.name_w >= MIN_COLUMN_WIDTH
        assert cols.table_w >= MIN_COLUMN_WIDTH
        assert cols.desc_w == 0 or cols.desc_w >= MIN_DESCRIPTION_WIDTH
        assert rendered_width(cols, 4) <= 60

        header = chip_header(cols, 4)
        assert ("Description" in header) == (cols.desc_w > 0)

    @pytest.mark.parametrize("indicator", [2, 4])
    def test_row_never_exceeds_available_width(self, indicator):
        for width in range(40 + indicator - 2, 200):
            for subs in (True, False):
                cols = chip_columns(width, indicator, subs)
                assert rendered_width(cols, indicator) <= width, (width, subs)

    def test_floors_hold_when_too_narrow(self):
        cols = chip_columns(10, 2, True)
        assert cols.name_w == MIN_COLUMN_WIDTH
        assert cols.table_w == MIN_COLUMN_WIDTH
        assert cols.sub_chips_w == 0
        assert cols.desc_w == 0
        assert cols.date_w == DATE_WIDTH

    def test_description_appears_when_wide(self):
        cols = chip_columns(160, 2, False)
        assert cols.desc_w >= MIN_DESCRIPTION_WIDTH
        assert rendered_width(cols) == 160

    def test_header_and_rows_align(self):
        cols = chip_columns(100, 4, has_any_sub_chips(CHIPS))
        meta = ChipMetadata("c1", name="Orders snapshot", description="January orders")
        header = chip_header(cols, 4)
        row = chip_label("c1", meta, CHIPS, cols)
        other = chip_label("c2", None, CHIPS, cols)

        assert len(header) == rendered_width(cols, 4)
        assert len(row) + 4 == len(header)
        assert len(other) == len(row)
        assert "2 subs" in row
        assert header.index("Tables") - 4 == row.index("orders")

    def test_long_names_are_truncated(self):
        cols = chip_columns(60, 2, False)
        meta = ChipMetadata("c1", name="x" * 80)
        row = chip_label("c1", meta, CHIPS, cols)
        assert row.startswith("x" * (cols.name_w - 1) + ELLIPSIS)

    def test_wide_names_keep_row_width(self):
        cols = chip_columns(80, 2, False)
        wide = chip_label("c1", ChipMetadata("c1", name="データ" * 10), CHIPS, cols)
        plain = chip_label("c2", None, CHIPS, cols)
        assert cell_len(wide) == cell_len(plain) == rendered_width(cols) - 2
        assert ELLIPSIS in wide

    def test_sidebar_and_labels_list_the_same_tables(self):
        chips = [Chip("c1", "c1", "orders"), Chip("c1", "s1", "orders_archive", "2023")]
        listing = ChipListing(chips, [])
        entry = chip_entries(listing)[0]
        assert entry.tables == "orders, orders_archive"
        assert listing.tables_for("c1") == ["orders", "orders_archive"]
        assert "orders, orders_archive" in chip_label("c1", None, chips, chip_columns(160, 2, True))

    def test_sub_chip_helpers(self):
        assert has_any_sub_chips(CHIPS) is True
        assert has_any_sub_chips([Chip("a", "a")]) is False
        assert sub_chip_count("c1", CHIPS) == 2
        assert sub_chip_count("c2", CHIPS) == 0


def make_rows(n: int) -> list[dict]:
    return [{"id": i, "name": f"row {i}", "amount": i * 1.5} for i in range(n)]


class TestGridViewport:
    """Paging, panning and clamping over a result grid."""

    # height 24 leaves a page of 20 rows
    WIDTH, HEIGHT = 80, 24

    def test_five_hundred_rows_paging(self):
        grid = GridViewport(make_rows(500))
        state = ViewportState()
        assert GridViewport.page_size(self.HEIGHT) == 20
        assert "pg 1/25" in grid.status(state, self.WIDTH, self.HEIGHT)

        state = grid.scroll(state, "page_down", self.WIDTH, self.HEIGHT)
        assert state.scroll_row == 20
        assert "pg 2/25" in grid.status(state, self.WIDTH, self.HEIGHT)

        for _ in range(30):
            state = grid.scroll(state, "page_down", self.WIDTH, self.HEIGHT)
        assert state.scroll_row == 480
        assert "pg 25/25" in grid.status(state, self.WIDTH, self.HEIGHT)

    @pytest.mark.parametrize("row,col", [(-5, -5), (0, 0), (9999, 9999), (250, 3), (-1, 500)])
    def test_clamp_is_idempotent(self, row, col):
        grid = GridViewport([{"wide": "w" * 30, "other": "o" * 30, "third": "t" * 30}] * 50)
        once = grid.clamp(ViewportState(row, col), 40, 10)
        twice = grid.clamp(once, 40, 10)
        assert once == twice
        assert 0 <= once.scroll_row <= grid.max_scroll_row(10)
        assert 0 <= once.scroll_col <= grid.max_scroll_col(40)

    def test_render_slices_to_window(self):
        grid = GridViewport(make_rows(3))
        lines = grid.render(ViewportState(), 10, self.HEIGHT)
        # header, separator, three rows, status
        assert len(lines) == 6
        assert all(len(line) <= 10 for line in lines[:-1])

    def test_pan_marker_only_when_wider_than_window(self):
        grid = GridViewport(make_rows(3))
        assert "◄►" not in grid.status(ViewportState(), 200, self.HEIGHT)
        assert "col ◄►" in grid.status(ViewportState(), 10, self.HEIGHT)

        state = grid.scroll(ViewportState(), "right", 10, self.HEIGHT)
        assert state.scroll_col > 0
        assert grid.scroll(state, "home", 10, self.HEIGHT) == ViewportState()

    def test_single_steps_and_page_up_clamp(self):
        grid = GridViewport(make_rows(100))
        state = grid.scroll(ViewportState(), "down", self.WIDTH, self.HEIGHT)
        state = grid.scroll(state, "down", self.WIDTH, self.HEIGHT)
        assert state.scroll_row == 2
        state = grid.scroll(state, "up", self.WIDTH, self.HEIGHT)
        assert state.scroll_row == 1

        assert grid.scroll(ViewportState(5, 0), "page_up", self.WIDTH, self.HEIGHT).scroll_row == 0
        assert grid.scroll(ViewportState(), "up", self.WIDTH, self.HEIGHT) == ViewportState()
        assert grid.scroll(ViewportState(75, 0), "page_down", self.WIDTH, self.HEIGHT).scroll_row == 80
        assert grid.scroll(ViewportState(), "end", self.WIDTH, self.HEIGHT).scroll_row == 80

    def test_left_and_right_move_by_scroll_step(self):
        grid = GridViewport([{"wide": "w" * 30, "other": "o" * 30, "third": "t" * 30}])
        assert grid.max_scroll_col(40) == 56
        state = grid.scroll(ViewportState(), "right", 40, self.HEIGHT)
        assert state.scroll_col == SCROLL_STEP
        state = grid.scroll(state, "right", 40, self.HEIGHT)
        assert state.scroll_col == 2 * SCROLL_STEP
        state = grid.scroll(state, "left", 40, self.HEIGHT)
        assert state.scroll_col == SCROLL_STEP
        assert grid.scroll(ViewportState(0, 3), "left", 40, self.HEIGHT).scroll_col == 0
        assert grid.scroll(ViewportState(0, 52), "right", 40, self.HEIGHT).scroll_col == 56

    def test_wide_characters_stay_aligned(self):
        grid = GridViewport([{"city": "東京都市圏", "n": 1}, {"city": "abc", "n": 2}])
        assert grid.widths == [10, 1]
        lines = [grid.header_line(), grid.row_line(0), grid.row_line(1)]
        assert [cell_len(line) for line in lines] == [grid.total_width] * 3
        assert {cell_len(line.split("│")[0]) for line in lines} == {11}

    def test_wide_characters_sliced_by_cells(self):
        grid = GridViewport([{"text": "日本語のテキスト" * 3}])
        assert grid.widths == [30]

        lines = grid.render(ViewportState(), 10, self.HEIGHT)
        assert all(cell_len(line) <= 10 for line in lines[:-1])
        assert lines[2] == "日本語のテ"

        # Offset 3 splits a wide character at both edges
        lines = grid.render(ViewportState(0, 3), 10, self.HEIGHT)
        assert lines[2] == " 語のテキ "
        assert cell_len(lines[2]) == 10

    def test_empty_grid_renders_placeholder(self):
        grid = GridViewport([], ["a", "b"], empty_message="Query returned no rows")
        assert grid.render(ViewportState(), 80, 24) == ["Query returned no rows"]
        assert grid.scroll(ViewportState(3, 3), "down", 80, 24) == ViewportState()

    def test_long_cells_truncated_with_ellipsis(self):
        grid = GridViewport([{"text": "a" * 100, "none": None}])
        assert grid.widths == [30, 4]
        line = grid.row_line(0)
        assert ("a" * 29 + ELLIPSIS) in line

    def test_column_widths_capped(self):
        widths = compute_column_widths(["a", "long_header"], [{"a": "x" * 50, "long_header": 1}], 20)
        assert widths == [20, 11]

    def test_truncate_string_edges(self):
        assert truncate_string("abc", 0) == ""
        assert truncate_string("abc", 1) == ELLIPSIS
        assert truncate_string("abc", 3) == "abc"


class TestCellWidths:
    """Display-width aware fitting and slicing."""

    def test_fit_counts_cells(self):
        assert fit("日本語", 5) == "日本" + ELLIPSIS
        assert fit("日", 4) == "日  "
        assert truncate_string("日本", 3) == "日" + ELLIPSIS
        assert cell_len(fit("a日b本c", 4)) == 4

    def test_slice_cells(self):
        assert slice_cells("abcdef", 2, 3) == "cde"
        assert slice_cells("ab日本", 1, 3) == "b日"
        assert slice_cells("日本", 1, 2) == " " + " "
        assert slice_cells("abc", 5, 3) == ""


class TestListWindow:
    """Cursor plus scroll offset for selection lists."""

    def test_cursor_stays_visible(self):
        window = ListWindow()
        for _ in range(7):
            window.move(1, 10, 3)
        assert window.cursor == 7
        assert list(window.visible_range(10, 3)) == [5, 6, 7]
        assert window.can_scroll_up() is True
        assert window.can_scroll_down(10, 3) is True

    def test_cursor_clamped_to_list(self):
        window = ListWindow()
        window.move(-3, 5, 3)
        assert window.cursor == 0
        window.move(50, 5, 3)
        assert window.cursor == 4
        assert window.can_scroll_down(5, 3) is False

    def test_empty_list(self):
        window = ListWindow(cursor=4, offset=2)
        assert list(window.visible_range(0, 3)) == []
        assert (window.cursor, window.offset) == (0, 0)
