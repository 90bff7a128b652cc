"""
Tests for file path completion.
"""

import sys
from pathlib import Path

# Add scripts directory to path so datalathe_tui package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

from datalathe_tui.widgets.path_input import common_prefix, path_completions  # noqa: E402


def test_completes_files_and_marks_directories(tmp_path):
    (tmp_path / "orders.csv").write_text("id\n1\n")
    (tmp_path / "orders.parquet").write_text("")
    (tmp_path / "old").mkdir()
    (tmp_path / "users.csv").write_text("")

    matches = path_completions(str(tmp_path / "o"))
    assert matches == [
        str(tmp_path / "old") + "/",
        str(tmp_path / "orders.csv"),
        str(tmp_path / "orders.parquet"),
    ]


def test_trailing_slash_lists_directory(tmp_path):
    (tmp_path / "a.csv").write_text("")
    (tmp_path / "b.csv").write_text("")
    assert path_completions(str(tmp_path) + "/") == [
        str(tmp_path / "a.csv"),
        str(tmp_path / "b.csv"),
    ]


def test_missing_directory_yields_nothing(tmp_path):
    assert path_completions(str(tmp_path / "nope" / "x")) == []


def test_common_prefix():
    assert common_prefix([]) == ""
    assert common_prefix(["/data/orders.csv", "/data/orders.parquet"]) == "/data/orders."
