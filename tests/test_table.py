"""Tests for table navigation and structural table edits."""

from __future__ import annotations

import pytest

from bearmark.edits import Edit
from bearmark.table import (
    GridRow,
    TableGrid,
    delete_table_column,
    delete_table_row,
    insert_table_column,
    insert_table_row,
    move_table_column,
    move_table_row,
    table_tab_next,
    table_tab_prev,
)

TABLE = "| a | b |\n| --- | --- |\n| 1 | 2 |"
TABLE2 = TABLE + "\n| 3 | 4 |"


# === GridRow ===


@pytest.mark.parametrize(
    "line",
    ["| a | b |", "a | b", "  | x |  ", "| --- | :-: |", r"| a \| b | c |", "|"],
)
def test_parse_render_identity(line: str) -> None:
    assert GridRow.parse(line).render() == line


def test_parse_cells_and_borders() -> None:
    row = GridRow.parse("| a | b |")
    assert row.cells == [" a ", " b "]
    assert row.lead == ""
    assert row.trail == ""


def test_parse_without_borders() -> None:
    row = GridRow.parse("a | b")
    assert row.cells == ["a ", " b"]
    assert row.lead is None
    assert row.trail is None


def test_escaped_pipe_stays_in_cell() -> None:
    assert GridRow.parse(r"| a \| b | c |").cells == [r" a \| b ", " c "]


def test_separator_detection() -> None:
    assert GridRow.parse("| --- | :--: |").is_separator
    assert not GridRow.parse("| a | --- |").is_separator


def test_column_at() -> None:
    row = GridRow.parse("| a | b |")
    assert row.column_at(0) == -1
    assert row.column_at(2) == 0
    assert row.column_at(6) == 1


def test_grid_around_stops_at_non_table_lines() -> None:
    lines = ["intro", "| a |", "| b |", "", "| c |"]
    grid = TableGrid.around(lines, 2)
    assert grid is not None
    assert grid.first == 1
    assert grid.render() == ["| a |", "| b |"]
    assert TableGrid.around(lines, 0) is None


# === table_tab_next() / table_tab_prev() ===


def test_tab_moves_to_next_cell() -> None:
    assert table_tab_next("| a | b |", 2) == Edit("| a | b |", 6)


def test_tab_wraps_past_separator() -> None:
    assert table_tab_next(TABLE, 6) == Edit(TABLE, 26)


def test_tab_past_last_cell_adds_row() -> None:
    assert table_tab_next(TABLE, 30) == Edit(TABLE + "\n|   |   |", 36)


def test_tab_without_border_pipes() -> None:
    assert table_tab_next("a | b", 0) == Edit("a | b", 4)


def test_tab_before_leading_border_goes_to_first_cell() -> None:
    assert table_tab_next("| a | b |", 0) == Edit("| a | b |", 2)


def test_tab_in_table_between_paragraphs() -> None:
    text = "intro\n| a | b |\n\nafter"
    assert table_tab_next(text, 8) == Edit(text, 12)


def test_tab_outside_table_is_noop() -> None:
    assert table_tab_next("plain", 2) == Edit("plain", 2)


def test_shift_tab_wraps_to_previous_row() -> None:
    assert table_tab_prev(TABLE, 26) == Edit(TABLE, 6)


def test_shift_tab_moves_to_previous_cell() -> None:
    assert table_tab_prev(TABLE, 30) == Edit(TABLE, 26)


def test_shift_tab_in_first_cell_is_noop() -> None:
    assert table_tab_prev(TABLE, 2) == Edit(TABLE, 2)


# === insert_table_row() / delete_table_row() ===


def test_insert_row_from_header_goes_below_separator() -> None:
    expected = "| a | b |\n| --- | --- |\n|     |     |\n| 1 | 2 |"
    assert insert_table_row(TABLE, 2) == Edit(expected, 26)


def test_insert_row_below_data_row() -> None:
    assert insert_table_row(TABLE, 26) == Edit(TABLE + "\n|   |   |", 36)


def test_delete_row() -> None:
    expected = "| a | b |\n| --- | --- |\n| 3 | 4 |"
    assert delete_table_row(TABLE2, 26) == Edit(expected, 26)


def test_delete_last_row_moves_caret_up() -> None:
    assert delete_table_row(TABLE2, 36) == Edit(TABLE, 26)


def test_delete_only_data_row_is_noop() -> None:
    assert delete_table_row(TABLE, 26) == Edit(TABLE, 26)


def test_delete_header_is_noop() -> None:
    assert delete_table_row(TABLE2, 2) == Edit(TABLE2, 2)


def test_delete_separator_is_noop() -> None:
    assert delete_table_row(TABLE2, 12) == Edit(TABLE2, 12)


def test_delete_row_of_one_row_table_is_noop() -> None:
    assert delete_table_row("| a | b |", 2) == Edit("| a | b |", 2)


# === insert_table_column() / delete_table_column() ===


def test_insert_column() -> None:
    assert insert_table_column("| a | b |", 2) == Edit("| a |     | b |", 6)


def test_insert_column_extends_separator() -> None:
    edit = insert_table_column(TABLE, 6)
    assert edit.text.split("\n") == [
        "| a | b |     |",
        "| --- | --- | --- |",
        "| 1 | 2 |     |",
    ]
    assert edit.caret == 10


def test_delete_column() -> None:
    assert delete_table_column(TABLE, 6) == Edit("| a |\n| --- |\n| 1 |", 2)


def test_delete_last_column_is_noop() -> None:
    assert delete_table_column("| a |\n| 1 |", 2) == Edit("| a |\n| 1 |", 2)


def test_delete_column_keeps_borderless_table() -> None:
    """A two-column table without outer pipes keeps both columns."""
    assert delete_table_column("a | b\nc | d", 0) == Edit("a | b\nc | d", 0)


def test_delete_column_borderless_wide_table() -> None:
    assert delete_table_column("a | b | c\nd | e | f", 0) == Edit(" b | c\n e | f", 1)


# === move_table_column() / move_table_row() ===


def test_move_column_right() -> None:
    assert move_table_column("| a | b |", 2, 1) == Edit("| b | a |", 6)


def test_move_column_left() -> None:
    assert move_table_column("| a | b |", 6, -1) == Edit("| b | a |", 2)


def test_move_column_past_edge_is_noop() -> None:
    assert move_table_column("| a | b |", 2, -1) == Edit("| a | b |", 2)
    assert move_table_column("| a | b |", 6, 1) == Edit("| a | b |", 6)


def test_move_column_moves_whole_column() -> None:
    edit = move_table_column(TABLE, 2, 1)
    assert edit.text == "| b | a |\n| --- | --- |\n| 2 | 1 |"


def test_move_row_down() -> None:
    expected = "| a | b |\n| --- | --- |\n| 3 | 4 |\n| 1 | 2 |"
    assert move_table_row(TABLE2, 26, 1) == Edit(expected, 36)


def test_move_row_up() -> None:
    expected = "| a | b |\n| --- | --- |\n| 3 | 4 |\n| 1 | 2 |"
    assert move_table_row(TABLE2, 36, -1) == Edit(expected, 26)


def test_move_row_across_separator_is_noop() -> None:
    assert move_table_row(TABLE2, 26, -1) == Edit(TABLE2, 26)
    assert move_table_row(TABLE2, 2, 1) == Edit(TABLE2, 2)


def test_move_row_past_end_is_noop() -> None:
    assert move_table_row(TABLE2, 36, 1) == Edit(TABLE2, 36)


def test_move_row_without_separator() -> None:
    assert move_table_row("| a |\n| b |", 2, 1) == Edit("| b |\n| a |", 8)


def test_table_ops_outside_table_are_noops() -> None:
    for op in (insert_table_row, delete_table_row, insert_table_column, delete_table_column):
        assert op("no table", 3) == Edit("no table", 3)
