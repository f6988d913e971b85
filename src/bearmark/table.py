"""Table grid model and the table editing operations built on it.

A table is any contiguous run of lines containing an unescaped `|`. The grid
is rebuilt from the buffer for every operation and thrown away afterwards.

Minimum-shape policy: the header row and the `---` separator row are never
deleted and rows never move across the separator; the last data row and the
last column are never deleted. A column is kept when deleting it would leave a
borderless row without a pipe.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from bearmark.edits import Edit, clamp, line_bounds, line_index, line_offsets
from bearmark.lines import PIPE_RE, has_pipe

SEPARATOR_CELL_RE = re.compile(r"^\s*:?-+:?\s*$")
MIN_NEW_CELL_WIDTH = 3
NEW_CELL = "     "
NEW_SEPARATOR_CELL = " --- "


@dataclass
class GridRow:
    """One table line split into cells.

    `lead` and `trail` hold whatever surrounds the outer border pipes, or
    None when the line has no border pipe on that side.
    """

    cells: list[str]
    lead: str | None = None
    trail: str | None = None

    @classmethod
    def parse(cls, line: str) -> GridRow:
        """Split a line on unescaped pipes."""
        parts = PIPE_RE.split(line)
        lead = trail = None
        if len(parts) > 1 and not parts[0].strip():
            lead = parts.pop(0)
        if len(parts) > 1 and not parts[-1].strip():
            trail = parts.pop()
        return cls(parts, lead, trail)

    def render(self) -> str:
        """Rebuild the line; parsing then rendering is the identity."""
        head = "" if self.lead is None else f"{self.lead}|"
        tail = "" if self.trail is None else f"|{self.trail}"
        return head + "|".join(self.cells) + tail

    @property
    def is_separator(self) -> bool:
        return bool(self.cells) and all(SEPARATOR_CELL_RE.match(cell) for cell in self.cells)

    def blank(self) -> GridRow:
        """Return an empty data row with the same shape as this one."""
        cells = [" " * max(len(cell), MIN_NEW_CELL_WIDTH) for cell in self.cells]
        return GridRow(cells, self.lead, "" if self.trail is not None else None)

    def column_at(self, column: int) -> int:
        """Return the cell index under a line column; -1 before the leading border."""
        pipes = len(PIPE_RE.findall(self.render(), 0, column))
        return pipes - (1 if self.lead is not None else 0)

    def cell_offset(self, index: int) -> int:
        """Return the line column where cell `index` begins (just past its pipe)."""
        base = 0 if self.lead is None else len(self.lead) + 1
        return base + sum(len(cell) + 1 for cell in self.cells[:index])

    def cell_start(self, index: int) -> int:
        """Return the caret column for cell `index`: its first non-space character."""
        cell = self.cells[index]
        padding = len(cell) - len(cell.lstrip(" "))
        if padding == len(cell):
            # Blank cell: sit one space in so typing lands inside the padding
            padding = min(1, len(cell))
        return self.cell_offset(index) + padding


@dataclass
class TableGrid:
    """Rows x columns view over one contiguous block of table lines."""

    first: int  # line index of the first row in the document
    rows: list[GridRow]

    @classmethod
    def around(cls, lines: list[str], index: int) -> TableGrid | None:
        """Build the grid for the block containing line `index`, if it is a table line."""
        if not 0 <= index < len(lines) or not has_pipe(lines[index]):
            return None
        first = index
        while first > 0 and has_pipe(lines[first - 1]):
            first -= 1
        last = index
        while last + 1 < len(lines) and has_pipe(lines[last + 1]):
            last += 1
        return cls(first, [GridRow.parse(line) for line in lines[first : last + 1]])

    @property
    def column_count(self) -> int:
        return max(len(row.cells) for row in self.rows)

    @property
    def separator_index(self) -> int | None:
        for i, row in enumerate(self.rows):
            if row.is_separator:
                return i
        return None

    def render(self) -> list[str]:
        return [row.render() for row in self.rows]

    def can_delete_row(self, index: int) -> bool:
        separator = self.separator_index
        if separator is None:
            return len(self.rows) > 1
        if index <= separator:
            return False
        return len(self.rows) - separator - 1 > 1

    def can_swap_rows(self, a: int, b: int) -> bool:
        if not (0 <= a < len(self.rows) and 0 <= b < len(self.rows)):
            return False
        return not (self.rows[a].is_separator or self.rows[b].is_separator)

    def insert_row(self, after: int) -> int:
        """Insert a blank row below `after` (never inside the header); return its index."""
        separator = self.separator_index
        if separator is not None and after < separator:
            after = separator
        self.rows.insert(after + 1, self.rows[after].blank())
        return after + 1

    def insert_column(self, index: int) -> None:
        for row in self.rows:
            cell = NEW_SEPARATOR_CELL if row.is_separator else NEW_CELL
            row.cells.insert(min(index, len(row.cells)), cell)

    def can_delete_column(self, index: int) -> bool:
        """A borderless row needs two cells left to keep its pipe."""
        if self.column_count <= 1:
            return False
        return all(
            row.lead is not None or row.trail is not None or len(row.cells) > 2
            for row in self.rows
            if index < len(row.cells)
        )

    def delete_column(self, index: int) -> None:
        for row in self.rows:
            if index < len(row.cells) and len(row.cells) > 1:
                del row.cells[index]

    def swap_columns(self, a: int, b: int) -> None:
        for row in self.rows:
            if a < len(row.cells) and b < len(row.cells):
                row.cells[a], row.cells[b] = row.cells[b], row.cells[a]


@dataclass
class _Cursor:
    """Where the caret sits inside a table."""

    lines: list[str]
    grid: TableGrid
    block: int  # number of lines the table occupied before editing
    row: int  # index into grid.rows
    column: int  # cell index, -1 before the leading border
    line_column: int  # caret column within the line

    @property
    def current(self) -> GridRow:
        return self.grid.rows[self.row]

    def assemble(self) -> list[str]:
        lines = list(self.lines)
        lines[self.grid.first : self.grid.first + self.block] = self.grid.render()
        return lines

    def result(self, row: int, line_column: int) -> Edit:
        """Render the grid and put the caret at `line_column` on grid row `row`."""
        lines = self.assemble()
        index = self.grid.first + row
        line_column = min(line_column, len(lines[index]))
        return Edit("\n".join(lines), line_offsets(lines)[index] + line_column)

    def edit(self, row: int, cell: int) -> Edit:
        """Render the grid and put the caret at the start of `cell` on `row`."""
        grid_row = self.grid.rows[row]
        cell = max(0, min(cell, len(grid_row.cells) - 1))
        return self.result(row, grid_row.cell_start(cell))


def _locate(text: str, caret: int) -> _Cursor | None:
    lines = text.split("\n")
    index = line_index(text, caret)
    grid = TableGrid.around(lines, index)
    if grid is None:
        return None
    line_column = caret - line_bounds(text, caret)[0]
    row = index - grid.first
    column = grid.rows[row].column_at(line_column)
    return _Cursor(lines, grid, len(grid.rows), row, column, line_column)


# --- Navigation ---


def table_tab_next(text: str, caret: int) -> Edit:
    """Move to the next cell, wrapping to the next row; add a row past the last cell."""
    caret = clamp(caret, text)
    cursor = _locate(text, caret)
    if cursor is None:
        return Edit.unchanged(text, caret)
    target = cursor.column + 1
    if target < len(cursor.current.cells):
        return cursor.edit(cursor.row, target)
    for row in range(cursor.row + 1, len(cursor.grid.rows)):
        if not cursor.grid.rows[row].is_separator:
            return cursor.edit(row, 0)
    return insert_table_row(text, caret)


def table_tab_prev(text: str, caret: int) -> Edit:
    """Move to the previous cell, wrapping to the last cell of the previous row."""
    caret = clamp(caret, text)
    cursor = _locate(text, caret)
    if cursor is None:
        return Edit.unchanged(text, caret)
    target = min(cursor.column, len(cursor.current.cells)) - 1
    if target >= 0:
        return cursor.edit(cursor.row, target)
    for row in range(cursor.row - 1, -1, -1):
        grid_row = cursor.grid.rows[row]
        if not grid_row.is_separator:
            return cursor.edit(row, len(grid_row.cells) - 1)
    return Edit.unchanged(text, caret)


# --- Structural edits ---


def insert_table_row(text: str, caret: int) -> Edit:
    """Insert a blank row below the caret's row; the caret moves into its first cell."""
    caret = clamp(caret, text)
    cursor = _locate(text, caret)
    if cursor is None:
        return Edit.unchanged(text, caret)
    row = cursor.grid.insert_row(cursor.row)
    return cursor.edit(row, 0)


def delete_table_row(text: str, caret: int) -> Edit:
    """Delete the caret's row unless the minimum-shape policy forbids it."""
    caret = clamp(caret, text)
    cursor = _locate(text, caret)
    if cursor is None or not cursor.grid.can_delete_row(cursor.row):
        return Edit.unchanged(text, caret)
    del cursor.grid.rows[cursor.row]
    row = min(cursor.row, len(cursor.grid.rows) - 1)
    return cursor.edit(row, cursor.column)


def insert_table_column(text: str, caret: int) -> Edit:
    """Insert an empty column to the right of the caret's cell."""
    caret = clamp(caret, text)
    cursor = _locate(text, caret)
    if cursor is None:
        return Edit.unchanged(text, caret)
    target = max(cursor.column, 0) + 1
    cursor.grid.insert_column(target)
    return cursor.edit(cursor.row, target)


def delete_table_column(text: str, caret: int) -> Edit:
    """Delete the caret's column; the last remaining column is kept."""
    caret = clamp(caret, text)
    cursor = _locate(text, caret)
    if cursor is None:
        return Edit.unchanged(text, caret)
    column = max(0, min(cursor.column, len(cursor.current.cells) - 1))
    if not cursor.grid.can_delete_column(column):
        return Edit.unchanged(text, caret)
    cursor.grid.delete_column(column)
    return cursor.edit(cursor.row, column)


def move_table_column(text: str, caret: int, direction: int) -> Edit:
    """Swap the caret's column with its neighbour; the caret travels with the cell."""
    caret = clamp(caret, text)
    cursor = _locate(text, caret)
    if cursor is None:
        return Edit.unchanged(text, caret)
    column = cursor.column
    target = column + direction
    if not (0 <= column < len(cursor.current.cells) and 0 <= target < len(cursor.current.cells)):
        return Edit.unchanged(text, caret)
    within = cursor.line_column - cursor.current.cell_offset(column)
    cursor.grid.swap_columns(column, target)
    moved = cursor.current
    within = min(within, len(moved.cells[target]))
    return cursor.result(cursor.row, moved.cell_offset(target) + within)


def move_table_row(text: str, caret: int, direction: int) -> Edit:
    """Swap the caret's row with the adjacent row; the caret keeps its column."""
    caret = clamp(caret, text)
    cursor = _locate(text, caret)
    if cursor is None:
        return Edit.unchanged(text, caret)
    target = cursor.row + direction
    if not cursor.grid.can_swap_rows(cursor.row, target):
        return Edit.unchanged(text, caret)
    rows = cursor.grid.rows
    rows[cursor.row], rows[target] = rows[target], rows[cursor.row]
    return cursor.result(target, cursor.line_column)
