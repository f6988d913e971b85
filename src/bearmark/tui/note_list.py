"""Note list widget: a DataTable of notes, most recently updated first."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from rich.text import Text
from textual.binding import Binding
from textual.widgets import DataTable

if TYPE_CHECKING:
    from textual.binding import BindingType

    from bearmark.db import Note

COL_TITLE_MAX = 32


def _short_time(timestamp: str) -> str:
    """Trim an ISO timestamp to minutes: 2026-02-09T07:00 -> 2026-02-09 07:00."""
    return timestamp[:16].replace("T", " ")


def _tags_cell(tags: list[str]) -> Text:
    return Text(" ".join(f"#{tag}" for tag in tags), style="magenta")


class NoteList(DataTable[str | Text]):
    """A DataTable listing notes; row keys are note ids."""

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("j", "cursor_down", "Cursor down", show=False),
        Binding("k", "cursor_up", "Cursor up", show=False),
    ]

    def __init__(self, *, id: str | None = None) -> None:  # noqa: A002
        super().__init__(cursor_type="row", id=id)
        self._note_ids: list[str] = []

    def refresh_data(self, notes: list[Note], *, keep: str | None = None) -> None:
        """Replace the rows with `notes`, keeping the cursor on note `keep` if listed."""
        if not self.columns:
            self.add_columns("Title", "Updated", "Tags")
        keep = keep or self.selected_note_id
        self.clear()
        self._note_ids.clear()
        for note in notes:
            title = note.title
            if len(title) > COL_TITLE_MAX:
                title = title[: COL_TITLE_MAX - 1] + "…"
            self.add_row(title, _short_time(note.updated_at), _tags_cell(note.tags), key=note.id)
            self._note_ids.append(note.id)
        if keep in self._note_ids:
            self.move_cursor(row=self._note_ids.index(keep))

    @property
    def note_ids(self) -> list[str]:
        return list(self._note_ids)

    @property
    def selected_note_id(self) -> str | None:
        """Return the id of the highlighted note."""
        if self.cursor_row < 0 or self.cursor_row >= len(self._note_ids):
            return None
        return self._note_ids[self.cursor_row]

    def select_note(self, note_id: str) -> None:
        if note_id in self._note_ids:
            self.move_cursor(row=self._note_ids.index(note_id))
