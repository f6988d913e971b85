"""SQLite note store: schema, queries and connection management."""

from __future__ import annotations

import contextlib
import importlib.resources
import logging
import os
import sqlite3
import uuid
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from bearmark.summary import preview

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

logger = logging.getLogger(__name__)

_SCHEMA = importlib.resources.files(__package__).joinpath("schema.sql").read_text()

UNTITLED = "Untitled Note"


class StoreError(Exception):
    """Raised when the note store cannot complete an operation."""


class NotFoundError(StoreError):
    """Raised when a note id does not exist."""

    def __init__(self, note_id: str) -> None:
        super().__init__(f"Note {note_id!r} not found")
        self.note_id = note_id


@dataclass
class Note:
    """A stored note. Timestamps are ISO-8601 UTC strings."""

    id: str
    title: str
    content: str
    created_at: str
    updated_at: str
    tags: list[str] = field(default_factory=list)

    @property
    def preview(self) -> str:
        return preview(self.content)

    def to_dict(self) -> dict[str, str | list[str]]:
        """Return a dict suitable for JSON serialization."""
        return {**asdict(self), "preview": self.preview}


class NoteStore(Protocol):
    """Persistence interface the editor session and the CLI depend on."""

    def create_note(
        self, title: str = "", content: str = "", tags: list[str] | None = None
    ) -> Note: ...

    def get_note(self, note_id: str) -> Note: ...

    def get_all_notes(self) -> list[Note]: ...

    def update_note(
        self,
        note_id: str,
        *,
        title: str | None = None,
        content: str | None = None,
        tags: list[str] | None = None,
    ) -> Note: ...

    def delete_note(self, note_id: str) -> None: ...

    def search_notes(self, query: str) -> list[Note]: ...


def _utcnow() -> str:
    return datetime.now(UTC).isoformat()


def _escape_like(text: str) -> str:
    """Escape LIKE special characters so they match literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@contextlib.contextmanager
def _store_errors(conn: sqlite3.Connection, action: str) -> Iterator[None]:
    """Roll back and re-raise SQLite failures as StoreError."""
    try:
        yield
    except sqlite3.Error as e:
        conn.rollback()
        msg = f"Failed to {action}: {e}"
        raise StoreError(msg) from e


class SqliteNoteStore:
    """NoteStore backed by a SQLite connection with the bearmark schema."""

    def __init__(self, conn: sqlite3.Connection, clock: Callable[[], str] = _utcnow) -> None:
        self.conn = conn
        self._clock = clock

    def _tags(self, note_id: str) -> list[str]:
        rows = self.conn.execute(
            "SELECT tag FROM note_tags WHERE note_id = ? ORDER BY position",
            (note_id,),
        ).fetchall()
        return [r["tag"] for r in rows]

    def _set_tags(self, note_id: str, tags: list[str]) -> None:
        self.conn.execute("DELETE FROM note_tags WHERE note_id = ?", (note_id,))
        self.conn.executemany(
            "INSERT INTO note_tags (note_id, position, tag) VALUES (?, ?, ?)",
            [(note_id, i, tag) for i, tag in enumerate(tags)],
        )

    def _row_to_note(self, row: sqlite3.Row) -> Note:
        return Note(
            id=row["note_id"],
            title=row["title"],
            content=row["content"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            tags=self._tags(row["note_id"]),
        )

    def create_note(
        self, title: str = "", content: str = "", tags: list[str] | None = None
    ) -> Note:
        """Insert a new note; a blank title becomes "Untitled Note"."""
        now = self._clock()
        note = Note(
            id=uuid.uuid4().hex[:12],
            title=title.strip() or UNTITLED,
            content=content,
            created_at=now,
            updated_at=now,
            tags=list(tags or []),
        )
        with _store_errors(self.conn, "create note"):
            self.conn.execute(
                """INSERT INTO notes (note_id, title, content, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?)""",
                (note.id, note.title, note.content, note.created_at, note.updated_at),
            )
            self._set_tags(note.id, note.tags)
            self.conn.commit()
        logger.debug("Created note %s", note.id)
        return note

    def get_note(self, note_id: str) -> Note:
        with _store_errors(self.conn, "read note"):
            row = self.conn.execute("SELECT * FROM notes WHERE note_id = ?", (note_id,)).fetchone()
            if row is None:
                raise NotFoundError(note_id)
            return self._row_to_note(row)

    def get_all_notes(self) -> list[Note]:
        """Return every note, most recently updated first."""
        with _store_errors(self.conn, "list notes"):
            rows = self.conn.execute(
                "SELECT * FROM notes ORDER BY updated_at DESC, rowid DESC"
            ).fetchall()
            return [self._row_to_note(r) for r in rows]

    def update_note(
        self,
        note_id: str,
        *,
        title: str | None = None,
        content: str | None = None,
        tags: list[str] | None = None,
    ) -> Note:
        """Apply the given fields and bump updated_at. Raises NotFoundError."""
        note = self.get_note(note_id)
        if title is not None:
            note.title = title.strip() or UNTITLED
        if content is not None:
            note.content = content
        if tags is not None:
            note.tags = list(tags)
        note.updated_at = self._clock()
        with _store_errors(self.conn, "update note"):
            self.conn.execute(
                "UPDATE notes SET title = ?, content = ?, updated_at = ? WHERE note_id = ?",
                (note.title, note.content, note.updated_at, note_id),
            )
            if tags is not None:
                self._set_tags(note_id, note.tags)
            self.conn.commit()
        logger.debug("Updated note %s", note_id)
        return note

    def delete_note(self, note_id: str) -> None:
        """Delete a note and its tags (via CASCADE). Raises NotFoundError."""
        with _store_errors(self.conn, "delete note"):
            cur = self.conn.execute("DELETE FROM notes WHERE note_id = ?", (note_id,))
            self.conn.commit()
        if cur.rowcount == 0:
            raise NotFoundError(note_id)
        logger.debug("Deleted note %s", note_id)

    def search_notes(self, query: str) -> list[Note]:
        """Case-insensitive substring match over title, content and tags.

        A blank query returns every note. Results are ordered like get_all_notes.
        """
        query = query.strip()
        if not query:
            return self.get_all_notes()
        like = f"%{_escape_like(query.casefold())}%"
        with _store_errors(self.conn, "search notes"):
            rows = self.conn.execute(
                """SELECT * FROM notes
                   WHERE casefold(title) LIKE :like ESCAPE '\\'
                      OR casefold(content) LIKE :like ESCAPE '\\'
                      OR EXISTS (
                          SELECT 1 FROM note_tags t
                          WHERE t.note_id = notes.note_id
                            AND casefold(t.tag) LIKE :like ESCAPE '\\'
                      )
                   ORDER BY updated_at DESC, rowid DESC""",
                {"like": like},
            ).fetchall()
            return [self._row_to_note(r) for r in rows]


def get_db_path() -> Path:
    """Return the path to the SQLite database, following XDG conventions."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    base = Path(xdg_data) if xdg_data else Path.home() / ".local" / "share"
    return base / "bearmark" / "notes.db"


def _prepare(conn: sqlite3.Connection) -> None:
    conn.row_factory = sqlite3.Row
    # LIKE only folds ASCII letters
    conn.create_function("casefold", 1, str.casefold, deterministic=True)
    conn.executescript(_SCHEMA)


def init_db(path: Path) -> sqlite3.Connection:
    """Create or open the database and ensure the schema exists."""
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    _prepare(conn)
    return conn


def open_memory_db() -> sqlite3.Connection:
    """Create an in-memory database with the full schema applied (for tests)."""
    conn = sqlite3.connect(":memory:")
    conn.execute("PRAGMA foreign_keys=ON")
    _prepare(conn)
    return conn


def open_db(path: Path | None = None) -> sqlite3.Connection:
    """Open the database at `path`, or at the default XDG path."""
    return init_db(path or get_db_path())
