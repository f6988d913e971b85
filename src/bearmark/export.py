"""Export notes as plain Markdown files."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bearmark.db import Note

logger = logging.getLogger(__name__)

_UNSAFE_RE = re.compile(r"[^\w\- ]+")


def export_markdown(note: Note) -> str:
    """Return the note as Markdown: title, blank line, content."""
    return f"{note.title}\n\n{note.content}"


def export_filename(note: Note) -> str:
    """Return a filesystem-safe file name for the note."""
    stem = _UNSAFE_RE.sub("", note.title).strip().replace(" ", "-")
    return f"{stem or 'note'}.md"


def _free_path(directory: Path, filename: str) -> Path:
    """Return `directory/filename`, numbered `-2`, `-3`, ... if already taken."""
    path = directory / filename
    counter = 2
    while path.exists():
        path = directory / f"{Path(filename).stem}-{counter}.md"
        counter += 1
    return path


def write_export(note: Note, directory: Path) -> Path:
    """Write the note into `directory` and return the file path.

    Existing files are never overwritten.
    """
    directory.mkdir(parents=True, exist_ok=True)
    path = _free_path(directory, export_filename(note))
    path.write_text(export_markdown(note))
    logger.debug("Exported note %s to %s", note.id, path)
    return path
