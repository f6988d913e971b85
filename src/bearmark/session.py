"""Editing session for one open note, with debounced autosave.

The session owns everything the editor needs about the current note: the
buffer, the selection and the pending save. Nothing here touches the UI;
the TUI feeds it text changes and commands and reads the results back.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Protocol

from bearmark.commands import apply_command
from bearmark.config import DEFAULT_AUTOSAVE_DELAY
from bearmark.db import UNTITLED, StoreError
from bearmark.edits import clamp
from bearmark.styling import activation_at, render
from bearmark.summary import extract_tags

if TYPE_CHECKING:
    from collections.abc import Callable

    from bearmark.commands import Command
    from bearmark.db import Note, NoteStore
    from bearmark.edits import Edit
    from bearmark.styling import Activation, StyledDocument

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


type Scheduler = Callable[[float, Callable[[], None]], TimerHandle]


def asyncio_scheduler(delay: float, callback: Callable[[], None]) -> TimerHandle:
    """Schedule `callback` on the running event loop."""
    return asyncio.get_running_loop().call_later(delay, callback)


class AutosaveTask:
    """A single cancellable delayed save, restarted on every edit."""

    def __init__(
        self,
        save: Callable[[], None],
        delay: float = DEFAULT_AUTOSAVE_DELAY,
        scheduler: Scheduler = asyncio_scheduler,
    ) -> None:
        self._save = save
        self.delay = delay
        self._scheduler = scheduler
        self._handle: TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def touch(self) -> None:
        """Cancel any pending save and start the delay again."""
        self.cancel()
        self._handle = self._scheduler(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def flush(self) -> None:
        """Run a pending save immediately."""
        if self._handle is not None:
            self.cancel()
            self._save()

    def _fire(self) -> None:
        self._handle = None
        self._save()


class EditSession:
    """Buffer, selection and save state for one note."""

    def __init__(
        self,
        store: NoteStore,
        note: Note,
        *,
        delay: float = DEFAULT_AUTOSAVE_DELAY,
        scheduler: Scheduler = asyncio_scheduler,
        on_error: Callable[[StoreError], None] | None = None,
        on_saved: Callable[[Note], None] | None = None,
    ) -> None:
        self.store = store
        self.note = note
        self.title = note.title
        self.text = note.content
        self.anchor = self.caret = len(note.content)
        self.dirty = False
        self.on_error = on_error
        self.on_saved = on_saved
        self.autosave = AutosaveTask(self._autosave, delay, scheduler)

    @property
    def note_id(self) -> str:
        return self.note.id

    @property
    def selection(self) -> tuple[int, int]:
        return (min(self.anchor, self.caret), max(self.anchor, self.caret))

    def select(self, anchor: int, caret: int | None = None) -> None:
        self.anchor = clamp(anchor, self.text)
        self.caret = self.anchor if caret is None else clamp(caret, self.text)

    def _changed(self) -> None:
        self.dirty = True
        self.autosave.touch()

    def set_text(self, text: str, caret: int | None = None) -> None:
        """Replace the buffer after ordinary typing in the widget."""
        if text == self.text:
            return
        self.text = text
        self.select(len(text) if caret is None else caret)
        self._changed()

    def set_title(self, title: str) -> None:
        if title == self.title:
            return
        self.title = title
        self._changed()

    def apply(self, command: Command) -> Edit | None:
        """Run a command against the buffer; None when it did nothing."""
        edit = apply_command(command, self.text, self.anchor, self.caret)
        if edit.text == self.text and edit.caret == self.caret:
            return None
        changed = edit.text != self.text
        self.text = edit.text
        self.caret = edit.caret
        self.anchor = edit.caret if edit.anchor is None else edit.anchor
        if changed:
            self._changed()
        return edit

    def styled(self) -> StyledDocument:
        return render(self.text)

    def activation_at(self, offset: int) -> Activation | None:
        return activation_at(self.text, offset)

    def save(self) -> Note | None:
        """Write the buffer to the store now. Raises StoreError.

        Returns the stored note, or None when there was nothing to save.
        """
        self.autosave.cancel()
        if not self.dirty:
            return None
        self.note = self.store.update_note(
            self.note_id,
            title=self.title.strip() or UNTITLED,
            content=self.text,
            tags=extract_tags(self.text),
        )
        self.dirty = False
        logger.debug("Saved note %s", self.note_id)
        if self.on_saved is not None:
            self.on_saved(self.note)
        return self.note

    def _autosave(self) -> None:
        try:
            self.save()
        except StoreError as e:
            logger.warning("Autosave of note %s failed: %s", self.note_id, e)
            if self.on_error is not None:
                self.on_error(e)

    def flush(self) -> None:
        """Save now if a save is pending; errors are reported like autosave ones."""
        if self.dirty:
            self.autosave.cancel()
            self._autosave()

    def close(self) -> None:
        self.flush()
        self.autosave.cancel()
