"""Textual app: note list, editor pane and note actions."""

from __future__ import annotations

import logging
import webbrowser
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Footer, Header, Input, Static

from bearmark.commands import COMMANDS, DESCRIPTIONS, build_keymap, command_name
from bearmark.config import Config
from bearmark.db import SqliteNoteStore, StoreError, open_db
from bearmark.export import write_export
from bearmark.session import EditSession, asyncio_scheduler
from bearmark.styling import FilterTag, OpenLink
from bearmark.summary import stats
from bearmark.tui.help_screen import HelpScreen
from bearmark.tui.note_list import NoteList
from bearmark.tui.widgets.command_palette import CommandPalette, PaletteEntry
from bearmark.tui.widgets.note_editor import NoteEditor

if TYPE_CHECKING:
    from textual.binding import BindingType
    from textual.widgets import DataTable, TextArea

    from bearmark.commands import Command
    from bearmark.db import Note, NoteStore
    from bearmark.session import Scheduler

logger = logging.getLogger(__name__)

# App action -> palette label; editor commands are listed under their names.
_APP_ACTIONS: dict[str, str] = {
    "new_note": "New note",
    "save_note": "Save note",
    "export_note": "Export note as Markdown",
    "delete_note": "Delete note",
    "start_filter": "Filter notes",
    "show_help": "Help",
}


class NotesApp(App[None]):
    """Markdown notes TUI."""

    TITLE = "bearmark"
    ENABLE_COMMAND_PALETTE = False

    CSS = """
    #main-container {
        height: 1fr;
    }
    #note-list {
        width: 2fr;
        border-right: solid $primary;
    }
    #editor-pane {
        width: 3fr;
    }
    #title-input {
        border: none;
        text-style: bold;
    }
    #editor {
        height: 1fr;
    }
    #status {
        height: 1;
        padding: 0 1;
        text-style: dim;
    }
    #filter-input {
        dock: bottom;
        display: none;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("ctrl+n", "new_note", "New", show=True),
        Binding("ctrl+s", "save_note", "Save", show=True),
        # TextArea binds ctrl+e to line end
        Binding("ctrl+e", "export_note", "Export", show=True, priority=True),
        Binding("f8", "delete_note", "Delete", show=True),
        Binding("ctrl+f", "start_filter", "Filter", show=True),
        Binding("escape", "clear_filter", "Clear", show=False),
        Binding("ctrl+p", "command_palette", "Commands", show=True),
        Binding("f1", "show_help", "Help", show=True),
    ]

    def __init__(
        self,
        store: NoteStore | None = None,
        *,
        config: Config | None = None,
        keymap: dict[str, Command] | None = None,
        scheduler: Scheduler = asyncio_scheduler,
        export_dir: Path | None = None,
    ) -> None:
        super().__init__()
        self._config = config or Config()
        self._conn = None
        if store is None:
            self._conn = open_db(self._config.db_path)
            store = SqliteNoteStore(self._conn)
        self.store = store
        self._keymap = keymap if keymap is not None else build_keymap(self._config.keys)
        self._scheduler = scheduler
        self._export_dir = export_dir
        self._filter_text = ""
        self.session: EditSession | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-container"):
            yield NoteList(id="note-list")
            with Vertical(id="editor-pane"):
                yield Input(placeholder="Title", id="title-input")
                yield NoteEditor(self._keymap, id="editor")
                yield Static("", id="status")
        yield Input(placeholder="Filter…", id="filter-input")
        yield Footer()

    @property
    def note_list(self) -> NoteList:
        return self.query_one(NoteList)

    @property
    def editor(self) -> NoteEditor:
        return self.query_one(NoteEditor)

    def on_mount(self) -> None:
        self.refresh_notes()
        first = self.note_list.selected_note_id
        if first is None:
            self._show_empty()
        else:
            self.open_note(first)

    # --- Notes ---

    def refresh_notes(self) -> None:
        """Reload the note list from the store, applying the current filter."""
        try:
            notes = self.store.search_notes(self._filter_text)
        except StoreError as e:
            self.notify(f"Error: {e}", severity="error")
            return
        keep = self.session.note_id if self.session is not None else None
        self.note_list.refresh_data(notes, keep=keep)

    def _show_empty(self) -> None:
        self.session = None
        self.editor.session = None
        self.editor.load_text("")
        self.editor.read_only = True
        self.query_one("#title-input", Input).value = ""
        self.query_one("#status", Static).update("No notes. Press Ctrl+N to create one.")

    def open_note(self, note_id: str) -> None:
        """Close the current session (saving it) and start editing `note_id`."""
        if self.session is not None:
            if self.session.note_id == note_id:
                return
            previous, self.session = self.session, None
            previous.close()
        try:
            note = self.store.get_note(note_id)
        except StoreError as e:
            self.notify(f"Error: {e}", severity="error")
            return
        self.session = EditSession(
            self.store,
            note,
            delay=self._config.autosave_delay,
            scheduler=self._scheduler,
            on_error=self._on_store_error,
            on_saved=self._on_saved,
        )
        editor = self.editor
        editor.session = self.session
        editor.read_only = False
        editor.load_text(note.content)
        self.query_one("#title-input", Input).value = note.title
        self._update_status()

    def _on_store_error(self, error: StoreError) -> None:
        self.notify(f"Save failed: {error}", severity="error")

    def _on_saved(self, _note: Note) -> None:
        self.refresh_notes()
        self._update_status()

    def _update_status(self) -> None:
        if self.session is None:
            return
        counts = stats(self.session.text)
        tags = " ".join(f"#{tag}" for tag in self.session.note.tags)
        status = (
            f"{counts.words} words · {counts.characters} chars"
            f" · {counts.reading_minutes} min read"
        )
        if self.session.dirty:
            status += " · unsaved"
        if tags:
            status += f" · {tags}"
        self.query_one("#status", Static).update(status)

    # --- Widget events ---

    def on_data_table_row_highlighted(self, _event: DataTable.RowHighlighted) -> None:
        """Open the highlighted note."""
        note_id = self.note_list.selected_note_id
        if note_id is not None:
            self.open_note(note_id)

    def on_text_area_changed(self, _event: TextArea.Changed) -> None:
        if self.session is None:
            return
        editor = self.editor
        self.session.set_text(editor.text, editor.offset_of(editor.cursor_location))
        self._update_status()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "title-input" and self.session is not None:
            self.session.set_title(event.input.value)
            self._update_status()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Apply the note filter."""
        if event.input.id == "title-input":
            self.editor.focus()
            return
        if event.input.id != "filter-input":
            return
        self._filter_text = event.value
        event.input.styles.display = "none"
        self.refresh_notes()
        self.set_focus(self.note_list)

    def on_note_editor_activated(self, event: NoteEditor.Activated) -> None:
        activation = event.activation
        if isinstance(activation, OpenLink):
            logger.debug("Opening %s", activation.url)
            webbrowser.open(activation.url)
        elif isinstance(activation, FilterTag):
            self.filter_notes(f"#{activation.tag}")

    def filter_notes(self, text: str) -> None:
        self._filter_text = text
        self.query_one("#filter-input", Input).value = text
        self.refresh_notes()
        self.notify(f"Filter: {text}")

    # === Actions ===

    def action_new_note(self) -> None:
        if self.session is not None:
            self.session.flush()
        try:
            note = self.store.create_note()
        except StoreError as e:
            self.notify(f"Error: {e}", severity="error")
            return
        self._filter_text = ""
        self.open_note(note.id)
        self.refresh_notes()
        self.editor.focus()

    def action_save_note(self) -> None:
        if self.session is None:
            return
        try:
            self.session.save()
        except StoreError as e:
            logger.warning("Save of note %s failed: %s", self.session.note_id, e)
            self.notify(f"Save failed: {e}", severity="error")
            return
        self.notify("Saved")

    def action_export_note(self) -> None:
        if self.session is None:
            return
        self.session.flush()
        directory = self._export_dir or Path.cwd()
        try:
            path = write_export(self.session.note, directory)
        except OSError as e:
            self.notify(f"Export failed: {e}", severity="error")
            return
        self.notify(f"Exported to {path}")

    def action_delete_note(self) -> None:
        if self.session is None:
            return
        session, self.session = self.session, None
        session.autosave.cancel()
        try:
            self.store.delete_note(session.note_id)
        except StoreError as e:
            self.session = session
            self.notify(f"Error: {e}", severity="error")
            return
        self.notify(f"Deleted {session.title or 'note'}")
        self.refresh_notes()
        next_id = self.note_list.selected_note_id
        if next_id is None:
            self._show_empty()
        else:
            self.open_note(next_id)

    def action_start_filter(self) -> None:
        filter_input = self.query_one("#filter-input", Input)
        filter_input.styles.display = "block"
        filter_input.focus()

    def action_clear_filter(self) -> None:
        self._filter_text = ""
        filter_input = self.query_one("#filter-input", Input)
        filter_input.styles.display = "none"
        filter_input.value = ""
        self.refresh_notes()

    def palette_entries(self) -> list[PaletteEntry]:
        """List app actions, then editor commands when a note is open, with their keys."""
        app_keys = {
            binding.action: binding.key
            for binding in self.BINDINGS
            if isinstance(binding, Binding)
        }
        entries = [
            PaletteEntry(f"app:{action}", label, "Notes", app_keys.get(action))
            for action, label in _APP_ACTIONS.items()
        ]
        if self.session is not None:
            editor_keys: dict[str, str] = {}
            for key, command in self._keymap.items():
                editor_keys.setdefault(command_name(command), key)
            entries += [
                PaletteEntry(name, DESCRIPTIONS[name], "Editor", editor_keys.get(name))
                for name in COMMANDS
            ]
        return entries

    def action_command_palette(self) -> None:
        self.push_screen(CommandPalette(self.palette_entries()), self._run_palette_choice)

    def _run_palette_choice(self, choice: str | None) -> None:
        if choice is None:
            return
        if choice.startswith("app:"):
            getattr(self, f"action_{choice.removeprefix('app:')}")()
            return
        editor = self.editor
        if not editor.run_command(COMMANDS[choice]):
            self.notify("Nothing to do here")
        editor.focus()

    def action_show_help(self) -> None:
        self.push_screen(HelpScreen(self._keymap))

    def on_unmount(self) -> None:
        if self.session is not None:
            self.session.on_saved = None
            self.session.close()
        if self._conn is not None:
            self._conn.close()
