"""Note editor: a TextArea that draws Markdown styling in place.

The buffer stays plain text. Styling is applied per line in get_line(), and
keys bound to editor commands are routed to the session instead of the
default TextArea handling.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual.message import Message
from textual.widgets import TextArea
from textual.widgets.text_area import Selection

from bearmark.styling import render_line
from bearmark.tui.widgets.markdown_light import to_rich_text

if TYPE_CHECKING:
    from rich.text import Text
    from textual import events

    from bearmark.commands import Command
    from bearmark.edits import Edit
    from bearmark.session import EditSession
    from bearmark.styling import Activation


def changed_range(old: str, new: str) -> tuple[int, int, str]:
    """Return (start, end, replacement) turning `old` into `new` with one replace."""
    limit = min(len(old), len(new))
    prefix = 0
    while prefix < limit and old[prefix] == new[prefix]:
        prefix += 1
    suffix = 0
    while suffix < limit - prefix and old[-1 - suffix] == new[-1 - suffix]:
        suffix += 1
    return prefix, len(old) - suffix, new[prefix : len(new) - suffix]


class NoteEditor(TextArea):
    """Editing surface for the open note."""

    DEFAULT_CSS = """
    NoteEditor {
        border: none;
        padding: 0 1;
    }
    """

    class Activated(Message):
        """Posted when a link or hashtag is Ctrl-clicked."""

        def __init__(self, activation: Activation) -> None:
            super().__init__()
            self.activation = activation

    def __init__(self, keymap: dict[str, Command], *, id: str | None = None) -> None:  # noqa: A002
        super().__init__(id=id, tab_behavior="indent", soft_wrap=True)
        self.keymap = keymap
        self.session: EditSession | None = None

    def get_line(self, line_index: int) -> Text:
        """Return the line with its Markdown styling applied."""
        return to_rich_text(render_line(self.document.get_line(line_index)))

    # --- Offsets ---

    def offset_of(self, location: tuple[int, int]) -> int:
        return self.document.get_index_from_location(location)

    def location_of(self, offset: int) -> tuple[int, int]:
        return self.document.get_location_from_index(offset)

    @property
    def selection_offsets(self) -> tuple[int, int]:
        """Return the selection as (anchor, caret) buffer offsets."""
        start, end = self.selection
        return self.offset_of(start), self.offset_of(end)

    # --- Commands ---

    def run_command(self, command: Command) -> bool:
        """Apply a command to the buffer; False when it did nothing."""
        if self.session is None or self.read_only:
            return False
        self.session.set_text(self.text)
        self.session.select(*self.selection_offsets)
        edit = self.session.apply(command)
        if edit is None:
            return False
        self.show_edit(edit)
        return True

    def show_edit(self, edit: Edit) -> None:
        """Bring the widget in line with an edit already applied to the session."""
        start, end, insert = changed_range(self.text, edit.text)
        if start != end or insert:
            self.replace(insert, self.location_of(start), self.location_of(end))
        anchor = edit.caret if edit.anchor is None else edit.anchor
        self.selection = Selection(self.location_of(anchor), self.location_of(edit.caret))

    async def _on_key(self, event: events.Key) -> None:
        command = self.keymap.get(event.key)
        if command is not None and self.run_command(command):
            event.stop()
            event.prevent_default()
            return
        await super()._on_key(event)

    def on_click(self, event: events.Click) -> None:
        """Ctrl-click activates the link or hashtag under the pointer."""
        if not (event.ctrl or event.meta) or self.session is None:
            return
        offset = self.offset_of(self.get_target_document_location(event))
        activation = self.session.activation_at(offset)
        if activation is not None:
            self.post_message(self.Activated(activation))
