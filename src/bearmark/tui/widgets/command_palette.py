"""Command palette: modal list of note actions and editor commands.

Entries are shown under their group heading with the key bound to them, if
any. Typing filters on label and key; Up/Down move the highlight and Enter
runs the highlighted entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import groupby
from typing import TYPE_CHECKING, ClassVar

from rich.text import Text
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, OptionList, Static
from textual.widgets.option_list import Option

if TYPE_CHECKING:
    from collections.abc import Iterable

    from textual.app import ComposeResult
    from textual.binding import BindingType

LABEL_WIDTH = 36


@dataclass(frozen=True)
class PaletteEntry:
    """One runnable palette row. `key` is a Textual key name or None when unbound."""

    command_id: str
    label: str
    group: str
    key: str | None = None

    @property
    def key_hint(self) -> str:
        return self.key.title() if self.key else ""

    def matches(self, words: list[str]) -> bool:
        """True when every word occurs in the label or the key name."""
        haystack = f"{self.label} {self.key or ''}".lower()
        return all(word in haystack for word in words)


def filter_entries(entries: Iterable[PaletteEntry], query: str) -> list[PaletteEntry]:
    words = query.lower().split()
    return [entry for entry in entries if entry.matches(words)]


def _options(entries: list[PaletteEntry]) -> list[Option]:
    """Build option rows with a disabled heading before each group."""
    options: list[Option] = []
    for group, members in groupby(entries, key=lambda entry: entry.group):
        options.append(Option(Text(group, style="bold"), disabled=True))
        for entry in members:
            prompt = Text(f"  {entry.label:<{LABEL_WIDTH}}")
            prompt.append(entry.key_hint, style="dim")
            options.append(Option(prompt, id=entry.command_id))
    return options


class CommandPalette(ModalScreen[str | None]):
    """Filterable, grouped list of palette entries.

    Dismisses with the chosen command id, or None when closed.
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("escape", "dismiss_palette", "Close", show=False),
        Binding("down", "highlight(1)", "Next", show=False),
        Binding("up", "highlight(-1)", "Previous", show=False),
    ]

    DEFAULT_CSS = """
    CommandPalette {
        align: center middle;
    }
    #palette-container {
        width: 64;
        max-height: 28;
        background: $surface;
        border: round $primary;
        padding: 1 2;
    }
    #palette-title {
        text-style: bold;
        margin-bottom: 1;
    }
    #palette-input {
        margin-bottom: 1;
    }
    #palette-options {
        height: auto;
        max-height: 20;
    }
    """

    def __init__(self, entries: list[PaletteEntry]) -> None:
        super().__init__()
        self.entries = entries

    @property
    def labels(self) -> list[str]:
        return [entry.label for entry in self.entries]

    @property
    def options(self) -> OptionList:
        return self.query_one("#palette-options", OptionList)

    def compose(self) -> ComposeResult:
        with Vertical(id="palette-container"):
            yield Static("Commands", id="palette-title")
            yield Input(placeholder="Type a command or key…", id="palette-input")
            yield OptionList(*_options(self.entries), id="palette-options")

    def on_mount(self) -> None:
        self.options.action_first()
        self.query_one("#palette-input", Input).focus()

    def on_input_changed(self, event: Input.Changed) -> None:
        option_list = self.options
        option_list.set_options(_options(filter_entries(self.entries, event.value)))
        option_list.action_first()

    def action_highlight(self, step: int) -> None:
        if step > 0:
            self.options.action_cursor_down()
        else:
            self.options.action_cursor_up()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.dismiss(event.option_id)

    def on_input_submitted(self) -> None:
        """Run the highlighted entry on Enter."""
        option = self.options.highlighted_option
        self.dismiss(option.id if option is not None and not option.disabled else None)

    def action_dismiss_palette(self) -> None:
        self.dismiss(None)
