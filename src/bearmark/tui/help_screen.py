"""Help screen: modal overlay listing app and editor keys."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from rich.markup import escape
from textual.containers import Center, Middle
from textual.screen import ModalScreen
from textual.widgets import Static

from bearmark.commands import DESCRIPTIONS, command_name

if TYPE_CHECKING:
    from textual.app import ComposeResult
    from textual.binding import BindingType

    from bearmark.commands import Command

_APP_HELP = """\
[bold]Notes[/bold]
  [bold]Ctrl+N[/bold]      New note
  [bold]Ctrl+S[/bold]      Save now
  [bold]Ctrl+E[/bold]      Export as Markdown
  [bold]F8[/bold]          Delete note
  [bold]Ctrl+F[/bold]      Filter notes
  [bold]Escape[/bold]      Clear filter
  [bold]Ctrl+P[/bold]      Command palette
  [bold]Ctrl+Click[/bold]  Open link / filter by hashtag
  [bold]F1[/bold]          This help
  [bold]Ctrl+Q[/bold]      Quit
"""


def _editor_help(keymap: dict[str, Command]) -> str:
    lines = ["[bold]Editor[/bold]"]
    for key, command in keymap.items():
        description = escape(DESCRIPTIONS[command_name(command)])
        lines.append(f"  [bold]{key.title():<16}[/bold]{description}")
    return "\n".join(lines)


class HelpScreen(ModalScreen[None]):
    """Modal help overlay showing app and editor keybindings."""

    BINDINGS: ClassVar[list[BindingType]] = [
        ("escape", "dismiss_help", "Close"),
        ("f1", "dismiss_help", "Close"),
    ]

    DEFAULT_CSS = """
    HelpScreen {
        align: center middle;
    }
    HelpScreen > Center > Middle > Static {
        width: 64;
        padding: 1 3;
        background: $surface;
        border: tall $primary;
    }
    """

    def __init__(self, keymap: dict[str, Command]) -> None:
        """Initialize with the active editor keymap."""
        super().__init__()
        self._keymap = keymap

    def compose(self) -> ComposeResult:
        text = (
            f"{_APP_HELP}\n{_editor_help(self._keymap)}\n\n"
            "Press [bold]F1[/bold] or [bold]Escape[/bold] to dismiss."
        )
        with Center(), Middle():
            yield Static(text, markup=True)

    def action_dismiss_help(self) -> None:
        self.dismiss(None)
