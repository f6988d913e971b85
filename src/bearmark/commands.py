"""Editor commands: a tagged union dispatched to the mutation operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from bearmark import mutations, table
from bearmark.config import ConfigError
from bearmark.edits import Edit

if TYPE_CHECKING:
    from collections.abc import Mapping


class Axis(StrEnum):
    ROW = "row"
    COLUMN = "column"


@dataclass(frozen=True)
class Enter:
    """Continue or end a list item."""


@dataclass(frozen=True)
class Space:
    """Auto-format `-` and `[ ]` lines into list markers."""


@dataclass(frozen=True)
class Tab:
    """Move between table cells."""

    shift: bool = False


@dataclass(frozen=True)
class Wrap:
    """Surround the selection with delimiters."""

    prefix: str
    suffix: str


@dataclass(frozen=True)
class InsertLink:
    """Turn the selection into a Markdown link."""


@dataclass(frozen=True)
class TableMove:
    axis: Axis
    direction: int  # -1 towards the start, +1 towards the end


@dataclass(frozen=True)
class TableInsert:
    axis: Axis


@dataclass(frozen=True)
class TableDelete:
    axis: Axis


type Command = Enter | Space | Tab | Wrap | InsertLink | TableMove | TableInsert | TableDelete

# Command names used by the keymap, the config file and the command palette.
COMMANDS: dict[str, Command] = {
    "continue-list": Enter(),
    "auto-format": Space(),
    "next-cell": Tab(),
    "prev-cell": Tab(shift=True),
    "bold": Wrap("**", "**"),
    "italic": Wrap("*", "*"),
    "code": Wrap("`", "`"),
    "link": InsertLink(),
    "move-column-left": TableMove(Axis.COLUMN, -1),
    "move-column-right": TableMove(Axis.COLUMN, 1),
    "move-row-up": TableMove(Axis.ROW, -1),
    "move-row-down": TableMove(Axis.ROW, 1),
    "insert-column": TableInsert(Axis.COLUMN),
    "delete-column": TableDelete(Axis.COLUMN),
    "insert-row": TableInsert(Axis.ROW),
    "delete-row": TableDelete(Axis.ROW),
}

DESCRIPTIONS: dict[str, str] = {
    "continue-list": "Continue the current list item",
    "auto-format": "Turn '-' or '[ ]' into a list marker",
    "next-cell": "Next table cell",
    "prev-cell": "Previous table cell",
    "bold": "Bold",
    "italic": "Italic",
    "code": "Inline code",
    "link": "Insert link",
    "move-column-left": "Move table column left",
    "move-column-right": "Move table column right",
    "move-row-up": "Move table row up",
    "move-row-down": "Move table row down",
    "insert-column": "Insert table column",
    "delete-column": "Delete table column",
    "insert-row": "Insert table row",
    "delete-row": "Delete table row",
}

# Textual key name -> command name.
DEFAULT_KEYMAP: dict[str, str] = {
    "enter": "continue-list",
    "space": "auto-format",
    "tab": "next-cell",
    "shift+tab": "prev-cell",
    "ctrl+b": "bold",
    "ctrl+i": "italic",
    "ctrl+k": "link",
    "alt+left": "move-column-left",
    "alt+right": "move-column-right",
    "alt+up": "move-row-up",
    "alt+down": "move-row-down",
    "alt+shift+right": "insert-column",
    "alt+shift+left": "delete-column",
    "alt+shift+down": "insert-row",
    "alt+shift+up": "delete-row",
}


def build_keymap(overrides: Mapping[str, str] | None = None) -> dict[str, Command]:
    """Merge key overrides over the defaults and resolve command names.

    An empty command name unbinds the key. Unknown names raise ConfigError.
    """
    names = dict(DEFAULT_KEYMAP)
    for key, name in (overrides or {}).items():
        if not name:
            names.pop(key, None)
        elif name not in COMMANDS:
            msg = f"Unknown command {name!r} bound to key {key!r}"
            raise ConfigError(msg)
        else:
            names[key] = name
    return {key: COMMANDS[name] for key, name in names.items()}


def apply_command(command: Command, text: str, anchor: int, caret: int) -> Edit:
    """Run `command` against the buffer and selection.

    Commands that act at a single caret position do nothing while text is
    selected, so that typing replaces the selection as usual.
    """
    start, end = sorted((anchor, caret))
    unchanged = Edit.unchanged(text, caret, None if anchor == caret else anchor)
    match command:
        case Wrap(prefix=prefix, suffix=suffix):
            return mutations.wrap_selection(text, start, end, prefix, suffix)
        case InsertLink():
            return mutations.insert_link(text, start, end)
        case _ if start != end:
            return unchanged
        case Enter():
            return mutations.continue_on_enter(text, caret)
        case Space():
            return mutations.auto_format_on_space(text, caret)
        case Tab(shift=True):
            return table.table_tab_prev(text, caret)
        case Tab():
            return table.table_tab_next(text, caret)
        case TableMove(axis=Axis.ROW, direction=direction):
            return table.move_table_row(text, caret, direction)
        case TableMove(direction=direction):
            return table.move_table_column(text, caret, direction)
        case TableInsert(axis=Axis.ROW):
            return table.insert_table_row(text, caret)
        case TableInsert():
            return table.insert_table_column(text, caret)
        case TableDelete(axis=Axis.ROW):
            return table.delete_table_row(text, caret)
        case TableDelete():
            return table.delete_table_column(text, caret)
    return unchanged


def command_name(command: Command) -> str:
    """Return the name a command is registered under in COMMANDS."""
    for name, registered in COMMANDS.items():
        if registered == command:
            return name
    msg = f"Unregistered command: {command!r}"
    raise KeyError(msg)
