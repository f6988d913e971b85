"""CLI entry point and subcommand definitions."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from contextlib import closing
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console

from bearmark.commands import build_keymap
from bearmark.config import ConfigError, get_config_path, load_config
from bearmark.db import SqliteNoteStore, StoreError, open_db
from bearmark.export import export_markdown, write_export
from bearmark.summary import extract_tags, headings
from bearmark.tui.widgets.markdown_light import render_markdown

if TYPE_CHECKING:
    from bearmark.config import Config
    from bearmark.db import Note

COL_TITLE_MAX = 40


def _print_note_table(notes: list[Note]) -> None:
    """Print notes as a formatted table."""
    print(f"{'ID':<12} {'Updated':<16} {'Title':<42} Tags")
    print("─" * 90)
    for note in notes:
        title = note.title
        if len(title) > COL_TITLE_MAX:
            title = title[: COL_TITLE_MAX - 1] + "…"
        updated = note.updated_at[:16].replace("T", " ")
        tags = " ".join(f"#{tag}" for tag in note.tags)
        print(f"{note.id:<12} {updated:<16} {title:<42} {tags}")


def _print_notes(notes: list[Note], *, as_json: bool) -> None:
    if as_json:
        print(json.dumps([n.to_dict() for n in notes], indent=2))
    elif notes:
        _print_note_table(notes)


def _cmd_ls(store: SqliteNoteStore, args: argparse.Namespace) -> None:
    """List notes, most recently updated first."""
    notes = store.get_all_notes()
    if not notes and not args.json:
        print("No notes yet. Run `bearmark new TITLE` or start `bearmark`.")
        return
    _print_notes(notes, as_json=args.json)


def _cmd_new(store: SqliteNoteStore, args: argparse.Namespace) -> None:
    """Create a note and print its id."""
    content: str = args.content
    if content == "-":
        content = sys.stdin.read()
    note = store.create_note(args.title, content, extract_tags(content))
    print(note.id)


def _cmd_show(store: SqliteNoteStore, args: argparse.Namespace) -> None:
    """Print a note as Markdown."""
    note = store.get_note(args.id)
    print(export_markdown(note))


def _cmd_outline(store: SqliteNoteStore, args: argparse.Namespace) -> None:
    """Print the heading outline of a note."""
    note = store.get_note(args.id)
    for heading in headings(note.content):
        print(f"{'  ' * (heading.level - 1)}{heading.text}  #{heading.anchor}")


def _cmd_search(store: SqliteNoteStore, args: argparse.Namespace) -> None:
    notes = store.search_notes(args.query)
    if not notes and not args.json:
        print(f"No notes match {args.query!r}.")
        return
    _print_notes(notes, as_json=args.json)


def _cmd_export(store: SqliteNoteStore, args: argparse.Namespace) -> None:
    """Write a note to DIR/<title>.md."""
    note = store.get_note(args.id)
    path = write_export(note, Path(args.output))
    print(path)


def _cmd_rm(store: SqliteNoteStore, args: argparse.Namespace) -> None:
    store.delete_note(args.id)
    print(f"Deleted {args.id}")


def _cmd_render(args: argparse.Namespace) -> None:
    """Print a Markdown file (or stdin) with in-place styling."""
    text = Path(args.file).read_text() if args.file else sys.stdin.read()
    Console().print(render_markdown(text))


def _launch_tui(config: Config) -> None:
    """Launch the Textual TUI.

    Imports are deferred to avoid loading Textual for CLI-only commands.
    """
    from bearmark.tui.app import NotesApp  # noqa: PLC0415

    keymap = build_keymap(config.keys)
    with closing(open_db(config.db_path)) as conn:
        NotesApp(SqliteNoteStore(conn), config=config, keymap=keymap).run()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bearmark",
        description="Terminal notes with in-place Markdown styling",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--config", type=Path, help="Path to config.toml")
    subparsers = parser.add_subparsers(dest="command")

    # ls
    ls_parser = subparsers.add_parser("ls", help="List notes")
    ls_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # new
    new_parser = subparsers.add_parser("new", help="Create a note")
    new_parser.add_argument("title", help="Note title")
    new_parser.add_argument("--content", default="", help="Note body ('-' reads stdin)")

    # show
    show_parser = subparsers.add_parser("show", help="Print a note as Markdown")
    show_parser.add_argument("id", help="Note id")

    # outline
    outline_parser = subparsers.add_parser("outline", help="Print the headings of a note")
    outline_parser.add_argument("id", help="Note id")

    # search
    search_parser = subparsers.add_parser("search", help="Search titles, content and tags")
    search_parser.add_argument("query", help="Text to look for")
    search_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # export
    export_parser = subparsers.add_parser("export", help="Export a note to a Markdown file")
    export_parser.add_argument("id", help="Note id")
    export_parser.add_argument("-o", "--output", default=".", help="Target directory")

    # rm
    rm_parser = subparsers.add_parser("rm", help="Delete a note")
    rm_parser.add_argument("id", help="Note id")

    # render
    render_parser = subparsers.add_parser("render", help="Print Markdown with styling")
    render_parser.add_argument("file", nargs="?", help="Markdown file (default: stdin)")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and dispatch to the appropriate subcommand."""
    args = _build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        config = load_config(args.config or get_config_path())
        if args.command is None:
            _launch_tui(config)
            return
        if args.command == "render":
            _cmd_render(args)
            return
        dispatch = {
            "ls": _cmd_ls,
            "new": _cmd_new,
            "show": _cmd_show,
            "outline": _cmd_outline,
            "search": _cmd_search,
            "export": _cmd_export,
            "rm": _cmd_rm,
        }
        with closing(open_db(config.db_path)) as conn:
            dispatch[args.command](SqliteNoteStore(conn), args)
    except (ConfigError, StoreError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
