"""Styled lines to Rich text.

Each source line becomes a Text whose plain string is exactly the source
line, markup characters included, so editor columns line up with the buffer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text

from bearmark.inline import Style
from bearmark.lines import Blockquote, Checkbox, Header
from bearmark.styling import render

if TYPE_CHECKING:
    from collections.abc import Sequence

    from bearmark.styling import StyledLine

SPAN_STYLES: dict[Style, str] = {
    Style.TEXT: "",
    Style.DELIMITER: "dim",
    Style.BOLD: "bold",
    Style.ITALIC: "italic",
    Style.CODE: "bold cyan",
    Style.LINK: "underline bright_blue",
    Style.HASHTAG: "bold magenta",
    Style.MARKER: "bold yellow",
    Style.PIPE: "dim",
    Style.RULE: "dim",
}

HEADER_STYLES = {1: "bold underline", 2: "bold"}


def _line_style(line: StyledLine) -> str:
    kind = line.kind
    if isinstance(kind, Header):
        return HEADER_STYLES.get(kind.level, "bold dim")
    if isinstance(kind, Blockquote):
        return "italic"
    if isinstance(kind, Checkbox) and kind.checked:
        return "strike dim"
    return ""


def to_rich_text(line: StyledLine) -> Text:
    """Convert one styled line to Rich text with the same characters."""
    text = Text(line.text, style=_line_style(line), end="", no_wrap=True)
    for span in line.spans:
        style = SPAN_STYLES[span.style]
        if style:
            text.stylize(style, span.start, span.end)
    return text


def render_markdown(document: str | Sequence[str]) -> Text:
    """Render a whole document as one Rich text, lines joined by newlines."""
    return Text("\n").join(to_rich_text(line) for line in render(document))
