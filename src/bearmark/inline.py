"""Inline span transformer: emphasis, code, links and hashtags within one line.

Every source character ends up in exactly one span, delimiters included, so a
caret at offset N in the buffer always corresponds to the N-th character of
the styled output. A construct may nest fully inside another one (italic inside
bold) or wrap it (bold around a link), but never straddle its boundary.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class Style(StrEnum):
    """Style tag carried by a span."""

    TEXT = "text"
    DELIMITER = "delimiter"
    BOLD = "bold"
    ITALIC = "italic"
    CODE = "code"
    LINK = "link"
    HASHTAG = "hashtag"
    # Structural styles, assigned by the styling engine
    MARKER = "marker"
    PIPE = "pipe"
    RULE = "rule"


@dataclass(frozen=True)
class Span:
    """A run of characters `[start, end)` of a line sharing one style."""

    start: int
    end: int
    style: Style
    target: str | None = None  # URL for links, tag name for hashtags

    def text_of(self, line: str) -> str:
        """Return the characters of `line` covered by this span."""
        return line[self.start : self.end]


LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
HASHTAG_RE = re.compile(r"(?<!\S)#(\w+)")
BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
ITALIC_RE = re.compile(r"(?<!\*)\*([^*]+)\*(?!\*)")
CODE_RE = re.compile(r"`([^`]+)`")

# Stand-in for characters already claimed by an earlier pattern.
_CLAIMED = "\x00"


class _Canvas:
    """Per-character style assignment for one line segment."""

    def __init__(self, content: str) -> None:
        self.content = content
        self.styles: list[tuple[Style, str | None]] = [(Style.TEXT, None)] * len(content)
        self.claimed = [False] * len(content)
        self.constructs: list[tuple[int, int]] = []

    def masked(self) -> str:
        return "".join(
            _CLAIMED if claimed else ch
            for ch, claimed in zip(self.content, self.claimed, strict=True)
        )

    def straddles(self, start: int, end: int) -> bool:
        """Return True if `[start, end)` partially overlaps an earlier construct."""
        for s, e in self.constructs:
            overlaps = start < e and s < end
            nested = (start <= s and e <= end) or (s <= start and end <= e)
            if overlaps and not nested:
                return True
        return False

    def paint(
        self,
        start: int,
        end: int,
        style: Style,
        target: str | None = None,
        *,
        claim: bool = False,
    ) -> None:
        for i in range(start, end):
            if self.claimed[i]:
                continue
            self.styles[i] = (style, target)
            if claim:
                self.claimed[i] = True

    def apply(self, pattern: re.Pattern[str], handler: Callable[[re.Match[str]], None]) -> None:
        for m in pattern.finditer(self.masked()):
            if self.straddles(m.start(), m.end()):
                continue
            handler(m)
            self.constructs.append((m.start(), m.end()))

    def spans(self, offset: int) -> tuple[Span, ...]:
        result: list[Span] = []
        run_start = 0
        for i in range(1, len(self.styles) + 1):
            if i == len(self.styles) or self.styles[i] != self.styles[run_start]:
                style, target = self.styles[run_start]
                result.append(Span(run_start + offset, i + offset, style, target))
                run_start = i
        return tuple(result)


def _wrap(canvas: _Canvas, m: re.Match[str], style: Style) -> None:
    """Paint a delimiter/inner/delimiter construct such as **bold**."""
    inner_start, inner_end = m.span(1)
    canvas.paint(m.start(), inner_start, Style.DELIMITER, claim=True)
    canvas.paint(inner_start, inner_end, style)
    canvas.paint(inner_end, m.end(), Style.DELIMITER, claim=True)


def transform(line: str, start: int = 0) -> tuple[Span, ...]:
    """Split `line[start:]` into styled spans with absolute offsets.

    Patterns are applied in a fixed order: links, hashtags, bold, italic,
    inline code. Malformed constructs simply do not match.
    """
    content = line[start:]
    if not content:
        return ()
    canvas = _Canvas(content)

    def link(m: re.Match[str]) -> None:
        text_start, text_end = m.span(1)
        url = m.group(2)
        canvas.paint(m.start(), text_start, Style.DELIMITER, claim=True)
        canvas.paint(text_start, text_end, Style.LINK, url, claim=True)
        canvas.paint(text_end, m.end(), Style.DELIMITER, claim=True)

    def hashtag(m: re.Match[str]) -> None:
        canvas.paint(m.start(), m.end(), Style.HASHTAG, m.group(1), claim=True)

    canvas.apply(LINK_RE, link)
    canvas.apply(HASHTAG_RE, hashtag)
    canvas.apply(BOLD_RE, lambda m: _wrap(canvas, m, Style.BOLD))
    canvas.apply(ITALIC_RE, lambda m: _wrap(canvas, m, Style.ITALIC))
    canvas.apply(CODE_RE, lambda m: _wrap(canvas, m, Style.CODE))
    return canvas.spans(start)
