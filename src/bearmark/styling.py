"""Styling engine: map a document to a parallel styled document, line by line."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from bearmark.inline import Span, Style, transform
from bearmark.lines import PIPE_RE, Rule, TableRow, classify, marker_length, split_lines

if TYPE_CHECKING:
    from collections.abc import Sequence

    from bearmark.lines import LineKind


@dataclass(frozen=True)
class StyledLine:
    """One source line with its kind and the spans that cover it end to end."""

    text: str
    kind: LineKind
    spans: tuple[Span, ...]

    @property
    def plain(self) -> str:
        """Reassemble the source characters from the spans."""
        return "".join(span.text_of(self.text) for span in self.spans)

    def span_at(self, column: int) -> Span | None:
        """Return the span covering `column`, if any."""
        for span in self.spans:
            if span.start <= column < span.end:
                return span
        return None


type StyledDocument = tuple[StyledLine, ...]


def _split_pipes(line: str, spans: tuple[Span, ...]) -> tuple[Span, ...]:
    """Carve unescaped pipes out of plain-text spans of a table row."""
    result: list[Span] = []
    for span in spans:
        if span.style is not Style.TEXT:
            result.append(span)
            continue
        cursor = span.start
        for m in PIPE_RE.finditer(line, span.start, span.end):
            if m.start() > cursor:
                result.append(Span(cursor, m.start(), Style.TEXT))
            result.append(Span(m.start(), m.end(), Style.PIPE))
            cursor = m.end()
        if cursor < span.end:
            result.append(Span(cursor, span.end, Style.TEXT))
    return tuple(result)


def render_line(line: str) -> StyledLine:
    """Style a single line. Never raises; unknown input passes through as text."""
    kind = classify(line)
    if isinstance(kind, Rule):
        return StyledLine(line, kind, (Span(0, len(line), Style.RULE),))
    prefix = marker_length(line, kind)
    head = (Span(0, prefix, Style.MARKER),) if prefix else ()
    body = transform(line, prefix)
    if isinstance(kind, TableRow):
        body = _split_pipes(line, body)
    return StyledLine(line, kind, head + body)


def render(document: str | Sequence[str]) -> StyledDocument:
    """Style a whole document. Lines are independent of each other."""
    lines = split_lines(document) if isinstance(document, str) else document
    return tuple(render_line(line) for line in lines)


# --- Activation (modified click on links and hashtags) ---


@dataclass(frozen=True)
class OpenLink:
    """Open a URL in the browser."""

    url: str


@dataclass(frozen=True)
class FilterTag:
    """Filter the note list by a hashtag."""

    tag: str


type Activation = OpenLink | FilterTag


def normalize_url(url: str) -> str | None:
    """Return an http(s) URL for `url`, adding https:// when no scheme is given."""
    url = url.strip()
    if not url:
        return None
    if "://" not in url:
        url = f"https://{url}"
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        return None
    return url


def activation_at(text: str, offset: int) -> Activation | None:
    """Resolve what a modified click at buffer `offset` should activate."""
    if not 0 <= offset <= len(text):
        return None
    line_start = text.rfind("\n", 0, offset) + 1
    line_end = text.find("\n", offset)
    if line_end == -1:
        line_end = len(text)
    span = render_line(text[line_start:line_end]).span_at(offset - line_start)
    if span is None or span.target is None:
        return None
    if span.style is Style.LINK:
        url = normalize_url(span.target)
        return OpenLink(url) if url else None
    if span.style is Style.HASHTAG:
        return FilterTag(span.target)
    return None
