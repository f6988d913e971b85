"""Line classifier: decide which single Markdown construct governs a line."""

from __future__ import annotations

import re
from dataclasses import dataclass

# --- Line kinds ---


@dataclass(frozen=True)
class Plain:
    """A line with no structural Markdown."""


@dataclass(frozen=True)
class Header:
    """An ATX heading (`#` through `######`)."""

    level: int


@dataclass(frozen=True)
class BulletItem:
    """An unordered list item."""

    indent: str
    marker: str  # "-", "*" or "+"


@dataclass(frozen=True)
class OrderedItem:
    """A numbered list item."""

    indent: str
    number: int


@dataclass(frozen=True)
class Checkbox:
    """A task item, optionally behind a list bullet (`- [ ] task`)."""

    indent: str
    checked: bool
    bullet: str = ""  # "" or e.g. "- "


@dataclass(frozen=True)
class Blockquote:
    """A `>` quoted line."""


@dataclass(frozen=True)
class TableRow:
    """A line containing at least one unescaped pipe."""


@dataclass(frozen=True)
class Rule:
    """A horizontal rule made of three or more dashes."""


type LineKind = (
    Plain | Header | BulletItem | OrderedItem | Checkbox | Blockquote | TableRow | Rule
)

# Patterns are tried in precedence order; all are anchored at line start.
HEADER_RE = re.compile(r"^(#{1,6})\s+")
CHECKBOX_RE = re.compile(r"^(\s*)((?:[-*+] )?)\[([ xX])\]\s")
BULLET_RE = re.compile(r"^(\s*)([-*+])\s")
ORDERED_RE = re.compile(r"^(\s*)(\d+)\.\s")
BLOCKQUOTE_RE = re.compile(r"^>(?:\s|$)")
PIPE_RE = re.compile(r"(?<!\\)\|")
RULE_RE = re.compile(r"^---+\s*$")


def has_pipe(line: str) -> bool:
    """Return True if the line contains a `|` not escaped by a backslash."""
    return PIPE_RE.search(line) is not None


def classify(line: str) -> LineKind:
    """Classify one line of source text. Total: unknown input is Plain."""
    if m := HEADER_RE.match(line):
        return Header(level=len(m.group(1)))
    if m := CHECKBOX_RE.match(line):
        return Checkbox(indent=m.group(1), checked=m.group(3) in "xX", bullet=m.group(2))
    if m := BULLET_RE.match(line):
        return BulletItem(indent=m.group(1), marker=m.group(2))
    if m := ORDERED_RE.match(line):
        return OrderedItem(indent=m.group(1), number=int(m.group(2)))
    if BLOCKQUOTE_RE.match(line):
        return Blockquote()
    if has_pipe(line):
        return TableRow()
    if RULE_RE.match(line):
        return Rule()
    return Plain()


def marker_length(line: str, kind: LineKind | None = None) -> int:
    """Return the number of leading characters that form the structural prefix.

    For list-like kinds this includes the single whitespace character after the
    marker. Table rows and plain lines have no prefix; a rule is all prefix.
    """
    if kind is None:
        kind = classify(line)
    pattern: re.Pattern[str] | None = None
    if isinstance(kind, Header):
        pattern = HEADER_RE
    elif isinstance(kind, Checkbox):
        pattern = CHECKBOX_RE
    elif isinstance(kind, BulletItem):
        pattern = BULLET_RE
    elif isinstance(kind, OrderedItem):
        pattern = ORDERED_RE
    elif isinstance(kind, Blockquote):
        pattern = BLOCKQUOTE_RE
    elif isinstance(kind, Rule):
        return len(line)
    if pattern is None:
        return 0
    m = pattern.match(line)
    return m.end() if m else 0


def next_marker(kind: LineKind) -> str | None:
    """Return the prefix that continues a list-like line on a new line, or None."""
    if isinstance(kind, Checkbox):
        return f"{kind.indent}{kind.bullet}[ ] "
    if isinstance(kind, BulletItem):
        return f"{kind.indent}{kind.marker} "
    if isinstance(kind, OrderedItem):
        return f"{kind.indent}{kind.number + 1}. "
    return None


def split_lines(text: str) -> list[str]:
    """Split a buffer into lines. The empty buffer is the empty document."""
    if not text:
        return []
    return text.split("\n")
