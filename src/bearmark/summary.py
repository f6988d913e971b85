"""Derived note metadata: list preview, hashtags, word count and outline."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

from bearmark.inline import HASHTAG_RE
from bearmark.lines import Header, classify, split_lines

PREVIEW_LENGTH = 150
WORDS_PER_MINUTE = 200

# Applied in order; each strips one kind of markup and keeps the text.
_PREVIEW_SUBS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"^#{1,6}\s+", re.MULTILINE), ""),
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),
    (re.compile(r"\*(.*?)\*"), r"\1"),
    (re.compile(r"\[(.*?)\]\(.*?\)"), r"\1"),
    (re.compile(r"`(.*?)`"), r"\1"),
    (re.compile(r"^\s*[-*+]\s+", re.MULTILINE), ""),
    (re.compile(r"^\s*\d+\.\s+", re.MULTILINE), ""),
]


def preview(content: str, max_length: int = PREVIEW_LENGTH) -> str:
    """Return a one-line, markup-free excerpt of `content`."""
    text = content
    for pattern, repl in _PREVIEW_SUBS:
        text = pattern.sub(repl, text)
    text = text.replace("\n", " ").strip()
    if len(text) > max_length:
        return text[:max_length] + "..."
    return text


def extract_tags(content: str) -> list[str]:
    """Return the hashtags in `content` without `#`, first occurrence order, deduplicated."""
    seen: set[str] = set()
    tags: list[str] = []
    for m in HASHTAG_RE.finditer(content):
        tag = m.group(1)
        if tag.lower() not in seen:
            seen.add(tag.lower())
            tags.append(tag)
    return tags


def word_count(content: str) -> int:
    return len(content.split())


def reading_time(content: str) -> int:
    """Minutes needed to read `content`, rounded up."""
    return math.ceil(word_count(content) / WORDS_PER_MINUTE)


@dataclass(frozen=True)
class Heading:
    """One entry of a note's outline."""

    level: int
    text: str
    anchor: str


def heading_anchor(text: str) -> str:
    """Turn heading text into a URL fragment: lowercase, dashes for spaces."""
    slug = re.sub(r"[^\w\s-]", "", text.lower())
    return re.sub(r"\s+", "-", slug.strip())


def headings(content: str) -> list[Heading]:
    outline: list[Heading] = []
    for line in split_lines(content):
        kind = classify(line)
        if isinstance(kind, Header):
            text = line.lstrip("#").strip()
            if text:
                outline.append(Heading(kind.level, text, heading_anchor(text)))
    return outline


@dataclass(frozen=True)
class NoteStats:
    words: int
    characters: int
    reading_minutes: int


def stats(content: str) -> NoteStats:
    """Collect the numbers shown in the editor status line."""
    return NoteStats(word_count(content), len(content), reading_time(content))
