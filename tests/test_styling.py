"""Tests for the styling engine and click activation."""

from __future__ import annotations

import pytest

from bearmark.inline import Span, Style
from bearmark.lines import Checkbox, Header, Plain, Rule, TableRow
from bearmark.styling import (
    FilterTag,
    OpenLink,
    activation_at,
    normalize_url,
    render,
    render_line,
)

DOCUMENT = """# Notes **today**
- [ ] call #bob
> quoted *text*
| a | b |
| --- | --- |
---
see [docs](example.com)"""


# === render_line() ===


def test_header_marker_then_inline() -> None:
    line = render_line("# Hi **b**")
    assert line.kind == Header(1)
    assert line.spans == (
        Span(0, 2, Style.MARKER),
        Span(2, 5, Style.TEXT),
        Span(5, 7, Style.DELIMITER),
        Span(7, 8, Style.BOLD),
        Span(8, 10, Style.DELIMITER),
    )


def test_checkbox_marker_and_hashtag() -> None:
    line = render_line("- [x] #todo")
    assert line.kind == Checkbox("", checked=True, bullet="- ")
    assert line.spans == (Span(0, 6, Style.MARKER), Span(6, 11, Style.HASHTAG, "todo"))


def test_table_row_pipes() -> None:
    line = render_line("| a | b |")
    assert line.kind == TableRow()
    assert line.spans == (
        Span(0, 1, Style.PIPE),
        Span(1, 4, Style.TEXT),
        Span(4, 5, Style.PIPE),
        Span(5, 8, Style.TEXT),
        Span(8, 9, Style.PIPE),
    )


def test_table_row_keeps_inline_styles() -> None:
    line = render_line("| **a** |")
    assert Span(4, 5, Style.BOLD) in line.spans
    assert line.spans[0] == Span(0, 1, Style.PIPE)
    assert line.spans[-1] == Span(8, 9, Style.PIPE)


def test_rule_is_one_span() -> None:
    line = render_line("----")
    assert line.kind == Rule()
    assert line.spans == (Span(0, 4, Style.RULE),)


def test_plain_line() -> None:
    line = render_line("nothing special")
    assert line.kind == Plain()
    assert line.spans == (Span(0, 15, Style.TEXT),)


def test_empty_line() -> None:
    line = render_line("")
    assert line.spans == ()
    assert line.plain == ""


def test_span_at() -> None:
    line = render_line("# Hi")
    assert line.span_at(0) == Span(0, 2, Style.MARKER)
    assert line.span_at(3) == Span(2, 4, Style.TEXT)
    assert line.span_at(4) is None


# === render() ===


def test_render_preserves_every_character() -> None:
    styled = render(DOCUMENT)
    assert "\n".join(line.plain for line in styled) == DOCUMENT


def test_render_one_line_per_source_line() -> None:
    styled = render(DOCUMENT)
    assert [line.text for line in styled] == DOCUMENT.split("\n")


def test_render_empty_document() -> None:
    assert render("") == ()


def test_render_accepts_line_list() -> None:
    assert render(["# a", "b"]) == (render_line("# a"), render_line("b"))


def test_render_is_deterministic() -> None:
    assert render(DOCUMENT) == render(DOCUMENT)


# === normalize_url() ===


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://example.com/a", "https://example.com/a"),
        ("http://example.com", "http://example.com"),
        ("example.com", "https://example.com"),
        ("  example.com  ", "https://example.com"),
        ("ftp://example.com", None),
        ("", None),
        ("https://", None),
    ],
)
def test_normalize_url(url: str, expected: str | None) -> None:
    assert normalize_url(url) == expected


# === activation_at() ===


def test_activation_on_link_text() -> None:
    text = DOCUMENT
    offset = text.index("docs") + 1
    assert activation_at(text, offset) == OpenLink("https://example.com")


def test_activation_on_hashtag() -> None:
    offset = DOCUMENT.index("#bob") + 2
    assert activation_at(DOCUMENT, offset) == FilterTag("bob")


def test_activation_on_plain_text_is_none() -> None:
    assert activation_at(DOCUMENT, DOCUMENT.index("Notes")) is None


def test_activation_on_link_delimiter_is_none() -> None:
    assert activation_at(DOCUMENT, DOCUMENT.index("](")) is None


def test_activation_out_of_range_is_none() -> None:
    assert activation_at("abc", 10) is None
    assert activation_at("abc", -1) is None


def test_activation_with_unsupported_scheme_is_none() -> None:
    text = "[x](ftp://host/file)"
    assert activation_at(text, 1) is None
