"""Caret-preserving text mutations: list continuation, wrapping, auto-format.

Every operation is pure: it takes the buffer and caret and returns an `Edit`.
When its precondition does not hold it returns the input unchanged, so the
caller can fall back to the default behaviour of the key.
"""

from __future__ import annotations

from bearmark.edits import Edit, clamp, line_bounds
from bearmark.lines import BulletItem, Checkbox, OrderedItem, classify, marker_length, next_marker

# Lines that turn into list markers when Space is typed right after them.
AUTO_FORMAT_TRIGGERS = ("-", "[ ]")


def continue_on_enter(text: str, caret: int) -> Edit:
    """Continue a bullet, numbered or checkbox line on Enter.

    An item with no content loses its marker instead (leaving its indent),
    which ends the list. A caret inside the marker itself is left alone.
    """
    caret = clamp(caret, text)
    start, end = line_bounds(text, caret)
    line = text[start:end]
    kind = classify(line)
    marker = next_marker(kind)
    if marker is None or not isinstance(kind, BulletItem | OrderedItem | Checkbox):
        return Edit.unchanged(text, caret)
    prefix = marker_length(line, kind)
    if caret - start < prefix:
        return Edit.unchanged(text, caret)

    if not line[prefix:].strip():
        new_text = text[:start] + kind.indent + text[end:]
        return Edit(new_text, start + len(kind.indent))

    insert = "\n" + marker
    return Edit(text[:caret] + insert + text[caret:], caret + len(insert))


def wrap_selection(text: str, start: int, end: int, prefix: str, suffix: str) -> Edit:
    """Surround the selection with `prefix` and `suffix`.

    With an empty selection the caret lands between the two, ready to type.
    Otherwise the wrapped text, delimiters included, stays selected.
    """
    start, end = sorted((clamp(start, text), clamp(end, text)))
    new_text = text[:start] + prefix + text[start:end] + suffix + text[end:]
    if start == end:
        return Edit(new_text, start + len(prefix))
    return Edit(new_text, end + len(prefix) + len(suffix), anchor=start)


def insert_link(text: str, start: int, end: int) -> Edit:
    """Insert a Markdown link around the selection.

    Selected text becomes the link label and the caret waits in the empty URL;
    without a selection the caret waits in the empty label.
    """
    start, end = sorted((clamp(start, text), clamp(end, text)))
    label = text[start:end]
    new_text = f"{text[:start]}[{label}](){text[end:]}"
    if label:
        return Edit(new_text, start + len(label) + 3)
    return Edit(new_text, start + 1)


def auto_format_on_space(text: str, caret: int) -> Edit:
    """Turn a line that is exactly `-` or `[ ]` into a list marker on Space."""
    caret = clamp(caret, text)
    start, end = line_bounds(text, caret)
    if caret != end or text[start:end] not in AUTO_FORMAT_TRIGGERS:
        return Edit.unchanged(text, caret)
    return Edit(text[:caret] + " " + text[caret:], caret + 1)
