"""Edit results and buffer-offset helpers shared by the mutation operations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Edit:
    """The buffer and caret after a mutation.

    `anchor` is the fixed end of a selection when the operation leaves text
    selected; the caret is the moving end.
    """

    text: str
    caret: int
    anchor: int | None = None

    @classmethod
    def unchanged(cls, text: str, caret: int, anchor: int | None = None) -> Edit:
        """Return the no-op result for an operation whose precondition failed."""
        return cls(text, caret, anchor)

    @property
    def selection(self) -> tuple[int, int]:
        """Return the selected range as (start, end); empty when nothing is selected."""
        if self.anchor is None:
            return (self.caret, self.caret)
        return (min(self.anchor, self.caret), max(self.anchor, self.caret))


def clamp(offset: int, text: str) -> int:
    """Clamp an offset into the valid range for `text`."""
    return max(0, min(offset, len(text)))


def line_bounds(text: str, offset: int) -> tuple[int, int]:
    """Return (start, end) of the line containing `offset`; end excludes the newline."""
    start = text.rfind("\n", 0, offset) + 1
    end = text.find("\n", offset)
    return start, len(text) if end == -1 else end


def line_index(text: str, offset: int) -> int:
    """Return the zero-based line number of `offset`."""
    return text.count("\n", 0, offset)


def line_offsets(lines: list[str]) -> list[int]:
    """Return the buffer offset at which each line starts."""
    offsets: list[int] = []
    position = 0
    for line in lines:
        offsets.append(position)
        position += len(line) + 1
    return offsets
