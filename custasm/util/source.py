"""Source spans, assembler errors and character-based text navigation."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Span:
    """A range of characters inside a source file.

    A span without a location (the default) is a placeholder that
    carries no position information.
    """

    file_handle: int | None = None
    start: int | None = None
    end: int | None = None

    def location(self) -> tuple[int, int] | None:
        """Return ``(start, end)`` or ``None`` for a placeholder span."""
        if self.start is None or self.end is None:
            return None
        return (self.start, self.end)

    def join(self, other: Span) -> Span:
        """Return the smallest span covering both spans."""
        here = self.location()
        there = other.location()
        if here is None:
            return other
        if there is None or other.file_handle != self.file_handle:
            return self
        return Span(self.file_handle, min(here[0], there[0]), max(here[1], there[1]))


class AsmError(Exception):
    """An error reported while processing assembly source."""

    def __init__(
        self,
        message: str,
        span: Span | None = None,
        notes: tuple[tuple[str, Span | None], ...] | list = (),
    ) -> None:
        super().__init__(message)
        self.message = message
        self.span = span
        self.notes = tuple(notes)

    def __str__(self) -> str:
        return self.message


class CharCounter:
    """Line and column lookups over a piece of source text."""

    def __init__(self, src: str) -> None:
        self.src = src

    def get_excerpt(self, start: int, end: int) -> str:
        if start < 0 or start > end or end > len(self.src):
            raise ValueError(f"invalid excerpt range {start}..{end}")
        return self.src[start:end]

    def get_line_count(self) -> int:
        return self.src.count("\n") + 1

    def get_line_column_at_index(self, index: int) -> tuple[int, int]:
        """Return the zero-based ``(line, column)`` of a character index."""
        line = 0
        column = 0
        for c in self.src[: max(index, 0)]:
            if c == "\n":
                line += 1
                column = 0
            else:
                column += 1
        return (line, column)

    def get_index_range_of_line(self, line: int) -> tuple[int, int]:
        """Return the index range of a line, including its line break."""
        length = len(self.src)
        line_count = 0
        line_begin = 0
        while line_count < line and line_begin < length:
            line_begin += 1
            if self.src[line_begin - 1] == "\n":
                line_count += 1

        newline = self.src.find("\n", line_begin)
        line_end = length if newline < 0 else newline + 1
        return (line_begin, line_end)