"""Detection of overlapping regions in the output."""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from operator import attrgetter

from custasm.util.source import AsmError, Span


@dataclass
class _Entry:
    position: int
    size: int
    span: Span | None


_position = attrgetter("position")


class OverlapChecker:
    """Records output regions and rejects ones that overlap earlier ones."""

    def __init__(self) -> None:
        self._entries: list[_Entry] = []

    def check_and_insert(self, position: int, size: int, span: Span | None = None) -> None:
        """Record a region, raising :class:`AsmError` if it overlaps another."""
        index, overlapping = self._check_overlap(position, size)
        if overlapping is not None:
            raise AsmError(
                "output overlap",
                span,
                [("overlaps with:", overlapping.span)],
            )
        self._entries.insert(index, _Entry(position, size, span))

    def _check_overlap(self, position: int, size: int) -> tuple[int, _Entry | None]:
        entries = self._entries
        i = bisect.bisect_left(entries, position, key=_position)

        if i < len(entries) and entries[i].position == position:
            found = entries[i]
            if found.size > 0 and size > 0:
                return (i + 1, found)
            return (i + 1, None)

        if i < len(entries):
            following = entries[i]
            if position + size > following.position:
                return (i, following)

        if i > 0:
            previous = entries[i - 1]
            if previous.position + previous.size > position:
                return (i - 1, previous)

        return (i, None)