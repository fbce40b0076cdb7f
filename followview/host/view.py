"""Text views with a cursor and line arithmetic.

A view is the host-side buffer the engine reads and moves: output listings
(search hits, diagnostics) and the source files they point into. Offsets are
character indices into ``text``; lines are 1-based for callers and ranges are
half-open ``[begin, end)`` excluding the trailing newline.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(eq=False)
class View:
    """Named text buffer with a clamped cursor and optional visible height."""

    name: str
    text: str = ""
    kind: str | None = None
    path: Path | None = None
    cursor: int = 0
    height: int | None = None
    _line_starts: list[int] | None = field(default=None, init=False, repr=False)
    _line_starts_text: str | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.cursor = self._clamp(self.cursor)

    def _clamp(self, offset: int) -> int:
        return max(0, min(len(self.text), offset))

    def _starts(self) -> list[int]:
        """Return cached offsets of every line start, rebuilt when text changes."""
        if self._line_starts is None or self._line_starts_text is not self.text:
            starts = [0]
            idx = self.text.find("\n")
            while idx >= 0:
                starts.append(idx + 1)
                idx = self.text.find("\n", idx + 1)
            self._line_starts = starts
            self._line_starts_text = self.text
        return self._line_starts

    def set_text(self, text: str) -> None:
        self.text = text
        self.cursor = self._clamp(self.cursor)

    def set_cursor(self, offset: int) -> int:
        self.cursor = self._clamp(offset)
        return self.cursor

    def line_count(self) -> int:
        starts = self._starts()
        if len(starts) > 1 and starts[-1] == len(self.text):
            return len(starts) - 1
        return len(starts)

    def line_number(self, offset: int | None = None) -> int:
        """Return 1-based line containing ``offset`` (cursor when omitted)."""
        target = self.cursor if offset is None else self._clamp(offset)
        return bisect_right(self._starts(), target)

    def line_start(self, line: int) -> int:
        """Return offset of 1-based ``line``, clamped to the view's lines."""
        starts = self._starts()
        idx = max(1, min(line, len(starts))) - 1
        return starts[idx]

    def line_bounds(self, offset: int | None = None) -> tuple[int, int]:
        """Return ``[begin, end)`` of the line holding ``offset``; ``end`` excludes newline."""
        target = self.cursor if offset is None else self._clamp(offset)
        starts = self._starts()
        begin = starts[bisect_right(starts, target) - 1]
        end = self.text.find("\n", begin)
        if end < 0:
            end = len(self.text)
        return begin, end

    def line_text(self, line: int | None = None) -> str:
        offset = self.cursor if line is None else self.line_start(line)
        begin, end = self.line_bounds(offset)
        return self.text[begin:end]

    def goto_line(self, line: int) -> int:
        """Move cursor to the start of 1-based ``line``."""
        return self.set_cursor(self.line_start(line))

    def move_lines(self, delta: int) -> int:
        """Move cursor ``delta`` lines, landing on the line start."""
        target = max(1, min(self.line_count(), self.line_number() + delta))
        return self.goto_line(target)

    @classmethod
    def from_path(cls, path: Path, kind: str | None = None) -> View:
        """Load a view for ``path`` using tolerant text decoding."""
        from ..render.syntax import read_text

        resolved = path.resolve()
        return cls(name=str(resolved), text=read_text(resolved), kind=kind, path=resolved)
