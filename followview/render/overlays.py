"""Overlay bookkeeping behind ``mark_region`` / ``clear_region``."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import count
from typing import Protocol

from ..host.view import View


class RegionRenderer(Protocol):
    def mark_region(self, view: View, begin: int, end: int) -> object: ...

    def clear_region(self, handle: object) -> None: ...


@dataclass(frozen=True)
class Overlay:
    """Highlighted ``[begin, end)`` character range inside one view."""

    id: int
    view: View
    begin: int
    end: int

    def touches_line(self, line_begin: int, line_end: int) -> bool:
        """Whether this overlay should paint the line ``[line_begin, line_end)``.

        Empty overlays paint the line they sit on.
        """
        if self.begin == self.end:
            return line_begin <= self.begin <= line_end
        return self.begin <= line_end and self.end > line_begin


class OverlayRenderer:
    """In-memory region renderer; row drawing reads ``overlays_for``."""

    def __init__(self) -> None:
        self._ids = count(1)
        self._overlays: dict[int, Overlay] = {}

    def mark_region(self, view: View, begin: int, end: int) -> Overlay:
        overlay = Overlay(id=next(self._ids), view=view, begin=begin, end=end)
        self._overlays[overlay.id] = overlay
        return overlay

    def clear_region(self, handle: object) -> None:
        if isinstance(handle, Overlay):
            self._overlays.pop(handle.id, None)

    def overlays_for(self, view: View) -> list[Overlay]:
        return [overlay for overlay in self._overlays.values() if overlay.view is view]

    def __len__(self) -> int:
        return len(self._overlays)
