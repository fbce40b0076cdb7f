"""Two-slot highlight state: one mark for the source line, one for the item.

The mark set is shared by every session. Attaching a slot moves it, so a
slot is never shown in two places, and requests that would not change
anything make no renderer calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..errors import InvariantViolation
from ..host.notices import NoticeLog
from ..host.view import View

if TYPE_CHECKING:
    from ..render.overlays import RegionRenderer

_LOG = logging.getLogger(__name__)

SOURCE_SLOT = 0
OUTPUT_SLOT = 1
SLOTS = (SOURCE_SLOT, OUTPUT_SLOT)


@dataclass(eq=False)
class Mark:
    """One highlight slot; detached when ``view`` is ``None``."""

    slot: int
    view: View | None = None
    begin: int = 0
    end: int = 0
    handle: object | None = None

    @property
    def attached(self) -> bool:
        return self.view is not None

    @property
    def range(self) -> tuple[int, int]:
        return self.begin, self.end

    def detach(self) -> None:
        self.view = None
        self.begin = 0
        self.end = 0
        self.handle = None


class MarkSet:
    """Exactly two marks indexed by slot."""

    def __init__(self) -> None:
        self._marks = tuple(Mark(slot) for slot in SLOTS)

    def __getitem__(self, slot: int) -> Mark:
        return self._marks[slot]

    def __iter__(self):
        return iter(self._marks)

    def __len__(self) -> int:
        return len(self._marks)

    def attached(self) -> list[Mark]:
        return [mark for mark in self._marks if mark.attached]


class HighlightManager:
    """Only writer of the shared ``MarkSet``; delegates drawing to a renderer."""

    def __init__(
        self,
        renderer: RegionRenderer,
        notices: NoticeLog | None = None,
        marks: MarkSet | None = None,
    ) -> None:
        self.renderer = renderer
        self.notices = notices if notices is not None else NoticeLog()
        self.marks = marks if marks is not None else MarkSet()

    def _reject(self, message: str) -> bool:
        _LOG.warning("rejected mark request: %s", message)
        self.notices.notify(str(InvariantViolation(message)), level=logging.WARNING)
        return False

    def mark(self, slot: int, view: View, begin: int, end: int) -> bool:
        """Attach ``slot`` to ``view`` over ``[begin, end)``, moving any prior mark.

        Empty ranges are valid. ``begin > end`` and unknown slots are
        rejected without touching state and reported as notices.
        """
        if slot not in SLOTS:
            return self._reject(f"unknown mark slot {slot}")
        if begin > end:
            return self._reject(f"mark range [{begin}, {end}) is reversed")
        mark = self.marks[slot]
        if mark.view is view and mark.range == (begin, end):
            return True
        if mark.attached:
            self.renderer.clear_region(mark.handle)
        handle = self.renderer.mark_region(view, begin, end)
        mark.view = view
        mark.begin = begin
        mark.end = end
        mark.handle = handle
        _LOG.debug("slot %d -> %s [%d, %d)", slot, view.name, begin, end)
        return True

    def unmark(self, slot: int) -> bool:
        """Detach ``slot``; returns ``False`` when it was already detached."""
        if slot not in SLOTS:
            return self._reject(f"unknown mark slot {slot}")
        mark = self.marks[slot]
        if not mark.attached:
            return False
        self.renderer.clear_region(mark.handle)
        mark.detach()
        _LOG.debug("slot %d detached", slot)
        return True

    def unmark_all(self) -> bool:
        cleared = False
        for slot in SLOTS:
            cleared = self.unmark(slot) or cleared
        return cleared

    def forget_view(self, view: View) -> None:
        """Detach any slot still pointing at a view that is going away."""
        for mark in self.marks:
            if mark.view is view:
                self.unmark(mark.slot)
