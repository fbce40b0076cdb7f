"""User-visible notice channel.

Notices are the only way the sync core talks to the user: "No match" after a
failed resolve, configuration problems, rejected calls. Transient notices
disappear when the next command starts; every notice is also logged.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass

_LOG = logging.getLogger(__name__)

NOTICE_HISTORY_MAX = 200


@dataclass(frozen=True)
class Notice:
    text: str
    transient: bool = True
    level: int = logging.INFO


class NoticeLog:
    """Bounded notice history with a current-message view for status rows."""

    def __init__(self, max_entries: int = NOTICE_HISTORY_MAX) -> None:
        self.history: deque[Notice] = deque(maxlen=max_entries)
        self._current: Notice | None = None

    def notify(self, text: str, *, transient: bool = True, level: int = logging.INFO) -> Notice:
        notice = Notice(text=text, transient=transient, level=level)
        self.history.append(notice)
        self._current = notice
        _LOG.log(level, "%s", text)
        return notice

    @property
    def current(self) -> Notice | None:
        """Most recent notice still on display."""
        return self._current

    @property
    def current_text(self) -> str:
        return self._current.text if self._current is not None else ""

    def clear_transient(self) -> None:
        """Drop the displayed notice if it only lasts until the next command."""
        if self._current is not None and self._current.transient:
            self._current = None

    def texts(self) -> list[str]:
        return [notice.text for notice in self.history]
