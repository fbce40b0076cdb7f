"""Host-side collaborators for the sync core.

This package groups the pieces an editor would normally provide:
- text views with cursors (``View``)
- the cooperative command loop with per-view hooks (``Frame``)
- key-combo dispatch tables and the notice channel
"""

from __future__ import annotations

from .frame import HOOK_PHASES, POST_COMMAND, PRE_COMMAND, Frame
from .key_registry import KeyComboBinding, KeyComboRegistry
from .notices import Notice, NoticeLog
from .view import View

__all__ = [
    "Frame",
    "HOOK_PHASES",
    "KeyComboBinding",
    "KeyComboRegistry",
    "Notice",
    "NoticeLog",
    "POST_COMMAND",
    "PRE_COMMAND",
    "View",
]
