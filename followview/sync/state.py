"""Per-view synchronization state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..host.view import View
from .resolution import Resolver


class Phase(Enum):
    IDLE = "idle"
    RESOLVING = "resolving"


class Outcome(Enum):
    MATCHED = "matched"
    UNMATCHED = "unmatched"


@dataclass(eq=False)
class SyncToggle:
    """Enabled flag; one instance may be shared by many sessions."""

    enabled: bool = True

    def flip(self) -> bool:
        self.enabled = not self.enabled
        return self.enabled


@dataclass(eq=False)
class Session:
    view: View
    kind: str | None
    toggle: SyncToggle
    override: Resolver | None = None
    height: int | None = None
    phase: Phase = Phase.IDLE
    last_outcome: Outcome | None = None
    active: bool = True
    config_error_reported: bool = False

    @property
    def enabled(self) -> bool:
        return self.toggle.enabled
