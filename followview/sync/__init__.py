"""Follow-mode synchronization core.

This package groups the resolve-and-highlight machinery:
- view-kind resolver dispatch (``ResolverRegistry``)
- the two-slot highlight state (``HighlightManager``)
- pre/post command handlers (``SyncEngine``)
- per-view lifecycle and the toggle (``SessionController``)
"""

from __future__ import annotations

from .engine import SyncEngine
from .marks import OUTPUT_SLOT, SOURCE_SLOT, HighlightManager, Mark, MarkSet
from .registry import ResolverRegistry
from .resolution import (
    Matched,
    NoMatch,
    Resolution,
    ResolveContext,
    Resolver,
    SourceLocation,
    ambient_resolver,
    coerce_resolution,
)
from .session import SessionController
from .state import Outcome, Phase, Session, SyncToggle

__all__ = [
    "HighlightManager",
    "Mark",
    "MarkSet",
    "Matched",
    "NoMatch",
    "OUTPUT_SLOT",
    "Outcome",
    "Phase",
    "Resolution",
    "ResolveContext",
    "Resolver",
    "ResolverRegistry",
    "SOURCE_SLOT",
    "Session",
    "SessionController",
    "SourceLocation",
    "SyncEngine",
    "SyncToggle",
    "ambient_resolver",
    "coerce_resolution",
]
