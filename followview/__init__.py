"""Public package surface for followview.

Exports the synchronization core (registry, highlight manager, engine and
session controller) plus ``main`` for programmatic CLI invocation.
"""

from __future__ import annotations

from .errors import ConfigurationError, FollowError, InvariantViolation, ResolutionFailure
from .host import Frame, NoticeLog, View
from .sync import (
    HighlightManager,
    Matched,
    NoMatch,
    ResolveContext,
    ResolverRegistry,
    SessionController,
    SourceLocation,
    SyncEngine,
    ambient_resolver,
)


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = [
    "ConfigurationError",
    "FollowError",
    "Frame",
    "HighlightManager",
    "InvariantViolation",
    "Matched",
    "NoMatch",
    "NoticeLog",
    "ResolutionFailure",
    "ResolveContext",
    "ResolverRegistry",
    "SessionController",
    "SourceLocation",
    "SyncEngine",
    "View",
    "ambient_resolver",
    "main",
]
