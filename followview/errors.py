"""Error types raised or reported by follow-mode synchronization."""

from __future__ import annotations


class FollowError(Exception):
    """Base class for expected follow-mode failures."""


class ConfigurationError(FollowError):
    """No resolver could be determined for a view, or config is unusable."""


class ResolutionFailure(FollowError):
    """A resolver could not map the current item to a source location."""


class InvariantViolation(FollowError):
    """A call broke an engine precondition and was rejected."""
