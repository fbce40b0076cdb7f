"""Resolver contract: explicit context in, explicit result out.

A resolver receives a ``ResolveContext`` (frame, output view, cursor) and
returns ``Matched(SourceLocation)`` or ``NoMatch(reason)``. The engine
moves focus and cursor itself on a match, so resolvers stay side-effect
free. Zero-argument resolvers that move the frame's focus themselves are
wrapped with ``ambient_resolver``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from ..host.view import View

if TYPE_CHECKING:
    from ..host.frame import Frame

DEFAULT_NO_MATCH_REASON = "No match"


@dataclass(frozen=True)
class SourceLocation:
    view: View
    offset: int

    @classmethod
    def at_line(cls, view: View, line: int, column: int = 0) -> SourceLocation:
        """Location at 1-based ``line`` and 0-based ``column`` of ``view``."""
        begin, end = view.line_bounds(view.line_start(line))
        return cls(view=view, offset=min(end, begin + max(0, column)))


@dataclass(frozen=True)
class Matched:
    location: SourceLocation


@dataclass(frozen=True)
class NoMatch:
    reason: str = DEFAULT_NO_MATCH_REASON


Resolution = Union[Matched, NoMatch]


@dataclass(frozen=True)
class ResolveContext:
    """What a resolver may look at: the output view and the user's cursor."""

    frame: Frame
    view: View
    cursor: int

    @property
    def line(self) -> int:
        return self.view.line_number(self.cursor)

    @property
    def line_text(self) -> str:
        begin, end = self.view.line_bounds(self.cursor)
        return self.view.text[begin:end]


Resolver = Callable[[ResolveContext], object]


def coerce_resolution(value: object) -> Resolution:
    """Normalize resolver return values into ``Matched`` / ``NoMatch``.

    A bare ``SourceLocation`` counts as a match and ``None`` as no match. A
    location without a view or an integer offset is no match.
    """
    if isinstance(value, NoMatch):
        return value
    if isinstance(value, SourceLocation):
        value = Matched(value)
    if isinstance(value, Matched):
        location = value.location
        if not isinstance(location, SourceLocation) or not isinstance(location.view, View):
            return NoMatch("Resolver returned a location without a view")
        if not isinstance(location.offset, int) or isinstance(location.offset, bool):
            return NoMatch("Resolver returned a location without an offset")
        return value
    if value is None:
        return NoMatch()
    return NoMatch(f"Resolver returned {type(value).__name__}, expected a location")


def ambient_resolver(function: Callable[[], object]) -> Resolver:
    """Adapt a resolver that moves the frame's focus into the source view.

    ``function`` runs with the output view focused. When it returns with
    another view focused, that view's cursor is the match; when focus never
    left the output view it is treated as no match.
    """

    def resolve(context: ResolveContext) -> Resolution:
        frame = context.frame
        frame.select(context.view)
        context.view.set_cursor(context.cursor)
        function()
        target = frame.selected
        if target is None or target is context.view:
            return NoMatch()
        return Matched(SourceLocation(view=target, offset=target.cursor))

    resolve.__name__ = getattr(function, "__name__", "ambient_resolver")
    resolve.__doc__ = getattr(function, "__doc__", None)
    return resolve
