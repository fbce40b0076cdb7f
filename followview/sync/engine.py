"""Pre/post command handlers that keep the marks in step with the cursor.

Before every command in a followed view both marks are cleared; after the
command the resolver maps the item under the cursor to a source location.
Only a confirmed match puts marks back, so a visible mark always belongs to
the last command that resolved, and focus always ends on the output view.
"""

from __future__ import annotations

import logging

from ..errors import ConfigurationError, InvariantViolation
from ..host.frame import Frame
from ..host.notices import NoticeLog
from .marks import OUTPUT_SLOT, SOURCE_SLOT, HighlightManager
from .registry import ResolverRegistry
from .resolution import Matched, NoMatch, Resolution, ResolveContext, coerce_resolution
from .state import Outcome, Phase, Session

_LOG = logging.getLogger(__name__)


class SyncEngine:
    def __init__(
        self,
        frame: Frame,
        registry: ResolverRegistry,
        highlights: HighlightManager,
        notices: NoticeLog | None = None,
    ) -> None:
        self.frame = frame
        self.registry = registry
        self.highlights = highlights
        self.notices = notices if notices is not None else frame.notices

    def pre_command(self, session: Session) -> None:
        """Clear both marks and start resolving; no-op while disabled."""
        if not session.active or not session.enabled:
            return
        self.highlights.unmark_all()
        session.phase = Phase.RESOLVING
        _LOG.debug("%s: idle -> resolving", session.view.name)

    def post_command(self, session: Session) -> Outcome | None:
        """Resolve the current item and mark both ends on success.

        Returns the outcome, or ``None`` when nothing was attempted (inactive,
        disabled, rejected call, or missing resolver).
        """
        if not session.active or not session.enabled:
            session.phase = Phase.IDLE
            return None
        if session.phase is not Phase.RESOLVING:
            message = str(InvariantViolation("post-command without pre-command"))
            _LOG.warning("%s: %s", session.view.name, message)
            self.notices.notify(message, level=logging.WARNING)
            return None
        session.phase = Phase.IDLE

        resolver = self.registry.resolver_for(session)
        if resolver is None:
            self._report_missing_resolver(session)
            return None

        output = session.view
        resolution = self._invoke(resolver, ResolveContext(self.frame, output, output.cursor))
        if isinstance(resolution, Matched):
            try:
                outcome = self._apply_match(session, resolution)
            except Exception as exc:
                _LOG.debug("%s: applying match failed", output.name, exc_info=True)
                self.highlights.unmark_all()
                outcome = self._apply_no_match(session, NoMatch(str(exc) or NoMatch().reason))
        else:
            outcome = self._apply_no_match(session, resolution)
        session.last_outcome = outcome
        _LOG.debug("%s: resolving -> idle (%s)", output.name, outcome.value)
        return outcome

    def _invoke(self, resolver, context: ResolveContext) -> Resolution:
        try:
            return coerce_resolution(resolver(context))
        except Exception as exc:
            _LOG.debug("resolver %r failed", resolver, exc_info=True)
            return NoMatch(str(exc) or NoMatch().reason)

    def _apply_match(self, session: Session, resolution: Matched) -> Outcome:
        output = session.view
        source = resolution.location.view
        self.frame.select(source)
        source.set_cursor(resolution.location.offset)
        begin, end = source.line_bounds()
        self.highlights.mark(SOURCE_SLOT, source, begin, end)

        self.frame.select(output)
        if output.cursor != 0:
            begin, end = output.line_bounds()
            self.highlights.mark(OUTPUT_SLOT, output, begin, end)
        if session.height is not None:
            self.frame.set_view_height(output, session.height)
        return Outcome.MATCHED

    def _apply_no_match(self, session: Session, resolution: NoMatch) -> Outcome:
        self.frame.select(session.view)
        self.notices.notify(resolution.reason or NoMatch().reason)
        return Outcome.UNMATCHED

    def _report_missing_resolver(self, session: Session) -> None:
        session.active = False
        if session.config_error_reported:
            return
        session.config_error_reported = True
        message = str(ConfigurationError(f"No follow resolver for view kind {session.kind!r}"))
        _LOG.warning("%s: %s", session.view.name, message)
        self.notices.notify(message, transient=False, level=logging.WARNING)
