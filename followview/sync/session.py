"""Per-view enable/disable lifecycle and the runtime toggle.

The controller owns the shared mark set (through its highlight manager) and
the engine, and wires each followed view into the frame: pre/post command
hooks plus a toggle key binding. ``install`` adds the startup wiring that
follows every view whose kind has a registered resolver.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..config import DEFAULT_TOGGLE_KEY, TOGGLE_SCOPE_SESSION, FollowConfig
from ..errors import ConfigurationError
from ..host.frame import POST_COMMAND, PRE_COMMAND, Frame
from ..host.view import View
from ..render.overlays import OverlayRenderer, RegionRenderer
from .engine import SyncEngine
from .marks import HighlightManager
from .registry import ResolverRegistry
from .resolution import Resolver
from .state import Phase, Session, SyncToggle

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Wiring:
    """Frame callbacks registered for one session, kept for unregistering."""

    pre: Callable[[], object]
    post: Callable[[], object]
    toggle: Callable[[], object]
    toggle_key: str


@dataclass(frozen=True)
class _Entry:
    session: Session
    wiring: _Wiring


class SessionController:
    def __init__(
        self,
        frame: Frame,
        registry: ResolverRegistry | None = None,
        *,
        config: FollowConfig | None = None,
        renderer: RegionRenderer | None = None,
        highlights: HighlightManager | None = None,
    ) -> None:
        self.frame = frame
        self.registry = registry if registry is not None else ResolverRegistry()
        self.config = config if config is not None else FollowConfig()
        if highlights is None:
            highlights = HighlightManager(
                renderer if renderer is not None else OverlayRenderer(),
                notices=frame.notices,
            )
        self.highlights = highlights
        self.engine = SyncEngine(frame, self.registry, highlights, notices=frame.notices)
        self.global_toggle = SyncToggle(enabled=self.config.enabled)
        self._entries: dict[View, _Entry] = {}
        self._installed = False

    @property
    def toggle_key(self) -> str:
        return self.config.toggle_key or DEFAULT_TOGGLE_KEY

    def _new_toggle(self) -> SyncToggle:
        if self.config.toggle_scope == TOGGLE_SCOPE_SESSION:
            return SyncToggle(enabled=self.config.enabled)
        return self.global_toggle

    def session_for(self, view: View) -> Session | None:
        entry = self._entries.get(view)
        return entry.session if entry is not None else None

    def sessions(self) -> list[Session]:
        return [entry.session for entry in self._entries.values()]

    def enable(
        self,
        view: View,
        kind_or_resolver: str | Resolver | None = None,
        *,
        height: int | None = None,
    ) -> Session | None:
        """Start following ``view``; replaces any existing session for it.

        A string selects the view kind, a callable becomes the session's
        override resolver, ``None`` uses ``view.kind``. Without a resolver
        this raises ``ConfigurationError`` when ``missing_resolver_fatal`` is
        configured and otherwise reports a notice and returns ``None``.
        """
        override: Resolver | None = None
        if kind_or_resolver is None:
            kind = view.kind
        elif isinstance(kind_or_resolver, str):
            kind = kind_or_resolver
        elif callable(kind_or_resolver):
            kind = view.kind
            override = kind_or_resolver
        else:
            raise TypeError(f"expected a view kind or resolver, got {type(kind_or_resolver).__name__}")

        if override is None and self.registry.lookup(kind) is None:
            error = ConfigurationError(f"No follow resolver for view kind {kind!r}")
            if self.config.missing_resolver_fatal:
                raise error
            _LOG.warning("%s: %s", view.name, error)
            self.frame.notices.notify(str(error), transient=False, level=logging.WARNING)
            return None

        if view in self._entries:
            self.disable(view)
        if height is None and kind is not None:
            height = self.config.view_heights.get(kind)

        session = Session(
            view=view,
            kind=kind,
            toggle=self._new_toggle(),
            override=override,
            height=height,
        )
        wiring = _Wiring(
            pre=lambda: self.engine.pre_command(session),
            post=lambda: self.engine.post_command(session),
            toggle=lambda: self.toggle(view),
            toggle_key=self.toggle_key,
        )
        self.frame.add_hook(view, PRE_COMMAND, wiring.pre)
        self.frame.add_hook(view, POST_COMMAND, wiring.post)
        self.frame.bind_key(view, wiring.toggle_key, wiring.toggle)
        self._entries[view] = _Entry(session=session, wiring=wiring)
        _LOG.debug("following %s (kind=%r, override=%s)", view.name, kind, override is not None)
        return session

    def disable(self, view: View) -> bool:
        """Stop following ``view``: unregister hooks and key, drop the session."""
        entry = self._entries.pop(view, None)
        if entry is None:
            return False
        wiring = entry.wiring
        self.frame.remove_hook(view, PRE_COMMAND, wiring.pre)
        self.frame.remove_hook(view, POST_COMMAND, wiring.post)
        self.frame.unbind_key(view, wiring.toggle_key, wiring.toggle)
        entry.session.active = False
        entry.session.phase = Phase.IDLE
        self.highlights.forget_view(view)
        _LOG.debug("stopped following %s", view.name)
        return True

    def toggle(self, view: View | None = None) -> bool:
        """Flip follow mode for ``view`` (focused view when omitted).

        With the global scope this flips every session at once. Turning it on
        arms the session so the running command's post-command resolves.
        """
        target = view if view is not None else self.frame.selected
        session = self.session_for(target) if target is not None else None
        toggle = session.toggle if session is not None else self.global_toggle
        enabled = toggle.flip()
        if enabled and session is not None and session.active:
            self.highlights.unmark_all()
            session.phase = Phase.RESOLVING
        self.frame.notices.notify("Follow mode on" if enabled else "Follow mode off")
        return enabled

    # startup wiring

    def install(self) -> None:
        """Follow new views whose kind is registered; tear down on close."""
        if self._installed:
            return
        self.frame.on_view_added(self._on_view_added)
        self.frame.on_view_closed(self._on_view_closed)
        self._installed = True
        for view in list(self.frame.views.values()):
            self._on_view_added(view)

    def uninstall(self) -> None:
        if not self._installed:
            return
        self.frame.remove_listener(self._on_view_added)
        self.frame.remove_listener(self._on_view_closed)
        self._installed = False
        for view in list(self._entries):
            self.disable(view)

    def _on_view_added(self, view: View) -> None:
        if view in self._entries or view.kind is None:
            return
        if view.kind in self.registry:
            self.enable(view)

    def _on_view_closed(self, view: View) -> None:
        self.disable(view)
