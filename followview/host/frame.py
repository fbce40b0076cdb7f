"""Cooperative command loop host.

The frame owns the open views, which one has input focus, per-view command
hooks and key bindings, and the notice channel. ``run_command`` is the whole
loop contract: pre-command hooks of the focused view, the command, then the
same view's post-command hooks, one command at a time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from .key_registry import KeyComboBinding, KeyComboRegistry
from .notices import NoticeLog
from .view import View

_LOG = logging.getLogger(__name__)

PRE_COMMAND = "pre_command"
POST_COMMAND = "post_command"
HOOK_PHASES = (PRE_COMMAND, POST_COMMAND)

Hook = Callable[[], object]
ViewListener = Callable[[View], object]


class Frame:
    """Views, focus, hooks, and key dispatch for one interactive session."""

    def __init__(self, notices: NoticeLog | None = None) -> None:
        self.notices = notices if notices is not None else NoticeLog()
        self.views: dict[str, View] = {}
        self.selected: View | None = None
        self.global_keys = KeyComboRegistry()
        self._view_keys: dict[View, KeyComboRegistry] = {}
        self._hooks: dict[View, dict[str, list[Hook]]] = {}
        self._added_listeners: list[ViewListener] = []
        self._closed_listeners: list[ViewListener] = []
        self._register_movement_keys()

    def _register_movement_keys(self) -> None:
        def move(delta: int) -> Callable[[], object]:
            return lambda: self._require_selected().move_lines(delta)

        def to_first() -> object:
            return self._require_selected().goto_line(1)

        def to_last() -> object:
            view = self._require_selected()
            return view.goto_line(view.line_count())

        self.global_keys.register_bindings(
            KeyComboBinding(("UP", "k"), move(-1)),
            KeyComboBinding(("DOWN", "j"), move(1)),
            KeyComboBinding(("HOME", "g"), to_first),
            KeyComboBinding(("END", "G"), to_last),
        )

    def _require_selected(self) -> View:
        if self.selected is None:
            raise LookupError("no view has focus")
        return self.selected

    # views and focus

    def add_view(self, view: View, *, select: bool = False) -> View:
        """Register ``view`` (replacing any same-named view) and notify listeners."""
        previous = self.views.get(view.name)
        if previous is view:
            if select:
                self.select(view)
            return view
        if previous is not None:
            self.close_view(previous)
        self.views[view.name] = view
        if select or self.selected is None:
            self.selected = view
        self._emit(self._added_listeners, view)
        return view

    def close_view(self, view: View) -> bool:
        if self.views.get(view.name) is not view:
            return False
        self._emit(self._closed_listeners, view)
        del self.views[view.name]
        self._hooks.pop(view, None)
        self._view_keys.pop(view, None)
        if self.selected is view:
            self.selected = next(iter(self.views.values()), None)
        return True

    def view_named(self, name: str) -> View | None:
        return self.views.get(name)

    def visit(self, path: Path, kind: str | None = None) -> View:
        """Return the open view for ``path``, loading it when not open yet."""
        resolved = path.resolve()
        for view in self.views.values():
            if view.path is not None and view.path == resolved:
                return view
        return self.add_view(View.from_path(resolved, kind=kind))

    def select(self, view: View) -> View:
        """Give ``view`` input focus, adding it to the frame if needed."""
        if self.views.get(view.name) is not view:
            self.add_view(view)
        self.selected = view
        return view

    def set_view_height(self, view: View, rows: int) -> None:
        view.height = max(1, int(rows))

    # listeners

    def on_view_added(self, listener: ViewListener) -> None:
        self._added_listeners.append(listener)

    def on_view_closed(self, listener: ViewListener) -> None:
        self._closed_listeners.append(listener)

    def remove_listener(self, listener: ViewListener) -> None:
        for listeners in (self._added_listeners, self._closed_listeners):
            if listener in listeners:
                listeners.remove(listener)

    def _emit(self, listeners: list[ViewListener], view: View) -> None:
        for listener in list(listeners):
            try:
                listener(view)
            except Exception as exc:
                _LOG.exception("view listener failed for %s", view.name)
                self.notices.notify(str(exc) or type(exc).__name__, level=logging.ERROR)

    # hooks

    def add_hook(self, view: View, phase: str, hook: Hook) -> None:
        if phase not in HOOK_PHASES:
            raise ValueError(f"unknown hook phase: {phase!r}")
        hooks = self._hooks.setdefault(view, {}).setdefault(phase, [])
        if hook not in hooks:
            hooks.append(hook)

    def remove_hook(self, view: View, phase: str, hook: Hook) -> bool:
        hooks = self._hooks.get(view, {}).get(phase, [])
        if hook not in hooks:
            return False
        hooks.remove(hook)
        return True

    def hooks_for(self, view: View, phase: str) -> list[Hook]:
        return list(self._hooks.get(view, {}).get(phase, []))

    def _run_hooks(self, view: View | None, phase: str) -> None:
        if view is None:
            return
        for hook in self.hooks_for(view, phase):
            try:
                hook()
            except Exception as exc:
                _LOG.exception("%s hook failed in %s", phase, view.name)
                self.notices.notify(str(exc) or type(exc).__name__, level=logging.ERROR)

    # key bindings

    def bind_key(self, view: View, key: str, handler: Callable[[], object]) -> None:
        registry = self._view_keys.setdefault(view, KeyComboRegistry())
        registry.register_binding(KeyComboBinding((key,), handler))

    def unbind_key(self, view: View, key: str, handler: Callable[[], object] | None = None) -> bool:
        registry = self._view_keys.get(view)
        if registry is None:
            return False
        return registry.unregister(key, handler)

    def key_handler(self, key: str) -> Callable[[], object] | None:
        """Return the focused view's binding for ``key``, else the global one."""
        if self.selected is not None:
            registry = self._view_keys.get(self.selected)
            if registry is not None:
                handler = registry.handler_for(key)
                if handler is not None:
                    return handler
        return self.global_keys.handler_for(key)

    # command loop

    def run_command(self, command: Callable[[], object]) -> object:
        """Run one command wrapped in the focused view's pre/post hooks."""
        origin = self.selected
        self.notices.clear_transient()
        self._run_hooks(origin, PRE_COMMAND)
        try:
            return command()
        finally:
            self._run_hooks(origin, POST_COMMAND)

    def press(self, key: str) -> bool:
        """Dispatch ``key`` as one command; returns whether a binding existed."""
        handler = self.key_handler(key)
        if handler is None:
            self.notices.notify(f"{key} is undefined")
            return False
        self.run_command(handler)
        return True
