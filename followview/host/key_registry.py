"""Key-combo dispatch tables used for per-view and global bindings."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action callback."""

    combos: tuple[str, ...]
    handler: Callable[[], object]


class KeyComboRegistry:
    """Small key-dispatch table; key tokens match exactly, so ``k`` and ``K`` differ."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[], object]] = {}

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            self._handlers[combo] = binding.handler
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        for binding in bindings:
            self.register_binding(binding)
        return self

    def unregister(self, combo: str, handler: Callable[[], object] | None = None) -> bool:
        """Remove ``combo``; when ``handler`` is given only remove that exact handler."""
        current = self._handlers.get(combo)
        if current is None or (handler is not None and current is not handler):
            return False
        del self._handlers[combo]
        return True

    def handler_for(self, key: str) -> Callable[[], object] | None:
        return self._handlers.get(key)

    def __contains__(self, key: str) -> bool:
        return key in self._handlers
