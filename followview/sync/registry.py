"""View-kind to resolver dispatch table."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .resolution import Resolver

if TYPE_CHECKING:
    from .session import Session


class ResolverRegistry:
    """Map view kinds to resolvers; sessions may override without mutating it."""

    def __init__(self, resolvers: dict[str, Resolver] | None = None) -> None:
        self._resolvers: dict[str, Resolver] = {}
        for kind, resolver in (resolvers or {}).items():
            self.register(kind, resolver)

    def register(self, kind: str, resolver: Resolver) -> ResolverRegistry:
        """Associate ``kind`` with ``resolver``, replacing any earlier entry."""
        if not callable(resolver):
            raise TypeError(f"resolver for {kind!r} is not callable")
        self._resolvers[kind] = resolver
        return self

    def unregister(self, kind: str) -> bool:
        return self._resolvers.pop(kind, None) is not None

    def lookup(self, kind: str | None) -> Resolver | None:
        if kind is None:
            return None
        return self._resolvers.get(kind)

    def resolver_for(self, session: Session) -> Resolver | None:
        """Session override first, then the registry entry for its kind."""
        if session.override is not None:
            return session.override
        return self.lookup(session.kind)

    def kinds(self) -> list[str]:
        return sorted(self._resolvers)

    def __contains__(self, kind: object) -> bool:
        return kind in self._resolvers

    def __len__(self) -> int:
        return len(self._resolvers)
