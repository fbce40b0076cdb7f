"""Persistent JSON config helpers.

Stores which resolver follows each view kind, the toggle key and default,
per-kind view heights, and how a missing resolver is reported.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import importlib
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from platformdirs import user_config_dir

from .errors import ConfigurationError

if TYPE_CHECKING:
    from .sync.registry import ResolverRegistry
    from .sync.resolution import Resolver

APP_NAME = "followview"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_TOGGLE_KEY = "CTRL_F"
DEFAULT_STYLE = "monokai"
TOGGLE_SCOPE_GLOBAL = "global"
TOGGLE_SCOPE_SESSION = "session"
TOGGLE_SCOPES = (TOGGLE_SCOPE_GLOBAL, TOGGLE_SCOPE_SESSION)


@dataclass(frozen=True)
class FollowConfig:
    """Read-only inputs for the session controller."""

    resolvers: dict[str, str] = field(default_factory=dict)
    enabled: bool = True
    toggle_key: str = DEFAULT_TOGGLE_KEY
    view_heights: dict[str, int] = field(default_factory=dict)
    missing_resolver_fatal: bool = False
    toggle_scope: str = TOGGLE_SCOPE_GLOBAL
    style: str = DEFAULT_STYLE

    @classmethod
    def from_mapping(cls, data: dict[str, object]) -> FollowConfig:
        """Build config from decoded JSON, dropping invalid values silently."""
        return cls(
            resolvers=_coerce_resolver_paths(data.get("resolvers")),
            enabled=_coerce_bool(data.get("enabled"), True),
            toggle_key=_coerce_nonempty_str(data.get("toggle_key")) or DEFAULT_TOGGLE_KEY,
            view_heights=_coerce_view_heights(data.get("view_heights")),
            missing_resolver_fatal=_coerce_bool(data.get("missing_resolver_fatal"), False),
            toggle_scope=_coerce_scope(data.get("toggle_scope")),
            style=_coerce_nonempty_str(data.get("style")) or DEFAULT_STYLE,
        )

    def to_mapping(self) -> dict[str, object]:
        return {
            "resolvers": dict(self.resolvers),
            "enabled": self.enabled,
            "toggle_key": self.toggle_key,
            "view_heights": dict(self.view_heights),
            "missing_resolver_fatal": self.missing_resolver_fatal,
            "toggle_scope": self.toggle_scope,
            "style": self.style,
        }


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = path if path is not None else CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object], path: Path | None = None) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are ignored to keep runtime behavior non-fatal when
    config cannot be written.
    """
    config_path = path if path is not None else CONFIG_PATH
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError:
        pass


def load_follow_config(path: Path | None = None) -> FollowConfig:
    return FollowConfig.from_mapping(load_config(path))


def save_follow_config(config: FollowConfig, path: Path | None = None) -> None:
    data = load_config(path)
    data.update(config.to_mapping())
    save_config(data, path)


def _coerce_bool(value: object, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _coerce_nonempty_str(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _coerce_scope(value: object) -> str:
    return value if value in TOGGLE_SCOPES else TOGGLE_SCOPE_GLOBAL


def _coerce_resolver_paths(value: object) -> dict[str, str]:
    """Keep ``kind -> "module:attribute"`` pairs that look importable."""
    if not isinstance(value, dict):
        return {}
    paths: dict[str, str] = {}
    for kind, raw_path in value.items():
        if not isinstance(kind, str) or not kind.strip():
            continue
        target = _coerce_nonempty_str(raw_path)
        if target is None or ":" not in target:
            continue
        paths[kind.strip()] = target
    return paths


def _coerce_view_heights(value: object) -> dict[str, int]:
    """Keep positive integer heights; booleans are not heights."""
    if not isinstance(value, dict):
        return {}
    heights: dict[str, int] = {}
    for kind, raw_height in value.items():
        if not isinstance(kind, str):
            continue
        if isinstance(raw_height, bool) or not isinstance(raw_height, int) or raw_height <= 0:
            continue
        heights[kind] = raw_height
    return heights


def import_resolver(target: str) -> Resolver:
    """Import ``"package.module:attribute"`` and return the callable it names."""
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise ConfigurationError(f"Resolver path must look like 'module:attribute', got {target!r}")
    try:
        resolved: object = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Cannot import resolver module {module_name!r}: {exc}") from exc
    for part in attr_path.split("."):
        try:
            resolved = getattr(resolved, part)
        except AttributeError as exc:
            raise ConfigurationError(f"Resolver {target!r} not found") from exc
    if not callable(resolved):
        raise ConfigurationError(f"Resolver {target!r} is not callable")
    return resolved


def build_registry(config: FollowConfig) -> tuple[ResolverRegistry, list[ConfigurationError]]:
    """Import every configured resolver; failures are returned, not raised."""
    from .sync.registry import ResolverRegistry

    registry = ResolverRegistry()
    errors: list[ConfigurationError] = []
    for kind, target in sorted(config.resolvers.items()):
        try:
            registry.register(kind, import_resolver(target))
        except ConfigurationError as exc:
            errors.append(exc)
    return registry, errors
