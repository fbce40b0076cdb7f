"""Command-line front door for followview.

``--check`` reports which configured resolvers import. ``--render`` loads an
output listing and its source file, follows the listing's line N through one
command cycle, and prints both views with their marks.
"""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
from pathlib import Path

from .config import CONFIG_PATH, FollowConfig, build_registry, import_resolver, load_follow_config
from .errors import ConfigurationError
from .host import Frame, View
from .render import OverlayRenderer, render_view_rows
from .sync import SessionController


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _default_render_width() -> int:
    term = shutil.get_terminal_size((80, 24))
    return max(1, term.columns)


def check_config(config: FollowConfig) -> tuple[list[str], bool]:
    """Describe each configured kind; second value is whether all imported."""
    registry, errors = build_registry(config)
    lines = [f"{kind}: {config.resolvers[kind]}" for kind in registry.kinds()]
    lines.extend(f"error: {error}" for error in errors)
    if not config.resolvers:
        lines.append("no resolvers configured")
    return lines, not errors


def render_follow(
    output_path: Path,
    source_path: Path,
    config: FollowConfig,
    *,
    kind: str | None,
    resolver_path: str | None,
    line: int,
    height: int | None,
    max_cols: int,
    no_color: bool,
) -> str:
    """Follow ``line`` of the output listing and render both views."""
    registry, _errors = build_registry(config)
    frame = Frame()
    renderer = OverlayRenderer()
    controller = SessionController(frame, registry, config=config, renderer=renderer)

    source = frame.visit(source_path)
    output = View.from_path(output_path, kind=kind)
    frame.add_view(output, select=True)
    override = import_resolver(resolver_path) if resolver_path is not None else None
    session = controller.enable(output, override if override is not None else kind, height=height)
    if session is None:
        raise ConfigurationError(frame.notices.current_text or "follow mode could not start")

    frame.run_command(lambda: output.goto_line(line))

    out: list[str] = []
    for view in (output, source):
        out.append(f"== {view.name}")
        rows = render_view_rows(
            view,
            renderer.overlays_for(view),
            max_cols,
            no_color=no_color,
            style=config.style,
            focused=view is frame.selected,
        )
        out.extend(rows)
    if frame.notices.current_text:
        out.append(f"-- {frame.notices.current_text}")
    return "\n".join(out) + "\n"


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run the requested action."""
    parser = argparse.ArgumentParser(
        description="Follow items of an output listing into their source file."
    )
    parser.add_argument("--config", type=Path, default=None, help=f"Config file (default: {CONFIG_PATH}).")
    parser.add_argument("--check", action="store_true", help="Report configured resolvers and exit.")
    parser.add_argument("--render", metavar="OUTPUT", type=Path, help="Output listing to follow.")
    parser.add_argument("--source", metavar="SOURCE", type=Path, help="Source file the listing refers to.")
    parser.add_argument("--kind", default=None, help="View kind of the output listing.")
    parser.add_argument("--resolver", metavar="MODULE:ATTR", default=None, help="Resolver override.")
    parser.add_argument("--line", type=_positive_int, default=1, help="Output line to follow (default: 1).")
    parser.add_argument("--height", type=_positive_int, default=None, help="Rows shown for the output view.")
    parser.add_argument(
        "--max-cols",
        type=_positive_int,
        default=None,
        help="Column width for --render output (default: terminal width).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--style", default=None, help="Pygments style name.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log engine transitions.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = load_follow_config(args.config)
    if args.style:
        config = FollowConfig.from_mapping({**config.to_mapping(), "style": args.style})

    if args.check:
        lines, ok = check_config(config)
        sys.stdout.write("\n".join(lines) + "\n")
        if not ok:
            raise SystemExit(1)
        return

    if args.render is None or args.source is None:
        parser.error("--render requires OUTPUT and --source SOURCE")
    for path in (args.render, args.source):
        if not path.exists():
            raise SystemExit(f"Path not found: {path}")
    if args.kind is None and args.resolver is None:
        parser.error("--render needs --kind or --resolver")

    max_cols = args.max_cols if args.max_cols is not None else _default_render_width()
    try:
        text = render_follow(
            args.render,
            args.source,
            config,
            kind=args.kind,
            resolver_path=args.resolver,
            line=args.line,
            height=args.height,
            max_cols=max_cols,
            no_color=args.no_color,
        )
    except ConfigurationError as exc:
        raise SystemExit(str(exc)) from exc
    sys.stdout.write(text)


if __name__ == "__main__":
    main()
