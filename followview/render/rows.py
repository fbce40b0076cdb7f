"""Draw one view as terminal rows with its marked lines emphasized."""

from __future__ import annotations

from collections.abc import Iterable

from ..config import DEFAULT_STYLE
from ..host.view import View
from .ansi import clip_ansi_line, with_background
from .overlays import Overlay
from .syntax import colorize_source, sanitize_terminal_text


def _centered_scroll_start(target_line: int, max_start: int, visible_rows: int) -> int:
    """Compute a scroll start that keeps target near upper-middle viewport."""
    desired_start = max(0, target_line - max(1, visible_rows // 3))
    return max(0, min(desired_start, max_start))


def _split_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if len(lines) > 1 and lines[-1] == "":
        lines.pop()
    return lines


def visible_line_range(view: View, line_count: int) -> range:
    """0-based line indexes shown for ``view``, honoring its height."""
    if view.height is None or view.height >= line_count:
        return range(line_count)
    cursor_idx = min(line_count - 1, view.line_number() - 1)
    start = _centered_scroll_start(cursor_idx, line_count - view.height, view.height)
    return range(start, start + view.height)


def render_view_rows(
    view: View,
    overlays: Iterable[Overlay],
    max_cols: int = 80,
    *,
    no_color: bool = False,
    style: str = DEFAULT_STYLE,
    focused: bool = False,
) -> list[str]:
    """Render ``view`` into rows of at most ``max_cols`` display columns.

    Each row carries a gutter: a ``>`` on the focused cursor line, a ``*``
    on marked lines, then the line number. With color, marked rows also get
    a background band and views with a path are syntax highlighted.
    """
    plain_lines = _split_lines(view.text)
    shown_lines = [sanitize_terminal_text(line) for line in plain_lines]
    if not no_color and view.path is not None:
        colored = _split_lines(colorize_source(view.text, view.path, style))
        if len(colored) == len(plain_lines):
            shown_lines = colored

    overlays = list(overlays)
    number_width = len(str(len(plain_lines)))
    cursor_idx = view.line_number() - 1
    rows: list[str] = []
    for idx in visible_line_range(view, len(plain_lines)):
        line_begin = view.line_start(idx + 1)
        line_end = line_begin + len(plain_lines[idx])
        marked = any(overlay.touches_line(line_begin, line_end) for overlay in overlays)
        pointer = ">" if focused and idx == cursor_idx else " "
        prefix = f"{pointer}{'*' if marked else ' '}{idx + 1:>{number_width}} "
        body_cols = max(0, max_cols - len(prefix))
        body = clip_ansi_line(shown_lines[idx], body_cols)
        if marked and not no_color:
            body = with_background(body, pad_to=body_cols)
        row = clip_ansi_line(prefix, max_cols) + body
        if "\x1b" in row:
            row += "\033[0m"
        rows.append(row)
    return rows
