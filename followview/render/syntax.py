"""Source loading, sanitization, and Pygments syntax highlighting."""

from __future__ import annotations

import re
from pathlib import Path

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from ..config import DEFAULT_STYLE

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")

_FORMATTERS: dict[str, TerminalFormatter] = {}
_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()


def read_text(path: Path) -> str:
    """Read text using tolerant encoding fallback order.

    Attempts UTF-8, UTF-8 with BOM, then latin-1; as a final fallback decodes
    raw bytes with UTF-8 replacement semantics.
    """
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def _normalize_style(style: str) -> str:
    """Validate requested style name with cache-backed checks."""
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return DEFAULT_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        _INVALID_STYLES.add(style)
        return DEFAULT_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> TerminalFormatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = TerminalFormatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def colorize_source(source: str, path: Path | None, style: str = DEFAULT_STYLE) -> str:
    """Highlight ``source`` for a terminal, picking the lexer from ``path``.

    Unknown file types render through the plain text lexer. The result keeps
    the same line structure as ``source``.
    """
    lexer = TextLexer(stripnl=False)
    if path is not None:
        try:
            lexer = get_lexer_for_filename(path.name, source, stripnl=False)
        except ClassNotFound:
            pass
    formatter = _formatter_for_style(_normalize_style(style))
    rendered = highlight(sanitize_terminal_text(source), lexer, formatter)
    # Pygments always terminates output with a newline.
    if not source.endswith("\n") and rendered.endswith("\n"):
        rendered = rendered[:-1]
    return rendered
