"""ANSI-aware clipping and line emphasis for rendered view rows.

Escape sequences are preserved and never count toward display width, so
colorized rows can be clipped and highlighted without breaking styles.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8
MARK_BG_SGR = "48;2;58;92;188"


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks consume no columns,
    and East Asian wide/fullwidth characters consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    Tabs are expanded into spaces so clipping aligns with rendered cells.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n and col < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch, col)
        if col + w > max_cols:
            break
        out.append(" " * w if ch == "\t" else ch)
        col += w
        i += 1

    return "".join(out)


def display_width(text: str) -> int:
    col = 0
    for ch in strip_ansi(text):
        col += char_display_width(ch, col)
    return col


def with_background(text: str, sgr: str = MARK_BG_SGR, pad_to: int = 0) -> str:
    """Paint ``text`` with a background color, re-applying it after each SGR reset.

    ``pad_to`` extends the colored area with spaces so the whole row reads as
    one highlighted band.
    """
    out: list[str] = [f"\033[{sgr}m"]
    idx = 0
    while idx < len(text):
        if text[idx] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, idx)
            if match is not None:
                seq = match.group(0)
                if seq.endswith("m"):
                    params = seq[2:-1]
                    out.append(f"\033[{params};{sgr}m" if params else f"\033[{sgr}m")
                else:
                    out.append(seq)
                idx = match.end()
                continue
        out.append(text[idx])
        idx += 1
    padding = pad_to - display_width(text)
    if padding > 0:
        out.append(" " * padding)
    out.append("\033[49m")
    return "".join(out)
