"""Rendering collaborator for marked regions.

``OverlayRenderer`` is the ``mark_region`` / ``clear_region`` implementation
the highlight manager drives; ``render_view_rows`` turns a view and its
overlays into terminal rows.
"""

from __future__ import annotations

from .overlays import Overlay, OverlayRenderer, RegionRenderer
from .rows import render_view_rows, visible_line_range
from .syntax import colorize_source, read_text

__all__ = [
    "Overlay",
    "OverlayRenderer",
    "RegionRenderer",
    "colorize_source",
    "read_text",
    "render_view_rows",
    "visible_line_range",
]
