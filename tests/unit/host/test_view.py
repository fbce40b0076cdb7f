"""Tests for view line arithmetic and cursor clamping."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from followview.host import View


class ViewLineTests(unittest.TestCase):
    def test_line_bounds_exclude_newline(self) -> None:
        view = View("v", text="alpha\nbeta\ngamma")
        self.assertEqual(view.line_bounds(0), (0, 5))
        self.assertEqual(view.line_bounds(7), (6, 10))
        self.assertEqual(view.line_bounds(len(view.text)), (11, 16))

    def test_line_bounds_on_newline_belongs_to_that_line(self) -> None:
        view = View("v", text="ab\ncd\n")
        self.assertEqual(view.line_bounds(2), (0, 2))
        self.assertEqual(view.line_bounds(6), (6, 6))

    def test_line_number_and_start_are_one_based(self) -> None:
        view = View("v", text="a\nbb\nccc\n")
        self.assertEqual(view.line_number(0), 1)
        self.assertEqual(view.line_number(2), 2)
        self.assertEqual(view.line_number(5), 3)
        self.assertEqual(view.line_start(3), 5)
        self.assertEqual(view.line_count(), 3)

    def test_line_start_clamps_out_of_range_lines(self) -> None:
        view = View("v", text="a\nb")
        self.assertEqual(view.line_start(0), 0)
        self.assertEqual(view.line_start(99), 2)

    def test_cursor_is_clamped(self) -> None:
        view = View("v", text="abc", cursor=40)
        self.assertEqual(view.cursor, 3)
        self.assertEqual(view.set_cursor(-4), 0)

    def test_move_lines_stays_inside_view(self) -> None:
        view = View("v", text="one\ntwo\nthree\n")
        view.move_lines(1)
        self.assertEqual(view.line_number(), 2)
        view.move_lines(10)
        self.assertEqual(view.line_number(), 3)
        view.move_lines(-10)
        self.assertEqual(view.cursor, 0)

    def test_line_cache_follows_text_changes(self) -> None:
        view = View("v", text="a\nb")
        self.assertEqual(view.line_count(), 2)
        view.set_text("a\nb\nc\nd")
        self.assertEqual(view.line_count(), 4)
        self.assertEqual(view.line_text(4), "d")

    def test_empty_view_has_one_empty_line(self) -> None:
        view = View("v")
        self.assertEqual(view.line_count(), 1)
        self.assertEqual(view.line_bounds(), (0, 0))

    def test_from_path_loads_text_and_resolves_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "hits.txt"
            path.write_text("x\ny\n", encoding="utf-8")
            view = View.from_path(path, kind="occurrences")
            expected = path.resolve()
        self.assertEqual(view.text, "x\ny\n")
        self.assertEqual(view.kind, "occurrences")
        self.assertEqual(view.path, expected)
        self.assertEqual(view.name, str(expected))


if __name__ == "__main__":
    unittest.main()
