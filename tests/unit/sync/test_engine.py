"""Tests for the pre/post command resolve-and-highlight cycle.

Each case drives ``SyncEngine`` directly with a hand-built frame, session and
recording renderer, so focus, marks and notices can be asserted per step.
"""

from __future__ import annotations

import unittest

from followview.errors import ResolutionFailure
from followview.host import POST_COMMAND, PRE_COMMAND, Frame, View
from followview.render import OverlayRenderer
from followview.sync import (
    OUTPUT_SLOT,
    SOURCE_SLOT,
    HighlightManager,
    Matched,
    NoMatch,
    Outcome,
    Phase,
    ResolverRegistry,
    Session,
    SourceLocation,
    SyncEngine,
    SyncToggle,
    ambient_resolver,
)

SOURCE_TEXT = "".join(f"line {n}\n" for n in range(1, 11))
OUTPUT_TEXT = "3 matches\nhit a\nhit b\nhit c\n"


class RecordingRenderer(OverlayRenderer):
    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple] = []

    def mark_region(self, view, begin, end):
        self.calls.append(("mark", view.name, begin, end))
        return super().mark_region(view, begin, end)

    def clear_region(self, handle) -> None:
        self.calls.append(("clear", handle.view.name))
        super().clear_region(handle)


class SyncEngineTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.frame = Frame()
        self.source = self.frame.add_view(View("source.py", text=SOURCE_TEXT))
        self.output = self.frame.add_view(View("*occurrences*", text=OUTPUT_TEXT, kind="occurrences"), select=True)
        self.renderer = RecordingRenderer()
        self.highlights = HighlightManager(self.renderer, notices=self.frame.notices)
        self.registry = ResolverRegistry()
        self.engine = SyncEngine(self.frame, self.registry, self.highlights)
        self.session = Session(view=self.output, kind="occurrences", toggle=SyncToggle())

    def _use(self, resolver) -> None:
        self.registry.register("occurrences", resolver)

    def _cycle(self) -> Outcome | None:
        self.engine.pre_command(self.session)
        return self.engine.post_command(self.session)

    def _to_source_line(self, line: int):
        return lambda _context: Matched(SourceLocation.at_line(self.source, line))


class PreCommandTests(SyncEngineTestCase):
    def test_pre_command_clears_both_slots_from_any_state(self) -> None:
        self.highlights.mark(SOURCE_SLOT, self.source, 0, 6)
        self.highlights.mark(OUTPUT_SLOT, self.output, 10, 15)

        self.engine.pre_command(self.session)

        self.assertEqual(self.highlights.marks.attached(), [])
        self.assertIs(self.session.phase, Phase.RESOLVING)

    def test_pre_command_on_clean_state_still_enters_resolving(self) -> None:
        self.engine.pre_command(self.session)
        self.assertIs(self.session.phase, Phase.RESOLVING)
        self.assertEqual(self.renderer.calls, [])

    def test_pre_command_skipped_while_disabled(self) -> None:
        self.highlights.mark(SOURCE_SLOT, self.source, 0, 6)
        self.session.toggle.enabled = False

        self.engine.pre_command(self.session)

        self.assertTrue(self.highlights.marks[SOURCE_SLOT].attached)
        self.assertIs(self.session.phase, Phase.IDLE)


class PostCommandMatchTests(SyncEngineTestCase):
    def test_success_marks_source_line_and_output_line(self) -> None:
        self._use(self._to_source_line(3))
        self.output.goto_line(2)

        outcome = self._cycle()

        self.assertIs(outcome, Outcome.MATCHED)
        source_mark = self.highlights.marks[SOURCE_SLOT]
        self.assertIs(source_mark.view, self.source)
        self.assertEqual(source_mark.range, (14, 20))
        self.assertEqual(SOURCE_TEXT[14:20], "line 3")
        output_mark = self.highlights.marks[OUTPUT_SLOT]
        self.assertIs(output_mark.view, self.output)
        self.assertEqual(OUTPUT_TEXT[output_mark.begin : output_mark.end], "hit a")
        self.assertIs(self.frame.selected, self.output)
        self.assertEqual(self.source.line_number(), 3)
        self.assertIs(self.session.last_outcome, Outcome.MATCHED)
        self.assertIs(self.session.phase, Phase.IDLE)

    def test_cursor_at_view_start_skips_output_mark(self) -> None:
        self._use(self._to_source_line(1))

        self._cycle()

        self.assertTrue(self.highlights.marks[SOURCE_SLOT].attached)
        self.assertFalse(self.highlights.marks[OUTPUT_SLOT].attached)

    def test_height_hint_resizes_output_view(self) -> None:
        self._use(self._to_source_line(2))
        self.session.height = 4
        self.output.goto_line(3)

        self._cycle()

        self.assertEqual(self.output.height, 4)
        self.assertIsNone(self.source.height)

    def test_bare_location_counts_as_match(self) -> None:
        self._use(lambda _context: SourceLocation.at_line(self.source, 7))
        self.output.goto_line(4)

        self.assertIs(self._cycle(), Outcome.MATCHED)
        self.assertEqual(self.highlights.marks[SOURCE_SLOT].range, self.source.line_bounds())

    def test_resolver_receives_cursor_context(self) -> None:
        seen: list[tuple[str, int, str]] = []

        def resolver(context):
            seen.append((context.view.name, context.line, context.line_text))
            return NoMatch()

        self._use(resolver)
        self.output.goto_line(3)

        self._cycle()

        self.assertEqual(seen, [("*occurrences*", 3, "hit b")])

    def test_ambient_resolver_reads_focus_it_moved(self) -> None:
        def goto_hit() -> None:
            self.frame.select(self.source)
            self.source.goto_line(5)

        self._use(ambient_resolver(goto_hit))
        self.output.goto_line(2)

        self.assertIs(self._cycle(), Outcome.MATCHED)
        begin, end = self.highlights.marks[SOURCE_SLOT].range
        self.assertEqual(SOURCE_TEXT[begin:end], "line 5")
        self.assertIs(self.frame.selected, self.output)


class PostCommandFailureTests(SyncEngineTestCase):
    def test_raising_resolver_marks_neither_and_restores_focus(self) -> None:
        def partial_then_fail(_context):
            self.frame.select(self.source)
            self.source.goto_line(9)
            raise ResolutionFailure("No hit on this line")

        self._use(partial_then_fail)
        self.highlights.mark(SOURCE_SLOT, self.source, 0, 6)
        self.output.goto_line(2)

        outcome = self._cycle()

        self.assertIs(outcome, Outcome.UNMATCHED)
        self.assertEqual(self.highlights.marks.attached(), [])
        self.assertIs(self.frame.selected, self.output)
        self.assertEqual(self.frame.notices.current_text, "No hit on this line")

    def test_unexpected_exception_is_contained(self) -> None:
        def broken(_context):
            raise KeyError()

        self._use(broken)
        self.output.goto_line(2)

        self.assertIs(self._cycle(), Outcome.UNMATCHED)
        self.assertEqual(self.frame.notices.current_text, "No match")

    def test_no_match_reason_becomes_notice(self) -> None:
        self._use(lambda _context: NoMatch("Not on an error line"))
        self.output.goto_line(2)

        self._cycle()

        self.assertEqual(self.frame.notices.current_text, "Not on an error line")
        self.assertIs(self.session.last_outcome, Outcome.UNMATCHED)

    def test_none_result_is_no_match(self) -> None:
        self._use(lambda _context: None)
        self.assertIs(self._cycle(), Outcome.UNMATCHED)
        self.assertEqual(self.frame.notices.current_text, "No match")

    def test_ambient_resolver_that_stays_put_is_no_match(self) -> None:
        self._use(ambient_resolver(lambda: None))
        self.assertIs(self._cycle(), Outcome.UNMATCHED)

    def test_location_without_offset_is_no_match(self) -> None:
        self._use(lambda _context: SourceLocation(view=self.source, offset=None))
        self.output.goto_line(2)

        outcome = self._cycle()

        self.assertIs(outcome, Outcome.UNMATCHED)
        self.assertIs(self.session.last_outcome, Outcome.UNMATCHED)
        self.assertIs(self.frame.selected, self.output)
        self.assertEqual(self.highlights.marks.attached(), [])
        self.assertEqual(self.frame.notices.current_text, "Resolver returned a location without an offset")

    def test_failure_while_marking_match_restores_focus(self) -> None:
        class LockedView(View):
            def set_cursor(self, offset):
                raise RuntimeError("cursor is locked")

        locked = self.frame.add_view(LockedView("locked.py", text=SOURCE_TEXT))
        self._use(lambda _context: SourceLocation(view=locked, offset=3))
        self.output.goto_line(2)

        outcome = self._cycle()

        self.assertIs(outcome, Outcome.UNMATCHED)
        self.assertIs(self.frame.selected, self.output)
        self.assertEqual(self.highlights.marks.attached(), [])
        self.assertEqual(self.frame.notices.current_text, "cursor is locked")

    def test_malformed_location_through_key_press_ends_on_output(self) -> None:
        self.frame.add_hook(self.output, PRE_COMMAND, lambda: self.engine.pre_command(self.session))
        self.frame.add_hook(self.output, POST_COMMAND, lambda: self.engine.post_command(self.session))
        self._use(lambda _context: SourceLocation(view=self.source, offset=None))

        self.frame.press("DOWN")

        self.assertIs(self.frame.selected, self.output)
        self.assertIs(self.session.last_outcome, Outcome.UNMATCHED)


class PostCommandGuardTests(SyncEngineTestCase):
    def test_post_without_pre_is_rejected(self) -> None:
        calls: list[int] = []
        self._use(lambda _context: calls.append(1))

        with self.assertLogs("followview.sync.engine", level="WARNING"):
            outcome = self.engine.post_command(self.session)

        self.assertIsNone(outcome)
        self.assertEqual(calls, [])
        self.assertIn("post-command without pre-command", self.frame.notices.current_text)

    def test_disabled_post_command_does_nothing(self) -> None:
        calls: list[int] = []
        self._use(lambda _context: calls.append(1))
        self.engine.pre_command(self.session)
        self.session.toggle.enabled = False

        self.assertIsNone(self.engine.post_command(self.session))

        self.assertEqual(calls, [])
        self.assertIs(self.session.phase, Phase.IDLE)

    def test_missing_resolver_reported_once_and_session_stops(self) -> None:
        with self.assertLogs("followview.sync.engine", level="WARNING"):
            self.assertIsNone(self._cycle())
        self.assertFalse(self.session.active)
        self.assertIn("No follow resolver", self.frame.notices.current_text)
        notices_before = len(self.frame.notices.history)

        self.assertIsNone(self._cycle())

        self.assertEqual(len(self.frame.notices.history), notices_before)

    def test_override_is_used_even_with_registry_entry(self) -> None:
        self._use(lambda _context: NoMatch("registry"))
        self.session.override = self._to_source_line(4)
        self.output.goto_line(2)

        self.assertIs(self._cycle(), Outcome.MATCHED)
        self.assertEqual(self.source.line_number(), 4)


if __name__ == "__main__":
    unittest.main()
