"""Tests for scoped picker augmentation and its guaranteed teardown."""

from __future__ import annotations

import unittest

from pointsearch.invocation import InterceptablePicker, Precedence, merge_options, with_preselect


class RecordingPicker:
    def __init__(self) -> None:
        self.calls: list[tuple[list[str], dict[str, object]]] = []

    def __call__(self, candidates, **options):
        self.calls.append((list(candidates), dict(options)))
        return candidates[0] if candidates else None


class MergeOptionsTests(unittest.TestCase):
    def test_injected_wins_by_default(self) -> None:
        merged = merge_options({"preselect": "caller", "prompt": "> "}, {"preselect": "injected"})
        self.assertEqual(merged, {"preselect": "injected", "prompt": "> "})

    def test_caller_can_win_when_requested(self) -> None:
        merged = merge_options({"preselect": "caller"}, {"preselect": "injected", "extra": 1}, Precedence.CALLER)
        self.assertEqual(merged, {"preselect": "caller", "extra": 1})


class WithPreselectTests(unittest.TestCase):
    def test_extra_options_reach_the_picker_during_body(self) -> None:
        recorder = RecordingPicker()
        picker = InterceptablePicker(recorder)

        result = with_preselect(picker, {"preselect": "a.py:3:"}, lambda: picker(["a.py:3:x"], prompt="rg> "))

        self.assertEqual(result, "a.py:3:x")
        self.assertEqual(recorder.calls[-1][1], {"prompt": "rg> ", "preselect": "a.py:3:"})
        self.assertEqual(picker.active_overlays, ())

    def test_precedence_decides_conflicting_keys(self) -> None:
        recorder = RecordingPicker()
        picker = InterceptablePicker(recorder)

        with_preselect(picker, {"preselect": "injected"}, lambda: picker(["x"], preselect="caller"))
        self.assertEqual(recorder.calls[-1][1]["preselect"], "injected")

        with_preselect(
            picker,
            {"preselect": "injected"},
            lambda: picker(["x"], preselect="caller"),
            Precedence.CALLER,
        )
        self.assertEqual(recorder.calls[-1][1]["preselect"], "caller")

    def test_overlay_is_removed_when_body_fails(self) -> None:
        recorder = RecordingPicker()
        picker = InterceptablePicker(recorder)

        def failing_body() -> None:
            picker(["x"])
            raise RuntimeError("provider blew up")

        with self.assertRaises(RuntimeError):
            with_preselect(picker, {"preselect": "stale:1:"}, failing_body)

        self.assertEqual(picker.active_overlays, ())
        picker(["y"], prompt="later> ")
        self.assertEqual(recorder.calls[-1][1], {"prompt": "later> "})

    def test_calls_outside_scope_are_untouched(self) -> None:
        recorder = RecordingPicker()
        picker = InterceptablePicker(recorder)
        picker(["x"])
        self.assertEqual(recorder.calls[-1][1], {})

    def test_nested_scopes_unwind_independently(self) -> None:
        recorder = RecordingPicker()
        picker = InterceptablePicker(recorder)

        with picker.augmented({"outer": 1}):
            with picker.augmented({"inner": 2}):
                picker(["x"])
                self.assertEqual(recorder.calls[-1][1], {"outer": 1, "inner": 2})
            picker(["x"])
            self.assertEqual(recorder.calls[-1][1], {"outer": 1})
        self.assertEqual(picker.active_overlays, ())

    def test_later_overlay_wins_over_earlier_one(self) -> None:
        recorder = RecordingPicker()
        picker = InterceptablePicker(recorder)

        with picker.augmented({"preselect": "outer"}), picker.augmented({"preselect": "inner"}):
            picker(["x"])
        self.assertEqual(recorder.calls[-1][1]["preselect"], "inner")


if __name__ == "__main__":
    unittest.main()
