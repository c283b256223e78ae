"""Motion engine behavior tests.

Covers word jumps across line boundaries, repeat counts, arrow aliases and
cursor clamping after every motion.
"""

from __future__ import annotations

import unittest

from wisereader.reader import CursorPosition, LineStore, RepeatBuffer, step
from wisereader.reader.cursor import clamp_col, clamp_cursor
from wisereader.reader.motions import is_word_char, resolve_motion_key, word_backward, word_forward


def _store(*lines: str) -> LineStore:
    return LineStore.from_raw_lines(list(lines), width=80, generation=1, document_id="doc")


def _press(store: LineStore, keys: str, cursor: CursorPosition | None = None) -> CursorPosition:
    cursor = cursor or CursorPosition()
    repeat = RepeatBuffer()
    for key in keys:
        result = step(key, cursor, repeat, store)
        cursor, repeat = result.cursor, result.repeat
    return cursor


class ClampTests(unittest.TestCase):
    def test_clamp_col_stays_within_line(self) -> None:
        for length in (0, 1, 5):
            for col in (-3, 0, 2, 4, 9):
                clamped = clamp_col(col, length)
                self.assertGreaterEqual(clamped, 0)
                self.assertLessEqual(clamped, max(0, length - 1))

    def test_clamp_cursor_on_empty_store_is_origin(self) -> None:
        self.assertEqual(clamp_cursor(CursorPosition(4, 7), LineStore.empty()), CursorPosition(0, 0))


class WordMotionTests(unittest.TestCase):
    def test_w_skips_word_and_separators(self) -> None:
        store = _store("foo-bar baz")
        self.assertEqual(_press(store, "w"), CursorPosition(0, 4))

    def test_b_returns_to_word_start(self) -> None:
        store = _store("foo-bar baz")
        self.assertEqual(_press(store, "b", CursorPosition(0, 4)), CursorPosition(0, 0))

    def test_w_wraps_to_first_word_of_next_line(self) -> None:
        store = _store("alpha", "  beta gamma")
        self.assertEqual(_press(store, "w"), CursorPosition(1, 2))

    def test_b_wraps_to_last_word_of_previous_line(self) -> None:
        store = _store("one two", "three")
        self.assertEqual(_press(store, "b", CursorPosition(1, 0)), CursorPosition(0, 4))

    def test_repeated_w_reaches_last_word_then_stops(self) -> None:
        store = _store("a b", "c d")
        cursor = CursorPosition()
        seen = []
        for _ in range(6):
            cursor = _press(store, "w", cursor)
            seen.append(cursor)
        self.assertEqual(seen[2], CursorPosition(1, 2))
        self.assertEqual(seen[-1], CursorPosition(1, 2))

    def test_w_after_g_is_idempotent(self) -> None:
        store = _store("first line", "final")
        end = _press(store, "Gw")
        self.assertEqual(end, CursorPosition(1, 0))
        self.assertEqual(_press(store, "w", end), end)

    def test_word_jumps_forfeit_remaining_count_at_boundaries(self) -> None:
        store = _store("one two")
        self.assertEqual(word_forward(CursorPosition(), store, 10), CursorPosition(0, 4))
        self.assertEqual(word_backward(CursorPosition(0, 4), store, 10), CursorPosition(0, 0))

    def test_unicode_letters_are_word_characters(self) -> None:
        self.assertTrue(is_word_char("é"))
        self.assertTrue(is_word_char("_"))
        self.assertFalse(is_word_char("-"))


class RepeatAndLineMotionTests(unittest.TestCase):
    def test_digits_prefix_motion_count(self) -> None:
        store = _store(*[f"line {idx}" for idx in range(10)])
        self.assertEqual(_press(store, "3j"), CursorPosition(3, 0))
        self.assertEqual(_press(store, "12j"), CursorPosition(9, 0))

    def test_zero_count_moves_once(self) -> None:
        store = _store("a", "b", "c")
        self.assertEqual(_press(store, "0j"), CursorPosition(1, 0))

    def test_non_motion_key_clears_pending_count(self) -> None:
        store = _store("a", "b", "c")
        result = step("x", CursorPosition(), RepeatBuffer("2"), store)
        self.assertFalse(result.handled)
        self.assertFalse(result.repeat.pending)

    def test_vertical_motion_clamps_column(self) -> None:
        store = _store("long line here", "ab")
        self.assertEqual(_press(store, "j", CursorPosition(0, 10)), CursorPosition(1, 1))

    def test_h_and_l_wrap_across_lines(self) -> None:
        store = _store("abc", "de")
        self.assertEqual(_press(store, "l", CursorPosition(0, 2)), CursorPosition(1, 0))
        self.assertEqual(_press(store, "h", CursorPosition(1, 0)), CursorPosition(0, 2))

    def test_h_and_l_stop_at_document_edges(self) -> None:
        store = _store("abc", "de")
        self.assertEqual(_press(store, "h"), CursorPosition(0, 0))
        self.assertEqual(_press(store, "l", CursorPosition(1, 1)), CursorPosition(1, 1))

    def test_h_count_past_column_zero_lands_on_previous_line_end(self) -> None:
        store = _store("abc", "x", "defg")
        self.assertEqual(_press(store, "5h", CursorPosition(2, 3)), CursorPosition(1, 0))

    def test_g_and_capital_g_jump_to_ends(self) -> None:
        store = _store("a", "b", "c")
        self.assertEqual(_press(store, "G"), CursorPosition(2, 0))
        self.assertEqual(_press(store, "g", CursorPosition(2, 0)), CursorPosition(0, 0))

    def test_arrow_tokens_alias_motions(self) -> None:
        self.assertEqual(resolve_motion_key("DOWN"), "j")
        self.assertEqual(resolve_motion_key("UP"), "k")
        self.assertEqual(resolve_motion_key("RIGHT"), "l")
        self.assertIsNone(resolve_motion_key("LEFT"))

    def test_motions_on_empty_store_stay_at_origin(self) -> None:
        result = step("j", CursorPosition(3, 3), RepeatBuffer(), LineStore.empty())
        self.assertTrue(result.handled)
        self.assertEqual(result.cursor, CursorPosition(0, 0))


if __name__ == "__main__":
    unittest.main()
