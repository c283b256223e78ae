from __future__ import annotations

import unittest
from unittest import mock

from wisereader.ansi import strip_ansi
from wisereader.render import highlight as highlight_mod
from wisereader.ui_theme import DEFAULT_THEME, PLAIN_THEME, normalize_theme_name, resolve_theme


class HighlightCodeTests(unittest.TestCase):
    def test_known_language_is_colored_and_text_preserved(self) -> None:
        lines = highlight_mod.highlight_code("def f():\n    return 1\n", "python")
        self.assertEqual([strip_ansi(line) for line in lines], ["def f():", "    return 1"])
        self.assertIn("\x1b[", lines[0])

    def test_unknown_language_falls_back_to_guessing(self) -> None:
        lines = highlight_mod.highlight_code("plain words", "no-such-language")
        self.assertEqual([strip_ansi(line) for line in lines], ["plain words"])

    def test_tabs_are_expanded(self) -> None:
        lines = highlight_mod.highlight_code("a\tb", "text")
        self.assertEqual(strip_ansi(lines[0]), "a       b")

    def test_pygments_failure_returns_plain_lines(self) -> None:
        with mock.patch.object(highlight_mod, "pygments_highlight", side_effect=RuntimeError("boom")):
            with self.assertLogs("wisereader.render.highlight", level="WARNING"):
                lines = highlight_mod.highlight_code("x = 1\ny", "python")
        self.assertEqual(lines, ["x = 1", "y"])

    def test_unknown_style_falls_back_to_default(self) -> None:
        self.assertEqual(highlight_mod.normalize_style("monokai"), "monokai")
        self.assertEqual(highlight_mod.normalize_style("definitely-not-a-style"), highlight_mod.DEFAULT_STYLE)

    def test_sanitize_escapes_control_bytes(self) -> None:
        self.assertEqual(highlight_mod.sanitize_terminal_text("a\x1b[2Jb\tc"), "a\\x1b[2Jb\tc")


class ThemeSelectionTests(unittest.TestCase):
    def test_no_color_forces_plain_theme(self) -> None:
        self.assertIs(resolve_theme("ocean", no_color=True), PLAIN_THEME)

    def test_unknown_theme_name_falls_back_to_default(self) -> None:
        self.assertEqual(normalize_theme_name("  OCEAN "), "ocean")
        self.assertEqual(normalize_theme_name("neon"), DEFAULT_THEME.name)
        self.assertIs(resolve_theme(None), DEFAULT_THEME)


if __name__ == "__main__":
    unittest.main()
