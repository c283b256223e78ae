"""Document renderer tests: HTML structure to wrapped terminal lines."""

from __future__ import annotations

import unittest

from wisereader.ansi import strip_ansi, visual_length
from wisereader.reader import find_links
from wisereader.render import DocumentRenderer
from wisereader.render.html import html_to_plain_text, looks_like_html, render_plain_text


def _plain(html: str, width: int = 60) -> list[str]:
    return [strip_ansi(line) for line in DocumentRenderer().render_raw(html, width)]


class HtmlStructureTests(unittest.TestCase):
    def test_heading_and_paragraph_are_separated_by_blank_line(self) -> None:
        self.assertEqual(_plain("<h1>Title</h1><p>Hello <b>world</b></p>"), ["# Title", "", "Hello world"])

    def test_heading_level_sets_marker(self) -> None:
        self.assertEqual(_plain("<h3>Deep</h3>"), ["### Deep"])

    def test_bold_and_heading_are_styled(self) -> None:
        raw = DocumentRenderer().render_raw("<h2>T</h2><p><b>x</b></p>", 40)
        self.assertIn("\x1b[1m", raw[0])
        self.assertIn("\x1b[1mx\x1b[22m", raw[2])

    def test_unordered_and_ordered_lists(self) -> None:
        self.assertEqual(_plain("<ul><li>one</li><li>two</li></ul>"), ["• one", "• two"])
        self.assertEqual(_plain('<ol start="3"><li>a</li><li>b</li></ol>'), ["3. a", "4. b"])

    def test_list_item_continuation_lines_are_indented(self) -> None:
        lines = _plain("<ul><li>alpha beta gamma</li></ul>", width=12)
        self.assertEqual(lines, ["• alpha beta", "  gamma"])

    def test_links_render_as_markdown_and_are_detectable(self) -> None:
        lines = _plain('<p>See <a href="http://x.com/a">the docs</a>.</p>')
        self.assertEqual(lines, ["See [the docs](http://x.com/a)."])
        self.assertEqual([link.url for link in find_links(lines[0])], ["http://x.com/a"])

    def test_images_render_alt_text_with_source(self) -> None:
        self.assertEqual(_plain('<p><img src="http://i.io/p.png" alt="chart"></p>'), ["[chart](http://i.io/p.png)"])

    def test_blockquote_gets_gutter(self) -> None:
        self.assertEqual(_plain("<blockquote><p>quoted</p></blockquote>"), ["│ quoted"])

    def test_horizontal_rule(self) -> None:
        self.assertEqual(_plain("<hr>", width=20), ["─" * 20])

    def test_table_rows_join_cells(self) -> None:
        html = "<table><tr><th>A</th><th>B</th></tr><tr><td>1</td><td>2</td></tr></table>"
        self.assertEqual(_plain(html), ["A | B", "1 | 2"])

    def test_scripts_and_styles_are_dropped(self) -> None:
        html = "<style>p{}</style><p>kept</p><script>bad()</script>"
        self.assertEqual(_plain(html), ["kept"])

    def test_code_block_is_indented_and_highlighted(self) -> None:
        raw = DocumentRenderer().render_raw('<pre><code class="language-python">x = 1\ny = 2</code></pre>', 40)
        self.assertEqual([strip_ansi(line) for line in raw], ["    x = 1", "    y = 2"])
        self.assertTrue(any("\x1b[" in line for line in raw))

    def test_control_bytes_are_neutralised(self) -> None:
        self.assertEqual(_plain("<p>bell\x07here</p>"), ["bell\\x07here"])

    def test_lines_fit_width(self) -> None:
        html = "<p>" + "wrap these words nicely " * 10 + "</p><ul><li>" + "item text " * 8 + "</li></ul>"
        for width in (8, 15, 33):
            for line in DocumentRenderer().render_raw(html, width):
                self.assertLessEqual(visual_length(line), width)


class RendererModeTests(unittest.TestCase):
    def test_no_color_strips_all_styling(self) -> None:
        raw = DocumentRenderer(no_color=True).render_raw('<h1>T</h1><p><a href="http://a.b">x</a></p>', 40)
        self.assertFalse(any("\x1b" in line for line in raw))

    def test_plain_text_content_is_wrapped_line_by_line(self) -> None:
        self.assertFalse(looks_like_html("just text\nmore"))
        self.assertEqual(render_plain_text("line one\n\nline two\n", 80), ["line one", "", "line two"])

    def test_render_returns_styled_lines(self) -> None:
        lines = DocumentRenderer().render("<p>Hi <i>there</i></p>", 40)
        self.assertEqual([line.plain for line in lines], ["Hi there"])
        self.assertEqual(lines[0].visual_length, 8)

    def test_html_to_plain_text_drops_markup(self) -> None:
        text = html_to_plain_text("<p>a <b>b</b></p>\n\n\n\n<p>c</p>")
        self.assertEqual(text.split(), ["a", "b", "c"])
        self.assertNotIn("<", text)
        self.assertNotIn("\n\n\n", text)


if __name__ == "__main__":
    unittest.main()
