"""Document rendering: HTML or plain content to wrapped styled lines."""

from __future__ import annotations

from ..ansi import strip_ansi
from ..reader.lines import StyledLine
from ..ui_theme import DEFAULT_THEME, PLAIN_THEME, UITheme
from .highlight import DEFAULT_STYLE
from .html import HtmlRenderer, looks_like_html, render_plain_text


class DocumentRenderer:
    """Renderer for document content.

    ``render`` is pure for a given content/width pair, so it is safe to call
    from the background rebuild worker.
    """

    def __init__(self, style: str = DEFAULT_STYLE, no_color: bool = False, theme: UITheme = DEFAULT_THEME) -> None:
        self.style = style
        self.no_color = no_color
        self.theme = PLAIN_THEME if no_color else theme

    def render_raw(self, content: str, width: int) -> list[str]:
        if looks_like_html(content):
            lines = HtmlRenderer(width, style=self.style, theme=self.theme).render(content)
        else:
            lines = render_plain_text(content, width)
        if self.no_color:
            lines = [strip_ansi(line) for line in lines]
        return lines

    def render(self, content: str, width: int) -> list[StyledLine]:
        return [StyledLine.from_raw(raw) for raw in self.render_raw(content, max(1, width))]


__all__ = ["DocumentRenderer", "HtmlRenderer"]
