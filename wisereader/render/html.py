"""HTML to styled terminal lines.

Walks the parsed document with BeautifulSoup and emits ANSI-styled, wrapped
lines. Links and images are written as ``[label](url)`` so the reader can
find them again under the cursor.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

from ..ansi import strip_ansi, wrap_ansi_line
from ..ui_theme import DEFAULT_THEME, UITheme
from .highlight import DEFAULT_STYLE, highlight_code, sanitize_terminal_text

_HTML_TAG_RE = re.compile(r"<\s*[a-zA-Z][^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
_BLANK_RUN_RE = re.compile(r"\n{3,}")

BOLD_ON, BOLD_OFF = "\033[1m", "\033[22m"
ITALIC_ON, ITALIC_OFF = "\033[3m", "\033[23m"
UNDERLINE_ON, UNDERLINE_OFF = "\033[4m", "\033[24m"
STRIKE_ON, STRIKE_OFF = "\033[9m", "\033[29m"
FG_OFF = "\033[39m"

SKIPPED_TAGS = frozenset({"script", "style", "noscript", "head", "template", "svg", "iframe", "button", "form"})
HEADING_TAGS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}
BLOCK_TAGS = frozenset(
    {
        "address", "article", "aside", "blockquote", "body", "dd", "details", "div", "dl", "dt",
        "figcaption", "figure", "footer", "header", "hr", "html", "li", "main", "nav", "ol", "p",
        "pre", "section", "summary", "table", "tbody", "thead", "tfoot", "tr", "ul",
        *HEADING_TAGS,
    }
)
BULLET = "• "
QUOTE_GUTTER = "│ "
CODE_INDENT = "    "


def looks_like_html(content: str) -> bool:
    return _HTML_TAG_RE.search(content) is not None


def html_to_plain_text(content: str) -> str:
    """Markup-free text of ``content`` for the unstyled fallback path."""
    if looks_like_html(content):
        text = BeautifulSoup(content, "html.parser").get_text("\n")
    else:
        text = content
    text = sanitize_terminal_text(strip_ansi(text).replace("\x1b", "")).expandtabs()
    lines = [line.rstrip() for line in text.split("\n")]
    return _BLANK_RUN_RE.sub("\n\n", "\n".join(lines)).strip("\n")


class HtmlRenderer:
    """Render one HTML document to wrapped, styled lines at a fixed width."""

    def __init__(self, width: int, *, style: str = DEFAULT_STYLE, theme: UITheme = DEFAULT_THEME) -> None:
        self.width = max(1, width)
        self.style = style
        self.theme = theme

    def render(self, html: str) -> list[str]:
        soup = BeautifulSoup(html, "html.parser")
        lines = self._render_blocks(soup, self.width)
        while lines and not lines[-1]:
            lines.pop()
        return lines or [""]

    # Inline content ------------------------------------------------------

    def _inline(self, node) -> str:
        if isinstance(node, PreformattedString):
            return ""
        if isinstance(node, NavigableString):
            return _WHITESPACE_RE.sub(" ", sanitize_terminal_text(str(node)))
        if not isinstance(node, Tag) or node.name in SKIPPED_TAGS:
            return ""

        name = node.name
        if name == "br":
            return "\n"
        if name == "img":
            alt = _WHITESPACE_RE.sub(" ", node.get("alt", "")).strip() or "image"
            src = node.get("src", "")
            return self._link(alt, src) if src else alt
        if name == "a":
            label = _WHITESPACE_RE.sub(" ", node.get_text(" ")).strip()
            href = node.get("href", "").strip()
            if not href:
                return self._children_inline(node)
            return self._link(label or href, href)

        inner = self._children_inline(node)
        if name in {"strong", "b"}:
            return f"{BOLD_ON}{inner}{BOLD_OFF}"
        if name in {"em", "i", "cite"}:
            return f"{ITALIC_ON}{inner}{ITALIC_OFF}"
        if name == "u":
            return f"{UNDERLINE_ON}{inner}{UNDERLINE_OFF}"
        if name in {"s", "del", "strike"}:
            return f"{STRIKE_ON}{inner}{STRIKE_OFF}"
        if name in {"code", "kbd", "samp"}:
            return self._fg(self.theme.doc_code, inner)
        return inner

    def _children_inline(self, node: Tag) -> str:
        return "".join(self._inline(child) for child in node.children)

    def _fg(self, color: str, text: str) -> str:
        if not color:
            return text
        return f"{color}{text}{FG_OFF}"

    def _link(self, label: str, url: str) -> str:
        return self._fg(self.theme.doc_link, f"[{label}]({url})")

    # Block content -------------------------------------------------------

    def _wrap_paragraph(self, text: str, width: int) -> list[str]:
        out: list[str] = []
        for segment in text.split("\n"):
            segment = segment.strip(" ")
            if not strip_ansi(segment).strip():
                continue
            out.extend(wrap_ansi_line(segment, width))
        return out

    def _render_blocks(self, node: Tag, width: int) -> list[str]:
        """Render the children of ``node`` as blocks separated by blank lines."""
        blocks: list[list[str]] = []
        inline: list[str] = []

        def flush() -> None:
            if inline:
                para = self._wrap_paragraph("".join(inline), width)
                if para:
                    blocks.append(para)
                inline.clear()

        for child in node.children:
            if isinstance(child, Tag) and child.name in SKIPPED_TAGS:
                continue
            if isinstance(child, Tag) and child.name in BLOCK_TAGS:
                flush()
                block = self._render_block(child, width)
                if block:
                    blocks.append(block)
                continue
            inline.append(self._inline(child))
        flush()

        out: list[str] = []
        for block in blocks:
            if out:
                out.append("")
            out.extend(block)
        return out

    def _render_block(self, node: Tag, width: int) -> list[str]:
        name = node.name
        if name in HEADING_TAGS:
            return self._heading(node, HEADING_TAGS[name], width)
        if name in {"ul", "ol"}:
            return self._list(node, width, ordered=name == "ol")
        if name == "blockquote":
            return self._prefixed(self._render_blocks(node, max(1, width - len(QUOTE_GUTTER))), self._quote_gutter())
        if name == "pre":
            return self._code_block(node, width)
        if name == "hr":
            return [self._fg(self.theme.doc_quote, "─" * min(width, 40))]
        if name == "table":
            return self._table(node, width)
        if name == "figcaption":
            return self._wrap_paragraph(f"{ITALIC_ON}{self._children_inline(node).strip()}{ITALIC_OFF}", width)
        return self._render_blocks(node, width)

    def _heading(self, node: Tag, level: int, width: int) -> list[str]:
        text = self._children_inline(node).strip()
        marker = "#" * level
        return self._wrap_paragraph(f"{BOLD_ON}{self._fg(self.theme.doc_heading, f'{marker} {text}')}{BOLD_OFF}", width)

    def _quote_gutter(self) -> str:
        return self._fg(self.theme.doc_quote, QUOTE_GUTTER)

    def _prefixed(self, lines: list[str], prefix: str, rest_prefix: str | None = None) -> list[str]:
        rest = prefix if rest_prefix is None else rest_prefix
        return [f"{prefix if idx == 0 else rest}{line}" for idx, line in enumerate(lines)]

    def _list(self, node: Tag, width: int, *, ordered: bool) -> list[str]:
        out: list[str] = []
        try:
            number = int(node.get("start", 1))
        except (TypeError, ValueError):
            number = 1
        for item in node.find_all("li", recursive=False):
            marker = f"{number}. " if ordered else BULLET
            body = self._render_blocks(item, max(1, width - len(marker)))
            body = [line for line in body if line] or [""]
            out.extend(self._prefixed(body, marker, " " * len(marker)))
            number += 1
        return out

    def _code_block(self, node: Tag, width: int) -> list[str]:
        code_tag = node.find("code")
        language = _language_from_classes(code_tag) or _language_from_classes(node)
        source = node.get_text()
        inner_width = max(1, width - len(CODE_INDENT))
        out: list[str] = []
        for line in highlight_code(source, language, self.style):
            for chunk in wrap_ansi_line(line, inner_width):
                out.append(f"{CODE_INDENT}{chunk}")
        return out

    def _table(self, node: Tag, width: int) -> list[str]:
        out: list[str] = []
        for row in node.find_all("tr"):
            cells = [self._children_inline(cell).strip() for cell in row.find_all(["th", "td"], recursive=False)]
            if cells:
                out.extend(self._wrap_paragraph(" | ".join(cells), width))
        return out


def _language_from_classes(tag: Tag | None) -> str | None:
    if tag is None:
        return None
    for cls in tag.get("class", []) or []:
        for prefix in ("language-", "lang-"):
            if cls.startswith(prefix) and len(cls) > len(prefix):
                return cls[len(prefix):]
    return None


def render_plain_text(text: str, width: int) -> list[str]:
    """Wrap non-HTML content line by line."""
    text = sanitize_terminal_text(strip_ansi(text).replace("\x1b", "")).expandtabs()
    out: list[str] = []
    for line in text.split("\n"):
        out.extend(wrap_ansi_line(line.rstrip(), max(1, width)))
    while out and not out[-1]:
        out.pop()
    return out or [""]
