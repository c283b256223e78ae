"""Styled lines and the per-document line store.

A ``LineStore`` is the complete, wrapped rendering of one document at one
width. It is rebuilt whole on every document or width change and stamped with
the generation of the request that produced it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

from ..ansi import build_screen_lines, strip_ansi

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StyledLine:
    """One display line with embedded escape sequences."""

    raw: str
    visual_length: int
    plain: str = field(default="", repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.plain and self.raw:
            object.__setattr__(self, "plain", strip_ansi(self.raw))

    @classmethod
    def from_raw(cls, raw: str) -> StyledLine:
        plain = strip_ansi(raw)
        return cls(raw=raw, visual_length=len(plain), plain=plain)


EMPTY_LINE = StyledLine(raw="", visual_length=0, plain="")


class Renderer(Protocol):
    """Turns document content into wrapped styled lines."""

    def render(self, content: str, width: int) -> list[StyledLine]: ...


class DocumentSource(Protocol):
    """Snapshot of a document as far as the line store is concerned."""

    id: str

    @property
    def content(self) -> str: ...


@dataclass(frozen=True)
class LineStore:
    """Immutable ordered lines for one document render."""

    lines: tuple[StyledLine, ...] = ()
    width: int = 0
    generation: int = 0
    document_id: str | None = None

    @classmethod
    def empty(cls) -> LineStore:
        return cls()

    @classmethod
    def from_raw_lines(
        cls,
        raw_lines: list[str],
        *,
        width: int = 0,
        generation: int = 0,
        document_id: str | None = None,
    ) -> LineStore:
        return cls(
            lines=tuple(StyledLine.from_raw(raw) for raw in raw_lines),
            width=width,
            generation=generation,
            document_id=document_id,
        )

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def last_line(self) -> int:
        return max(0, len(self.lines) - 1)

    def line(self, idx: int) -> StyledLine:
        if 0 <= idx < len(self.lines):
            return self.lines[idx]
        return EMPTY_LINE

    def plain(self, idx: int) -> str:
        return self.line(idx).plain

    def visual_length(self, idx: int) -> int:
        return self.line(idx).visual_length


def plain_fallback_lines(content: str, width: int) -> list[StyledLine]:
    """Render ``content`` as unstyled wrapped text, markup and escapes removed."""
    from ..render.html import html_to_plain_text

    text = html_to_plain_text(content)
    return [StyledLine.from_raw(raw) for raw in build_screen_lines(text, max(1, width))]


def rebuild(document: DocumentSource, width: int, renderer: Renderer, generation: int) -> LineStore:
    """Render ``document`` at ``width`` into a fresh store tagged ``generation``.

    Renderer failures degrade to :func:`plain_fallback_lines`; they are logged,
    never raised.
    """
    width = max(1, width)
    try:
        lines = renderer.render(document.content, width)
    except Exception:
        logger.warning("render failed for document %s; showing plain text", document.id, exc_info=True)
        lines = plain_fallback_lines(document.content, width)
    return LineStore(
        lines=tuple(lines),
        width=width,
        generation=generation,
        document_id=document.id,
    )
