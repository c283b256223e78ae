"""Cursor position in visual coordinates and its clamping rules."""

from __future__ import annotations

from dataclasses import dataclass

from .lines import LineStore


@dataclass(frozen=True)
class CursorPosition:
    """Zero-based ``(line, col)`` measured on style-stripped text."""

    line: int = 0
    col: int = 0


ORIGIN = CursorPosition()


def clamp_col(col: int, visual_length: int) -> int:
    """Clamp ``col`` into ``[0, max(0, visual_length - 1)]``."""
    return max(0, min(col, max(0, visual_length - 1)))


def clamp_line(line: int, line_count: int) -> int:
    return max(0, min(line, max(0, line_count - 1)))


def clamp_cursor(cursor: CursorPosition, store: LineStore) -> CursorPosition:
    """Return the nearest valid position for ``cursor`` within ``store``."""
    line = clamp_line(cursor.line, store.line_count)
    col = clamp_col(cursor.col, store.visual_length(line))
    if line == cursor.line and col == cursor.col:
        return cursor
    return CursorPosition(line=line, col=col)
