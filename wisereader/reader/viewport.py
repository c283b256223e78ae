"""Scroll window that follows the cursor.

Vertical scrolling keeps the cursor near the middle row, re-centering only
once the cursor leaves the middle in a direction the view can still scroll.
Horizontal scrolling moves the minimum distance needed to show the cursor.
"""

from __future__ import annotations

from dataclasses import dataclass

from .cursor import CursorPosition


@dataclass(frozen=True)
class Viewport:
    """Visible window over the line store, in lines and visual columns."""

    top: int = 0
    left: int = 0
    height: int = 1
    width: int = 1

    def max_top(self, line_count: int) -> int:
        return max(0, line_count - self.height)

    def resized(self, height: int, width: int) -> Viewport:
        return Viewport(top=self.top, left=self.left, height=max(1, height), width=max(1, width))

    def clamped(self, line_count: int) -> Viewport:
        top = max(0, min(self.top, self.max_top(line_count)))
        left = max(0, self.left)
        if top == self.top and left == self.left:
            return self
        return Viewport(top=top, left=left, height=self.height, width=self.width)


def centered_top(cursor_line: int, height: int, line_count: int) -> int:
    """Scroll top that puts ``cursor_line`` on the middle row, clamped to range."""
    max_top = max(0, line_count - height)
    return max(0, min(cursor_line - height // 2, max_top))


def follow(cursor: CursorPosition, viewport: Viewport, line_count: int) -> Viewport:
    """Return the viewport adjusted so ``cursor`` stays visible."""
    height = max(1, viewport.height)
    width = max(1, viewport.width)
    max_top = max(0, line_count - height)
    top = max(0, min(viewport.top, max_top))
    half = height // 2

    row = cursor.line - top
    offscreen = row < 0 or row >= height
    below_middle = row > half and top < max_top
    above_middle = row < half and top > 0
    if offscreen or below_middle or above_middle:
        top = centered_top(cursor.line, height, line_count)

    left = max(0, viewport.left)
    if cursor.col >= left + width:
        left = cursor.col - width + 1
    elif cursor.col < left:
        left = max(0, cursor.col)

    return Viewport(top=top, left=left, height=height, width=width)
