"""In-reader navigation engine.

Cursor and viewport model over rendered, ANSI-styled lines: word motions with
repeat counts, a scroll window that follows the cursor, link detection at the
cursor, and generation-stamped rebuilds of the line store.
"""

from __future__ import annotations

from .compositor import crop_line, highlight_line, slice_line
from .cursor import ORIGIN, CursorPosition, clamp_col, clamp_cursor
from .rebuild import LineStoreRebuilder, RebuildRequest, RebuildResult
from .lines import EMPTY_LINE, LineStore, Renderer, StyledLine, rebuild
from .links import Link, find_links, find_links_at
from .motions import MotionResult, is_word_char, resolve_motion_key, step
from .repeat import EMPTY_REPEAT, RepeatBuffer
from .session import (
    KeyOutcome,
    ReaderSession,
    apply_key,
    apply_rebuild,
    on_key,
    open_link_candidates,
    render_visible_lines,
    reset,
    resize,
)
from .viewport import Viewport, follow

__all__ = [
    "CursorPosition",
    "EMPTY_LINE",
    "EMPTY_REPEAT",
    "KeyOutcome",
    "LineStore",
    "LineStoreRebuilder",
    "Link",
    "MotionResult",
    "ORIGIN",
    "ReaderSession",
    "RebuildRequest",
    "RebuildResult",
    "Renderer",
    "RepeatBuffer",
    "StyledLine",
    "Viewport",
    "apply_key",
    "apply_rebuild",
    "clamp_col",
    "clamp_cursor",
    "crop_line",
    "find_links",
    "find_links_at",
    "follow",
    "highlight_line",
    "is_word_char",
    "on_key",
    "open_link_candidates",
    "rebuild",
    "render_visible_lines",
    "reset",
    "resize",
    "resolve_motion_key",
    "slice_line",
    "step",
]
