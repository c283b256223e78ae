"""Reader session state machine.

A ``ReaderSession`` bundles the line store, cursor, viewport and repeat
buffer of the open document. Every transition is an explicit function that
returns the next session; nothing is recomputed behind the caller's back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from .compositor import crop_line, highlight_line
from .cursor import ORIGIN, CursorPosition, clamp_cursor
from .lines import LineStore
from .links import Link, find_links_at
from .motions import step
from .repeat import EMPTY_REPEAT, RepeatBuffer, is_digit_key
from .viewport import Viewport, follow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReaderSession:
    """Complete navigation state for the document being read."""

    store: LineStore = field(default_factory=LineStore.empty)
    cursor: CursorPosition = ORIGIN
    viewport: Viewport = field(default_factory=Viewport)
    repeat: RepeatBuffer = EMPTY_REPEAT

    @classmethod
    def create(cls, height: int, width: int) -> ReaderSession:
        return cls(viewport=Viewport(height=max(1, height), width=max(1, width)))

    @property
    def generation(self) -> int:
        return self.store.generation

    @property
    def line_count(self) -> int:
        return self.store.line_count


@dataclass(frozen=True)
class KeyOutcome:
    """Result of one key press, as handed to the surrounding UI."""

    session: ReaderSession
    handled: bool
    visible_lines: tuple[str, ...]

    @property
    def cursor(self) -> CursorPosition:
        return self.session.cursor

    @property
    def viewport(self) -> Viewport:
        return self.session.viewport


def apply_key(session: ReaderSession, key: str) -> tuple[ReaderSession, bool]:
    """Run one key through the motion engine and scroll follower.

    Returns the next session and whether the key was a digit or a motion.
    """
    result = step(key, session.cursor, session.repeat, session.store)
    if not result.handled or is_digit_key(key):
        return replace(session, repeat=result.repeat), result.handled
    viewport = follow(result.cursor, session.viewport, session.store.line_count)
    return replace(session, cursor=result.cursor, viewport=viewport, repeat=result.repeat), True


def render_visible_lines(session: ReaderSession) -> tuple[str, ...]:
    """Cropped display rows of the viewport with the cursor cell inverted."""
    store = session.store
    viewport = session.viewport
    cursor = session.cursor
    end = min(store.line_count, viewport.top + viewport.height)
    rows: list[str] = []
    for idx in range(viewport.top, end):
        line = store.line(idx)
        if idx == cursor.line:
            line = highlight_line(line, cursor.col)
        rows.append(crop_line(line, viewport.left, viewport.width).raw)
    return tuple(rows)


def on_key(session: ReaderSession, key: str) -> KeyOutcome:
    next_session, handled = apply_key(session, key)
    return KeyOutcome(
        session=next_session,
        handled=handled,
        visible_lines=render_visible_lines(next_session),
    )


def open_link_candidates(session: ReaderSession) -> list[Link]:
    """Links under the cursor; empty means the caller opens the source URL."""
    cursor = session.cursor
    return find_links_at(session.store.plain(cursor.line), cursor.col)


def apply_rebuild(session: ReaderSession, store: LineStore) -> ReaderSession:
    """Merge a finished rebuild into the session, newest generation wins.

    A store older than the one already applied is dropped. A store for a
    different document starts at the origin; a reflow of the same document
    keeps the cursor, clamped to the new lines.
    """
    if store.generation < session.store.generation:
        logger.debug(
            "dropping stale rebuild generation %d (current %d)",
            store.generation,
            session.store.generation,
        )
        return session

    if store.document_id != session.store.document_id:
        cursor = ORIGIN
        viewport = replace(session.viewport, top=0, left=0)
    else:
        cursor = clamp_cursor(session.cursor, store)
        viewport = session.viewport.clamped(store.line_count)
    viewport = follow(cursor, viewport, store.line_count)
    return replace(session, store=store, cursor=cursor, viewport=viewport)


def resize(session: ReaderSession, height: int, width: int) -> ReaderSession:
    """Adopt a new body size; the lines themselves are reflowed by a rebuild."""
    viewport = session.viewport.resized(height, width)
    if viewport == session.viewport:
        return session
    cursor = clamp_cursor(session.cursor, session.store)
    return replace(session, cursor=cursor, viewport=follow(cursor, viewport, session.store.line_count))


def reset(session: ReaderSession) -> ReaderSession:
    """Close the document, keeping the viewport size and the generation counter."""
    store = LineStore(generation=session.store.generation)
    viewport = Viewport(height=session.viewport.height, width=session.viewport.width)
    return ReaderSession(store=store, viewport=viewport)
