"""Vim-style cursor motions over a line store.

Motions read the style-stripped text of each line, take a repeat count, and
return a cursor that is valid for the store they ran on. Word motions give up
their remaining jumps once they hit a document boundary.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .cursor import ORIGIN, CursorPosition, clamp_col, clamp_cursor, clamp_line
from .lines import LineStore
from .repeat import RepeatBuffer, is_digit_key

KEY_ALIASES: dict[str, str] = {
    "DOWN": "j",
    "UP": "k",
    "RIGHT": "l",
}


def is_word_char(ch: str) -> bool:
    """Word characters are letters, digits, and underscore."""
    return ch == "_" or ch.isalnum()


def _next_word_start(store: LineStore, cursor: CursorPosition) -> CursorPosition | None:
    """Start of the next word after ``cursor``, or ``None`` at end of document."""
    line = cursor.line
    text = store.plain(line)
    n = len(text)
    col = cursor.col
    if col < n - 1:
        if is_word_char(text[col]):
            while col < n and is_word_char(text[col]):
                col += 1
        while col < n and not is_word_char(text[col]):
            col += 1
        if col < n:
            return CursorPosition(line, col)

    if line >= store.line_count - 1:
        return None
    line += 1
    text = store.plain(line)
    col = 0
    while col < len(text) and not is_word_char(text[col]):
        col += 1
    return CursorPosition(line, clamp_col(col, len(text)))


def _prev_word_start(store: LineStore, cursor: CursorPosition) -> CursorPosition | None:
    """Start of the word before ``cursor``, or ``None`` at start of document."""
    line = cursor.line
    if cursor.col <= 0:
        if line <= 0:
            return None
        line -= 1
        text = store.plain(line)
        col = len(text) - 1
    else:
        text = store.plain(line)
        col = min(cursor.col, len(text)) - 1

    while col > 0 and not is_word_char(text[col]):
        col -= 1
    while col > 0 and is_word_char(text[col - 1]):
        col -= 1
    return CursorPosition(line, max(0, col))


def word_forward(cursor: CursorPosition, store: LineStore, count: int) -> CursorPosition:
    for _ in range(count):
        nxt = _next_word_start(store, cursor)
        if nxt is None:
            break
        cursor = nxt
    return cursor


def word_backward(cursor: CursorPosition, store: LineStore, count: int) -> CursorPosition:
    for _ in range(count):
        prev = _prev_word_start(store, cursor)
        if prev is None:
            break
        cursor = prev
    return cursor


def move_left(cursor: CursorPosition, store: LineStore, count: int) -> CursorPosition:
    target = cursor.col - count
    if target < 0 and cursor.line > 0:
        prev_line = cursor.line - 1
        prev_len = store.visual_length(prev_line)
        return CursorPosition(prev_line, clamp_col(prev_len - 1, prev_len))
    return CursorPosition(cursor.line, max(0, target))


def move_right(cursor: CursorPosition, store: LineStore, count: int) -> CursorPosition:
    line_len = store.visual_length(cursor.line)
    target = cursor.col + count
    if target >= line_len and cursor.line < store.line_count - 1:
        return CursorPosition(cursor.line + 1, 0)
    return CursorPosition(cursor.line, clamp_col(target, line_len))


def _move_to_line(cursor: CursorPosition, store: LineStore, line: int) -> CursorPosition:
    line = clamp_line(line, store.line_count)
    return CursorPosition(line, clamp_col(cursor.col, store.visual_length(line)))


def move_down(cursor: CursorPosition, store: LineStore, count: int) -> CursorPosition:
    return _move_to_line(cursor, store, cursor.line + count)


def move_up(cursor: CursorPosition, store: LineStore, count: int) -> CursorPosition:
    return _move_to_line(cursor, store, cursor.line - count)


def goto_first_line(cursor: CursorPosition, store: LineStore, _count: int) -> CursorPosition:
    return _move_to_line(cursor, store, 0)


def goto_last_line(cursor: CursorPosition, store: LineStore, _count: int) -> CursorPosition:
    return _move_to_line(cursor, store, store.last_line)


MotionFn = Callable[[CursorPosition, LineStore, int], CursorPosition]

MOTIONS: dict[str, MotionFn] = {
    "w": word_forward,
    "b": word_backward,
    "h": move_left,
    "l": move_right,
    "j": move_down,
    "k": move_up,
    "g": goto_first_line,
    "G": goto_last_line,
}


def resolve_motion_key(key: str) -> str | None:
    """Map a key token (including arrow aliases) to its motion name."""
    key = KEY_ALIASES.get(key, key)
    return key if key in MOTIONS else None


@dataclass(frozen=True)
class MotionResult:
    """Outcome of feeding one key to the motion engine."""

    cursor: CursorPosition
    repeat: RepeatBuffer
    handled: bool


def step(key: str, cursor: CursorPosition, repeat: RepeatBuffer, store: LineStore) -> MotionResult:
    """Feed one key to the motion engine.

    Digits accumulate into the repeat buffer. Any other key consumes and
    clears the buffer, whether or not it names a motion and whether or not
    the motion moved the cursor.
    """
    if is_digit_key(key):
        return MotionResult(cursor=cursor, repeat=repeat.push(key), handled=True)

    motion = resolve_motion_key(key)
    if motion is None:
        return MotionResult(cursor=cursor, repeat=repeat.cleared(), handled=False)
    if store.line_count == 0:
        return MotionResult(cursor=ORIGIN, repeat=repeat.cleared(), handled=True)

    start = clamp_cursor(cursor, store)
    moved = MOTIONS[motion](start, store, repeat.count)
    return MotionResult(cursor=clamp_cursor(moved, store), repeat=repeat.cleared(), handled=True)
