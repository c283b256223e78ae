"""ANSI-aware text measurement and line shaping utilities.

Provides stripping, slicing, highlighting, and wrapping that preserve escape
sequences. A visual column is one non-escape character; escape sequences are
never split and never count toward width.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from .errors import RenderFault

ANSI_ESCAPE_RE = re.compile(r"\x1b(?:\[[0-9;:?]*[ -/]*[@-~]|\][^\x07\x1b]*(?:\x07|\x1b\\))")
SGR_RESET = "\033[0m"
INVERSE_ON = "\033[7m"
INVERSE_OFF = "\033[27m"
HYPERLINK_CLOSE = "\033]8;;\033\\"
_EXTENDED_COLOR_PARAMS = {"38", "48", "58"}


def strip_ansi(text: str) -> str:
    """Return ``text`` with every escape sequence removed."""
    return ANSI_ESCAPE_RE.sub("", text)


def visual_length(text: str) -> int:
    """Return the number of visual columns in a styled string."""
    return len(strip_ansi(text))


def iter_ansi_tokens(text: str) -> Iterator[tuple[bool, str]]:
    """Yield ``(is_escape, chunk)`` pairs for a styled string.

    Text chunks are single characters. An ESC byte that does not start a
    well-formed CSI or OSC sequence raises :class:`RenderFault`.
    """
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match is None:
                raise RenderFault(f"malformed escape sequence at offset {i}")
            yield True, match.group(0)
            i = match.end()
            continue
        yield False, text[i]
        i += 1


def _last_reset_index(params: list[str]) -> int:
    """Return the index just past the last SGR reset parameter, or ``-1``.

    Extended color arguments (``38;5;n`` / ``38;2;r;g;b``) are skipped so a
    zero color component is not mistaken for a reset.
    """
    last = -1
    i = 0
    while i < len(params):
        param = params[i]
        if param in _EXTENDED_COLOR_PARAMS and i + 1 < len(params):
            mode = params[i + 1]
            i += 3 if mode == "5" else 5 if mode == "2" else 2
            continue
        if param.strip("0") == "":
            last = i + 1
        i += 1
    return last


class StyleState:
    """Style (SGR) and OSC 8 hyperlink state active at one point of a line."""

    __slots__ = ("sgr", "hyperlink")

    def __init__(self) -> None:
        self.sgr: list[str] = []
        self.hyperlink = ""

    def copy(self) -> StyleState:
        clone = StyleState()
        clone.sgr = list(self.sgr)
        clone.hyperlink = self.hyperlink
        return clone

    def apply(self, seq: str) -> None:
        """Fold one escape sequence into the state; non-style sequences are ignored."""
        if seq.startswith("\x1b]8;"):
            body = seq[2:]
            body = body[:-1] if body.endswith("\x07") else body[:-2]
            parts = body.split(";", 2)
            uri = parts[2] if len(parts) == 3 else ""
            self.hyperlink = seq if uri else ""
            return
        if not (seq.startswith("\x1b[") and seq.endswith("m")):
            return
        params = seq[2:-1].split(";")
        cut = _last_reset_index(params)
        if cut < 0:
            self.sgr.append(seq)
            return
        self.sgr.clear()
        rest = params[cut:]
        if rest:
            self.sgr.append(f"\x1b[{';'.join(rest)}m")

    @property
    def active(self) -> bool:
        return bool(self.sgr or self.hyperlink)

    def prefix(self) -> str:
        """Sequences that re-establish this state at the start of a fragment."""
        return self.hyperlink + "".join(self.sgr)

    def suffix(self) -> str:
        """Sequences that close this state at the end of a fragment."""
        out = SGR_RESET if self.sgr else ""
        if self.hyperlink:
            out += HYPERLINK_CLOSE
        return out


def slice_ansi_line(text: str, start: int, end: int | None = None) -> str:
    """Return the visual columns ``[start, end)`` of a styled line.

    Style that is active at ``start`` but was set earlier in the line is
    injected at the front, and still-active style is closed at the back, so the
    fragment renders exactly as it does in place. Escape sequences inside the
    range, and those trailing the last included character, are kept verbatim.
    """
    start = max(0, start)
    if end is not None and end <= start:
        return ""

    state = StyleState()
    out: list[str] = []
    col = 0
    shown = 0
    entered = False
    for is_escape, chunk in iter_ansi_tokens(text):
        if not is_escape and end is not None and col >= end:
            break
        if col < start:
            if is_escape:
                state.apply(chunk)
            else:
                col += 1
            continue
        if not entered:
            out.append(state.prefix())
            entered = True
        if is_escape:
            state.apply(chunk)
        else:
            col += 1
            shown += 1
        out.append(chunk)

    if not shown:
        return ""
    out.append(state.suffix())
    return "".join(out)


def crop_ansi_line(text: str, left: int, width: int) -> str:
    """Return a horizontal viewport of ``width`` columns starting at ``left``."""
    if width <= 0:
        return ""
    return slice_ansi_line(text, left, left + width)


def highlight_ansi_char(text: str, col: int) -> str:
    """Render the character at visual column ``col`` in inverse video.

    Everything else is copied unchanged. When ``col`` is past the end of the
    line a single inverted space is appended as the end-of-line marker.
    """
    col = max(0, col)
    out: list[str] = []
    current = 0
    done = False
    for is_escape, chunk in iter_ansi_tokens(text):
        if is_escape or done:
            out.append(chunk)
            continue
        if current == col:
            out.append(f"{INVERSE_ON}{chunk}{INVERSE_OFF}")
            done = True
        else:
            out.append(chunk)
        current += 1
    if not done:
        out.append(f"{INVERSE_ON} {INVERSE_OFF}")
    return "".join(out)


def wrap_ansi_line(text: str, width: int) -> list[str]:
    """Wrap a styled line into chunks that fit ``width`` visual columns.

    Breaks after the last space that fits; words longer than ``width`` are
    broken hard. A space that would start a continuation line is dropped.
    Each chunk is closed and the next one reopened with the active style, so
    every chunk renders correctly on its own.
    """
    if width <= 0 or not text:
        return [""]

    wrapped: list[str] = []
    state = StyleState()
    tokens: list[str] = []
    cols = 0
    break_at: int | None = None
    break_cols = 0
    break_state = state

    for is_escape, chunk in iter_ansi_tokens(text):
        if is_escape:
            state.apply(chunk)
            tokens.append(chunk)
            continue
        if cols >= width:
            if chunk == " ":
                wrapped.append("".join(tokens) + state.suffix())
                tokens = [state.prefix()]
                cols = 0
                break_at = None
                continue
            if break_at is not None and break_cols < cols:
                tail = tokens[break_at:]
                wrapped.append("".join(tokens[:break_at]) + break_state.suffix())
                tokens = [break_state.prefix(), *tail]
                cols -= break_cols
            else:
                wrapped.append("".join(tokens) + state.suffix())
                tokens = [state.prefix()]
                cols = 0
            break_at = None
        tokens.append(chunk)
        cols += 1
        if chunk == " ":
            break_at = len(tokens)
            break_cols = cols
            break_state = state.copy()

    wrapped.append("".join(tokens))
    return wrapped


def build_screen_lines(rendered: str, width: int) -> list[str]:
    """Split rendered output into display lines wrapped to ``width``."""
    lines = rendered.split("\n")
    if rendered.endswith("\n"):
        lines.pop()
    if not lines:
        return [""]
    out: list[str] = []
    for line in lines:
        out.extend(wrap_ansi_line(line.rstrip("\r"), width))
    return out
