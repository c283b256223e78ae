"""Fault-tolerant slicing and highlighting of styled lines.

Wraps the raw string primitives in :mod:`wisereader.ansi`. Malformed escape
sequences never propagate: the untouched line is returned and the fault is
logged once.
"""

from __future__ import annotations

import logging

from ..ansi import highlight_ansi_char, slice_ansi_line
from ..errors import RenderFault
from .lines import StyledLine

logger = logging.getLogger(__name__)

_MAX_REPORTED_FAULTS = 256
_REPORTED_FAULTS: set[tuple[str, str, int]] = set()


def _report_fault(operation: str, line: StyledLine, exc: RenderFault) -> None:
    key = (operation, str(exc), hash(line.raw))
    if key in _REPORTED_FAULTS:
        return
    if len(_REPORTED_FAULTS) >= _MAX_REPORTED_FAULTS:
        _REPORTED_FAULTS.clear()
    _REPORTED_FAULTS.add(key)
    logger.warning("%s left line unmodified: %s (%r)", operation, exc, line.raw[:80])


def slice_line(line: StyledLine, start: int, end: int | None = None) -> StyledLine:
    """Visual columns ``[start, end)`` of ``line``, renderable on its own."""
    try:
        return StyledLine.from_raw(slice_ansi_line(line.raw, start, end))
    except RenderFault as exc:
        _report_fault("slice", line, exc)
        return line


def crop_line(line: StyledLine, left: int, width: int) -> StyledLine:
    """Horizontal viewport of ``width`` columns starting at ``left``."""
    if width <= 0:
        return StyledLine.from_raw("")
    return slice_line(line, left, left + width)


def highlight_line(line: StyledLine, col: int) -> StyledLine:
    """``line`` with the character at ``col`` inverted (or an inverted space appended)."""
    try:
        return StyledLine.from_raw(highlight_ansi_char(line.raw, col))
    except RenderFault as exc:
        _report_fault("highlight", line, exc)
        return line
