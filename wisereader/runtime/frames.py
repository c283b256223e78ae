"""Frame composition for each reader-shell view.

Builders are pure: they turn ``AppState`` into exactly ``state.rows`` display
rows, each cropped to the terminal width. ``write_frame`` paints them.
"""

from __future__ import annotations

import logging
import os

from ..ansi import SGR_RESET, crop_ansi_line, strip_ansi
from ..errors import RenderFault
from ..reader import render_visible_lines
from ..render.highlight import sanitize_terminal_text
from ..ui_theme import UITheme
from .state import LIST_VIEW, MENU_ACTIONS, MENU_VIEW, OPEN_MENU_VIEW, AppState

logger = logging.getLogger(__name__)

TITLE_LIMIT = 75
TITLE_KEEP = 72
BODY_MARGIN = "  "
READER_HINT = " [a] Archive | [M] Menu | [O] Open | [Esc] Back | [h/j/k/l/w/b] Move | [q] Quit"
LIST_HINT = " [j/k] Move | [Enter] Open | [r] Refresh | [q] Quit"
MENU_HINT = " [j/k] Move | [Enter] Select | [q/Esc] Cancel"


def body_height(rows: int) -> int:
    """Reader body rows: header, spacer, status and hint take the other four."""
    return max(5, rows - 4)


def body_width(columns: int) -> int:
    return max(10, columns - 4)


def list_height(rows: int) -> int:
    return max(3, rows - 4)


def clean_text(text: str) -> str:
    return " ".join(sanitize_terminal_text(text).split())


def truncate_title(title: str) -> str:
    title = clean_text(title) or "Untitled"
    if len(title) > TITLE_LIMIT:
        return title[:TITLE_KEEP] + "..."
    return title


def reading_percent(line: int, total: int) -> int:
    if total <= 0:
        return 0
    return min(100, int(((line + 1) * 100) / total + 0.5))


def status_text(state: AppState) -> str:
    session = state.session
    cursor = session.cursor
    total = session.line_count
    text = f" Ln {cursor.line + 1}/{total} ({reading_percent(cursor.line, total)}%) Col {cursor.col + 1} "
    if session.repeat.pending:
        text += f" {session.repeat.digits}"
    return text


def _crop_row(row: str, columns: int) -> str:
    """Crop one display row; rows with malformed escapes degrade to bare text."""
    try:
        return crop_ansi_line(row, 0, columns)
    except RenderFault:
        logger.debug("row with malformed escape shown unstyled: %r", row[:80])
        return strip_ansi(row).replace("\x1b", "")[: max(0, columns)]


def _fit(rows: list[str], state: AppState) -> list[str]:
    rows = rows[: state.rows]
    rows.extend([""] * (state.rows - len(rows)))
    return [_crop_row(row, state.columns) if row else "" for row in rows]


def _styled(color: str, text: str, theme: UITheme) -> str:
    if not color:
        return text
    return f"{color}{text}{theme.reset}"


def _selectable_rows(labels: list[str], selected: int, start: int, limit: int, theme: UITheme) -> list[str]:
    rows: list[str] = []
    for idx in range(start, min(len(labels), start + limit)):
        if idx == selected:
            rows.append(_styled(theme.list_selected, f"> {labels[idx]}", theme))
        else:
            rows.append(f"  {labels[idx]}")
    return rows


def build_list_frame(state: AppState, theme: UITheme) -> list[str]:
    header = _styled(theme.title_bar, " WiseReader Inbox ", theme)
    header += _styled(theme.title_author, f"  ({len(state.documents)} items)", theme)
    rows = [header, ""]
    body_rows = list_height(state.rows)
    if not state.documents:
        rows.append(_styled(theme.hint, "  Your inbox is empty!", theme))
        rows.extend([""] * (body_rows - 1))
    else:
        labels = [truncate_title(doc.title) for doc in state.documents]
        listed = _selectable_rows(labels, state.selected_idx, state.list_start, body_rows, theme)
        rows.extend(listed)
        rows.extend([""] * (body_rows - len(listed)))
    rows.append("")
    rows.append(_styled(theme.hint, LIST_HINT, theme))
    return _fit(rows, state)


def build_reader_frame(state: AppState, theme: UITheme) -> list[str]:
    document = state.document
    title = clean_text(document.display_title) if document is not None else ""
    author = clean_text(document.author) if document is not None else ""
    header = _styled(theme.title_bar, f" {title} ", theme)
    header += _styled(theme.title_author, f" by {author or 'Unknown'}", theme)
    rows = [header, ""]

    height = body_height(state.rows)
    session = state.session
    if document is None or session.store.document_id != document.id:
        body = [_styled(theme.loading, f"{BODY_MARGIN}Rendering...", theme)]
    else:
        body = [f"{BODY_MARGIN}{line}" for line in render_visible_lines(session)]
    rows.extend(body[:height])
    rows.extend([""] * (height - min(height, len(body))))

    rows.append(_styled(theme.status, status_text(state), theme))
    rows.append(_styled(theme.hint, READER_HINT, theme))
    return _fit(rows, state)


def build_menu_frame(state: AppState, theme: UITheme) -> list[str]:
    title = clean_text(state.document.display_title) if state.document is not None else ""
    rows = [_styled(theme.title_bar, f' Actions for "{title}" ', theme), ""]
    labels = [label for label, _action in MENU_ACTIONS]
    rows.extend(_selectable_rows(labels, state.menu_selected, 0, len(labels), theme))
    rows.append("")
    rows.append(_styled(theme.hint, MENU_HINT, theme))
    return _fit(rows, state)


def build_open_menu_frame(state: AppState, theme: UITheme) -> list[str]:
    rows = [_styled(theme.title_bar, " Open Link ", theme), ""]
    labels = [clean_text(entry.label) for entry in state.open_entries]
    limit = list_height(state.rows)
    start = max(0, min(state.menu_selected - limit + 1, len(labels) - limit))
    listed = _selectable_rows(labels, state.menu_selected, start, limit, theme)
    rows.extend(listed)
    rows.extend([""] * (limit - len(listed)))
    rows.append("")
    rows.append(_styled(theme.hint, MENU_HINT, theme))
    return _fit(rows, state)


def build_loading_frame(state: AppState, theme: UITheme) -> list[str]:
    return _fit([_styled(theme.loading, f" {state.loading_message}", theme)], state)


def build_error_frame(state: AppState, theme: UITheme) -> list[str]:
    rows = [
        _styled(theme.error, f" Error: {clean_text(state.error_message)}", theme),
        " Check your network connection and Readwise token.",
        _styled(theme.hint, " Press 'q' to quit, Esc to go back", theme),
    ]
    return _fit(rows, state)


def build_frame(state: AppState, theme: UITheme) -> list[str]:
    if state.error_message:
        return build_error_frame(state, theme)
    if state.loading_message:
        return build_loading_frame(state, theme)
    if state.view == LIST_VIEW:
        return build_list_frame(state, theme)
    if state.view == MENU_VIEW:
        return build_menu_frame(state, theme)
    if state.view == OPEN_MENU_VIEW:
        return build_open_menu_frame(state, theme)
    return build_reader_frame(state, theme)


def write_frame(fd: int, rows: list[str]) -> None:
    out: list[str] = ["\033[H\033[J"]
    for idx, row in enumerate(rows):
        out.append(row)
        if "\033" in row:
            out.append(SGR_RESET)
        if idx < len(rows) - 1:
            out.append("\r\n")
    os.write(fd, "".join(out).encode("utf-8", errors="replace"))
