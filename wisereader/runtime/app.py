"""View controller for the reader shell.

``ReaderApp`` owns the mutable ``AppState`` and translates key tokens into
API calls, session transitions and view changes. It never touches the
terminal directly; painting and input polling live in ``runtime.loop``.
"""

from __future__ import annotations

import logging
import threading
import webbrowser
from collections.abc import Callable

from ..api import Document, ReadwiseClient
from ..errors import ApiError
from ..reader import (
    LineStore,
    LineStoreRebuilder,
    Renderer,
    ReaderSession,
    apply_key,
    apply_rebuild,
    open_link_candidates,
    rebuild,
    reset,
    resize,
)
from .frames import body_height, body_width, list_height
from .state import (
    LIST_VIEW,
    MENU_ACTIONS,
    MENU_VIEW,
    OPEN_MENU_VIEW,
    READER_VIEW,
    AppState,
    open_menu_entries,
)

logger = logging.getLogger(__name__)

QUIT_KEYS = frozenset({"q", "CTRL_C"})
DOWN_KEYS = frozenset({"j", "DOWN"})
UP_KEYS = frozenset({"k", "UP"})


def run_in_thread(target: Callable[..., None], *args) -> None:
    threading.Thread(target=target, args=args, name="wisereader-background", daemon=True).start()


class ReaderApp:
    """Key dispatch and document lifecycle for every shell view."""

    def __init__(
        self,
        client: ReadwiseClient,
        renderer: Renderer,
        state: AppState,
        *,
        page_size: int | None = None,
        rebuilder: LineStoreRebuilder | None = None,
        open_url: Callable[[str], object] = webbrowser.open,
        run_background: Callable[..., None] = run_in_thread,
        redraw: Callable[[], None] | None = None,
    ) -> None:
        self.client = client
        self.renderer = renderer
        self.state = state
        self.page_size = page_size
        self.rebuilder = rebuilder or LineStoreRebuilder(self._build_store)
        self.open_url = open_url
        self.run_background = run_background
        self.redraw = redraw
        self.state.session = ReaderSession.create(body_height(state.rows), body_width(state.columns))

    # Background work ------------------------------------------------------

    def _build_store(self, document: Document, width: int, generation: int) -> LineStore:
        return rebuild(document, width, self.renderer, generation)

    def schedule_rebuild(self) -> int | None:
        document = self.state.document
        if document is None:
            return None
        return self.rebuilder.schedule(document, self.state.session.viewport.width)

    def poll_rebuilds(self) -> None:
        """Merge finished rebuilds that belong to the open document."""
        state = self.state
        for result in self.rebuilder.drain_results():
            document = state.document
            if document is None or result.store.document_id != document.id:
                logger.debug("ignoring rebuild for closed document %s", result.store.document_id)
                continue
            state.session = apply_rebuild(state.session, result.store)
            state.dirty = True

    def _mark_seen(self, document_id: str) -> None:
        try:
            self.client.update_location(document_id, "feed")
        except ApiError:
            logger.warning("could not mark document %s as seen", document_id, exc_info=True)

    # Geometry -------------------------------------------------------------

    def sync_geometry(self, rows: int, columns: int) -> None:
        """Adopt the terminal size; a new body width reflows the document."""
        state = self.state
        if rows == state.rows and columns == state.columns:
            return
        previous_width = state.session.viewport.width
        state.rows = rows
        state.columns = columns
        state.session = resize(state.session, body_height(rows), body_width(columns))
        self._follow_list_selection()
        if state.session.viewport.width != previous_width:
            self.schedule_rebuild()
        state.dirty = True

    def _follow_list_selection(self) -> None:
        state = self.state
        visible = list_height(state.rows)
        if state.selected_idx < state.list_start:
            state.list_start = state.selected_idx
        elif state.selected_idx >= state.list_start + visible:
            state.list_start = state.selected_idx - visible + 1
        state.list_start = max(0, min(state.list_start, max(0, len(state.documents) - visible)))

    # Loading helpers ------------------------------------------------------

    def _show_loading(self, message: str) -> None:
        self.state.loading_message = message
        self.state.dirty = True
        if self.redraw is not None:
            self.redraw()

    def _fail(self, message: str) -> None:
        self.state.loading_message = ""
        self.state.error_message = message
        self.state.dirty = True

    # Document lifecycle ---------------------------------------------------

    def refresh_documents(self) -> None:
        state = self.state
        self._show_loading("Loading your Inbox...")
        try:
            documents = self.client.list_documents(state.location, page_size=self.page_size)
        except ApiError as exc:
            self._fail(f"Failed to fetch documents: {exc}")
            return
        state.loading_message = ""
        state.documents = documents
        state.selected_idx = min(state.selected_idx, max(0, len(documents) - 1))
        self._follow_list_selection()
        state.dirty = True

    def open_document(self, index: int) -> None:
        state = self.state
        if not 0 <= index < len(state.documents):
            return
        summary = state.documents[index]
        self._show_loading("Fetching content...")
        try:
            document = self.client.fetch_document(summary.id)
        except ApiError as exc:
            self._fail(f"Failed to load document content: {exc}")
            return
        state.loading_message = ""
        state.document = document
        state.session = reset(state.session)
        state.view = READER_VIEW
        self.schedule_rebuild()
        self.run_background(self._mark_seen, document.id)
        state.dirty = True

    def close_document(self) -> None:
        state = self.state
        state.document = None
        state.session = reset(state.session)
        state.open_entries = []
        state.view = LIST_VIEW
        state.dirty = True

    def apply_action(self, action: str) -> None:
        """Move or delete the open document, then return to a fresh list."""
        document = self.state.document
        if document is None:
            return
        self._show_loading("Updating document...")
        try:
            if action == "delete":
                self.client.delete_document(document.id)
            else:
                self.client.update_location(document.id, action)
        except ApiError as exc:
            self._fail(f"Action failed: {exc}")
            return
        self.state.loading_message = ""
        self.close_document()
        self.refresh_documents()

    def open_links(self) -> None:
        state = self.state
        document = state.document
        if document is None:
            return
        links = open_link_candidates(state.session)
        if not links:
            if document.source_url:
                self.open_url(document.source_url)
            else:
                logger.debug("document %s has no source URL to open", document.id)
            return
        state.open_entries = open_menu_entries(document.source_url, links)
        state.menu_selected = 0
        state.view = OPEN_MENU_VIEW
        state.dirty = True

    # Key dispatch ---------------------------------------------------------

    def handle_key(self, key: str) -> None:
        state = self.state
        if state.error_message:
            self._handle_error_key(key)
        elif state.view == LIST_VIEW:
            self._handle_list_key(key)
        elif state.view == READER_VIEW:
            self._handle_reader_key(key)
        elif state.view == MENU_VIEW:
            self._handle_menu_key(key, len(MENU_ACTIONS), self._select_menu_action)
        elif state.view == OPEN_MENU_VIEW:
            self._handle_menu_key(key, len(state.open_entries), self._select_open_entry)

    def quit(self) -> None:
        self.state.running = False

    def _handle_error_key(self, key: str) -> None:
        if key in QUIT_KEYS:
            self.quit()
            return
        if key in {"ESC", "ENTER"}:
            self.state.error_message = ""
            self.close_document()

    def _handle_list_key(self, key: str) -> None:
        state = self.state
        if key in QUIT_KEYS:
            self.quit()
            return
        count = len(state.documents)
        if key in DOWN_KEYS and count:
            state.selected_idx = min(count - 1, state.selected_idx + 1)
        elif key in UP_KEYS and count:
            state.selected_idx = max(0, state.selected_idx - 1)
        elif key == "g":
            state.selected_idx = 0
        elif key == "G" and count:
            state.selected_idx = count - 1
        elif key == "ENTER":
            self.open_document(state.selected_idx)
            return
        elif key == "r":
            self.refresh_documents()
            return
        else:
            return
        self._follow_list_selection()
        state.dirty = True

    def _handle_reader_key(self, key: str) -> None:
        state = self.state
        session, handled = apply_key(state.session, key)
        if session != state.session:
            state.session = session
            state.dirty = True
        if handled:
            return
        if key in QUIT_KEYS:
            self.quit()
        elif key in {"ESC", "LEFT"}:
            self.close_document()
        elif key == "a":
            self.apply_action("archive")
        elif key == "M":
            state.menu_selected = 0
            state.view = MENU_VIEW
            state.dirty = True
        elif key == "O":
            self.open_links()

    def _handle_menu_key(self, key: str, count: int, select: Callable[[int], None]) -> None:
        state = self.state
        if key == "CTRL_C":
            self.quit()
        elif key in {"q", "ESC"}:
            state.view = READER_VIEW
            state.dirty = True
        elif key in DOWN_KEYS and count:
            state.menu_selected = min(count - 1, state.menu_selected + 1)
            state.dirty = True
        elif key in UP_KEYS and count:
            state.menu_selected = max(0, state.menu_selected - 1)
            state.dirty = True
        elif key == "ENTER" and count:
            select(state.menu_selected)

    def _select_menu_action(self, index: int) -> None:
        _label, action = MENU_ACTIONS[index]
        self.apply_action(action)

    def _select_open_entry(self, index: int) -> None:
        state = self.state
        entry = state.open_entries[index]
        state.view = READER_VIEW
        state.dirty = True
        if entry.url:
            self.open_url(entry.url)


__all__ = ["ReaderApp", "run_in_thread"]
