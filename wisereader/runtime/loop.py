"""Main interactive event loop for the reader shell.

Each iteration adopts the terminal size, merges finished rebuilds, repaints
when dirty and dispatches at most one key. Feature logic lives in ``ReaderApp``.
"""

from __future__ import annotations

import shutil
import sys
import webbrowser

from ..api import ReadwiseClient
from ..config import ReaderConfig
from ..render import DocumentRenderer
from ..ui_theme import UITheme, resolve_theme
from .app import ReaderApp
from .frames import build_frame, write_frame
from .input import read_key
from .state import AppState
from .terminal import TerminalController

KEY_POLL_TIMEOUT_MS = 50
FALLBACK_TERMINAL_SIZE = (80, 24)


def run_main_loop(app: ReaderApp, terminal: TerminalController, stdin_fd: int, theme: UITheme) -> None:
    """Run the interactive loop until the app stops."""
    state = app.state

    def paint() -> None:
        write_frame(terminal.stdout_fd, build_frame(state, theme))
        state.dirty = False

    app.redraw = paint
    with terminal.raw_mode():
        app.refresh_documents()
        while state.running:
            term = shutil.get_terminal_size(FALLBACK_TERMINAL_SIZE)
            app.sync_geometry(term.lines, term.columns)
            app.poll_rebuilds()
            if state.dirty:
                paint()
            key = read_key(stdin_fd, timeout_ms=KEY_POLL_TIMEOUT_MS)
            if key:
                app.handle_key(key)


def run_app(
    config: ReaderConfig,
    *,
    location: str = "new",
    page_size: int | None = None,
    no_color: bool = False,
) -> None:
    """Open the Readwise client and run the full-screen reader."""
    theme = resolve_theme(config.theme, no_color=no_color)
    renderer = DocumentRenderer(style=config.style, no_color=no_color, theme=theme)
    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    terminal = TerminalController(stdin_fd, stdout_fd)
    term = shutil.get_terminal_size(FALLBACK_TERMINAL_SIZE)
    state = AppState(location=location, rows=term.lines, columns=term.columns)

    def open_url(url: str) -> None:
        with terminal.suspended():
            webbrowser.open(url)

    with ReadwiseClient(config) as client:
        app = ReaderApp(client, renderer, state, page_size=page_size, open_url=open_url)
        run_main_loop(app, terminal, stdin_fd, theme)
