"""Full-screen reader shell: terminal control, input, views and the main loop."""

from .app import ReaderApp
from .loop import run_app, run_main_loop
from .state import AppState

__all__ = ["AppState", "ReaderApp", "run_app", "run_main_loop"]
