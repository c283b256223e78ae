"""Log file setup.

The reader owns the whole terminal while it runs, so log records go to a
file instead of stderr.
"""

from __future__ import annotations

import logging
from pathlib import Path

from platformdirs import user_log_dir

from .config import APP_NAME

DEFAULT_LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / "wisereader.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(path: Path | None = None, debug: bool = False) -> Path | None:
    """Attach a file handler to the ``wisereader`` logger.

    Returns the log path in use, or ``None`` when the file cannot be opened
    (logging then stays silent rather than writing over the TUI).
    """
    target = path or DEFAULT_LOG_PATH
    root = logging.getLogger(APP_NAME)
    root.setLevel(logging.DEBUG if debug else logging.WARNING)
    root.propagate = False
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(target, encoding="utf-8")
    except OSError:
        root.addHandler(logging.NullHandler())
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    return target
