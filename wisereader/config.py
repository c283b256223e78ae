"""Persistent JSON config and the startup configuration value.

Stores the Readwise access token and UI preferences. Reads are defensive:
malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .errors import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "wisereader"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
TOKEN_ENV_VAR = "READWISE_TOKEN"
DEFAULT_BASE_URL = "https://readwise.io/api/v3"
TOKEN_HELP_URL = "https://readwise.io/access_token"


@dataclass(frozen=True)
class ReaderConfig:
    """Configuration resolved once at startup and handed to collaborators."""

    token: str
    base_url: str = DEFAULT_BASE_URL
    style: str = "monokai"
    theme: str | None = None


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError):
        logger.warning("ignoring unreadable config at %s", CONFIG_PATH, exc_info=True)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> bool:
    """Persist config data as pretty-printed JSON.

    Returns ``False`` (after logging) when the file cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError:
        logger.warning("could not write config to %s", CONFIG_PATH, exc_info=True)
        return False
    return True


def _load_string(key: str) -> str | None:
    value = load_config().get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def load_token() -> str | None:
    """Return the stored access token, or ``None`` when unset/invalid."""
    return _load_string("token")


def save_token(token: str) -> bool:
    """Persist the access token; blank tokens are rejected."""
    stripped = str(token).strip()
    if not stripped:
        raise ConfigError("token must not be empty")
    config = load_config()
    config["token"] = stripped
    return save_config(config)


def load_theme_name() -> str | None:
    """Load persisted UI theme name, returning ``None`` when unset/invalid."""
    return _load_string("theme")


def load_reader_config(
    environ: Mapping[str, str] | None = None,
    *,
    style: str | None = None,
    theme: str | None = None,
) -> ReaderConfig:
    """Resolve the startup configuration.

    The ``READWISE_TOKEN`` environment variable wins over the stored token.
    Raises :class:`ConfigError` when neither provides one.
    """
    env = os.environ if environ is None else environ
    token = (env.get(TOKEN_ENV_VAR) or "").strip() or load_token()
    if not token:
        raise ConfigError(
            f"No Readwise token configured. Run `wisereader config` or set {TOKEN_ENV_VAR} "
            f"(get a token at {TOKEN_HELP_URL})."
        )
    return ReaderConfig(
        token=token,
        style=style or _load_string("style") or "monokai",
        theme=theme or load_theme_name(),
    )
