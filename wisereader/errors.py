"""Exception types shared by the reader core and its collaborators."""

from __future__ import annotations


class WiseReaderError(Exception):
    """Base class for errors raised by wisereader."""


class RenderFault(WiseReaderError):
    """Styled text could not be rendered or composited.

    Never user-visible: callers fall back to the unstyled or original text.
    """


class ApiError(WiseReaderError):
    """A document API call failed (transport error or bad HTTP status)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConfigError(WiseReaderError):
    """Required configuration (such as the API token) is missing or invalid."""
