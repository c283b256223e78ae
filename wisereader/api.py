"""Readwise Reader API client.

Thin synchronous wrapper over ``httpx`` for the four calls the reader needs:
list the inbox, fetch one document with its HTML, move a document, delete it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from .config import ReaderConfig
from .errors import ApiError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
MOVABLE_LOCATIONS = frozenset({"archive", "later", "feed"})
NO_CONTENT = "No content available."


@dataclass(frozen=True)
class Document:
    """Immutable snapshot of one Reader document."""

    id: str
    title: str = ""
    author: str = ""
    source_url: str = ""
    category: str = ""
    location: str = ""
    html_content: str | None = None
    summary: str | None = None
    updated_at: str = ""

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Document:
        def text(key: str) -> str:
            value = data.get(key)
            return value if isinstance(value, str) else ""

        def optional_text(key: str) -> str | None:
            value = data.get(key)
            return value if isinstance(value, str) else None

        return cls(
            id=str(data.get("id", "")),
            title=text("title"),
            author=text("author"),
            source_url=text("source_url"),
            category=text("category"),
            location=text("location"),
            html_content=optional_text("html_content"),
            summary=optional_text("summary"),
            updated_at=text("updated_at"),
        )

    @property
    def content(self) -> str:
        return self.html_content or NO_CONTENT

    @property
    def display_title(self) -> str:
        return self.title or "Untitled"


def _results(response: httpx.Response) -> list[dict[str, Any]]:
    try:
        payload = response.json()
    except ValueError as exc:
        raise ApiError(f"invalid JSON from {response.request.url}") from exc
    results = payload.get("results") if isinstance(payload, dict) else None
    if not isinstance(results, list):
        raise ApiError(f"unexpected response shape from {response.request.url}")
    return [item for item in results if isinstance(item, dict)]


class ReadwiseClient:
    """Client for the Readwise Reader v3 document API."""

    def __init__(
        self,
        config: ReaderConfig,
        *,
        transport: httpx.BaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._client = httpx.Client(
            base_url=config.base_url,
            headers={"Authorization": f"Token {config.token}"},
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> ReadwiseClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning("%s %s failed with HTTP %d", method, url, status)
            if status in {401, 403}:
                raise ApiError("Readwise rejected the access token", status_code=status) from exc
            raise ApiError(f"{method} {url} failed with HTTP {status}", status_code=status) from exc
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise ApiError(f"{method} {url} failed: {exc}") from exc
        return response

    def list_documents(self, location: str = "new", page_size: int | None = None) -> list[Document]:
        params: dict[str, Any] = {"location": location}
        if page_size is not None:
            params["page_size"] = page_size
        response = self._request("GET", "/list/", params=params)
        return [Document.from_json(item) for item in _results(response)]

    def fetch_document(self, document_id: str) -> Document:
        response = self._request("GET", "/list/", params={"id": document_id, "withHtmlContent": "true"})
        results = _results(response)
        if not results:
            raise ApiError(f"document {document_id} not found")
        return Document.from_json(results[0])

    def update_location(self, document_id: str, location: str) -> None:
        if location not in MOVABLE_LOCATIONS:
            raise ValueError(f"cannot move a document to {location!r}")
        self._request("PATCH", f"/update/{document_id}/", json={"location": location})

    def delete_document(self, document_id: str) -> None:
        self._request("DELETE", f"/delete/{document_id}/")
