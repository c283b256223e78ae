"""Background line-store rebuilds with latest-request-wins ordering."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from queue import Empty, Queue

from .lines import DocumentSource, LineStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RebuildRequest:
    """One document/width pair to render, stamped with its generation."""

    generation: int
    document: DocumentSource
    width: int


@dataclass(frozen=True)
class RebuildResult:
    """Completed rebuild from the background worker."""

    request: RebuildRequest
    store: LineStore

    @property
    def generation(self) -> int:
        return self.request.generation


class LineStoreRebuilder:
    """Single-worker rebuild scheduler.

    Pending requests collapse to the most recent one, so a burst of resize
    events renders once. Results whose generation has been superseded by a
    newer request are dropped when drained.
    """

    def __init__(self, build_store: Callable[[DocumentSource, int, int], LineStore]) -> None:
        self._build_store = build_store
        self._lock = threading.Lock()
        self._pending: RebuildRequest | None = None
        self._running = False
        self._latest_generation = 0
        self._results: Queue[RebuildResult] = Queue()

    @property
    def latest_generation(self) -> int:
        with self._lock:
            return self._latest_generation

    def _worker(self) -> None:
        while True:
            with self._lock:
                request = self._pending
                self._pending = None
                if request is None:
                    self._running = False
                    return

            try:
                store = self._build_store(request.document, request.width, request.generation)
            except Exception:
                logger.exception("rebuild generation %d failed", request.generation)
                continue
            self._results.put(RebuildResult(request=request, store=store))

    def schedule(self, document: DocumentSource, width: int) -> int:
        """Queue (or replace the pending) rebuild and return its generation."""
        with self._lock:
            self._latest_generation += 1
            generation = self._latest_generation
            self._pending = RebuildRequest(generation=generation, document=document, width=width)
            if self._running:
                return generation
            self._running = True

        worker = threading.Thread(
            target=self._worker,
            name="wisereader-rebuild",
            daemon=True,
        )
        worker.start()
        return generation

    def drain_results(self) -> list[RebuildResult]:
        """Drain completed rebuilds, keeping only the latest requested generation."""
        latest = self.latest_generation
        out: list[RebuildResult] = []
        while True:
            try:
                result = self._results.get_nowait()
            except Empty:
                break
            if result.generation < latest:
                logger.debug("discarding superseded rebuild generation %d (latest %d)", result.generation, latest)
                continue
            out.append(result)
        return out


__all__ = [
    "LineStoreRebuilder",
    "RebuildRequest",
    "RebuildResult",
]
