"""Tests for the background line-store rebuild scheduler."""

from __future__ import annotations

import threading
import time
import unittest
from types import SimpleNamespace

from wisereader.reader import LineStore, LineStoreRebuilder


def _wait_for_results(rebuilder: LineStoreRebuilder, *, expected_count: int, timeout_seconds: float = 1.0) -> list:
    deadline = time.monotonic() + timeout_seconds
    out: list = []
    while time.monotonic() < deadline:
        out.extend(rebuilder.drain_results())
        if len(out) >= expected_count:
            break
        time.sleep(0.01)
    return out


def _document(doc_id: str = "doc", content: str = "hello") -> SimpleNamespace:
    return SimpleNamespace(id=doc_id, content=content)


def _build_store(document, width: int, generation: int) -> LineStore:
    return LineStore.from_raw_lines(
        [f"{document.content}@{width}"],
        width=width,
        generation=generation,
        document_id=document.id,
    )


class LineStoreRebuilderTests(unittest.TestCase):
    def test_schedule_renders_in_background_and_stamps_generation(self) -> None:
        rebuilder = LineStoreRebuilder(_build_store)
        generation = rebuilder.schedule(_document(), 40)

        results = _wait_for_results(rebuilder, expected_count=1)
        self.assertEqual(generation, 1)
        self.assertEqual(len(results), 1)
        self.assertEqual(results[0].generation, 1)
        self.assertEqual(results[0].store.plain(0), "hello@40")
        self.assertEqual(results[0].store.document_id, "doc")

    def test_generations_increase_monotonically(self) -> None:
        rebuilder = LineStoreRebuilder(_build_store)
        generations = [rebuilder.schedule(_document(), width) for width in (10, 20, 30)]
        self.assertEqual(generations, [1, 2, 3])
        self.assertEqual(rebuilder.latest_generation, 3)

    def test_pending_requests_collapse_to_latest(self) -> None:
        widths: list[int] = []
        first_started = threading.Event()
        allow_first_finish = threading.Event()

        def build_store(document, width: int, generation: int) -> LineStore:
            if width == 10:
                first_started.set()
                allow_first_finish.wait(timeout=1.0)
            widths.append(width)
            return _build_store(document, width, generation)

        rebuilder = LineStoreRebuilder(build_store)
        rebuilder.schedule(_document(), 10)
        self.assertTrue(first_started.wait(timeout=1.0))
        rebuilder.schedule(_document(), 20)
        rebuilder.schedule(_document(), 30)
        allow_first_finish.set()

        results = _wait_for_results(rebuilder, expected_count=1)
        deadline = time.monotonic() + 1.0
        while len(widths) < 2 and time.monotonic() < deadline:
            time.sleep(0.01)
        self.assertEqual(widths, [10, 30])
        self.assertEqual([result.store.width for result in results], [30])
        self.assertEqual(results[0].generation, 3)

    def test_superseded_results_are_dropped_on_drain(self) -> None:
        release = threading.Event()
        started = threading.Event()

        def build_store(document, width: int, generation: int) -> LineStore:
            if generation == 1:
                started.set()
                release.wait(timeout=1.0)
            return _build_store(document, width, generation)

        rebuilder = LineStoreRebuilder(build_store)
        rebuilder.schedule(_document(), 10)
        self.assertTrue(started.wait(timeout=1.0))
        rebuilder.schedule(_document(), 20)
        release.set()

        results = _wait_for_results(rebuilder, expected_count=1)
        time.sleep(0.05)
        results.extend(rebuilder.drain_results())
        self.assertEqual([result.generation for result in results], [2])

    def test_failing_build_is_logged_and_worker_continues(self) -> None:
        def build_store(document, width: int, generation: int) -> LineStore:
            if generation == 1:
                raise RuntimeError("boom")
            return _build_store(document, width, generation)

        rebuilder = LineStoreRebuilder(build_store)
        with self.assertLogs("wisereader.reader.rebuild", level="ERROR"):
            rebuilder.schedule(_document(), 10)
            deadline = time.monotonic() + 1.0
            while rebuilder._running and time.monotonic() < deadline:
                time.sleep(0.01)

        rebuilder.schedule(_document(), 20)
        results = _wait_for_results(rebuilder, expected_count=1)
        self.assertEqual([result.generation for result in results], [2])


if __name__ == "__main__":
    unittest.main()
