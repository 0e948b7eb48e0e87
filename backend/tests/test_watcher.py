"""Tests for the index file watcher."""

from __future__ import annotations

from pathlib import Path

from watchdog.events import FileModifiedEvent

from catalog_qa.ingest.watcher import IndexWatcher
from catalog_qa.retrieval import VectorStore


def test_handler_reloads_store(index_path: Path) -> None:
    store = VectorStore(path=index_path)
    watcher = IndexWatcher(store)
    assert not store.is_ready

    watcher.handler().on_modified(FileModifiedEvent(str(index_path)))

    assert store.size == 3


def test_watcher_can_restart(index_path: Path) -> None:
    watcher = IndexWatcher(VectorStore(path=index_path))
    watcher.start()
    watcher.start()
    assert watcher.is_running
    watcher.stop()
    assert not watcher.is_running
    watcher.start()
    assert watcher.is_running
    watcher.stop()
