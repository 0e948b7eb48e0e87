"""Filesystem watcher that reloads the vector store when the index file changes."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable

from watchdog.events import FileSystemEvent, PatternMatchingEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from catalog_qa.retrieval.vector_store import ReloadReport, VectorStore

logger = logging.getLogger(__name__)

ReloadCallback = Callable[[], ReloadReport]


class IndexFileEventHandler(PatternMatchingEventHandler):
    """Trigger a reload on writes to (or atomic replacement of) the index file."""

    def __init__(self, path: Path, on_change: ReloadCallback) -> None:
        super().__init__(
            patterns=[str(path)],
            ignore_directories=True,
            case_sensitive=True,
        )
        self.path = path
        self.on_change = on_change

    def on_created(self, event: FileSystemEvent) -> None:  # pragma: no cover - requires filesystem
        self._fire(event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:  # pragma: no cover - requires filesystem
        self._fire(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:  # pragma: no cover - requires filesystem
        self._fire(event.dest_path)

    def _fire(self, changed: str | bytes) -> None:
        logger.info("Index file changed (%s); reloading", changed)
        self.on_change()


class IndexWatcher:
    """Thin wrapper around a watchdog observer bound to one ``VectorStore``."""

    def __init__(self, store: VectorStore, path: Path | None = None) -> None:
        target = path or store.path
        if target is None:
            raise ValueError("IndexWatcher needs an index path")
        self.store = store
        self.path = Path(target).expanduser().resolve()
        self._observer: BaseObserver | None = None
        self._lock = threading.Lock()
        self._started = False

    @property
    def is_running(self) -> bool:
        return self._started

    def handler(self) -> IndexFileEventHandler:
        return IndexFileEventHandler(self.path, self.store.reload)

    def start(self) -> None:
        with self._lock:
            if self._started:
                return
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._observer = Observer()
            self._observer.schedule(self.handler(), str(self.path.parent), recursive=False)
            self._observer.start()
            self._started = True
            logger.info("Watching %s for changes", self.path)

    def stop(self) -> None:
        with self._lock:
            if not self._started or self._observer is None:
                return
            self._observer.stop()
            self._observer.join(timeout=5)
            self._observer = None
            self._started = False


__all__ = ["IndexFileEventHandler", "IndexWatcher", "ReloadCallback"]
