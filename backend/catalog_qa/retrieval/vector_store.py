"""In-memory vector store with cosine search and a confidence gate."""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from catalog_qa.core.errors import CatalogQAError, ConfigurationError, ReloadFailure
from catalog_qa.core.logging import get_logger
from catalog_qa.core.metrics import INDEX_SIZE, RELOAD_COUNT
from catalog_qa.models.entities import Index, IndexMetadata, RetrievalResult, ScoredEntry
from catalog_qa.retrieval.index_file import read_index

logger = get_logger(__name__)

DEFAULT_MIN_SCORE = 0.18


@dataclass(slots=True, frozen=True)
class _Snapshot:
    index: Index
    norms: tuple[float, ...]


@dataclass(slots=True, frozen=True)
class ReloadReport:
    ok: bool
    vectors: int
    detail: str | None = None


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine over the shared prefix of ``a`` and ``b``; zero vectors score 0."""
    n = min(len(a), len(b))
    dot = na = nb = 0.0
    for i in range(n):
        x = a[i]
        y = b[i]
        dot += x * y
        na += x * x
        nb += y * y
    denom = math.sqrt(na) * math.sqrt(nb)
    if denom == 0:
        return 0.0
    return max(-1.0, min(1.0, dot / denom))


class VectorStore:
    """Owns the loaded index; readers see either the old or the new one, whole."""

    def __init__(
        self,
        path: Path | None = None,
        index: Index | None = None,
        min_score: float = DEFAULT_MIN_SCORE,
    ) -> None:
        self.path = path
        self.min_score = min_score
        self._lock = threading.Lock()
        self._snapshot: _Snapshot | None = _snapshot(index) if index is not None else None
        self._update_size_metric()

    @property
    def size(self) -> int:
        snapshot = self._snapshot
        return snapshot.index.size if snapshot else 0

    @property
    def is_ready(self) -> bool:
        return self.size > 0

    @property
    def metadata(self) -> IndexMetadata | None:
        snapshot = self._snapshot
        return snapshot.index.metadata if snapshot else None

    @property
    def index(self) -> Index | None:
        snapshot = self._snapshot
        return snapshot.index if snapshot else None

    def load(self, path: Path | None = None) -> Index:
        """Read ``path`` (or the configured path) and install it.

        Raises ``ConfigurationError`` if the file is absent or has no vectors.
        """
        target = path or self.path
        if target is None:
            raise ConfigurationError("No index path configured")
        index = read_index(target)
        self.path = target
        self._install(index)
        logger.info("Loaded %s vectors from %s", index.size, target)
        return index

    def reload(self) -> ReloadReport:
        """Re-read the index file; keep the current index unless the new one is usable."""
        try:
            if self.path is None:
                raise ReloadFailure("No index path configured")
            try:
                index = read_index(self.path)
            except CatalogQAError as exc:
                raise ReloadFailure(str(exc)) from exc
            except OSError as exc:
                raise ReloadFailure(f"Could not read {self.path}: {exc}") from exc
        except ReloadFailure as exc:
            RELOAD_COUNT.labels(status="failed").inc()
            logger.warning("Reload failed, keeping %s vectors: %s", self.size, exc)
            return ReloadReport(ok=False, vectors=self.size, detail=str(exc))
        self._install(index)
        RELOAD_COUNT.labels(status="ok").inc()
        logger.info("Reloaded %s vectors", index.size)
        return ReloadReport(ok=True, vectors=index.size)

    def search(self, query_embedding: Sequence[float], k: int) -> RetrievalResult:
        """Top ``k`` entries by cosine, or the low-confidence outcome."""
        if k <= 0:
            raise ValueError("k must be positive")
        snapshot = self._snapshot
        if snapshot is None or not snapshot.index.entries:
            return RetrievalResult.low_confidence()
        query_norm = math.sqrt(sum(value * value for value in query_embedding))
        scores = [
            _score(query_embedding, query_norm, entry.embedding, norm)
            for entry, norm in zip(snapshot.index.entries, snapshot.norms)
        ]
        # sorted() is stable with reverse=True: ties keep index order
        order = sorted(range(len(scores)), key=scores.__getitem__, reverse=True)
        top_score = scores[order[0]]
        if top_score < self.min_score:
            return RetrievalResult.low_confidence(top_score=top_score)
        hits = tuple(ScoredEntry(entry=snapshot.index.entries[i], score=scores[i]) for i in order[:k])
        return RetrievalResult(hits=hits, outcome="ok", top_score=top_score)

    def _install(self, index: Index) -> None:
        snapshot = _snapshot(index)
        with self._lock:
            self._snapshot = snapshot
        self._update_size_metric()

    def _update_size_metric(self) -> None:
        INDEX_SIZE.set(self.size)


def _snapshot(index: Index) -> _Snapshot:
    norms = tuple(math.sqrt(sum(value * value for value in entry.embedding)) for entry in index.entries)
    return _Snapshot(index=index, norms=norms)


def _score(query: Sequence[float], query_norm: float, vector: Sequence[float], norm: float) -> float:
    if len(query) != len(vector):
        return cosine_similarity(query, vector)
    denom = query_norm * norm
    if denom == 0:
        return 0.0
    dot = sum(x * y for x, y in zip(query, vector))
    return max(-1.0, min(1.0, dot / denom))


__all__ = ["DEFAULT_MIN_SCORE", "ReloadReport", "VectorStore", "cosine_similarity"]
