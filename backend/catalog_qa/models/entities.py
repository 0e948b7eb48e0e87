"""Internal dataclasses shared by the indexer, the stores and the query path."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

LanguageMode = Literal["plain", "mixed"]
Role = Literal["user", "assistant"]


@dataclass(slots=True, frozen=True)
class SourceDocument:
    name: str
    raw_text: str


@dataclass(slots=True, frozen=True)
class Chunk:
    source_name: str
    chunk_index: int
    original_text: str
    start: int = 0


@dataclass(slots=True)
class IndexEntry:
    id: int
    source_name: str
    chunk_index: int
    original_text: str
    cleaned_text: str
    embedding: list[float]


@dataclass(slots=True)
class IndexMetadata:
    created_at: str
    embedding_model_id: str
    sources: list[str]
    chunk_size: int
    chunk_overlap: int


@dataclass(slots=True)
class Index:
    """A full vector index: metadata plus entries with dense ids."""

    metadata: IndexMetadata
    entries: list[IndexEntry]

    @property
    def size(self) -> int:
        return len(self.entries)

    @property
    def dim(self) -> int | None:
        return len(self.entries[0].embedding) if self.entries else None


@dataclass(slots=True, frozen=True)
class ScoredEntry:
    entry: IndexEntry
    score: float


@dataclass(slots=True, frozen=True)
class RetrievalResult:
    """Ranked hits, or the low-confidence outcome which never carries hits."""

    hits: tuple[ScoredEntry, ...] = ()
    outcome: Literal["ok", "low_confidence"] = "ok"
    top_score: float | None = None

    @classmethod
    def low_confidence(cls, top_score: float | None = None) -> "RetrievalResult":
        return cls(hits=(), outcome="low_confidence", top_score=top_score)

    @property
    def is_low_confidence(self) -> bool:
        return self.outcome == "low_confidence"


@dataclass(slots=True, frozen=True)
class Turn:
    role: Role
    content: str
    timestamp: int


@dataclass(slots=True)
class Session:
    id: str
    created_at: int
    last_seen: int
    hit_count: int = 0
    history: list[Turn] = field(default_factory=list)


__all__ = [
    "LanguageMode",
    "Role",
    "SourceDocument",
    "Chunk",
    "IndexEntry",
    "IndexMetadata",
    "Index",
    "ScoredEntry",
    "RetrievalResult",
    "Turn",
    "Session",
]
