"""Test fixtures for Catalog QA."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Sequence

import pytest

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from catalog_qa.core.errors import GenerationFailure  # noqa: E402
from catalog_qa.ingest.embeddings import EmbeddingBatch  # noqa: E402
from catalog_qa.models.entities import Index, IndexEntry, IndexMetadata  # noqa: E402
from catalog_qa.retrieval.index_file import write_index  # noqa: E402

FAKE_VOCABULARY = ("speed", "heads", "sequin", "warranty")

CATALOG_TEXTS = (
    ("DY-1201.pdf", "DY-1201 runs at a maximum speed of 1200 rpm."),
    ("DY-1201.pdf", "DY-1201 has 12 heads with 15 needles each."),
    ("attachments.pdf", "The sequin device fits every multi head model."),
)


def _reset_dependencies() -> None:
    from catalog_qa.api import dependencies as deps
    from catalog_qa.core.config import get_settings
    from catalog_qa.ingest.embeddings import HashedEmbeddingModel

    deps.shutdown_dependencies()
    HashedEmbeddingModel._instances.clear()
    get_settings.cache_clear()
    deps.get_app_settings.cache_clear()
    deps._CLIENT = None
    deps._EMBEDDING_MODEL = None
    deps._GENERATOR = None
    deps._VECTOR_STORE = None
    deps._SESSION_STORE = None
    deps._ASK_SERVICE = None
    deps._WATCHER = None


@pytest.fixture(autouse=True)
def reset_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset global singletons and environment between tests."""
    monkeypatch.setenv("CATQA_CONFIG", str(tmp_path / "missing-config.yaml"))
    monkeypatch.setenv("CATQA_INDEX_PATH", str(tmp_path / "data" / "index.json"))
    monkeypatch.setenv("CATQA_WATCH_INDEX", "false")
    monkeypatch.setenv("CATQA_EMBEDDING_BACKEND", "hashed")
    for name in ("CATQA_API_KEY", "GOOGLE_API_KEY", "GEMINI_API_KEY", "GENAI_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    _reset_dependencies()
    yield
    _reset_dependencies()


class FakeEmbedder:
    """Keyword-presence vectors: one dimension per word of ``FAKE_VOCABULARY``."""

    model_name = "fake-embedder"

    def __init__(self) -> None:
        self.queries: list[str] = []

    def vector(self, text: str) -> list[float]:
        lowered = text.lower()
        return [1.0 if word in lowered else 0.0 for word in FAKE_VOCABULARY]

    def encode(self, texts: Sequence[str]) -> EmbeddingBatch:
        vectors = [self.vector(text) for text in texts]
        return EmbeddingBatch(vectors=vectors, model=self.model_name, dim=len(FAKE_VOCABULARY), backend="fake")

    def embed_query(self, text: str) -> list[float]:
        self.queries.append(text)
        return self.vector(text)


class FakeGenerator:
    def __init__(self, answer: str = "DY-1201 runs at 1200 rpm. It is the fastest model.") -> None:
        self.answer = answer
        self.prompts: list[str] = []
        self.error: GenerationFailure | None = None

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def fake_generator() -> FakeGenerator:
    return FakeGenerator()


def build_catalog_index(embedder: FakeEmbedder) -> Index:
    entries = []
    counters: dict[str, int] = {}
    for position, (source, text) in enumerate(CATALOG_TEXTS):
        chunk_index = counters.get(source, 0)
        counters[source] = chunk_index + 1
        entries.append(
            IndexEntry(
                id=position,
                source_name=source,
                chunk_index=chunk_index,
                original_text=text,
                cleaned_text=text.lower(),
                embedding=embedder.vector(text),
            )
        )
    metadata = IndexMetadata(
        created_at="2024-01-01T00:00:00.000Z",
        embedding_model_id=embedder.model_name,
        sources=list(counters),
        chunk_size=1200,
        chunk_overlap=200,
    )
    return Index(metadata=metadata, entries=entries)


@pytest.fixture
def catalog_index(fake_embedder: FakeEmbedder) -> Index:
    return build_catalog_index(fake_embedder)


@pytest.fixture
def index_path(tmp_path: Path, catalog_index: Index) -> Path:
    path = tmp_path / "data" / "index.json"
    write_index(catalog_index, path)
    return path
