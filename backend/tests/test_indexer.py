"""Tests for the offline index builder."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pytest

from catalog_qa.core.errors import ConfigurationError, EmbeddingFailure
from catalog_qa.ingest.embeddings import EmbeddingBatch, HashedEmbeddingModel
from catalog_qa.ingest.indexer import ChunkIndexer
from catalog_qa.models.entities import SourceDocument
from catalog_qa.retrieval.index_file import read_index, write_index


class _ShortBatchEmbedder:
    model_name = "short"

    def encode(self, texts: Sequence[str]) -> EmbeddingBatch:
        return EmbeddingBatch(vectors=[[1.0, 0.0]] * (len(texts) - 1), model=self.model_name, dim=2, backend="test")

    def embed_query(self, text: str) -> list[float]:
        return [1.0, 0.0]


class _DriftingEmbedder:
    model_name = "drifting"

    def __init__(self) -> None:
        self.calls = 0

    def encode(self, texts: Sequence[str]) -> EmbeddingBatch:
        self.calls += 1
        dim = 2 + self.calls
        return EmbeddingBatch(vectors=[[1.0] * dim for _ in texts], model=self.model_name, dim=dim, backend="test")

    def embed_query(self, text: str) -> list[float]:
        return [1.0, 1.0, 1.0]


def _documents() -> list[SourceDocument]:
    return [
        SourceDocument(name="DY-1201.pdf", raw_text="DY-1201 has 12 heads. " * 10),
        SourceDocument(name="blank.pdf", raw_text="   \n  "),
        SourceDocument(name="sequins.pdf", raw_text="Sequin device: 5 mm and 7 mm, up to 1200 rpm."),
    ]


def test_build_assigns_dense_ids_in_production_order() -> None:
    indexer = ChunkIndexer(HashedEmbeddingModel.get("hashed"), batch_size=3)
    index = indexer.build(_documents(), chunk_size=80, overlap=20)

    assert [entry.id for entry in index.entries] == list(range(index.size))
    assert index.metadata.sources == ["DY-1201.pdf", "sequins.pdf"]
    assert index.metadata.embedding_model_id == "hashed"
    assert (index.metadata.chunk_size, index.metadata.chunk_overlap) == (80, 20)

    first_source = [entry for entry in index.entries if entry.source_name == "DY-1201.pdf"]
    assert [entry.chunk_index for entry in first_source] == list(range(len(first_source)))
    assert index.entries[-1].source_name == "sequins.pdf"
    assert index.entries[-1].chunk_index == 0
    assert index.entries[-1].cleaned_text == "sequin device 5 mm 7 mm 1200 rpm"
    assert {len(entry.embedding) for entry in index.entries} == {384}


def test_build_without_any_text_is_a_configuration_error() -> None:
    indexer = ChunkIndexer(HashedEmbeddingModel.get("hashed"))
    with pytest.raises(ConfigurationError):
        indexer.build([SourceDocument(name="empty.pdf", raw_text="")], chunk_size=100, overlap=10)


def test_batch_count_mismatch_fails() -> None:
    indexer = ChunkIndexer(_ShortBatchEmbedder(), batch_size=4)
    with pytest.raises(EmbeddingFailure):
        indexer.build(_documents(), chunk_size=80, overlap=20)


def test_dimension_drift_across_batches_fails() -> None:
    indexer = ChunkIndexer(_DriftingEmbedder(), batch_size=1)
    with pytest.raises(EmbeddingFailure):
        indexer.build(_documents(), chunk_size=80, overlap=20)


def test_build_from_paths_skips_unusable_files(tmp_path: Path) -> None:
    (tmp_path / "specs.txt").write_text("DY-606 runs at 1000 rpm with 6 heads.", encoding="utf-8")
    (tmp_path / "notes.md").write_text("---\ntitle: Notes\n---\n# Cap frames\n\n270 cap frame fits DY-1201.", encoding="utf-8")
    (tmp_path / "prices.csv").write_text("model,price\nDY-606,1", encoding="utf-8")
    (tmp_path / "empty.txt").write_text("", encoding="utf-8")

    indexer = ChunkIndexer(HashedEmbeddingModel.get("hashed"))
    index = indexer.build_from_paths([tmp_path, tmp_path / "missing.txt"], chunk_size=200, overlap=20)

    assert index.metadata.sources == ["notes.md", "specs.txt"]
    texts = [entry.original_text for entry in index.entries]
    assert "title: Notes" not in " ".join(texts)
    assert any("270 cap frame" in text for text in texts)


def test_index_file_round_trip(tmp_path: Path) -> None:
    indexer = ChunkIndexer(HashedEmbeddingModel.get("hashed"))
    index = indexer.build(_documents(), chunk_size=80, overlap=20)
    path = write_index(index, tmp_path / "out" / "index.json")

    loaded = read_index(path)
    assert loaded.metadata == index.metadata
    assert loaded.entries == index.entries
