"""Offline index builder: chunk, clean, embed, assign dense ids."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from catalog_qa.core.errors import ConfigurationError, EmbeddingFailure
from catalog_qa.ingest.chunker import chunk_document
from catalog_qa.ingest.embeddings import EmbeddingModel
from catalog_qa.ingest.loaders import LoaderRegistry
from catalog_qa.models.entities import Chunk, Index, IndexEntry, IndexMetadata, SourceDocument
from catalog_qa.text.normalizer import embedding_text
from catalog_qa.utils.time import iso_utc

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 64


@dataclass(slots=True, frozen=True)
class _Prepared:
    chunk: Chunk
    cleaned: str


class ChunkIndexer:
    """Builds an ``Index`` from source documents with a single embedding model."""

    def __init__(
        self,
        embedding_model: EmbeddingModel,
        batch_size: int = DEFAULT_BATCH_SIZE,
        loaders: LoaderRegistry | None = None,
    ) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self.embedding_model = embedding_model
        self.batch_size = batch_size
        self.loaders = loaders or LoaderRegistry()

    def build(self, sources: Iterable[SourceDocument], chunk_size: int, overlap: int) -> Index:
        """Chunk, clean and embed ``sources``; ids follow production order."""
        prepared: list[_Prepared] = []
        indexed_sources: list[str] = []
        for source in sources:
            chunks = chunk_document(source, chunk_size, overlap)
            if not chunks:
                logger.warning("Skipping %s: no text to index", source.name)
                continue
            indexed_sources.append(source.name)
            prepared.extend(
                _Prepared(chunk=chunk, cleaned=embedding_text(chunk.original_text, technical=True))
                for chunk in chunks
            )
            logger.info("Chunked %s into %s pieces", source.name, len(chunks))
        if not prepared:
            raise ConfigurationError("No chunks produced; nothing to index")

        vectors = self._embed([item.cleaned for item in prepared])
        entries = [
            IndexEntry(
                id=position,
                source_name=item.chunk.source_name,
                chunk_index=item.chunk.chunk_index,
                original_text=item.chunk.original_text,
                cleaned_text=item.cleaned,
                embedding=vector,
            )
            for position, (item, vector) in enumerate(zip(prepared, vectors))
        ]
        metadata = IndexMetadata(
            created_at=iso_utc(),
            embedding_model_id=self.embedding_model.model_name,
            sources=indexed_sources,
            chunk_size=chunk_size,
            chunk_overlap=overlap,
        )
        logger.info("Built index with %s vectors from %s sources", len(entries), len(indexed_sources))
        return Index(metadata=metadata, entries=entries)

    def build_from_paths(self, paths: Iterable[Path], chunk_size: int, overlap: int) -> Index:
        """Load files through the loader registry, then ``build``; unreadable files are skipped."""
        return self.build(self._load_all(paths), chunk_size, overlap)

    def _load_all(self, paths: Iterable[Path]) -> list[SourceDocument]:
        documents: list[SourceDocument] = []
        for path in _expand(paths):
            try:
                documents.append(self.loaders.load(path))
            except (OSError, ValueError, RuntimeError) as exc:
                logger.warning("Skipping %s: %s", path, exc)
        return documents

    def _embed(self, texts: Sequence[str]) -> list[list[float]]:
        vectors: list[list[float]] = []
        dim: int | None = None
        for start in range(0, len(texts), self.batch_size):
            batch = list(texts[start : start + self.batch_size])
            result = self.embedding_model.encode(batch)
            if len(result.vectors) != len(batch):
                raise EmbeddingFailure(
                    502, f"Embedding batch returned {len(result.vectors)} vectors for {len(batch)} inputs"
                )
            for vector in result.vectors:
                if dim is None:
                    dim = len(vector)
                if not vector or len(vector) != dim:
                    raise EmbeddingFailure(502, f"Embedding dimension changed mid-build ({dim} vs {len(vector)})")
            vectors.extend(list(vector) for vector in result.vectors)
            logger.debug("Embedded %s/%s chunks", len(vectors), len(texts))
        return vectors


def _expand(paths: Iterable[Path]) -> list[Path]:
    expanded: list[Path] = []
    for path in paths:
        path = Path(path).expanduser()
        if path.is_dir():
            expanded.extend(sorted(item for item in path.rglob("*") if item.is_file()))
        else:
            expanded.append(path)
    return expanded


__all__ = ["ChunkIndexer", "DEFAULT_BATCH_SIZE"]
