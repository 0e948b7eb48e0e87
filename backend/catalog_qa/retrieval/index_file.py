"""Read and write the persisted vector index (``index.json``)."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Mapping

import orjson

from catalog_qa.core.errors import ConfigurationError, IndexFormatError
from catalog_qa.models.entities import Index, IndexEntry, IndexMetadata


def read_raw(path: Path) -> dict[str, Any]:
    """Load the index file as a plain mapping, keeping unknown keys."""
    if not path.exists():
        raise ConfigurationError(f"Embeddings not found at {path}. Run `catalog-qa embed` first.")
    try:
        raw = orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as exc:
        raise IndexFormatError(f"Index file {path} is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise IndexFormatError(f"Index file {path} must hold a JSON object")
    return raw


def read_index(path: Path) -> Index:
    """Parse and validate an index file; empty indices are a configuration error."""
    index = index_from_dict(read_raw(path))
    if not index.entries:
        raise ConfigurationError(f"Embeddings file {path} has no vectors.")
    return index


def index_from_dict(raw: Mapping[str, Any]) -> Index:
    vectors = raw.get("vectors")
    if not isinstance(vectors, list):
        raise IndexFormatError("Index is missing the 'vectors' list")
    meta = raw.get("meta") or {}
    if not isinstance(meta, Mapping):
        raise IndexFormatError("Index 'meta' must be an object")
    sources = meta.get("sources") or []
    if not isinstance(sources, list):
        raise IndexFormatError("Index 'meta.sources' must be a list")
    entries = [_entry_from_dict(position, item) for position, item in enumerate(vectors)]
    try:
        metadata = IndexMetadata(
            created_at=str(raw.get("createdAt") or ""),
            embedding_model_id=str(raw.get("model") or ""),
            sources=[str(source.get("name")) for source in sources if isinstance(source, Mapping)],
            chunk_size=int(meta.get("chunk_size") or 0),
            chunk_overlap=int(meta.get("chunk_overlap") or 0),
        )
    except (TypeError, ValueError) as exc:
        raise IndexFormatError(f"Index 'meta' is malformed: {exc}") from exc
    return Index(metadata=metadata, entries=entries)


def index_to_dict(index: Index) -> dict[str, Any]:
    meta = index.metadata
    return {
        "createdAt": meta.created_at,
        "model": meta.embedding_model_id,
        "meta": {
            "sources": [{"name": name} for name in meta.sources],
            "chunk_size": meta.chunk_size,
            "chunk_overlap": meta.chunk_overlap,
        },
        "vectors": [
            {
                "id": entry.id,
                "source": entry.source_name,
                "chunk_index": entry.chunk_index,
                "text_original": entry.original_text,
                "text_cleaned": entry.cleaned_text,
                "embedding": entry.embedding,
            }
            for entry in index.entries
        ],
    }


def write_index(index: Index, path: Path) -> Path:
    return write_raw(index_to_dict(index), path)


def write_raw(payload: Mapping[str, Any], path: Path) -> Path:
    """Write atomically so watchers and readers never observe a half-written file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = orjson.dumps(payload, option=orjson.OPT_INDENT_2)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path


def _entry_from_dict(position: int, item: Any) -> IndexEntry:
    if not isinstance(item, Mapping):
        raise IndexFormatError(f"Vector #{position} is not an object")
    embedding = item.get("embedding")
    if not isinstance(embedding, list) or not embedding:
        raise IndexFormatError(f"Vector #{position} has no embedding")
    try:
        return IndexEntry(
            id=int(item.get("id", position)),
            source_name=str(item.get("source") or ""),
            chunk_index=int(item.get("chunk_index", 0)),
            original_text=str(item.get("text_original") or item.get("text") or ""),
            cleaned_text=str(item.get("text_cleaned") or ""),
            embedding=[float(value) for value in embedding],
        )
    except (TypeError, ValueError) as exc:
        raise IndexFormatError(f"Vector #{position} is malformed: {exc}") from exc


__all__ = [
    "index_from_dict",
    "index_to_dict",
    "read_index",
    "read_raw",
    "write_index",
    "write_raw",
]
