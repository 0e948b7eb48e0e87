"""Chunking utilities."""

from __future__ import annotations

from dataclasses import dataclass

from catalog_qa.models.entities import Chunk, SourceDocument
from catalog_qa.utils.text import normalize


@dataclass(slots=True, frozen=True)
class Window:
    start: int
    text: str


def chunk_text(text: str, chunk_size: int, overlap: int) -> list[Window]:
    """Split whitespace-normalized text into fixed-size overlapping windows.

    Windows start every ``chunk_size - overlap`` characters until the end of
    the text; each window is right-stripped and empty windows are dropped, so
    the last one may be shorter than ``chunk_size`` but is never empty.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if overlap < 0 or overlap >= chunk_size:
        raise ValueError("overlap must satisfy 0 <= overlap < chunk_size")
    normalized = normalize(text or "")
    step = chunk_size - overlap
    windows: list[Window] = []
    for start in range(0, len(normalized), step):
        piece = normalized[start : start + chunk_size].rstrip()
        if piece:
            windows.append(Window(start=start, text=piece))
    return windows


def chunk_document(document: SourceDocument, chunk_size: int, overlap: int) -> list[Chunk]:
    """Chunk one source; ``chunk_index`` is sequential per source."""
    return [
        Chunk(
            source_name=document.name,
            chunk_index=ordinal,
            original_text=window.text,
            start=window.start,
        )
        for ordinal, window in enumerate(chunk_text(document.raw_text, chunk_size, overlap))
    ]


__all__ = ["Window", "chunk_text", "chunk_document"]
