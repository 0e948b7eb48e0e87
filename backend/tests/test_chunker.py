"""Tests for chunker."""

import pytest

from catalog_qa.ingest.chunker import chunk_document, chunk_text
from catalog_qa.models.entities import SourceDocument


def test_fixed_windows_with_overlap() -> None:
    text = "abcdefghijklmnopqrstuvwxyz"
    windows = chunk_text(text, chunk_size=10, overlap=2)
    assert [window.start for window in windows] == [0, 8, 16, 24]
    assert [len(window.text) for window in windows] == [10, 10, 10, 2]
    assert windows[-1].text == "yz"


def test_windows_cover_text_with_constant_stride() -> None:
    text = " ".join(f"DY-12{i:02d} has {i} heads and runs at {i * 100} rpm." for i in range(20))
    windows = chunk_text(text, chunk_size=120, overlap=30)
    starts = [window.start for window in windows]
    assert all(later - earlier == 90 for earlier, later in zip(starts, starts[1:]))
    for window in windows:
        assert text[window.start : window.start + len(window.text)] == window.text
        assert 0 < len(window.text) <= 120
    assert windows[-1].start + len(windows[-1].text) == len(text)


def test_whitespace_is_normalized_and_windows_right_stripped() -> None:
    windows = chunk_text("alpha   beta\n\n gamma  ", chunk_size=6, overlap=0)
    assert [window.text for window in windows] == ["alpha", "beta g", "amma"]


def test_empty_text_has_no_windows() -> None:
    assert chunk_text("", chunk_size=10, overlap=2) == []
    assert chunk_text(" \n\t ", chunk_size=10, overlap=2) == []


@pytest.mark.parametrize("size, overlap", [(0, 0), (10, 10), (10, 12), (10, -1)])
def test_invalid_window_parameters(size: int, overlap: int) -> None:
    with pytest.raises(ValueError):
        chunk_text("some text", chunk_size=size, overlap=overlap)


def test_chunk_document_numbers_chunks_per_source() -> None:
    document = SourceDocument(name="DY-1201.pdf", raw_text="x" * 25)
    chunks = chunk_document(document, chunk_size=10, overlap=0)
    assert [chunk.chunk_index for chunk in chunks] == [0, 1, 2]
    assert {chunk.source_name for chunk in chunks} == {"DY-1201.pdf"}
    assert chunks[-1].original_text == "xxxxx"
