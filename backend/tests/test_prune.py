"""Tests for the index file codec and source pruning."""

from __future__ import annotations

from pathlib import Path

import orjson
import pytest

from catalog_qa.core.errors import ConfigurationError, IndexFormatError
from catalog_qa.ingest.prune import backup_path_for, prune_index
from catalog_qa.retrieval.index_file import index_from_dict, read_index, read_raw, write_raw


def _raw_index() -> dict:
    vectors = []
    for position, source in enumerate(["A.pdf", "A.pdf", "b.pdf", "C.pdf", "a.PDF"]):
        vectors.append(
            {
                "id": position,
                "source": source,
                "chunk_index": position,
                "text_original": f"text {position}",
                "text_cleaned": f"text {position}",
                "embedding": [float(position), 1.0],
            }
        )
    return {
        "createdAt": "2024-01-01T00:00:00.000Z",
        "model": "text-embedding-004",
        "kind": "gemini",
        "meta": {
            "sources": [{"name": "A.pdf"}, {"name": "b.pdf"}, {"name": "C.pdf"}],
            "chunk_size": 1200,
            "chunk_overlap": 200,
        },
        "vectors": vectors,
    }


def test_prune_renumbers_and_updates_metadata(tmp_path: Path) -> None:
    path = tmp_path / "index.json"
    write_raw(_raw_index(), path)
    original = path.read_bytes()

    report = prune_index(path, ["a.pdf", "  "])

    assert report.removed == 3
    assert report.remaining == 2
    assert report.sources_present == ("A.pdf", "b.pdf", "C.pdf", "a.PDF")
    assert report.backup_path.read_bytes() == original
    assert report.backup_path.parent == tmp_path
    assert report.backup_path.name.startswith("index.backup.")

    raw = read_raw(path)
    assert [item["id"] for item in raw["vectors"]] == [0, 1]
    assert [item["source"] for item in raw["vectors"]] == ["b.pdf", "C.pdf"]
    assert raw["meta"]["sources"] == [{"name": "b.pdf"}, {"name": "C.pdf"}]
    assert raw["kind"] == "gemini"

    index = read_index(path)
    assert [entry.id for entry in index.entries] == [0, 1]
    assert index.metadata.sources == ["b.pdf", "C.pdf"]


def test_prune_with_unknown_name_only_renumbers(tmp_path: Path) -> None:
    path = tmp_path / "index.json"
    payload = _raw_index()
    payload["vectors"][2]["id"] = 40
    write_raw(payload, path)

    report = prune_index(path, ["missing.pdf"])

    assert report.removed == 0
    assert [item["id"] for item in read_raw(path)["vectors"]] == [0, 1, 2, 3, 4]


def test_backup_name_keeps_directory_and_stamp(tmp_path: Path) -> None:
    assert backup_path_for(tmp_path / "index.json", 1700000000000) == tmp_path / "index.backup.1700000000000.json"


def test_read_raw_errors(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        read_raw(tmp_path / "absent.json")
    broken = tmp_path / "broken.json"
    broken.write_text("[1, 2", encoding="utf-8")
    with pytest.raises(IndexFormatError):
        read_raw(broken)
    listing = tmp_path / "list.json"
    listing.write_bytes(orjson.dumps([1, 2]))
    with pytest.raises(IndexFormatError):
        read_raw(listing)


def test_index_from_dict_tolerates_legacy_fields() -> None:
    raw = {
        "model": "text-embedding-004",
        "generation_model": "gemini-2.5-flash",
        "vectors": [{"id": 0, "source": "old.pdf", "chunk_index": 0, "text": "legacy text", "embedding": [1, 0]}],
    }
    index = index_from_dict(raw)
    assert index.entries[0].original_text == "legacy text"
    assert index.entries[0].embedding == [1.0, 0.0]
    assert index.metadata.sources == []


def test_index_from_dict_rejects_malformed_vectors() -> None:
    with pytest.raises(IndexFormatError):
        index_from_dict({"vectors": [{"id": 0, "source": "x.pdf"}]})
    with pytest.raises(IndexFormatError):
        index_from_dict({"meta": {}})


@pytest.mark.parametrize("meta", [{"chunk_size": "big"}, {"sources": 5}, {"chunk_overlap": [1]}])
def test_index_from_dict_rejects_malformed_meta(meta: dict) -> None:
    raw = {"meta": meta, "vectors": [{"id": 0, "source": "x.pdf", "embedding": [1.0]}]}
    with pytest.raises(IndexFormatError):
        index_from_dict(raw)
