"""Remove every vector of one or more sources from a persisted index."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from catalog_qa.core.errors import IndexFormatError
from catalog_qa.retrieval.index_file import read_raw, write_raw
from catalog_qa.utils.time import now_ms

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class PruneReport:
    removed: int
    remaining: int
    backup_path: Path
    sources_present: tuple[str, ...]


def backup_path_for(path: Path, stamp_ms: int | None = None) -> Path:
    """``index.json`` -> ``index.backup.<epoch_ms>.json`` in the same directory."""
    stamp = now_ms() if stamp_ms is None else stamp_ms
    return path.with_name(f"{path.stem}.backup.{stamp}.json")


def prune_index(path: Path, names: Iterable[str]) -> PruneReport:
    """Drop vectors whose ``source`` matches any of ``names`` (case-insensitive).

    A backup copy is written before the file is overwritten. Surviving
    vectors are renumbered from 0 in their existing order and removed names
    disappear from ``meta.sources``. Unknown keys are carried through as-is.
    """
    raw = read_raw(path)
    vectors = raw.get("vectors")
    if not isinstance(vectors, list):
        raise IndexFormatError("Index is missing the 'vectors' list")
    if not all(isinstance(item, dict) for item in vectors):
        raise IndexFormatError("Every vector must be an object")
    remove = {name.strip().lower() for name in names if name and name.strip()}
    present = tuple(dict.fromkeys(str(item.get("source")) for item in vectors))

    backup = backup_path_for(path)
    shutil.copyfile(path, backup)
    logger.info("Backup written to %s", backup)

    kept = [item for item in vectors if str(item.get("source")).lower() not in remove]
    for position, item in enumerate(kept):
        item["id"] = position
    raw["vectors"] = kept

    meta = raw.get("meta")
    if isinstance(meta, dict) and isinstance(meta.get("sources"), list):
        meta["sources"] = [
            source
            for source in meta["sources"]
            if not (isinstance(source, dict) and str(source.get("name")).lower() in remove)
        ]

    write_raw(raw, path)
    removed = len(vectors) - len(kept)
    logger.info("Pruned %s vectors, %s remaining", removed, len(kept))
    return PruneReport(removed=removed, remaining=len(kept), backup_path=backup, sources_present=present)


__all__ = ["PruneReport", "backup_path_for", "prune_index"]
