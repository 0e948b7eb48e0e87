"""Render generated answers as short bullet lists."""

from __future__ import annotations

import re

_LIST_LINE_RE = re.compile(r"^\s*(?:[-*•]|\d+\.)\s+", re.MULTILINE)
_TRAILING_SPACE_RE = re.compile(r"[ \t]+\n")
# Blank lines, sentence ends followed by a capital/digit/paren, semicolons, bullets, " - " separators.
_SPLIT_RE = re.compile(r"\n{2,}|(?<=[.!?])\s+(?=[A-Z(0-9])|[;•]|\s+-\s+")
_LINE_SPLIT_RE = re.compile(r"\n+")
_LEADING_BULLET_RE = re.compile(r"^[•*\-]\s+")
_TRAILING_DOT_RE = re.compile(r"\s*\.\s*$")


def is_list_like(text: str) -> bool:
    return bool(_LIST_LINE_RE.search(text or ""))


def to_point_wise(text: str) -> str:
    """Split prose into ``- `` bullets; lists and single statements are returned unchanged."""
    if not text or is_list_like(text):
        return text
    norm = _TRAILING_SPACE_RE.sub("\n", text.replace("\r", "")).strip()
    parts = _split(_SPLIT_RE, norm)
    if len(parts) < 2:
        by_line = _split(_LINE_SPLIT_RE, norm)
        if len(by_line) >= 2:
            parts = by_line
    if len(parts) < 2:
        return text
    bullets = (_TRAILING_DOT_RE.sub("", _LEADING_BULLET_RE.sub("", part)) for part in parts)
    return "\n".join(f"- {bullet}" for bullet in bullets)


def _split(pattern: re.Pattern[str], text: str) -> list[str]:
    return [part.strip() for part in pattern.split(text) if part and part.strip()]


__all__ = ["is_list_like", "to_point_wise"]
