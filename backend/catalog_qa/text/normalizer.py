"""Clean free text into an embedding-friendly token stream.

The cleaner lower-cases, strips characters outside an allow-list, drops
stopwords from the English, Hinglish and Hindi stoplists and keeps every
token of the protected catalog vocabulary. When filtering leaves nothing
useful (all stopwords, or a specification table reduced to bare numbers) the
character-filtered original is returned instead, so callers never embed an
empty string while the input carried information.

``clean`` is idempotent: ``clean(clean(x)) == clean(x)``.
"""

from __future__ import annotations

import re
from typing import Iterable

from catalog_qa.text.vocabulary import PROTECTED_TERMS, STOPLISTS
from catalog_qa.utils.text import normalize

_PLAIN_DISALLOWED_RE = re.compile(r"[^a-z0-9\u0900-\u097f\s\-]")
# Specification tables carry units and ratios ("1200 rpm", "15+1", "50/60", "80%").
_TECHNICAL_DISALLOWED_RE = re.compile(r"[^a-z0-9\u0900-\u097f\s\-.+/%°×]")
_EDGE_CHARS = "-./"


def _tokenize(text: str, technical: bool) -> list[str]:
    pattern = _TECHNICAL_DISALLOWED_RE if technical else _PLAIN_DISALLOWED_RE
    stripped = pattern.sub(" ", text.lower())
    tokens = (token.strip(_EDGE_CHARS) for token in stripped.split())
    return [token for token in tokens if token]


def _protected_tokens(terms: Iterable[str]) -> frozenset[str]:
    protected: set[str] = set()
    for term in terms:
        for technical in (False, True):
            protected.update(_tokenize(term, technical))
    return frozenset(protected)


PROTECTED_TOKENS: frozenset[str] = _protected_tokens(PROTECTED_TERMS)


def is_protected(token: str) -> bool:
    return token in PROTECTED_TOKENS


def is_stopword(token: str) -> bool:
    return any(token in stoplist for stoplist in STOPLISTS)


def _keep(token: str) -> bool:
    if is_protected(token):
        return True
    return not is_stopword(token)


def _is_degenerate(tokens: list[str]) -> bool:
    return not any(char.isalpha() for token in tokens for char in token)


def clean(text: str | None, technical: bool = False) -> str:
    """Return the stopword-filtered, lower-cased token stream for ``text``."""
    if not text or not text.strip():
        return ""
    tokens = _tokenize(text, technical)
    kept = [token for token in tokens if _keep(token)]
    if _is_degenerate(kept) and len(tokens) > len(kept):
        return " ".join(tokens)
    return " ".join(kept)


def embedding_text(text: str | None, technical: bool = False) -> str:
    """Text to send to the embedder: the cleaned form, else the whitespace-normalized input."""
    cleaned = clean(text, technical=technical)
    if cleaned:
        return cleaned
    return normalize(text or "").lower()


__all__ = ["PROTECTED_TOKENS", "clean", "embedding_text", "is_protected", "is_stopword"]
