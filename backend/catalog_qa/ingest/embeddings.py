"""Embedding utilities."""

from __future__ import annotations

import hashlib
import math
import re
from dataclasses import dataclass
from typing import Iterable, Protocol, Sequence

from catalog_qa.core.config import Settings
from catalog_qa.core.errors import EmbeddingFailure
from catalog_qa.generation.gemini import GeminiClient


_TOKEN_RE = re.compile(r"\w+")


@dataclass(slots=True)
class EmbeddingBatch:
    vectors: list[list[float]]
    model: str
    dim: int
    backend: str


class EmbeddingModel(Protocol):
    model_name: str

    def encode(self, texts: Sequence[str]) -> EmbeddingBatch: ...

    def embed_query(self, text: str) -> list[float]: ...


class HashedEmbeddingModel:
    """Lightweight hashed embedding model with deterministic output."""

    _instances: dict[str, "HashedEmbeddingModel"] = {}

    def __init__(self, model_name: str = "hashed", dim: int = 384) -> None:
        self.model_name = model_name
        self._dim = dim
        self._backend = "hashed"

    @classmethod
    def get(cls, model_name: str) -> "HashedEmbeddingModel":
        key = model_name or "hashed"
        if key not in cls._instances:
            cls._instances[key] = HashedEmbeddingModel(model_name=key)
        return cls._instances[key]

    @property
    def dim(self) -> int:
        return self._dim

    @property
    def backend(self) -> str:
        return self._backend

    def encode(self, texts: Iterable[str]) -> EmbeddingBatch:
        vectors: list[list[float]] = []
        for text in texts:
            vector = [0.0] * self._dim
            for token in _tokenize(text):
                vector[_hash_token(token, self._dim)] += 1.0
            _normalize(vector)
            vectors.append(vector)
        return EmbeddingBatch(vectors=vectors, model=self.model_name, dim=self._dim, backend=self._backend)

    def embed_query(self, text: str) -> list[float]:
        return self.encode([text]).vectors[0]


class GeminiEmbeddingModel:
    """Remote embeddings through the Gemini ``text-embedding`` models."""

    def __init__(self, client: GeminiClient, model_name: str = "text-embedding-004") -> None:
        self.client = client
        self.model_name = model_name

    @property
    def backend(self) -> str:
        return "gemini"

    def encode(self, texts: Sequence[str]) -> EmbeddingBatch:
        texts = list(texts)
        if not texts:
            return EmbeddingBatch(vectors=[], model=self.model_name, dim=0, backend=self.backend)
        vectors = self.client.embed_batch(self.model_name, texts)
        dims = {len(vector) for vector in vectors}
        if len(dims) != 1 or 0 in dims:
            raise EmbeddingFailure(502, f"Embedding batch returned inconsistent dimensions {sorted(dims)}")
        return EmbeddingBatch(vectors=vectors, model=self.model_name, dim=dims.pop(), backend=self.backend)

    def embed_query(self, text: str) -> list[float]:
        return self.client.embed_one(self.model_name, text)


def load_embedding_model(settings: Settings, client: GeminiClient | None = None) -> EmbeddingModel:
    """Build the embedder selected by ``settings.embedding_backend``."""
    if settings.embedding_backend == "hashed":
        return HashedEmbeddingModel.get("hashed")
    client = client or GeminiClient(
        api_key=settings.api_key,
        base_url=settings.api_base_url,
        timeout=settings.provider_timeout_sec,
    )
    return GeminiEmbeddingModel(client, model_name=settings.embedding_model)


def _tokenize(text: str) -> list[str]:
    return _TOKEN_RE.findall(text.lower())


def _hash_token(token: str, dim: int) -> int:
    digest = hashlib.blake2b(token.encode("utf-8"), digest_size=8).digest()
    value = int.from_bytes(digest, "big")
    return value % dim


def _normalize(vector: list[float]) -> None:
    norm = math.sqrt(sum(value * value for value in vector))
    if norm == 0:
        return
    inv = 1.0 / norm
    for idx, value in enumerate(vector):
        vector[idx] = value * inv


__all__ = [
    "EmbeddingBatch",
    "EmbeddingModel",
    "GeminiEmbeddingModel",
    "HashedEmbeddingModel",
    "load_embedding_model",
]
