"""Gemini client used for both embeddings and answer generation."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx
from google import genai
from google.genai import errors, types

from catalog_qa.core.errors import EmbeddingFailure, GenerationFailure, ProviderError

logger = logging.getLogger(__name__)


class GeminiClient:
    """Thin wrapper over the ``google-genai`` SDK.

    No retries: a failed call raises the matching ``ProviderError`` subclass
    carrying the provider's HTTP status and message. The SDK client is built
    on first use so a missing API key only fails the calls that need it.
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str | None = None,
        timeout: float = 60.0,
        client: Any = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self._client = client

    @property
    def sdk(self) -> genai.Client:
        if self._client is None:
            options = types.HttpOptions(timeout=int(self.timeout * 1000), base_url=self.base_url)
            self._client = genai.Client(api_key=self.api_key, http_options=options)
        return self._client

    def embed_one(self, model: str, text: str) -> list[float]:
        vectors = self.embed_batch(model, [text])
        if not vectors[0]:
            raise EmbeddingFailure(502, "Embedding response contained no values")
        return vectors[0]

    def embed_batch(self, model: str, texts: Sequence[str]) -> list[list[float]]:
        response = self._call(EmbeddingFailure, "embed_content", model=model, contents=list(texts))
        embeddings = getattr(response, "embeddings", None) or []
        if len(embeddings) != len(texts):
            raise EmbeddingFailure(
                502, f"Embedding batch returned {len(embeddings)} vectors for {len(texts)} inputs"
            )
        try:
            return [[float(value) for value in item.values or []] for item in embeddings]
        except (AttributeError, TypeError, ValueError) as exc:
            raise EmbeddingFailure(502, f"Provider returned a malformed embedding: {exc}") from exc

    def generate(self, model: str, prompt: str) -> str:
        response = self._call(GenerationFailure, "generate_content", model=model, contents=prompt)
        text = _candidate_text(response)
        if not text.strip():
            reason = _block_reason(response)
            raise GenerationFailure(502, f"Generator returned no text{f' ({reason})' if reason else ''}")
        return text

    def _call(self, error_cls: type[ProviderError], method: str, **kwargs: Any) -> Any:
        if not self.api_key:
            raise error_cls(401, "Gemini API key is not configured")
        try:
            return getattr(self.sdk.models, method)(**kwargs)
        except errors.APIError as exc:
            message = exc.message or str(exc)
            logger.warning("Gemini %s returned %s: %s", method, exc.code, message)
            raise error_cls(exc.code, message) from exc
        except httpx.HTTPError as exc:
            logger.warning("Gemini %s request failed: %s", method, exc)
            raise error_cls(502, f"Provider request failed: {exc}") from exc
        except ValueError as exc:
            # pydantic rejects payloads that do not match the response schema
            logger.warning("Gemini %s returned a malformed response: %s", method, exc)
            raise error_cls(502, "Provider returned a malformed response") from exc


class GeminiGenerator:
    """Generator backed by a Gemini text model."""

    def __init__(self, client: GeminiClient, model: str) -> None:
        self.client = client
        self.model = model

    def generate(self, prompt: str) -> str:
        return self.client.generate(self.model, prompt)


def _candidate_text(response: Any) -> str:
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        parts = getattr(content, "parts", None) or []
        text = "".join(getattr(part, "text", None) or "" for part in parts)
        if text:
            return text
    return ""


def _block_reason(response: Any) -> str | None:
    feedback = getattr(response, "prompt_feedback", None)
    reason = getattr(feedback, "block_reason", None)
    if reason is None:
        return None
    return str(getattr(reason, "value", reason))


__all__ = ["GeminiClient", "GeminiGenerator"]
