"""Exception taxonomy shared by the indexer, the stores and the query path."""

from __future__ import annotations


class CatalogQAError(Exception):
    """Base class for every error raised by catalog_qa."""


class ConfigurationError(CatalogQAError):
    """The index is missing or empty, or a build produced nothing to index."""


class IndexFormatError(CatalogQAError):
    """The persisted index file could not be parsed into the expected schema."""


class QuestionValidationError(CatalogQAError):
    """The caller sent a blank question outside the first-turn greeting case."""


class ReloadFailure(CatalogQAError):
    """A hot reload could not produce a usable index; the old one stays in place."""


class ProviderError(CatalogQAError):
    """An external provider call failed or returned an unusable payload."""

    kind = "provider"

    def __init__(self, status: int | None, message: str) -> None:
        super().__init__(message)
        self.status = status if status and status >= 400 else 502
        self.message = message

    def to_dict(self) -> dict[str, object]:
        return {
            "error": self.message,
            "details": {"status": self.status, "type": type(self).__name__},
        }


class EmbeddingFailure(ProviderError):
    kind = "embedding"


class GenerationFailure(ProviderError):
    kind = "generation"


__all__ = [
    "CatalogQAError",
    "ConfigurationError",
    "IndexFormatError",
    "QuestionValidationError",
    "ReloadFailure",
    "ProviderError",
    "EmbeddingFailure",
    "GenerationFailure",
]
