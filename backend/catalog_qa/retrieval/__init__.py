"""Retrieval components: the index file codec, the vector store and the ask flow."""

from .vector_store import ReloadReport, VectorStore, cosine_similarity
from .search import AskResult, AskService

__all__ = [
    "AskResult",
    "AskService",
    "ReloadReport",
    "VectorStore",
    "cosine_similarity",
]
