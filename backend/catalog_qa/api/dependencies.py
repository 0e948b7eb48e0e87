"""Shared FastAPI dependencies."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from fastapi import Depends, Request, Response

from catalog_qa.core.config import Settings, get_settings
from catalog_qa.core.errors import ConfigurationError, IndexFormatError
from catalog_qa.core.logging import get_logger
from catalog_qa.generation.gemini import GeminiClient, GeminiGenerator
from catalog_qa.generation.prompt import Generator
from catalog_qa.ingest.embeddings import EmbeddingModel, load_embedding_model
from catalog_qa.ingest.watcher import IndexWatcher
from catalog_qa.retrieval import AskService, VectorStore
from catalog_qa.sessions.store import SessionStore
from catalog_qa.utils.ids import is_valid_session_id, new_session_id

logger = get_logger(__name__)

SESSION_HEADER = "X-Session-ID"
SESSION_COOKIE = "sid"
SESSION_COOKIE_MAX_AGE = 60 * 60 * 24 * 30

_CLIENT: GeminiClient | None = None
_EMBEDDING_MODEL: EmbeddingModel | None = None
_GENERATOR: Generator | None = None
_VECTOR_STORE: VectorStore | None = None
_SESSION_STORE: SessionStore | None = None
_ASK_SERVICE: AskService | None = None
_WATCHER: IndexWatcher | None = None


@lru_cache(maxsize=1)
def get_app_settings() -> Settings:
    return get_settings()


def get_gemini_client() -> GeminiClient:
    global _CLIENT
    if _CLIENT is None:
        settings = get_app_settings()
        _CLIENT = GeminiClient(
            api_key=settings.api_key,
            base_url=settings.api_base_url,
            timeout=settings.provider_timeout_sec,
        )
    return _CLIENT


def get_embedding_model() -> EmbeddingModel:
    global _EMBEDDING_MODEL
    if _EMBEDDING_MODEL is None:
        settings = get_app_settings()
        client = get_gemini_client() if settings.embedding_backend == "gemini" else None
        _EMBEDDING_MODEL = load_embedding_model(settings, client=client)
    return _EMBEDDING_MODEL


def get_generator() -> Generator:
    global _GENERATOR
    if _GENERATOR is None:
        _GENERATOR = GeminiGenerator(get_gemini_client(), get_app_settings().generation_model)
    return _GENERATOR


def get_vector_store() -> VectorStore:
    global _VECTOR_STORE
    if _VECTOR_STORE is None:
        settings = get_app_settings()
        store = VectorStore(path=settings.index_path, min_score=settings.min_score)
        try:
            store.load()
        except (ConfigurationError, IndexFormatError) as exc:
            logger.warning("Starting without vectors: %s", exc)
        _VECTOR_STORE = store
    return _VECTOR_STORE


def get_session_store() -> SessionStore:
    global _SESSION_STORE
    if _SESSION_STORE is None:
        _SESSION_STORE = SessionStore()
    return _SESSION_STORE


def get_ask_service() -> AskService:
    global _ASK_SERVICE
    if _ASK_SERVICE is None:
        _ASK_SERVICE = AskService(
            settings=get_app_settings(),
            store=get_vector_store(),
            sessions=get_session_store(),
            embedding_model=get_embedding_model(),
            generator=get_generator(),
        )
    return _ASK_SERVICE


def get_index_watcher() -> IndexWatcher:
    global _WATCHER
    if _WATCHER is None:
        store = get_vector_store()
        _WATCHER = IndexWatcher(store, get_app_settings().index_path)
    return _WATCHER


def shutdown_dependencies() -> None:
    """Stop background threads; the next getter call rebuilds what it needs."""
    global _WATCHER
    if _WATCHER is not None:
        _WATCHER.stop()
        _WATCHER = None


@dataclass(slots=True, frozen=True)
class SessionHandle:
    id: str
    issued: bool


def resolve_session_id(request: Request, body_session_id: str | None = None) -> SessionHandle:
    """Header first, then request body, then cookie; otherwise a fresh id is issued."""
    for candidate in (
        request.headers.get(SESSION_HEADER),
        body_session_id,
        request.cookies.get(SESSION_COOKIE),
    ):
        if candidate:
            if is_valid_session_id(candidate):
                return SessionHandle(id=candidate, issued=False)
            break
    return SessionHandle(id=new_session_id(), issued=True)


def attach_session(response: Response, handle: SessionHandle, settings: Settings) -> None:
    response.headers[SESSION_HEADER] = handle.id
    if handle.issued:
        response.set_cookie(
            SESSION_COOKIE,
            handle.id,
            max_age=SESSION_COOKIE_MAX_AGE,
            httponly=True,
            samesite="lax",
            secure=settings.cookie_secure,
        )


def current_session(
    request: Request,
    response: Response,
    settings: Settings = Depends(get_app_settings),
    sessions: SessionStore = Depends(get_session_store),
) -> str:
    """Resolve the caller's session id, echo it back and count the hit."""
    handle = resolve_session_id(request)
    attach_session(response, handle, settings)
    sessions.touch(handle.id)
    return handle.id


__all__ = [
    "SESSION_COOKIE",
    "SESSION_HEADER",
    "SessionHandle",
    "attach_session",
    "current_session",
    "get_app_settings",
    "get_ask_service",
    "get_embedding_model",
    "get_gemini_client",
    "get_generator",
    "get_index_watcher",
    "get_session_store",
    "get_vector_store",
    "resolve_session_id",
    "shutdown_dependencies",
]
