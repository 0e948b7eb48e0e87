"""Conversation session routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, Response

from catalog_qa.api.dependencies import (
    attach_session,
    current_session,
    get_app_settings,
    get_session_store,
    resolve_session_id,
)
from catalog_qa.core.config import Settings
from catalog_qa.models.dto import (
    HistoryResponse,
    ResetRequest,
    ResetResponse,
    SessionResponse,
    TurnModel,
)
from catalog_qa.sessions.store import SessionStore

router = APIRouter()


@router.get("/session", response_model=SessionResponse, summary="Describe the caller's session")
def describe_session(
    session_id: str = Depends(current_session),
    settings: Settings = Depends(get_app_settings),
    sessions: SessionStore = Depends(get_session_store),
) -> SessionResponse:
    snapshot = sessions.snapshot(session_id)
    if snapshot is None:
        # deleted by a concurrent hard reset
        sessions.touch(session_id)
        snapshot = sessions.snapshot(session_id)
    return SessionResponse(
        session_id=session_id,
        history_length=snapshot.history_length,
        created_at=snapshot.created_at,
        last_seen=snapshot.last_seen,
        hits=snapshot.hit_count,
        bot=settings.bot_name,
    )


@router.get("/history", response_model=HistoryResponse, summary="Return the most recent turns")
def read_history(
    n: int = Query(default=20, description="Number of turns, clamped to 0-100"),
    session_id: str = Depends(current_session),
    sessions: SessionStore = Depends(get_session_store),
) -> HistoryResponse:
    items = [
        TurnModel(role=turn.role, content=turn.content, timestamp=turn.timestamp)
        for turn in sessions.read(session_id, n)
    ]
    return HistoryResponse(session_id=session_id, items=items)


@router.post("/reset", response_model=ResetResponse, summary="Clear the caller's conversation history")
def reset_session(
    request: Request,
    response: Response,
    payload: ResetRequest | None = None,
    settings: Settings = Depends(get_app_settings),
    sessions: SessionStore = Depends(get_session_store),
) -> ResetResponse:
    payload = payload or ResetRequest()
    handle = resolve_session_id(request, payload.session_id)
    attach_session(response, handle, settings)
    if payload.hard:
        sessions.delete(handle.id)
    else:
        sessions.touch(handle.id)
        sessions.reset(handle.id)
    return ResetResponse(session_id=handle.id, cleared=True)


__all__ = ["router"]
