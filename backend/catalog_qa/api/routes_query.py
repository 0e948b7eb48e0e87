"""Question answering route."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from catalog_qa.api.dependencies import (
    attach_session,
    get_app_settings,
    get_ask_service,
    get_session_store,
    resolve_session_id,
)
from catalog_qa.core.config import Settings
from catalog_qa.core.errors import QuestionValidationError
from catalog_qa.models.dto import (
    AskRequest,
    AskResponse,
    CitationModel,
    ErrorDetails,
    ProviderErrorResponse,
)
from catalog_qa.retrieval import AskService
from catalog_qa.sessions.store import SessionStore

router = APIRouter()


@router.post(
    "/ask",
    response_model=AskResponse,
    responses={400: {"description": "Invalid question"}, 502: {"model": ProviderErrorResponse}},
    summary="Answer a catalog question",
)
def ask(
    request: Request,
    response: Response,
    payload: AskRequest | None = None,
    settings: Settings = Depends(get_app_settings),
    sessions: SessionStore = Depends(get_session_store),
    service: AskService = Depends(get_ask_service),
) -> AskResponse | JSONResponse:
    payload = payload or AskRequest()
    handle = resolve_session_id(request, payload.session_id)
    sessions.touch(handle.id)
    try:
        result = service.ask(handle.id, payload.text)
    except QuestionValidationError as exc:
        invalid = JSONResponse(status_code=400, content={"error": str(exc)})
        attach_session(invalid, handle, settings)
        return invalid

    if result.error is not None:
        body = ProviderErrorResponse(
            error=result.error.message,
            details=ErrorDetails(status=result.error.status, type=type(result.error).__name__),
            answer=result.answer,
            mode=result.mode,
            session_id=handle.id,
        )
        error_response = JSONResponse(status_code=result.error.status, content=body.model_dump(by_alias=True))
        attach_session(error_response, handle, settings)
        return error_response

    attach_session(response, handle, settings)
    return AskResponse(
        answer=result.answer,
        reply=result.answer,
        mode=result.mode,
        session_id=handle.id,
        bot=settings.bot_name,
        citations=[CitationModel(index=item.index, score=item.score) for item in result.citations],
    )


__all__ = ["router"]
