"""Pydantic DTOs exposed via API."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


class _CamelModel(BaseModel):
    model_config = {"populate_by_name": True}


class AskRequest(_CamelModel):
    question: str | None = None
    message: str | None = Field(default=None, description="Alias of question used by older widgets")
    session_id: str | None = Field(default=None, alias="sessionId")

    @field_validator("question", "message", "session_id", mode="before")
    @classmethod
    def _strings_only(cls, value: Any) -> Any:
        return value if isinstance(value, str) else None

    @property
    def text(self) -> str:
        return self.question if self.question is not None else (self.message or "")


class CitationModel(BaseModel):
    index: int
    score: float


class AskResponse(_CamelModel):
    answer: str
    reply: str
    mode: Literal["plain", "mixed"]
    session_id: str = Field(alias="sessionId")
    bot: str
    citations: list[CitationModel] = Field(default_factory=list)


class ErrorDetails(BaseModel):
    status: int
    type: str | None = None


class ProviderErrorResponse(_CamelModel):
    error: str
    details: ErrorDetails
    answer: str
    mode: Literal["plain", "mixed"]
    session_id: str = Field(alias="sessionId")


class SessionResponse(_CamelModel):
    session_id: str = Field(alias="sessionId")
    history_length: int = Field(alias="historyLength")
    created_at: int = Field(alias="createdAt")
    last_seen: int = Field(alias="lastSeen")
    hits: int
    bot: str


class TurnModel(_CamelModel):
    role: Literal["user", "assistant"]
    content: str
    timestamp: int = Field(alias="ts")


class HistoryResponse(_CamelModel):
    session_id: str = Field(alias="sessionId")
    items: list[TurnModel]


class ResetRequest(_CamelModel):
    session_id: str | None = Field(default=None, alias="sessionId")
    hard: bool = Field(default=False, description="Forget the session entirely instead of clearing its history")


class ResetResponse(_CamelModel):
    session_id: str = Field(alias="sessionId")
    cleared: bool


class HealthResponse(BaseModel):
    ok: bool
    bot: str
    ts: str
    vectors: int


class ReloadResponse(BaseModel):
    ok: bool
    vectors: int
    detail: str | None = None


__all__ = [
    "AskRequest",
    "AskResponse",
    "CitationModel",
    "ErrorDetails",
    "HealthResponse",
    "HistoryResponse",
    "ProviderErrorResponse",
    "ReloadResponse",
    "ResetRequest",
    "ResetResponse",
    "SessionResponse",
    "TurnModel",
]
