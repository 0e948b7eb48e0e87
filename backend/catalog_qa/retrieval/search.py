"""Question answering orchestration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Literal

from catalog_qa.core.config import Settings
from catalog_qa.core.errors import ProviderError, QuestionValidationError
from catalog_qa.core.metrics import ANSWER_COUNT
from catalog_qa.generation.formatting import to_point_wise
from catalog_qa.generation.prompt import Citation, Generator, PromptComposer
from catalog_qa.ingest.embeddings import EmbeddingModel
from catalog_qa.models.entities import LanguageMode
from catalog_qa.retrieval.vector_store import VectorStore
from catalog_qa.sessions.store import SessionStore
from catalog_qa.text.classifier import (
    GREETING_INTENTS,
    ClassificationResult,
    Intent,
    classify,
    is_blank_question,
    is_greeting_word,
)
from catalog_qa.text.normalizer import embedding_text
from catalog_qa.text.replies import TIME_OF_DAY_INTENTS, ReplyBank, time_of_day_salutation

logger = logging.getLogger(__name__)

AnswerRoute = Literal["small_talk", "not_ready", "low_confidence", "generated", "error"]


@dataclass(slots=True)
class AskResult:
    answer: str
    mode: LanguageMode
    route: AnswerRoute
    intent: Intent = "none"
    citations: tuple[Citation, ...] = ()
    error: ProviderError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class AskService:
    """Routes a question to small talk, a templated reply or grounded generation."""

    def __init__(
        self,
        settings: Settings,
        store: VectorStore,
        sessions: SessionStore,
        embedding_model: EmbeddingModel,
        generator: Generator,
        replies: ReplyBank | None = None,
        composer: PromptComposer | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.settings = settings
        self.store = store
        self.sessions = sessions
        self.embedding_model = embedding_model
        self.generator = generator
        self.replies = replies or ReplyBank(bot_name=settings.bot_name, brand_name=settings.brand_name)
        self.composer = composer or PromptComposer(
            bot_name=settings.bot_name,
            brand_name=settings.brand_name,
            fallback_answer=settings.fallback_answer,
        )
        self.clock = clock

    def ask(self, session_id: str, question: str | None) -> AskResult:
        """Answer ``question`` for ``session_id`` and record the exchange.

        Raises ``QuestionValidationError`` for a blank question, except on the
        first turn of a session when the front end has already greeted.
        Provider failures do not raise: the result carries the error and the
        user turn stays recorded without an assistant reply.
        """
        text = (question or "").strip()
        session = self.sessions.get(session_id)
        first_turn = session is None or not session.history
        classification = classify(text)
        mode = classification.language_mode

        if is_blank_question(text):
            if first_turn and self.settings.frontend_greets:
                reply = self.replies.minimal_assist(mode)
                return self._respond(session_id, text, reply, mode, "small_talk", "greeting")
            raise QuestionValidationError("Missing 'question' (or 'message') string")

        if classification.is_small_talk:
            reply = self._small_talk(classification, first_turn and is_greeting_word(text))
            return self._respond(session_id, text, reply, mode, "small_talk", classification.intent)

        if not self.store.is_ready:
            return self._respond(session_id, text, self.replies.not_ready(mode), mode, "not_ready")

        self.sessions.append_message(session_id, "user", text)
        try:
            query_vector = self.embedding_model.embed_query(embedding_text(text, technical=True))
            retrieval = self.store.search(query_vector, self.settings.top_k)
            if retrieval.is_low_confidence:
                logger.info("Low-confidence retrieval (top score %s)", retrieval.top_score)
                answer = self.replies.low_confidence(mode)
                self.sessions.append_message(session_id, "assistant", answer)
                return self._count(AskResult(answer=answer, mode=mode, route="low_confidence"))
            prompt = self.composer.compose(text, classification, retrieval)
            answer = self.generator.generate(prompt.text)
        except ProviderError as exc:
            logger.warning("Provider %s failure (%s): %s", exc.kind, exc.status, exc.message)
            return self._count(
                AskResult(answer=self.replies.provider_unavailable(mode), mode=mode, route="error", error=exc)
            )

        if self.settings.pointwise_mode:
            answer = to_point_wise(answer)
        self.sessions.append_message(session_id, "assistant", answer)
        return self._count(AskResult(answer=answer, mode=mode, route="generated", citations=prompt.citations))

    def _small_talk(self, classification: ClassificationResult, greets_first_turn: bool) -> str:
        intent = classification.intent
        mode = classification.language_mode
        if greets_first_turn and self.settings.frontend_greets and intent in GREETING_INTENTS:
            return self.replies.minimal_assist(mode)
        if intent in TIME_OF_DAY_INTENTS and classification.matched_by == "rule" and mode == "plain":
            now = self.clock() if self.clock else None
            salutation = time_of_day_salutation(now, self.settings.timezone)
            return self.replies.full_greeting(salutation, mode)
        return self.replies.small_talk(intent, mode)

    def _respond(
        self,
        session_id: str,
        question: str,
        answer: str,
        mode: LanguageMode,
        route: AnswerRoute,
        intent: Intent = "none",
    ) -> AskResult:
        self.sessions.record_exchange(session_id, question, answer)
        return self._count(AskResult(answer=answer, mode=mode, route=route, intent=intent))

    @staticmethod
    def _count(result: AskResult) -> AskResult:
        ANSWER_COUNT.labels(route=result.route, mode=result.mode).inc()
        return result


__all__ = ["AnswerRoute", "AskResult", "AskService"]
