"""Grounded prompt assembly for the answer generator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from catalog_qa.models.entities import LanguageMode, RetrievalResult
from catalog_qa.text.classifier import ClassificationResult

LANGUAGE_DIRECTIVES: dict[LanguageMode, str] = {
    "mixed": "REPLY LANGUAGE: Hinglish (Hindi in Latin script). Do NOT use Devanagari.",
    "plain": "REPLY LANGUAGE: English. Professional and concise.",
}


class Generator(Protocol):
    """Text generator; raises ``GenerationFailure`` on provider error or empty output."""

    def generate(self, prompt: str) -> str: ...


@dataclass(slots=True, frozen=True)
class Citation:
    index: int
    score: float


@dataclass(slots=True, frozen=True)
class ComposedPrompt:
    text: str
    citations: tuple[Citation, ...]


class PromptComposer:
    def __init__(self, bot_name: str, brand_name: str, fallback_answer: str) -> None:
        self.bot_name = bot_name
        self.brand_name = brand_name
        self.fallback_answer = fallback_answer

    def compose(
        self,
        question: str,
        classification: ClassificationResult,
        retrieval: RetrievalResult,
    ) -> ComposedPrompt:
        """Build the prompt from confident hits only.

        Raises ``ValueError`` for a low-confidence result so below-threshold
        context never reaches the generator.
        """
        if retrieval.is_low_confidence or not retrieval.hits:
            raise ValueError("Cannot compose a prompt from a low-confidence retrieval")
        blocks = "\n\n".join(
            f"【{ordinal}】 {hit.entry.original_text or hit.entry.cleaned_text}"
            for ordinal, hit in enumerate(retrieval.hits, start=1)
        )
        directive = LANGUAGE_DIRECTIVES[classification.language_mode]
        instruction = "\n".join(
            [
                f"You are {self.bot_name}, {self.brand_name}'s assistant. Answer STRICTLY and ONLY from the "
                f"provided CONTEXT (the {self.brand_name} knowledge base).",
                "If the answer is not present in the CONTEXT, reply exactly:",
                f'"{self.fallback_answer}"',
                "",
                "Rules:",
                "- Do not invent or add external knowledge.",
                "- Be concise and factual.",
                f"- {directive}",
            ]
        )
        text = "\n\n".join(
            [
                instruction,
                f"QUESTION:\n{question.strip()}",
                f"CONTEXT (numbered blocks):\n{blocks}",
                "\n".join(
                    [
                        "Format:",
                        "- Direct answer grounded in context.",
                        f'- If not found: "{self.fallback_answer}"',
                        "- Use the reply language specified above.",
                    ]
                ),
            ]
        )
        citations = tuple(
            Citation(index=ordinal, score=hit.score) for ordinal, hit in enumerate(retrieval.hits, start=1)
        )
        return ComposedPrompt(text=text, citations=citations)


__all__ = ["Citation", "ComposedPrompt", "Generator", "LANGUAGE_DIRECTIVES", "PromptComposer"]
