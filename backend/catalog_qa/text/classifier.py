"""Reply-language detection and small-talk intent routing.

Both decisions are cheap lexical heuristics over the raw question.

Intent precedence is fixed:

1. exact short tokens (``"hi"``, ``"ty"``, ``"gm"``...) after stripping
   everything but ``a-z``;
2. ``SMALL_TALK_RULES``, evaluated top to bottom, first match wins;
3. ``none``, meaning the question goes to retrieval.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Mapping, Pattern

from catalog_qa.models.entities import LanguageMode
from catalog_qa.text.vocabulary import MIXED_MODE_TOKENS

Intent = Literal[
    "greeting",
    "morning",
    "afternoon",
    "evening",
    "acknowledgement",
    "thanks",
    "farewell",
    "help",
    "none",
]
MatchPath = Literal["short_token", "rule", "none"]

GREETING_INTENTS = frozenset({"greeting", "morning", "afternoon", "evening"})

_DEVANAGARI_RE = re.compile(r"[\u0900-\u097f]")
_CHAT_CUE_RE = re.compile(r"[:)(!?]{2,}|\.{3,}|😂|👍|🙏")
_MIXED_TOKEN_RES: tuple[Pattern[str], ...] = tuple(
    re.compile(rf"(?<!\S){re.escape(token)}(?!\S)") for token in MIXED_MODE_TOKENS
)
_SHORT_TOKEN_STRIP_RE = re.compile(r"[^a-z]")
_BLANK_STRIP_RE = re.compile(r"[?.!\s]")
_GREETING_WORD_RE = re.compile(
    r"(?:hi+|hello+|hey(?: there)?|hlo+|namaste|namaskar|salaam|gm|ga|ge|👋|🙏)",
    re.IGNORECASE,
)

MIXED_MODE_THRESHOLD = 2.0
CHAT_CUE_WEIGHT = 0.5

SHORT_TOKENS: Mapping[str, Intent] = {
    **{token: "greeting" for token in ("hi", "hey", "yo", "sup")},
    **{token: "farewell" for token in ("bye", "bb", "ciao", "gn")},
    **{token: "thanks" for token in ("ty", "thx", "tnx", "tx")},
    "gm": "morning",
    "ga": "afternoon",
    "ge": "evening",
}

SMALL_TALK_RULES: tuple[tuple[Pattern[str], Intent], ...] = (
    (
        re.compile(
            r"^(?:(?:hi+|h[iy]+|hello+|hey(?: there)?|hlo+|yo+|hola|namaste|namaskar|salaam|salam)\b|👋|🙏)",
            re.IGNORECASE,
        ),
        "greeting",
    ),
    (re.compile(r"^(?:good\s*morning|gm)\b", re.IGNORECASE), "morning"),
    (re.compile(r"^(?:good\s*afternoon|ga)\b", re.IGNORECASE), "afternoon"),
    (re.compile(r"^(?:good\s*evening|ge)\b", re.IGNORECASE), "evening"),
    (
        re.compile(
            r"^(?:ok+|okay+|okk+|hmm+|haan+|ha+|sure|done|great|nice|cool|perfect|thik|theek|fine)\b",
            re.IGNORECASE,
        ),
        "acknowledgement",
    ),
    (
        re.compile(
            r"^(?:thanks|thank\s*you|thx|tnx|ty|much\s*(?:appreciated|thanks)|appreciated?"
            r"|shukriya|dhanyavaad|dhanyavad)\b",
            re.IGNORECASE,
        ),
        "thanks",
    ),
    (
        re.compile(
            r"^(?:bye|bb|good\s*bye|goodbye|see\s*ya|see\s*you|take\s*care|tc|ciao|gn)\b",
            re.IGNORECASE,
        ),
        "farewell",
    ),
    (
        re.compile(r"(?:who\s*are\s*you|what\s*can\s*you\s*do|help|menu|options|how\s*to\s*use)\b", re.IGNORECASE),
        "help",
    ),
)


@dataclass(slots=True, frozen=True)
class ClassificationResult:
    language_mode: LanguageMode
    intent: Intent
    matched_by: MatchPath = "none"

    @property
    def is_small_talk(self) -> bool:
        return self.intent != "none"


def language_score(text: str) -> float:
    lowered = (text or "").lower()
    score = float(sum(1 for pattern in _MIXED_TOKEN_RES if pattern.search(lowered)))
    if _CHAT_CUE_RE.search(lowered):
        score += CHAT_CUE_WEIGHT
    return score


def detect_language_mode(text: str) -> LanguageMode:
    """Return ``"mixed"`` for Devanagari input or enough romanized-Hindi cues."""
    if _DEVANAGARI_RE.search(text or ""):
        return "mixed"
    return "mixed" if language_score(text) >= MIXED_MODE_THRESHOLD else "plain"


def match_short_token(text: str) -> Intent | None:
    short = _SHORT_TOKEN_STRIP_RE.sub("", (text or "").strip().lower())
    return SHORT_TOKENS.get(short)


def match_rule(text: str) -> Intent | None:
    candidate = (text or "").strip()
    for pattern, intent in SMALL_TALK_RULES:
        if pattern.search(candidate):
            return intent
    return None


def match_intent(text: str) -> tuple[Intent, MatchPath]:
    intent = match_short_token(text)
    if intent is not None:
        return intent, "short_token"
    intent = match_rule(text)
    if intent is not None:
        return intent, "rule"
    return "none", "none"


def classify(text: str) -> ClassificationResult:
    intent, path = match_intent(text)
    return ClassificationResult(language_mode=detect_language_mode(text), intent=intent, matched_by=path)


def is_blank_question(text: str | None) -> bool:
    return _BLANK_STRIP_RE.sub("", text or "") == ""


def is_greeting_word(text: str | None) -> bool:
    return bool(_GREETING_WORD_RE.fullmatch((text or "").strip()))


__all__ = [
    "ClassificationResult",
    "GREETING_INTENTS",
    "Intent",
    "SHORT_TOKENS",
    "SMALL_TALK_RULES",
    "classify",
    "detect_language_mode",
    "is_blank_question",
    "is_greeting_word",
    "language_score",
    "match_intent",
    "match_rule",
    "match_short_token",
]
