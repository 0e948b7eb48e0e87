"""Canned replies for small talk and the templated fallbacks of the query path."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Mapping, Sequence
from zoneinfo import ZoneInfo

from catalog_qa.models.entities import LanguageMode

Selector = Callable[[Sequence[str]], str]

PLAIN_REPLIES: Mapping[str, tuple[str, ...]] = {
    "greeting": ("Hi! How can I help today?", "How can I help with {bot} today?"),
    "morning": ("Good morning! How can I help today?",),
    "afternoon": ("Good afternoon! How can I help today?",),
    "evening": ("Good evening! Need help with machines or spares?",),
    "thanks": (
        "You're welcome! Anything else I can do?",
        "Happy to help! Need brochures or a sales connect?",
    ),
    "farewell": ("Take care! I'm here if you need me.", "Bye! Have a great day."),
    "help": ("Ask about flagship lines, suggestions by application, or spares.",),
    "acknowledgement": ("Got it! What would you like next?",),
}

MIXED_REPLIES: Mapping[str, tuple[str, ...]] = {
    "greeting": (
        "Namaste 👋 {bot} se related kya madad chahiye?",
        "Hello ji 👋 Main madad ke liye hoon, puchhiye.",
    ),
    "morning": ("Good morning! Aaj kis cheez mein help chahiye?",),
    "afternoon": ("Good afternoon! {bot} ke baare mein kya jaana hai?",),
    "evening": ("Good evening! Machines/spares par madad chahiye to batayein.",),
    "thanks": (
        "Shukriya! Aur kuch chahiye to pooch lijiye.",
        "Welcome ji! Brochure chahiye ya sales connect karu?",
    ),
    "farewell": (
        "Theek hai, milte hain! Jab chahein ping kar dijiyega.",
        "Bye! Din shubh rahe.",
    ),
    "help": ("Try: \"Flagship features\", \"Application-wise machine suggestion\", \"Spares info\".",),
    "acknowledgement": ("Thik hai! Ab kya puchhna hai?",),
}

MINIMAL_ASSIST = {
    "plain": "How can I assist you?",
    "mixed": "Kaise madad kar sakta hoon?",
}

NOT_READY = {
    "plain": "Reference data isn't loaded yet. Please run `catalog-qa embed` on the server and try again.",
    "mixed": "Reference data abhi load nahi hai. Server par `catalog-qa embed` chalayen, phir dobara poochhiye.",
}

LOW_CONFIDENCE = {
    "plain": (
        "I couldn't find enough details on that in the {brand} knowledge base. "
        "Please try rephrasing or be more specific, like '{brand} DY-1201 key features'."
    ),
    "mixed": (
        "Mujhe is par {brand} knowledge base mein kaafi specifics nahi mil pa rahe. "
        "Kripya thoda specific likhiye, jaise '{brand} DY-1201 key features'."
    ),
}

PROVIDER_UNAVAILABLE = {
    "plain": "Sorry, I couldn't reach the answer service just now. Please try again in a moment.",
    "mixed": "Maaf kijiye, abhi answer service se connect nahi ho paaya. Thodi der mein dobara try karein.",
}

FULL_GREETING = {
    "plain": "{salutation}! I'm {bot}. How can I help you today?",
    "mixed": "{salutation}! Main {bot} hoon. How can I help you today?",
}

TIME_OF_DAY_INTENTS = frozenset({"morning", "afternoon", "evening"})


def time_of_day_salutation(now: datetime | None = None, tz: str = "Asia/Kolkata") -> str:
    """Salutation for the local hour in ``tz``."""
    local = (now or datetime.now(tz=ZoneInfo(tz))).astimezone(ZoneInfo(tz))
    hour = local.hour
    if hour < 5:
        return "Good night"
    if hour < 12:
        return "Good morning"
    if hour < 17:
        return "Good afternoon"
    if hour < 21:
        return "Good evening"
    return "Good night"


@dataclass(slots=True)
class ReplyBank:
    """Per-intent, per-mode reply candidates with a pluggable selector."""

    bot_name: str = "Duki"
    brand_name: str = "Dukejia"
    selector: Selector = random.choice
    plain: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: PLAIN_REPLIES)
    mixed: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: MIXED_REPLIES)

    def candidates(self, intent: str, mode: LanguageMode) -> tuple[str, ...]:
        bank = self.mixed if mode == "mixed" else self.plain
        return bank.get(intent) or bank["greeting"]

    def small_talk(self, intent: str, mode: LanguageMode) -> str:
        return self._fill(self.selector(self.candidates(intent, mode)))

    def minimal_assist(self, mode: LanguageMode) -> str:
        return MINIMAL_ASSIST[mode]

    def full_greeting(self, salutation: str, mode: LanguageMode) -> str:
        return FULL_GREETING[mode].format(salutation=salutation, bot=self.bot_name)

    def not_ready(self, mode: LanguageMode) -> str:
        return NOT_READY[mode]

    def low_confidence(self, mode: LanguageMode) -> str:
        return self._fill(LOW_CONFIDENCE[mode])

    def provider_unavailable(self, mode: LanguageMode) -> str:
        return PROVIDER_UNAVAILABLE[mode]

    def _fill(self, template: str) -> str:
        return template.format(bot=self.bot_name, brand=self.brand_name)


__all__ = [
    "ReplyBank",
    "Selector",
    "TIME_OF_DAY_INTENTS",
    "time_of_day_salutation",
]
