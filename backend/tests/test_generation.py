"""Tests for prompt composition and answer formatting."""

from __future__ import annotations

import pytest

from catalog_qa.generation.formatting import is_list_like, to_point_wise
from catalog_qa.generation.prompt import Citation, PromptComposer
from catalog_qa.models.entities import IndexEntry, RetrievalResult, ScoredEntry
from catalog_qa.text.classifier import ClassificationResult

FALLBACK = "Please contact our sales team for more details."


def _hit(position: int, text: str, score: float) -> ScoredEntry:
    entry = IndexEntry(
        id=position,
        source_name="catalog.pdf",
        chunk_index=position,
        original_text=text,
        cleaned_text=text.lower(),
        embedding=[1.0],
    )
    return ScoredEntry(entry=entry, score=score)


@pytest.fixture
def composer() -> PromptComposer:
    return PromptComposer(bot_name="Duki", brand_name="Dukejia", fallback_answer=FALLBACK)


def test_compose_numbers_context_and_sets_language(composer: PromptComposer) -> None:
    retrieval = RetrievalResult(
        hits=(_hit(4, "DY-1201 has 12 heads.", 0.82), _hit(9, "Max speed 1200 rpm.", 0.41)),
        top_score=0.82,
    )
    prompt = composer.compose("How many heads?", ClassificationResult("plain", "none"), retrieval)

    assert "【1】 DY-1201 has 12 heads." in prompt.text
    assert "【2】 Max speed 1200 rpm." in prompt.text
    assert prompt.text.index("【1】") < prompt.text.index("【2】")
    assert f'"{FALLBACK}"' in prompt.text
    assert "STRICTLY and ONLY" in prompt.text
    assert "REPLY LANGUAGE: English. Professional and concise." in prompt.text
    assert "QUESTION:\nHow many heads?" in prompt.text
    assert prompt.citations == (Citation(index=1, score=0.82), Citation(index=2, score=0.41))


def test_compose_mixed_mode_forbids_devanagari(composer: PromptComposer) -> None:
    retrieval = RetrievalResult(hits=(_hit(0, "Sequin device available.", 0.5),), top_score=0.5)
    prompt = composer.compose("sequin hai kya", ClassificationResult("mixed", "none"), retrieval)
    assert "REPLY LANGUAGE: Hinglish (Hindi in Latin script). Do NOT use Devanagari." in prompt.text


def test_compose_refuses_low_confidence(composer: PromptComposer) -> None:
    with pytest.raises(ValueError):
        composer.compose("anything", ClassificationResult("plain", "none"), RetrievalResult.low_confidence(0.05))


def test_point_wise_splits_sentences() -> None:
    text = "DY-1201 has 12 heads. It runs at 1200 rpm."
    assert to_point_wise(text) == "- DY-1201 has 12 heads\n- It runs at 1200 rpm"


def test_point_wise_splits_semicolons_and_lines() -> None:
    assert to_point_wise("Speed 1200 rpm; 12 heads") == "- Speed 1200 rpm\n- 12 heads"
    assert to_point_wise("Line one\nLine two") == "- Line one\n- Line two"


def test_point_wise_leaves_lists_and_single_statements() -> None:
    listed = "- Speed 1200 rpm\n- 12 heads"
    numbered = "1. Speed\n2. Heads"
    assert is_list_like(listed) and is_list_like(numbered)
    assert to_point_wise(listed) == listed
    assert to_point_wise(numbered) == numbered
    assert to_point_wise("How can I assist you?") == "How can I assist you?"
    assert to_point_wise("") == ""
