"""Tests for the embedding-text normalizer."""

import pytest

from catalog_qa.text.normalizer import clean, embedding_text, is_protected
from catalog_qa.text.vocabulary import PROTECTED_TERMS

SAMPLES = [
    "What are the features of DY-1201?",
    "Contact the head office in Delhi!!",
    "what is this",
    "Speed 1200 rpm, 15+1 needles, 50/60 Hz, 80% faster",
    "क्या DY-1201 में speed है?",
    "kya aap mujhe DY-606 ka price bata sakte ho",
    "  --servo-- motor...  ",
    "1200 / 60%",
    "?!",
]


def test_clean_drops_stopwords_and_punctuation() -> None:
    assert clean("What are the features of DY-1201?") == "features dy-1201"


def test_clean_blank_input() -> None:
    assert clean("") == ""
    assert clean("   \n\t") == ""
    assert clean(None) == ""


@pytest.mark.parametrize("technical", [False, True])
@pytest.mark.parametrize("text", SAMPLES)
def test_clean_is_idempotent(text: str, technical: bool) -> None:
    once = clean(text, technical=technical)
    assert clean(once, technical=technical) == once


def test_protected_terms_survive_stopword_filtering() -> None:
    for technical in (False, True):
        for term in PROTECTED_TERMS:
            expected = clean(term, technical=technical).split()
            assert expected, term
            assert all(is_protected(token) for token in expected), term
            cleaned = clean(f"what is the {term} for this", technical=technical).split()
            assert all(token in cleaned for token in expected), term


def test_hindi_and_hinglish_stopwords_removed() -> None:
    assert clean("क्या DY-1201 में speed है?") == "dy-1201 speed"
    assert clean("kya aap mujhe DY-606 ka price bata sakte ho") == "dy-606 price bata sakte"


def test_hyphens_kept_only_inside_tokens() -> None:
    assert clean("  --servo-- motor  ") == "servo motor"
    assert clean("auto-trimming - supported") == "auto-trimming supported"


def test_technical_mode_keeps_unit_symbols() -> None:
    text = "Speed 1200 rpm, 15+1 needles"
    assert clean(text, technical=True) == "speed 1200 rpm 15+1 needles"
    assert clean(text) == "speed 1200 rpm 15 1 needles"


def test_all_stopwords_fall_back_to_filtered_text() -> None:
    assert clean("What is this?") == "what is this"


def test_embedding_text_never_empty_for_non_blank_input() -> None:
    assert embedding_text("?!") == "?!"
    assert embedding_text("Sequin device for DY-1201") == "sequin device dy-1201"
