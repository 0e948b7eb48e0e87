"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from catalog_qa.core.config import Settings, get_settings


def test_defaults() -> None:
    settings = Settings()
    assert settings.top_k == 6
    assert settings.min_score == pytest.approx(0.18)
    assert (settings.chunk_size, settings.chunk_overlap) == (1200, 200)
    assert settings.embedding_model == "text-embedding-004"
    assert settings.generation_model == "gemini-2.5-flash"
    assert settings.pointwise_mode and settings.frontend_greets


def test_yaml_sections_and_env_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "config.yaml"
    config.write_text(
        "\n".join(
            [
                "retrieval:",
                "  top_k: 4",
                "  min_score: 0.25",
                "bot:",
                "  name: Sewbot",
                "index:",
                "  chunk_size: 600",
                "  chunk_overlap: 100",
                "http:",
                "  cors_origins: [\"https://catalog.example\"]",
            ]
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("CATQA_TOP_K", "3")

    settings = Settings.from_yaml(config)

    assert settings.top_k == 3
    assert settings.min_score == pytest.approx(0.25)
    assert settings.bot_name == "Sewbot"
    assert (settings.chunk_size, settings.chunk_overlap) == (600, 100)
    assert settings.cors_origins == ["https://catalog.example"]
    assert settings.index_path == tmp_path / "data" / "index.json"
    assert settings.embedding_backend == "hashed"
    assert settings.watch_index is False


def test_api_key_falls_back_to_provider_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "from-gemini-env")
    assert Settings.from_yaml().api_key == "from-gemini-env"
    monkeypatch.setenv("CATQA_API_KEY", "explicit")
    assert Settings.from_yaml().api_key == "explicit"


def test_csv_env_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CATQA_CORS_ORIGINS", "http://a.test, http://b.test")
    assert Settings.from_yaml().cors_origins == ["http://a.test", "http://b.test"]


def test_invalid_values_are_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(chunk_size=100, chunk_overlap=100)
    with pytest.raises(ValidationError):
        Settings(embedding_backend="openai")


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()
