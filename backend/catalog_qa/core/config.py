"""Application configuration handling."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

ENV_PREFIX = "CATQA_"
DEFAULT_CONFIG_PATH = Path("~/.config/catalog-qa/config.yaml")
API_KEY_FALLBACK_ENV = ("GOOGLE_API_KEY", "GEMINI_API_KEY", "GENAI_API_KEY")

_YAML_KEY_MAP: Mapping[tuple[str, ...], str] = {
    ("index", "path"): "index_path",
    ("index", "sources"): "source_paths",
    ("index", "chunk_size"): "chunk_size",
    ("index", "chunk_overlap"): "chunk_overlap",
    ("index", "watch"): "watch_index",
    ("embeddings", "backend"): "embedding_backend",
    ("embeddings", "model"): "embedding_model",
    ("embeddings", "batch_size"): "embed_batch_size",
    ("generation", "model"): "generation_model",
    ("generation", "fallback_answer"): "fallback_answer",
    ("generation", "pointwise"): "pointwise_mode",
    ("provider", "api_key"): "api_key",
    ("provider", "base_url"): "api_base_url",
    ("provider", "timeout_sec"): "provider_timeout_sec",
    ("retrieval", "top_k"): "top_k",
    ("retrieval", "min_score"): "min_score",
    ("bot", "name"): "bot_name",
    ("bot", "brand"): "brand_name",
    ("bot", "frontend_greets"): "frontend_greets",
    ("bot", "timezone"): "timezone",
    ("http", "cors_origins"): "cors_origins",
    ("http", "cookie_secure"): "cookie_secure",
}


class Settings(BaseModel):
    """Runtime configuration loaded from YAML file and environment variables."""

    index_path: Path = Field(default=Path("data") / "index.json")
    source_paths: list[Path] = Field(default_factory=list)
    embedding_backend: str = "gemini"
    embedding_model: str = "text-embedding-004"
    embed_batch_size: int = Field(default=64, ge=1, le=100)
    generation_model: str = "gemini-2.5-flash"
    api_key: str | None = None
    api_base_url: str | None = None
    provider_timeout_sec: float = 60.0
    top_k: int = Field(default=6, ge=1, le=50)
    min_score: float = 0.18
    chunk_size: int = Field(default=1200, ge=1)
    chunk_overlap: int = Field(default=200, ge=0)
    bot_name: str = "Duki"
    brand_name: str = "Dukejia"
    fallback_answer: str = "Please contact our sales team for more details."
    pointwise_mode: bool = True
    frontend_greets: bool = True
    timezone: str = "Asia/Kolkata"
    watch_index: bool = True
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://127.0.0.1:5173", "http://localhost:5173"]
    )
    cookie_secure: bool = False

    model_config = {
        "validate_assignment": True,
        "extra": "ignore",
    }

    @field_validator("index_path", mode="before")
    @classmethod
    def _expand_index_path(cls, value: Any) -> Path:
        if isinstance(value, Path):
            return value.expanduser()
        if isinstance(value, str):
            return Path(value).expanduser()
        raise TypeError("index_path must be a path or string")

    @field_validator("source_paths", "cors_origins", mode="before")
    @classmethod
    def _split_csv(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator("embedding_backend")
    @classmethod
    def _check_backend(cls, value: str) -> str:
        backend = value.strip().lower()
        if backend not in {"gemini", "hashed"}:
            raise ValueError("embedding_backend must be 'gemini' or 'hashed'")
        return backend

    @model_validator(mode="after")
    def _check_overlap(self) -> "Settings":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        return self

    @classmethod
    def from_yaml(cls, path: Path | None = None) -> "Settings":
        """Load YAML config and overlay env vars; fall back to defaults."""
        config_path = cls._resolve_config_path(path)
        data: dict[str, Any] = {}
        if config_path and config_path.exists():
            with config_path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
            data.update(_flatten_yaml(raw))
        data.update(_load_env_overrides())
        if not data.get("api_key"):
            data["api_key"] = _api_key_from_env()
        return cls(**data)

    @staticmethod
    def _resolve_config_path(path: Path | None) -> Path | None:
        if path is not None:
            return path.expanduser()
        env_path = os.environ.get(f"{ENV_PREFIX}CONFIG")
        if env_path:
            return Path(env_path).expanduser()
        resolved_default = DEFAULT_CONFIG_PATH.expanduser()
        return resolved_default if resolved_default.exists() else None


def _flatten_yaml(raw: Mapping[str, Any], prefix: tuple[str, ...] = ()) -> dict[str, Any]:
    """Flatten nested YAML configuration to Settings field names."""
    flat: dict[str, Any] = {}
    for key, value in raw.items():
        next_prefix = prefix + (key,)
        if isinstance(value, Mapping):
            flat.update(_flatten_yaml(value, prefix=next_prefix))
        else:
            mapped_key = _YAML_KEY_MAP.get(next_prefix)
            if mapped_key:
                flat[mapped_key] = value
            elif key in Settings.model_fields:
                flat[key] = value
    return flat


def _load_env_overrides() -> dict[str, Any]:
    """Map environment variables with CATQA_ prefix into Settings fields."""
    overrides: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        if field_name in Settings.model_fields:
            overrides[field_name] = value
    return overrides


def _api_key_from_env() -> str | None:
    for name in API_KEY_FALLBACK_ENV:
        value = os.environ.get(name)
        if value:
            return value
    return None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings accessor for dependency injection."""
    return Settings.from_yaml()


__all__ = ["Settings", "get_settings"]
