"""Administrative routes for Catalog QA."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from catalog_qa.api.dependencies import get_app_settings, get_vector_store
from catalog_qa.core.config import Settings
from catalog_qa.core.metrics import metrics_response
from catalog_qa.models.dto import HealthResponse, ReloadResponse
from catalog_qa.retrieval import VectorStore
from catalog_qa.utils.time import iso_utc

router = APIRouter()


@router.get("/api/health", response_model=HealthResponse, summary="Liveness and index size")
def health(
    settings: Settings = Depends(get_app_settings),
    store: VectorStore = Depends(get_vector_store),
) -> HealthResponse:
    return HealthResponse(ok=True, bot=settings.bot_name, ts=iso_utc(), vectors=store.size)


@router.post("/api/admin/reload", response_model=ReloadResponse, summary="Re-read the index file")
def reload_index(store: VectorStore = Depends(get_vector_store)) -> ReloadResponse:
    report = store.reload()
    return ReloadResponse(ok=report.ok, vectors=report.vectors, detail=report.detail)


@router.get("/metrics", summary="Prometheus metrics")
def get_metrics():
    return metrics_response()


__all__ = ["router"]
