"""FastAPI application setup for Catalog QA."""

from __future__ import annotations

import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalog_qa.api.dependencies import (
    SESSION_HEADER,
    get_app_settings,
    get_ask_service,
    get_index_watcher,
    get_session_store,
    get_vector_store,
    shutdown_dependencies,
)
from catalog_qa.api.routes_admin import router as admin_router
from catalog_qa.api.routes_query import router as query_router
from catalog_qa.api.routes_session import router as session_router
from catalog_qa.core.errors import ProviderError, QuestionValidationError
from catalog_qa.core.logging import configure_logging, get_logger
from catalog_qa.core.metrics import REQUEST_COUNT, REQUEST_LATENCY

configure_logging()
logger = get_logger(__name__)

app = FastAPI(
    title="Catalog QA",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_app_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[SESSION_HEADER],
)

app.include_router(query_router, prefix="/api", tags=["query"])
app.include_router(session_router, prefix="/api", tags=["session"])
app.include_router(admin_router, prefix="", tags=["admin"])


@app.middleware("http")
async def record_request_metrics(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    route = request.scope.get("route")
    endpoint = getattr(route, "path", "unmatched")
    REQUEST_COUNT.labels(endpoint=endpoint, method=request.method, status=str(response.status_code)).inc()
    REQUEST_LATENCY.labels(endpoint=endpoint, method=request.method).observe(time.perf_counter() - started)
    return response


@app.exception_handler(QuestionValidationError)
async def handle_validation_error(request: Request, exc: QuestionValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(ProviderError)
async def handle_provider_error(request: Request, exc: ProviderError) -> JSONResponse:
    logger.warning("Provider error on %s: %s", request.url.path, exc.message)
    return JSONResponse(status_code=exc.status, content=exc.to_dict())


@app.on_event("startup")
async def startup() -> None:
    """Load the index and warm core singletons; start the index watcher if enabled."""
    settings = get_app_settings()
    store = get_vector_store()
    get_session_store()
    get_ask_service()
    logger.info("Ready with %s vectors from %s", store.size, settings.index_path)
    if settings.watch_index:
        get_index_watcher().start()


@app.on_event("shutdown")
async def shutdown() -> None:
    shutdown_dependencies()


__all__ = ["app"]
