"""Prometheus metrics instrumentation."""

from __future__ import annotations

from fastapi import Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()

REQUEST_COUNT = Counter(
    "catqa_requests_total",
    "Total HTTP requests",
    labelnames=("endpoint", "method", "status"),
    registry=REGISTRY,
)

REQUEST_LATENCY = Histogram(
    "catqa_request_latency_seconds",
    "Latency of HTTP requests",
    labelnames=("endpoint", "method"),
    registry=REGISTRY,
)

ANSWER_COUNT = Counter(
    "catqa_answers_total",
    "Answers produced, by the route the question took",
    labelnames=("route", "mode"),
    registry=REGISTRY,
)

INDEX_SIZE = Gauge(
    "catqa_index_vectors",
    "Number of vectors held by the in-memory store",
    registry=REGISTRY,
)

RELOAD_COUNT = Counter(
    "catqa_reloads_total",
    "Index reload attempts",
    labelnames=("status",),
    registry=REGISTRY,
)


def metrics_response() -> Response:
    """Return Prometheus metrics as an HTTP response."""
    payload = generate_latest(REGISTRY)
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


__all__ = [
    "REGISTRY",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "ANSWER_COUNT",
    "INDEX_SIZE",
    "RELOAD_COUNT",
    "metrics_response",
]
