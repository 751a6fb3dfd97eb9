"""Prometheus metrics for minirag.

Provides metrics instrumentation for:
- HTTP request latency and counts
- Vector store operation latency and corpus size
- Retrieval metrics (chunks, scores)
- LLM latency and answer source (model vs. rule-based fallback)
"""

import time
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from minirag.logging_config import get_logger

logger = get_logger(__name__)

# HTTP Request Metrics
HTTP_REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint", "status_code"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

HTTP_REQUEST_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

# Vector Store Metrics
VECTORSTORE_OPERATION_DURATION = Histogram(
    "vectorstore_operation_duration_seconds",
    "Vector store operation duration",
    ["operation", "status"],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0],
)

VECTORSTORE_DOCUMENTS = Gauge(
    "vectorstore_documents",
    "Number of documents in the most recently updated vector store",
)

# Retrieval Metrics
RETRIEVAL_CHUNKS_RETURNED = Histogram(
    "retrieval_chunks_returned",
    "Number of chunks returned per retrieval",
    buckets=[0, 1, 2, 3, 5, 10, 20, 50],
)

RETRIEVAL_TOP_SCORE = Histogram(
    "retrieval_top_score",
    "Top retrieval score per query",
    buckets=[0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0],
)

# LLM Metrics
LLM_REQUEST_DURATION = Histogram(
    "llm_request_duration_seconds",
    "LLM request duration in seconds",
    ["model", "status"],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0],
)

LLM_REQUEST_TOTAL = Counter(
    "llm_requests_total",
    "Total LLM requests",
    ["model", "status"],
)

ANSWERS_TOTAL = Counter(
    "answers_total",
    "Answers generated, by generator",
    ["generator"],  # "llm" or "fallback"
)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect HTTP request metrics."""

    def __init__(self, app: ASGIApp) -> None:
        """Initialize the middleware."""
        super().__init__(app)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process request and collect metrics."""
        # Skip metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        endpoint = self._normalize_endpoint(request.url.path)

        HTTP_REQUEST_DURATION.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).observe(duration)

        HTTP_REQUEST_TOTAL.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()

        return response

    def _normalize_endpoint(self, path: str) -> str:
        """Normalize endpoint path to reduce cardinality."""
        if path.startswith("/health"):
            return "/health"
        if path.startswith("/api/v1/"):
            parts = path.split("/")
            if len(parts) >= 4:
                return f"/api/v1/{parts[3]}"
        return path


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST


@contextmanager
def track_vectorstore_operation(operation: str) -> Iterator[None]:
    """Time a vector store operation, labelled by outcome.

    Args:
        operation: Operation name (add, search, save, load).
    """
    start_time = time.perf_counter()
    status = "success"
    try:
        yield
    except Exception:
        status = "error"
        raise
    finally:
        VECTORSTORE_OPERATION_DURATION.labels(
            operation=operation,
            status=status,
        ).observe(time.perf_counter() - start_time)


def set_vectorstore_size(count: int) -> None:
    """Record the current corpus size."""
    VECTORSTORE_DOCUMENTS.set(count)


def track_retrieval_request(
    chunks_returned: int,
    top_score: float,
) -> None:
    """Track retrieval request metrics.

    Args:
        chunks_returned: Number of chunks returned.
        top_score: Highest relevance score.
    """
    RETRIEVAL_CHUNKS_RETURNED.observe(chunks_returned)
    if top_score > 0:
        RETRIEVAL_TOP_SCORE.observe(top_score)


def track_llm_request(
    model: str,
    duration: float,
    success: bool = True,
) -> None:
    """Track LLM request metrics.

    Args:
        model: LLM model name.
        duration: Request duration in seconds.
        success: Whether the request succeeded.
    """
    status = "success" if success else "error"

    LLM_REQUEST_DURATION.labels(model=model, status=status).observe(duration)
    LLM_REQUEST_TOTAL.labels(model=model, status=status).inc()


def track_answer(generator: str) -> None:
    """Count an answer produced by ``generator`` ("llm" or "fallback")."""
    ANSWERS_TOTAL.labels(generator=generator).inc()
