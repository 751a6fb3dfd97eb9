"""Observability module for metrics and monitoring."""

from minirag.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    get_metrics_content_type,
    set_vectorstore_size,
    track_answer,
    track_llm_request,
    track_retrieval_request,
    track_vectorstore_operation,
)

__all__ = [
    "MetricsMiddleware",
    "get_metrics",
    "get_metrics_content_type",
    "set_vectorstore_size",
    "track_answer",
    "track_llm_request",
    "track_retrieval_request",
    "track_vectorstore_operation",
]
