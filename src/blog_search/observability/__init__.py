"""Observability: structured logging, log context, tracing and metrics."""

from blog_search.observability.context import LOG_CONTEXT, bind_context, current_context, log_context
from blog_search.observability.logging import JsonFormatter, configure_logging
from blog_search.observability.metrics import (
    BUILD_LATENCY,
    INDEX_DOC_COUNT,
    REGISTRY,
    REJECTED_DOCUMENTS,
    SEARCH_COUNT,
    SEARCH_LATENCY,
    get_metrics,
    get_metrics_content_type,
    init_metrics,
    track_latency,
)
from blog_search.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "BUILD_LATENCY",
    "INDEX_DOC_COUNT",
    "LOG_CONTEXT",
    "REGISTRY",
    "REJECTED_DOCUMENTS",
    "SEARCH_COUNT",
    "SEARCH_LATENCY",
    "JsonFormatter",
    "bind_context",
    "configure_logging",
    "create_span",
    "current_context",
    "get_metrics",
    "get_metrics_content_type",
    "get_tracer",
    "init_metrics",
    "init_tracing",
    "log_context",
    "track_latency",
]
