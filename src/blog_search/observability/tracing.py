"""OpenTelemetry tracing for index builds and queries."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
import logging
from typing import Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import SpanProcessor, TracerProvider
from opentelemetry.trace import Span, Status, StatusCode, Tracer

from blog_search.observability.context import LOG_CONTEXT, log_context, new_span_id, new_trace_id


logger = logging.getLogger(__name__)

_TRACER_NAME = "blog_search"


def init_tracing(
    service_name: str = "blog-search",
    *,
    processors: list[SpanProcessor] | None = None,
) -> TracerProvider:
    """Install an SDK tracer provider; ``processors`` decide where spans go."""
    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    for processor in processors or []:
        provider.add_span_processor(processor)
    trace.set_tracer_provider(provider)
    logger.debug("Tracing initialized for %s", service_name)
    return provider


def get_tracer() -> Tracer:
    return trace.get_tracer(_TRACER_NAME)


@contextmanager
def create_span(name: str, attributes: Mapping[str, Any] | None = None) -> Iterator[Span]:
    """Run the block inside span ``name``.

    The span ids are bound into the log context so log lines emitted inside
    the block carry them; without an SDK provider they are minted locally.
    Exceptions mark the span as failed and propagate.
    """
    with get_tracer().start_as_current_span(
        name, attributes=dict(attributes or {}), record_exception=False, set_status_on_exception=False
    ) as span:
        span_ctx = span.get_span_context()
        if span_ctx.is_valid:
            ids = {"trace_id": format(span_ctx.trace_id, "032x"), "span_id": format(span_ctx.span_id, "016x")}
        else:
            # no SDK provider: nested operations still share the outer trace id
            outer = LOG_CONTEXT.get() or {}
            ids = {"trace_id": outer.get("trace_id") or new_trace_id(), "span_id": new_span_id()}
        ids["operation"] = name
        with log_context(**ids):
            try:
                yield span
            except Exception as exc:
                span.record_exception(exc)
                span.set_status(Status(StatusCode.ERROR, str(exc)))
                raise
