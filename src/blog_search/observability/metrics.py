"""Prometheus metrics for index builds and queries.

Metrics live in a package-local registry. Every update is mirrored to an
OpenTelemetry instrument on the global meter, which is a no-op until
``init_metrics`` installs an SDK meter provider.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import threading
import time
from typing import Any, Literal

from opentelemetry import metrics as otel_metrics
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import MetricReader
from opentelemetry.sdk.resources import Resource
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Gauge, Histogram, generate_latest


MetricKind = Literal["counter", "histogram", "gauge"]

REGISTRY = CollectorRegistry()

_OPERATIONS: dict[str, MetricKind] = {"inc": "counter", "observe": "histogram", "set": "gauge"}


def init_metrics(
    service_name: str = "blog-search",
    *,
    readers: list[MetricReader] | None = None,
) -> MeterProvider:
    """Install an SDK meter provider so mirrored updates reach ``readers``."""
    provider = MeterProvider(
        resource=Resource.create({"service.name": service_name}),
        metric_readers=readers or [],
    )
    otel_metrics.set_meter_provider(provider)
    return provider


class Metric:
    """A labelled Prometheus metric with an OpenTelemetry twin."""

    def __init__(self, kind: MetricKind, name: str, documentation: str, label: str, **options: Any) -> None:
        metric_cls = {"counter": Counter, "histogram": Histogram, "gauge": Gauge}[kind]
        self.kind = kind
        self.name = name
        self.documentation = documentation
        self._prom = metric_cls(name, documentation, [label], registry=REGISTRY, **options)
        self._otel: Any = None
        # OTel has no settable gauge; an up-down counter is fed the deltas.
        self._gauge_levels: dict[tuple[tuple[str, str], ...], float] = {}
        # keeps the Prometheus value and the mirrored gauge deltas in step
        self._lock = threading.Lock()

    def labels(self, **labels: str) -> BoundMetric:
        return BoundMetric(self, labels)

    def update(self, operation: str, labels: dict[str, str], value: float) -> None:
        if _OPERATIONS.get(operation) != self.kind:
            raise TypeError(f"{self.name} is a {self.kind}; {operation}() is not supported")
        with self._lock:
            getattr(self._prom.labels(**labels), operation)(value)
            self._mirror(labels, value)

    def _mirror(self, labels: dict[str, str], value: float) -> None:
        instrument = self._instrument()
        if self.kind == "counter":
            instrument.add(value, labels)
        elif self.kind == "histogram":
            instrument.record(value, labels)
        else:
            key = tuple(sorted(labels.items()))
            delta = value - self._gauge_levels.get(key, 0.0)
            self._gauge_levels[key] = value
            if delta:
                instrument.add(delta, labels)

    def _instrument(self) -> Any:
        if self._otel is None:
            meter = otel_metrics.get_meter("blog_search")
            create = {
                "counter": meter.create_counter,
                "histogram": meter.create_histogram,
                "gauge": meter.create_up_down_counter,
            }[self.kind]
            self._otel = create(self.name, description=self.documentation)
        return self._otel


class BoundMetric:
    """A metric with its label values filled in."""

    def __init__(self, metric: Metric, labels: dict[str, str]) -> None:
        self._metric = metric
        self._labels = labels

    def inc(self, amount: float = 1.0) -> None:
        self._metric.update("inc", self._labels, amount)

    def observe(self, value: float) -> None:
        self._metric.update("observe", self._labels, value)

    def set(self, value: float) -> None:
        self._metric.update("set", self._labels, value)


SEARCH_LATENCY = Metric(
    "histogram",
    "blog_search_query_latency_seconds",
    "Search query latency",
    "mode",
    buckets=(0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1),
)
SEARCH_COUNT = Metric("counter", "blog_search_queries_total", "Search queries by outcome", "outcome")
BUILD_LATENCY = Metric(
    "histogram",
    "blog_search_build_latency_seconds",
    "Index build latency",
    "analyzer",
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
)
INDEX_DOC_COUNT = Metric("gauge", "blog_search_index_documents", "Documents in the latest index", "analyzer")
REJECTED_DOCUMENTS = Metric(
    "counter", "blog_search_rejected_documents_total", "Corpus records rejected at load time", "code"
)


@contextmanager
def track_latency(histogram: Metric, **labels: str) -> Iterator[None]:
    """Observe the block's wall time on ``histogram``, also when it raises."""
    started = time.perf_counter()
    try:
        yield
    finally:
        histogram.labels(**labels).observe(time.perf_counter() - started)


def get_metrics() -> bytes:
    """Prometheus text exposition of the package metrics."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
