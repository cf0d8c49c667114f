"""Prometheus Metrics.

What the DTL exposes:
- HTTP requests by route and status
- HTTP request latency by route
- records ingested per event kind
- ingestion batch failures per event kind and reason
"""

import logging
from typing import Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)


class MetricsCollector:
    """Centralized Prometheus metrics collector."""

    def __init__(self, port: int = 8000, registry: Optional[CollectorRegistry] = None):
        self._port = port
        self._registry = registry if registry is not None else REGISTRY
        self._started = False

        # === HTTP ===
        self.http_requests = Counter(
            'dtl_http_requests_total',
            'Query server requests',
            ['route', 'status'],
            registry=self._registry,
        )

        self.http_latency = Histogram(
            'dtl_http_request_latency_seconds',
            'Query server request latency',
            ['route'],
            buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 5.0],
            registry=self._registry,
        )

        # === Ingestion ===
        self.records_ingested = Counter(
            'dtl_records_ingested_total',
            'Records written by the ingestion pipeline',
            ['event_kind'],
            registry=self._registry,
        )

        self.ingestion_failures = Counter(
            'dtl_ingestion_failures_total',
            'Ingestion batches that failed',
            ['event_kind', 'reason'],
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def start_server(self):
        """Start the Prometheus HTTP endpoint (idempotent)."""
        if self._started:
            return
        start_http_server(self._port, registry=self._registry)
        self._started = True
        logger.info(f"Prometheus metrics server started on port {self._port}")

    def record_request(self, route: str, status: int, latency_seconds: float):
        self.http_requests.labels(route=route, status=str(status)).inc()
        self.http_latency.labels(route=route).observe(latency_seconds)

    def record_ingested(self, event_kind: str, count: int):
        self.records_ingested.labels(event_kind=event_kind).inc(count)

    def record_ingestion_failure(self, event_kind: str, reason: str):
        self.ingestion_failures.labels(event_kind=event_kind, reason=reason).inc()


_metrics: Optional[MetricsCollector] = None


def get_metrics(port: int = 8000) -> MetricsCollector:
    """Process-wide collector on the default registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector(port)
    return _metrics
