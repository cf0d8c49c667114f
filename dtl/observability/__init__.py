"""DTL -- Observability package (Prometheus metrics)."""

from dtl.observability.metrics import MetricsCollector, get_metrics

__all__: list[str] = [
    "MetricsCollector",
    "get_metrics",
]
