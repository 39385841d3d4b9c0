"""Observability: in-process mutation metrics."""

from herdbook.observability.metrics import MetricsCollector, get_metrics_collector

__all__ = ["MetricsCollector", "get_metrics_collector"]
