"""Prometheus-style metrics collector for record mutations. Thread-safe, in-memory."""

import threading
from typing import Any

MUTATIONS_COMMITTED = "record_mutations_committed_total"
MUTATIONS_ROLLED_BACK = "record_mutations_rolled_back_total"
MUTATIONS_REJECTED = "record_mutations_rejected_total"
MUTATION_LATENCY = "record_mutation_latency_ms"


class MetricsCollector:
    """
    In-memory registry of counters and latency histograms.
    Counters may carry a record kind label. Exposes increment, observe_latency, export_metrics.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[str, float] = {}
        # name -> {"name:kind=<kind>" -> value}
        self._counters_by_kind: dict[str, dict[str, float]] = {}
        self._histograms: dict[str, list[float]] = {}

    def increment(self, name: str, value: float = 1.0, *, kind: str | None = None) -> None:
        with self._lock:
            self._counters[name] = self._counters.get(name, 0) + value
            if kind is not None:
                key = f"{name}:kind={kind}"
                by_kind = self._counters_by_kind.setdefault(name, {})
                by_kind[key] = by_kind.get(key, 0) + value

    def observe_latency(self, name: str, latency_ms: float, *, kind: str | None = None) -> None:
        with self._lock:
            bucket = name if kind is None else f"{name}:kind={kind}"
            self._histograms.setdefault(bucket, []).append(latency_ms)

    def counter(self, name: str, *, kind: str | None = None) -> float:
        with self._lock:
            if kind is None:
                return self._counters.get(name, 0)
            return self._counters_by_kind.get(name, {}).get(f"{name}:kind={kind}", 0)

    def export_metrics(self) -> dict[str, Any]:
        with self._lock:
            return {
                "counters": dict(self._counters),
                "counters_by_kind": {k: dict(v) for k, v in self._counters_by_kind.items()},
                "histograms": {
                    k: {"count": len(v), "sum": sum(v)}
                    for k, v in self._histograms.items()
                },
            }

    def reset(self) -> None:
        """Reset all metrics (for tests)."""
        with self._lock:
            self._counters.clear()
            self._counters_by_kind.clear()
            self._histograms.clear()


_collector: MetricsCollector | None = None


def get_metrics_collector() -> MetricsCollector:
    """Process-wide collector shared by the service and the /metrics route."""
    global _collector
    if _collector is None:
        _collector = MetricsCollector()
    return _collector
