"""Process-wide metrics with Prometheus text export.

Counters are plain integers guarded by a single lock, so concurrent
requests can increment them safely.  Gauges are callbacks evaluated at
export time (e.g. "how many customers are ACTIVE right now").

Usage::

    from modules.core.metrics import get_metrics_collector

    metrics = get_metrics_collector()
    created = metrics.counter("customer_operations_success_total")
    created.increment()

    metrics.register_gauge("customer_active_total", lambda: repo.count_by_status(...))
    text = metrics.export_prometheus()
"""

from __future__ import annotations

from threading import Lock
from typing import Callable, Dict, List, Optional

import structlog

logger = structlog.get_logger(__name__)

HELP_TEXTS: Dict[str, str] = {
    "customer_operations_success_total": "Successful customer lifecycle operations",
    "customer_operations_failure_total": "Rejected customer lifecycle operations",
    "customer_validation_success_total": "Customer validations that found an ACTIVE customer",
    "customer_validation_failure_total": "Customer validations that did not find an ACTIVE customer",
    "customer_active_total": "Total number of active customers",
}


class Counter:
    """Handle to a single named counter owned by a ``MetricsCollector``."""

    def __init__(self, collector: MetricsCollector, name: str) -> None:
        self._collector = collector
        self.name = name

    def increment(self, amount: int = 1) -> None:
        self._collector.increment(self.name, amount)

    @property
    def value(self) -> int:
        return self._collector.get_counter_value(self.name)


class MetricsCollector:
    """Thread-safe registry of counters and gauges."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._counters: Dict[str, int] = {}
        self._gauges: Dict[str, Callable[[], float]] = {}

    # ------------------------------------------------------------------
    # Counters
    # ------------------------------------------------------------------

    def counter(self, name: str) -> Counter:
        """Register ``name`` (starting at zero) and return a handle to it."""
        with self._lock:
            self._counters.setdefault(name, 0)
        return Counter(self, name)

    def increment(self, name: str, amount: int = 1) -> None:
        with self._lock:
            self._counters[name] = self._counters.get(name, 0) + amount

    def get_counter_value(self, name: str) -> int:
        with self._lock:
            return self._counters.get(name, 0)

    # ------------------------------------------------------------------
    # Gauges
    # ------------------------------------------------------------------

    def register_gauge(self, name: str, callback: Callable[[], float]) -> None:
        """Register (or replace) a gauge computed by ``callback`` on export."""
        with self._lock:
            self._gauges[name] = callback

    def get_gauge_value(self, name: str) -> Optional[float]:
        with self._lock:
            callback = self._gauges.get(name)
        return callback() if callback is not None else None

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_prometheus(self) -> str:
        """Render all metrics in the Prometheus text exposition format."""
        with self._lock:
            counters = dict(self._counters)
            gauges = dict(self._gauges)

        lines: List[str] = []
        for name in sorted(counters):
            lines.append(f"# HELP {name} {HELP_TEXTS.get(name, 'Counter metric')}")
            lines.append(f"# TYPE {name} counter")
            lines.append(f"{name} {counters[name]}")

        for name in sorted(gauges):
            try:
                value = self.get_gauge_value(name)
            except Exception:
                logger.warning("metrics.gauge_failed", gauge=name, exc_info=True)
                continue
            lines.append(f"# HELP {name} {HELP_TEXTS.get(name, 'Gauge metric')}")
            lines.append(f"# TYPE {name} gauge")
            lines.append(f"{name} {value}")

        return "\n".join(lines) + "\n" if lines else ""

    def reset_all(self) -> None:
        """Zero every counter (for testing).  Gauges stay registered."""
        with self._lock:
            for name in self._counters:
                self._counters[name] = 0


# Global singleton instance
_metrics_collector: MetricsCollector | None = None
_metrics_lock = Lock()


def get_metrics_collector() -> MetricsCollector:
    global _metrics_collector
    if _metrics_collector is None:
        with _metrics_lock:
            if _metrics_collector is None:
                _metrics_collector = MetricsCollector()
    return _metrics_collector


def reset_metrics() -> None:
    """Reset the global collector's counters (for testing)."""
    with _metrics_lock:
        if _metrics_collector is not None:
            _metrics_collector.reset_all()
