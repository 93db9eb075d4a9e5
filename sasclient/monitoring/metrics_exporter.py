"""Optional Prometheus metrics exporter integration.

Provides a small abstraction that conditionally registers Prometheus metrics
if the `prometheus_client` package is installed. Every observe call is a no-op
otherwise.
"""
from __future__ import annotations

from typing import Optional

try:  # pragma: no cover
    from prometheus_client import Counter, Histogram
except Exception:  # pragma: no cover
    Counter = None  # type: ignore
    Histogram = None  # type: ignore


class MetricsRegistry:
    def __init__(self):
        self.enabled = Counter is not None
        if self.enabled:
            self.submissions = Counter("sas_transactions_total", "Transaction submissions by outcome", ["outcome"])  # type: ignore
            self.rpc_errors = Counter("sas_rpc_errors_total", "Failed RPC calls", ["method", "kind"])  # type: ignore
            self.confirm_seconds = Histogram("sas_confirmation_seconds", "Time from send to requested commitment")  # type: ignore
        else:
            self.submissions = None
            self.rpc_errors = None
            self.confirm_seconds = None

    def observe_submission(self, outcome: str) -> None:
        if not self.enabled:
            return
        self.submissions.labels(outcome=outcome).inc()  # type: ignore

    def observe_rpc_error(self, method: str, kind: str) -> None:
        if not self.enabled:
            return
        self.rpc_errors.labels(method=method, kind=kind).inc()  # type: ignore

    def observe_confirmation(self, seconds: float) -> None:
        if not self.enabled:
            return
        self.confirm_seconds.observe(seconds)  # type: ignore


_registry: Optional[MetricsRegistry] = None


def get_registry() -> MetricsRegistry:
    global _registry
    if _registry is None:
        _registry = MetricsRegistry()
    return _registry


__all__ = ["get_registry", "MetricsRegistry"]
