"""Prometheus request metrics.

Each application owns its own ``CollectorRegistry`` so that tests can build
independent apps without colliding on metric names in the global registry.
"""

from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)


class RequestMetrics:
    """Request counter and latency histogram for the HTTP layer."""

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()
        self.requests_total = Counter(
            "http_requests_total",
            "Total number of HTTP requests",
            ["path", "method"],
            registry=self.registry,
        )
        self.request_duration = Histogram(
            "http_request_duration_seconds",
            "Duration of HTTP requests",
            ["path"],
            registry=self.registry,
        )

    def observe(self, path: str, method: str, duration: float) -> None:
        self.requests_total.labels(path=path, method=method).inc()
        self.request_duration.labels(path=path).observe(duration)

    def request_count(self, path: str, method: str) -> float:
        value = self.registry.get_sample_value(
            "http_requests_total", {"path": path, "method": method}
        )
        return value or 0.0

    def render(self) -> bytes:
        """Prometheus text exposition of every metric in the registry."""
        result: bytes = generate_latest(self.registry)
        return result
