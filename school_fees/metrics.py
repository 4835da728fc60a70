"""Prometheus HTTP request metrics.

Each app gets its own `CollectorRegistry`, so several app instances (one
per test, for example) never share or collide on metric series.
"""

from __future__ import annotations

from typing import Optional

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Histogram, generate_latest

DURATION_BUCKETS = (0.1, 0.5, 1, 2, 5)
LABELS = ("method", "route", "status_code")
# route label for requests no route matched; raw paths would grow the series without bound
UNMATCHED_ROUTE = "<unmatched>"


class RequestMetrics:
    """Request duration histogram and request counter per method/route/status."""

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()
        self.request_duration = Histogram(
            "http_request_duration_seconds",
            "Duration of HTTP requests in seconds",
            LABELS,
            buckets=DURATION_BUCKETS,
            registry=self.registry,
        )
        self.requests_total = Counter(
            "http_requests_total",
            "Total number of HTTP requests",
            LABELS,
            registry=self.registry,
        )

    def observe(self, method: str, route: Optional[str], status_code: int, duration_seconds: float) -> None:
        labels = (method, route or UNMATCHED_ROUTE, str(status_code))
        self.request_duration.labels(*labels).observe(duration_seconds)
        self.requests_total.labels(*labels).inc()

    def render(self) -> bytes:
        """Text exposition format for a Prometheus scraper."""
        return generate_latest(self.registry)
