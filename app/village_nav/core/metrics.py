from __future__ import annotations

from dataclasses import dataclass

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST

from app.village_nav.core.config import settings


@dataclass
class MetricsSnapshot:
    content: bytes
    content_type: str


class Metrics:
    def __init__(self, enabled: bool | None = None) -> None:
        self.enabled = settings.METRICS_ENABLED if enabled is None else enabled
        self._registry = None
        self._http_requests_total = None
        self._http_request_duration_ms = None
        self._navigation_access_total = None
        self._navigation_cache_lookups_total = None
        self._navigation_errors_total = None
        if self.enabled:
            self._initialize_registry()

    def _initialize_registry(self) -> None:
        self._registry = CollectorRegistry()
        self._http_requests_total = Counter(
            "http_requests_total",
            "HTTP requests by route/method/status.",
            ["route", "method", "status"],
            registry=self._registry,
        )
        self._http_request_duration_ms = Histogram(
            "http_request_duration_ms",
            "HTTP request latency in milliseconds.",
            ["route", "method", "status"],
            buckets=(5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000),
            registry=self._registry,
        )
        self._navigation_access_total = Counter(
            "navigation_access_total",
            "Navigation access decisions by resource type and outcome.",
            ["resource_type", "decision"],
            registry=self._registry,
        )
        self._navigation_cache_lookups_total = Counter(
            "navigation_cache_lookups_total",
            "Navigation cache lookups by cache and result.",
            ["cache", "result"],
            registry=self._registry,
        )
        self._navigation_errors_total = Counter(
            "navigation_errors_total",
            "Navigation errors handled by type.",
            ["type"],
            registry=self._registry,
        )

    def reset(self) -> None:
        if not self.enabled:
            return
        self._initialize_registry()

    def record_http_request(self, *, route: str, method: str, status_code: int, latency_ms: float) -> None:
        if not self.enabled:
            return
        labels = {"route": route, "method": method, "status": str(status_code)}
        self._http_requests_total.labels(**labels).inc()
        self._http_request_duration_ms.labels(**labels).observe(latency_ms)

    def record_access_decision(self, *, resource_type: str, allowed: bool) -> None:
        if not self.enabled:
            return
        decision = "granted" if allowed else "denied"
        self._navigation_access_total.labels(resource_type=resource_type, decision=decision).inc()

    def record_cache_lookup(self, *, cache: str, hit: bool) -> None:
        if not self.enabled:
            return
        self._navigation_cache_lookups_total.labels(cache=cache, result="hit" if hit else "miss").inc()

    def increment_navigation_error(self, error_type: str) -> None:
        if not self.enabled:
            return
        self._navigation_errors_total.labels(type=error_type).inc()

    def render(self) -> MetricsSnapshot:
        if not self.enabled:
            return MetricsSnapshot(content=b"metrics_disabled\n", content_type="text/plain")
        return MetricsSnapshot(content=generate_latest(self._registry), content_type=CONTENT_TYPE_LATEST)


metrics = Metrics()
