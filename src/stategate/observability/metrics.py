"""Prometheus metrics collection.

Tracks inbound HTTP traffic and the outcome of every state-store call
made by the router.
"""

from typing import Optional

from prometheus_client import Counter, Histogram, generate_latest

# HTTP request metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    labelnames=["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    labelnames=["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

# State store metrics
state_operations_total = Counter(
    "state_operations_total",
    "Total number of state store operations",
    labelnames=["operation", "outcome"],
)

state_operation_duration_seconds = Histogram(
    "state_operation_duration_seconds",
    "State store operation duration in seconds",
    labelnames=["operation"],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)


class MetricsCollector:
    """Collects and exposes Prometheus metrics."""

    def record_http_request(
        self,
        method: str,
        endpoint: str,
        status_code: int,
        duration_seconds: float,
    ) -> None:
        """Record an HTTP request event.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: Route template, e.g. ``/state/{key}``
            status_code: HTTP status code
            duration_seconds: Request duration in seconds

        Example:
            >>> collector = get_metrics_collector()
            >>> collector.record_http_request("GET", "/state/{key}", 200, 0.002)
        """
        http_requests_total.labels(
            method=method,
            endpoint=endpoint,
            status_code=status_code,
        ).inc()

        http_request_duration_seconds.labels(
            method=method,
            endpoint=endpoint,
        ).observe(duration_seconds)

    def record_state_operation(
        self,
        operation: str,
        outcome: str,
        duration_seconds: float,
    ) -> None:
        """Record a call to the state store.

        Args:
            operation: get, save or delete
            outcome: ok, not_found or error
            duration_seconds: Time spent in the store call
        """
        state_operations_total.labels(operation=operation, outcome=outcome).inc()
        state_operation_duration_seconds.labels(operation=operation).observe(duration_seconds)

    def generate_metrics(self) -> bytes:
        """Generate Prometheus metrics in text exposition format."""
        return generate_latest()


_metrics_collector: Optional[MetricsCollector] = None


def get_metrics_collector() -> MetricsCollector:
    """Get the global MetricsCollector instance."""
    global _metrics_collector
    if _metrics_collector is None:
        _metrics_collector = MetricsCollector()
    return _metrics_collector
