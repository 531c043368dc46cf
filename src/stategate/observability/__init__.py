"""Observability module for logging, metrics, and telemetry.

This module provides:
- Structured logging with correlation IDs
- Prometheus metrics for HTTP requests and state operations
- OpenTelemetry trace and metric export over OTLP
"""

from stategate.observability.logging import get_logger, setup_logging
from stategate.observability.metrics import MetricsCollector, get_metrics_collector
from stategate.observability.telemetry import TelemetryShutdownError, init_telemetry

__all__ = [
    "setup_logging",
    "get_logger",
    "MetricsCollector",
    "get_metrics_collector",
    "init_telemetry",
    "TelemetryShutdownError",
]
