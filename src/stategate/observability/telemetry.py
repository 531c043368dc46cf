"""OpenTelemetry trace and metric export.

init_telemetry() installs global tracer and meter providers that export over
OTLP/HTTP, and returns a shutdown callable that flushes them. When no
exporter endpoint is configured the OpenTelemetry API stays on its no-op
providers and the returned shutdown does nothing.
"""

import time
from typing import Callable, Optional
from urllib.parse import urlparse

from opentelemetry import metrics, propagate, trace
from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from stategate.observability.logging import get_logger

logger = get_logger(__name__)

DEFAULT_OTLP_ENDPOINT = "localhost:4318"

ShutdownFn = Callable[[float], None]


class TelemetryShutdownError(Exception):
    """Raised when flushing or closing an exporter fails during shutdown.

    Attributes:
        errors: Every failure collected while shutting down
    """

    def __init__(self, errors: list[Exception]) -> None:
        super().__init__(f"telemetry shutdown failed: {errors[0]}")
        self.errors = errors


def parse_endpoint(endpoint: str) -> str:
    """Normalise an OTLP endpoint to an ``http://host:port`` base URL.

    Accepts either a bare ``host:port`` or a full URL; any path on a full URL
    is dropped since the per-signal paths are appended by the exporters.

    Example:
        >>> parse_endpoint("http://otel-collector:4318/")
        'http://otel-collector:4318'
        >>> parse_endpoint("collector:4318")
        'http://collector:4318'
        >>> parse_endpoint("")
        'http://localhost:4318'
    """
    endpoint = endpoint.strip()
    if not endpoint:
        endpoint = DEFAULT_OTLP_ENDPOINT

    parsed = urlparse(endpoint)
    if parsed.scheme in ("http", "https") and parsed.netloc:
        return f"{parsed.scheme}://{parsed.netloc}"
    return f"http://{endpoint.rstrip('/')}"


def _new_resource(service_name: str) -> Resource:
    # Resource.create merges the SDK defaults (telemetry.sdk.*) with ours
    return Resource.create({SERVICE_NAME: service_name})


def _init_tracer(base_url: str, resource: Resource) -> TracerProvider:
    exporter = OTLPSpanExporter(endpoint=f"{base_url}/v1/traces")
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(exporter))
    return provider


def _init_meter(base_url: str, resource: Resource) -> MeterProvider:
    exporter = OTLPMetricExporter(endpoint=f"{base_url}/v1/metrics")
    reader = PeriodicExportingMetricReader(exporter)
    return MeterProvider(resource=resource, metric_readers=[reader])


def _noop_shutdown(timeout: float = 5.0) -> None:
    return None


def init_telemetry(service_name: str, endpoint: Optional[str] = None) -> ShutdownFn:
    """Initialise OpenTelemetry trace and metric providers.

    A provider whose exporter cannot be built is skipped with a warning; the
    other one is still installed.

    Args:
        service_name: Value of the ``service.name`` resource attribute
        endpoint: OTLP/HTTP collector endpoint; empty or None disables export

    Returns:
        Callable taking a timeout in seconds that flushes and closes the
        installed providers. It raises TelemetryShutdownError carrying every
        failure if any step fails.
    """
    if not endpoint:
        logger.info("telemetry_disabled", reason="OTEL_EXPORTER_OTLP_ENDPOINT not set")
        return _noop_shutdown

    base_url = parse_endpoint(endpoint)
    resource = _new_resource(service_name)

    tracer_provider: Optional[TracerProvider] = None
    try:
        tracer_provider = _init_tracer(base_url, resource)
    except Exception as e:
        logger.warning("tracer_init_failed", error=str(e))
    else:
        trace.set_tracer_provider(tracer_provider)
        propagate.set_global_textmap(
            CompositePropagator([TraceContextTextMapPropagator(), W3CBaggagePropagator()])
        )

    meter_provider: Optional[MeterProvider] = None
    try:
        meter_provider = _init_meter(base_url, resource)
    except Exception as e:
        logger.warning("meter_init_failed", error=str(e))
    else:
        metrics.set_meter_provider(meter_provider)

    logger.info("telemetry_initialized", endpoint=base_url, service_name=service_name)

    def shutdown(timeout: float = 5.0) -> None:
        deadline = time.monotonic() + timeout
        errors: list[Exception] = []

        def remaining_millis() -> int:
            return max(int((deadline - time.monotonic()) * 1000), 0)

        if tracer_provider is not None:
            try:
                if not tracer_provider.force_flush(timeout_millis=remaining_millis()):
                    errors.append(TimeoutError("span flush timed out"))
                tracer_provider.shutdown()
            except Exception as e:
                errors.append(e)

        if meter_provider is not None:
            try:
                meter_provider.shutdown(timeout_millis=remaining_millis())
            except Exception as e:
                errors.append(e)

        if errors:
            raise TelemetryShutdownError(errors)

    return shutdown
