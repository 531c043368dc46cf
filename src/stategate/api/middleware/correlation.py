"""Correlation ID middleware for request tracing.

Attaches a correlation ID to every request, logs request start and
completion, and records HTTP metrics.
"""

import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from stategate.observability.logging import (
    clear_correlation_id,
    get_logger,
    set_correlation_id,
)
from stategate.observability.metrics import get_metrics_collector

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
UNMATCHED_ENDPOINT = "unmatched"


def _route_template(request: Request) -> str:
    # Label by route template; raw paths would grow the registry without bound
    route = request.scope.get("route")
    return getattr(route, "path", UNMATCHED_ENDPOINT)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware to inject correlation IDs into requests.

    Reuses the caller's X-Correlation-ID header when present, otherwise
    generates one, and echoes it on the response.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Process request with correlation ID.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            HTTP response with correlation ID header
        """
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        set_correlation_id(correlation_id)
        start_time = time.perf_counter()

        logger.debug("request_started", method=request.method, path=request.url.path)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
                duration_ms=int((time.perf_counter() - start_time) * 1000),
            )
            raise
        finally:
            clear_correlation_id()

        duration_seconds = time.perf_counter() - start_time
        get_metrics_collector().record_http_request(
            method=request.method,
            endpoint=_route_template(request),
            status_code=response.status_code,
            duration_seconds=duration_seconds,
        )

        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=int(duration_seconds * 1000),
            correlation_id=correlation_id,
        )

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
