"""FastAPI application factory for stategate.

This module provides the application factory pattern for creating
configured FastAPI instances with middleware, routes, error handlers and
the startup/shutdown sequence for telemetry and the state store.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Response
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from stategate import __version__
from stategate.api.middleware.correlation import CorrelationIdMiddleware
from stategate.api.middleware.error_handler import setup_error_handlers
from stategate.api.routes.health import router as health_router
from stategate.api.routes.state import router as state_router
from stategate.config import AppConfig, load_config_from_env
from stategate.observability.logging import get_logger, setup_logging
from stategate.observability.metrics import get_metrics_collector
from stategate.observability.telemetry import TelemetryShutdownError, init_telemetry
from stategate.storage.base import StateStore
from stategate.storage.sidecar import create_state_store

logger = get_logger(__name__)

SIDECAR_PROBE_TIMEOUT_SECONDS = 15.0
TELEMETRY_SHUTDOWN_TIMEOUT_SECONDS = 5.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifespan events.

    Startup sets up logging and telemetry and selects the state store unless
    one was injected. Shutdown runs after the server has drained in-flight
    requests: it closes the store this lifespan created, then flushes
    telemetry with its own bound.

    Args:
        app: FastAPI application instance

    Yields:
        None during application runtime
    """
    config: AppConfig = app.state.config
    setup_logging(log_level=config.log_level, json_logs=config.json_logs)

    shutdown_telemetry = init_telemetry(config.otel_service_name, config.otel_endpoint)

    owns_store = app.state.state_store is None
    if owns_store:
        app.state.state_store = await create_state_store(
            probe_timeout=SIDECAR_PROBE_TIMEOUT_SECONDS
        )

    logger.info(
        "server_starting",
        port=config.port,
        store=config.store_name,
        backend=type(app.state.state_store).__name__,
    )

    try:
        yield
    finally:
        logger.info("shutting_down")
        if owns_store:
            await app.state.state_store.close()

        try:
            await asyncio.to_thread(shutdown_telemetry, TELEMETRY_SHUTDOWN_TIMEOUT_SECONDS)
        except TelemetryShutdownError as e:
            logger.error("telemetry_shutdown_failed", error=str(e))

        logger.info("server_stopped")


def create_app(
    config: Optional[AppConfig] = None,
    store: Optional[StateStore] = None,
) -> FastAPI:
    """Create and configure a FastAPI application instance.

    Args:
        config: Application configuration; loaded from the environment if omitted
        store: State store to serve; selected at startup if omitted

    Returns:
        Configured FastAPI application instance

    Examples:
        >>> app = create_app(store=InMemoryStateStore())
        >>> # uvicorn --factory stategate.api.app:create_app
    """
    config = config or load_config_from_env()

    app = FastAPI(
        title="stategate",
        version=__version__,
        description="HTTP façade over a pluggable key/value state store",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.store_name = config.store_name
    app.state.state_store = store

    app.add_middleware(CorrelationIdMiddleware)  # type: ignore[arg-type]

    setup_error_handlers(app)

    app.include_router(health_router)
    app.include_router(state_router)

    # Prometheus metrics endpoint
    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Prometheus metrics in text exposition format."""
        metrics_data = get_metrics_collector().generate_metrics()
        return Response(
            content=metrics_data,
            media_type="text/plain; version=0.0.4; charset=utf-8",
        )

    # Server span per request, exported once telemetry installs a provider
    FastAPIInstrumentor.instrument_app(app, excluded_urls="health,metrics")

    return app
