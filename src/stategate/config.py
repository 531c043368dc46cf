"""Application configuration loaded from the environment.

Values come from process environment variables, with a ``.env`` file in the
working directory as a fallback source. Unset or empty variables take the
documented defaults; nothing beyond presence is validated.
"""

import os

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PORT = "8080"
DEFAULT_STORE_NAME = "statestore"
DEFAULT_OTEL_SERVICE_NAME = "stategate"


class AppConfig(BaseModel):
    """Server configuration.

    Attributes:
        port: TCP port the HTTP server listens on
        store_name: Name of the state store every request is routed to
        otel_endpoint: OTLP/HTTP collector endpoint (empty = telemetry disabled)
        otel_service_name: service.name reported with traces and metrics
        log_level: Logging level name
        json_logs: Render logs as JSON instead of the console format
    """

    port: str = Field(default=DEFAULT_PORT, description="HTTP listen port")
    store_name: str = Field(default=DEFAULT_STORE_NAME, description="State store name")
    otel_endpoint: str = Field(default="", description="OTLP exporter endpoint")
    otel_service_name: str = Field(
        default=DEFAULT_OTEL_SERVICE_NAME, description="Telemetry service name"
    )
    log_level: str = Field(default="INFO", description="Logging level")
    json_logs: bool = Field(default=True, description="Emit JSON logs")

    model_config = ConfigDict(frozen=True)


def _get_env(key: str, fallback: str) -> str:
    value = os.getenv(key)
    return value if value else fallback


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables.

    Variables from a ``.env`` file are loaded first without overriding
    anything already set in the process environment.

    Reads:
    - APP_PORT: HTTP listen port (default 8080)
    - STATESTORE_NAME: State store name (default statestore)
    - OTEL_EXPORTER_OTLP_ENDPOINT: OTLP collector endpoint (default unset)
    - OTEL_SERVICE_NAME: Telemetry service name (default stategate)
    - LOG_LEVEL: Logging level (default INFO)
    - JSON_LOGS: true/false (default true)

    Returns:
        AppConfig loaded from environment

    Example:
        >>> os.environ["STATESTORE_NAME"] = "orders"
        >>> load_config_from_env().store_name
        'orders'
    """
    load_dotenv(find_dotenv(usecwd=True))

    return AppConfig(
        port=_get_env("APP_PORT", DEFAULT_PORT),
        store_name=_get_env("STATESTORE_NAME", DEFAULT_STORE_NAME),
        otel_endpoint=os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", ""),
        otel_service_name=_get_env("OTEL_SERVICE_NAME", DEFAULT_OTEL_SERVICE_NAME),
        log_level=_get_env("LOG_LEVEL", "INFO"),
        json_logs=_get_env("JSON_LOGS", "true").lower() in ("true", "1", "yes"),
    )
