"""Pytest configuration and shared fixtures for the test suite."""

from typing import Iterator

import pytest

from stategate.config import AppConfig
from stategate.storage.memory import InMemoryStateStore


@pytest.fixture(autouse=True)
def no_sidecar_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make sure no test probes a real Dapr sidecar."""
    monkeypatch.delenv("DAPR_GRPC_PORT", raising=False)
    monkeypatch.delenv("DAPR_HTTP_PORT", raising=False)


@pytest.fixture
def app_config() -> AppConfig:
    """Configuration with telemetry export disabled and console logs."""
    return AppConfig(store_name="teststore", otel_endpoint="", json_logs=False)


@pytest.fixture
def memory_store() -> Iterator[InMemoryStateStore]:
    """A fresh in-memory store for each test."""
    yield InMemoryStateStore()
