"""Shared fixtures for API route tests."""

from typing import Any, Callable, Iterator, Optional

import pytest
import structlog
from fastapi.testclient import TestClient
from structlog.testing import capture_logs

import stategate.api.routes.state as state_routes
from stategate.api.app import create_app
from stategate.config import AppConfig
from stategate.storage.base import StateItem
from stategate.storage.errors import StateStoreError
from stategate.storage.memory import InMemoryStateStore


class RecordingStore:
    """StateStore double that records calls and can be told to fail.

    Mirrors the protocol shape so routes can be tested without a backend.
    """

    def __init__(
        self,
        value: Optional[bytes] = None,
        fail: bool = False,
    ) -> None:
        self.value = value
        self.fail = fail
        self.calls: list[tuple[Any, ...]] = []

    def _maybe_fail(self, key: str) -> None:
        if self.fail:
            try:
                raise ConnectionError("sidecar connection refused")
            except ConnectionError as e:
                raise StateStoreError("backend failure", key=key) from e

    async def get(
        self, store_name: str, key: str, metadata: Optional[dict[str, str]] = None
    ) -> StateItem:
        self.calls.append(("get", store_name, key))
        self._maybe_fail(key)
        return StateItem(key=key, value=self.value)

    async def save(
        self,
        store_name: str,
        key: str,
        data: bytes,
        metadata: Optional[dict[str, str]] = None,
        options: Optional[Any] = None,
    ) -> None:
        self.calls.append(("save", store_name, key, data))
        self._maybe_fail(key)

    async def delete(
        self, store_name: str, key: str, metadata: Optional[dict[str, str]] = None
    ) -> None:
        self.calls.append(("delete", store_name, key))
        self._maybe_fail(key)

    async def close(self) -> None:
        self.calls.append(("close",))


@pytest.fixture
def client(app_config: AppConfig, memory_store: InMemoryStateStore) -> Iterator[TestClient]:
    """TestClient over an app backed by the in-memory store."""
    app = create_app(config=app_config, store=memory_store)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def recording_store() -> RecordingStore:
    """Store double holding no value."""
    return RecordingStore()


@pytest.fixture
def failing_store() -> RecordingStore:
    """Store double whose every call raises StateStoreError."""
    return RecordingStore(fail=True)


@pytest.fixture
def client_for(app_config: AppConfig) -> Callable[[Any], TestClient]:
    """Factory building a TestClient for an app serving the given store."""

    def _make(store: Any) -> TestClient:
        return TestClient(create_app(config=app_config, store=store))

    return _make


@pytest.fixture
def captured_logs(monkeypatch: pytest.MonkeyPatch) -> Iterator[list[dict[str, Any]]]:
    """Capture log events emitted by the state routes.

    The module logger is swapped for a fresh, uncached proxy so the capture
    processor is used even after logging was configured with caching on.
    """
    structlog.reset_defaults()
    monkeypatch.setattr(state_routes, "logger", structlog.get_logger(state_routes.__name__))
    with capture_logs() as logs:
        yield logs
    structlog.reset_defaults()
