"""Tests for the sidecar readiness probe and backend selection."""

from unittest.mock import patch

import httpx
import pytest

from stategate.storage.dapr_store import DaprStateStore
from stategate.storage.memory import InMemoryStateStore
from stategate.storage.sidecar import create_state_store, sidecar_health_url, wait_for_sidecar


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestSidecarHealthUrl:
    """Tests for sidecar_health_url."""

    def test_default_port(self) -> None:
        assert sidecar_health_url() == "http://127.0.0.1:3500/v1.0/healthz/outbound"

    def test_custom_port(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DAPR_HTTP_PORT", "3600")
        assert sidecar_health_url() == "http://127.0.0.1:3600/v1.0/healthz/outbound"


class TestWaitForSidecar:
    """Tests for wait_for_sidecar."""

    @pytest.mark.asyncio
    async def test_skipped_without_grpc_port(self) -> None:
        """No DAPR_GRPC_PORT means no sidecar and no HTTP call."""
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200)

        async with _client(handler) as client:
            assert await wait_for_sidecar(client=client) is False
        assert calls == []

    @pytest.mark.asyncio
    async def test_ready_on_first_200(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A 200 from the health endpoint reports ready."""
        monkeypatch.setenv("DAPR_GRPC_PORT", "50001")
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200)

        async with _client(handler) as client:
            assert await wait_for_sidecar(timeout=1.0, interval=0.01, client=client) is True
        assert seen == ["http://127.0.0.1:3500/v1.0/healthz/outbound"]

    @pytest.mark.asyncio
    async def test_polls_until_ready(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Connection errors and non-200 answers are retried until 200."""
        monkeypatch.setenv("DAPR_GRPC_PORT", "50001")
        attempts = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal attempts
            attempts += 1
            if attempts == 1:
                raise httpx.ConnectError("refused", request=request)
            if attempts == 2:
                return httpx.Response(500)
            return httpx.Response(200)

        async with _client(handler) as client:
            assert await wait_for_sidecar(timeout=2.0, interval=0.01, client=client) is True
        assert attempts == 3

    @pytest.mark.asyncio
    async def test_gives_up_at_deadline(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The probe returns False once the deadline passes."""
        monkeypatch.setenv("DAPR_GRPC_PORT", "50001")

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        async with _client(handler) as client:
            assert await wait_for_sidecar(timeout=0.05, interval=0.01, client=client) is False


class TestCreateStateStore:
    """Tests for create_state_store."""

    @pytest.mark.asyncio
    async def test_falls_back_when_sidecar_absent(self) -> None:
        store = await create_state_store(probe_timeout=0.1)
        assert isinstance(store, InMemoryStateStore)

    @pytest.mark.asyncio
    async def test_uses_dapr_when_ready(self) -> None:
        dapr_store = DaprStateStore(client=object())  # type: ignore[arg-type]
        with patch("stategate.storage.sidecar.wait_for_sidecar", return_value=True), patch(
            "stategate.storage.sidecar.DaprStateStore.connect", return_value=dapr_store
        ):
            store = await create_state_store()

        assert store is dapr_store

    @pytest.mark.asyncio
    async def test_falls_back_when_client_construction_fails(self) -> None:
        with patch("stategate.storage.sidecar.wait_for_sidecar", return_value=True), patch(
            "stategate.storage.sidecar.DaprStateStore.connect",
            side_effect=RuntimeError("no sidecar"),
        ):
            store = await create_state_store()

        assert isinstance(store, InMemoryStateStore)
