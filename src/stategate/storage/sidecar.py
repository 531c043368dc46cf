"""Sidecar readiness probe and state store selection.

At startup the server waits a bounded time for the Dapr sidecar to report
healthy. A healthy sidecar gets a DaprStateStore; anything else falls back
to the in-memory store. The choice is made once and never revisited.
"""

import asyncio
import os
import time
from typing import Optional

import httpx

from stategate.observability.logging import get_logger
from stategate.storage.base import StateStore
from stategate.storage.dapr_store import DaprStateStore
from stategate.storage.memory import InMemoryStateStore

logger = get_logger(__name__)

DEFAULT_DAPR_HTTP_PORT = "3500"
HEALTH_PATH = "/v1.0/healthz/outbound"


def sidecar_health_url() -> str:
    """Build the sidecar outbound health URL from DAPR_HTTP_PORT."""
    port = os.getenv("DAPR_HTTP_PORT") or DEFAULT_DAPR_HTTP_PORT
    return f"http://127.0.0.1:{port}{HEALTH_PATH}"


async def wait_for_sidecar(
    timeout: float = 15.0,
    interval: float = 0.5,
    client: Optional[httpx.AsyncClient] = None,
) -> bool:
    """Poll the sidecar health endpoint until it answers 200 or time runs out.

    The probe is skipped entirely when DAPR_GRPC_PORT is unset, since that
    means no sidecar was injected.

    Args:
        timeout: Overall deadline in seconds
        interval: Delay between attempts in seconds
        client: HTTP client to use; a short-lived one is created if omitted

    Returns:
        True if the sidecar reported ready before the deadline
    """
    if not os.getenv("DAPR_GRPC_PORT"):
        return False

    url = sidecar_health_url()
    owns_client = client is None
    http_client = client or httpx.AsyncClient(timeout=httpx.Timeout(2.0))
    deadline = time.monotonic() + timeout

    try:
        while True:
            try:
                response = await http_client.get(url)
            except httpx.HTTPError as e:
                logger.debug("sidecar_probe_failed", url=url, error=str(e))
            else:
                if response.status_code == 200:
                    logger.info("sidecar_ready", url=url)
                    return True
                logger.debug("sidecar_not_ready", url=url, status_code=response.status_code)

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            await asyncio.sleep(min(interval, remaining))
    finally:
        if owns_client:
            await http_client.aclose()


async def create_state_store(probe_timeout: float = 15.0) -> StateStore:
    """Select the state store backend for this process.

    Args:
        probe_timeout: How long to wait for the sidecar, in seconds

    Returns:
        DaprStateStore if the sidecar is ready and the client can be built,
        otherwise a fresh InMemoryStateStore
    """
    if not await wait_for_sidecar(timeout=probe_timeout):
        logger.info("dapr_unavailable", reason="sidecar not ready", store="in-memory")
        return InMemoryStateStore()

    try:
        store = DaprStateStore.connect()
    except Exception as e:
        logger.info("dapr_unavailable", error=str(e), store="in-memory")
        return InMemoryStateStore()

    logger.info("dapr_connected", store="dapr")
    return store
