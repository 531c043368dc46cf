"""State routes: get, save and delete a key in the configured store.

Payloads travel as raw bytes in both directions. Each request makes exactly
one store call, and any store failure becomes a 500 with a fixed body; the
key and the underlying cause go to the logs only.
"""

import time
from typing import Awaitable, TypeVar

from fastapi import APIRouter, Depends, Request, Response, status
from opentelemetry import trace
from starlette.requests import ClientDisconnect

from stategate.api.dependencies import get_state_store, get_store_name
from stategate.api.errors import (
    BackendError,
    BodyReadError,
    MissingKeyError,
    StateNotFoundError,
)
from stategate.observability.logging import get_logger
from stategate.observability.metrics import get_metrics_collector
from stategate.storage.base import StateItem, StateStore
from stategate.storage.errors import StateStoreError

logger = get_logger(__name__)
tracer = trace.get_tracer(__name__)
router = APIRouter(prefix="/state", tags=["state"])

OCTET_STREAM = "application/octet-stream"

T = TypeVar("T")


async def _call_store(operation: str, store_name: str, key: str, call: Awaitable[T]) -> T:
    """Await one store call inside a span, recording metrics and failures.

    Raises:
        BackendError: If the store raised StateStoreError
    """
    start = time.perf_counter()
    metrics = get_metrics_collector()

    with tracer.start_as_current_span(
        f"state.{operation}",
        attributes={"state.store": store_name, "state.key": key},
    ):
        try:
            result = await call
        except StateStoreError as e:
            metrics.record_state_operation(operation, "error", time.perf_counter() - start)
            logger.error(
                f"{operation}_state_failed",
                key=key,
                store=store_name,
                error=str(e.__cause__ or e),
            )
            raise BackendError() from e

    outcome = "ok"
    if isinstance(result, StateItem) and not result.found:
        outcome = "not_found"
    metrics.record_state_operation(operation, outcome, time.perf_counter() - start)
    return result


# An empty key segment never reaches the store
@router.api_route("/", methods=["GET", "POST", "DELETE"], include_in_schema=False)
async def missing_key() -> Response:
    """Reject requests whose key segment is empty."""
    raise MissingKeyError()


@router.get("/{key}", response_class=Response)
async def get_state(
    key: str,
    store: StateStore = Depends(get_state_store),
    store_name: str = Depends(get_store_name),
) -> Response:
    """Return the raw value stored under key.

    Returns:
        200 with the value as application/octet-stream

    Raises:
        StateNotFoundError: If the key is absent or its value is empty
        BackendError: If the store fails
    """
    if not key:
        raise MissingKeyError()

    item = await _call_store("get", store_name, key, store.get(store_name, key))
    if not item.found:
        raise StateNotFoundError(key)

    return Response(content=item.value, status_code=status.HTTP_200_OK, media_type=OCTET_STREAM)


@router.post("/{key}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def save_state(
    key: str,
    request: Request,
    store: StateStore = Depends(get_state_store),
    store_name: str = Depends(get_store_name),
) -> Response:
    """Store the request body under key, replacing any previous value.

    Raises:
        BodyReadError: If the client disconnects before the body is read
        BackendError: If the store fails
    """
    if not key:
        raise MissingKeyError()

    try:
        data = await request.body()
    except ClientDisconnect as e:
        raise BodyReadError() from e

    await _call_store("save", store_name, key, store.save(store_name, key, data))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{key}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_state(
    key: str,
    store: StateStore = Depends(get_state_store),
    store_name: str = Depends(get_store_name),
) -> Response:
    """Delete key. Deleting a missing key also returns 204.

    Raises:
        BackendError: If the store fails
    """
    if not key:
        raise MissingKeyError()

    await _call_store("delete", store_name, key, store.delete(store_name, key))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
