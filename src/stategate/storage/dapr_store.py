"""Dapr sidecar implementation of the StateStore protocol.

Delegates every operation to the Dapr sidecar through the Dapr Python SDK's
async gRPC client. SDK failures surface as StateStoreError so the HTTP layer
can map them uniformly.
"""

from typing import Any, Optional

from dapr.aio.clients import DaprClient

from stategate.storage.base import StateItem
from stategate.storage.errors import StateStoreError


class DaprStateStore:
    """StateStore backed by a Dapr sidecar.

    Attributes:
        _client: Dapr async client used for state calls

    Example:
        >>> store = DaprStateStore.connect()
        >>> await store.save("statestore", "order-1", b"{...}")
        >>> item = await store.get("statestore", "order-1")
        >>> await store.close()
    """

    def __init__(self, client: DaprClient) -> None:
        """Wrap an existing Dapr client.

        Args:
            client: Connected Dapr async client
        """
        self._client = client

    @classmethod
    def connect(cls, address: Optional[str] = None) -> "DaprStateStore":
        """Create a store with a new Dapr client.

        Args:
            address: Sidecar gRPC address; the SDK reads DAPR_GRPC_ENDPOINT
                or DAPR_GRPC_PORT when omitted

        Returns:
            DaprStateStore bound to the sidecar
        """
        return cls(DaprClient(address=address))

    async def get(
        self,
        store_name: str,
        key: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> StateItem:
        """Fetch a key from the sidecar's state store."""
        try:
            response = await self._client.get_state(
                store_name=store_name,
                key=key,
                state_metadata=metadata or {},
            )
        except Exception as e:
            raise StateStoreError(f"get state from '{store_name}' failed", key=key) from e

        value = response.data or None
        return StateItem(key=key, value=value, etag=response.etag or None)

    async def save(
        self,
        store_name: str,
        key: str,
        data: bytes,
        metadata: Optional[dict[str, str]] = None,
        options: Optional[Any] = None,
    ) -> None:
        """Write a key to the sidecar's state store."""
        try:
            await self._client.save_state(
                store_name=store_name,
                key=key,
                value=data,
                options=options,
                state_metadata=metadata or {},
            )
        except Exception as e:
            raise StateStoreError(f"save state to '{store_name}' failed", key=key) from e

    async def delete(
        self,
        store_name: str,
        key: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> None:
        """Delete a key from the sidecar's state store."""
        try:
            await self._client.delete_state(
                store_name=store_name,
                key=key,
                state_metadata=metadata or {},
            )
        except Exception as e:
            raise StateStoreError(f"delete state from '{store_name}' failed", key=key) from e

    async def close(self) -> None:
        """Close the underlying Dapr client."""
        await self._client.close()
