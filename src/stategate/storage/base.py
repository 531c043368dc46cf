"""Abstract state store interface.

This module defines the StateItem record and the StateStore Protocol,
enabling different storage backends to serve the HTTP router without code
changes.
"""

from dataclasses import dataclass
from typing import Any, Optional, Protocol


@dataclass(frozen=True)
class StateItem:
    """Value stored for one key in one store.

    A ``None`` or zero-length value means the key was not found. A stored
    empty payload therefore reads back the same as a missing key.

    Attributes:
        key: The key that was looked up
        value: Raw payload bytes, or None when not found
        etag: Backend version tag, if the backend provides one
    """

    key: str
    value: Optional[bytes] = None
    etag: Optional[str] = None

    @property
    def found(self) -> bool:
        """Whether the item holds a non-empty payload."""
        return bool(self.value)


class StateStore(Protocol):
    """Protocol for key/value state operations.

    Every operation is keyed by a store name and a string key and moves
    opaque byte payloads. Implementations raise StateStoreError for backend
    faults only; absence of a key is never an error.
    """

    async def get(
        self,
        store_name: str,
        key: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> StateItem:
        """Retrieve the item stored under a key.

        Args:
            store_name: Logical store to read from
            key: Key to look up
            metadata: Backend-specific request metadata

        Returns:
            StateItem whose value is None or empty when the key is absent

        Raises:
            StateStoreError: If the backend cannot be reached or fails
        """
        ...

    async def save(
        self,
        store_name: str,
        key: str,
        data: bytes,
        metadata: Optional[dict[str, str]] = None,
        options: Optional[Any] = None,
    ) -> None:
        """Store a payload under a key, replacing any previous value.

        Args:
            store_name: Logical store to write to
            key: Key to write
            data: Raw payload bytes
            metadata: Backend-specific request metadata
            options: Backend-specific write options

        Raises:
            StateStoreError: If the backend cannot be reached or fails
        """
        ...

    async def delete(
        self,
        store_name: str,
        key: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> None:
        """Remove a key. Deleting a missing key succeeds.

        Args:
            store_name: Logical store to delete from
            key: Key to remove
            metadata: Backend-specific request metadata

        Raises:
            StateStoreError: If the backend cannot be reached or fails
        """
        ...

    async def close(self) -> None:
        """Release any resources held by the backend."""
        ...
