"""In-memory implementation of the StateStore protocol.

Used when no Dapr sidecar is reachable, typically for local development and
tests. Data lives for the lifetime of the process only.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from stategate.storage.base import StateItem


class ReadWriteLock:
    """Asyncio lock allowing many concurrent readers or one writer.

    Readers are not queued behind a waiting writer, so a steady stream of
    readers can starve writers.
    """

    def __init__(self) -> None:
        self._condition = asyncio.Condition()
        self._readers = 0
        self._writer = False

    @asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        """Hold the lock in shared mode."""
        async with self._condition:
            await self._condition.wait_for(lambda: not self._writer)
            self._readers += 1
        try:
            yield
        finally:
            async with self._condition:
                self._readers -= 1
                if self._readers == 0:
                    self._condition.notify_all()

    @asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        """Hold the lock in exclusive mode."""
        async with self._condition:
            await self._condition.wait_for(lambda: not self._writer and self._readers == 0)
            self._writer = True
        try:
            yield
        finally:
            async with self._condition:
                self._writer = False
                self._condition.notify_all()


class InMemoryStateStore:
    """Dictionary-backed implementation of StateStore.

    All stores share one mapping: the store name, metadata and write options
    are accepted for interface compatibility and ignored. There is no
    eviction, TTL or size bound.

    Attributes:
        _data: Mapping of key to payload bytes
        _lock: Reader/writer lock guarding _data
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._data: dict[str, bytes] = {}
        self._lock = ReadWriteLock()

    async def get(
        self,
        store_name: str,
        key: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> StateItem:
        """Return the stored item, with value None if absent or empty."""
        async with self._lock.read():
            value = self._data.get(key)
        if not value:
            return StateItem(key=key, value=None)
        return StateItem(key=key, value=value)

    async def save(
        self,
        store_name: str,
        key: str,
        data: bytes,
        metadata: Optional[dict[str, str]] = None,
        options: Optional[Any] = None,
    ) -> None:
        """Store data under key, overwriting any previous value."""
        async with self._lock.write():
            self._data[key] = bytes(data)

    async def delete(
        self,
        store_name: str,
        key: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> None:
        """Remove key if present."""
        async with self._lock.write():
            self._data.pop(key, None)

    async def close(self) -> None:
        """Nothing to release."""
        return None

    def keys(self) -> list[str]:
        """Return a snapshot of the stored keys."""
        return list(self._data)

    def __len__(self) -> int:
        return len(self._data)
