"""State store backends.

The router talks to storage only through the StateStore protocol. Two
implementations exist: a Dapr sidecar-backed store and an in-memory store
used when no sidecar is reachable.
"""

from stategate.storage.base import StateItem, StateStore
from stategate.storage.errors import StateStoreError
from stategate.storage.memory import InMemoryStateStore

__all__ = ["StateItem", "StateStore", "StateStoreError", "InMemoryStateStore"]
