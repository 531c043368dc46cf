"""FastAPI dependencies for resolving the state store.

The store and store name are attached to ``app.state`` when the
application is created or started; routes receive them through these
dependencies instead of module-level globals.
"""

from fastapi import Request

from stategate.config import DEFAULT_STORE_NAME
from stategate.storage.base import StateStore


def get_state_store(request: Request) -> StateStore:
    """Get the state store configured for this application.

    Args:
        request: FastAPI request object

    Returns:
        The StateStore selected at startup

    Raises:
        RuntimeError: If the application has no store attached
    """
    store = getattr(request.app.state, "state_store", None)
    if store is None:
        raise RuntimeError("state store not initialized")
    return store


def get_store_name(request: Request) -> str:
    """Get the store name requests are routed to, falling back to the default."""
    return getattr(request.app.state, "store_name", None) or DEFAULT_STORE_NAME
