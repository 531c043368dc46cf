"""API route modules."""

from stategate.api.routes.health import router as health_router
from stategate.api.routes.state import router as state_router

__all__ = ["health_router", "state_router"]
