"""Health check endpoint for monitoring and load balancers.

Liveness only: the response never depends on the state backend.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_class=PlainTextResponse)
async def health_check() -> PlainTextResponse:
    """Return 200 with body ``OK``."""
    return PlainTextResponse("OK", status_code=200)
