"""Error handling for the FastAPI application.

Converts API exceptions into plain-text responses with fixed messages. No
internal error detail is ever written to a response body.
"""

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from stategate.api.errors import StateAPIError
from stategate.observability.logging import get_logger

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "internal error"


def setup_error_handlers(app: FastAPI) -> None:
    """Configure exception handlers for the FastAPI application.

    Args:
        app: The FastAPI application instance to configure
    """

    @app.exception_handler(StateAPIError)
    async def handle_api_error(request: Request, exc: StateAPIError) -> PlainTextResponse:
        """Render a StateAPIError with its fixed message and status code."""
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def handle_generic_error(request: Request, exc: Exception) -> PlainTextResponse:
        """Log an unexpected exception and return a generic 500."""
        logger.error(
            "unhandled_exception",
            method=request.method,
            path=request.url.path,
            error=str(exc),
            exc_info=exc,
        )
        return PlainTextResponse(INTERNAL_ERROR_MESSAGE, status_code=500)
