"""Exceptions raised by API routes.

Each error carries the fixed plain-text message the client receives and the
HTTP status code it maps to. Internal causes are never part of the message.
"""


class StateAPIError(Exception):
    """Base exception for all API errors.

    Attributes:
        code: Machine-readable error code
        message: Plain-text body sent to the client
        status_code: HTTP status code for the response
    """

    def __init__(self, message: str, code: str, status_code: int) -> None:
        """Initialize API error.

        Args:
            message: Plain-text body sent to the client
            code: Machine-readable error code
            status_code: HTTP status code (400, 404, 500)
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


class MissingKeyError(StateAPIError):
    """Raised when the request path has an empty key segment."""

    def __init__(self) -> None:
        super().__init__(message="missing key", code="missing_key", status_code=400)


class BodyReadError(StateAPIError):
    """Raised when the request body cannot be read."""

    def __init__(self) -> None:
        super().__init__(message="read body failed", code="body_read_failed", status_code=400)


class StateNotFoundError(StateAPIError):
    """Raised when a key has no value in the store."""

    def __init__(self, key: str) -> None:
        super().__init__(message="not found", code="not_found", status_code=404)
        self.key = key


class BackendError(StateAPIError):
    """Raised when the state store fails; details stay in the logs."""

    def __init__(self) -> None:
        super().__init__(message="internal error", code="internal_error", status_code=500)
