"""Exceptions raised by state store backends."""

from typing import Optional


class StateStoreError(Exception):
    """Raised when a backend fails to complete a state operation.

    The HTTP layer treats every StateStoreError the same way, so backends
    do not subclass it per failure mode. The original exception is kept as
    ``__cause__``.

    Attributes:
        message: Description of the failed operation
        key: Key the operation was acting on, if any
    """

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.key = key
