"""API middleware components.

This module exports middleware for error handling and request correlation.
"""

from stategate.api.middleware.correlation import CorrelationIdMiddleware
from stategate.api.middleware.error_handler import setup_error_handlers

__all__ = ["CorrelationIdMiddleware", "setup_error_handlers"]
