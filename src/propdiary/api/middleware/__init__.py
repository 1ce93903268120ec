"""API middleware."""

from propdiary.api.middleware.error_handler import ErrorHandlerMiddleware
from propdiary.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
