"""API middleware for request/response processing."""

from standupsync.api.middleware.cors import configure_cors
from standupsync.api.middleware.error_handler import (
    error_handling_middleware,
    request_validation_handler,
)
from standupsync.api.middleware.observability import RequestLoggingMiddleware
from standupsync.api.middleware.request_id import RequestIdMiddleware

__all__ = [
    "configure_cors",
    "error_handling_middleware",
    "request_validation_handler",
    "RequestIdMiddleware",
    "RequestLoggingMiddleware",
]
