"""FastAPI middleware components.

This package contains custom middleware for request processing. MIDDLEWARE
lists them in the order they run ahead of the route handler.
"""

from api.src.middleware.request_logging import RequestLoggingMiddleware

MIDDLEWARE = [
    RequestLoggingMiddleware,
]

__all__ = [
    "MIDDLEWARE",
    "RequestLoggingMiddleware",
]
