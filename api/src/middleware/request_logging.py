"""
Request logging middleware for FastAPI.

Records one debug event per inbound request, before any route handler
runs, carrying the client address, method, path and raw query string.
"""

from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from api.src.dependencies import get_client_ip


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware that logs every request, matched route or not."""

    def __init__(self, app: ASGIApp, logger: Any):
        """
        Initialize request logging middleware.

        Args:
            app: ASGI application to wrap
            logger: Service logger the request events are written to
        """
        super().__init__(app)
        self.logger = logger

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        self.logger.debug(
            "Request",
            ip=get_client_ip(request),
            method=request.method,
            path=request.url.path,
            query=request.url.query,
        )
        return await call_next(request)
