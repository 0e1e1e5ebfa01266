"""
FastAPI dependency injection for request-scoped collaborators.

Provides injectable dependencies for:
- The service logger (constructed once at startup, stored on app.state)
- Client address resolution

All dependencies use FastAPI's dependency injection system and are designed
to be composable and testable.
"""

from typing import Any, Optional

from fastapi import Request


def get_request_logger(request: Request) -> Any:
    """
    Get the service logger attached to the application.

    The logger is built by the entry point and handed to create_app; it is
    never looked up from a module-level global.

    Args:
        request: HTTP request

    Returns:
        The structlog logger stored on ``app.state.logger``
    """
    return request.app.state.logger


def get_client_ip(request: Request) -> Optional[str]:
    """
    Get client IP address from request.

    Checks X-Forwarded-For (first entry) and X-Real-IP for proxied
    requests, then falls back to the socket peer address.

    Args:
        request: HTTP request

    Returns:
        Client IP address or None
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # X-Forwarded-For can contain multiple IPs, get the first one
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    if request.client:
        return request.client.host

    return None
