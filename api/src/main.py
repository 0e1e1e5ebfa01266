"""
FastAPI application entry point for the query-credential auth service.

This module provides:
- The application factory, wiring the injected logger into middleware
  and routes
- Default not-found handling for unmatched paths and methods
- Listener startup on a pre-bound socket, with fatal logging on failure
- Logger flush on every exit path
"""

import socket
import sys
from typing import Any, Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.src.config import Settings, get_settings
from api.src.middleware import MIDDLEWARE
from api.src.models.auth import ErrorResponse
from api.src.routers import auth_check
from shared.logging import (
    LoggerConfigurationError,
    configure_logging,
    log_fatal,
    shutdown_logging,
)


# ============================================================================
# Exception Handlers
# ============================================================================

async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP exceptions as JSON; unsupported methods report as not found."""
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=ErrorResponse(detail="Not Found").model_dump(),
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(detail=str(exc.detail)).model_dump(),
        headers=getattr(exc, "headers", None),
    )


# ============================================================================
# FastAPI Application
# ============================================================================

def create_app(logger: Any, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        logger: Service logger shared by middleware and route handlers
        settings: Application settings (defaults to the cached settings)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.logger = logger

    # add_middleware wraps outermost-last, so register in reverse to run in list order
    for middleware in reversed(MIDDLEWARE):
        app.add_middleware(middleware, logger=logger)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.include_router(auth_check.router)

    return app


# ============================================================================
# Server
# ============================================================================

def bind_socket(host: str, port: int) -> socket.socket:
    """
    Bind a TCP socket for the listener.

    Raises:
        OSError: If the address cannot be bound (e.g. port in use)
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
    except OSError:
        sock.close()
        raise
    sock.set_inheritable(True)
    return sock


def serve(app: FastAPI, settings: Settings, logger: Any) -> None:
    """
    Serve the application until the process is stopped.

    A bind failure is logged at critical level and terminates the process
    with exit code 1.
    """
    logger.info("Starting server", host=settings.host, port=settings.port)

    try:
        sock = bind_socket(settings.host, settings.port)
    except OSError as e:
        log_fatal(logger, "Failed to start server", error=str(e))

    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
        access_log=False,
    )
    server = uvicorn.Server(config)
    try:
        server.run(sockets=[sock])
    finally:
        sock.close()


# ============================================================================
# Application Entry Point
# ============================================================================

def main() -> None:
    """Load settings, build the logger and run the server."""
    try:
        settings = get_settings()
        logger = configure_logging(
            log_level=settings.log_level,
            json_logs=settings.json_logs,
            log_file=settings.log_file,
            max_size_mb=settings.log_max_size_mb,
            max_backups=settings.log_max_backups,
            max_age_days=settings.log_max_age_days,
            compress=settings.log_compress,
        )
    except (ValidationError, LoggerConfigurationError) as e:
        sys.stderr.write(f"Failed to create logger: {e}\n")
        sys.exit(1)

    try:
        serve(create_app(logger, settings), settings, logger)
    finally:
        shutdown_logging()


if __name__ == "__main__":
    main()
