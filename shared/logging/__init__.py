"""Structured logging module using structlog."""

from .structured_logger import (
    LoggerConfigurationError,
    configure_logging,
    flush_logging,
    get_logger,
    log_fatal,
    shutdown_logging,
)

__all__ = [
    "LoggerConfigurationError",
    "configure_logging",
    "flush_logging",
    "get_logger",
    "log_fatal",
    "shutdown_logging",
]
