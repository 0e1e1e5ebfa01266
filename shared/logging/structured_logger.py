"""Structured logging configuration using structlog.

Renders leveled, human-readable log lines to stdout and to a rotating,
compressed log file. Standard library records (uvicorn included) share the
same processor chain, so every line carries the same fields.
"""

import logging
import sys
from typing import Any, List, NoReturn, Optional

import structlog
from structlog.processors import CallsiteParameter
from structlog.types import EventDict, Processor

from shared.logging.rotation import CompressingRotatingFileHandler

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Library loggers written at the service level; everything else passes at WARNING
SERVICE_LOGGERS = ("uvicorn",)

# Handlers installed by configure_logging, released by shutdown_logging
_handlers: List[logging.Handler] = []


class LoggerConfigurationError(Exception):
    """Raised when the logging sinks cannot be built."""


def add_caller(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Collapse call-site filename and line number into a short ``caller`` field.

    Args:
        logger: The logger instance
        method_name: The logging method name
        event_dict: The event dictionary

    Returns:
        Updated event dictionary with ``caller``
    """
    filename = event_dict.pop("filename", None)
    lineno = event_dict.pop("lineno", None)
    if filename:
        event_dict["caller"] = f"{filename}:{lineno}"
    return event_dict


def _shared_processors() -> List[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.CallsiteParameterAdder(
            {CallsiteParameter.FILENAME, CallsiteParameter.LINENO},
            additional_ignores=[__name__],
        ),
        add_caller,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer_chain(json_logs: bool) -> List[Processor]:
    if json_logs:
        return [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [structlog.dev.ConsoleRenderer(colors=False)]


def configure_logging(
    log_level: str = "DEBUG",
    json_logs: bool = False,
    log_file: Optional[str] = "auth.log",
    max_size_mb: int = 500,
    max_backups: int = 3,
    max_age_days: int = 28,
    compress: bool = True,
    service_name: str = "auth-api",
) -> structlog.stdlib.BoundLogger:
    """Configure structured logging and return the service logger.

    Any handlers from a previous call are released first, so calling this
    again replaces the sinks instead of duplicating them.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render JSON instead of console lines
        log_file: Path of the rotating log file, or None for stdout only
        max_size_mb: Rotate the log file when it reaches this size
        max_backups: Number of rotated files to keep
        max_age_days: Remove rotated files older than this (0 keeps them)
        compress: Gzip rotated files
        service_name: Name of the returned logger

    Returns:
        Configured structlog logger

    Raises:
        LoggerConfigurationError: If the level is unknown or the log file
            cannot be opened
    """
    level = log_level.upper()
    if level not in LOG_LEVELS:
        raise LoggerConfigurationError(f"unknown log level: {log_level}")

    shutdown_logging()

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        try:
            handlers.append(
                CompressingRotatingFileHandler(
                    log_file,
                    max_size_mb=max_size_mb,
                    backup_count=max_backups,
                    max_age_days=max_age_days,
                    compress=compress,
                )
            )
        except OSError as e:
            raise LoggerConfigurationError(f"cannot open log file {log_file}: {e}") from e

    shared_processors = _shared_processors()
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *_renderer_chain(json_logs),
        ],
    )

    root_logger = logging.getLogger()
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
        _handlers.append(handler)
    root_logger.setLevel(logging.WARNING)
    for name in (service_name, *SERVICE_LOGGERS):
        logging.getLogger(name).setLevel(getattr(logging, level))

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    return get_logger(service_name)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def flush_logging() -> None:
    """Flush every sink installed by configure_logging."""
    for handler in _handlers:
        handler.flush()


def shutdown_logging() -> None:
    """Flush, close and detach every sink installed by configure_logging."""
    root_logger = logging.getLogger()
    while _handlers:
        handler = _handlers.pop()
        handler.flush()
        handler.close()
        root_logger.removeHandler(handler)


def log_fatal(logger: Any, event: str, **kwargs: Any) -> NoReturn:
    """Record a critical event, flush the sinks and terminate with exit code 1.

    Args:
        logger: Logger to record the event on
        event: Event message
        **kwargs: Structured fields
    """
    logger.critical(event, **kwargs)
    flush_logging()
    raise SystemExit(1)
