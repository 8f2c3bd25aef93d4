"""
Centralized logging configuration for the carrier dashboard.

This module provides consistent logging setup across all modules,
with support for different output formats and log levels.
"""

from __future__ import annotations

import logging
import sys
from types import TracebackType
from typing import Any

# Module-level logger cache
_loggers_configured: bool = False


def configure_logging(
    level: int = logging.INFO,
    verbose: bool = False,
    json_format: bool = False,
) -> None:
    """Configure logging for the entire application.

    This should be called once at application startup.

    Args:
        level: Base logging level (e.g., logging.INFO, logging.WARNING).
        verbose: If True, sets level to DEBUG.
        json_format: If True, uses JSON-formatted output.
    """
    global _loggers_configured

    if verbose:
        level = logging.DEBUG

    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    if json_format:
        log_format = (
            '{"timestamp": "%(asctime)s", "logger": "%(name)s", '
            '"level": "%(levelname)s", "message": "%(message)s"}'
        )

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    _configure_third_party_loggers()

    _loggers_configured = True


def _configure_third_party_loggers() -> None:
    """Configure logging levels for third-party libraries."""
    # Connection pool chatter on every poll tick
    logging.getLogger("urllib3").setLevel(logging.ERROR)
    logging.getLogger("urllib3.connectionpool").setLevel(logging.ERROR)

    logging.getLogger("requests").setLevel(logging.WARNING)

    # Access lines come from our own middleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the specified name.

    Ensures logging is configured before returning the logger.

    Args:
        name: Logger name, typically __name__ of the calling module.

    Returns:
        Configured Logger instance.
    """
    if not _loggers_configured:
        configure_logging()

    return logging.getLogger(name)


class LogContext:
    """Context manager for temporarily changing log level.

    Usage:
        with LogContext(logging.DEBUG, "xsip_dashboard.sync"):
            # Debug logging enabled for the sync package
            await fetcher.fetch(Resource.STATS)
        # Original log level restored
    """

    def __init__(self, level: int, logger_name: str | None = None) -> None:
        self.level = level
        self.logger_name = logger_name
        self._original_level: int | None = None

    def __enter__(self) -> LogContext:
        logger = logging.getLogger(self.logger_name) if self.logger_name else logging.getLogger()
        self._original_level = logger.level
        logger.setLevel(self.level)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        logger = logging.getLogger(self.logger_name) if self.logger_name else logging.getLogger()
        if self._original_level is not None:
            logger.setLevel(self._original_level)


def log_event(
    logger: logging.Logger,
    level: int,
    event_type: str,
    resource: str,
    message: str,
    **kwargs: Any,
) -> None:
    """Log a structured event with consistent formatting.

    Args:
        logger: Logger instance to use.
        level: Logging level.
        event_type: Type of event (e.g., SNAPSHOT_FETCHED, MUTATION_FAILED).
        resource: Backend resource or page associated with the event.
        message: Human-readable message.
        **kwargs: Additional key-value pairs to include.
    """
    extra_parts = " ".join(f"{k}={v}" for k, v in kwargs.items())
    full_message = f"{event_type} - {resource}: {message}"
    if extra_parts:
        full_message = f"{full_message} [{extra_parts}]"
    logger.log(level, full_message)


class EventType:
    """Standard event types for structured logging."""

    # Snapshot events
    SNAPSHOT_FETCHED = "SNAPSHOT_FETCHED"
    SNAPSHOT_FAILED = "SNAPSHOT_FAILED"
    SNAPSHOT_DISCARDED = "SNAPSHOT_DISCARDED"

    # Mutation events
    MUTATION_SUCCEEDED = "MUTATION_SUCCEEDED"
    MUTATION_FAILED = "MUTATION_FAILED"
    MUTATION_CANCELLED = "MUTATION_CANCELLED"

    # Loop and view events
    POLLER_STARTED = "POLLER_STARTED"
    POLLER_STOPPED = "POLLER_STOPPED"
    NAVIGATED = "NAVIGATED"
