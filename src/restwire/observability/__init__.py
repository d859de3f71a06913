"""Observability module for restwire.

Structured logging built on structlog: JSON output for production,
colored console output for development, and context binding shared by
every dispatch.

Example:
    >>> from restwire.observability import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info("restwire.client.response", status_code=200)
"""

from restwire.observability.logging import (
    LoggingSettings,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    is_debug_mode,
)

__all__ = [
    "LoggingSettings",
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_logger",
    "is_debug_mode",
]
