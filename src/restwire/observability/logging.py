"""Structured logging for restwire.

Dispatch events are emitted through structlog and routed into the standard
``logging`` module, so applications (and pytest's ``caplog``) see them like
any other record. Two renderers are available: colored console output for
development and one JSON object per line for production.

Settings are read from the environment unless passed explicitly:

    RESTWIRE_LOG_FORMAT: "console" (default) or "json"
    RESTWIRE_LOG_LEVEL: DEBUG, INFO (default), WARNING, ERROR
    RESTWIRE_DEBUG: "true"/"1"/"yes"/"on" logs header values unredacted

Example:
    >>> from restwire.observability.logging import configure_logging, get_logger
    >>>
    >>> configure_logging(log_format="json", log_level="DEBUG")
    >>> logger = get_logger("restwire.client")
    >>> logger.info("restwire.client.send", method="GET", target_url="https://api.example.com/items")
"""

import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from typing import IO, Any

import structlog
from structlog.typing import Processor

ENV_LOG_FORMAT = "RESTWIRE_LOG_FORMAT"
ENV_LOG_LEVEL = "RESTWIRE_LOG_LEVEL"
ENV_DEBUG = "RESTWIRE_DEBUG"

_TRUTHY = frozenset({"true", "1", "yes", "on"})

# Handler installed by the last configure_logging() call
_installed_handler: logging.Handler | None = None


@dataclass(frozen=True)
class LoggingSettings:
    """Resolved logging configuration.

    Attributes:
        log_format: "console" or "json"; anything else renders as console
        log_level: Standard level name; unknown names fall back to INFO
        debug: Whether sensitive header values are logged unredacted
    """

    log_format: str = "console"
    log_level: str = "INFO"
    debug: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "LoggingSettings":
        """Read settings from ``environ`` (``os.environ`` by default)."""
        env = os.environ if environ is None else environ
        return cls(
            log_format=env.get(ENV_LOG_FORMAT, cls.log_format).strip().lower(),
            log_level=env.get(ENV_LOG_LEVEL, cls.log_level).strip().upper(),
            debug=env.get(ENV_DEBUG, "").strip().lower() in _TRUTHY,
        )

    @property
    def level_number(self) -> int:
        level = logging.getLevelName(self.log_level)
        return level if isinstance(level, int) else logging.INFO


def is_debug_mode() -> bool:
    """Return True if RESTWIRE_DEBUG is set to a truthy value."""
    return LoggingSettings.from_env().debug


def _pre_chain() -> list[Processor]:
    # Shared by structlog events and foreign stdlib records
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderers(log_format: str) -> list[Processor]:
    if log_format == "json":
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    return [
        structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )
    ]


def configure_logging(
    log_format: str | None = None,
    log_level: str | None = None,
    force: bool = False,
    stream: IO[str] | None = None,
) -> None:
    """Route restwire's structlog events through a stdlib handler.

    Explicit arguments win over the environment. Repeated calls are no-ops
    unless ``force`` is set; a forced call replaces the handler installed
    by the previous one and leaves other handlers in place.

    Args:
        log_format: "json" or "console"
        log_level: Minimum level name for the root logger
        force: Reconfigure even if already configured
        stream: Output stream for the handler (default: stdout)
    """
    global _installed_handler

    if _installed_handler is not None and not force:
        return

    env = LoggingSettings.from_env()
    settings = LoggingSettings(
        log_format=(log_format or env.log_format).lower(),
        log_level=(log_level or env.log_level).upper(),
        debug=env.debug,
    )
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_renderers(settings.log_format),
            ],
        )
    )

    root_logger = logging.getLogger()
    if _installed_handler is not None:
        root_logger.removeHandler(_installed_handler)
    root_logger.addHandler(handler)
    root_logger.setLevel(settings.level_number)
    _installed_handler = handler


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger named ``name``, configuring logging on first use."""
    if _installed_handler is None:
        configure_logging()
    return structlog.stdlib.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Attach key/value pairs to every event logged from the current context.

    Example:
        >>> bind_context(request_id="req_123")
        >>> logger.info("restwire.client.send")  # includes request_id
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop everything attached with bind_context()."""
    structlog.contextvars.clear_contextvars()
