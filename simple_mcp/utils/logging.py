"""Structured logging setup."""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any

import structlog

from simple_mcp.config.loader import Settings, get_settings

# Context variable for request ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def get_request_id() -> str:
    """Get the current request ID."""
    return request_id_var.get()


def set_request_id(request_id: str | None = None) -> str:
    """Set the request ID for the current context."""
    if request_id is None:
        request_id = str(uuid.uuid4())[:8]
    request_id_var.set(request_id)
    return request_id


def add_request_id(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add request ID to log records."""
    request_id = get_request_id()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def setup_logging(settings: Settings | None = None) -> None:
    """Set up structured logging."""
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_request_id,
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Also configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger."""
    return structlog.get_logger(name)


class ChannelLogger:
    """Request logger that writes to a named channel and can be switched off."""

    def __init__(self, enabled: bool = True, channel: str = "simple-mcp") -> None:
        self.enabled = enabled
        self.channel = channel

    @property
    def _logger(self) -> structlog.stdlib.BoundLogger:
        # Resolved per call so output follows the configuration set up at startup
        return get_logger(self.channel).bind(channel=self.channel)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ChannelLogger":
        return cls(enabled=settings.logging_enabled, channel=settings.logging_channel)

    def info(self, message: str, **context: Any) -> None:
        if self.enabled:
            self._logger.info(message, **context)

    def debug(self, message: str, **context: Any) -> None:
        if self.enabled:
            self._logger.debug(message, **context)

    def warning(self, message: str, **context: Any) -> None:
        if self.enabled:
            self._logger.warning(message, **context)

    def error(self, message: str, **context: Any) -> None:
        if self.enabled:
            self._logger.error(message, **context)
