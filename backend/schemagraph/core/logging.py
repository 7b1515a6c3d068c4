"""Structured logging configuration for the schema graph engine.

This module configures structlog for consistent, machine-readable logging
across all components, with a per-generation correlation id so every log
line emitted during one generation pass can be tied back to it.
"""

import logging
import sys
import time
from typing import Any
import uuid

import structlog
from structlog.typing import EventDict


def add_app_context(
    _logger: Any, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add application-specific context to log events."""
    event_dict["service"] = "schemagraph"
    event_dict["component"] = event_dict.get("logger", "unknown")
    return event_dict


def add_generation_id(
    _logger: Any, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add the generation correlation id bound for the current request."""
    generation_id = structlog.contextvars.get_contextvars().get("generation_id")
    if generation_id:
        event_dict["generation_id"] = generation_id
    return event_dict


def configure_logging(
    environment: str = "development", log_level: str = "INFO", json_logs: bool = False
) -> None:
    """Configure structured logging for the application.

    Args:
        environment: Application environment (development/production)
        log_level: Logging level (DEBUG/INFO/WARNING/ERROR)
        json_logs: Whether to output JSON format logs
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
    )

    if json_logs or environment == "production":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        add_app_context,
        add_generation_id,
        structlog.processors.format_exc_info,
        renderer,
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a configured structured logger.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables for the current generation request."""
    structlog.contextvars.bind_contextvars(**kwargs)


class GenerationLogger:
    """Logs start, completion and failure of one generation pass.

    Binds a short ``generation_id`` for the duration of the block and
    removes it again on exit.
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        operation: str,
        **context: Any,
    ):
        self.logger = logger
        self.operation = operation
        self.context = context
        self.generation_id = str(uuid.uuid4())[:8]
        self.start_time: float | None = None

    def __enter__(self) -> "GenerationLogger":
        self.start_time = time.perf_counter()
        bind_context(generation_id=self.generation_id)
        self.logger.debug(
            "Generation started", operation=self.operation, **self.context
        )
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        duration = time.perf_counter() - (self.start_time or time.perf_counter())

        if exc_type is None:
            self.logger.info(
                "Generation completed",
                operation=self.operation,
                duration_ms=round(duration * 1000, 2),
                **self.context,
            )
        else:
            self.logger.error(
                "Generation failed",
                operation=self.operation,
                duration_ms=round(duration * 1000, 2),
                error=str(exc_val),
                error_type=exc_type.__name__,
                **self.context,
            )
        structlog.contextvars.unbind_contextvars("generation_id")

    def log_progress(self, message: str, **kwargs: Any) -> None:
        """Log generation progress with context."""
        self.logger.debug(message, operation=self.operation, **kwargs)
