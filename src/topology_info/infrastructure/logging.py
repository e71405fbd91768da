"""Structured logging configuration.

Application code logs structlog events; the domain services log through
the standard library. Both end up on one handler with one renderer, so a
run's output is uniformly JSON (or console) lines.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Optional, TextIO

import structlog
from structlog.types import EventDict, Processor

from topology_info.infrastructure.config import ObservabilityConfig

# Handler installed by the last setup_logging() call
_handler: Optional[logging.Handler] = None


def add_service_context(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Tag every entry with the service name."""
    event_dict.setdefault("service", "topology_info")
    return event_dict


def setup_logging(
    config: Optional[ObservabilityConfig] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Route structlog and standard library logging through one renderer.

    Calling it again replaces the handler installed by the previous call
    and leaves other root handlers alone.

    Args:
        config: Log level and format, defaults to ObservabilityConfig()
        stream: Output stream, defaults to stderr
    """
    global _handler
    config = config or ObservabilityConfig()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_service_context,
    ]

    if config.log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    if _handler is not None:
        root_logger.removeHandler(_handler)
    root_logger.addHandler(handler)
    root_logger.setLevel(config.log_level)
    _handler = handler


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.stdlib.BoundLogger:
    """
    Get a bound logger instance.

    Args:
        name: Logger name (module name typically)
        **initial_context: Initial context to bind to the logger

    Returns:
        A bound structlog logger
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
