"""Structured logging for the zip events service."""
import logging
import sys
from typing import Any

import structlog

_service = None


def configure_logging(service: str, environment: str = "development", level: str = "INFO") -> None:
    """
    Configure structlog once per process.

    Args:
        service: Service name attached to every log line
        environment: 'development' for colored console output, anything else for JSON
        level: Minimum log level name (e.g. 'DEBUG', 'WARNING')
    """
    global _service

    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if environment == "development":
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.extend([
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _service = service


def bind_request_context(**values: Any) -> None:
    """Replace the per-request log context; the service name is always kept."""
    structlog.contextvars.clear_contextvars()
    if _service is not None:
        values.setdefault("service", _service)
    structlog.contextvars.bind_contextvars(**values)


def get_logger(name: str) -> Any:
    """Get a structured logger bound to the given module name."""
    return structlog.get_logger(name)
