"""Structured logging configuration using structlog.

JSON lines in production, colored console output in development. Standard
library loggers (uvicorn, sqlalchemy, httpx, anthropic) go through the same
processor chain so every line carries the bound request context.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger


REDACTED = "[REDACTED]"

# Event keys whose values may hold credential material
SECRET_KEYS = frozenset(
    {
        "api_key",
        "key",
        "x-api-key",
        "x_api_key",
        "authorization",
        "anthropic_api_key",
    }
)

QUIET_LOGGERS = ("httpx", "httpcore", "anthropic", "sqlalchemy.engine")


def service_context(service_name: str, version: str) -> Processor:
    """Build a processor stamping service name and version on every event."""

    def _add(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service_name)
        event_dict.setdefault("version", version)
        return event_dict

    return _add


def redact_secrets(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask values of credential-like keys, including inside header dicts."""
    for name, value in list(event_dict.items()):
        if name.lower() in SECRET_KEYS:
            event_dict[name] = REDACTED
        elif isinstance(value, dict):
            event_dict[name] = _redact_mapping(value)
    return event_dict


def _redact_mapping(mapping: dict[str, Any]) -> dict[str, Any]:
    return {
        k: REDACTED if isinstance(k, str) and k.lower() in SECRET_KEYS else v
        for k, v in mapping.items()
    }


def configure_logging(
    log_level: str = "INFO",
    environment: str = "development",
    service_name: str = "reply-qualification-service",
    version: str = "0.1.0",
) -> None:
    """Configure structlog for structured logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        environment: "production" selects the JSON renderer
        service_name: Value of the "service" field on every event
        version: Value of the "version" field on every event
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    is_production = environment.lower() == "production"

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        service_context(service_name, version),
        redact_secrets,
    ]

    if is_production:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )
    handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.get_logger(__name__).info(
        "Logging configured",
        log_level=log_level,
        environment=environment,
        renderer="json" if is_production else "console",
    )
