"""Structured logging configuration using structlog.

The rule engine logs through the standard library at debug level and never
configures logging on import, so it stays silent inside host applications
that have not opted in. Call configure_logging() once at application
startup to route those records through structlog. Two output formats are
supported, defaulting to NELSONRULES_LOG_FORMAT:
  - "console" (default): colored, human-readable development output
  - "json": machine-parseable JSON lines for log aggregation
"""

import logging
import sys

import structlog

from nelsonrules.core.config import get_settings


def configure_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """Configure structlog and stdlib logging integration.

    Args:
        log_format: "console" for dev-friendly output, "json" for production.
            Defaults to the NELSONRULES_LOG_FORMAT setting.
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR).
            Defaults to the NELSONRULES_LOG_LEVEL setting.
    """
    settings = get_settings()
    log_format = log_format or settings.log_format
    log_level = log_level or settings.log_level

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

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

    # Records from stdlib loggers (the rule engine included) get the same
    # timestamp/level/name enrichment before rendering
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
