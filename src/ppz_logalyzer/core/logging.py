"""Structured logging configuration for PPZ-Logalyzer.

Events carry the service name, and credential fields (session tokens and
bearer headers) are masked before any renderer sees them.
"""

import logging
import os
import sys
from typing import Any, MutableMapping, Optional

import structlog

SERVICE_NAME = "ppz-logalyzer"
REDACTED = "***"
SENSITIVE_KEYS = frozenset({"token", "authorization", "password", "headers"})

LOG_LEVEL_ENV = "PPZ_LOG_LEVEL"
LOG_JSON_ENV = "PPZ_LOG_JSON"
LOG_FILE_ENV = "PPZ_LOG_FILE"


def add_service_name(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def redact_sensitive_fields(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask values whose key names a credential."""
    for key in event_dict:
        if key.lower() in SENSITIVE_KEYS and event_dict[key] is not None:
            event_dict[key] = REDACTED
    return event_dict


def build_processors(json_format: bool, colors: bool = True) -> list:
    """Processor chain shared by console and JSON output."""
    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        add_service_name,
        redact_sensitive_fields,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_format:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colors))
    return processors


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Whether to output logs in JSON format
        log_file: Optional file path; events go through stdlib logging so
            the file handler receives them
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        logging.getLogger().addHandler(file_handler)
        logger_factory = structlog.stdlib.LoggerFactory()
    else:
        logger_factory = structlog.PrintLoggerFactory()

    structlog.configure(
        processors=build_processors(json_format, colors=log_file is None),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=logger_factory,
        cache_logger_on_first_use=True,
    )


def configure_logging_from_env(
    default_level: str = "INFO", default_json: bool = False
) -> None:
    """Configure logging from PPZ_LOG_LEVEL, PPZ_LOG_JSON and PPZ_LOG_FILE."""
    json_value = os.environ.get(LOG_JSON_ENV)
    json_format = (
        default_json if json_value is None else json_value.strip().lower() in ("1", "true", "yes")
    )
    configure_logging(
        level=os.environ.get(LOG_LEVEL_ENV, default_level),
        json_format=json_format,
        log_file=os.environ.get(LOG_FILE_ENV) or None,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically module name)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)
