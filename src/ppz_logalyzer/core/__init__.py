"""Core utilities for the PPZ-Logalyzer upload core."""

from ppz_logalyzer.core.logging import get_logger, configure_logging, configure_logging_from_env
from ppz_logalyzer.core.errors import (
    LogalyzerError,
    UploadTransportError,
    ConfigurationError,
    AuthenticationRequiredError,
    StateStoreError,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "configure_logging_from_env",
    # Errors
    "LogalyzerError",
    "UploadTransportError",
    "ConfigurationError",
    "AuthenticationRequiredError",
    "StateStoreError",
]
