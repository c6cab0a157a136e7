"""
ormadmin structured logging.

JSON or text output with request context injection.
"""

from ormadmin.logging.config import (
    AdminLogger,
    LogFormat,
    LogLevel,
    configure_logging,
    get_logger,
)
from ormadmin.logging.context import (
    ContextFilter,
    LogContext,
    clear_log_context,
    get_log_context,
    with_log_context,
)
from ormadmin.logging.formatters import JSONFormatter, TextFormatter

__all__ = [
    # Configuration
    "configure_logging",
    "get_logger",
    "AdminLogger",
    "LogLevel",
    "LogFormat",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    # Context
    "ContextFilter",
    "LogContext",
    "clear_log_context",
    "get_log_context",
    "with_log_context",
]
