"""
Logging configuration for ormadmin.
"""

from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import Any, TextIO

from ormadmin.logging.context import ContextFilter
from ormadmin.logging.formatters import JSONFormatter, TextFormatter

ROOT_LOGGER_NAME = "ormadmin"


class LogLevel(str, Enum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log format options."""

    JSON = "json"
    TEXT = "text"


class AdminLogger:
    """
    Logger wrapper that accepts structured fields as keyword arguments.

    Example:
        logger = AdminLogger("ormadmin.query")
        logger.warning("Filter ignored", property_name="age", reason="unparsable literal")
    """

    def __init__(self, name: str) -> None:
        self._logger = logging.getLogger(name)

    @property
    def name(self) -> str:
        return self._logger.name

    def _log(
        self,
        level: int,
        msg: str,
        *args: Any,
        exc_info: bool | BaseException | None = None,
        **kwargs: Any,
    ) -> None:
        self._logger.log(level, msg, *args, exc_info=exc_info, extra=kwargs)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(
        self,
        msg: str,
        *args: Any,
        exc_info: bool | BaseException | None = None,
        **kwargs: Any,
    ) -> None:
        self._log(logging.ERROR, msg, *args, exc_info=exc_info, **kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, *args, exc_info=True, **kwargs)

    def is_enabled_for(self, level: int | LogLevel) -> bool:
        if isinstance(level, LogLevel):
            level = getattr(logging, level.value)
        return self._logger.isEnabledFor(level)


def get_logger(name: str) -> AdminLogger:
    """
    Get an ormadmin logger by name.

    Args:
        name: Logger name (typically the module name, e.g. "ormadmin.query")
    """
    return AdminLogger(name)


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    format: LogFormat | str = LogFormat.JSON,
    output: TextIO | None = None,
    include_context: bool = True,
    use_colors: bool = True,
) -> None:
    """
    Configure ormadmin logging.

    Should be called once at application startup, next to the rest of the
    admin wiring.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format (json for production, text for development)
        output: Output stream (defaults to stderr)
        include_context: Whether to inject request context fields
        use_colors: Whether to use colors in text format (ignored for JSON)

    Example:
        configure_logging(level="DEBUG", format="text")
    """
    if isinstance(level, str):
        level = LogLevel(level.upper())
    if isinstance(format, str):
        format = LogFormat(format.lower())
    if output is None:
        output = sys.stderr

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(getattr(logging, level.value))
    root_logger.handlers.clear()

    handler = logging.StreamHandler(output)
    handler.setLevel(getattr(logging, level.value))

    if format == LogFormat.JSON:
        handler.setFormatter(JSONFormatter(include_extra=True))
    else:
        handler.setFormatter(TextFormatter(use_colors=use_colors))

    if include_context:
        handler.addFilter(ContextFilter())

    root_logger.addHandler(handler)
    root_logger.propagate = False
