"""
Log formatters for ormadmin.

JSON for log aggregation, colourised text for local development.
"""

from __future__ import annotations

import json
import logging
import traceback
from datetime import datetime, timezone
from typing import Any

CONTEXT_FIELDS = ("user_id", "request_id", "trace_id", "context_name", "set_name", "action")


class JSONFormatter(logging.Formatter):
    """
    Single-line JSON log formatter.

    Fields included:
    - timestamp, level, logger, message
    - request context fields (user_id, request_id, trace_id,
      context_name, set_name, action) when present
    - exception: type, message and traceback when present
    - extra: any other fields passed to the logger
    """

    STANDARD_FIELDS = {"timestamp", "level", "logger", "message", "exception", *CONTEXT_FIELDS}

    # LogRecord attributes that never belong in "extra"
    EXCLUDE_FIELDS = {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "thread",
        "threadName",
        "exc_info",
        "exc_text",
        "message",
        "taskName",
    }

    def __init__(self, include_extra: bool = True) -> None:
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        log_dict: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_dict[name] = value

        if record.exc_info:
            log_dict["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info),
            }

        if self.include_extra:
            extra = {}
            for key, value in record.__dict__.items():
                if (
                    key in self.EXCLUDE_FIELDS
                    or key in self.STANDARD_FIELDS
                    or key.startswith("_")
                ):
                    continue
                try:
                    json.dumps(value)
                    extra[key] = value
                except (TypeError, ValueError):
                    extra[key] = str(value)
            if extra:
                log_dict["extra"] = extra

        return json.dumps(log_dict, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """
    Human-readable text formatter for development use.
    """

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

        level = record.levelname
        if self.use_colors and level in self.COLORS:
            level = f"{self.COLORS[level]}{level:8}{self.RESET}"
        else:
            level = f"{level:8}"

        context_parts = [
            f"{name}={getattr(record, name)}"
            for name in ("request_id", "context_name", "set_name", "action")
            if getattr(record, name, None) is not None
        ]
        context = f" [{', '.join(context_parts)}]" if context_parts else ""

        log_line = f"{timestamp} {level} {record.name}{context}: {record.getMessage()}"

        if record.exc_info:
            log_line += "\n" + self.formatException(record.exc_info)

        return log_line
