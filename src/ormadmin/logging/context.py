"""
Logging context management for ormadmin.

Lets request-scoped fields (user, request, context/set being acted on) ride
along with every log message emitted while a request is being served.
"""

from __future__ import annotations

import contextvars
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ormadmin.core.context import RequestContext

_log_context: contextvars.ContextVar[dict[str, Any] | None] = contextvars.ContextVar(
    "ormadmin_log_context",
    default=None,
)


@dataclass
class LogContext:
    """
    Structured logging context.

    Contains fields that should be included in all log messages within
    a specific scope (e.g., one list request).
    """

    user_id: str | None = None
    request_id: str | None = None
    trace_id: str | None = None
    context_name: str | None = None
    set_name: str | None = None
    action: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_request_context(cls, ctx: RequestContext, **fields: Any) -> LogContext:
        """
        Create a LogContext from a RequestContext.

        Args:
            ctx: The request context to extract logging fields from
            **fields: context_name / set_name / action overrides
        """
        return cls(
            user_id=ctx.principal.user_id or None,
            request_id=ctx.request_id,
            trace_id=ctx.trace_id,
            **fields,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary of non-None values."""
        result = {
            key: value
            for key, value in (
                ("user_id", self.user_id),
                ("request_id", self.request_id),
                ("trace_id", self.trace_id),
                ("context_name", self.context_name),
                ("set_name", self.set_name),
                ("action", self.action),
            )
            if value is not None
        }
        result.update(self.extra)
        return result


def get_log_context() -> dict[str, Any]:
    """Get the current log context."""
    ctx = _log_context.get()
    return ctx.copy() if ctx else {}


def clear_log_context() -> None:
    """Clear the current log context."""
    _log_context.set(None)


@contextmanager
def with_log_context(
    context: LogContext | dict[str, Any] | None = None,
    **kwargs: Any,
) -> Iterator[None]:
    """
    Context manager for setting log context within a scope.

    Example:
        with with_log_context(user_id="u-1", set_name="Person"):
            logger.info("Listing records")  # Includes user_id and set_name
    """
    previous = _log_context.get()

    if context is not None:
        new_context = (
            context.to_dict() if isinstance(context, LogContext) else context.copy()
        )
    else:
        new_context = previous.copy() if previous else {}

    new_context.update(kwargs)
    _log_context.set(new_context)

    try:
        yield
    finally:
        _log_context.set(previous)


class ContextFilter(logging.Filter):
    """
    Logging filter that injects context fields into log records.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in get_log_context().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
