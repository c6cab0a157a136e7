"""
Context and set discovery.

A context is a SQLAlchemy declarative base; its sets are the classes mapped
in the base's registry. Discovery runs once at startup and its result never
changes afterwards.
"""

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, Field
from sqlalchemy.orm import DeclarativeBase

from ormadmin.core.errors import ConfigurationError
from ormadmin.logging import get_logger

logger = get_logger(__name__)


class SetInfo(BaseModel):
    """A discovered set: one mapped record type."""

    record_type: type[Any]

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @property
    def name(self) -> str:
        return self.record_type.__name__


class ContextInfo(BaseModel):
    """
    A discovered context and its sets, in table definition order.

    Names are the type names; policy identities and navigation paths are
    derived from them independently.
    """

    context_type: type[Any]
    sets: tuple[SetInfo, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @property
    def name(self) -> str:
        return self.context_type.__name__

    def get_set(self, name_or_type: str | type) -> SetInfo | None:
        for set_info in self.sets:
            if set_info.record_type is name_or_type or set_info.name == name_or_type:
                return set_info
        return None

    def record_types(self) -> list[type]:
        return [s.record_type for s in self.sets]


def discover_context(base: type) -> ContextInfo:
    """
    Discover the sets mapped under a declarative base.

    Args:
        base: A DeclarativeBase subclass

    Raises:
        ConfigurationError: If base is not a declarative base
    """
    registry = getattr(base, "registry", None)
    metadata = getattr(base, "metadata", None)
    if not isinstance(base, type) or registry is None or metadata is None:
        raise ConfigurationError(
            f"'{getattr(base, '__name__', base)}' is not a declarative base",
            details={"context": getattr(base, "__name__", str(base))},
        )
    if base is DeclarativeBase:
        raise ConfigurationError("Subclass DeclarativeBase to define a context")

    table_order = {table: index for index, table in enumerate(metadata.tables.values())}
    mappers = sorted(
        registry.mappers,
        key=lambda m: (table_order.get(m.local_table, len(table_order)), m.class_.__name__),
    )

    context = ContextInfo(
        context_type=base,
        sets=tuple(SetInfo(record_type=m.class_) for m in mappers),
    )
    logger.debug(
        "Context discovered",
        context_name=context.name,
        set_count=len(context.sets),
    )
    return context


def discover_contexts(bases: Iterable[type]) -> list[ContextInfo]:
    """Discover several contexts; names must be unique."""
    contexts = [discover_context(base) for base in bases]
    names = [c.name for c in contexts]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ConfigurationError(
            f"Duplicate context names: {', '.join(duplicates)}",
            details={"contexts": duplicates},
        )
    return contexts
