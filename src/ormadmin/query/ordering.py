"""
Sort key compilation.

Sorting is a list-view convenience: anything that cannot be sorted
(unknown name, relations, JSON/binary columns, direction NONE) compiles to
no ordering at all instead of failing.
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import Select, case

from ormadmin.core.dsl import SortDirection, SortSpec
from ormadmin.logging import get_logger
from ormadmin.query.introspection import RecordIntrospector

logger = get_logger(__name__)


class OrderingBuilder:
    """
    Compiles SortSpecs into ORDER BY keys.
    """

    def __init__(self, introspector: RecordIntrospector | None = None) -> None:
        self.introspector = introspector or RecordIntrospector()

    def build(self, record_type: type, spec: SortSpec) -> Any | None:
        """Build one ordering key, or None for "leave the order alone"."""
        if spec.direction == SortDirection.NONE:
            return None

        descriptor = self.introspector.get_property(record_type, spec.property_name)
        if descriptor is None or not descriptor.is_orderable:
            logger.warning(
                "Sort ignored",
                record_type=getattr(record_type, "__name__", str(record_type)),
                property_name=spec.property_name,
                reason="unknown property" if descriptor is None else "property is not orderable",
            )
            return None

        key = getattr(record_type, descriptor.name)
        if descriptor.is_enum and descriptor.enum_members:
            # Enum columns store member names; sort by declaration order instead
            key = case(
                {member: index for index, member in enumerate(descriptor.enum_members)},
                value=key,
            )
        if spec.direction == SortDirection.DESCENDING:
            return key.desc()
        return key.asc()

    def build_all(self, record_type: type, specs: Sequence[SortSpec]) -> list[Any]:
        """Ordering keys in priority order, skipping the ones that do not apply."""
        return [
            key
            for key in (self.build(record_type, spec) for spec in specs)
            if key is not None
        ]

    def apply(self, stmt: Select, record_type: type, specs: Sequence[SortSpec]) -> Select:
        """
        Append ordering keys to a statement.

        Each key only breaks ties left by the keys before it.
        """
        keys = self.build_all(record_type, specs)
        if not keys:
            return stmt
        return stmt.order_by(*keys)
