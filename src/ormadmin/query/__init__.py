"""
ormadmin Query Module.

Record introspection plus the filter, ordering and list-query compilers
layered on SQLAlchemy 2.0.
"""

from ormadmin.query.composer import QueryComposer
from ormadmin.query.introspection import RecordIntrospector, classify_column_type
from ormadmin.query.ordering import OrderingBuilder
from ormadmin.query.predicates import (
    PredicateBuilder,
    parse_literal,
    supported_operators,
)

__all__ = [
    "RecordIntrospector",
    "classify_column_type",
    "PredicateBuilder",
    "parse_literal",
    "supported_operators",
    "OrderingBuilder",
    "QueryComposer",
]
