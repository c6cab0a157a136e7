"""
ormadmin Core Module.

Contains the request context, list-request DSL, error taxonomy, and shared types.
"""

from ormadmin.core.context import Principal, RequestContext
from ormadmin.core.dsl import (
    FilterOperator,
    FilterSpec,
    ListRequest,
    PageResult,
    PageSpec,
    SortDirection,
    SortSpec,
    StringComparison,
)
from ormadmin.core.errors import (
    AccessDeniedError,
    AdminError,
    ConfigurationError,
    InvalidComponentError,
    MissingPrimaryKeyError,
    NotFoundError,
    PolicyNotFoundError,
    UnknownPropertyError,
    UnknownRecordTypeError,
    ValidationError,
)
from ormadmin.core.types import (
    ORDERABLE_FIELD_TYPES,
    FieldType,
    PropertyDescriptor,
    RecordMetadata,
    RelationType,
)

__all__ = [
    # Context
    "Principal",
    "RequestContext",
    # DSL
    "FilterOperator",
    "FilterSpec",
    "ListRequest",
    "PageResult",
    "PageSpec",
    "SortDirection",
    "SortSpec",
    "StringComparison",
    # Errors
    "AdminError",
    "AccessDeniedError",
    "ConfigurationError",
    "InvalidComponentError",
    "MissingPrimaryKeyError",
    "NotFoundError",
    "PolicyNotFoundError",
    "UnknownPropertyError",
    "UnknownRecordTypeError",
    "ValidationError",
    # Types
    "ORDERABLE_FIELD_TYPES",
    "FieldType",
    "PropertyDescriptor",
    "RecordMetadata",
    "RelationType",
]
