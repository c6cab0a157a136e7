"""
Shared type definitions for ormadmin.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class FieldType(str, Enum):
    """Primitive families a record property can belong to."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    DATE = "date"
    TIME = "time"
    UUID = "uuid"
    ENUM = "enum"
    JSON = "json"
    BINARY = "binary"
    UNKNOWN = "unknown"


# Types with a total order the database can sort on
ORDERABLE_FIELD_TYPES = frozenset(
    {
        FieldType.STRING,
        FieldType.INTEGER,
        FieldType.FLOAT,
        FieldType.DECIMAL,
        FieldType.BOOLEAN,
        FieldType.DATETIME,
        FieldType.DATE,
        FieldType.TIME,
        FieldType.UUID,
        FieldType.ENUM,
    }
)


class RelationType(str, Enum):
    """Supported relation types."""

    ONE_TO_ONE = "one_to_one"
    ONE_TO_MANY = "one_to_many"
    MANY_TO_ONE = "many_to_one"
    MANY_TO_MANY = "many_to_many"


class PropertyDescriptor(BaseModel):
    """Metadata for a single property of a record type."""

    name: str
    field_type: FieldType = FieldType.UNKNOWN
    python_type: type[Any] | None = None
    nullable: bool = False
    is_primary_key: bool = False
    is_generated_key: bool = False
    is_foreign_key: bool = False
    is_relation: bool = False
    related_type: type[Any] | None = None
    relation_type: RelationType | None = None
    uselist: bool = False
    enum_class: type[Any] | None = None
    enum_members: tuple[Any, ...] = ()

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @property
    def is_enum(self) -> bool:
        return self.field_type == FieldType.ENUM

    @property
    def is_orderable(self) -> bool:
        """Whether the property can be used as a sort key."""
        return not self.is_relation and self.field_type in ORDERABLE_FIELD_TYPES


class RecordMetadata(BaseModel):
    """Metadata for a mapped record type."""

    name: str
    table_name: str
    record_type: type[Any]
    properties: dict[str, PropertyDescriptor] = Field(default_factory=dict)
    primary_key: str | None = None
    primary_keys: list[str] = Field(default_factory=list)  # For composite keys
    description: str | None = None

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    def get_property(self, name: str) -> PropertyDescriptor | None:
        """Get metadata for a specific property."""
        return self.properties.get(name)

    @property
    def relations(self) -> list[PropertyDescriptor]:
        return [p for p in self.properties.values() if p.is_relation]

    @property
    def columns(self) -> list[PropertyDescriptor]:
        return [p for p in self.properties.values() if not p.is_relation]
