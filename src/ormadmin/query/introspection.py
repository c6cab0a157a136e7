"""
SQLAlchemy record introspection.

Extracts property, key and relation metadata from mapped classes. Nothing
here needs a record instance; everything is derived from the mapper.
"""

from typing import Any

from sqlalchemy import inspect
from sqlalchemy.orm import Mapper, RelationshipDirection, RelationshipProperty
from sqlalchemy.sql.sqltypes import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Enum,
    Float,
    Integer,
    LargeBinary,
    Numeric,
    String,
    Time,
    Uuid,
)

from ormadmin.core.errors import MissingPrimaryKeyError, UnknownRecordTypeError
from ormadmin.core.types import (
    FieldType,
    PropertyDescriptor,
    RecordMetadata,
    RelationType,
)
from ormadmin.logging import get_logger

logger = get_logger(__name__)

# Order matters: Enum subclasses String, Float subclasses Numeric.
_TYPE_MAPPING: tuple[tuple[type, FieldType], ...] = (
    (Enum, FieldType.ENUM),
    (Boolean, FieldType.BOOLEAN),
    (Integer, FieldType.INTEGER),
    (Float, FieldType.FLOAT),
    (Numeric, FieldType.DECIMAL),
    (DateTime, FieldType.DATETIME),
    (Date, FieldType.DATE),
    (Time, FieldType.TIME),
    (Uuid, FieldType.UUID),
    (String, FieldType.STRING),
    (JSON, FieldType.JSON),
    (LargeBinary, FieldType.BINARY),
)


def classify_column_type(sa_type: Any) -> FieldType:
    """Map a SQLAlchemy column type to its primitive family."""
    for sa_class, field_type in _TYPE_MAPPING:
        if isinstance(sa_type, sa_class):
            return field_type

    type_name = type(sa_type).__name__.lower()
    if "uuid" in type_name:
        return FieldType.UUID
    if "json" in type_name:
        return FieldType.JSON

    return FieldType.UNKNOWN


class RecordIntrospector:
    """
    Introspects mapped record types.

    Key lookups fail loudly since a guessed key would corrupt every link
    built from it. Relation and property lookups are best effort and
    degrade to "nothing" for types the storage model does not know.
    """

    def __init__(self) -> None:
        self._cache: dict[type, RecordMetadata] = {}

    def describe(self, record_type: type) -> RecordMetadata:
        """
        Return metadata for a record type.

        Raises:
            UnknownRecordTypeError: If the type is not mapped
        """
        cached = self._cache.get(record_type)
        if cached is not None:
            return cached

        mapper = self._get_mapper(record_type)
        if mapper is None:
            raise UnknownRecordTypeError(record_type)

        metadata = self._introspect_mapper(record_type, mapper)
        self._cache[record_type] = metadata
        return metadata

    def is_known(self, record_type: type) -> bool:
        return self._get_mapper(record_type) is not None

    def properties_of(self, record_type: type) -> list[PropertyDescriptor]:
        """All properties of a record type: columns first, then relations."""
        return list(self.describe(record_type).properties.values())

    def get_property(self, record_type: type, name: str) -> PropertyDescriptor | None:
        """Look up one property; None for unknown types or names."""
        if not self.is_known(record_type):
            return None
        return self.describe(record_type).get_property(name)

    # ---------------------------------------------------------------------
    # Keys
    # ---------------------------------------------------------------------

    def primary_key(self, record_type: type) -> PropertyDescriptor:
        """
        Return the primary key property (the first one for composite keys).

        Raises:
            UnknownRecordTypeError: If the type is not mapped
            MissingPrimaryKeyError: If no key is declared
        """
        metadata = self.describe(record_type)
        if metadata.primary_key is None:
            raise MissingPrimaryKeyError(record_type)
        return metadata.properties[metadata.primary_key]

    def is_primary_key(self, record_type: type, name: str) -> bool:
        return self.primary_key(record_type).name == name

    def is_generated_primary_key(self, record_type: type, name: str) -> bool:
        key = self.primary_key(record_type)
        return key.name == name and key.is_generated_key

    def foreign_keys(self, record_type: type) -> list[PropertyDescriptor]:
        """
        Columns that reference another table.

        Raises:
            UnknownRecordTypeError: If the type is not mapped
        """
        return [p for p in self.describe(record_type).columns if p.is_foreign_key]

    def is_foreign_key(self, record_type: type, name: str) -> bool:
        return any(p.name == name for p in self.foreign_keys(record_type))

    # ---------------------------------------------------------------------
    # Relations
    # ---------------------------------------------------------------------

    def relations(self, record_type: type) -> list[PropertyDescriptor]:
        """Declared relations; empty for types the model does not know."""
        if not self.is_known(record_type):
            logger.debug(
                "Relation metadata requested for unmapped type",
                record_type=getattr(record_type, "__name__", str(record_type)),
            )
            return []
        return self.describe(record_type).relations

    def is_relation(self, record_type: type, name: str) -> bool:
        return any(r.name == name for r in self.relations(record_type))

    def displayable_relations(self, record_type: type) -> list[PropertyDescriptor]:
        """
        Relations whose target can be shown as a single related record.

        These are the relations a list view eagerly loads. Collections are
        never loaded for display.
        """
        return [r for r in self.relations(record_type) if not r.uselist]

    # ---------------------------------------------------------------------
    # Internals
    # ---------------------------------------------------------------------

    def _get_mapper(self, record_type: Any) -> Mapper | None:
        if not isinstance(record_type, type):
            return None
        mapper = inspect(record_type, raiseerr=False)
        return mapper if isinstance(mapper, Mapper) else None

    def _introspect_mapper(self, record_type: type, mapper: Mapper) -> RecordMetadata:
        properties: dict[str, PropertyDescriptor] = {}
        pk_columns = list(mapper.primary_key)

        for prop in mapper.column_attrs:
            column = prop.columns[0]
            properties[prop.key] = self._introspect_column(
                prop.key, column, pk_columns
            )

        for rel in mapper.relationships:
            properties[rel.key] = self._introspect_relationship(rel)

        primary_keys = [
            mapper.get_property_by_column(column).key for column in pk_columns
        ]

        return RecordMetadata(
            name=record_type.__name__,
            table_name=mapper.local_table.name,
            record_type=record_type,
            properties=properties,
            primary_key=primary_keys[0] if primary_keys else None,
            primary_keys=primary_keys,
            description=record_type.__doc__,
        )

    def _introspect_column(
        self,
        key: str,
        column: Any,
        pk_columns: list[Any],
    ) -> PropertyDescriptor:
        field_type = classify_column_type(column.type)
        is_primary_key = any(column is pk for pk in pk_columns)

        enum_class = None
        enum_members: tuple[Any, ...] = ()
        if field_type == FieldType.ENUM:
            enum_class = column.type.enum_class
            enum_members = tuple(enum_class) if enum_class else tuple(column.type.enums)

        return PropertyDescriptor(
            name=key,
            field_type=field_type,
            python_type=self._python_type(column.type),
            nullable=bool(column.nullable),
            is_primary_key=is_primary_key,
            is_generated_key=is_primary_key and self._is_generated(column, pk_columns),
            is_foreign_key=bool(column.foreign_keys),
            enum_class=enum_class,
            enum_members=enum_members,
        )

    def _introspect_relationship(self, rel: RelationshipProperty) -> PropertyDescriptor:
        if rel.direction is RelationshipDirection.MANYTOMANY:
            relation_type = RelationType.MANY_TO_MANY
        elif rel.direction is RelationshipDirection.MANYTOONE:
            relation_type = RelationType.MANY_TO_ONE
        elif rel.uselist:
            relation_type = RelationType.ONE_TO_MANY
        else:
            relation_type = RelationType.ONE_TO_ONE

        return PropertyDescriptor(
            name=rel.key,
            field_type=FieldType.UNKNOWN,
            python_type=rel.mapper.class_,
            nullable=True,
            is_relation=True,
            related_type=rel.mapper.class_,
            relation_type=relation_type,
            uselist=bool(rel.uselist),
        )

    def _is_generated(self, column: Any, pk_columns: list[Any]) -> bool:
        """Whether the database or the mapper supplies the key value."""
        if column.default is not None or column.server_default is not None:
            return True
        if column.autoincrement is True:
            return True
        return (
            column.autoincrement == "auto"
            and len(pk_columns) == 1
            and isinstance(column.type, Integer)
            and not column.foreign_keys
        )

    def _python_type(self, sa_type: Any) -> type | None:
        try:
            return sa_type.python_type
        except NotImplementedError:
            return None
