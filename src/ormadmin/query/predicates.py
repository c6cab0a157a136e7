"""
Filter predicate compilation.

Turns FilterSpec literals into SQLAlchemy boolean expressions, dispatching
on the property's primitive family. A filter that cannot be compiled for
its property (unknown name, relation, operator not valid for the type,
unparsable literal) yields None and is skipped: a misconfigured filter
must never take a list view down.
"""

import uuid
from collections.abc import Sequence
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import ColumnElement, Select, and_, func, or_

from ormadmin.core.dsl import FilterOperator, FilterSpec, StringComparison
from ormadmin.core.types import FieldType, PropertyDescriptor
from ormadmin.logging import get_logger
from ormadmin.query.introspection import RecordIntrospector

logger = get_logger(__name__)

TEXT_OPERATORS = frozenset(
    {
        FilterOperator.EQUALS,
        FilterOperator.NOT_EQUALS,
        FilterOperator.CONTAINS,
        FilterOperator.DOES_NOT_CONTAIN,
        FilterOperator.STARTS_WITH,
        FilterOperator.ENDS_WITH,
    }
)

COMPARISON_OPERATORS = frozenset(
    {
        FilterOperator.EQUALS,
        FilterOperator.NOT_EQUALS,
        FilterOperator.GREATER_THAN,
        FilterOperator.GREATER_THAN_OR_EQUALS,
        FilterOperator.LESS_THAN,
        FilterOperator.LESS_THAN_OR_EQUALS,
    }
)

EQUALITY_OPERATORS = frozenset({FilterOperator.EQUALS, FilterOperator.NOT_EQUALS})

# Operators valid per primitive family; families not listed cannot be filtered.
SUPPORTED_OPERATORS: dict[FieldType, frozenset[FilterOperator]] = {
    FieldType.STRING: TEXT_OPERATORS,
    FieldType.INTEGER: COMPARISON_OPERATORS,
    FieldType.FLOAT: COMPARISON_OPERATORS,
    FieldType.DECIMAL: COMPARISON_OPERATORS,
    FieldType.BOOLEAN: COMPARISON_OPERATORS,
    FieldType.DATETIME: COMPARISON_OPERATORS,
    FieldType.DATE: COMPARISON_OPERATORS,
    FieldType.TIME: COMPARISON_OPERATORS,
    FieldType.UUID: EQUALITY_OPERATORS,
    FieldType.ENUM: EQUALITY_OPERATORS,
}

_TRUE_LITERALS = frozenset({"true", "1", "yes", "on"})
_FALSE_LITERALS = frozenset({"false", "0", "no", "off"})


def supported_operators(descriptor: PropertyDescriptor) -> frozenset[FilterOperator]:
    """Operators a property accepts; empty for relations and opaque types."""
    if descriptor.is_relation:
        return frozenset()
    return SUPPORTED_OPERATORS.get(descriptor.field_type, frozenset())


def parse_literal(descriptor: PropertyDescriptor, raw: str) -> Any:
    """
    Parse a literal string into the property's Python type.

    Raises:
        ValueError: If the literal is not a valid value for the property
    """
    text = raw.strip()
    match descriptor.field_type:
        case FieldType.STRING:
            return raw
        case FieldType.INTEGER:
            return int(text)
        case FieldType.FLOAT:
            return float(text)
        case FieldType.DECIMAL:
            try:
                return Decimal(text)
            except InvalidOperation as e:
                raise ValueError(f"Invalid decimal literal: {raw!r}") from e
        case FieldType.BOOLEAN:
            lowered = text.lower()
            if lowered in _TRUE_LITERALS:
                return True
            if lowered in _FALSE_LITERALS:
                return False
            raise ValueError(f"Invalid boolean literal: {raw!r}")
        case FieldType.DATETIME:
            return datetime.fromisoformat(text)
        case FieldType.DATE:
            return date.fromisoformat(text)
        case FieldType.TIME:
            return time.fromisoformat(text)
        case FieldType.UUID:
            return uuid.UUID(text)
        case FieldType.ENUM:
            return _parse_enum(descriptor, text)
        case _:
            raise ValueError(f"Properties of type '{descriptor.field_type.value}' take no literals")


def _parse_enum(descriptor: PropertyDescriptor, text: str) -> Any:
    enum_class = descriptor.enum_class
    if enum_class is None:
        if text in descriptor.enum_members:
            return text
        raise ValueError(f"{text!r} is not one of {list(descriptor.enum_members)}")

    if text in enum_class.__members__:
        return enum_class[text]
    for member in enum_class:
        if str(member.value) == text:
            return member
    raise ValueError(f"{text!r} is not a member of {enum_class.__name__}")


def _or_null(column: Any, condition: ColumnElement[bool], nullable: bool) -> ColumnElement[bool]:
    """Widen a negated test so null values also match."""
    if not nullable:
        return condition
    return or_(column.is_(None), condition)


class PredicateBuilder:
    """
    Compiles FilterSpecs into SQLAlchemy WHERE conditions.
    """

    def __init__(self, introspector: RecordIntrospector | None = None) -> None:
        self.introspector = introspector or RecordIntrospector()

    def build(self, record_type: type, spec: FilterSpec) -> ColumnElement[bool] | None:
        """
        Build one predicate, or None when the filter does not apply.
        """
        descriptor = self.introspector.get_property(record_type, spec.property_name)
        if descriptor is None:
            return self._skip(record_type, spec, "unknown property")

        if spec.operator not in supported_operators(descriptor):
            return self._skip(record_type, spec, "operator not supported for property type")

        column = getattr(record_type, descriptor.name)

        if descriptor.field_type == FieldType.STRING:
            return self._build_text_condition(column, spec, descriptor.nullable)

        try:
            value = parse_literal(descriptor, spec.value)
        except ValueError:
            return self._skip(record_type, spec, "unparsable literal")

        return self._build_comparison(column, spec.operator, value, descriptor.nullable)

    def build_all(
        self,
        record_type: type,
        specs: Sequence[FilterSpec],
    ) -> ColumnElement[bool] | None:
        """Conjoin every applicable filter; None when nothing applies."""
        conditions = [
            condition
            for condition in (self.build(record_type, spec) for spec in specs)
            if condition is not None
        ]
        if not conditions:
            return None
        return and_(*conditions)

    def apply(self, stmt: Select, record_type: type, specs: Sequence[FilterSpec]) -> Select:
        """Apply filters to a statement."""
        condition = self.build_all(record_type, specs)
        if condition is None:
            return stmt
        return stmt.where(condition)

    def _build_text_condition(
        self,
        column: Any,
        spec: FilterSpec,
        nullable: bool,
    ) -> ColumnElement[bool]:
        value = spec.value
        match spec.operator:
            case FilterOperator.NOT_EQUALS:
                return _or_null(column, ~self._text_test(column, FilterOperator.EQUALS, spec), nullable)
            case FilterOperator.DOES_NOT_CONTAIN:
                # An empty literal is contained everywhere, so this matches no row at all
                return _or_null(
                    column,
                    ~self._text_test(column, FilterOperator.CONTAINS, spec),
                    nullable and value != "",
                )
        return self._text_test(column, spec.operator, spec)

    def _text_test(
        self,
        column: Any,
        operator: FilterOperator,
        spec: FilterSpec,
    ) -> ColumnElement[bool]:
        value = spec.value
        if spec.comparison == StringComparison.ORDINAL_IGNORE_CASE:
            match operator:
                case FilterOperator.EQUALS:
                    return func.lower(column) == value.lower()
                case FilterOperator.CONTAINS:
                    return column.icontains(value, autoescape=True)
                case FilterOperator.STARTS_WITH:
                    return column.istartswith(value, autoescape=True)
                case FilterOperator.ENDS_WITH:
                    return column.iendswith(value, autoescape=True)

        # LIKE follows the backend collation, so ordinal tests compare characters
        match operator:
            case FilterOperator.EQUALS:
                return column == value
            case FilterOperator.CONTAINS:
                return func.instr(column, value) > 0
            case FilterOperator.STARTS_WITH:
                return func.substr(column, 1, len(value)) == value
            case FilterOperator.ENDS_WITH:
                return func.substr(column, func.length(column) - len(value) + 1) == value

        raise ValueError(f"Unsupported text operator: {operator}")

    def _build_comparison(
        self,
        column: Any,
        operator: FilterOperator,
        value: Any,
        nullable: bool,
    ) -> ColumnElement[bool]:
        match operator:
            case FilterOperator.EQUALS:
                return column == value
            case FilterOperator.NOT_EQUALS:
                return _or_null(column, column != value, nullable)
            case FilterOperator.GREATER_THAN:
                return column > value
            case FilterOperator.GREATER_THAN_OR_EQUALS:
                return column >= value
            case FilterOperator.LESS_THAN:
                return column < value
            case FilterOperator.LESS_THAN_OR_EQUALS:
                return column <= value

        raise ValueError(f"Unsupported comparison operator: {operator}")

    def _skip(self, record_type: type, spec: FilterSpec, reason: str) -> None:
        logger.warning(
            "Filter ignored",
            record_type=getattr(record_type, "__name__", str(record_type)),
            property_name=spec.property_name,
            operator=spec.operator.value,
            reason=reason,
        )
        return None
