"""
List request schemas for ormadmin.

These Pydantic models describe what a list view asks for: which records
(filters), in which order (sorts) and which slice (page). Filter values
always arrive as literal strings, the way a grid's filter row sends them;
the predicate builder parses them into the property's type.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class FilterOperator(str, Enum):
    """Supported filter operators."""

    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    DOES_NOT_CONTAIN = "does_not_contain"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    GREATER_THAN = "greater_than"
    GREATER_THAN_OR_EQUALS = "greater_than_or_equals"
    LESS_THAN = "less_than"
    LESS_THAN_OR_EQUALS = "less_than_or_equals"


class StringComparison(str, Enum):
    """How text filters compare values."""

    ORDINAL = "ordinal"
    ORDINAL_IGNORE_CASE = "ordinal_ignore_case"


class SortDirection(str, Enum):
    """Sort order direction."""

    ASCENDING = "ascending"
    DESCENDING = "descending"
    NONE = "none"


class FilterSpec(BaseModel):
    """
    A single filter condition.

    Examples:
        {"property_name": "name", "operator": "contains", "value": "ann"}
        {"property_name": "age", "operator": "greater_than", "value": "25"}
    """

    property_name: str = Field(..., description="The property to filter on")
    operator: FilterOperator = Field(..., description="The filter operator")
    value: str = Field(default="", description="Literal value, parsed per property type")
    comparison: StringComparison = Field(
        default=StringComparison.ORDINAL, description="Text comparison mode"
    )

    model_config = {"frozen": True}

    @field_validator("property_name")
    @classmethod
    def validate_property_name(cls, v: str) -> str:
        """Ensure property name is not empty."""
        if not v or not v.strip():
            raise ValueError("Property name cannot be empty")
        return v.strip()


class SortSpec(BaseModel):
    """
    A single sort clause.

    Example:
        {"property_name": "born_at", "direction": "descending"}
    """

    property_name: str = Field(..., description="The property to order by")
    direction: SortDirection = Field(
        default=SortDirection.ASCENDING, description="Sort direction"
    )

    model_config = {"frozen": True}


class PageSpec(BaseModel):
    """
    Pagination window.

    A non-positive page number or page size disables pagination and the
    whole filtered result is returned.
    """

    page_number: int = Field(default=0, description="1-based page number")
    page_size: int = Field(default=0, description="Records per page")

    model_config = {"frozen": True}

    @property
    def is_paginated(self) -> bool:
        return self.page_number > 0 and self.page_size > 0

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.page_size if self.is_paginated else 0


class ListRequest(BaseModel):
    """
    A list-view request against one set.

    Example:
        {
            "filters": [{"property_name": "age", "operator": "greater_than", "value": "25"}],
            "sorts": [{"property_name": "age", "direction": "ascending"}],
            "page": {"page_number": 1, "page_size": 20}
        }
    """

    filters: list[FilterSpec] = Field(default_factory=list, description="AND-ed filters")
    sorts: list[SortSpec] = Field(default_factory=list, description="Sort keys, primary first")
    page: PageSpec = Field(default_factory=PageSpec)

    model_config = {"frozen": True}


class PageResult(BaseModel):
    """
    One page of records plus the size of the whole filtered result.
    """

    records: list[Any] = Field(default_factory=list)
    total_count: int = Field(default=0)
    page_number: int = Field(default=0)

    model_config = {"frozen": True}
