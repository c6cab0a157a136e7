"""
Capability choices.

A choice tells the UI what to render for one property in one render mode.
Choices are plain data; the resolver picks them and the host maps them to
widgets.
"""

from collections.abc import Callable
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from ormadmin.core.types import FieldType


class RenderMode(str, Enum):
    """Surface a property is rendered on."""

    DISPLAY = "display"
    EDIT = "edit"
    CREATE = "create"

    @property
    def is_editing(self) -> bool:
        return self is not RenderMode.DISPLAY


class EditorFamily(str, Enum):
    """Built-in editor families for scalar properties."""

    TEXT = "text"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    DATE = "date"
    TIME = "time"
    UUID = "uuid"


# Decimal values are edited with the floating-point editor.
SCALAR_EDITORS: dict[FieldType, EditorFamily] = {
    FieldType.STRING: EditorFamily.TEXT,
    FieldType.INTEGER: EditorFamily.INTEGER,
    FieldType.FLOAT: EditorFamily.FLOAT,
    FieldType.DECIMAL: EditorFamily.FLOAT,
    FieldType.BOOLEAN: EditorFamily.BOOLEAN,
    FieldType.DATETIME: EditorFamily.DATETIME,
    FieldType.DATE: EditorFamily.DATE,
    FieldType.TIME: EditorFamily.TIME,
    FieldType.UUID: EditorFamily.UUID,
}


_CHOICE_CONFIG = {"frozen": True, "arbitrary_types_allowed": True}


# ---------------------------------------------------------------------------
# Entity display
# ---------------------------------------------------------------------------


class ComponentEntityDisplay(BaseModel):
    """Render the record with a host component."""

    kind: Literal["component"] = "component"
    component: type[Any]

    model_config = _CHOICE_CONFIG


class StringEntityDisplay(BaseModel):
    """Render the record as the text a formatter returns."""

    kind: Literal["string"] = "string"
    formatter: Callable[[Any], str]

    model_config = _CHOICE_CONFIG


class DefaultEntityDisplay(BaseModel):
    """Render the record's own text representation."""

    kind: Literal["default"] = "default"

    model_config = _CHOICE_CONFIG


EntityDisplayChoice = Annotated[
    ComponentEntityDisplay | StringEntityDisplay | DefaultEntityDisplay,
    Field(discriminator="kind"),
]


def entity_text(choice: EntityDisplayChoice, record: Any) -> str:
    """
    Plain text for a record under an entity display choice.

    Component displays have no text of their own and fall back to str().
    """
    if record is None:
        return ""
    if isinstance(choice, StringEntityDisplay):
        return choice.formatter(record)
    return str(record)


# ---------------------------------------------------------------------------
# Property capabilities
# ---------------------------------------------------------------------------


class Hidden(BaseModel):
    """Never rendered."""

    kind: Literal["hidden"] = "hidden"

    model_config = _CHOICE_CONFIG


class Excluded(BaseModel):
    """Left off the surface because the database supplies the value."""

    kind: Literal["excluded"] = "excluded"

    model_config = _CHOICE_CONFIG


class CustomDisplay(BaseModel):
    kind: Literal["custom_display"] = "custom_display"
    component: type[Any]

    model_config = _CHOICE_CONFIG


class CustomEdit(BaseModel):
    kind: Literal["custom_edit"] = "custom_edit"
    component: type[Any]

    model_config = _CHOICE_CONFIG


class EnumEditor(BaseModel):
    """Selection among the declared members, in declaration order."""

    kind: Literal["enum"] = "enum"
    enum_type: type[Any] | None = None
    members: tuple[Any, ...] = ()
    read_only: bool = False

    model_config = _CHOICE_CONFIG


class RelationViewer(BaseModel):
    """Shows the related record(s) read-only."""

    kind: Literal["relation_viewer"] = "relation_viewer"
    related_type: type[Any]
    many: bool = False
    entity_display: EntityDisplayChoice = Field(default_factory=DefaultEntityDisplay)

    model_config = _CHOICE_CONFIG


class RelationPicker(BaseModel):
    """Lets the user pick the related record(s)."""

    kind: Literal["relation_picker"] = "relation_picker"
    related_type: type[Any]
    many: bool = False
    entity_display: EntityDisplayChoice = Field(default_factory=DefaultEntityDisplay)

    model_config = _CHOICE_CONFIG


class ScalarEditor(BaseModel):
    kind: Literal["scalar"] = "scalar"
    family: EditorFamily
    read_only: bool = False

    model_config = _CHOICE_CONFIG


CapabilityChoice = Annotated[
    Hidden
    | Excluded
    | CustomDisplay
    | CustomEdit
    | EnumEditor
    | RelationViewer
    | RelationPicker
    | ScalarEditor,
    Field(discriminator="kind"),
]


def is_visible(choice: CapabilityChoice) -> bool:
    """Whether the choice renders anything."""
    return not isinstance(choice, Hidden | Excluded)
