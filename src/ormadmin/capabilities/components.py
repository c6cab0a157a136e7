"""
UI component contracts.

The admin core never renders anything. Hosts supply component classes for
custom property display, property editing and entity display; these base
classes fix what each kind of component receives so overrides can be
checked when the configuration is built rather than when a page renders.
"""

from collections.abc import Callable
from typing import Any, ClassVar

from ormadmin.core.errors import InvalidComponentError
from ormadmin.core.types import PropertyDescriptor


class PropertyDisplayComponent:
    """
    Renders a single property value read-only.

    Subclasses may set ``value_type`` to the type of value they accept.
    """

    value_type: ClassVar[type | None] = None

    def __init__(self, property_value: Any) -> None:
        self.property_value = property_value


class PropertyEditComponent:
    """
    Edits one property of a record.

    The component receives the whole record and reports every change
    through ``on_value_changed``. Subclasses may set ``record_type`` to the
    record type they can edit.
    """

    record_type: ClassVar[type | None] = None

    def __init__(
        self,
        entity: Any,
        on_value_changed: Callable[[Any], None] | None = None,
        disabled: bool = False,
    ) -> None:
        self.entity = entity
        self.on_value_changed = on_value_changed
        self.disabled = disabled

    def notify_changed(self, value: Any) -> None:
        if self.on_value_changed is not None and not self.disabled:
            self.on_value_changed(value)


class EntityDisplayComponent:
    """Renders a whole record, e.g. as the target of a relation."""

    record_type: ClassVar[type | None] = None

    def __init__(self, entity: Any) -> None:
        self.entity = entity


def _require_subclass(component: Any, base: type) -> None:
    if not isinstance(component, type) or not issubclass(component, base):
        raise InvalidComponentError(component, base.__name__)


def ensure_property_display_component(
    component: Any,
    descriptor: PropertyDescriptor,
) -> type[PropertyDisplayComponent]:
    """
    Check a display override against the property it is attached to.

    Raises:
        InvalidComponentError: If the component does not fit the property
    """
    _require_subclass(component, PropertyDisplayComponent)
    accepted = component.value_type
    actual = descriptor.python_type
    if accepted is not None and actual is not None and not issubclass(actual, accepted):
        raise InvalidComponentError(
            component,
            PropertyDisplayComponent.__name__,
            reason=f"accepts {accepted.__name__}, property '{descriptor.name}' is {actual.__name__}",
        )
    return component


def ensure_property_edit_component(
    component: Any,
    record_type: type,
) -> type[PropertyEditComponent]:
    """
    Check an edit override against the record type it edits.

    Raises:
        InvalidComponentError: If the component does not fit the record type
    """
    _require_subclass(component, PropertyEditComponent)
    accepted = component.record_type
    if accepted is not None and not issubclass(record_type, accepted):
        raise InvalidComponentError(
            component,
            PropertyEditComponent.__name__,
            reason=f"edits {accepted.__name__}, not {record_type.__name__}",
        )
    return component


def ensure_entity_display_component(
    component: Any,
    record_type: type,
) -> type[EntityDisplayComponent]:
    """
    Check an entity display override against the record type it shows.

    Raises:
        InvalidComponentError: If the component does not fit the record type
    """
    _require_subclass(component, EntityDisplayComponent)
    accepted = component.record_type
    if accepted is not None and not issubclass(record_type, accepted):
        raise InvalidComponentError(
            component,
            EntityDisplayComponent.__name__,
            reason=f"displays {accepted.__name__}, not {record_type.__name__}",
        )
    return component
