"""
Capability resolution.

Decides, per property and render mode, which editor or viewer the UI
should use. Configuration overrides come first, then the property's
metadata decides.
"""

from collections.abc import Iterable

from ormadmin.capabilities.choices import (
    SCALAR_EDITORS,
    CapabilityChoice,
    ComponentEntityDisplay,
    CustomDisplay,
    CustomEdit,
    DefaultEntityDisplay,
    EntityDisplayChoice,
    EnumEditor,
    Excluded,
    Hidden,
    RelationPicker,
    RelationViewer,
    RenderMode,
    ScalarEditor,
    StringEntityDisplay,
    is_visible,
)
from ormadmin.config.models import ContextOptions, PropertyKey
from ormadmin.core.errors import ConfigurationError, UnknownPropertyError
from ormadmin.core.types import PropertyDescriptor
from ormadmin.logging import get_logger
from ormadmin.query.introspection import RecordIntrospector

logger = get_logger(__name__)


class CapabilityResolver:
    """
    Resolves capability choices for the sets of one context.

    Precedence for a property:
    1. hidden (beats every override)
    2. display override (DISPLAY) or edit override (EDIT, CREATE)
    3. generated primary key on EDIT/CREATE is excluded
    4. enum editor
    5. relation viewer (DISPLAY) or picker (EDIT, CREATE)
    6. scalar editor by primitive family
    """

    def __init__(
        self,
        context_options: ContextOptions,
        introspector: RecordIntrospector | None = None,
    ) -> None:
        self.options = context_options
        self.introspector = introspector or RecordIntrospector()

    def resolve(
        self,
        record_type: type,
        property_name: str,
        mode: RenderMode = RenderMode.DISPLAY,
    ) -> CapabilityChoice:
        """
        Resolve the capability for one property.

        Raises:
            UnknownRecordTypeError: If the record type is not mapped
            UnknownPropertyError: If the record type has no such property
            ConfigurationError: If no built-in editor handles the property
        """
        descriptor = self.introspector.describe(record_type).get_property(property_name)
        if descriptor is None:
            raise UnknownPropertyError(
                property_name,
                record_type,
                known=[p.name for p in self.introspector.properties_of(record_type)],
            )
        return self._resolve(record_type, descriptor, mode)

    def resolve_all(
        self,
        record_type: type,
        mode: RenderMode = RenderMode.DISPLAY,
    ) -> list[tuple[PropertyDescriptor, CapabilityChoice]]:
        """Visible properties and their choices, in property order."""
        resolved = []
        for descriptor in self.introspector.properties_of(record_type):
            choice = self._resolve(record_type, descriptor, mode)
            if is_visible(choice):
                resolved.append((descriptor, choice))
        return resolved

    def resolve_entity_display(self, record_type: type) -> EntityDisplayChoice:
        """How a record of this type is shown as a whole."""
        set_options = self.options.get_set_options(record_type)
        if set_options.component_display is not None:
            return ComponentEntityDisplay(component=set_options.component_display)
        if set_options.string_display is not None:
            return StringEntityDisplay(formatter=set_options.string_display)
        return DefaultEntityDisplay()

    def entity_display_for(self, record_type: type, property_name: str) -> EntityDisplayChoice:
        """Entity display of a relation's target, as configured on the target's set."""
        descriptor = self.introspector.get_property(record_type, property_name)
        if descriptor is None or descriptor.related_type is None:
            return DefaultEntityDisplay()
        return self.resolve_entity_display(descriptor.related_type)

    # ---------------------------------------------------------------------
    # Startup validation
    # ---------------------------------------------------------------------

    def validate(self, record_type: type) -> None:
        """
        Check that every property of a set can be rendered.

        Raises:
            UnknownPropertyError: If an override names a missing property
            ConfigurationError: If a property maps to no built-in editor
        """
        set_options = self.options.get_set_options(record_type)
        keys: list[PropertyKey] = [
            *set_options.hidden_properties,
            *set_options.display_overrides,
            *set_options.edit_overrides,
        ]
        for key in keys:
            if self.introspector.get_property(key.record_type, key.name) is None:
                raise UnknownPropertyError(key.name, key.record_type)

        for mode in RenderMode:
            for descriptor in self.introspector.properties_of(record_type):
                self._resolve(record_type, descriptor, mode)

    def validate_all(self, record_types: Iterable[type] | None = None) -> None:
        """Validate the given sets, or every configured set."""
        record_types = list(record_types) if record_types is not None else list(self.options.sets)
        for record_type in record_types:
            self.validate(record_type)
        logger.debug(
            "Capabilities validated",
            context_name=self.options.name,
            set_count=len(record_types),
        )

    # ---------------------------------------------------------------------
    # Internals
    # ---------------------------------------------------------------------

    def _resolve(
        self,
        record_type: type,
        descriptor: PropertyDescriptor,
        mode: RenderMode,
    ) -> CapabilityChoice:
        key = PropertyKey(record_type, descriptor.name)

        if self.options.is_hidden(key):
            return Hidden()

        if mode is RenderMode.DISPLAY:
            component = self.options.display_override(key)
            if component is not None:
                return CustomDisplay(component=component)
        else:
            component = self.options.edit_override(key)
            if component is not None:
                return CustomEdit(component=component)

        if mode.is_editing and descriptor.is_primary_key and descriptor.is_generated_key:
            return Excluded()

        if descriptor.is_enum:
            return EnumEditor(
                enum_type=descriptor.enum_class,
                members=descriptor.enum_members,
                read_only=not mode.is_editing,
            )

        if descriptor.is_relation and descriptor.related_type is not None:
            entity_display = self.entity_display_for(record_type, descriptor.name)
            if mode is RenderMode.DISPLAY:
                return RelationViewer(
                    related_type=descriptor.related_type,
                    many=descriptor.uselist,
                    entity_display=entity_display,
                )
            return RelationPicker(
                related_type=descriptor.related_type,
                many=descriptor.uselist,
                entity_display=entity_display,
            )

        family = SCALAR_EDITORS.get(descriptor.field_type)
        if family is None:
            raise ConfigurationError(
                f"No editor for property '{key}' of type {descriptor.field_type.value}; "
                "hide it or register an override",
                details={
                    "record_type": record_type.__name__,
                    "property": descriptor.name,
                    "field_type": descriptor.field_type.value,
                },
            )
        return ScalarEditor(family=family, read_only=not mode.is_editing)
