"""
ormadmin Capabilities Module.

Maps record properties to the editors and viewers a UI should render.
"""

from ormadmin.capabilities.choices import (
    SCALAR_EDITORS,
    CapabilityChoice,
    ComponentEntityDisplay,
    CustomDisplay,
    CustomEdit,
    DefaultEntityDisplay,
    EditorFamily,
    EntityDisplayChoice,
    EnumEditor,
    Excluded,
    Hidden,
    RelationPicker,
    RelationViewer,
    RenderMode,
    ScalarEditor,
    StringEntityDisplay,
    entity_text,
    is_visible,
)
from ormadmin.capabilities.components import (
    EntityDisplayComponent,
    PropertyDisplayComponent,
    PropertyEditComponent,
    ensure_entity_display_component,
    ensure_property_display_component,
    ensure_property_edit_component,
)
from ormadmin.capabilities.resolver import CapabilityResolver

__all__ = [
    # Choices
    "RenderMode",
    "EditorFamily",
    "SCALAR_EDITORS",
    "CapabilityChoice",
    "Hidden",
    "Excluded",
    "CustomDisplay",
    "CustomEdit",
    "EnumEditor",
    "RelationViewer",
    "RelationPicker",
    "ScalarEditor",
    "is_visible",
    # Entity display
    "EntityDisplayChoice",
    "ComponentEntityDisplay",
    "StringEntityDisplay",
    "DefaultEntityDisplay",
    "entity_text",
    # Components
    "PropertyDisplayComponent",
    "PropertyEditComponent",
    "EntityDisplayComponent",
    "ensure_property_display_component",
    "ensure_property_edit_component",
    "ensure_entity_display_component",
    # Resolver
    "CapabilityResolver",
]
