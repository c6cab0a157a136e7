"""
Admin configuration models.

These are the immutable results of the fluent builders in
ormadmin.config.builder. Hosts normally never construct them directly.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

from ormadmin.config.discovery import ContextInfo
from ormadmin.core.errors import ConfigurationError


@dataclass(frozen=True)
class PropertyKey:
    """Identifies one property of one record type."""

    record_type: type
    name: str

    def __str__(self) -> str:
        return f"{self.record_type.__name__}.{self.name}"


class SetOptions(BaseModel):
    """
    Display configuration of one set.

    Overrides are keyed by PropertyKey and only ever name properties of the
    set's own record type.
    """

    record_type: type[Any]
    display_title: str | None = None
    string_display: Callable[[Any], str] | None = None
    component_display: type[Any] | None = None
    hidden_properties: tuple[PropertyKey, ...] = ()
    display_overrides: dict[PropertyKey, type[Any]] = Field(default_factory=dict)
    edit_overrides: dict[PropertyKey, type[Any]] = Field(default_factory=dict)

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    def is_hidden(self, key: PropertyKey) -> bool:
        return key in self.hidden_properties

    def display_override(self, key: PropertyKey) -> type[Any] | None:
        return self.display_overrides.get(key)

    def edit_override(self, key: PropertyKey) -> type[Any] | None:
        return self.edit_overrides.get(key)

    @property
    def has_overrides(self) -> bool:
        return bool(self.hidden_properties or self.display_overrides or self.edit_overrides)


class ContextOptions(BaseModel):
    """Display configuration of one context and its sets."""

    context_type: type[Any]
    name: str
    display_title: str | None = None
    split_queries: bool = False
    sets: dict[type[Any], SetOptions] = Field(default_factory=dict)

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    def get_set_options(self, record_type: type) -> SetOptions:
        """Options for a set; an unconfigured set gets the defaults."""
        options = self.sets.get(record_type)
        if options is None:
            return SetOptions(record_type=record_type)
        return options

    # Property lookups only consult the set owning the property.

    def is_hidden(self, key: PropertyKey) -> bool:
        return self.get_set_options(key.record_type).is_hidden(key)

    def display_override(self, key: PropertyKey) -> type[Any] | None:
        return self.get_set_options(key.record_type).display_override(key)

    def edit_override(self, key: PropertyKey) -> type[Any] | None:
        return self.get_set_options(key.record_type).edit_override(key)


class TitleRegistry(BaseModel):
    """Display titles keyed by "<Context>" or "<Context>/<Record>"."""

    titles: dict[str, str] = Field(default_factory=dict)

    model_config = {"frozen": True}

    def get(self, key: str, default: str | None = None) -> str | None:
        return self.titles.get(key, default)

    def context_title(self, context_name: str) -> str:
        return self.titles.get(context_name, context_name)

    def set_title(self, context_name: str, set_name: str) -> str:
        return self.titles.get(f"{context_name}/{set_name}", set_name)


class AdminOptions(BaseModel):
    """Complete admin configuration: every context plus the title registry."""

    contexts: dict[str, ContextOptions] = Field(default_factory=dict)
    discovered: tuple[ContextInfo, ...] = ()
    titles: TitleRegistry = Field(default_factory=TitleRegistry)

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    def get_context(self, context: str | type) -> ContextOptions:
        """
        Options of a configured context, by name or type.

        Raises:
            ConfigurationError: If the context was never registered
        """
        for options in self.contexts.values():
            if options.name == context or options.context_type is context:
                return options
        name = getattr(context, "__name__", str(context))
        raise ConfigurationError(
            f"Context '{name}' is not registered",
            details={"context": name, "known": sorted(self.contexts)},
        )

    def get_context_info(self, context: str | type) -> ContextInfo:
        """
        Discovery result of a context, by name or type.

        Raises:
            ConfigurationError: If the context was never registered
        """
        for info in self.discovered:
            if info.name == context or info.context_type is context:
                return info
        name = getattr(context, "__name__", str(context))
        raise ConfigurationError(
            f"Context '{name}' is not registered",
            details={"context": name},
        )
