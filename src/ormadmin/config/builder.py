"""
Fluent builders for admin configuration.

Example:
    policies = PolicyRegistry()
    options = (
        AdminOptionsBuilder([DemoDb], policies)
        .configure_context(
            DemoDb,
            lambda ctx: ctx.with_title("Demo")
            .configure_set(
                Person,
                lambda s: s.with_string_display(lambda p: p.name)
                .configure_property("secret", lambda p: p.hidden())
                .user_can_delete_if(lambda principal: principal.has_role("admin")),
            ),
        )
        .build()
    )

Constructing the builder registers an allow-all policy for every
discovered identity. Later policy calls replace those defaults.
"""

from collections.abc import Callable, Iterable
from typing import Any

from ormadmin.capabilities.components import (
    ensure_entity_display_component,
    ensure_property_display_component,
    ensure_property_edit_component,
)
from ormadmin.config.discovery import ContextInfo, SetInfo, discover_context
from ormadmin.config.models import (
    AdminOptions,
    ContextOptions,
    PropertyKey,
    SetOptions,
    TitleRegistry,
)
from ormadmin.core.errors import ConfigurationError, UnknownPropertyError
from ormadmin.core.types import PropertyDescriptor
from ormadmin.logging import get_logger
from ormadmin.policy.bulk import AuthorizationCallback, build_policy_registrations
from ormadmin.policy.identity import can_create, can_delete, can_edit, can_read, can_read_info
from ormadmin.policy.registry import PolicyPredicate, PolicyRegistry
from ormadmin.query.introspection import RecordIntrospector

logger = get_logger(__name__)


class AdminOptionsBuilder:
    """Entry point of the fluent configuration."""

    def __init__(
        self,
        contexts: Iterable[type | ContextInfo],
        policies: PolicyRegistry | None = None,
        introspector: RecordIntrospector | None = None,
    ) -> None:
        """
        Discover the contexts and register their default policies.

        Args:
            contexts: Declarative bases (or already discovered contexts)
            policies: Registry the policies go into; a new one by default
            introspector: Shared introspector for property validation
        """
        self.policies = policies if policies is not None else PolicyRegistry()
        self.introspector = introspector or RecordIntrospector()
        self._titles: dict[str, str] = {}
        self._contexts: dict[str, ContextInfo] = {}
        self._builders: dict[str, ContextOptionsBuilder] = {}

        for context in contexts:
            info = context if isinstance(context, ContextInfo) else discover_context(context)
            if info.name in self._contexts:
                raise ConfigurationError(
                    f"Context '{info.name}' registered twice",
                    details={"context": info.name},
                )
            self._contexts[info.name] = info

        registered = self.policies.register_all(
            build_policy_registrations(self._contexts.values())
        )
        logger.debug(
            "Default policies registered",
            context_count=len(self._contexts),
            policy_count=registered,
        )

    @property
    def contexts(self) -> list[ContextInfo]:
        return list(self._contexts.values())

    def _context_info(self, context_type: type | str) -> ContextInfo:
        for info in self._contexts.values():
            if info.context_type is context_type or info.name == context_type:
                return info
        name = getattr(context_type, "__name__", str(context_type))
        raise ConfigurationError(
            f"Context '{name}' is not registered",
            details={"context": name, "known": sorted(self._contexts)},
        )

    def configure_context(
        self,
        context_type: type | str,
        configure: Callable[["ContextOptionsBuilder"], Any],
    ) -> "AdminOptionsBuilder":
        """
        Configure one context. Repeated calls refine the same builder.

        Raises:
            ConfigurationError: If the context was not passed to the constructor
        """
        info = self._context_info(context_type)
        builder = self._builders.get(info.name)
        if builder is None:
            builder = ContextOptionsBuilder(info, self.policies, self._titles, self.introspector)
            self._builders[info.name] = builder
        configure(builder)
        return self

    def with_authorization_callback(
        self,
        callback: AuthorizationCallback,
    ) -> "AdminOptionsBuilder":
        """Route every admin action through one callback."""
        registered = self.policies.register_all(
            build_policy_registrations(self._contexts.values(), callback)
        )
        logger.debug("Authorization callback registered", policy_count=registered)
        return self

    def build(self) -> AdminOptions:
        contexts = {}
        for name, info in self._contexts.items():
            builder = self._builders.get(name)
            if builder is None:
                contexts[name] = ContextOptions(context_type=info.context_type, name=name)
            else:
                contexts[name] = builder.build()
        return AdminOptions(
            contexts=contexts,
            discovered=tuple(self._contexts.values()),
            titles=TitleRegistry(titles=dict(self._titles)),
        )


class ContextOptionsBuilder:
    """Configures one context."""

    def __init__(
        self,
        info: ContextInfo,
        policies: PolicyRegistry,
        titles: dict[str, str],
        introspector: RecordIntrospector,
    ) -> None:
        self.info = info
        self.policies = policies
        self.introspector = introspector
        self._titles = titles
        self._title: str | None = None
        self._split_queries = False
        self._sets: dict[type, SetOptionsBuilder] = {}

    def with_title(self, title: str) -> "ContextOptionsBuilder":
        self._title = title
        self._titles[self.info.name] = title
        return self

    def with_split_queries(self, enabled: bool = True) -> "ContextOptionsBuilder":
        """Load displayable relations with separate statements instead of joins."""
        self._split_queries = enabled
        return self

    def configure_set(
        self,
        record_type: type,
        configure: Callable[["SetOptionsBuilder"], Any],
    ) -> "ContextOptionsBuilder":
        """
        Configure one set of this context.

        Raises:
            ConfigurationError: If the record type is not a set of this context
        """
        set_info = self.info.get_set(record_type)
        if set_info is None:
            name = getattr(record_type, "__name__", str(record_type))
            raise ConfigurationError(
                f"'{name}' is not a set of context '{self.info.name}'",
                details={"context": self.info.name, "record_type": name},
            )
        builder = self._sets.get(set_info.record_type)
        if builder is None:
            builder = SetOptionsBuilder(self, set_info)
            self._sets[set_info.record_type] = builder
        configure(builder)
        return self

    def user_can_read_if(self, predicate: PolicyPredicate) -> "ContextOptionsBuilder":
        """Guard the context's info page."""
        self.policies.add_policy(can_read_info(self.info.name), predicate)
        return self

    def build(self) -> ContextOptions:
        return ContextOptions(
            context_type=self.info.context_type,
            name=self.info.name,
            display_title=self._title,
            split_queries=self._split_queries,
            sets={record_type: b.build() for record_type, b in self._sets.items()},
        )


class SetOptionsBuilder:
    """Configures one set."""

    def __init__(self, context: ContextOptionsBuilder, info: SetInfo) -> None:
        self.context = context
        self.info = info
        self.record_type = info.record_type
        self._title: str | None = None
        self._string_display: Callable[[Any], str] | None = None
        self._component_display: type | None = None
        self._hidden: list[PropertyKey] = []
        self._display_overrides: dict[PropertyKey, type] = {}
        self._edit_overrides: dict[PropertyKey, type] = {}

    @property
    def introspector(self) -> RecordIntrospector:
        return self.context.introspector

    def with_title(self, title: str) -> "SetOptionsBuilder":
        self._title = title
        self.context._titles[f"{self.context.info.name}/{self.info.name}"] = title
        return self

    def with_string_display(self, formatter: Callable[[Any], str]) -> "SetOptionsBuilder":
        """Text used wherever a record of this set is shown as a whole."""
        if not callable(formatter):
            raise ConfigurationError(
                "String display must be callable",
                details={"record_type": self.info.name},
            )
        self._string_display = formatter
        return self

    def with_entity_display(self, component: type) -> "SetOptionsBuilder":
        self._component_display = ensure_entity_display_component(component, self.record_type)
        return self

    def configure_property(
        self,
        name: str,
        configure: Callable[["PropertyOptionsBuilder"], Any],
    ) -> "SetOptionsBuilder":
        """
        Configure one property of the set's record type.

        Raises:
            UnknownPropertyError: If the record type has no such property
        """
        configure(PropertyOptionsBuilder(self, name))
        return self

    # Policies

    def user_can_read_if(self, predicate: PolicyPredicate) -> "SetOptionsBuilder":
        self.context.policies.add_policy(can_read(self.context.info.name, self.info.name), predicate)
        return self

    def user_can_create_if(self, predicate: PolicyPredicate) -> "SetOptionsBuilder":
        self.context.policies.add_policy(can_create(self.context.info.name, self.info.name), predicate)
        return self

    def user_can_edit_if(self, predicate: PolicyPredicate) -> "SetOptionsBuilder":
        self.context.policies.add_policy(can_edit(self.context.info.name, self.info.name), predicate)
        return self

    def user_can_delete_if(self, predicate: PolicyPredicate) -> "SetOptionsBuilder":
        self.context.policies.add_policy(can_delete(self.context.info.name, self.info.name), predicate)
        return self

    # Overrides; the first registration for a property wins

    def _hide(self, key: PropertyKey) -> None:
        if key not in self._hidden:
            self._hidden.append(key)

    def _register(self, overrides: dict[PropertyKey, type], key: PropertyKey, component: type) -> None:
        existing = overrides.get(key)
        if existing is not None:
            logger.debug(
                "Duplicate override ignored",
                property_name=str(key),
                kept=existing.__name__,
                ignored=component.__name__,
            )
            return
        overrides[key] = component

    def build(self) -> SetOptions:
        return SetOptions(
            record_type=self.record_type,
            display_title=self._title,
            string_display=self._string_display,
            component_display=self._component_display,
            hidden_properties=tuple(self._hidden),
            display_overrides=dict(self._display_overrides),
            edit_overrides=dict(self._edit_overrides),
        )


class PropertyOptionsBuilder:
    """
    Configures one property of a set's record type.

    configure_property moves on to a sibling property of the same record
    type; with_entity_display and with_title apply to the owning set.
    """

    def __init__(self, owner: SetOptionsBuilder, name: str) -> None:
        record_type = owner.record_type
        descriptor = owner.introspector.get_property(record_type, name)
        if descriptor is None:
            known = (
                [p.name for p in owner.introspector.properties_of(record_type)]
                if owner.introspector.is_known(record_type)
                else []
            )
            raise UnknownPropertyError(name, record_type, known=known)
        self.owner = owner
        self.record_type = record_type
        self.descriptor: PropertyDescriptor = descriptor
        self.key = PropertyKey(record_type, name)

    def hidden(self) -> "PropertyOptionsBuilder":
        """Never render this property."""
        self.owner._hide(self.key)
        return self

    def with_display(self, component: type) -> "PropertyOptionsBuilder":
        ensure_property_display_component(component, self.descriptor)
        self.owner._register(self.owner._display_overrides, self.key, component)
        return self

    def with_editor(self, component: type) -> "PropertyOptionsBuilder":
        ensure_property_edit_component(component, self.record_type)
        self.owner._register(self.owner._edit_overrides, self.key, component)
        return self

    def configure_property(
        self,
        name: str,
        configure: Callable[["PropertyOptionsBuilder"], Any],
    ) -> "PropertyOptionsBuilder":
        """
        Configure another property of the same record type.

        Raises:
            UnknownPropertyError: If the record type has no such property
        """
        self.owner.configure_property(name, configure)
        return self

    def with_entity_display(self, component: type) -> SetOptionsBuilder:
        """Set the owning set's entity display component."""
        return self.owner.with_entity_display(component)

    def with_title(self, title: str) -> SetOptionsBuilder:
        """Title of the owning set."""
        return self.owner.with_title(title)

    def user_can_read_if(self, predicate: PolicyPredicate) -> "PropertyOptionsBuilder":
        self.owner.user_can_read_if(predicate)
        return self

    def user_can_create_if(self, predicate: PolicyPredicate) -> "PropertyOptionsBuilder":
        self.owner.user_can_create_if(predicate)
        return self

    def user_can_edit_if(self, predicate: PolicyPredicate) -> "PropertyOptionsBuilder":
        self.owner.user_can_edit_if(predicate)
        return self

    def user_can_delete_if(self, predicate: PolicyPredicate) -> "PropertyOptionsBuilder":
        self.owner.user_can_delete_if(predicate)
        return self
