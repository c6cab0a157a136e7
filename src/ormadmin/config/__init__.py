"""
ormadmin Config Module.

Context discovery, immutable admin options and the fluent builders that
produce them.
"""

from ormadmin.config.builder import (
    AdminOptionsBuilder,
    ContextOptionsBuilder,
    PropertyOptionsBuilder,
    SetOptionsBuilder,
)
from ormadmin.config.discovery import (
    ContextInfo,
    SetInfo,
    discover_context,
    discover_contexts,
)
from ormadmin.config.models import (
    AdminOptions,
    ContextOptions,
    PropertyKey,
    SetOptions,
    TitleRegistry,
)

__all__ = [
    # Discovery
    "ContextInfo",
    "SetInfo",
    "discover_context",
    "discover_contexts",
    # Options
    "AdminOptions",
    "ContextOptions",
    "PropertyKey",
    "SetOptions",
    "TitleRegistry",
    # Builders
    "AdminOptionsBuilder",
    "ContextOptionsBuilder",
    "SetOptionsBuilder",
    "PropertyOptionsBuilder",
]
