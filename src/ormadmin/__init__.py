"""
ormadmin - generic admin scaffolding for SQLAlchemy models.

ormadmin turns the mapped classes of a SQLAlchemy declarative base into the
query, capability and authorization layer of an admin UI: filtered, sorted
and paged list queries, per-property editor selection, and one named policy
for every admin action on every set.
"""

__version__ = "0.1.0"

from ormadmin.core.context import Principal, RequestContext
from ormadmin.core.errors import (
    AccessDeniedError,
    AdminError,
    ConfigurationError,
    NotFoundError,
    PolicyNotFoundError,
    ValidationError,
)
from ormadmin.config import AdminOptions, AdminOptionsBuilder
from ormadmin.navigation import NavigationPaths
from ormadmin.policy import PolicyRegistry
from ormadmin.site import AdminSite

__all__ = [
    # Version
    "__version__",
    # Context
    "Principal",
    "RequestContext",
    # Errors
    "AdminError",
    "AccessDeniedError",
    "ConfigurationError",
    "NotFoundError",
    "PolicyNotFoundError",
    "ValidationError",
    # Wiring
    "AdminOptions",
    "AdminOptionsBuilder",
    "PolicyRegistry",
    "AdminSite",
    "NavigationPaths",
]
