"""
Execution context for ormadmin entry points.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4


@dataclass(frozen=True)
class Principal:
    """
    Represents the authenticated user making a request.

    This is the identity that authorization policies are evaluated against.
    """

    user_id: str
    roles: tuple[str, ...] = field(default_factory=tuple)
    claims: dict[str, Any] = field(default_factory=dict)
    authenticated: bool = True

    @classmethod
    def anonymous(cls) -> "Principal":
        """A principal with no identity and no roles."""
        return cls(user_id="", authenticated=False)

    def has_role(self, role: str) -> bool:
        """Check if the principal has a specific role."""
        return role in self.roles

    def has_any_role(self, *roles: str) -> bool:
        """Check if the principal has any of the specified roles."""
        return bool(set(roles) & set(self.roles))

    def claim(self, name: str, default: Any = None) -> Any:
        return self.claims.get(name, default)


@dataclass
class RequestContext:
    """
    Execution context for a single admin request.

    Carries the principal for policy checks, the database session the
    request runs against and tracking identifiers for logging.
    """

    principal: Principal
    db: Any  # SQLAlchemy Session or AsyncSession
    request_id: str = field(default_factory=lambda: str(uuid4()))
    trace_id: str | None = None
    now: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        *,
        user_id: str,
        db: Any,
        roles: tuple[str, ...] | list[str] = (),
        claims: dict[str, Any] | None = None,
        request_id: str | None = None,
        trace_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> "RequestContext":
        """
        Convenience factory for creating a RequestContext.

        Args:
            user_id: The user ID for policy checks and logging
            db: The database session
            roles: User roles
            claims: Additional identity claims
            request_id: Optional request ID (generated if not provided)
            trace_id: Optional trace ID for distributed tracing
            metadata: Optional additional metadata
        """
        principal = Principal(
            user_id=user_id,
            roles=tuple(roles),
            claims=claims or {},
        )
        return cls(
            principal=principal,
            db=db,
            request_id=request_id or str(uuid4()),
            trace_id=trace_id,
            metadata=metadata or {},
        )
