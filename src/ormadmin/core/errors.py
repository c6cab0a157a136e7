"""
Error taxonomy for ormadmin.

All ormadmin errors inherit from AdminError and include:
- A unique error code for programmatic handling
- A human-readable message
- Optional structured details for logging and UI feedback

Only data-integrity and configuration problems raise. Filter and sort
conveniences degrade silently (see ormadmin.query).
"""

from typing import Any


class AdminError(Exception):
    """
    Base class for all ormadmin errors.

    Attributes:
        code: Unique error code for programmatic handling
        message: Human-readable error message
        details: Additional error context
    """

    code: str = "ADMIN_ERROR"

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to a dictionary for serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(AdminError):
    """Startup wiring is invalid (unknown set, unmapped editor family, ...)."""

    code = "CONFIGURATION_ERROR"


class UnknownRecordTypeError(AdminError):
    """The record type is not mapped by the storage model."""

    code = "UNKNOWN_RECORD_TYPE"

    def __init__(self, record_type: Any, **kwargs: Any) -> None:
        name = getattr(record_type, "__name__", str(record_type))
        super().__init__(
            f"Record type '{name}' not found in the storage model",
            details={"record_type": name},
            **kwargs,
        )


class MissingPrimaryKeyError(AdminError):
    """The record type declares no primary key."""

    code = "MISSING_PRIMARY_KEY"

    def __init__(self, record_type: Any, **kwargs: Any) -> None:
        name = getattr(record_type, "__name__", str(record_type))
        super().__init__(
            f"Primary key for record type '{name}' not found",
            details={"record_type": name},
            **kwargs,
        )


class UnknownPropertyError(ConfigurationError):
    """A configuration call named a property the record type does not have."""

    code = "UNKNOWN_PROPERTY"

    def __init__(
        self,
        property_name: str,
        record_type: Any,
        known: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        name = getattr(record_type, "__name__", str(record_type))
        super().__init__(
            f"Property '{property_name}' does not exist on record type '{name}'",
            details={"property": property_name, "record_type": name, "known": known or []},
            **kwargs,
        )


class InvalidComponentError(ConfigurationError):
    """A capability override does not satisfy the component contract."""

    code = "INVALID_COMPONENT"

    def __init__(self, component: Any, contract: str, reason: str | None = None, **kwargs: Any) -> None:
        name = getattr(component, "__name__", repr(component))
        message = f"Component '{name}' must implement {contract}"
        if reason:
            message += f" ({reason})"
        super().__init__(
            message,
            details={"component": name, "contract": contract},
            **kwargs,
        )


class PolicyNotFoundError(AdminError):
    """No policy is registered for the requested identity."""

    code = "POLICY_NOT_FOUND"

    def __init__(self, identity: str, **kwargs: Any) -> None:
        super().__init__(
            f"No policy registered for '{identity}'",
            details={"identity": identity},
            **kwargs,
        )


class AccessDeniedError(AdminError):
    """The principal is not authorized for the requested action."""

    code = "ACCESS_DENIED"

    def __init__(self, identity: str, user_id: str | None = None, **kwargs: Any) -> None:
        super().__init__(
            f"Access denied for policy '{identity}'",
            details={"identity": identity, "user_id": user_id},
            **kwargs,
        )


class ValidationError(AdminError):
    """Input validation failed on a write or key lookup."""

    code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            details={"field": field} if field else {},
            **kwargs,
        )


class NotFoundError(AdminError):
    """Requested record was not found."""

    code = "NOT_FOUND"

    def __init__(
        self,
        record_type: Any,
        key: Any,
        **kwargs: Any,
    ) -> None:
        name = getattr(record_type, "__name__", str(record_type))
        super().__init__(
            f"Record not found: {name} with key '{key}'",
            details={"record_type": name, "key": key},
            **kwargs,
        )
