"""
Policy identity synthesis.

Every guarded admin entry point is named by a plain string derived from the
context type, the set's record type and the action. The UI and the policy
registry compute these strings independently, so the functions here must
stay pure: the same inputs always give byte-identical output.
"""

from dataclasses import dataclass
from enum import Enum


class AdminAction(str, Enum):
    """Authorizable actions. Values are the identity tags."""

    READ_CONTEXT_INFO = "Info"
    READ_RECORDS = "Read"
    CREATE_RECORD = "Create"
    EDIT_RECORD = "Edit"
    DELETE_RECORD = "Delete"


CONTEXT_ACTIONS: tuple[AdminAction, ...] = (AdminAction.READ_CONTEXT_INFO,)

SET_ACTIONS: tuple[AdminAction, ...] = (
    AdminAction.READ_RECORDS,
    AdminAction.CREATE_RECORD,
    AdminAction.EDIT_RECORD,
    AdminAction.DELETE_RECORD,
)


@dataclass(frozen=True)
class ActionInfo:
    """What is being authorized: an action on a context, or on one of its sets."""

    action: AdminAction
    context_name: str
    set_name: str = ""

    @property
    def identity(self) -> str:
        return policy_identity(self.context_name, self.action, self.set_name or None)


def type_name(value: type | str) -> str:
    """The name a type contributes to an identity."""
    return value if isinstance(value, str) else value.__name__


def context_policy(
    context_type: type | str,
    action: AdminAction = AdminAction.READ_CONTEXT_INFO,
) -> str:
    """
    Identity of a context-level policy, e.g. "DemoDb/Info".

    Raises:
        ValueError: If the action applies to sets, not contexts
    """
    if action not in CONTEXT_ACTIONS:
        raise ValueError(f"Action '{action.name}' is not a context-level action")
    return f"{type_name(context_type)}/{action.value}"


def set_policy(
    context_type: type | str,
    record_type: type | str,
    action: AdminAction,
) -> str:
    """
    Identity of a set-level policy, e.g. "DemoDb/Person/Edit".

    Raises:
        ValueError: If the action applies to contexts, not sets
    """
    if action not in SET_ACTIONS:
        raise ValueError(f"Action '{action.name}' is not a set-level action")
    return f"{type_name(context_type)}/{type_name(record_type)}/{action.value}"


def policy_identity(
    context_type: type | str,
    action: AdminAction,
    record_type: type | str | None = None,
) -> str:
    """Dispatch to context_policy or set_policy depending on record_type."""
    if record_type is None:
        return context_policy(context_type, action)
    return set_policy(context_type, record_type, action)


def can_read_info(context_type: type | str) -> str:
    return context_policy(context_type, AdminAction.READ_CONTEXT_INFO)


def can_read(context_type: type | str, record_type: type | str) -> str:
    return set_policy(context_type, record_type, AdminAction.READ_RECORDS)


def can_create(context_type: type | str, record_type: type | str) -> str:
    return set_policy(context_type, record_type, AdminAction.CREATE_RECORD)


def can_edit(context_type: type | str, record_type: type | str) -> str:
    return set_policy(context_type, record_type, AdminAction.EDIT_RECORD)


def can_delete(context_type: type | str, record_type: type | str) -> str:
    return set_policy(context_type, record_type, AdminAction.DELETE_RECORD)
