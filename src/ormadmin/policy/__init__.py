"""
ormadmin Policy Module.

Policy identity synthesis, the policy registry and bulk registration.
"""

from ormadmin.policy.bulk import (
    AuthorizationCallback,
    allow_all,
    build_policy_registrations,
    iter_action_infos,
)
from ormadmin.policy.identity import (
    CONTEXT_ACTIONS,
    SET_ACTIONS,
    ActionInfo,
    AdminAction,
    can_create,
    can_delete,
    can_edit,
    can_read,
    can_read_info,
    context_policy,
    policy_identity,
    set_policy,
)
from ormadmin.policy.registry import PolicyPredicate, PolicyRegistration, PolicyRegistry

__all__ = [
    # Identity
    "AdminAction",
    "ActionInfo",
    "CONTEXT_ACTIONS",
    "SET_ACTIONS",
    "context_policy",
    "set_policy",
    "policy_identity",
    "can_read_info",
    "can_read",
    "can_create",
    "can_edit",
    "can_delete",
    # Registry
    "PolicyPredicate",
    "PolicyRegistration",
    "PolicyRegistry",
    # Bulk registration
    "AuthorizationCallback",
    "allow_all",
    "build_policy_registrations",
    "iter_action_infos",
]
