"""
Bulk policy registration over discovered contexts.

build_policy_registrations is a pure function: discovered contexts in,
(identity, predicate) pairs out. Registering the result gives every admin
entry point a resolvable policy even when the host configures nothing.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from ormadmin.core.context import Principal
from ormadmin.policy.identity import (
    CONTEXT_ACTIONS,
    SET_ACTIONS,
    ActionInfo,
)
from ormadmin.policy.registry import PolicyPredicate, PolicyRegistration

if TYPE_CHECKING:
    from ormadmin.config.discovery import ContextInfo

AuthorizationCallback = Callable[[ActionInfo, Principal], bool]


def allow_all(action_info: ActionInfo, principal: Principal) -> bool:
    """Default callback: every principal may do everything."""
    return True


def bind_callback(callback: AuthorizationCallback, action_info: ActionInfo) -> PolicyPredicate:
    """Close a callback over one action so it fits the predicate signature."""

    def predicate(principal: Principal) -> bool:
        return callback(action_info, principal)

    return predicate


def iter_action_infos(contexts: Iterable[ContextInfo]) -> list[ActionInfo]:
    """Every (context, action) and (context, set, action) triple."""
    infos: list[ActionInfo] = []
    for context in contexts:
        for action in CONTEXT_ACTIONS:
            infos.append(ActionInfo(action=action, context_name=context.name))
        for set_info in context.sets:
            for action in SET_ACTIONS:
                infos.append(
                    ActionInfo(action=action, context_name=context.name, set_name=set_info.name)
                )
    return infos


def build_policy_registrations(
    contexts: Iterable[ContextInfo],
    callback: AuthorizationCallback = allow_all,
) -> list[PolicyRegistration]:
    """
    Build one registration per synthesized identity.

    Args:
        contexts: Discovered contexts
        callback: Decides every action; defaults to allowing everything
    """
    return [
        PolicyRegistration(
            identity=info.identity,
            predicate=bind_callback(callback, info),
            action_info=info,
        )
        for info in iter_action_infos(contexts)
    ]
