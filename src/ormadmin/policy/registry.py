"""
In-process authorization evaluator.

Maps policy identities to predicates over the current principal. Policies
are registered during startup wiring and only read afterwards.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ormadmin.core.context import Principal
from ormadmin.core.errors import AccessDeniedError, PolicyNotFoundError
from ormadmin.logging import get_logger
from ormadmin.policy.identity import ActionInfo

logger = get_logger(__name__)

PolicyPredicate = Callable[[Principal], bool]


@dataclass(frozen=True)
class PolicyRegistration:
    """One identity and the assertion guarding it."""

    identity: str
    predicate: PolicyPredicate
    action_info: ActionInfo | None = None


class PolicyRegistry:
    """
    Registry of named policies.

    Registering the same identity twice keeps the later predicate.
    Evaluating an identity nobody registered is an error, never a denial:
    bulk registration exists so that this cannot happen for any discovered
    context or set.
    """

    def __init__(self) -> None:
        self._policies: dict[str, PolicyPredicate] = {}

    def add_policy(self, identity: str, predicate: PolicyPredicate) -> None:
        """Attach an assertion to an identity, replacing any earlier one."""
        replaced = identity in self._policies
        self._policies[identity] = predicate
        logger.debug("Policy registered", identity=identity, replaced=replaced)

    def register_all(self, registrations: Iterable[PolicyRegistration]) -> int:
        """Register a batch of policies; returns how many were registered."""
        count = 0
        for registration in registrations:
            self.add_policy(registration.identity, registration.predicate)
            count += 1
        return count

    def has_policy(self, identity: str) -> bool:
        return identity in self._policies

    def identities(self) -> list[str]:
        return sorted(self._policies)

    def evaluate(self, identity: str, principal: Principal) -> bool:
        """
        Evaluate a policy for a principal.

        Raises:
            PolicyNotFoundError: If no policy is registered for the identity
        """
        predicate = self._policies.get(identity)
        if predicate is None:
            raise PolicyNotFoundError(identity)
        return bool(predicate(principal))

    def require(self, identity: str, principal: Principal) -> None:
        """
        Raise unless the principal satisfies the policy.

        Raises:
            PolicyNotFoundError: If no policy is registered for the identity
            AccessDeniedError: If the predicate rejects the principal
        """
        if not self.evaluate(identity, principal):
            logger.info("Access denied", identity=identity, user_id=principal.user_id)
            raise AccessDeniedError(identity, user_id=principal.user_id)
