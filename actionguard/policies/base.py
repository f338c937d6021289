"""
Policy instances for actionguard.

A Policy binds one PolicyDefinition to one actor for the duration of a
request or session and answers checks such as ``policy.can("view")`` or
``policy.can("email", other_user)``.

Every check follows the same procedure:

1. Resolve the action name for the call shape (with or without an
   object); unknown names and arity mismatches raise InvalidArgumentError.
2. Require the definition's object type.
3. Return the cached outcome for ``(action_id, object_identity)`` if
   this instance already resolved it.
4. Otherwise run the override for that action and call shape; when it
   defers, or there is none, ask the grant store.
5. Cache the outcome and return it.

Cached outcomes are never invalidated. A policy instance keeps
answering from its snapshot even after grants change; create a new
instance to pick up new grants.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from actionguard.caching.evaluation_cache import EvaluationCache
from actionguard.exceptions import AuthorizationError
from actionguard.types import GLOBAL_SEGMENT, ActionSpec, AuthorizationResult

if TYPE_CHECKING:
    from actionguard.grants.base import GrantStore
    from actionguard.policies.definition import PolicyDefinition

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class PolicyConfig:
    """
    Runtime configuration for policy instances.

    Attributes:
        segment_id: Segment all grant lookups are scoped to.
        log_decisions: Log every resolved decision at INFO instead of DEBUG.

    Example:
        >>> config = PolicyConfig(log_decisions=True)
        >>> policy = Policy(user_policy, user, grants, config)
    """

    segment_id: int = GLOBAL_SEGMENT
    log_decisions: bool = False


class Policy:
    """
    A policy definition bound to one actor, with its own evaluation cache.

    Attributes:
        definition: The immutable PolicyDefinition being evaluated.
        actor: The actor every check is made for.
        grants: The GrantStore consulted when no override decides.
        config: Runtime configuration.

    Example:
        >>> policy = Policy(user_policy, current_user, grants)
        >>> policy.can("edit_basic_info")
        False
        >>> policy.can("email", other_user)
        True
        >>> policy.authorize("destroy")
        Traceback (most recent call last):
        ...
        AuthorizationError: Not authorized to 'destroy' with policy 'user'...

    Thread Safety:
        Not thread-safe. Use one instance per request or session;
        separate instances are fully independent.
    """

    def __init__(
        self,
        definition: PolicyDefinition,
        actor: Any,
        grants: GrantStore,
        config: PolicyConfig | None = None,
    ) -> None:
        self._definition = definition
        self._actor = actor
        self._grants = grants
        self.config = config or PolicyConfig()
        self._cache = EvaluationCache()

    @property
    def definition(self) -> PolicyDefinition:
        return self._definition

    @property
    def actor(self) -> Any:
        return self._actor

    @property
    def grants(self) -> GrantStore:
        return self._grants

    @property
    def cache(self) -> EvaluationCache:
        return self._cache

    @property
    def name(self) -> str:
        return self._definition.name

    def evaluate(self, action: str, obj: Any = None) -> bool:
        """
        Check whether the actor may perform ``action``.

        Args:
            action: Name of the action (e.g. "view").
            obj: The target object for object-scoped actions. Leave as
                None for general actions.

        Returns:
            True if the action is allowed, False otherwise.

        Raises:
            UnknownActionError: If the action is not registered.
            ArityError: If the action is not registered for this call shape.
            ObjectTypeNotImplementedError: If the definition has no object type.
        """
        return self.explain(action, obj).allowed

    def can(self, action: str, obj: Any = None) -> bool:
        """
        Alias for evaluate() for a more fluent API.

        Example:
            >>> if policy.can("edit_basic_info", other_user):
            ...     save(other_user)
        """
        return self.evaluate(action, obj)

    def explain(self, action: str, obj: Any = None) -> AuthorizationResult:
        """
        Check an action and report where the decision came from.

        Same procedure and errors as ``evaluate``. The result's
        ``source`` is "cache" when the outcome was already known to
        this instance, "override" when an override decided, and
        "grant" when the grant store was consulted.
        """
        spec = self._definition.actions.resolve(action, has_object=obj is not None)
        object_type = self._definition.require_object_type()
        identity = self._definition.identity(obj) if obj is not None else None
        key = EvaluationCache.key(spec.action_id, identity)

        cached = self._cache.lookup(key)
        if cached is not None:
            logger.debug(
                f"Policy '{self.name}' answered {spec.scope.value} action "
                f"'{action}' from cache: {cached}"
            )
            return self._result(cached, "cache", "Cached decision", spec, identity)

        decision = self._definition.overrides.resolve(spec, self._actor, obj)
        if decision.is_definite:
            allowed = decision.to_bool()
            source = "override"
            reason = f"Override for '{action}' returned {decision.value}"
        else:
            allowed = self._lookup_grant(spec, object_type, obj)
            source = "grant"
            if allowed:
                reason = f"Grant found for action {spec.action_id}"
            else:
                reason = f"No grant found for action {spec.action_id}"

        if key in self._cache:
            # resolved re-entrantly while the override or grant lookup ran
            allowed = self._cache.setdefault(key, allowed)
            source = "cache"
            reason = "Cached decision"
        else:
            self._cache.store(key, allowed)

        log = logger.info if self.config.log_decisions else logger.debug
        log(
            f"Policy '{self.name}' {'allowed' if allowed else 'denied'} "
            f"{spec.scope.value} action '{action}' (id={spec.action_id}, "
            f"object={identity!r}) via {source}"
        )
        return self._result(allowed, source, reason, spec, identity)

    def authorize(self, action: str, obj: T | None = None) -> T | None:
        """
        Require that the actor may perform ``action``.

        Returns:
            The object that was checked (None for general actions), so
            calls can be chained: ``doc = policy.authorize("edit", doc)``.

        Raises:
            AuthorizationError: If the check is denied.
        """
        result = self.explain(action, obj)
        if not result.allowed:
            raise AuthorizationError(
                policy_name=self.name,
                action=action,
                object_identity=result.object_identity,
                reason=result.reason,
            )
        return obj

    def permitted(self, action: str, candidates: Iterable[T]) -> list[T]:
        """
        Filter ``candidates`` to the objects the actor may act on.

        Each candidate goes through the normal object check, so
        overrides apply and every outcome lands in this instance's cache.

        Args:
            action: An object-scoped action name.
            candidates: Objects to check.

        Returns:
            The permitted candidates, in their original order.

        Raises:
            UnknownActionError: If the action is not registered.
            ArityError: If ``action`` is not registered as an object action.
        """
        self._definition.actions.resolve(action, has_object=True)
        return [obj for obj in candidates if obj is not None and self.evaluate(action, obj)]

    def _lookup_grant(self, spec: ActionSpec, object_type: Any, obj: Any) -> bool:
        segment_id = self.config.segment_id
        if spec.takes_object:
            found = self._grants.has_object_grant(self._actor, spec.action_id, obj, segment_id)
        else:
            found = self._grants.has_general_grant(
                self._actor, spec.action_id, object_type, segment_id
            )
        return bool(found)

    @staticmethod
    def _result(
        allowed: bool,
        source: str,
        reason: str,
        spec: ActionSpec,
        identity: Any,
    ) -> AuthorizationResult:
        return AuthorizationResult(
            allowed=allowed,
            reason=reason,
            source=source,
            action=spec.name,
            action_id=spec.action_id,
            object_identity=identity,
            metadata={"scope": spec.scope.value},
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(policy={self.name!r}, actor={self._actor!r})"
