"""
Main ActionGuard class.

ActionGuard ties together the pieces an application needs for policy
checks: a registry of policy definitions, the grant store checks fall
back to, and the runtime configuration shared by every policy instance
it creates.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from actionguard.exceptions import ConfigurationError
from actionguard.grants.base import GrantStore
from actionguard.policies.base import Policy, PolicyConfig
from actionguard.policies.definition import define_policy
from actionguard.policies.registry import PolicyRegistry

if TYPE_CHECKING:
    from actionguard.policies.definition import PolicyDefinition

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ActionGuard:
    """
    Main entry point for actionguard.

    Example:
        >>> from actionguard import ActionGuard, InMemoryGrantStore
        >>>
        >>> guard = ActionGuard(grants=InMemoryGrantStore())
        >>> guard.define(
        ...     "user",
        ...     object_type=User,
        ...     actions={"view": 1, "edit_basic_info": 2},
        ...     object_actions={"view": 1, "email": 4},
        ... )
        >>>
        >>> # One policy instance per request; its answers are cached
        >>> policy = guard.policy_for("user", current_user)
        >>> if policy.can("email", other_user):
        ...     send_email(other_user)
    """

    def __init__(
        self,
        grants: GrantStore,
        config: PolicyConfig | None = None,
        registry: PolicyRegistry | None = None,
    ) -> None:
        """
        Initialize ActionGuard.

        Args:
            grants: The grant store policy checks fall back to.
            config: Runtime configuration for created policy instances.
            registry: Optional PolicyRegistry to use. If not provided,
                a new registry is created.

        Raises:
            ConfigurationError: If ``grants`` does not implement GrantStore.
        """
        if not isinstance(grants, GrantStore):
            raise ConfigurationError(
                config_key="grants",
                expected="an object implementing has_general_grant and has_object_grant",
                received=type(grants).__name__,
            )
        self._grants = grants
        self.config = config or PolicyConfig()
        self.registry = registry or PolicyRegistry()
        logger.debug(
            f"ActionGuard initialized with {type(grants).__name__}, "
            f"segment {self.config.segment_id}"
        )

    @property
    def grants(self) -> GrantStore:
        return self._grants

    def register(self, definition: PolicyDefinition) -> PolicyDefinition:
        """Register a policy definition and return it."""
        return self.registry.register(definition)

    def define(
        self,
        name: str,
        *,
        object_type: Any = None,
        actions: Mapping[str, int] | None = None,
        object_actions: Mapping[str, int] | None = None,
        **kwargs: Any,
    ) -> PolicyDefinition:
        """
        Build a policy definition with ``define_policy`` and register it.

        Extra keyword arguments (``overrides``, ``object_overrides``,
        ``identity``) are passed through to ``define_policy``.
        """
        definition = define_policy(
            name,
            object_type=object_type,
            actions=actions,
            object_actions=object_actions,
            **kwargs,
        )
        return self.register(definition)

    def policy_for(self, name: str, actor: Any) -> Policy:
        """
        Create a fresh policy instance for ``actor``.

        Each call starts with an empty evaluation cache, so grants
        recorded since the last instance are visible.

        Raises:
            PolicyNotFoundError: If no policy is registered under ``name``.
        """
        return self.registry.get_policy_instance(name, actor, self._grants, self.config)

    def can(self, actor: Any, name: str, action: str, obj: Any = None) -> bool:
        """
        One-off check through a throwaway policy instance.

        Prefer ``policy_for`` when making several checks in one request.
        """
        return self.policy_for(name, actor).can(action, obj)

    def authorize(self, actor: Any, name: str, action: str, obj: T | None = None) -> T | None:
        """
        One-off check raising AuthorizationError when denied.

        Returns:
            ``obj`` when the check is allowed.
        """
        return self.policy_for(name, actor).authorize(action, obj)

    def __repr__(self) -> str:
        return (
            f"ActionGuard(grants={type(self._grants).__name__}, "
            f"policies={sorted(self.registry.list_policies())!r})"
        )
