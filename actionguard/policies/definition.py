"""
Policy definitions for actionguard.

A PolicyDefinition is the immutable, process-wide description of one
policy type: its object type, its general and object action maps, its
override slots and the function used to derive object identities.
Definitions are built once, usually at import time, with a
PolicyBuilder or ``define_policy``, and then shared by every Policy
instance created from them.

Example:
    >>> user_policy = define_policy(
    ...     "user",
    ...     object_type=User,
    ...     actions={"view": 1, "edit_basic_info": 2, "change_role": 3, "destroy": 4},
    ...     object_actions={"view": 1, "edit_basic_info": 2, "change_role": 3, "email": 4},
    ... )
    >>>
    >>> builder = user_policy.extend("customized_user")
    >>>
    >>> @builder.object_override("email")
    ... def anyone_can_email_aaron(actor, obj):
    ...     return True if obj.name == "Aaron" else None
    >>>
    >>> customized = builder.build()
    >>> customized.policy(current_user, grants).can("email", other_user)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from actionguard.exceptions import ConfigurationError, ObjectTypeNotImplementedError
from actionguard.policies.actions import ActionRegistry
from actionguard.policies.base import Policy
from actionguard.policies.overrides import GeneralOverride, ObjectOverride, OverrideSet
from actionguard.types import ActionScope, object_identity

if TYPE_CHECKING:
    from actionguard.grants.base import GrantStore
    from actionguard.policies.base import PolicyConfig

logger = logging.getLogger(__name__)

IdentityResolver = Callable[[Any], Hashable]


@dataclass(frozen=True, eq=False)
class PolicyDefinition:
    """
    Immutable configuration of a policy type.

    Attributes:
        name: Name of the policy, used in errors, logs and registries.
        object_type: The type of object this policy evaluates against.
            Optional at definition time; required by the first check.
        actions: The general and object action maps.
        overrides: Override slots per action name and call shape.
        identity: Derives the cache identity of a target object.
    """
    name: str
    object_type: Any = None
    actions: ActionRegistry = field(default_factory=ActionRegistry)
    overrides: OverrideSet = field(default_factory=OverrideSet)
    identity: IdentityResolver = object_identity

    def require_object_type(self) -> Any:
        """
        Return the object type, failing if the definition never set one.

        Raises:
            ObjectTypeNotImplementedError: If no object type was declared.
        """
        if self.object_type is None:
            raise ObjectTypeNotImplementedError(self.name)
        return self.object_type

    @property
    def general_actions(self) -> Mapping[str, int]:
        return self.actions.general_actions

    @property
    def object_actions(self) -> Mapping[str, int]:
        return self.actions.object_actions

    def extend(self, name: str | None = None) -> PolicyBuilder:
        """
        Start a derived definition.

        The builder inherits this definition's object type, actions,
        overrides and identity function. Anything registered on it
        replaces the inherited value for that name and call shape.

        Args:
            name: Name of the derived policy. Defaults to this name.
        """
        builder = PolicyBuilder(name or self.name)
        builder._object_type = self.object_type
        builder._actions = self.actions
        builder._overrides = self.overrides
        builder._identity = self.identity
        return builder

    def policy(
        self,
        actor: Any,
        grants: GrantStore,
        config: PolicyConfig | None = None,
    ) -> Policy:
        """Create a policy instance bound to ``actor``."""
        return Policy(self, actor, grants, config)

    def __repr__(self) -> str:
        return (
            f"PolicyDefinition(name={self.name!r}, object_type={self.object_type!r}, "
            f"general_actions={dict(self.general_actions)!r}, "
            f"object_actions={dict(self.object_actions)!r}, "
            f"overrides={self.overrides!r})"
        )


class PolicyBuilder:
    """
    Mutable builder producing a PolicyDefinition.

    Registration calls may be repeated; action maps merge with the
    last write winning per name, and overrides replace any earlier
    override for the same name and call shape. Nothing here is shared:
    the builder is discarded once ``build`` has been called.

    Example:
        >>> builder = PolicyBuilder("user")
        >>> builder.object_type(User)
        >>> builder.register_general_actions({"view": 1, "destroy": 4})
        >>> builder.register_object_actions({"view": 1, "email": 4})
        >>> builder.override_general(
        ...     "destroy", lambda actor: True if actor.name == "Aaron" else None
        ... )
        >>> user_policy = builder.build()
    """

    def __init__(self, name: str) -> None:
        if not name:
            raise ConfigurationError(config_key="name", expected="a non-empty policy name")
        self.name = name
        self._object_type: Any = None
        self._actions = ActionRegistry(policy_name=name)
        self._overrides = OverrideSet()
        self._identity: IdentityResolver = object_identity

    def object_type(self, object_type: Any) -> PolicyBuilder:
        self._object_type = object_type
        return self

    def register_general_actions(self, actions: Mapping[str, int]) -> PolicyBuilder:
        """Merge general actions (name -> id) into the definition."""
        self._actions = self._actions.merge(general=actions)
        return self

    def register_object_actions(self, actions: Mapping[str, int]) -> PolicyBuilder:
        """Merge object-scoped actions (name -> id) into the definition."""
        self._actions = self._actions.merge(objects=actions)
        return self

    def override_general(self, name: str, fn: GeneralOverride) -> PolicyBuilder:
        """Set the override for the general check of ``name``."""
        self._overrides = self._overrides.with_general(name, fn)
        return self

    def override_object(self, name: str, fn: ObjectOverride) -> PolicyBuilder:
        """Set the override for the object check of ``name``."""
        self._overrides = self._overrides.with_object(name, fn)
        return self

    def clear_override(self, name: str, scope: ActionScope) -> PolicyBuilder:
        """Drop an inherited override so the check goes straight to the grant store."""
        self._overrides = self._overrides.without(name, scope)
        return self

    def general_override(self, name: str) -> Callable[[GeneralOverride], GeneralOverride]:
        """
        Decorator form of ``override_general``.

        Example:
            >>> @builder.general_override("destroy")
            ... def aaron_can_destroy(actor):
            ...     return True if actor.name == "Aaron" else None
        """
        def decorator(fn: GeneralOverride) -> GeneralOverride:
            self.override_general(name, fn)
            return fn
        return decorator

    def object_override(self, name: str) -> Callable[[ObjectOverride], ObjectOverride]:
        """Decorator form of ``override_object``."""
        def decorator(fn: ObjectOverride) -> ObjectOverride:
            self.override_object(name, fn)
            return fn
        return decorator

    def identity(self, fn: IdentityResolver) -> PolicyBuilder:
        """Use a custom function to derive object identities for caching."""
        if not callable(fn):
            raise ConfigurationError(
                config_key=f"{self.name}.identity",
                expected="a callable",
                received=fn,
            )
        self._identity = fn
        return self

    def build(self) -> PolicyDefinition:
        """
        Validate and freeze the definition.

        The object type is not required here; a definition without one
        fails on its first check instead.

        Raises:
            ConfigurationError: If an override targets an action that is
                not registered for that call shape.
        """
        for scope in ActionScope:
            registered = self._actions.actions(scope)
            for action in self._overrides.slot(scope):
                if action not in registered:
                    raise ConfigurationError(
                        config_key=f"{self.name}.overrides.{scope.value}.{action}",
                        expected=f"an action registered as {scope.value}",
                        received=action,
                    )

        definition = PolicyDefinition(
            name=self.name,
            object_type=self._object_type,
            actions=self._actions.renamed(self.name),
            overrides=self._overrides,
            identity=self._identity,
        )
        logger.debug(
            f"Built policy '{self.name}' with {len(definition.general_actions)} general "
            f"and {len(definition.object_actions)} object actions, "
            f"{len(definition.overrides)} overrides"
        )
        return definition


def define_policy(
    name: str,
    *,
    object_type: Any = None,
    actions: Mapping[str, int] | None = None,
    object_actions: Mapping[str, int] | None = None,
    overrides: Mapping[str, GeneralOverride] | None = None,
    object_overrides: Mapping[str, ObjectOverride] | None = None,
    identity: IdentityResolver | None = None,
) -> PolicyDefinition:
    """
    Build a PolicyDefinition in one call.

    Args:
        name: Name of the policy.
        object_type: The type of object the policy evaluates against.
        actions: General action name -> id.
        object_actions: Object-scoped action name -> id.
        overrides: General override per action name.
        object_overrides: Object override per action name.
        identity: Custom object identity function.

    Returns:
        The frozen PolicyDefinition.
    """
    builder = PolicyBuilder(name).object_type(object_type)
    builder.register_general_actions(actions or {})
    builder.register_object_actions(object_actions or {})
    for action, fn in (overrides or {}).items():
        builder.override_general(action, fn)
    for action, fn in (object_overrides or {}).items():
        builder.override_object(action, fn)
    if identity is not None:
        builder.identity(identity)
    return builder.build()
