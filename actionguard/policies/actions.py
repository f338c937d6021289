"""
Action registry for actionguard policies.

Each policy definition owns one ActionRegistry holding two independent
maps from action name to numeric action id: general actions, checked
against an actor alone, and object actions, checked against an actor
and a target object. A name may appear in both maps.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from actionguard.exceptions import ArityError, ConfigurationError, UnknownActionError
from actionguard.types import ActionScope, ActionSpec


def _validated(actions: Mapping[str, int] | None, kind: str) -> dict[str, int]:
    result: dict[str, int] = {}
    for name, action_id in (actions or {}).items():
        if not isinstance(name, str) or not name:
            raise ConfigurationError(
                config_key=f"{kind}_actions",
                expected="non-empty action names",
                received=name,
            )
        # bool is an int subclass but never a meaningful action id
        if isinstance(action_id, bool) or not isinstance(action_id, int):
            raise ConfigurationError(
                config_key=f"{kind}_actions.{name}",
                expected="an integer action id",
                received=action_id,
            )
        result[name] = action_id
    return result


class ActionRegistry:
    """
    Immutable name -> id maps for general and object-scoped actions.

    Registries are built once per policy definition. ``merge`` returns
    a new registry instead of mutating this one, so definitions can be
    shared freely between policy instances and threads.

    Example:
        >>> actions = ActionRegistry.build(
        ...     general={"view": 1, "destroy": 4},
        ...     objects={"view": 1, "email": 4},
        ... )
        >>> actions.resolve("email", has_object=True)
        ActionSpec(name='email', action_id=4, scope=<ActionScope.OBJECT: 'object'>)
    """

    __slots__ = ("_general", "_objects", "policy_name")

    def __init__(
        self,
        general: Mapping[str, int] | None = None,
        objects: Mapping[str, int] | None = None,
        policy_name: str = "policy",
    ) -> None:
        self._general = MappingProxyType(_validated(general, "general"))
        self._objects = MappingProxyType(_validated(objects, "object"))
        self.policy_name = policy_name

    @classmethod
    def build(
        cls,
        general: Mapping[str, int] | None = None,
        objects: Mapping[str, int] | None = None,
        policy_name: str = "policy",
    ) -> ActionRegistry:
        return cls(general, objects, policy_name)

    @property
    def general_actions(self) -> Mapping[str, int]:
        """Read-only view of general action name -> id."""
        return self._general

    @property
    def object_actions(self) -> Mapping[str, int]:
        """Read-only view of object action name -> id."""
        return self._objects

    def actions(self, scope: ActionScope) -> Mapping[str, int]:
        if scope is ActionScope.GENERAL:
            return self._general
        return self._objects

    def merge(
        self,
        general: Mapping[str, int] | None = None,
        objects: Mapping[str, int] | None = None,
    ) -> ActionRegistry:
        """
        Return a new registry with more actions merged in.

        Later registrations win per name, within each map separately.

        Args:
            general: General action name -> id to add or replace.
            objects: Object action name -> id to add or replace.

        Returns:
            A new ActionRegistry; this one is unchanged.
        """
        merged_general = {**self._general, **_validated(general, "general")}
        merged_objects = {**self._objects, **_validated(objects, "object")}
        return ActionRegistry(merged_general, merged_objects, self.policy_name)

    def renamed(self, policy_name: str) -> ActionRegistry:
        return ActionRegistry(self._general, self._objects, policy_name)

    def scopes_for(self, name: str) -> set[ActionScope]:
        """Call shapes an action name is registered for."""
        scopes: set[ActionScope] = set()
        if name in self._general:
            scopes.add(ActionScope.GENERAL)
        if name in self._objects:
            scopes.add(ActionScope.OBJECT)
        return scopes

    def names(self) -> list[str]:
        """All registered action names, sorted."""
        return sorted(set(self._general) | set(self._objects))

    def resolve(self, name: str, has_object: bool) -> ActionSpec:
        """
        Resolve an action name for a call shape.

        Args:
            name: The action name being checked.
            has_object: Whether the caller supplied a target object.

        Returns:
            The ActionSpec for that name and call shape.

        Raises:
            UnknownActionError: If the name is not registered at all.
            ArityError: If the name is registered, but not for this call shape.
        """
        scope = ActionScope.OBJECT if has_object else ActionScope.GENERAL
        table = self.actions(scope)
        if name in table:
            return ActionSpec(name=name, action_id=table[name], scope=scope)

        if name in self._general or name in self._objects:
            raise ArityError(self.policy_name, name, object_given=has_object)

        raise UnknownActionError(self.policy_name, name, self.names())

    def __contains__(self, name: object) -> bool:
        return name in self._general or name in self._objects

    def __len__(self) -> int:
        return len(self._general) + len(self._objects)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ActionRegistry):
            return NotImplemented
        return (
            dict(self._general) == dict(other._general)
            and dict(self._objects) == dict(other._objects)
        )

    def __hash__(self) -> int:
        return hash((
            frozenset(self._general.items()),
            frozenset(self._objects.items()),
        ))

    def __repr__(self) -> str:
        return (
            f"ActionRegistry(policy={self.policy_name!r}, "
            f"general={dict(self._general)!r}, objects={dict(self._objects)!r})"
        )
