"""
Override slots for actionguard policies.

Every action name has two independent override slots: one for the
general call shape, receiving ``(actor)``, and one for the object call
shape, receiving ``(actor, obj)``. An override answers ALLOW, DENY or
DEFER. A deferring override hands the check to the grant store; it
never falls back to an override inherited from a parent definition.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, Union

from actionguard.exceptions import ConfigurationError
from actionguard.types import ActionScope, ActionSpec, Decision

logger = logging.getLogger(__name__)

OverrideResult = Union[Decision, bool, None]
GeneralOverride = Callable[[Any], OverrideResult]
ObjectOverride = Callable[[Any, Any], OverrideResult]


class OverrideSet:
    """
    Immutable mapping of action name to override, per call shape.

    ``with_general`` and ``with_object`` return new sets, so a derived
    policy definition replaces an inherited override without touching
    the parent's.

    Example:
        >>> overrides = (
        ...     OverrideSet()
        ...     .with_general("destroy", lambda actor: actor.name == "Aaron" or None)
        ...     .with_object("email", lambda actor, obj: obj.name == "Aaron" or None)
        ... )
        >>> overrides.has_override("destroy", ActionScope.GENERAL)
        True
        >>> overrides.has_override("destroy", ActionScope.OBJECT)
        False
    """

    __slots__ = ("_general", "_objects")

    def __init__(
        self,
        general: Mapping[str, GeneralOverride] | None = None,
        objects: Mapping[str, ObjectOverride] | None = None,
    ) -> None:
        for kind, slot in (("general", general or {}), ("object", objects or {})):
            for name, fn in slot.items():
                if not callable(fn):
                    raise ConfigurationError(
                        config_key=f"overrides.{kind}.{name}",
                        expected="a callable override",
                        received=fn,
                    )
        self._general = MappingProxyType(dict(general or {}))
        self._objects = MappingProxyType(dict(objects or {}))

    @property
    def general(self) -> Mapping[str, GeneralOverride]:
        return self._general

    @property
    def objects(self) -> Mapping[str, ObjectOverride]:
        return self._objects

    def slot(self, scope: ActionScope) -> Mapping[str, Callable[..., OverrideResult]]:
        if scope is ActionScope.GENERAL:
            return self._general
        return self._objects

    def with_general(self, name: str, fn: GeneralOverride) -> OverrideSet:
        """Return a copy with the general override for ``name`` replaced."""
        return OverrideSet({**self._general, name: fn}, self._objects)

    def with_object(self, name: str, fn: ObjectOverride) -> OverrideSet:
        """Return a copy with the object override for ``name`` replaced."""
        return OverrideSet(self._general, {**self._objects, name: fn})

    def without(self, name: str, scope: ActionScope) -> OverrideSet:
        """Return a copy with one override slot cleared."""
        if scope is ActionScope.GENERAL:
            general = {k: v for k, v in self._general.items() if k != name}
            return OverrideSet(general, self._objects)
        objects = {k: v for k, v in self._objects.items() if k != name}
        return OverrideSet(self._general, objects)

    def has_override(self, name: str, scope: ActionScope) -> bool:
        return name in self.slot(scope)

    def resolve(self, spec: ActionSpec, actor: Any, obj: Any = None) -> Decision:
        """
        Run the override registered for an action's call shape.

        Args:
            spec: The resolved action being checked.
            actor: The actor the policy instance is bound to.
            obj: The target object for object-scoped checks.

        Returns:
            The override's decision, or ``Decision.DEFER`` when no
            override is registered for this slot.

        Raises:
            TypeError: If the override returns something other than a
                Decision, a bool or None.
        """
        fn = self.slot(spec.scope).get(spec.name)
        if fn is None:
            return Decision.DEFER

        if spec.takes_object:
            decision = Decision.coerce(fn(actor, obj))
        else:
            decision = Decision.coerce(fn(actor))

        logger.debug(
            f"Override for {spec.scope.value} action '{spec.name}' "
            f"returned {decision.value}"
        )
        return decision

    def __len__(self) -> int:
        return len(self._general) + len(self._objects)

    def __repr__(self) -> str:
        return (
            f"OverrideSet(general={sorted(self._general)!r}, "
            f"objects={sorted(self._objects)!r})"
        )
