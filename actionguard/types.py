"""
Core type definitions for actionguard.

This module defines the small value types shared by the policy
dispatcher, the override slots, the evaluation cache and the grant
store: the tri-state override decision, action scopes and specs,
authorization results, and the default object identity rules.
"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from actionguard.exceptions import InvalidArgumentError

# Segment every grant lookup is scoped to unless reconfigured.
GLOBAL_SEGMENT = -1


class Decision(Enum):
    """
    Outcome of an override check.

    ``ALLOW`` and ``DENY`` are definite answers. ``DEFER`` asks the
    dispatcher to fall back to the grant store.
    """

    ALLOW = "allow"
    DENY = "deny"
    DEFER = "defer"

    @classmethod
    def coerce(cls, value: Any) -> Decision:
        """
        Normalize an override's return value.

        ``True``/``False`` map to ``ALLOW``/``DENY`` and ``None`` maps
        to ``DEFER``, so plain lambdas such as
        ``lambda actor: True if actor.name == "Aaron" else None`` work.

        Raises:
            TypeError: For any other value.
        """
        if isinstance(value, Decision):
            return value
        if value is None:
            return cls.DEFER
        if isinstance(value, bool):
            return cls.ALLOW if value else cls.DENY
        raise TypeError(
            f"Override must return a Decision, a bool or None, "
            f"got {type(value).__name__}"
        )

    @property
    def is_definite(self) -> bool:
        """Whether this decision answers the check on its own."""
        return self is not Decision.DEFER

    def to_bool(self) -> bool:
        """Convert a definite decision to a bool."""
        if self is Decision.DEFER:
            raise ValueError("DEFER has no boolean value")
        return self is Decision.ALLOW


class ActionScope(Enum):
    """Call shape an action is registered for."""

    GENERAL = "general"
    OBJECT = "object"


@dataclass(frozen=True)
class ActionSpec:
    """
    A resolved action: its name, caller-supplied id and call shape.

    Attributes:
        name: Action name as registered (e.g. "view").
        action_id: Opaque integer id supplied by the policy definition.
        scope: Whether this is the general or the object-scoped variant.
    """
    name: str
    action_id: int
    scope: ActionScope

    @property
    def takes_object(self) -> bool:
        return self.scope is ActionScope.OBJECT


@dataclass
class AuthorizationResult:
    """
    Result of a single policy check, with the source of the decision.

    Attributes:
        allowed: Whether the action is authorized.
        reason: Human-readable explanation of the decision.
        source: Where the decision came from: "override", "grant" or "cache".
        action: The action name that was checked.
        action_id: The numeric id of the action.
        object_identity: Identity of the target object, None for general checks.
        metadata: Additional information about the decision.

    Example:
        >>> result = policy.explain("email", other_user)
        >>> result.allowed, result.source
        (True, 'override')
    """
    allowed: bool
    reason: str | None = None
    source: str | None = None
    action: str | None = None
    action_id: int | None = None
    object_identity: Any = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def allow(cls, reason: str | None = None, **kwargs: Any) -> AuthorizationResult:
        """Create an allowed result."""
        return cls(allowed=True, reason=reason, **kwargs)

    @classmethod
    def deny(cls, reason: str, **kwargs: Any) -> AuthorizationResult:
        """Create a denied result."""
        return cls(allowed=False, reason=reason, **kwargs)

    def __bool__(self) -> bool:
        return self.allowed

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "allowed": self.allowed,
            "reason": self.reason,
            "source": self.source,
            "action": self.action,
            "action_id": self.action_id,
            "object_identity": (
                str(self.object_identity) if self.object_identity is not None else None
            ),
            "metadata": self.metadata,
        }


def object_identity(obj: Any) -> Hashable | None:
    """
    Derive a stable identity for a target object.

    Uses the object's persisted identifier (an ``id`` attribute or
    ``"id"`` key) when it has one, and the object itself when it is
    hashable. Anything else has no stable identity; give the policy an
    identity function with ``PolicyBuilder.identity`` instead.

    Example:
        >>> object_identity(User(id=7))
        7
        >>> object_identity(None) is None
        True

    Raises:
        InvalidArgumentError: If the persisted id is not hashable, or the
            object has no persisted id and is not hashable.
    """
    if obj is None:
        return None

    if isinstance(obj, dict):
        persisted = obj.get("id")
    else:
        persisted = getattr(obj, "id", None)
    if persisted is not None and not callable(persisted):
        if not _is_hashable(persisted):
            raise InvalidArgumentError(
                f"Persisted id of {type(obj).__name__} is not hashable",
                {"object_type": type(obj).__name__, "id": repr(persisted)},
            )
        return persisted

    if not _is_hashable(obj):
        raise InvalidArgumentError(
            f"Cannot derive a stable identity for {type(obj).__name__}: "
            f"it has no 'id' and is not hashable. "
            f"Supply an identity function with PolicyBuilder.identity",
            {"object_type": type(obj).__name__},
        )
    return obj


def _is_hashable(value: Any) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True


def object_type_name(object_type: Any) -> str:
    """
    Name of an object type as stored alongside grants.

    Example:
        >>> object_type_name(User)
        'User'
        >>> object_type_name("Document")
        'Document'
    """
    if isinstance(object_type, str):
        return object_type
    return getattr(object_type, "__name__", str(object_type))
