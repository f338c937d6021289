"""
Grant store protocol for actionguard.

The policy dispatcher never reads grants directly. It asks a GrantStore
two questions: does this actor hold a grant for an action in general,
and does it hold one for an action on a specific object. Durable
stores (a SQL table, a key-value service, ...) live outside this
library and only need to implement these two read queries.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class GrantStore(Protocol):
    """
    Protocol for the grant lookups a policy falls back to.

    Implementations must be pure reads from the policy's point of view,
    must return False when no grant is found, and must be safe for
    concurrent reads. Errors they raise propagate to the caller of the
    check unchanged and are not cached.

    Example:
        >>> class SqlGrantStore:
        ...     def has_general_grant(self, actor, action_id, object_type, segment_id):
        ...         return session.query(...).filter_by(
        ...             actor_id=actor.id, action=action_id,
        ...             object_type=object_type_name(object_type),
        ...             segment_id=segment_id,
        ...         ).first() is not None
        ...
        ...     def has_object_grant(self, actor, action_id, obj, segment_id):
        ...         ...
    """

    def has_general_grant(
        self,
        actor: Any,
        action_id: int,
        object_type: Any,
        segment_id: int,
    ) -> bool:
        """
        Check for a grant independent of any object.

        Args:
            actor: The actor the policy is bound to.
            action_id: Numeric id of the action.
            object_type: The policy's object type the grant applies to.
            segment_id: Segment the grant must be recorded in.

        Returns:
            True if the grant exists, False otherwise.
        """
        ...

    def has_object_grant(
        self,
        actor: Any,
        action_id: int,
        obj: Any,
        segment_id: int,
    ) -> bool:
        """
        Check for a grant on one specific object.

        Args:
            actor: The actor the policy is bound to.
            action_id: Numeric id of the action.
            obj: The target object.
            segment_id: Segment the grant must be recorded in.

        Returns:
            True if the grant exists, False otherwise.
        """
        ...
