"""
In-memory grant store.

A thread-safe, process-local implementation of the GrantStore protocol.
Useful in tests and for small applications that keep grants in memory;
production deployments plug in a store backed by their own database.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Hashable
from typing import Any

from actionguard.types import GLOBAL_SEGMENT, object_identity, object_type_name

logger = logging.getLogger(__name__)

GeneralGrantKey = tuple[Hashable, int, str, int]
ObjectGrantKey = tuple[Hashable, int, str, Hashable, int]


def _actor_key(actor: Any) -> Hashable:
    return (type(actor).__name__, object_identity(actor))


class InMemoryGrantStore:
    """
    GrantStore keeping grants in process memory.

    Actors and objects are keyed by their type name plus
    ``object_identity``, so two records with the same persisted id
    address the same grants.

    Example:
        >>> grants = InMemoryGrantStore()
        >>> grants.grant_general(user, 2, User)
        >>> grants.has_general_grant(user, 2, User, GLOBAL_SEGMENT)
        True
        >>> grants.grant_object(user, 4, other_user)
        >>> grants.has_object_grant(user, 4, other_user, GLOBAL_SEGMENT)
        True

    Thread Safety:
        All operations are thread-safe via internal locking.
    """

    def __init__(self) -> None:
        self._general: set[GeneralGrantKey] = set()
        self._objects: set[ObjectGrantKey] = set()
        self._lock = threading.RLock()
        self._lookups = 0

    @staticmethod
    def _general_key(
        actor: Any, action_id: int, object_type: Any, segment_id: int
    ) -> GeneralGrantKey:
        return (_actor_key(actor), action_id, object_type_name(object_type), segment_id)

    @staticmethod
    def _object_key(actor: Any, action_id: int, obj: Any, segment_id: int) -> ObjectGrantKey:
        return (
            _actor_key(actor),
            action_id,
            type(obj).__name__,
            object_identity(obj),
            segment_id,
        )

    def grant_general(
        self,
        actor: Any,
        action_id: int,
        object_type: Any,
        segment_id: int = GLOBAL_SEGMENT,
    ) -> None:
        """Record a grant for ``action_id`` on ``object_type`` in general."""
        with self._lock:
            self._general.add(self._general_key(actor, action_id, object_type, segment_id))
        logger.debug(
            f"Granted action {action_id} on {object_type_name(object_type)} "
            f"to {_actor_key(actor)!r} in segment {segment_id}"
        )

    def grant_object(
        self,
        actor: Any,
        action_id: int,
        obj: Any,
        segment_id: int = GLOBAL_SEGMENT,
    ) -> None:
        """Record a grant for ``action_id`` on one specific object."""
        with self._lock:
            self._objects.add(self._object_key(actor, action_id, obj, segment_id))
        logger.debug(
            f"Granted action {action_id} on {type(obj).__name__} "
            f"{object_identity(obj)!r} to {_actor_key(actor)!r} in segment {segment_id}"
        )

    def revoke_general(
        self,
        actor: Any,
        action_id: int,
        object_type: Any,
        segment_id: int = GLOBAL_SEGMENT,
    ) -> bool:
        """
        Remove a general grant.

        Returns:
            True if a grant was removed, False if none existed.
        """
        key = self._general_key(actor, action_id, object_type, segment_id)
        with self._lock:
            if key in self._general:
                self._general.discard(key)
                return True
            return False

    def revoke_object(
        self,
        actor: Any,
        action_id: int,
        obj: Any,
        segment_id: int = GLOBAL_SEGMENT,
    ) -> bool:
        """
        Remove an object grant.

        Returns:
            True if a grant was removed, False if none existed.
        """
        key = self._object_key(actor, action_id, obj, segment_id)
        with self._lock:
            if key in self._objects:
                self._objects.discard(key)
                return True
            return False

    def has_general_grant(
        self,
        actor: Any,
        action_id: int,
        object_type: Any,
        segment_id: int,
    ) -> bool:
        key = self._general_key(actor, action_id, object_type, segment_id)
        with self._lock:
            self._lookups += 1
            return key in self._general

    def has_object_grant(
        self,
        actor: Any,
        action_id: int,
        obj: Any,
        segment_id: int,
    ) -> bool:
        key = self._object_key(actor, action_id, obj, segment_id)
        with self._lock:
            self._lookups += 1
            return key in self._objects

    @property
    def lookup_count(self) -> int:
        """Number of lookups answered so far."""
        with self._lock:
            return self._lookups

    def clear(self) -> None:
        """Remove every grant. Useful for testing."""
        with self._lock:
            self._general.clear()
            self._objects.clear()
            self._lookups = 0
            logger.debug("Cleared all grants")

    def __len__(self) -> int:
        with self._lock:
            return len(self._general) + len(self._objects)
