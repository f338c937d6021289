"""
Policy registry for actionguard.

This module provides the PolicyRegistry class for registering and
looking up policy definitions by name. Registries are ordinary objects
owned by the application (typically through ActionGuard); there is no
module-level registry.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from actionguard.exceptions import PolicyNotFoundError

if TYPE_CHECKING:
    from actionguard.grants.base import GrantStore
    from actionguard.policies.base import Policy, PolicyConfig
    from actionguard.policies.definition import PolicyDefinition

logger = logging.getLogger(__name__)


class PolicyRegistry:
    """
    Registry of policy definitions by name.

    Example:
        >>> registry = PolicyRegistry()
        >>> registry.register(user_policy)
        >>> registry.get("user") is user_policy
        True
        >>> policy = registry.get_policy_instance("user", current_user, grants)

    Thread Safety:
        All operations are thread-safe via internal locking.
    """

    def __init__(self) -> None:
        self._definitions: dict[str, PolicyDefinition] = {}
        self._lock = threading.RLock()

    def register(self, definition: PolicyDefinition) -> PolicyDefinition:
        """
        Register a policy definition under its name.

        Registering a second definition with the same name replaces the
        first and logs a warning.

        Returns:
            The registered definition.
        """
        with self._lock:
            existing = self._definitions.get(definition.name)
            if existing is not None and existing is not definition:
                logger.warning(f"Overwriting policy definition '{definition.name}'")
            self._definitions[definition.name] = definition

        logger.debug(f"Registered policy '{definition.name}'")
        return definition

    def get(self, name: str) -> PolicyDefinition:
        """
        Get the policy definition registered under ``name``.

        Raises:
            PolicyNotFoundError: If no definition has that name.
        """
        with self._lock:
            if name in self._definitions:
                return self._definitions[name]
            available = sorted(self._definitions)
        raise PolicyNotFoundError(name, available)

    def get_policy_instance(
        self,
        name: str,
        actor: Any,
        grants: GrantStore,
        config: PolicyConfig | None = None,
    ) -> Policy:
        """
        Create a policy instance for a registered definition.

        Each call returns a new instance with an empty evaluation cache.
        """
        return self.get(name).policy(actor, grants, config)

    def has_policy(self, name: str) -> bool:
        with self._lock:
            return name in self._definitions

    def list_policies(self) -> dict[str, list[str]]:
        """
        List registered policies and their action names.

        Example:
            >>> registry.list_policies()
            {'user': ['change_role', 'destroy', 'edit_basic_info', 'email', 'view']}
        """
        with self._lock:
            return {
                name: definition.actions.names()
                for name, definition in self._definitions.items()
            }

    def unregister(self, name: str) -> bool:
        """
        Unregister a policy definition.

        Returns:
            True if a definition was removed, False if none was registered.
        """
        with self._lock:
            if name in self._definitions:
                del self._definitions[name]
                logger.debug(f"Unregistered policy '{name}'")
                return True
            return False

    def clear(self) -> None:
        """Remove every registered definition."""
        with self._lock:
            self._definitions.clear()
            logger.debug("Cleared all registered policies")

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._definitions

    def __len__(self) -> int:
        with self._lock:
            return len(self._definitions)
