"""
Policy system for actionguard.

Quick Start:
    >>> from actionguard.policies import define_policy
    >>> from actionguard.grants import InMemoryGrantStore
    >>>
    >>> user_policy = define_policy(
    ...     "user",
    ...     object_type=User,
    ...     actions={"view": 1, "edit_basic_info": 2, "destroy": 4},
    ...     object_actions={"view": 1, "email": 4},
    ...     overrides={"destroy": lambda actor: True if actor.name == "Aaron" else None},
    ... )
    >>>
    >>> policy = user_policy.policy(current_user, InMemoryGrantStore())
    >>> policy.can("view")
    False
    >>> policy.can("email", other_user)
    False
"""

from actionguard.policies.actions import ActionRegistry
from actionguard.policies.base import Policy, PolicyConfig
from actionguard.policies.definition import (
    PolicyBuilder,
    PolicyDefinition,
    define_policy,
)
from actionguard.policies.overrides import OverrideSet
from actionguard.policies.registry import PolicyRegistry

__all__ = [
    # Definitions
    "ActionRegistry",
    "OverrideSet",
    "PolicyBuilder",
    "PolicyDefinition",
    "define_policy",
    # Instances
    "Policy",
    "PolicyConfig",
    # Registry
    "PolicyRegistry",
]
