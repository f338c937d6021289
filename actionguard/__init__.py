"""
actionguard: declarative action-based authorization policies.

Policies declare named actions, checked against an actor alone or
against an actor and a target object. A check is answered by an
optional per-action override, falling back to a grant store, and is
cached for the lifetime of the policy instance.

Basic Usage:
    >>> from actionguard import ActionGuard, Decision, InMemoryGrantStore
    >>>
    >>> grants = InMemoryGrantStore()
    >>> guard = ActionGuard(grants)
    >>>
    >>> guard.define(
    ...     "user",
    ...     object_type=User,
    ...     actions={"view": 1, "edit_basic_info": 2, "destroy": 4},
    ...     object_actions={"view": 1, "email": 4},
    ...     object_overrides={
    ...         "email": lambda actor, obj: Decision.ALLOW if obj.name == "Aaron"
    ...         else Decision.DEFER,
    ...     },
    ... )
    >>>
    >>> policy = guard.policy_for("user", current_user)
    >>> policy.can("edit_basic_info")
    False
    >>> grants.grant_general(current_user, 2, User)
    >>> policy.can("edit_basic_info")  # cached for this instance
    False
    >>> guard.policy_for("user", current_user).can("edit_basic_info")
    True
"""

__version__ = "0.1.0"

from actionguard.caching import CacheStats, EvaluationCache
from actionguard.core import ActionGuard
from actionguard.exceptions import (
    ActionGuardError,
    ArityError,
    AuthorizationError,
    ConfigurationError,
    InvalidArgumentError,
    ObjectTypeNotImplementedError,
    PolicyNotFoundError,
    UnknownActionError,
)
from actionguard.grants import GrantStore, InMemoryGrantStore
from actionguard.policies import (
    ActionRegistry,
    OverrideSet,
    Policy,
    PolicyBuilder,
    PolicyConfig,
    PolicyDefinition,
    PolicyRegistry,
    define_policy,
)
from actionguard.types import (
    GLOBAL_SEGMENT,
    ActionScope,
    ActionSpec,
    AuthorizationResult,
    Decision,
    object_identity,
    object_type_name,
)

__all__ = [
    "__version__",
    # Main class
    "ActionGuard",
    # Types
    "GLOBAL_SEGMENT",
    "ActionScope",
    "ActionSpec",
    "AuthorizationResult",
    "Decision",
    "object_identity",
    "object_type_name",
    # Policies
    "ActionRegistry",
    "OverrideSet",
    "Policy",
    "PolicyBuilder",
    "PolicyConfig",
    "PolicyDefinition",
    "PolicyRegistry",
    "define_policy",
    # Grants
    "GrantStore",
    "InMemoryGrantStore",
    # Caching
    "CacheStats",
    "EvaluationCache",
    # Exceptions
    "ActionGuardError",
    "ArityError",
    "AuthorizationError",
    "ConfigurationError",
    "InvalidArgumentError",
    "ObjectTypeNotImplementedError",
    "PolicyNotFoundError",
    "UnknownActionError",
]
