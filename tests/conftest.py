"""
Pytest fixtures for actionguard tests.

Provides common fixtures used across all test modules.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any

import pytest

from actionguard import InMemoryGrantStore, PolicyDefinition, define_policy


_ids = itertools.count(1)


@dataclass
class User:
    """Minimal persisted record used as both actor and target object."""

    name: str | None = None
    id: int = field(default_factory=lambda: next(_ids))


class RecordingGrantStore(InMemoryGrantStore):
    """InMemoryGrantStore that records every lookup it answers."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple[Any, ...]] = []

    def has_general_grant(self, actor, action_id, object_type, segment_id):
        self.calls.append(("general", actor.id, action_id, segment_id))
        return super().has_general_grant(actor, action_id, object_type, segment_id)

    def has_object_grant(self, actor, action_id, obj, segment_id):
        self.calls.append(("object", actor.id, action_id, obj.id, segment_id))
        return super().has_object_grant(actor, action_id, obj, segment_id)


# ============================================================================
# Record Fixtures
# ============================================================================


@pytest.fixture
def user() -> User:
    """Create an anonymous user."""
    return User()


@pytest.fixture
def other_user() -> User:
    """Create a second anonymous user."""
    return User()


@pytest.fixture
def aaron() -> User:
    return User(name="Aaron")


@pytest.fixture
def bob() -> User:
    return User(name="Bob")


@pytest.fixture
def jim() -> User:
    return User(name="Jim")


# ============================================================================
# Grant Store Fixtures
# ============================================================================


@pytest.fixture
def grants() -> RecordingGrantStore:
    """Create an empty grant store that records lookups."""
    return RecordingGrantStore()


# ============================================================================
# Policy Definition Fixtures
# ============================================================================


USER_ACTIONS = {
    "view": 1,
    "edit_basic_info": 2,
    "change_role": 3,
    "destroy": 4,
}

USER_OBJECT_ACTIONS = {
    "view": 1,
    "edit_basic_info": 2,
    "change_role": 3,
    "email": 4,
}


@pytest.fixture
def user_policy() -> PolicyDefinition:
    """Policy over users with no overrides."""
    return define_policy(
        "user",
        object_type=User,
        actions=USER_ACTIONS,
        object_actions=USER_OBJECT_ACTIONS,
    )


@pytest.fixture
def customized_user_policy(user_policy: PolicyDefinition) -> PolicyDefinition:
    """
    Policy over users with overrides for destroy, change_role and email.

    - Aaron can always destroy users.
    - Bob can never change roles in general.
    - Anyone can change the role of, and email, a user named Aaron.
    """
    builder = user_policy.extend("customized_user")

    @builder.general_override("destroy")
    def aaron_can_destroy(actor):
        return True if actor.name == "Aaron" else None

    @builder.general_override("change_role")
    def bob_cannot_change_roles(actor):
        return False if actor.name == "Bob" else None

    @builder.object_override("change_role")
    def anyone_can_change_aarons_role(actor, obj):
        return True if obj.name == "Aaron" else None

    @builder.object_override("email")
    def anyone_can_email_aaron(actor, obj):
        return True if obj.name == "Aaron" else None

    return builder.build()


@pytest.fixture
def untyped_policy() -> PolicyDefinition:
    """Policy that never declares an object type."""
    return define_policy("untyped", actions={"view": 1}, object_actions={"view": 1})
