"""
Tests for core value types.
"""

from __future__ import annotations

import pytest

from actionguard import (
    AuthorizationResult,
    Decision,
    InvalidArgumentError,
    object_identity,
    object_type_name,
)
from tests.conftest import User


class TestDecision:
    """Tests for the tri-state override decision."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (True, Decision.ALLOW),
            (False, Decision.DENY),
            (None, Decision.DEFER),
            (Decision.ALLOW, Decision.ALLOW),
            (Decision.DEFER, Decision.DEFER),
        ],
    )
    def test_coerce(self, value, expected):
        assert Decision.coerce(value) is expected

    @pytest.mark.parametrize("value", [1, 0, "allow", [], object()])
    def test_coerce_rejects_other_values(self, value):
        with pytest.raises(TypeError):
            Decision.coerce(value)

    def test_to_bool(self):
        assert Decision.ALLOW.to_bool() is True
        assert Decision.DENY.to_bool() is False

        with pytest.raises(ValueError):
            Decision.DEFER.to_bool()

    def test_is_definite(self):
        assert Decision.ALLOW.is_definite
        assert Decision.DENY.is_definite
        assert not Decision.DEFER.is_definite


class TestObjectIdentity:
    """Tests for the default object identity."""

    def test_none_is_no_object(self):
        assert object_identity(None) is None

    def test_persisted_id_attribute(self):
        record = User(name="Jim", id=42)

        assert object_identity(record) == 42

    def test_id_key_in_dict(self):
        assert object_identity({"id": "abc", "name": "Jim"}) == "abc"

    def test_hashable_without_id(self):
        assert object_identity("doc-1") == "doc-1"
        assert object_identity((1, 2)) == (1, 2)

    def test_unhashable_without_id_rejected(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            object_identity({"name": "Jim"})

        assert "PolicyBuilder.identity" in exc_info.value.message

    def test_unhashable_persisted_id_rejected(self):
        record = User(name="Jim", id=[1, 2])  # type: ignore[arg-type]

        with pytest.raises(InvalidArgumentError):
            object_identity(record)

    def test_unsaved_record_without_id(self):
        class Draft:
            id = None

        draft = Draft()

        assert object_identity(draft) is draft


class TestObjectTypeName:
    """Tests for object type names."""

    def test_class(self):
        assert object_type_name(User) == "User"

    def test_string(self):
        assert object_type_name("Document") == "Document"


class TestAuthorizationResult:
    """Tests for AuthorizationResult."""

    def test_allow_and_deny(self):
        allowed = AuthorizationResult.allow("ok", source="grant")
        denied = AuthorizationResult.deny("nope", source="override")

        assert allowed and allowed.source == "grant"
        assert not denied and denied.reason == "nope"

    def test_to_dict(self):
        result = AuthorizationResult(
            allowed=True,
            reason="Cached decision",
            source="cache",
            action="email",
            action_id=4,
            object_identity=7,
        )

        assert result.to_dict() == {
            "allowed": True,
            "reason": "Cached decision",
            "source": "cache",
            "action": "email",
            "action_id": 4,
            "object_identity": "7",
            "metadata": {},
        }
