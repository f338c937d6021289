"""
Tests for the exception hierarchy.
"""

from __future__ import annotations

import pytest

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


class TestHierarchy:
    """Tests for exception inheritance."""

    @pytest.mark.parametrize(
        "error",
        [
            UnknownActionError("user", "fly"),
            ArityError("user", "email", object_given=False),
            ConfigurationError("user.object_type"),
            ObjectTypeNotImplementedError("user"),
            PolicyNotFoundError("user"),
            AuthorizationError("user", "destroy"),
        ],
    )
    def test_all_errors_are_actionguard_errors(self, error):
        assert isinstance(error, ActionGuardError)

    def test_invalid_arguments_are_value_errors(self):
        assert issubclass(UnknownActionError, InvalidArgumentError)
        assert issubclass(ArityError, InvalidArgumentError)
        assert issubclass(InvalidArgumentError, ValueError)

    def test_object_type_error_is_not_implemented(self):
        assert issubclass(ObjectTypeNotImplementedError, ConfigurationError)
        assert issubclass(ObjectTypeNotImplementedError, NotImplementedError)


class TestMessages:
    """Tests for error messages and serialization."""

    def test_arity_messages(self):
        with_object = ArityError("user", "destroy", object_given=True)
        without_object = ArityError("user", "email", object_given=False)

        assert "not defined on objects" in with_object.message
        assert "requires an object" in without_object.message

    def test_unknown_action_lists_available(self):
        error = UnknownActionError("user", "fly", ["edit", "view"])

        assert "Available actions: edit, view" in str(error)

    def test_object_type_error_names_policy(self):
        error = ObjectTypeNotImplementedError("user")

        assert error.config_key == "user.object_type"
        assert "object type" in error.message

    def test_authorization_error_message(self):
        error = AuthorizationError("user", "email", object_identity=7, reason="No grant found")

        assert "'email'" in error.message
        assert "7" in error.message
        assert error.details["object_identity"] == "7"

    def test_to_dict(self):
        error = ConfigurationError("general_actions.view", expected="an integer", received="x")

        d = error.to_dict()

        assert d["error_type"] == "ConfigurationError"
        assert d["details"]["config_key"] == "general_actions.view"
        assert d["details"]["received"] == "x"
