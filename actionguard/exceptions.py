"""
Custom exceptions for actionguard.

This module defines the exception hierarchy for the library. Every error
is raised synchronously at the call site of a policy check and is never
cached, so a failing check can be retried once the caller has fixed
the request or the policy definition.
"""

from __future__ import annotations

from typing import Any


class ActionGuardError(Exception):
    """
    Base exception for all actionguard errors.

    Attributes:
        message: Human-readable error description.
        details: Additional context about the error.

    Example:
        >>> try:
        ...     policy.can("edit")
        ... except ActionGuardError as e:
        ...     logger.error(f"Policy check failed: {e}")
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class InvalidArgumentError(ActionGuardError, ValueError):
    """
    Raised when a policy check is called with arguments it cannot accept.

    Covers unknown action names and call-shape (arity) mismatches.
    """


class UnknownActionError(InvalidArgumentError):
    """
    Raised when an action name is not registered on a policy.

    Attributes:
        policy_name: The policy the action was looked up on.
        action: The requested action name.
        available_actions: Registered action names (for debugging).

    Example:
        >>> raise UnknownActionError("user", "fly", ["view", "edit"])
    """

    def __init__(
        self,
        policy_name: str,
        action: str,
        available_actions: list[str] | None = None,
    ) -> None:
        self.policy_name = policy_name
        self.action = action
        self.available_actions = available_actions or []

        message = f"Unknown action '{action}' for policy '{policy_name}'"
        if available_actions:
            message += f". Available actions: {', '.join(available_actions)}"

        details = {
            "policy_name": policy_name,
            "action": action,
            "available_actions": self.available_actions,
        }
        super().__init__(message, details)


class ArityError(InvalidArgumentError):
    """
    Raised when an action is checked with the wrong call shape.

    A general-only action must be checked without an object, and an
    object-only action must be checked with one.

    Attributes:
        policy_name: The policy the action belongs to.
        action: The requested action name.
        object_given: Whether the caller supplied a target object.

    Example:
        >>> raise ArityError("user", "destroy", object_given=True)
    """

    def __init__(self, policy_name: str, action: str, object_given: bool) -> None:
        self.policy_name = policy_name
        self.action = action
        self.object_given = object_given

        if object_given:
            message = (
                f"Action '{action}' of policy '{policy_name}' is not defined "
                f"on objects; call it without an object"
            )
        else:
            message = (
                f"Action '{action}' of policy '{policy_name}' requires an object"
            )

        details = {
            "policy_name": policy_name,
            "action": action,
            "object_given": object_given,
        }
        super().__init__(message, details)


class ConfigurationError(ActionGuardError):
    """
    Raised when a policy is defined or configured incorrectly.

    Attributes:
        config_key: The configuration key that has an issue.
        expected: What was expected for this configuration.
        received: What was actually provided.

    Example:
        >>> raise ConfigurationError(
        ...     config_key="general_actions.view",
        ...     expected="an integer action id",
        ...     received="one",
        ... )
    """

    def __init__(
        self,
        config_key: str,
        expected: str | None = None,
        received: Any = None,
    ) -> None:
        self.config_key = config_key
        self.expected = expected
        self.received = received

        message = f"Configuration error for '{config_key}'"
        if expected:
            message += f": expected {expected}"
        if received is not None:
            message += f", got {received!r}"

        details = {
            "config_key": config_key,
            "expected": expected,
            "received": str(received) if received is not None else None,
        }
        super().__init__(message, details)


class ObjectTypeNotImplementedError(ConfigurationError, NotImplementedError):
    """
    Raised on the first check of a policy that never declared an object type.

    The object type is optional at definition time and only required
    once a check is actually performed.
    """

    def __init__(self, policy_name: str) -> None:
        self.policy_name = policy_name
        super().__init__(
            config_key=f"{policy_name}.object_type",
            expected="an object type declared on the policy definition",
        )


class PolicyNotFoundError(ActionGuardError):
    """
    Raised when a requested policy definition cannot be found.

    Attributes:
        policy_name: The name for which no policy was found.
        available_policies: Registered policy names (for debugging).
    """

    def __init__(
        self,
        policy_name: str,
        available_policies: list[str] | None = None,
    ) -> None:
        self.policy_name = policy_name
        self.available_policies = available_policies or []

        message = f"No policy found with name '{policy_name}'"
        if available_policies:
            message += f". Available policies: {', '.join(available_policies)}"

        details = {
            "policy_name": policy_name,
            "available_policies": self.available_policies,
        }
        super().__init__(message, details)


class AuthorizationError(ActionGuardError):
    """
    Raised by ``Policy.authorize`` when a check is denied.

    Attributes:
        policy_name: The policy that denied the check.
        action: The action that was attempted.
        object_identity: Identity of the target object, or None.
        reason: Explanation of why the check was denied.

    Example:
        >>> policy.authorize("destroy")
        Traceback (most recent call last):
        ...
        AuthorizationError: Not authorized to 'destroy' with policy 'user' ...
    """

    def __init__(
        self,
        policy_name: str,
        action: str,
        object_identity: Any = None,
        reason: str | None = None,
    ) -> None:
        self.policy_name = policy_name
        self.action = action
        self.object_identity = object_identity
        self.reason = reason or "Authorization denied"

        message = f"Not authorized to '{action}' with policy '{policy_name}'"
        if object_identity is not None:
            message += f" on object {object_identity!r}"
        message += f". Reason: {self.reason}"

        details = {
            "policy_name": policy_name,
            "action": action,
            "object_identity": (
                str(object_identity) if object_identity is not None else None
            ),
            "reason": self.reason,
        }
        super().__init__(message, details)
