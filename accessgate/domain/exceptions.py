"""Domain exceptions for accessgate.

Defines domain-level exceptions for dispatch configuration, authorization
outcomes, credential validation and data integrity. These exceptions are
independent of infrastructure concerns. The presentation layer maps them
to HTTP responses in exception handlers.
"""

from typing import Any


class AccessGateException(Exception):
    """Base exception for all accessgate errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. request_type, user_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the transport layer."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(AccessGateException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(AccessGateException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ResourceAlreadyExistsException(AccessGateException):
    """Raised when creating a resource whose unique key is taken (role name, permission code, menu name)."""

    def __init__(self, resource_type: str, identifier: str) -> None:
        super().__init__(
            f"{resource_type} already exists: {identifier}",
            "RESOURCE_ALREADY_EXISTS",
            {"resource_type": resource_type, "identifier": identifier},
        )


class DuplicateAssignmentException(AccessGateException):
    """Raised when a link row already exists (unique constraint on role/permission or user/role)."""

    def __init__(
        self,
        message: str,
        assignment_type: str,
        details_extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with message and assignment context.

        Args:
            message: Human-readable description (e.g. 'Permission already assigned to role').
            assignment_type: 'role_permission' or 'user_role'.
            details_extra: Optional extra keys (e.g. role_id, permission_id).
        """
        details = dict(details_extra or {})
        details["assignment_type"] = assignment_type
        super().__init__(message, "DUPLICATE_ASSIGNMENT", details)


# Dispatcher


class DispatcherConfigurationError(AccessGateException):
    """Raised when the handler registry is misconfigured (startup-time bug, never retried)."""

    def __init__(
        self,
        message: str,
        error_code: str = "DISPATCHER_CONFIGURATION_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, details)


class HandlerNotFound(DispatcherConfigurationError):
    """Raised when a request is dispatched whose type has no registered handler."""

    def __init__(self, request_type: type) -> None:
        super().__init__(
            f"No handler registered for {request_type.__qualname__}",
            "HANDLER_NOT_FOUND",
            {"request_type": request_type.__qualname__},
        )


class HandlerAmbiguous(DispatcherConfigurationError):
    """Raised when a second handler is registered for the same request type."""

    def __init__(self, request_type: type, handlers: list[type]) -> None:
        super().__init__(
            f"Multiple handlers registered for {request_type.__qualname__}",
            "HANDLER_AMBIGUOUS",
            {
                "request_type": request_type.__qualname__,
                "handlers": [h.__qualname__ for h in handlers],
            },
        )


# Authorization outcomes


class PermissionDenied(AccessGateException):
    """Raised when the user lacks the permission the operation requires."""

    def __init__(
        self,
        permission: str | None = None,
        user_id: str | None = None,
        message: str = "Permission denied",
        reason: str | None = None,
    ) -> None:
        if permission:
            message = f"Permission denied: {permission}"
        details: dict[str, Any] = {}
        if permission:
            details["permission"] = permission
        if user_id:
            details["user_id"] = user_id
        if reason:
            details["reason"] = reason
        super().__init__(message, "PERMISSION_DENIED", details)


class RoleDenied(AccessGateException):
    """Raised when the user holds none of the required roles."""

    def __init__(
        self,
        required_roles: list[str],
        user_id: str | None = None,
        reason: str | None = None,
    ) -> None:
        details: dict[str, Any] = {"required_roles": required_roles}
        if user_id:
            details["user_id"] = user_id
        if reason:
            details["reason"] = reason
        super().__init__(
            f"Role required: one of {', '.join(required_roles)}",
            "ROLE_DENIED",
            details,
        )


class NotEntitled(AccessGateException):
    """Raised when the user has no active subscription (of the required type)."""

    def __init__(
        self,
        required_type: str | None = None,
        user_id: str | None = None,
        reason: str | None = None,
    ) -> None:
        message = "Active subscription required"
        if required_type:
            message = f"Active {required_type} subscription required"
        details: dict[str, Any] = {}
        if required_type:
            details["required_type"] = required_type
        if user_id:
            details["user_id"] = user_id
        if reason:
            details["reason"] = reason
        super().__init__(message, "NOT_ENTITLED", details)


# Credentials


class InvalidCredential(AccessGateException):
    """Raised when a credential fails signature or format checks. Re-authenticate."""

    def __init__(self, message: str = "Invalid credential") -> None:
        super().__init__(message, "INVALID_CREDENTIAL")


class CredentialExpired(AccessGateException):
    """Raised when a credential is past its expiry. Re-authenticate."""

    def __init__(self, message: str = "Credential expired") -> None:
        super().__init__(message, "CREDENTIAL_EXPIRED")


# Data integrity


class MultipleActiveSubscriptions(AccessGateException):
    """Raised when a user has more than one active subscription (corruption, needs an operator)."""

    def __init__(self, user_id: str, subscription_ids: list[str]) -> None:
        super().__init__(
            f"User {user_id} has {len(subscription_ids)} active subscriptions",
            "MULTIPLE_ACTIVE_SUBSCRIPTIONS",
            {"user_id": user_id, "subscription_ids": subscription_ids},
        )
