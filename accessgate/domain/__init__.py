"""Domain layer: enums, value objects, permission catalog, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from accessgate.domain.enums import (
    DecisionReason,
    MenuType,
    PermissionAction,
    SubscriptionStatus,
    SubscriptionType,
    SystemRole,
)
from accessgate.domain.exceptions import (
    AccessGateException,
    CredentialExpired,
    DispatcherConfigurationError,
    DuplicateAssignmentException,
    HandlerAmbiguous,
    HandlerNotFound,
    InvalidCredential,
    MultipleActiveSubscriptions,
    NotEntitled,
    PermissionDenied,
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    RoleDenied,
    ValidationException,
)
from accessgate.domain.value_objects import PermissionKey

__all__ = [
    "AccessGateException",
    "CredentialExpired",
    "DecisionReason",
    "DispatcherConfigurationError",
    "DuplicateAssignmentException",
    "HandlerAmbiguous",
    "HandlerNotFound",
    "InvalidCredential",
    "MenuType",
    "MultipleActiveSubscriptions",
    "NotEntitled",
    "PermissionAction",
    "PermissionDenied",
    "PermissionKey",
    "ResourceAlreadyExistsException",
    "ResourceNotFoundException",
    "RoleDenied",
    "SubscriptionStatus",
    "SubscriptionType",
    "SystemRole",
    "ValidationException",
]
