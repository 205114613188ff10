"""Domain enumerations for accessgate.

Enums represent fixed sets of domain values: permission action kinds,
built-in role tags, subscription tiers and states, and menu placement.
"""

from enum import Enum


class PermissionAction(str, Enum):
    """Action kind a permission grants on its resource scope."""

    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    EXECUTE = "execute"
    MANAGE = "manage"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid action values as strings."""
        return [action.value for action in cls]


class SystemRole(str, Enum):
    """Closed set of built-in role tags; CUSTOM marks administrator-defined roles.

    Role checks compare these tags, never free-form role names.
    """

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    FINANCE = "finance"
    ACCOUNTS = "accounts"
    CONTENT_MANAGER = "content_manager"
    STUDENT = "student"
    USER = "user"
    CUSTOM = "custom"

    @property
    def is_builtin(self) -> bool:
        return self is not SystemRole.CUSTOM


class SubscriptionType(str, Enum):
    """Subscription tier a user can purchase."""

    FREE = "free"
    BASIC = "basic"
    PREMIUM = "premium"
    VOCABULARY_ONLY = "vocabulary_only"
    IELTS_ONLY = "ielts_only"
    PTE_ONLY = "pte_only"
    GRE_ONLY = "gre_only"
    HIGHER_STUDIES_ONLY = "higher_studies_only"
    ALL_MODULES = "all_modules"


class SubscriptionStatus(str, Enum):
    """Subscription lifecycle status.

    Only ACTIVE rows with an end timestamp in the future entitle a user.
    """

    ACTIVE = "active"
    INACTIVE = "inactive"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    PENDING = "pending"
    SUSPENDED = "suspended"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings."""
        return [status.value for status in cls]


class MenuType(str, Enum):
    """Navigation area a menu node belongs to."""

    ADMIN = "admin"
    PUBLIC = "public"


class DecisionReason(str, Enum):
    """Why an authorization decision came out the way it did."""

    GRANTED = "granted"
    PERMISSION_DENIED = "permission_denied"
    ROLE_DENIED = "role_denied"
    NOT_ENTITLED = "not_entitled"
    INDETERMINATE = "indeterminate"
