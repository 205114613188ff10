"""Domain value objects for accessgate.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass

from accessgate.domain.enums import PermissionAction

# Resource scope: lowercase alphanumeric with optional dots/underscores/hyphens (e.g. users, public.learning).
_RESOURCE_RE = re.compile(r"^[a-z0-9]+([._-][a-z0-9]+)*$")

PERMISSION_CODE_SEP = ":"


@dataclass(frozen=True, order=True)
class PermissionKey:
    """Value object for a permission: (resource scope, action kind).

    Canonical string form is ``resource:action`` (e.g. ``content:edit``).
    Two keys are the same permission iff resource and action match.
    """

    resource: str
    action: PermissionAction

    def __post_init__(self) -> None:
        if not self.resource or not _RESOURCE_RE.match(self.resource):
            raise ValueError(
                f"Permission resource must be lowercase alphanumeric (got {self.resource!r})"
            )
        if not isinstance(self.action, PermissionAction):
            object.__setattr__(self, "action", PermissionAction(self.action))

    @property
    def code(self) -> str:
        return f"{self.resource}{PERMISSION_CODE_SEP}{self.action.value}"

    @classmethod
    def parse(cls, code: str) -> "PermissionKey":
        """Parse ``resource:action``. Raises ValueError on malformed codes or unknown actions."""
        resource, sep, action = code.strip().rpartition(PERMISSION_CODE_SEP)
        if not sep:
            raise ValueError(f"Invalid permission code format: {code!r}")
        try:
            return cls(resource=resource.lower(), action=PermissionAction(action.lower()))
        except ValueError as e:
            raise ValueError(f"Invalid permission code {code!r}: {e}") from e

    @classmethod
    def coerce(cls, value: "PermissionKey | str") -> "PermissionKey":
        """Accept a key or its code string."""
        if isinstance(value, PermissionKey):
            return value
        return cls.parse(value)

    def __str__(self) -> str:
        return self.code
