"""Identity, decision, and credential DTOs emitted to the transport layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from accessgate.domain.enums import (
    DecisionReason,
    SubscriptionStatus,
    SubscriptionType,
    SystemRole,
)


class IdentitySource(str, Enum):
    """Where an Identity's claims came from."""

    LIVE = "live"  # read from the RBAC store just now
    CREDENTIAL = "credential"  # snapshot embedded in a signed credential


@dataclass(frozen=True)
class Identity:
    """Authorization subject. Materialized per check; never persisted."""

    user_id: str
    role_ids: frozenset[str] = frozenset()
    role_names: frozenset[str] = frozenset()
    system_roles: frozenset[SystemRole] = frozenset()
    subscription_type: SubscriptionType | None = None
    subscription_status: SubscriptionStatus | None = None
    source: IdentitySource = IdentitySource.LIVE
    expires_at: datetime | None = None

    @property
    def is_anonymous_equivalent(self) -> bool:
        """A user with zero roles holds no grants at all."""
        return not self.role_ids

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "role_ids": sorted(self.role_ids),
            "role_names": sorted(self.role_names),
            "system_roles": sorted(r.value for r in self.system_roles),
            "subscription_type": self.subscription_type.value if self.subscription_type else None,
            "subscription_status": (
                self.subscription_status.value if self.subscription_status else None
            ),
            "source": self.source.value,
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
        }


@dataclass(frozen=True)
class AuthorizationDecision:
    """Outcome of a composite check. allowed is False for every reason except GRANTED."""

    allowed: bool
    reason: DecisionReason
    user_id: str
    permission: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def grant(cls, user_id: str, permission: str | None = None) -> AuthorizationDecision:
        return cls(True, DecisionReason.GRANTED, user_id, permission)

    @classmethod
    def deny(
        cls,
        reason: DecisionReason,
        user_id: str,
        permission: str | None = None,
        **details: Any,
    ) -> AuthorizationDecision:
        return cls(False, reason, user_id, permission, details)

    def to_dict(self) -> dict[str, Any]:
        return {
            "allowed": self.allowed,
            "reason": self.reason.value,
            "user_id": self.user_id,
            "permission": self.permission,
            "details": self.details,
        }


@dataclass(frozen=True)
class IssuedCredential:
    """Signed credential plus the snapshot it encodes."""

    token: str
    expires_at: datetime
    identity: Identity
    token_type: str = "bearer"

    def to_dict(self) -> dict[str, Any]:
        return {
            "access_token": self.token,
            "token_type": self.token_type,
            "expires_at": self.expires_at.isoformat(),
        }
