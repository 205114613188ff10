"""Identity, decision and permission-set API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from accessgate.domain.enums import SubscriptionStatus, SubscriptionType


class IdentityResponse(BaseModel):
    """The caller as seen by an authorization check."""

    user_id: str
    role_ids: list[str]
    role_names: list[str]
    system_roles: list[str]
    subscription_type: SubscriptionType | None
    subscription_status: SubscriptionStatus | None
    source: str
    expires_at: datetime | None


class PermissionSetResponse(BaseModel):
    """Effective permission codes for a user."""

    user_id: str
    permissions: list[str] = Field(default_factory=list)


class DecisionResponse(BaseModel):
    """Result of a composite authorization check."""

    allowed: bool
    reason: str
    user_id: str
    permission: str | None = None
    details: dict = Field(default_factory=dict)
