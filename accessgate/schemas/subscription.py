"""Subscription API schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from accessgate.domain.enums import SubscriptionStatus, SubscriptionType


class SubscriptionCreate(BaseModel):
    """Request body for creating (and activating) a subscription."""

    subscription_type: SubscriptionType
    end_at: datetime | None = None
    duration_days: int | None = Field(default=None, gt=0)
    amount: Decimal = Field(default=Decimal("0"), ge=0)
    payment_reference: str | None = Field(default=None, max_length=255)
    notes: str | None = Field(default=None, max_length=1000)


class SubscriptionCancel(BaseModel):
    """Request body for cancelling the active subscription."""

    reason: str | None = Field(default=None, max_length=500)


class SubscriptionResponse(BaseModel):
    """Subscription detail response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    subscription_type: SubscriptionType
    status: SubscriptionStatus
    start_at: datetime
    end_at: datetime
    amount: Decimal
    payment_reference: str | None
    notes: str | None
