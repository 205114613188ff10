"""DTOs for subscription use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from accessgate.domain.enums import SubscriptionStatus, SubscriptionType


@dataclass(frozen=True)
class SubscriptionResult:
    """User subscription read-model."""

    id: str
    user_id: str
    subscription_type: SubscriptionType
    status: SubscriptionStatus
    start_at: datetime
    end_at: datetime
    amount: Decimal
    payment_reference: str | None
    notes: str | None

    def is_active_at(self, now: datetime) -> bool:
        """True when status is ACTIVE and the window has not ended."""
        return self.status == SubscriptionStatus.ACTIVE and self.end_at > now
