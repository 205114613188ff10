"""UserSubscription ORM model."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Index, Numeric, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from accessgate.domain.enums import SubscriptionStatus
from accessgate.infrastructure.persistence.database import Base
from accessgate.infrastructure.persistence.models.mixins import AccessGateModel


class UserSubscription(AccessGateModel, Base):
    """User subscription. Table: user_subscription.

    A partial unique index allows at most one ACTIVE row per user.
    """

    __tablename__ = "user_subscription"

    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    subscription_type: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=SubscriptionStatus.ACTIVE.value
    )
    start_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    payment_reference: Mapped[str | None] = mapped_column(String, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index(
            "uq_user_subscription_one_active",
            "user_id",
            unique=True,
            postgresql_where=text("status = 'active'"),
            sqlite_where=text("status = 'active'"),
        ),
        Index("ix_user_subscription_status_end", "status", "end_at"),
    )
