"""UserSubscription repository. Read methods return SubscriptionResult (DTO)."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from accessgate.application.dtos.subscription import SubscriptionResult
from accessgate.domain.enums import SubscriptionStatus, SubscriptionType
from accessgate.infrastructure.persistence.models.subscription import UserSubscription
from accessgate.infrastructure.persistence.repositories.base import BaseRepository
from accessgate.shared.utils.datetime import ensure_utc


def _subscription_to_result(s: UserSubscription) -> SubscriptionResult:
    """Map ORM UserSubscription to application SubscriptionResult."""
    return SubscriptionResult(
        id=s.id,
        user_id=s.user_id,
        subscription_type=SubscriptionType(s.subscription_type),
        status=SubscriptionStatus(s.status),
        start_at=ensure_utc(s.start_at),
        end_at=ensure_utc(s.end_at),
        amount=Decimal(s.amount),
        payment_reference=s.payment_reference,
        notes=s.notes,
    )


class SubscriptionRepository(BaseRepository[UserSubscription]):
    """User subscription repository (implements ISubscriptionRepository)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, UserSubscription)

    async def get_by_id(self, subscription_id: str) -> SubscriptionResult | None:
        row = await self.get_entity(subscription_id)
        return _subscription_to_result(row) if row else None

    async def list_by_status(
        self, user_id: str, status: SubscriptionStatus
    ) -> list[SubscriptionResult]:
        result = await self.db.execute(
            select(UserSubscription)
            .where(
                UserSubscription.user_id == user_id,
                UserSubscription.status == status.value,
            )
            .order_by(UserSubscription.start_at.desc())
        )
        return [_subscription_to_result(s) for s in result.scalars().all()]

    async def list_for_user(self, user_id: str) -> list[SubscriptionResult]:
        result = await self.db.execute(
            select(UserSubscription)
            .where(UserSubscription.user_id == user_id)
            .order_by(UserSubscription.start_at.desc())
        )
        return [_subscription_to_result(s) for s in result.scalars().all()]

    async def list_lapsed_active(self, as_of: datetime) -> list[SubscriptionResult]:
        result = await self.db.execute(
            select(UserSubscription).where(
                UserSubscription.status == SubscriptionStatus.ACTIVE.value,
                UserSubscription.end_at <= as_of,
            )
        )
        return [_subscription_to_result(s) for s in result.scalars().all()]

    async def create_subscription(
        self,
        user_id: str,
        subscription_type: SubscriptionType,
        start_at: datetime,
        end_at: datetime,
        amount: Decimal,
        status: SubscriptionStatus = SubscriptionStatus.ACTIVE,
        payment_reference: str | None = None,
        notes: str | None = None,
    ) -> SubscriptionResult:
        row = UserSubscription(
            user_id=user_id,
            subscription_type=subscription_type.value,
            status=status.value,
            start_at=start_at,
            end_at=end_at,
            amount=amount,
            payment_reference=payment_reference,
            notes=notes,
        )
        created = await self.create(row)
        return _subscription_to_result(created)

    async def update_subscription(
        self,
        subscription_id: str,
        *,
        status: SubscriptionStatus | None = None,
        end_at: datetime | None = None,
        amount: Decimal | None = None,
        notes: str | None = None,
    ) -> SubscriptionResult | None:
        row = await self.get_entity(subscription_id)
        if row is None:
            return None
        if status is not None:
            row.status = status.value
        if end_at is not None:
            row.end_at = end_at
        if amount is not None:
            row.amount = amount
        if notes is not None:
            row.notes = notes
        updated = await self.update(row)
        return _subscription_to_result(updated)
