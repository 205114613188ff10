"""Subscription lifecycle: create, status changes, cancel, renew, expire, history."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from accessgate.application.dispatcher import Command, Query
from accessgate.application.dtos.subscription import SubscriptionResult
from accessgate.application.use_cases.base import Handler
from accessgate.domain.enums import SubscriptionStatus, SubscriptionType

FINANCIALS_MANAGE = "financials:manage"
FINANCIALS_VIEW = "financials:view"


@dataclass(frozen=True)
class CreateSubscription(Command):
    user_id: str
    subscription_type: SubscriptionType
    end_at: datetime | None = None
    start_at: datetime | None = None
    duration_days: int | None = None
    amount: Decimal = Decimal("0")
    payment_reference: str | None = None
    notes: str | None = None
    actor_id: str | None = None


@dataclass(frozen=True)
class UpdateSubscriptionStatus(Command):
    subscription_id: str
    status: SubscriptionStatus
    actor_id: str | None = None


@dataclass(frozen=True)
class CancelSubscription(Command):
    user_id: str
    reason: str | None = None
    actor_id: str | None = None


@dataclass(frozen=True)
class RenewSubscription(Command):
    user_id: str
    new_end_at: datetime
    amount: Decimal = Decimal("0")
    actor_id: str | None = None


@dataclass(frozen=True)
class ExpireLapsedSubscriptions(Command):
    actor_id: str | None = None


@dataclass(frozen=True)
class GetActiveSubscription(Query):
    user_id: str


@dataclass(frozen=True)
class GetSubscriptionHistory(Query):
    user_id: str
    actor_id: str | None = None


class CreateSubscriptionHandler(Handler):
    async def handle(self, request: CreateSubscription) -> SubscriptionResult:
        await self.require_actor(request.actor_id, FINANCIALS_MANAGE)
        return await self.ctx.store.create_subscription(
            request.user_id,
            request.subscription_type,
            request.end_at,
            start_at=request.start_at,
            duration_days=request.duration_days,
            amount=request.amount,
            payment_reference=request.payment_reference,
            notes=request.notes,
        )


class UpdateSubscriptionStatusHandler(Handler):
    async def handle(self, request: UpdateSubscriptionStatus) -> SubscriptionResult:
        await self.require_actor(request.actor_id, FINANCIALS_MANAGE)
        return await self.ctx.store.update_subscription_status(
            request.subscription_id, request.status
        )


class CancelSubscriptionHandler(Handler):
    async def handle(self, request: CancelSubscription) -> SubscriptionResult | None:
        await self.require_actor(request.actor_id, FINANCIALS_MANAGE)
        return await self.ctx.store.cancel_subscription(request.user_id, request.reason)


class RenewSubscriptionHandler(Handler):
    async def handle(self, request: RenewSubscription) -> SubscriptionResult:
        await self.require_actor(request.actor_id, FINANCIALS_MANAGE)
        return await self.ctx.store.renew_subscription(
            request.user_id, request.new_end_at, request.amount
        )


class ExpireLapsedSubscriptionsHandler(Handler):
    async def handle(self, request: ExpireLapsedSubscriptions) -> int:
        await self.require_actor(request.actor_id, FINANCIALS_MANAGE)
        return await self.ctx.store.expire_lapsed_subscriptions()


class GetActiveSubscriptionHandler(Handler):
    """Raises MultipleActiveSubscriptions on corrupt data; never picks one."""

    async def handle(self, request: GetActiveSubscription) -> SubscriptionResult | None:
        return await self.ctx.store.get_active_subscription(request.user_id)


class GetSubscriptionHistoryHandler(Handler):
    async def handle(self, request: GetSubscriptionHistory) -> list[SubscriptionResult]:
        if request.actor_id is not None and request.actor_id != request.user_id:
            await self.require_actor(request.actor_id, FINANCIALS_VIEW)
        return await self.ctx.store.get_subscription_history(request.user_id)


HANDLERS: list[tuple[type, type]] = [
    (CreateSubscription, CreateSubscriptionHandler),
    (UpdateSubscriptionStatus, UpdateSubscriptionStatusHandler),
    (CancelSubscription, CancelSubscriptionHandler),
    (RenewSubscription, RenewSubscriptionHandler),
    (ExpireLapsedSubscriptions, ExpireLapsedSubscriptionsHandler),
    (GetActiveSubscription, GetActiveSubscriptionHandler),
    (GetSubscriptionHistory, GetSubscriptionHistoryHandler),
]
