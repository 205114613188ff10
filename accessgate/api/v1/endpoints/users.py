"""User administration API: role assignment and subscriptions for a given user."""

from typing import Annotated

from fastapi import APIRouter, Body, Depends

from accessgate.api.v1.dependencies import (
    get_current_identity,
    get_dispatcher,
    get_dispatcher_for_write,
    require_permission,
)
from accessgate.application.dispatcher import Dispatcher
from accessgate.application.dtos.identity import Identity
from accessgate.application.use_cases import (
    AssignRoleToUser,
    CancelSubscription,
    CreateSubscription,
    GetSubscriptionHistory,
    GetUserRoles,
    RevokeRoleFromUser,
)
from accessgate.schemas.role import RoleResponse, UserRoleAssign
from accessgate.schemas.subscription import (
    SubscriptionCancel,
    SubscriptionCreate,
    SubscriptionResponse,
)

router = APIRouter()


@router.get("/{user_id}/roles", response_model=list[RoleResponse])
async def list_user_roles(
    user_id: str,
    dispatcher: Annotated[Dispatcher, Depends(get_dispatcher)],
    _: Annotated[Identity, Depends(require_permission("users", "view"))],
):
    """List active, unexpired roles held by a user."""
    roles = await dispatcher.query(GetUserRoles(user_id))
    return [RoleResponse.model_validate(r) for r in roles]


@router.post("/{user_id}/roles/{role_id}", status_code=204)
async def assign_role_to_user(
    user_id: str,
    role_id: str,
    identity: Annotated[Identity, Depends(get_current_identity)],
    dispatcher: Annotated[Dispatcher, Depends(get_dispatcher_for_write)],
    body: Annotated[UserRoleAssign | None, Body()] = None,
) -> None:
    """Assign a role to a user. Requires users:manage; re-assigning is a no-op."""
    await dispatcher.command(
        AssignRoleToUser(
            user_id=user_id,
            role_id=role_id,
            expires_at=body.expires_at if body else None,
            actor_id=identity.user_id,
        )
    )


@router.delete("/{user_id}/roles/{role_id}", status_code=204)
async def revoke_role_from_user(
    user_id: str,
    role_id: str,
    identity: Annotated[Identity, Depends(get_current_identity)],
    dispatcher: Annotated[Dispatcher, Depends(get_dispatcher_for_write)],
) -> None:
    """Remove a role from a user. Requires users:manage; removing an absent link is a no-op."""
    await dispatcher.command(
        RevokeRoleFromUser(user_id=user_id, role_id=role_id, actor_id=identity.user_id)
    )


@router.get("/{user_id}/subscriptions", response_model=list[SubscriptionResponse])
async def list_user_subscriptions(
    user_id: str,
    identity: Annotated[Identity, Depends(get_current_identity)],
    dispatcher: Annotated[Dispatcher, Depends(get_dispatcher)],
):
    """Subscription history, newest first. Users may read their own; others need financials:view."""
    history = await dispatcher.query(
        GetSubscriptionHistory(user_id=user_id, actor_id=identity.user_id)
    )
    return [SubscriptionResponse.model_validate(s) for s in history]


@router.post("/{user_id}/subscriptions", response_model=SubscriptionResponse, status_code=201)
async def create_user_subscription(
    user_id: str,
    body: SubscriptionCreate,
    identity: Annotated[Identity, Depends(get_current_identity)],
    dispatcher: Annotated[Dispatcher, Depends(get_dispatcher_for_write)],
):
    """Create and activate a subscription, retiring the current one. Requires financials:manage."""
    subscription = await dispatcher.command(
        CreateSubscription(
            user_id=user_id,
            subscription_type=body.subscription_type,
            end_at=body.end_at,
            duration_days=body.duration_days,
            amount=body.amount,
            payment_reference=body.payment_reference,
            notes=body.notes,
            actor_id=identity.user_id,
        )
    )
    return SubscriptionResponse.model_validate(subscription)


@router.post(
    "/{user_id}/subscriptions/cancel", response_model=SubscriptionResponse | None
)
async def cancel_user_subscription(
    user_id: str,
    body: SubscriptionCancel,
    identity: Annotated[Identity, Depends(get_current_identity)],
    dispatcher: Annotated[Dispatcher, Depends(get_dispatcher_for_write)],
):
    """Cancel the active subscription; null when there was none. Requires financials:manage."""
    subscription = await dispatcher.command(
        CancelSubscription(user_id=user_id, reason=body.reason, actor_id=identity.user_id)
    )
    if subscription is None:
        return None
    return SubscriptionResponse.model_validate(subscription)
