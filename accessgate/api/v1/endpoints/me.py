"""Current-user API: identity snapshot, live permissions, visible menu, entitlement."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from accessgate.api.v1.dependencies import get_current_identity, get_dispatcher
from accessgate.application.dispatcher import Dispatcher
from accessgate.application.dtos.identity import Identity
from accessgate.application.use_cases import (
    Authorize,
    GetActiveSubscription,
    GetUserPermissions,
    GetVisibleMenu,
)
from accessgate.domain.enums import MenuType, SubscriptionType
from accessgate.schemas.identity import (
    DecisionResponse,
    IdentityResponse,
    PermissionSetResponse,
)
from accessgate.schemas.subscription import SubscriptionResponse

router = APIRouter()


@router.get("", response_model=IdentityResponse)
async def get_me(
    identity: Annotated[Identity, Depends(get_current_identity)],
):
    """Return the identity embedded in the presented credential (may be stale)."""
    return identity.to_dict()


@router.get("/permissions", response_model=PermissionSetResponse)
async def get_my_permissions(
    identity: Annotated[Identity, Depends(get_current_identity)],
    dispatcher: Annotated[Dispatcher, Depends(get_dispatcher)],
):
    """Return the caller's effective permission codes read from live state."""
    codes = await dispatcher.query(GetUserPermissions(identity.user_id))
    return PermissionSetResponse(user_id=identity.user_id, permissions=sorted(codes))


@router.get("/menu", response_model=list[dict[str, Any]])
async def get_my_menu(
    identity: Annotated[Identity, Depends(get_current_identity)],
    dispatcher: Annotated[Dispatcher, Depends(get_dispatcher)],
    menu_type: MenuType | None = None,
):
    """Return the navigation tree pruned to what the caller may see."""
    nodes = await dispatcher.query(GetVisibleMenu(identity.user_id, menu_type))
    return [n.to_dict() for n in nodes]


@router.get("/subscription", response_model=SubscriptionResponse | None)
async def get_my_subscription(
    identity: Annotated[Identity, Depends(get_current_identity)],
    dispatcher: Annotated[Dispatcher, Depends(get_dispatcher)],
):
    """Return the caller's live active subscription, or null."""
    subscription = await dispatcher.query(GetActiveSubscription(identity.user_id))
    if subscription is None:
        return None
    return SubscriptionResponse.model_validate(subscription)


@router.get("/authorize", response_model=DecisionResponse)
async def authorize_me(
    identity: Annotated[Identity, Depends(get_current_identity)],
    dispatcher: Annotated[Dispatcher, Depends(get_dispatcher)],
    permission: Annotated[str | None, Query(max_length=128)] = None,
    subscription_required: bool = False,
    subscription_type: SubscriptionType | None = None,
):
    """Evaluate a composite check for the caller without raising on denial."""
    decision = await dispatcher.query(
        Authorize(
            identity.user_id,
            permission,
            subscription_required=subscription_required,
            subscription_type=subscription_type,
        )
    )
    return DecisionResponse.model_validate(decision.to_dict())
