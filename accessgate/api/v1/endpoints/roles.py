"""Roles API: list and create roles, read and replace role grants."""

from typing import Annotated

from fastapi import APIRouter, Depends

from accessgate.api.v1.dependencies import (
    get_current_identity,
    get_dispatcher,
    get_dispatcher_for_write,
    require_permission,
)
from accessgate.application.dispatcher import Dispatcher
from accessgate.application.dtos.identity import Identity
from accessgate.application.use_cases import (
    CreateRole,
    GetRolePermissions,
    ListRoles,
    ReplaceRolePermissions,
)
from accessgate.schemas.role import (
    RoleCreateRequest,
    RolePermissionsResponse,
    RolePermissionsUpdate,
    RoleResponse,
)

router = APIRouter()


@router.get("", response_model=list[RoleResponse])
async def list_roles(
    dispatcher: Annotated[Dispatcher, Depends(get_dispatcher)],
    _: Annotated[Identity, Depends(require_permission("roles", "view"))],
    include_inactive: bool = False,
):
    """List roles ordered by name."""
    roles = await dispatcher.query(ListRoles(include_inactive=include_inactive))
    return [RoleResponse.model_validate(r) for r in roles]


@router.post("", response_model=RoleResponse, status_code=201)
async def create_role(
    body: RoleCreateRequest,
    identity: Annotated[Identity, Depends(get_current_identity)],
    dispatcher: Annotated[Dispatcher, Depends(get_dispatcher_for_write)],
):
    """Create a role. Requires roles:create; 409 if the name or built-in tag is taken."""
    role = await dispatcher.command(
        CreateRole(
            name=body.name,
            system_role=body.system_role,
            description=body.description,
            actor_id=identity.user_id,
        )
    )
    return RoleResponse.model_validate(role)


@router.get("/{role_id}/permissions", response_model=RolePermissionsResponse)
async def get_role_permissions(
    role_id: str,
    dispatcher: Annotated[Dispatcher, Depends(get_dispatcher)],
    _: Annotated[Identity, Depends(require_permission("roles", "view"))],
):
    codes = await dispatcher.query(GetRolePermissions(role_id))
    return RolePermissionsResponse(role_id=role_id, permissions=sorted(codes))


@router.put("/{role_id}/permissions", response_model=RolePermissionsResponse)
async def replace_role_permissions(
    role_id: str,
    body: RolePermissionsUpdate,
    identity: Annotated[Identity, Depends(get_current_identity)],
    dispatcher: Annotated[Dispatcher, Depends(get_dispatcher_for_write)],
):
    """Make the role's grants exactly the given codes. Requires roles:edit."""
    codes = await dispatcher.command(
        ReplaceRolePermissions(
            role_id=role_id,
            permissions=tuple(body.permissions),
            actor_id=identity.user_id,
        )
    )
    return RolePermissionsResponse(role_id=role_id, permissions=sorted(codes))
