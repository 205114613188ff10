"""Permission repository. Read methods return PermissionResult (DTO)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from accessgate.application.dtos.permission import PermissionResult
from accessgate.domain.enums import PermissionAction
from accessgate.domain.exceptions import ResourceAlreadyExistsException
from accessgate.domain.value_objects import PermissionKey
from accessgate.infrastructure.persistence.models.permission import Permission
from accessgate.infrastructure.persistence.repositories.base import BaseRepository


def permission_to_result(p: Permission) -> PermissionResult:
    """Map ORM Permission to application PermissionResult."""
    return PermissionResult(
        id=p.id,
        code=p.code,
        resource=p.resource,
        action=PermissionAction(p.action),
        display_name=p.display_name,
        description=p.description,
        is_active=p.is_active,
        is_system=p.is_system,
    )


class PermissionRepository(BaseRepository[Permission]):
    """Permission repository (implements IPermissionRepository)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Permission)

    async def get_by_id(self, permission_id: str) -> PermissionResult | None:
        row = await self.get_entity(permission_id)
        return permission_to_result(row) if row else None

    async def get_by_code(self, code: str) -> PermissionResult | None:
        result = await self.db.execute(select(Permission).where(Permission.code == code))
        row = result.scalar_one_or_none()
        return permission_to_result(row) if row else None

    async def list_permissions(self) -> list[PermissionResult]:
        result = await self.db.execute(select(Permission).order_by(Permission.code))
        return [permission_to_result(p) for p in result.scalars().all()]

    async def create_permission(
        self,
        resource: str,
        action: PermissionAction,
        display_name: str,
        description: str | None = None,
        is_system: bool = False,
    ) -> PermissionResult:
        """Create a permission; code is derived from (resource, action)."""
        key = PermissionKey(resource, action)
        permission = Permission(
            code=key.code,
            resource=key.resource,
            action=key.action.value,
            display_name=display_name,
            description=description,
            is_active=True,
            is_system=is_system,
        )
        try:
            created = await self.create(permission)
        except IntegrityError:
            raise ResourceAlreadyExistsException("Permission", key.code) from None
        return permission_to_result(created)
