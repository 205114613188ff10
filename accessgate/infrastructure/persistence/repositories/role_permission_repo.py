"""RolePermission repository: role-permission grants (link table only)."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from accessgate.application.dtos.permission import PermissionResult
from accessgate.domain.exceptions import DuplicateAssignmentException
from accessgate.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
)
from accessgate.infrastructure.persistence.repositories.permission_repo import (
    permission_to_result,
)


class RolePermissionRepository:
    """Role-permission link table. Assign/remove and query grants for roles."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_permissions_for_roles(
        self, role_ids: Iterable[str]
    ) -> list[PermissionResult]:
        ids = list(role_ids)
        if not ids:
            return []
        result = await self.db.execute(
            select(Permission)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(
                RolePermission.role_id.in_(ids),
                Permission.is_active.is_(True),
            )
        )
        return [permission_to_result(p) for p in result.scalars().all()]

    async def get_permission_ids_for_role(self, role_id: str) -> set[str]:
        result = await self.db.execute(
            select(RolePermission.permission_id).where(RolePermission.role_id == role_id)
        )
        return set(result.scalars().all())

    async def assign_permission_to_role(self, role_id: str, permission_id: str) -> bool:
        rp = RolePermission(role_id=role_id, permission_id=permission_id)
        try:
            self.db.add(rp)
            await self.db.flush()
        except IntegrityError:
            raise DuplicateAssignmentException(
                "Permission already assigned to role",
                assignment_type="role_permission",
                details_extra={"role_id": role_id, "permission_id": permission_id},
            ) from None
        return True

    async def remove_permission_from_role(self, role_id: str, permission_id: str) -> bool:
        result = await self.db.execute(
            select(RolePermission).where(
                RolePermission.role_id == role_id,
                RolePermission.permission_id == permission_id,
            )
        )
        rp = result.scalar_one_or_none()
        if not rp:
            return False
        await self.db.delete(rp)
        await self.db.flush()
        return True
