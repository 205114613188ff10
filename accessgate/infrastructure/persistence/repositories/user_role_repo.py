"""UserRole repository: user-role assignments (link table only)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from accessgate.application.dtos.role import RoleResult, UserRoleResult
from accessgate.domain.exceptions import DuplicateAssignmentException
from accessgate.infrastructure.persistence.models.permission import UserRole
from accessgate.infrastructure.persistence.models.role import Role
from accessgate.infrastructure.persistence.repositories.role_repo import role_to_result
from accessgate.shared.utils.datetime import ensure_utc


def _link_to_result(ur: UserRole) -> UserRoleResult:
    return UserRoleResult(
        id=ur.id,
        user_id=ur.user_id,
        role_id=ur.role_id,
        assigned_by=ur.assigned_by,
        assigned_at=ensure_utc(ur.assigned_at),
        expires_at=ensure_utc(ur.expires_at) if ur.expires_at else None,
    )


class UserRoleRepository:
    """User-role link table. Assign/remove and list roles for a user."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_active_roles_for_user(
        self, user_id: str, as_of: datetime
    ) -> list[RoleResult]:
        result = await self.db.execute(
            select(Role)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(
                UserRole.user_id == user_id,
                Role.is_active.is_(True),
                or_(UserRole.expires_at.is_(None), UserRole.expires_at > as_of),
            )
        )
        return [role_to_result(r) for r in result.scalars().all()]

    async def get_link(self, user_id: str, role_id: str) -> UserRoleResult | None:
        result = await self.db.execute(
            select(UserRole).where(UserRole.user_id == user_id, UserRole.role_id == role_id)
        )
        row = result.scalar_one_or_none()
        return _link_to_result(row) if row else None

    async def assign_role_to_user(
        self,
        user_id: str,
        role_id: str,
        assigned_by: str | None = None,
        expires_at: datetime | None = None,
    ) -> UserRoleResult:
        ur = UserRole(
            user_id=user_id,
            role_id=role_id,
            assigned_by=assigned_by,
            expires_at=expires_at,
        )
        try:
            self.db.add(ur)
            await self.db.flush()
            await self.db.refresh(ur)
        except IntegrityError:
            raise DuplicateAssignmentException(
                "Role already assigned to user",
                assignment_type="user_role",
                details_extra={"user_id": user_id, "role_id": role_id},
            ) from None
        return _link_to_result(ur)

    async def remove_role_from_user(self, user_id: str, role_id: str) -> bool:
        result = await self.db.execute(
            select(UserRole).where(UserRole.user_id == user_id, UserRole.role_id == role_id)
        )
        ur = result.scalar_one_or_none()
        if not ur:
            return False
        await self.db.delete(ur)
        await self.db.flush()
        return True

