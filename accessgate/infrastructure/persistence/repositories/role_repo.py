"""Role repository. Read methods return RoleResult (DTO)."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from accessgate.application.dtos.role import RoleResult
from accessgate.domain.enums import SystemRole
from accessgate.domain.exceptions import ResourceAlreadyExistsException
from accessgate.infrastructure.persistence.models.role import Role
from accessgate.infrastructure.persistence.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


def role_to_result(r: Role) -> RoleResult:
    """Map ORM Role to application RoleResult."""
    return RoleResult(
        id=r.id,
        name=r.name,
        system_role=SystemRole(r.system_role),
        description=r.description,
        is_active=r.is_active,
    )


class RoleRepository(BaseRepository[Role]):
    """Role repository (implements IRoleRepository)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Role)

    async def get_by_id(self, role_id: str) -> RoleResult | None:
        row = await self.get_entity(role_id)
        return role_to_result(row) if row else None

    async def get_by_name(self, name: str) -> RoleResult | None:
        result = await self.db.execute(select(Role).where(Role.name == name))
        row = result.scalar_one_or_none()
        return role_to_result(row) if row else None

    async def get_by_system_role(self, system_role: SystemRole) -> RoleResult | None:
        if system_role is SystemRole.CUSTOM:
            return None
        result = await self.db.execute(
            select(Role).where(Role.system_role == system_role.value)
        )
        row = result.scalar_one_or_none()
        return role_to_result(row) if row else None

    async def list_roles(self, include_inactive: bool = False) -> list[RoleResult]:
        q = select(Role).order_by(Role.name)
        if not include_inactive:
            q = q.where(Role.is_active.is_(True))
        result = await self.db.execute(q)
        return [role_to_result(r) for r in result.scalars().all()]

    async def create_role(
        self,
        name: str,
        system_role: SystemRole = SystemRole.CUSTOM,
        description: str | None = None,
    ) -> RoleResult:
        """Create a role; return read-model DTO."""
        role = Role(
            name=name,
            system_role=system_role.value,
            description=description,
            is_active=True,
        )
        try:
            created = await self.create(role)
        except IntegrityError:
            raise ResourceAlreadyExistsException("Role", name) from None
        return role_to_result(created)

    async def set_active(self, role_id: str, is_active: bool) -> RoleResult | None:
        row = await self.get_entity(role_id)
        if row is None:
            return None
        if row.is_active != is_active:
            row.is_active = is_active
            row = await self.update(row)
        return role_to_result(row)
