"""Idempotent seeding of the permission catalog, built-in roles, default grants and menus.

Existing rows are left as they are; only missing permissions, roles, grants
and menu items are created. Grants an administrator added later are kept.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from accessgate.application.dtos.menu import MenuSeed
from accessgate.application.interfaces.repositories import IMenuRepository
from accessgate.application.services.rbac_store import RbacStore
from accessgate.domain.permission_catalog import (
    DEFAULT_MENUS,
    DEFAULT_ROLES,
    SYSTEM_PERMISSIONS,
)
from accessgate.domain.value_objects import PermissionKey

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeedSummary:
    """Counts of rows created by one seed run."""

    permissions_created: int = 0
    roles_created: int = 0
    grants_added: int = 0
    menus_created: int = 0


class RbacSeedService:
    """Creates whatever part of the built-in RBAC catalog is missing."""

    def __init__(self, store: RbacStore, menus: IMenuRepository | None = None) -> None:
        self.store = store
        self.menus = menus

    async def seed(self, *, include_menus: bool = True) -> SeedSummary:
        permissions_created = await self._seed_permissions()
        roles_created, grants_added = await self._seed_roles()
        menus_created = await self._seed_menus() if include_menus and self.menus else 0
        summary = SeedSummary(permissions_created, roles_created, grants_added, menus_created)
        logger.info(
            "RBAC seed complete: %d permissions, %d roles, %d grants, %d menu items created",
            summary.permissions_created,
            summary.roles_created,
            summary.grants_added,
            summary.menus_created,
        )
        return summary

    async def _seed_permissions(self) -> int:
        created = 0
        for entry in SYSTEM_PERMISSIONS:
            key = PermissionKey(entry["resource"], entry["action"])
            if await self.store.permissions.get_by_code(key.code) is not None:
                continue
            await self.store.create_permission(
                key.resource,
                key.action,
                entry["display_name"],
                entry["description"],
                is_system=True,
            )
            created += 1
        return created

    async def _seed_roles(self) -> tuple[int, int]:
        roles_created = 0
        grants_added = 0
        for system_role, data in DEFAULT_ROLES.items():
            role = await self.store.roles.get_by_system_role(system_role)
            if role is None:
                role = await self.store.roles.get_by_name(data["name"])
            if role is None:
                role = await self.store.create_role(data["name"], system_role, data["description"])
                roles_created += 1
            for code in data["permissions"]:
                if await self.store.grant_permission_to_role(role.id, code):
                    grants_added += 1
        return roles_created, grants_added

    async def _seed_menus(self) -> int:
        assert self.menus is not None
        created = 0
        ids_by_name: dict[str, str] = {}
        for entry in DEFAULT_MENUS:
            existing = await self.menus.get_by_name(entry["name"])
            if existing is not None:
                ids_by_name[existing.name] = existing.id
                continue
            parent = entry["parent"]
            item = await self.menus.create_menu_item(
                MenuSeed(
                    name=entry["name"],
                    display_name=entry["display_name"],
                    menu_type=entry["menu_type"],
                    route=entry["route"],
                    icon=entry["icon"],
                    parent_id=ids_by_name[parent] if parent else None,
                    sort_order=entry["sort_order"],
                    required_permissions=tuple(entry["required_permissions"]),
                )
            )
            ids_by_name[item.name] = item.id
            created += 1
        return created
