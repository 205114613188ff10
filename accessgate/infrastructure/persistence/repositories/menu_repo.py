"""MenuItem repository. Returns flat MenuItemResult rows; tree building is in MenuProjection."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from accessgate.application.dtos.menu import MenuItemResult, MenuSeed
from accessgate.domain.enums import MenuType
from accessgate.domain.exceptions import ResourceAlreadyExistsException
from accessgate.infrastructure.persistence.models.menu import MenuItem
from accessgate.infrastructure.persistence.repositories.base import BaseRepository


def _menu_to_result(m: MenuItem) -> MenuItemResult:
    return MenuItemResult(
        id=m.id,
        name=m.name,
        display_name=m.display_name,
        description=m.description,
        icon=m.icon,
        route=m.route,
        menu_type=MenuType(m.menu_type),
        parent_id=m.parent_id,
        sort_order=m.sort_order,
        is_active=m.is_active,
        required_permissions=tuple(m.required_permissions or ()),
    )


class MenuRepository(BaseRepository[MenuItem]):
    """Menu item repository (implements IMenuRepository)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, MenuItem)

    async def list_menu_items(
        self, menu_type: MenuType | None = None, include_inactive: bool = False
    ) -> list[MenuItemResult]:
        q = select(MenuItem).order_by(MenuItem.sort_order, MenuItem.name)
        if menu_type is not None:
            q = q.where(MenuItem.menu_type == menu_type.value)
        if not include_inactive:
            q = q.where(MenuItem.is_active.is_(True))
        result = await self.db.execute(q)
        return [_menu_to_result(m) for m in result.scalars().all()]

    async def get_by_name(self, name: str) -> MenuItemResult | None:
        result = await self.db.execute(select(MenuItem).where(MenuItem.name == name))
        row = result.scalar_one_or_none()
        return _menu_to_result(row) if row else None

    async def create_menu_item(self, data: MenuSeed) -> MenuItemResult:
        item = MenuItem(
            name=data.name,
            display_name=data.display_name,
            description=data.description,
            icon=data.icon,
            route=data.route,
            menu_type=data.menu_type.value,
            parent_id=data.parent_id,
            sort_order=data.sort_order,
            is_active=True,
            required_permissions=list(data.required_permissions),
        )
        try:
            created = await self.create(item)
        except IntegrityError:
            raise ResourceAlreadyExistsException("MenuItem", data.name) from None
        return _menu_to_result(created)
