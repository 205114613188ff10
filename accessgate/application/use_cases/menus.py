"""Menu queries."""

from __future__ import annotations

from dataclasses import dataclass

from accessgate.application.dispatcher import Query
from accessgate.application.dtos.menu import MenuNode
from accessgate.application.use_cases.base import Handler
from accessgate.domain.enums import MenuType


@dataclass(frozen=True)
class GetVisibleMenu(Query):
    user_id: str
    menu_type: MenuType | None = None


class GetVisibleMenuHandler(Handler):
    async def handle(self, request: GetVisibleMenu) -> list[MenuNode]:
        return await self.ctx.menus.visible_menu(request.user_id, request.menu_type)


HANDLERS: list[tuple[type, type]] = [(GetVisibleMenu, GetVisibleMenuHandler)]
