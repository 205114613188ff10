"""DTOs for menu projection (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from accessgate.domain.enums import MenuType


@dataclass(frozen=True)
class MenuItemResult:
    """Flat menu row as stored; parent_id links rows into a tree."""

    id: str
    name: str
    display_name: str
    description: str | None
    icon: str | None
    route: str | None
    menu_type: MenuType
    parent_id: str | None
    sort_order: int
    is_active: bool
    required_permissions: tuple[str, ...]


@dataclass(frozen=True)
class MenuNode:
    """Menu tree node. Children are ordered by sort_order; no permissions are inherited."""

    id: str
    name: str
    display_name: str
    menu_type: MenuType
    sort_order: int = 0
    required_permissions: tuple[str, ...] = ()
    children: tuple[MenuNode, ...] = ()
    route: str | None = None
    icon: str | None = None
    description: str | None = None
    parent_id: str | None = None
    is_active: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "display_name": self.display_name,
            "description": self.description,
            "icon": self.icon,
            "route": self.route,
            "parent_id": self.parent_id,
            "sort_order": self.sort_order,
            "menu_type": self.menu_type.value,
            "required_permissions": list(self.required_permissions),
            "children": [c.to_dict() for c in self.children],
        }


@dataclass(frozen=True)
class MenuSeed:
    """Input for creating a menu item."""

    name: str
    display_name: str
    menu_type: MenuType
    route: str | None = None
    icon: str | None = None
    description: str | None = None
    parent_id: str | None = None
    sort_order: int = 0
    required_permissions: tuple[str, ...] = field(default_factory=tuple)
