"""Menu projection: the part of the navigation tree a user may see.

A node is visible when it is active and its required permissions are empty
or at least one of them is granted. A hidden node takes its whole subtree
with it; a visible node stays even when none of its children are visible.
Each level keeps its configured sort order.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import replace

from accessgate.application.dtos.menu import MenuItemResult, MenuNode
from accessgate.application.interfaces.repositories import IMenuRepository
from accessgate.application.services.authorization_service import AuthorizationService
from accessgate.domain.enums import MenuType
from accessgate.domain.exceptions import ValidationException
from accessgate.domain.value_objects import PermissionKey

logger = logging.getLogger(__name__)


def _sort_key(item: MenuItemResult) -> tuple[int, str]:
    """Configured sort_order; equal orders fall back to name so siblings sort deterministically."""
    return (item.sort_order, item.name)


def build_menu_tree(items: Iterable[MenuItemResult]) -> list[MenuNode]:
    """Assemble flat rows (linked by parent_id) into ordered root nodes.

    Raises:
        ValidationException: duplicate ids, a parent_id that names no row, or a cycle.
    """
    by_id: dict[str, MenuItemResult] = {}
    for item in items:
        if item.id in by_id:
            raise ValidationException(f"Duplicate menu item id: {item.id}", field="id")
        by_id[item.id] = item

    children: dict[str | None, list[MenuItemResult]] = defaultdict(list)
    for item in by_id.values():
        if item.parent_id is not None and item.parent_id not in by_id:
            raise ValidationException(
                f"Menu item {item.name} references missing parent {item.parent_id}",
                field="parent_id",
            )
        children[item.parent_id].append(item)

    built: set[str] = set()

    def build(item: MenuItemResult) -> MenuNode:
        built.add(item.id)
        kids = sorted(children.get(item.id, []), key=_sort_key)
        return MenuNode(
            id=item.id,
            name=item.name,
            display_name=item.display_name,
            menu_type=item.menu_type,
            sort_order=item.sort_order,
            required_permissions=item.required_permissions,
            children=tuple(build(k) for k in kids),
            route=item.route,
            icon=item.icon,
            description=item.description,
            parent_id=item.parent_id,
            is_active=item.is_active,
        )

    roots = [build(item) for item in sorted(children.get(None, []), key=_sort_key)]
    if len(built) != len(by_id):
        unreachable = sorted(by_id[i].name for i in by_id.keys() - built)
        raise ValidationException(
            f"Menu items form a cycle: {', '.join(unreachable)}", field="parent_id"
        )
    return roots


def _canonical(code: str) -> str | None:
    try:
        return PermissionKey.parse(code).code
    except ValueError:
        return None


def _self_visible(node: MenuNode, granted: frozenset[str]) -> bool:
    if not node.is_active:
        return False
    if not node.required_permissions:
        return True
    return any(_canonical(code) in granted for code in node.required_permissions)


def prune_menu(nodes: Sequence[MenuNode], granted: frozenset[str]) -> list[MenuNode]:
    """Visible subtree of nodes for a user holding granted permission codes."""
    visible: list[MenuNode] = []
    for node in nodes:
        if not _self_visible(node, granted):
            continue
        kids = prune_menu(node.children, granted)
        visible.append(replace(node, children=tuple(kids)))
    return visible


class MenuProjection:
    """Projects the configured menu tree onto one user's permissions."""

    def __init__(
        self, authz: AuthorizationService, menus: IMenuRepository | None = None
    ) -> None:
        self.authz = authz
        self.menus = menus

    async def get_menu_tree(self, menu_type: MenuType | None = None) -> list[MenuNode]:
        """Full configured tree (inactive nodes included), roots filtered by menu_type."""
        if self.menus is None:
            raise ValidationException("No menu source configured")
        items = await self.menus.list_menu_items(include_inactive=True)
        roots = build_menu_tree(items)
        if menu_type is None:
            return roots
        return [r for r in roots if r.menu_type == menu_type]

    async def project(self, user_id: str, tree: Sequence[MenuNode]) -> list[MenuNode]:
        """Visible subtree for user. Reads the user's permissions once; failures show nothing."""
        granted = await self.authz.get_user_permissions(user_id)
        visible = prune_menu(tree, granted)
        logger.debug(
            "Menu projection for user %s: %d of %d root nodes visible",
            user_id,
            len(visible),
            len(tree),
        )
        return visible

    async def visible_menu(
        self, user_id: str, menu_type: MenuType | None = None
    ) -> list[MenuNode]:
        return await self.project(user_id, await self.get_menu_tree(menu_type))
