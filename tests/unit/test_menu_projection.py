"""Tests for menu tree building and permission-based pruning."""

import pytest
from fakes import FakeRbacReader, make_role

from accessgate.application.dtos.menu import MenuItemResult, MenuNode
from accessgate.application.services.authorization_service import AuthorizationService
from accessgate.application.services.menu_projection import (
    MenuProjection,
    build_menu_tree,
    prune_menu,
)
from accessgate.domain.enums import MenuType
from accessgate.domain.exceptions import ValidationException


def item(
    item_id: str,
    parent_id: str | None = None,
    sort_order: int = 0,
    required: tuple[str, ...] = (),
    route: str | None = "/x",
    is_active: bool = True,
    menu_type: MenuType = MenuType.ADMIN,
) -> MenuItemResult:
    return MenuItemResult(
        id=item_id,
        name=item_id,
        display_name=item_id.title(),
        description=None,
        icon=None,
        route=route,
        menu_type=menu_type,
        parent_id=parent_id,
        sort_order=sort_order,
        is_active=is_active,
        required_permissions=required,
    )


def names(nodes: list[MenuNode]) -> list[object]:
    """Nested [name, [children...]] view for compact assertions."""
    return [[n.name, names(list(n.children))] if n.children else n.name for n in nodes]


class TestBuildMenuTree:
    def test_orders_each_level_by_sort_order(self) -> None:
        tree = build_menu_tree(
            [
                item("b", sort_order=20),
                item("a", sort_order=10),
                item("a2", "a", sort_order=2),
                item("a1", "a", sort_order=1),
            ]
        )
        assert names(tree) == [["a", ["a1", "a2"]], "b"]

    def test_ties_break_by_name(self) -> None:
        assert names(build_menu_tree([item("zeta"), item("alpha")])) == ["alpha", "zeta"]

    def test_missing_parent_rejected(self) -> None:
        with pytest.raises(ValidationException, match="missing parent"):
            build_menu_tree([item("a", "ghost")])

    def test_cycle_rejected(self) -> None:
        with pytest.raises(ValidationException, match="cycle"):
            build_menu_tree([item("root"), item("a", "b"), item("b", "a")])

    def test_duplicate_id_rejected(self) -> None:
        with pytest.raises(ValidationException, match="Duplicate"):
            build_menu_tree([item("a"), item("a")])


class TestPruneMenu:
    def test_hidden_middle_node_removes_unrestricted_leaf(self) -> None:
        """Three levels: root (open) > middle (needs P) > leaf (open). Without P only root remains."""
        tree = build_menu_tree(
            [
                item("root"),
                item("middle", "root", required=("content:edit",)),
                item("leaf", "middle"),
            ]
        )
        assert names(prune_menu(tree, frozenset())) == ["root"]
        assert names(prune_menu(tree, frozenset({"content:edit"}))) == [
            ["root", [["middle", ["leaf"]]]]
        ]

    def test_or_semantics(self) -> None:
        tree = build_menu_tree([item("a", required=("users:view", "users:manage"))])
        assert names(prune_menu(tree, frozenset({"users:manage"}))) == ["a"]
        assert prune_menu(tree, frozenset({"users:edit"})) == []

    def test_child_not_visible_just_because_parent_is(self) -> None:
        tree = build_menu_tree(
            [
                item("parent", required=("content:view",)),
                item("open", "parent"),
                item("locked", "parent", required=("content:delete",)),
            ]
        )
        assert names(prune_menu(tree, frozenset({"content:view"}))) == [["parent", ["open"]]]

    def test_visible_container_kept_without_visible_children(self) -> None:
        tree = build_menu_tree(
            [
                item("admin", route=None),
                item("users", "admin", required=("users:view",)),
            ]
        )
        visible = prune_menu(tree, frozenset())
        assert names(visible) == ["admin"]
        assert visible[0].children == ()

    def test_nested_containers_kept_when_visible(self) -> None:
        tree = build_menu_tree(
            [
                item("outer", route=None),
                item("inner", "outer", route=None),
                item("leaf", "inner", required=("system:manage",)),
                item("locked", route=None, required=("system:view",)),
            ]
        )
        assert names(prune_menu(tree, frozenset())) == [["outer", ["inner"]]]

    def test_routed_parent_kept_without_children(self) -> None:
        tree = build_menu_tree([item("page"), item("sub", "page", required=("x:view",))])
        assert names(prune_menu(tree, frozenset())) == ["page"]

    def test_inactive_node_hides_subtree(self) -> None:
        tree = build_menu_tree([item("off", is_active=False), item("child", "off")])
        assert prune_menu(tree, frozenset()) == []

    def test_malformed_required_code_never_matches(self) -> None:
        tree = build_menu_tree([item("a", required=("garbage",))])
        assert prune_menu(tree, frozenset({"garbage"})) == []

    def test_order_preserved(self) -> None:
        tree = build_menu_tree(
            [item("c", sort_order=3), item("a", sort_order=1), item("b", sort_order=2, required=("x:view",))]
        )
        assert names(prune_menu(tree, frozenset())) == ["a", "c"]


class _Menus:
    def __init__(self, rows: list[MenuItemResult]) -> None:
        self.rows = rows

    async def list_menu_items(self, menu_type=None, include_inactive=False):
        return list(self.rows)


class TestMenuProjection:
    async def test_visible_menu_for_user(self) -> None:
        reader = FakeRbacReader()
        reader.give_role("u1", make_role("r1", "Viewer"), "content:view")
        projection = MenuProjection(
            AuthorizationService(reader),
            _Menus(
                [
                    item("content", required=("content:view",)),
                    item("users", required=("users:view",)),
                    item("learn", menu_type=MenuType.PUBLIC),
                ]
            ),
        )
        assert names(await projection.visible_menu("u1", MenuType.ADMIN)) == ["content"]
        assert names(await projection.visible_menu("u1")) == ["content", "learn"]

    async def test_store_failure_shows_only_open_nodes(self) -> None:
        reader = FakeRbacReader()
        reader.error = RuntimeError("down")
        projection = MenuProjection(
            AuthorizationService(reader),
            _Menus([item("open"), item("closed", required=("content:view",))]),
        )
        assert names(await projection.visible_menu("u1")) == ["open"]

    async def test_without_menu_source(self) -> None:
        projection = MenuProjection(AuthorizationService(FakeRbacReader()))
        with pytest.raises(ValidationException):
            await projection.get_menu_tree()
