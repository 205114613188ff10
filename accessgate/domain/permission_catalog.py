"""Permission catalog: built-in permissions, roles, default grants, and menus.

Pure data. Seeded once by RbacSeedService; afterwards changed only through
explicit administrative commands.
"""

from typing import TypedDict

from accessgate.domain.enums import MenuType, PermissionAction, SystemRole


class PermissionData(TypedDict):
    """Catalog entry for one permission."""

    resource: str
    action: PermissionAction
    display_name: str
    description: str


class RoleData(TypedDict):
    """Role configuration for built-in roles."""

    name: str
    description: str
    permissions: list[str]


class MenuData(TypedDict):
    """Menu node configuration (parent referenced by name)."""

    name: str
    display_name: str
    icon: str
    route: str | None
    parent: str | None
    sort_order: int
    menu_type: MenuType
    required_permissions: list[str]


def _perm(resource: str, action: PermissionAction, display_name: str, description: str) -> PermissionData:
    return {
        "resource": resource,
        "action": action,
        "display_name": display_name,
        "description": description,
    }


V, C, E, D, X, M = (
    PermissionAction.VIEW,
    PermissionAction.CREATE,
    PermissionAction.EDIT,
    PermissionAction.DELETE,
    PermissionAction.EXECUTE,
    PermissionAction.MANAGE,
)

SYSTEM_PERMISSIONS: list[PermissionData] = [
    _perm("dashboard", V, "View Dashboard", "Access to main dashboard"),
    # User management
    _perm("users", V, "View Users", "View user listings and details"),
    _perm("users", C, "Create Users", "Create new users"),
    _perm("users", E, "Edit Users", "Modify user information"),
    _perm("users", D, "Delete Users", "Remove users from system"),
    _perm("users", M, "Manage Users", "Full user management access, including role assignment"),
    # Role management
    _perm("roles", V, "View Roles", "View role listings and details"),
    _perm("roles", C, "Create Roles", "Create new roles"),
    _perm("roles", E, "Edit Roles", "Modify role settings and grants"),
    _perm("roles", D, "Delete Roles", "Remove roles from system"),
    _perm("roles", M, "Manage Roles", "Full role management access"),
    # Permission management
    _perm("permissions", V, "View Permissions", "View permission listings"),
    _perm("permissions", C, "Create Permissions", "Create new permissions"),
    _perm("permissions", E, "Edit Permissions", "Modify permissions"),
    _perm("permissions", D, "Delete Permissions", "Remove permissions"),
    _perm("permissions", M, "Manage Permissions", "Full permission management"),
    # Content
    _perm("content", V, "View Content", "View content items"),
    _perm("content", C, "Create Content", "Create new content"),
    _perm("content", E, "Edit Content", "Modify content items"),
    _perm("content", D, "Delete Content", "Remove content items"),
    _perm("content", M, "Manage Content", "Full content management"),
    # Financials
    _perm("financials", V, "View Financials", "View financial data"),
    _perm("financials", M, "Manage Financials", "Manage payments and subscriptions"),
    _perm("reports", V, "View Reports", "Access to financial reports"),
    # System
    _perm("system", V, "View System", "View system information"),
    _perm("system", M, "Manage System", "System administration"),
    _perm("system", X, "View Logs", "Access system logs"),
    _perm("analytics", V, "View Analytics", "Access to analytics"),
    # Public area
    _perm("public.dashboard", V, "View Public Dashboard", "Access to user dashboard"),
    _perm("public.vocabulary", V, "View Vocabulary", "Access to vocabulary learning"),
    _perm("public.learning", V, "Access Learning", "Access to learning modules"),
]


def _code(p: PermissionData) -> str:
    return f"{p['resource']}:{p['action'].value}"


SYSTEM_PERMISSION_CODES: list[str] = [_code(p) for p in SYSTEM_PERMISSIONS]

_PUBLIC_PERMISSIONS = [
    "public.dashboard:view",
    "public.vocabulary:view",
    "public.learning:view",
]

# Built-in roles own explicit grants only; there is no inheritance between roles.
DEFAULT_ROLES: dict[SystemRole, RoleData] = {
    SystemRole.SUPER_ADMIN: {
        "name": "SuperAdmin",
        "description": "Full system access with all permissions",
        "permissions": list(SYSTEM_PERMISSION_CODES),
    },
    SystemRole.ADMIN: {
        "name": "Admin",
        "description": "Administrative access with most permissions",
        "permissions": [
            "dashboard:view",
            "users:view",
            "users:create",
            "users:edit",
            "users:delete",
            "roles:view",
            "roles:create",
            "roles:edit",
            "permissions:view",
            "content:view",
            "content:create",
            "content:edit",
            "content:delete",
            "system:view",
            "reports:view",
        ],
    },
    SystemRole.FINANCE: {
        "name": "Finance",
        "description": "Financial data access and management",
        "permissions": [
            "dashboard:view",
            "users:view",
            "financials:view",
            "financials:manage",
            "reports:view",
        ],
    },
    SystemRole.ACCOUNTS: {
        "name": "Accounts",
        "description": "Account management and billing",
        "permissions": ["dashboard:view", "users:view", "financials:view"],
    },
    SystemRole.CONTENT_MANAGER: {
        "name": "ContentManager",
        "description": "Content creation and management",
        "permissions": [
            "dashboard:view",
            "users:view",
            "content:view",
            "content:create",
            "content:edit",
            "content:delete",
        ],
    },
    SystemRole.STUDENT: {
        "name": "Student",
        "description": "Learner with access to the public learning area",
        "permissions": list(_PUBLIC_PERMISSIONS),
    },
    SystemRole.USER: {
        "name": "User",
        "description": "Standard user with basic permissions",
        "permissions": ["dashboard:view", *_PUBLIC_PERMISSIONS],
    },
}


def _menu(
    name: str,
    display_name: str,
    icon: str,
    route: str | None,
    sort_order: int,
    required_permissions: list[str],
    parent: str | None = None,
    menu_type: MenuType = MenuType.ADMIN,
) -> MenuData:
    return {
        "name": name,
        "display_name": display_name,
        "icon": icon,
        "route": route,
        "parent": parent,
        "sort_order": sort_order,
        "menu_type": menu_type,
        "required_permissions": required_permissions,
    }


# Parents must precede their children.
DEFAULT_MENUS: list[MenuData] = [
    _menu("dashboard", "Dashboard", "pi pi-home", "/admin/dashboard", 10, ["dashboard:view"]),
    _menu("user-management", "User Management", "pi pi-users", None, 20, ["users:view", "users:manage"]),
    _menu("users-list", "All Users", "pi pi-list", "/admin/users", 10, ["users:view"], "user-management"),
    _menu("users-create", "Add User", "pi pi-plus", "/admin/users/create", 20, ["users:create"], "user-management"),
    _menu("users-roles", "User Roles", "pi pi-key", "/admin/users/roles", 30, ["users:manage"], "user-management"),
    _menu("role-management", "Role Management", "pi pi-key", None, 30, ["roles:view"]),
    _menu("roles-list", "All Roles", "pi pi-list", "/admin/roles", 10, ["roles:view"], "role-management"),
    _menu("roles-create", "Create Role", "pi pi-plus", "/admin/roles/create", 20, ["roles:create"], "role-management"),
    _menu("permission-management", "Permissions", "pi pi-shield", None, 40, ["permissions:view"]),
    _menu("permissions-list", "All Permissions", "pi pi-list", "/admin/permissions", 10, ["permissions:view"], "permission-management"),
    _menu("permissions-create", "Create Permission", "pi pi-plus", "/admin/permissions/create", 20, ["permissions:create"], "permission-management"),
    _menu("content-management", "Content", "pi pi-file-edit", None, 50, ["content:view"]),
    _menu("content-vocabulary", "Vocabulary", "pi pi-book", "/admin/content/vocabulary", 10, ["content:view"], "content-management"),
    _menu("content-categories", "Categories", "pi pi-tags", "/admin/content/categories", 20, ["content:view"], "content-management"),
    _menu("financial-management", "Financials", "pi pi-dollar", None, 60, ["financials:view"]),
    _menu("financials-overview", "Overview", "pi pi-chart-bar", "/admin/financials", 10, ["financials:view"], "financial-management"),
    _menu("financials-subscriptions", "Subscriptions", "pi pi-credit-card", "/admin/financials/subscriptions", 20, ["financials:manage"], "financial-management"),
    _menu("financials-reports", "Reports", "pi pi-chart-line", "/admin/financials/reports", 30, ["reports:view"], "financial-management"),
    _menu("system-management", "System", "pi pi-cog", None, 70, ["system:view"]),
    _menu("system-settings", "Settings", "pi pi-sliders-h", "/admin/system/settings", 10, ["system:manage"], "system-management"),
    _menu("system-logs", "Logs", "pi pi-file", "/admin/system/logs", 20, ["system:execute"], "system-management"),
    _menu("system-analytics", "Analytics", "pi pi-chart-pie", "/admin/system/analytics", 30, ["analytics:view"], "system-management"),
    _menu("public-dashboard", "Dashboard", "pi pi-home", "/public/dashboard", 10, ["public.dashboard:view"], menu_type=MenuType.PUBLIC),
    _menu("public-vocabulary", "Vocabulary", "pi pi-book", "/public/vocabulary", 20, ["public.vocabulary:view"], menu_type=MenuType.PUBLIC),
    _menu("public-learning", "Learning", "pi pi-lightbulb", "/public/learning", 30, ["public.learning:view"], menu_type=MenuType.PUBLIC),
]
