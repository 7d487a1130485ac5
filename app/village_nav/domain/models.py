from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


UserRole = Literal[
    "superadmin",
    "admin_head",
    "admin_officer",
    "household_head",
    "security_officer",
]

WILDCARD_PERMISSION = "*"
ROOT_HREF = "/"


@dataclass(frozen=True)
class NavigationGroup:
    id: str
    label: str
    order: int | float
    icon: str | None = None
    collapsible: bool = False
    collapsed: bool = False


@dataclass(frozen=True)
class NavigationItemMetadata:
    description: str | None = None
    badge: str | int | None = None
    external: bool = False


@dataclass(frozen=True)
class NavigationItem:
    id: str
    label: str
    href: str
    order: int | float
    icon: str | None = None
    permission: str | None = None
    group: str | None = None
    children: tuple[NavigationItem, ...] = ()
    metadata: NavigationItemMetadata | None = None


@dataclass(frozen=True)
class RoleNavigationMap:
    role: str
    permissions: tuple[str, ...]
    groups: tuple[NavigationGroup, ...]
    items: tuple[NavigationItem, ...]


@dataclass(frozen=True)
class UserPermissionContext:
    role: str
    permissions: tuple[str, ...] = ()
    user_id: str | None = None
    tenant_id: str | None = None

    def has_wildcard(self) -> bool:
        return WILDCARD_PERMISSION in self.permissions


@dataclass(frozen=True)
class PermissionValidationResult:
    allowed: bool
    reason: str | None = None
    required_permission: str | None = None
    user_role: str | None = None


@dataclass(frozen=True)
class BreadcrumbItem:
    id: str
    label: str
    href: str
    is_active: bool
    is_clickable: bool
    icon: str | None = None
    metadata: NavigationItemMetadata | None = None


@dataclass(frozen=True)
class NavigationStats:
    total_items: int = 0
    total_groups: int = 0
    items_with_permissions: int = 0
    permissions_count: int = 0


@dataclass(frozen=True)
class GroupedNavigation:
    group: NavigationGroup
    items: tuple[NavigationItem, ...] = field(default_factory=tuple)
