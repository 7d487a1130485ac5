from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from app.village_nav.core.logging import log_json
from app.village_nav.domain.models import (
    ROOT_HREF,
    WILDCARD_PERMISSION,
    NavigationItem,
    PermissionValidationResult,
    RoleNavigationMap,
    UserPermissionContext,
)
from app.village_nav.services.navigation import get_navigation_for_role

logger = logging.getLogger("village_nav.navigation")

INVALID_ROLE_REASON = "Invalid user role"
ROUTE_NOT_FOUND_REASON = "Route not found in navigation configuration"
INSUFFICIENT_PERMISSIONS_REASON = "Insufficient permissions"


@dataclass(frozen=True)
class NavigationAccessValidation:
    result: PermissionValidationResult
    navigation_item: NavigationItem
    context: UserPermissionContext
    timestamp: datetime

    @property
    def allowed(self) -> bool:
        return self.result.allowed

    @property
    def reason(self) -> str | None:
        return self.result.reason


def can_access_item(item: NavigationItem, context: UserPermissionContext) -> PermissionValidationResult:
    if not item.permission:
        return PermissionValidationResult(allowed=True, reason="No permission required")

    if WILDCARD_PERMISSION in context.permissions:
        return PermissionValidationResult(allowed=True, reason="Superadmin access", user_role=context.role)

    if item.permission in context.permissions:
        return PermissionValidationResult(
            allowed=True,
            reason="User has required permission",
            required_permission=item.permission,
            user_role=context.role,
        )

    return PermissionValidationResult(
        allowed=False,
        reason=INSUFFICIENT_PERMISSIONS_REASON,
        required_permission=item.permission,
        user_role=context.role,
    )


def validate_user_permissions(
    user_role: str,
    user_permissions: Iterable[str],
    navigation: Mapping[str, RoleNavigationMap] | None = None,
) -> PermissionValidationResult:
    role_config = get_navigation_for_role(user_role, navigation)
    if role_config is None:
        return PermissionValidationResult(allowed=False, reason=INVALID_ROLE_REASON, user_role=user_role)

    granted = set(user_permissions)
    missing = [
        permission
        for permission in role_config.permissions
        if permission != WILDCARD_PERMISSION and permission not in granted
    ]
    if missing:
        return PermissionValidationResult(
            allowed=False,
            reason=f"Missing required permissions: {', '.join(missing)}",
            user_role=user_role,
        )
    return PermissionValidationResult(allowed=True, reason="All role permissions verified", user_role=user_role)


def get_accessible_navigation_items(
    user_role: str,
    context: UserPermissionContext,
    navigation: Mapping[str, RoleNavigationMap] | None = None,
) -> list[NavigationItem]:
    # Only top-level items are filtered; children travel with their parent.
    role_config = get_navigation_for_role(user_role, navigation)
    if role_config is None:
        return []
    return [item for item in role_config.items if can_access_item(item, context).allowed]


def find_navigation_item_by_path(items: Iterable[NavigationItem], path: str) -> NavigationItem | None:
    # First match in declared order wins, including prefix matches.
    for item in items:
        if item.href == path:
            return item
        if path.startswith(item.href) and item.href != ROOT_HREF:
            return item
        if item.children:
            found = find_navigation_item_by_path(item.children, path)
            if found is not None:
                return found
    return None


def can_access_route(
    path: str,
    context: UserPermissionContext,
    navigation: Mapping[str, RoleNavigationMap] | None = None,
) -> PermissionValidationResult:
    role_config = get_navigation_for_role(context.role, navigation)
    if role_config is None:
        return PermissionValidationResult(allowed=False, reason=INVALID_ROLE_REASON, user_role=context.role)

    navigation_item = find_navigation_item_by_path(role_config.items, path)
    if navigation_item is None:
        return PermissionValidationResult(allowed=False, reason=ROUTE_NOT_FOUND_REASON, user_role=context.role)

    return can_access_item(navigation_item, context)


def create_permission_context(
    role: str,
    permissions: Iterable[str] | None = None,
    user_id: str | None = None,
    tenant_id: str | None = None,
    navigation: Mapping[str, RoleNavigationMap] | None = None,
) -> UserPermissionContext:
    if permissions is None:
        role_config = get_navigation_for_role(role, navigation)
        resolved: tuple[str, ...] = role_config.permissions if role_config else ()
    else:
        resolved = tuple(permissions)
    return UserPermissionContext(role=role, permissions=resolved, user_id=user_id, tenant_id=tenant_id)


def validate_navigation_access(
    item: NavigationItem,
    context: UserPermissionContext,
    *,
    log_access: bool = False,
) -> NavigationAccessValidation:
    result = can_access_item(item, context)
    timestamp = datetime.now(timezone.utc)

    if log_access:
        log_json(
            logger,
            {
                "event": "navigation_access",
                "item": item.id,
                "user": context.user_id,
                "role": context.role,
                "allowed": result.allowed,
                "reason": result.reason,
                "timestamp": timestamp.isoformat(),
            },
        )

    return NavigationAccessValidation(result=result, navigation_item=item, context=context, timestamp=timestamp)


def validate_multiple_items(
    items: Sequence[NavigationItem],
    context: UserPermissionContext,
) -> list[tuple[NavigationItem, PermissionValidationResult]]:
    return [(item, can_access_item(item, context)) for item in items]


def get_role_permission_requirements(
    role: str,
    navigation: Mapping[str, RoleNavigationMap] | None = None,
) -> list[str]:
    role_config = get_navigation_for_role(role, navigation)
    return list(role_config.permissions) if role_config else []


def can_access_role_navigation(
    user_role: str,
    target_role: str,
    user_permissions: Iterable[str],
) -> PermissionValidationResult:
    if user_role == target_role:
        return PermissionValidationResult(allowed=True, reason="User accessing own role navigation")

    if WILDCARD_PERMISSION in set(user_permissions):
        return PermissionValidationResult(allowed=True, reason="Superadmin can access all role navigation")

    return PermissionValidationResult(
        allowed=False,
        reason=f"Cross-role navigation access denied: {user_role} cannot access {target_role} navigation",
        user_role=user_role,
    )
