from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from app.village_nav.domain.models import (
    ROOT_HREF,
    GroupedNavigation,
    NavigationGroup,
    NavigationItem,
    NavigationStats,
    RoleNavigationMap,
)
from app.village_nav.domain.navigation_config import NAVIGATION_CONFIG, REQUIRED_ROLES

DEFAULT_GROUP_ID = "default"


def get_navigation_for_role(
    role: str,
    navigation: Mapping[str, RoleNavigationMap] | None = None,
) -> RoleNavigationMap | None:
    source = NAVIGATION_CONFIG if navigation is None else navigation
    return source.get(role)


def get_navigation_items_for_role(
    role: str,
    navigation: Mapping[str, RoleNavigationMap] | None = None,
) -> tuple[NavigationItem, ...]:
    role_map = get_navigation_for_role(role, navigation)
    return role_map.items if role_map else ()


def get_navigation_groups_for_role(
    role: str,
    navigation: Mapping[str, RoleNavigationMap] | None = None,
) -> tuple[NavigationGroup, ...]:
    role_map = get_navigation_for_role(role, navigation)
    return role_map.groups if role_map else ()


def get_all_user_roles(navigation: Mapping[str, RoleNavigationMap] | None = None) -> list[str]:
    source = NAVIGATION_CONFIG if navigation is None else navigation
    return list(source.keys())


def is_valid_user_role(role: str, navigation: Mapping[str, RoleNavigationMap] | None = None) -> bool:
    source = NAVIGATION_CONFIG if navigation is None else navigation
    return role in source


def validate_navigation_config(config: Mapping[str, RoleNavigationMap]) -> list[str]:
    errors: list[str] = []
    for role in REQUIRED_ROLES:
        role_config = config.get(role)
        if role_config is None:
            errors.append(f"Missing configuration for role: {role}")
            continue

        if not isinstance(role_config.items, Sequence):
            errors.append(f"Invalid items array for role: {role}")
        if not isinstance(role_config.groups, Sequence):
            errors.append(f"Invalid groups array for role: {role}")
        if not isinstance(role_config.permissions, Sequence):
            errors.append(f"Invalid permissions array for role: {role}")

        for item in role_config.items or ():
            if not item.id or not item.label or not item.href:
                errors.append(f"Invalid navigation item for role {role}: missing required fields")
            if isinstance(item.order, bool) or not isinstance(item.order, (int, float)):
                errors.append(f"Invalid order for navigation item {item.id} in role {role}")
    return errors


def validate_navigation_integrity(role_map: RoleNavigationMap) -> list[str]:
    warnings: list[str] = []
    seen: set[str] = set()
    group_ids = {group.id for group in role_map.groups}
    for item in flatten_navigation_items(role_map.items):
        if item.id in seen:
            warnings.append(f"Duplicate navigation item id {item.id} in role {role_map.role}")
        seen.add(item.id)
        if item.group is not None and item.group not in group_ids:
            warnings.append(
                f"Navigation item {item.id} in role {role_map.role} references unknown group {item.group}"
            )
    return warnings


def flatten_navigation_items(items: Iterable[NavigationItem]) -> list[NavigationItem]:
    flattened: list[NavigationItem] = []
    for item in items:
        flattened.append(item)
        if item.children:
            flattened.extend(flatten_navigation_items(item.children))
    return flattened


def search_navigation_items(items: Iterable[NavigationItem], query: str) -> list[NavigationItem]:
    needle = query.lower()
    return [
        item
        for item in flatten_navigation_items(items)
        if needle in item.label.lower() or needle in item.href.lower()
    ]


def sort_navigation_items(items: Iterable[NavigationItem]) -> list[NavigationItem]:
    return sorted(items, key=lambda item: item.order)


def sort_navigation_groups(groups: Iterable[NavigationGroup]) -> list[NavigationGroup]:
    return sorted(groups, key=lambda group: group.order)


def group_navigation_items(items: Iterable[NavigationItem]) -> dict[str, list[NavigationItem]]:
    grouped: dict[str, list[NavigationItem]] = {}
    for item in items:
        grouped.setdefault(item.group or DEFAULT_GROUP_ID, []).append(item)
    return grouped


def group_navigation_items_with_metadata(
    items: Iterable[NavigationItem],
    groups: Iterable[NavigationGroup],
) -> list[GroupedNavigation]:
    grouped = group_navigation_items(items)
    result: list[GroupedNavigation] = []
    for group in sort_navigation_groups(groups):
        group_items = sort_navigation_items(grouped.get(group.id, []))
        if group_items:
            result.append(GroupedNavigation(group=group, items=tuple(group_items)))
    return result


def get_items_by_group(items: Iterable[NavigationItem], group_id: str) -> list[NavigationItem]:
    return [item for item in items if item.group == group_id]


def find_navigation_item_by_id(items: Iterable[NavigationItem], item_id: str) -> NavigationItem | None:
    return next((item for item in flatten_navigation_items(items) if item.id == item_id), None)


def find_active_navigation_item(items: Iterable[NavigationItem], current_path: str) -> NavigationItem | None:
    # Children are checked before the parent so nested exact matches win.
    for item in items:
        if item.children:
            found = find_active_navigation_item(item.children, current_path)
            if found is not None:
                return found
        if item.href == current_path:
            return item
        if current_path.startswith(item.href) and item.href != ROOT_HREF:
            return item
    return None


def get_navigation_stats(
    role: str,
    navigation: Mapping[str, RoleNavigationMap] | None = None,
) -> NavigationStats:
    role_map = get_navigation_for_role(role, navigation)
    if role_map is None:
        return NavigationStats()
    flat_items = flatten_navigation_items(role_map.items)
    return NavigationStats(
        total_items=len(flat_items),
        total_groups=len(role_map.groups),
        items_with_permissions=sum(1 for item in flat_items if item.permission),
        permissions_count=len(role_map.permissions),
    )
