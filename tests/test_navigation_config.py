from dataclasses import replace

from app.village_nav.domain.models import NavigationGroup, NavigationItem, RoleNavigationMap
from app.village_nav.domain.navigation_config import NAVIGATION_CONFIG, REQUIRED_ROLES
from app.village_nav.services.navigation import (
    find_active_navigation_item,
    find_navigation_item_by_id,
    flatten_navigation_items,
    get_all_user_roles,
    get_items_by_group,
    get_navigation_for_role,
    get_navigation_groups_for_role,
    get_navigation_items_for_role,
    get_navigation_stats,
    group_navigation_items,
    group_navigation_items_with_metadata,
    is_valid_user_role,
    search_navigation_items,
    sort_navigation_items,
    validate_navigation_config,
    validate_navigation_integrity,
)


def _item(item_id: str, href: str, order: int = 1, **kwargs) -> NavigationItem:
    return NavigationItem(id=item_id, label=item_id.title(), href=href, order=order, **kwargs)


def test_shipped_config_is_valid():
    assert validate_navigation_config(NAVIGATION_CONFIG) == []
    for role_map in NAVIGATION_CONFIG.values():
        assert validate_navigation_integrity(role_map) == []


def test_every_role_is_configured():
    assert sorted(get_all_user_roles()) == sorted(REQUIRED_ROLES)
    for role in REQUIRED_ROLES:
        assert is_valid_user_role(role)
        assert get_navigation_for_role(role).role == role


def test_unknown_role_lookups_are_empty():
    assert get_navigation_for_role("janitor") is None
    assert get_navigation_items_for_role("janitor") == ()
    assert get_navigation_groups_for_role("janitor") == ()
    assert is_valid_user_role("janitor") is False


def test_missing_role_is_reported():
    partial = {role: role_map for role, role_map in NAVIGATION_CONFIG.items() if role != "security_officer"}
    assert validate_navigation_config(partial) == ["Missing configuration for role: security_officer"]


def test_invalid_items_are_reported():
    household = NAVIGATION_CONFIG["household_head"]
    broken = replace(
        household,
        items=(_item("no-href", ""), replace(_item("bad-order", "/x"), order="2")),
    )
    config = {**NAVIGATION_CONFIG, "household_head": broken}
    errors = validate_navigation_config(config)
    assert "Invalid navigation item for role household_head: missing required fields" in errors
    assert "Invalid order for navigation item bad-order in role household_head" in errors


def test_integrity_flags_duplicates_and_unknown_groups():
    role_map = RoleNavigationMap(
        role="custom",
        permissions=(),
        groups=(NavigationGroup(id="main", label="Main", order=1),),
        items=(_item("a", "/a", group="main"), _item("a", "/b", group="ghost")),
    )
    warnings = validate_navigation_integrity(role_map)
    assert "Duplicate navigation item id a in role custom" in warnings
    assert "Navigation item a in role custom references unknown group ghost" in warnings


def test_flatten_walks_children_depth_first():
    tree = (
        _item("a", "/a", children=(_item("a1", "/a/1", children=(_item("a1x", "/a/1/x"),)),)),
        _item("b", "/b"),
    )
    assert [item.id for item in flatten_navigation_items(tree)] == ["a", "a1", "a1x", "b"]
    assert find_navigation_item_by_id(tree, "a1x").href == "/a/1/x"
    assert find_navigation_item_by_id(tree, "zzz") is None


def test_search_matches_label_or_href_case_insensitively():
    items = get_navigation_items_for_role("security_officer")
    assert [item.id for item in search_navigation_items(items, "VISITOR")] == ["visitors"]
    assert [item.id for item in search_navigation_items(items, "/security/gate")] == ["gate-logs"]


def test_grouping_uses_default_bucket_and_drops_empty_groups():
    items = [_item("b", "/b", order=2, group="main"), _item("a", "/a", order=1, group="main"), _item("x", "/x")]
    grouped = group_navigation_items(items)
    assert [item.id for item in grouped["main"]] == ["b", "a"]
    assert [item.id for item in grouped["default"]] == ["x"]

    groups = [NavigationGroup(id="empty", label="Empty", order=0), NavigationGroup(id="main", label="Main", order=1)]
    result = group_navigation_items_with_metadata(items, groups)
    assert [entry.group.id for entry in result] == ["main"]
    assert [item.id for item in result[0].items] == ["a", "b"]
    assert [item.id for item in sort_navigation_items(items)] == ["a", "x", "b"]
    assert [item.id for item in get_items_by_group(items, "main")] == ["b", "a"]


def test_find_active_item_prefers_children():
    tree = (_item("parent", "/settings", children=(_item("child", "/settings/profile"),)),)
    assert find_active_navigation_item(tree, "/settings/profile").id == "child"
    assert find_active_navigation_item(tree, "/settings/other").id == "parent"
    assert find_active_navigation_item(tree, "/elsewhere") is None


def test_navigation_stats():
    stats = get_navigation_stats("admin_head")
    assert stats.total_items == 7
    assert stats.total_groups == 3
    assert stats.items_with_permissions == 6
    assert stats.permissions_count == 5
    assert get_navigation_stats("janitor").total_items == 0


def test_fractional_order_is_accepted_but_bool_is_not():
    admin_head = NAVIGATION_CONFIG["admin_head"]
    fractional = replace(admin_head, items=(replace(admin_head.items[0], order=1.5), *admin_head.items[1:]))
    assert validate_navigation_config({**NAVIGATION_CONFIG, "admin_head": fractional}) == []

    flagged = replace(admin_head, items=(replace(admin_head.items[0], order=True),))
    assert validate_navigation_config({**NAVIGATION_CONFIG, "admin_head": flagged}) == [
        "Invalid order for navigation item dashboard in role admin_head"
    ]
