from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from types import MappingProxyType

from app.village_nav.domain.models import NavigationGroup, NavigationItem, RoleNavigationMap


NAVIGATION_VERSION = "1.0.0"
NAVIGATION_LAST_UPDATED = date(2025, 1, 10)

REQUIRED_ROLES: tuple[str, ...] = (
    "superadmin",
    "admin_head",
    "admin_officer",
    "household_head",
    "security_officer",
)

_OVERVIEW_GROUP = NavigationGroup(
    id="overview",
    label="Dashboard & Overview",
    icon="home",
    order=1,
    collapsible=False,
    collapsed=False,
)

_DASHBOARD_ITEM = NavigationItem(
    id="dashboard",
    label="Dashboard",
    href="/dashboard",
    icon="home",
    group="overview",
    order=1,
)


SUPERADMIN_NAVIGATION = RoleNavigationMap(
    role="superadmin",
    permissions=("*",),
    groups=(
        NavigationGroup(id="system", label="System Management", icon="settings", order=1),
        NavigationGroup(
            id="villages",
            label="Villages & Tenants",
            icon="building",
            order=2,
            collapsible=True,
        ),
        NavigationGroup(
            id="reports",
            label="Analytics & Reports",
            icon="chart-bar",
            order=3,
            collapsible=True,
            collapsed=True,
        ),
    ),
    items=(
        NavigationItem(
            id="system-overview",
            label="System Overview",
            href="/admin/system",
            icon="monitor",
            group="system",
            order=1,
        ),
        NavigationItem(
            id="villages-management",
            label="All Villages",
            href="/admin/villages",
            icon="building",
            group="villages",
            order=1,
        ),
        NavigationItem(
            id="users-management",
            label="User Management",
            href="/admin/users",
            icon="users",
            group="villages",
            order=2,
        ),
        NavigationItem(
            id="system-reports",
            label="System Reports",
            href="/admin/reports",
            icon="file-text",
            group="reports",
            order=1,
        ),
    ),
)

ADMIN_HEAD_NAVIGATION = RoleNavigationMap(
    role="admin_head",
    permissions=("manage_households", "manage_fees", "manage_security", "manage_rules", "view_reports"),
    groups=(
        _OVERVIEW_GROUP,
        NavigationGroup(
            id="management",
            label="Village Management",
            icon="briefcase",
            order=2,
            collapsible=True,
        ),
        NavigationGroup(
            id="reports",
            label="Reports & Analytics",
            icon="chart-bar",
            order=3,
            collapsible=True,
            collapsed=True,
        ),
    ),
    items=(
        _DASHBOARD_ITEM,
        NavigationItem(
            id="households",
            label="Households",
            href="/households",
            icon="users",
            permission="manage_households",
            group="management",
            order=1,
        ),
        NavigationItem(
            id="fees",
            label="Fee Management",
            href="/fees",
            icon="dollar-sign",
            permission="manage_fees",
            group="management",
            order=2,
        ),
        NavigationItem(
            id="security",
            label="Security",
            href="/security",
            icon="shield",
            permission="manage_security",
            group="management",
            order=3,
        ),
        NavigationItem(
            id="rules",
            label="Village Rules",
            href="/rules",
            icon="file-text",
            permission="manage_rules",
            group="management",
            order=4,
        ),
        NavigationItem(
            id="sticker-approvals",
            label="Sticker Approvals",
            href="/admin/stickers",
            icon="badge-check",
            permission="manage_households",
            group="management",
            order=5,
        ),
        NavigationItem(
            id="village-reports",
            label="Village Reports",
            href="/reports",
            icon="bar-chart",
            permission="view_reports",
            group="reports",
            order=1,
        ),
    ),
)

ADMIN_OFFICER_NAVIGATION = RoleNavigationMap(
    role="admin_officer",
    permissions=("manage_households", "manage_fees", "manage_deliveries"),
    groups=(
        _OVERVIEW_GROUP,
        NavigationGroup(
            id="operations",
            label="Daily Operations",
            icon="clipboard",
            order=2,
            collapsible=True,
        ),
    ),
    items=(
        _DASHBOARD_ITEM,
        NavigationItem(
            id="households",
            label="Households",
            href="/households",
            icon="users",
            permission="manage_households",
            group="operations",
            order=1,
        ),
        NavigationItem(
            id="fees",
            label="Fee Collection",
            href="/fees",
            icon="dollar-sign",
            permission="manage_fees",
            group="operations",
            order=2,
        ),
        NavigationItem(
            id="deliveries",
            label="Deliveries",
            href="/deliveries",
            icon="truck",
            permission="manage_deliveries",
            group="operations",
            order=3,
        ),
        NavigationItem(
            id="sticker-approvals",
            label="Sticker Approvals",
            href="/admin/stickers",
            icon="badge-check",
            permission="manage_households",
            group="operations",
            order=4,
        ),
    ),
)

HOUSEHOLD_HEAD_NAVIGATION = RoleNavigationMap(
    role="household_head",
    permissions=("manage_household", "submit_requests", "view_rules"),
    groups=(
        _OVERVIEW_GROUP,
        NavigationGroup(id="household", label="My Household", icon="users", order=2, collapsible=True),
        NavigationGroup(id="services", label="Village Services", icon="settings", order=3, collapsible=True),
    ),
    items=(
        _DASHBOARD_ITEM,
        NavigationItem(
            id="my-household",
            label="My Household",
            href="/household",
            icon="users",
            permission="manage_household",
            group="household",
            order=1,
        ),
        NavigationItem(
            id="guest-passes",
            label="Guest Passes",
            href="/guest-passes",
            icon="key",
            group="services",
            order=1,
        ),
        NavigationItem(
            id="requests",
            label="Requests",
            href="/requests",
            icon="file-plus",
            permission="submit_requests",
            group="services",
            order=2,
        ),
        NavigationItem(
            id="sticker-requests",
            label="Sticker Requests",
            href="/sticker-requests",
            icon="badge",
            permission="submit_requests",
            group="services",
            order=3,
        ),
        NavigationItem(
            id="rules",
            label="Village Rules",
            href="/rules",
            icon="book",
            permission="view_rules",
            group="services",
            order=4,
        ),
    ),
)

SECURITY_OFFICER_NAVIGATION = RoleNavigationMap(
    role="security_officer",
    permissions=("manage_gate_logs", "manage_visitors", "view_incidents"),
    groups=(
        _OVERVIEW_GROUP,
        NavigationGroup(
            id="security",
            label="Security Operations",
            icon="shield",
            order=2,
            collapsible=True,
        ),
    ),
    items=(
        _DASHBOARD_ITEM,
        NavigationItem(
            id="gate-logs",
            label="Gate Logs",
            href="/security/gate-logs",
            icon="log-in",
            permission="manage_gate_logs",
            group="security",
            order=1,
        ),
        NavigationItem(
            id="visitors",
            label="Visitor Management",
            href="/security/visitors",
            icon="user-check",
            permission="manage_visitors",
            group="security",
            order=2,
        ),
        NavigationItem(
            id="incidents",
            label="Incidents",
            href="/security/incidents",
            icon="alert-triangle",
            permission="view_incidents",
            group="security",
            order=3,
        ),
    ),
)


NAVIGATION_CONFIG: Mapping[str, RoleNavigationMap] = MappingProxyType(
    {
        navigation.role: navigation
        for navigation in (
            SUPERADMIN_NAVIGATION,
            ADMIN_HEAD_NAVIGATION,
            ADMIN_OFFICER_NAVIGATION,
            HOUSEHOLD_HEAD_NAVIGATION,
            SECURITY_OFFICER_NAVIGATION,
        )
    }
)
