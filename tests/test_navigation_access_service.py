from app.village_nav.domain.models import UserPermissionContext
from app.village_nav.domain.navigation_config import NAVIGATION_CONFIG
from app.village_nav.services.access import NavigationAccessService
from app.village_nav.services.audit import AuditService
from app.village_nav.services.cache import NavigationCacheManager
from app.village_nav.services.navigation import find_navigation_item_by_id
from app.village_nav.services.navigation_errors import NavigationErrorHandler


class RecordingAudit(AuditService):
    def __init__(self):
        super().__init__()
        self.entries = []

    def record_entry(self, entry) -> None:
        self.entries.append(entry)


def _service(**kwargs):
    audit = RecordingAudit()
    service = NavigationAccessService(NavigationCacheManager(), NavigationErrorHandler(), audit, **kwargs)
    return service, audit


def test_grouped_navigation_for_household_head():
    service, _ = _service()
    context = UserPermissionContext(role="household_head", permissions=("manage_household", "view_rules"))
    grouped = service.get_grouped_navigation(context)
    assert [entry.group.id for entry in grouped] == ["overview", "household", "services"]
    assert [item.id for item in grouped[2].items] == ["guest-passes", "rules"]


def test_accessible_items_are_cached_per_permission_set():
    service, _ = _service()
    context = UserPermissionContext(role="security_officer", permissions=("view_incidents",))
    first = service.get_accessible_items(context)
    assert [item.id for item in first] == ["dashboard", "incidents"]
    assert len(service.cache_manager.items_cache) == 1
    assert service.get_accessible_items(context) == first
    assert service.cache_manager.items_cache.get_stats().total_hits == 1


def test_unknown_role_is_reported_once_per_lookup():
    service, _ = _service()
    assert service.get_accessible_items(UserPermissionContext(role="janitor")) == []
    assert [error.type for error in service.error_handler.get_errors()] == ["invalid_role"]


def test_check_route_classifies_denials():
    service, audit = _service()
    officer = UserPermissionContext(role="admin_officer", permissions=("manage_fees",))

    assert service.check_route("/fees", officer).allowed is True
    assert service.check_route("/deliveries", officer).allowed is False
    assert service.check_route("/nowhere", officer).allowed is False
    assert service.check_route("/dashboard", UserPermissionContext(role="janitor")).allowed is False

    types = [error.type for error in service.error_handler.get_errors()]
    assert types == ["permission_denied", "route_not_found", "invalid_role"]
    assert [entry.action for entry in audit.entries] == [
        "access_granted",
        "access_denied",
        "access_denied",
        "access_denied",
    ]
    assert {entry.resource_type for entry in audit.entries} == {"route"}


def test_check_item_uses_permission_cache():
    service, audit = _service()
    context = UserPermissionContext(role="admin_head", permissions=())
    item = find_navigation_item_by_id(NAVIGATION_CONFIG["admin_head"].items, "fees")

    first = service.check_item(item, context)
    second = service.check_item(item, context)
    assert first == second
    assert first.allowed is False
    assert [entry.action for entry in audit.entries] == ["access_denied", "access_denied"]
    assert service.cache_manager.permission_cache.get_stats().total_hits == 1
    assert len(service.error_handler.get_errors_by_type("permission_denied")) == 1


def test_check_role_navigation_is_audited():
    service, audit = _service()
    result = service.check_role_navigation(UserPermissionContext(role="admin_head"), "superadmin")
    assert result.allowed is False
    assert audit.entries[0].resource == "superadmin"
    assert audit.entries[0].resource_type == "role_navigation"


def test_search_and_breadcrumbs():
    service, _ = _service()
    context = UserPermissionContext(role="superadmin", permissions=("*",))
    assert [item.id for item in service.search(context, "villages")] == ["villages-management"]
    trail = service.breadcrumbs("/admin/users", "superadmin")
    assert [item.id for item in trail] == ["home", "users-management"]
    smart = service.breadcrumbs("/admin/unknown", "household_head", smart=True)
    assert [item.label for item in smart] == ["Home", "Admin", "Unknown"]


def test_disabled_cache_still_answers():
    service = NavigationAccessService(NavigationCacheManager(enabled=False))
    context = UserPermissionContext(role="admin_officer", permissions=("manage_deliveries",))
    assert [item.id for item in service.get_accessible_items(context)] == ["dashboard", "deliveries"]
    assert len(service.cache_manager.items_cache) == 0
