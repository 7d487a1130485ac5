from __future__ import annotations

from collections.abc import Mapping

from app.village_nav.core.metrics import metrics
from app.village_nav.domain.models import (
    BreadcrumbItem,
    GroupedNavigation,
    NavigationGroup,
    NavigationItem,
    PermissionValidationResult,
    RoleNavigationMap,
    UserPermissionContext,
)
from app.village_nav.services.analytics import (
    NavigationAnalytics,
    NavigationPerformanceMetrics,
    measure_render_time,
)
from app.village_nav.services.audit import AuditService, create_security_audit_entry
from app.village_nav.services.breadcrumbs import (
    BreadcrumbConfig,
    generate_breadcrumb_trail,
    generate_smart_breadcrumbs,
)
from app.village_nav.services.cache import NavigationCacheManager
from app.village_nav.services.navigation import (
    get_navigation_for_role,
    group_navigation_items_with_metadata,
    search_navigation_items,
)
from app.village_nav.services.navigation_errors import (
    NavigationErrorHandler,
    create_invalid_role_error,
    create_permission_denied_error,
    create_route_not_found_error,
)
from app.village_nav.services.permissions import (
    INVALID_ROLE_REASON,
    ROUTE_NOT_FOUND_REASON,
    can_access_role_navigation,
    can_access_route,
    find_navigation_item_by_path,
    get_accessible_navigation_items,
    validate_navigation_access,
)


class NavigationAccessService:
    """Cached, audited entry point over the navigation evaluator.

    Denials come back as ``PermissionValidationResult`` values. Each denial is
    also reported to the error handler. Each decision goes to the audit sink
    and, when configured, to navigation analytics.
    """

    def __init__(
        self,
        cache_manager: NavigationCacheManager,
        error_handler: NavigationErrorHandler | None = None,
        audit: AuditService | None = None,
        navigation: Mapping[str, RoleNavigationMap] | None = None,
        *,
        analytics: NavigationAnalytics | None = None,
        log_access: bool = False,
    ):
        self.cache_manager = cache_manager
        self.error_handler = error_handler or NavigationErrorHandler()
        self.audit = audit or AuditService()
        self.navigation = navigation
        self.analytics = analytics
        self.log_access = log_access

    def get_role_navigation(self, role: str) -> RoleNavigationMap | None:
        cached = self.cache_manager.get_cached_navigation_config(role)
        if cached is not None:
            return cached
        role_map = get_navigation_for_role(role, self.navigation)
        if role_map is None:
            self.error_handler.handle_error(create_invalid_role_error(role))
            return None
        self.cache_manager.cache_navigation_config(role, role_map)
        return role_map

    def get_accessible_items(self, context: UserPermissionContext) -> list[NavigationItem]:
        cached = self.cache_manager.get_cached_filtered_items(context.role, context.permissions)
        if cached is not None:
            return list(cached)
        role_map = self.get_role_navigation(context.role)
        if role_map is None:
            return []
        items = get_accessible_navigation_items(context.role, context, {context.role: role_map})
        self.cache_manager.cache_filtered_items(context.role, context.permissions, items)
        return items

    def get_navigation_groups(self, role: str) -> list[NavigationGroup]:
        cached = self.cache_manager.get_cached_navigation_groups(role)
        if cached is not None:
            return list(cached)
        role_map = self.get_role_navigation(role)
        if role_map is None:
            return []
        self.cache_manager.cache_navigation_groups(role, role_map.groups)
        return list(role_map.groups)

    def get_grouped_navigation(self, context: UserPermissionContext) -> list[GroupedNavigation]:
        items, filter_time_ms = measure_render_time(lambda: self.get_accessible_items(context))
        grouped, group_time_ms = measure_render_time(
            lambda: group_navigation_items_with_metadata(items, self.get_navigation_groups(context.role))
        )
        if self.analytics is not None:
            role_map = get_navigation_for_role(context.role, self.navigation)
            self.analytics.track_render_performance(
                NavigationPerformanceMetrics(
                    render_time_ms=filter_time_ms + group_time_ms,
                    total_items=len(role_map.items) if role_map else 0,
                    filtered_items=len(items),
                    filter_time_ms=filter_time_ms,
                ),
                context,
            )
        return grouped

    def search(self, context: UserPermissionContext, query: str) -> list[NavigationItem]:
        return search_navigation_items(self.get_accessible_items(context), query)

    def check_item(self, item: NavigationItem, context: UserPermissionContext) -> PermissionValidationResult:
        cached = self.cache_manager.get_cached_permission_check(item.id, context)
        if cached is not None:
            # Cached decisions are still audited; the denial error is only reported once.
            self._record_decision(cached, context, item.id, "navigation_item")
            return cached

        validation = validate_navigation_access(item, context, log_access=self.log_access)
        result = validation.result
        self.cache_manager.cache_permission_check(item.id, context, result)
        self._record_decision(result, context, item.id, "navigation_item")
        if not result.allowed:
            self.error_handler.handle_error(create_permission_denied_error(item, result))
        return result

    def check_route(self, path: str, context: UserPermissionContext) -> PermissionValidationResult:
        result = can_access_route(path, context, self.navigation)
        self._record_decision(result, context, path, "route")
        if result.allowed:
            return result

        if result.reason == INVALID_ROLE_REASON:
            self.error_handler.handle_error(create_invalid_role_error(context.role))
        elif result.reason == ROUTE_NOT_FOUND_REASON:
            self.error_handler.handle_error(create_route_not_found_error(path, context.role))
        else:
            role_map = get_navigation_for_role(context.role, self.navigation)
            item = find_navigation_item_by_path(role_map.items, path) if role_map else None
            if item is not None:
                self.error_handler.handle_error(create_permission_denied_error(item, result))
        return result

    def check_role_navigation(self, context: UserPermissionContext, target_role: str) -> PermissionValidationResult:
        result = can_access_role_navigation(context.role, target_role, context.permissions)
        self._record_decision(result, context, target_role, "role_navigation")
        return result

    def breadcrumbs(
        self,
        path: str,
        role: str,
        *,
        max_items: int = 6,
        smart: bool = False,
    ) -> list[BreadcrumbItem]:
        config = BreadcrumbConfig(max_items=max_items)
        if smart:
            return generate_smart_breadcrumbs(path, role, config, self.navigation)
        return generate_breadcrumb_trail(path, role, config, self.navigation)

    def _record_decision(
        self,
        result: PermissionValidationResult,
        context: UserPermissionContext,
        resource: str,
        resource_type: str,
    ) -> None:
        metrics.record_access_decision(resource_type=resource_type, allowed=result.allowed)
        self.audit.record_entry(create_security_audit_entry(result, context, resource, resource_type))
        if self.analytics is None:
            return
        if resource_type == "route":
            self.analytics.track_route_access(resource, result, context)
        else:
            self.analytics.track_permission_check(resource, result, context, resource_type=resource_type)
