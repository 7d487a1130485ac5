from dataclasses import asdict
from datetime import datetime, timezone

from fastapi import APIRouter, Body, Depends, Query, Request, Response

from app.village_nav.core.config import settings
from app.village_nav.core.deps import (
    get_access_service,
    get_analytics,
    get_cache_manager,
    get_error_handler,
    require_permission_context,
    require_wildcard,
)
from app.village_nav.core.error_catalog import AppError, ErrorCatalog
from app.village_nav.domain.feature_names import get_feature_config, get_page_title, is_coming_soon_feature
from app.village_nav.domain.models import NavigationItem, PermissionValidationResult, UserPermissionContext
from app.village_nav.schemas.errors import ApiErrorResponse, ApiValidationErrorResponse
from app.village_nav.schemas.navigation import (
    BreadcrumbItemResponse,
    BreadcrumbsResponse,
    CacheInvalidateRequest,
    CacheInvalidateResponse,
    CacheManagerStatsResponse,
    CacheStatsResponse,
    FeatureResponse,
    GroupedNavigationResponse,
    NavigationAnalyticsEventListResponse,
    NavigationAnalyticsEventResponse,
    NavigationEventAcceptedResponse,
    NavigationEventRequest,
    NavigationEventTypeName,
    NavigationErrorListResponse,
    NavigationErrorResponse,
    NavigationErrorTypeName,
    NavigationGroupResponse,
    NavigationItemMetadataResponse,
    NavigationItemResponse,
    NavigationResponse,
    NavigationSearchResponse,
    NavigationUsageStatsResponse,
    PerformanceMetricsResponse,
    RoleNavigationAccessResponse,
    RouteAccessResponse,
)
from app.village_nav.services.access import NavigationAccessService
from app.village_nav.services.analytics import ExportFormat, NavigationAnalytics, NavigationAnalyticsEvent
from app.village_nav.services.breadcrumbs import BreadcrumbConfig, create_accessible_breadcrumb, is_truncated
from app.village_nav.services.cache import NavigationCacheManager
from app.village_nav.services.navigation import find_navigation_item_by_id
from app.village_nav.services.navigation_errors import NavigationError, NavigationErrorHandler

router = APIRouter(
    responses={
        401: {"model": ApiErrorResponse},
        403: {"model": ApiErrorResponse},
        422: {"model": ApiValidationErrorResponse},
    }
)


def _trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", "")


def _item_response(item: NavigationItem) -> NavigationItemResponse:
    feature = get_feature_config(item.id)
    return NavigationItemResponse(
        id=item.id,
        label=item.label,
        href=item.href,
        order=item.order,
        icon=item.icon,
        permission=item.permission,
        group=item.group,
        children=[_item_response(child) for child in item.children],
        metadata=NavigationItemMetadataResponse(**asdict(item.metadata)) if item.metadata else None,
        page_title=get_page_title(item.id) if feature or item.id == "dashboard" else item.label,
        coming_soon=is_coming_soon_feature(item.id),
        feature=FeatureResponse(**asdict(feature)) if feature else None,
    )


def _decision_fields(result: PermissionValidationResult) -> dict:
    return {
        "allowed": result.allowed,
        "reason": result.reason,
        "required_permission": result.required_permission,
        "user_role": result.user_role,
    }


def _error_response(error: NavigationError) -> NavigationErrorResponse:
    return NavigationErrorResponse(
        type=error.type,
        code=error.code,
        message=error.message,
        details=error.details,
        recoverable=error.recoverable,
        suggestions=list(error.suggestions),
        timestamp=error.timestamp,
        user_role=error.user_role,
        required_permission=error.required_permission,
    )


@router.get("", response_model=NavigationResponse)
def get_navigation(
    request: Request,
    context: UserPermissionContext = Depends(require_permission_context),
    service: NavigationAccessService = Depends(get_access_service),
):
    grouped = service.get_grouped_navigation(context)
    return NavigationResponse(
        role=context.role,
        groups=[
            GroupedNavigationResponse(
                group=NavigationGroupResponse(**asdict(entry.group)),
                items=[_item_response(item) for item in entry.items],
            )
            for entry in grouped
        ],
        trace_id=_trace_id(request),
    )


@router.get("/route-access", response_model=RouteAccessResponse)
def get_route_access(
    request: Request,
    path: str = Query(..., min_length=1, description="Route path to evaluate."),
    context: UserPermissionContext = Depends(require_permission_context),
    service: NavigationAccessService = Depends(get_access_service),
):
    result = service.check_route(path, context)
    return RouteAccessResponse(path=path, trace_id=_trace_id(request), **_decision_fields(result))


@router.get("/roles/{target_role}/access", response_model=RoleNavigationAccessResponse)
def get_role_navigation_access(
    request: Request,
    target_role: str,
    context: UserPermissionContext = Depends(require_permission_context),
    service: NavigationAccessService = Depends(get_access_service),
):
    result = service.check_role_navigation(context, target_role)
    return RoleNavigationAccessResponse(
        target_role=target_role,
        trace_id=_trace_id(request),
        **_decision_fields(result),
    )


@router.get("/breadcrumbs", response_model=BreadcrumbsResponse)
def get_breadcrumbs(
    request: Request,
    path: str = Query(..., min_length=1),
    max_items: int | None = Query(default=None, ge=1, le=50),
    smart: bool = Query(default=False, description="Fall back to URL segments when no navigation item matches."),
    context: UserPermissionContext = Depends(require_permission_context),
    service: NavigationAccessService = Depends(get_access_service),
):
    limit = max_items or settings.NAV_BREADCRUMB_MAX_ITEMS
    trail = service.breadcrumbs(path, context.role, max_items=limit, smart=smart)
    accessible = create_accessible_breadcrumb(trail, BreadcrumbConfig(max_items=limit))
    return BreadcrumbsResponse(
        path=path,
        items=[
            BreadcrumbItemResponse(
                id=item.id,
                label=item.label,
                href=item.href,
                is_active=item.is_active,
                is_clickable=item.is_clickable,
                icon=item.icon,
            )
            for item in trail
        ],
        truncated=is_truncated(trail),
        aria_label=accessible.aria_label,
        schema_markup=accessible.schema_markup,
        trace_id=_trace_id(request),
    )


@router.get("/search", response_model=NavigationSearchResponse)
def search_navigation(
    request: Request,
    q: str = Query(..., min_length=1, max_length=100),
    context: UserPermissionContext = Depends(require_permission_context),
    service: NavigationAccessService = Depends(get_access_service),
):
    items = service.search(context, q)
    return NavigationSearchResponse(
        query=q,
        items=[_item_response(item) for item in items],
        trace_id=_trace_id(request),
    )


@router.get("/cache/stats", response_model=CacheManagerStatsResponse)
def get_cache_stats(
    request: Request,
    _context: UserPermissionContext = Depends(require_wildcard),
    cache_manager: NavigationCacheManager = Depends(get_cache_manager),
):
    stats = cache_manager.get_stats()
    return CacheManagerStatsResponse(
        enabled=cache_manager.is_enabled,
        config=CacheStatsResponse(**asdict(stats.config)),
        items=CacheStatsResponse(**asdict(stats.items)),
        permissions=CacheStatsResponse(**asdict(stats.permissions)),
        groups=CacheStatsResponse(**asdict(stats.groups)),
        total_memory_usage=stats.total_memory_usage,
        trace_id=_trace_id(request),
    )


@router.post("/cache/invalidate", response_model=CacheInvalidateResponse)
def invalidate_cache(
    request: Request,
    payload: CacheInvalidateRequest | None = Body(default=None),
    _context: UserPermissionContext = Depends(require_wildcard),
    cache_manager: NavigationCacheManager = Depends(get_cache_manager),
):
    payload = payload or CacheInvalidateRequest()
    invalidated: list[str] = []
    if payload.role:
        cache_manager.invalidate_role(payload.role)
        invalidated.append(f"role:{payload.role}")
    if payload.user_id:
        cache_manager.invalidate_user(payload.user_id)
        invalidated.append(f"user:{payload.user_id}")
    if not invalidated:
        cache_manager.clear_all()
        invalidated.append("all")
    return CacheInvalidateResponse(invalidated=invalidated, trace_id=_trace_id(request))


@router.get("/errors", response_model=NavigationErrorListResponse)
def list_navigation_errors(
    request: Request,
    error_type: NavigationErrorTypeName | None = Query(default=None, alias="type"),
    _context: UserPermissionContext = Depends(require_wildcard),
    error_handler: NavigationErrorHandler = Depends(get_error_handler),
):
    errors = error_handler.get_errors_by_type(error_type) if error_type else error_handler.get_errors()
    return NavigationErrorListResponse(
        errors=[_error_response(error) for error in errors],
        has_recoverable_errors=error_handler.has_recoverable_errors(),
        trace_id=_trace_id(request),
    )


@router.delete("/errors", response_model=NavigationErrorListResponse)
def clear_navigation_errors(
    request: Request,
    error_type: NavigationErrorTypeName | None = Query(default=None, alias="type"),
    _context: UserPermissionContext = Depends(require_wildcard),
    error_handler: NavigationErrorHandler = Depends(get_error_handler),
):
    if error_type:
        error_handler.clear_errors_by_type(error_type)
    else:
        error_handler.clear_errors()
    return NavigationErrorListResponse(
        errors=[_error_response(error) for error in error_handler.get_errors()],
        has_recoverable_errors=error_handler.has_recoverable_errors(),
        trace_id=_trace_id(request),
    )


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def _event_response(event: NavigationAnalyticsEvent) -> NavigationAnalyticsEventResponse:
    return NavigationAnalyticsEventResponse(
        type=event.type,
        timestamp=event.timestamp,
        session_id=event.session_id,
        data=event.data,
        user_id=event.user_id,
        user_role=event.user_role,
        tenant_id=event.tenant_id,
        performance=PerformanceMetricsResponse(**asdict(event.performance)) if event.performance else None,
    )


@router.post("/events", response_model=NavigationEventAcceptedResponse)
def record_navigation_event(
    request: Request,
    payload: NavigationEventRequest,
    context: UserPermissionContext = Depends(require_permission_context),
    service: NavigationAccessService = Depends(get_access_service),
    analytics: NavigationAnalytics = Depends(get_analytics),
):
    if payload.type == "item_click":
        item = find_navigation_item_by_id(service.get_accessible_items(context), payload.item_id or "")
        if item is None:
            raise AppError(ErrorCatalog.NAV_ROUTE_NOT_FOUND, details={"item_id": payload.item_id})
        event = analytics.track_item_click(
            item.id,
            item.label,
            context,
            source_location=payload.source_location,
            session_id=payload.session_id,
        )
    else:
        group_ids = {group.id for group in service.get_navigation_groups(context.role)}
        if payload.group_id not in group_ids:
            raise AppError(ErrorCatalog.NAV_ROUTE_NOT_FOUND, details={"group_id": payload.group_id})
        event = analytics.track_group_toggle(
            payload.group_id,
            payload.expanded,
            context,
            session_id=payload.session_id,
        )
    return NavigationEventAcceptedResponse(
        recorded=event is not None,
        event=_event_response(event) if event else None,
        trace_id=_trace_id(request),
    )


@router.get("/analytics/stats", response_model=NavigationUsageStatsResponse)
def get_analytics_stats(
    request: Request,
    _context: UserPermissionContext = Depends(require_wildcard),
    analytics: NavigationAnalytics = Depends(get_analytics),
):
    stats = analytics.get_usage_stats()
    return NavigationUsageStatsResponse(enabled=analytics.is_enabled, trace_id=_trace_id(request), **asdict(stats))


@router.get("/analytics/events", response_model=NavigationAnalyticsEventListResponse)
def list_analytics_events(
    request: Request,
    event_type: NavigationEventTypeName | None = Query(default=None, alias="type"),
    user_id: str | None = Query(default=None),
    start: datetime | None = Query(default=None, description="Inclusive lower bound (ISO 8601)."),
    end: datetime | None = Query(default=None, description="Inclusive upper bound (ISO 8601)."),
    _context: UserPermissionContext = Depends(require_wildcard),
    analytics: NavigationAnalytics = Depends(get_analytics),
):
    events = analytics.get_events_by_type(event_type) if event_type else analytics.get_events()
    if user_id is not None:
        events = [event for event in events if event.user_id == user_id]
    if start is not None:
        events = [event for event in events if event.timestamp >= _as_utc(start)]
    if end is not None:
        events = [event for event in events if event.timestamp <= _as_utc(end)]
    return NavigationAnalyticsEventListResponse(
        events=[_event_response(event) for event in events],
        trace_id=_trace_id(request),
    )


@router.get("/analytics/export")
def export_analytics(
    export_format: ExportFormat = Query(default="json", alias="format"),
    _context: UserPermissionContext = Depends(require_wildcard),
    analytics: NavigationAnalytics = Depends(get_analytics),
):
    media_type = "text/csv" if export_format == "csv" else "application/json"
    return Response(content=analytics.export_data(export_format), media_type=media_type)


@router.delete("/analytics", response_model=NavigationAnalyticsEventListResponse)
def clear_analytics(
    request: Request,
    _context: UserPermissionContext = Depends(require_wildcard),
    analytics: NavigationAnalytics = Depends(get_analytics),
):
    analytics.clear()
    return NavigationAnalyticsEventListResponse(events=[], trace_id=_trace_id(request))
