from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

NavigationErrorTypeName = Literal[
    "permission_denied",
    "route_not_found",
    "invalid_role",
    "configuration_error",
    "authentication_required",
    "network_error",
]


class NavigationItemMetadataResponse(BaseModel):
    description: str | None = None
    badge: str | int | None = None
    external: bool = False


class FeatureResponse(BaseModel):
    name: str
    icon: str
    description: str


class NavigationItemResponse(BaseModel):
    id: str = Field(..., description="Stable item identifier.")
    label: str
    href: str = Field(..., description="Route path the item links to.")
    order: int | float
    icon: str | None = None
    permission: str | None = Field(default=None, description="Permission required to see the item, if any.")
    group: str | None = None
    children: list["NavigationItemResponse"] = Field(default_factory=list)
    metadata: NavigationItemMetadataResponse | None = None
    page_title: str = Field(..., description="Header title for the page the item opens.")
    coming_soon: bool = Field(default=False, description="True when the page is not yet available.")
    feature: FeatureResponse | None = None


class NavigationGroupResponse(BaseModel):
    id: str
    label: str
    order: int | float
    icon: str | None = None
    collapsible: bool = False
    collapsed: bool = False


class GroupedNavigationResponse(BaseModel):
    group: NavigationGroupResponse
    items: list[NavigationItemResponse]


class NavigationResponse(BaseModel):
    role: str
    groups: list[GroupedNavigationResponse] = Field(
        ..., description="Accessible top-level items, grouped and sorted by group and item order."
    )
    trace_id: str


class PermissionValidationResponse(BaseModel):
    allowed: bool
    reason: str | None = None
    required_permission: str | None = None
    user_role: str | None = None


class RouteAccessResponse(PermissionValidationResponse):
    path: str
    trace_id: str


class RoleNavigationAccessResponse(PermissionValidationResponse):
    target_role: str
    trace_id: str


class BreadcrumbItemResponse(BaseModel):
    id: str
    label: str
    href: str
    is_active: bool
    is_clickable: bool
    icon: str | None = None


class BreadcrumbsResponse(BaseModel):
    path: str
    items: list[BreadcrumbItemResponse]
    truncated: bool = Field(..., description="True when the trail was shortened with an ellipsis entry.")
    aria_label: str
    schema_markup: dict = Field(..., description="schema.org BreadcrumbList markup for the trail.")
    trace_id: str


class NavigationSearchResponse(BaseModel):
    query: str
    items: list[NavigationItemResponse]
    trace_id: str


class CacheStatsResponse(BaseModel):
    size: int
    max_size: int
    hit_rate: float
    total_hits: int
    oldest_entry: datetime | None = None
    newest_entry: datetime | None = None


class CacheManagerStatsResponse(BaseModel):
    enabled: bool
    config: CacheStatsResponse
    items: CacheStatsResponse
    permissions: CacheStatsResponse
    groups: CacheStatsResponse
    total_memory_usage: int = Field(..., description="Rough estimate in bytes (1 KiB per entry).")
    trace_id: str


class CacheInvalidateRequest(BaseModel):
    role: str | None = Field(default=None, description="Invalidate the cached navigation of this role.")
    user_id: str | None = Field(default=None, description="Invalidate cached permission checks.")


class CacheInvalidateResponse(BaseModel):
    invalidated: list[str]
    trace_id: str


class NavigationErrorResponse(BaseModel):
    type: NavigationErrorTypeName
    code: str
    message: str
    details: str | None = None
    recoverable: bool
    suggestions: list[str]
    timestamp: datetime
    user_role: str | None = None
    required_permission: str | None = None


class NavigationErrorListResponse(BaseModel):
    errors: list[NavigationErrorResponse]
    has_recoverable_errors: bool
    trace_id: str


NavigationEventTypeName = Literal[
    "navigation_render",
    "item_click",
    "group_toggle",
    "permission_check",
    "route_access",
    "error_occurred",
    "performance_metric",
]


class NavigationEventRequest(BaseModel):
    type: Literal["item_click", "group_toggle"]
    item_id: str | None = Field(default=None, description="Required for item_click.")
    group_id: str | None = Field(default=None, description="Required for group_toggle.")
    expanded: bool = False
    source_location: str | None = None
    session_id: str | None = Field(default=None, description="Client session; defaults to the server session.")


class PerformanceMetricsResponse(BaseModel):
    render_time_ms: float
    total_items: int
    filtered_items: int
    filter_time_ms: float
    permission_check_time_ms: float


class NavigationAnalyticsEventResponse(BaseModel):
    type: NavigationEventTypeName
    timestamp: datetime
    session_id: str
    data: dict
    user_id: str | None = None
    user_role: str | None = None
    tenant_id: str | None = None
    performance: PerformanceMetricsResponse | None = None


class NavigationEventAcceptedResponse(BaseModel):
    recorded: bool = Field(..., description="False when analytics is disabled.")
    event: NavigationAnalyticsEventResponse | None = None
    trace_id: str


class NavigationAnalyticsEventListResponse(BaseModel):
    events: list[NavigationAnalyticsEventResponse]
    trace_id: str


class NavigationUsageStatsResponse(BaseModel):
    enabled: bool
    total_events: int
    unique_users: int
    popular_items: dict[str, int]
    error_rate: float
    average_render_time_ms: float
    session_duration_seconds: float
    bounce_rate: float = Field(..., description="Share of sessions with at most one item click.")
    trace_id: str
