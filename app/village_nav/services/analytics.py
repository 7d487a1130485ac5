from __future__ import annotations

import csv
import io
import json
import logging
import threading
import time
from collections import Counter
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal, TypeVar
from uuid import uuid4

from app.village_nav.core.logging import log_json
from app.village_nav.domain.models import PermissionValidationResult, UserPermissionContext
from app.village_nav.services.navigation_errors import NavigationError

logger = logging.getLogger("village_nav.analytics")

NavigationEventType = Literal[
    "navigation_render",
    "item_click",
    "group_toggle",
    "permission_check",
    "route_access",
    "error_occurred",
    "performance_metric",
]
ExportFormat = Literal["json", "csv"]

CSV_HEADERS = ("timestamp", "type", "userId", "userRole", "tenantId", "sessionId", "data")

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_session_id(now: datetime | None = None) -> str:
    moment = now or _utcnow()
    return f"nav_session_{int(moment.timestamp() * 1000)}_{uuid4().hex[:9]}"


@dataclass(frozen=True)
class NavigationPerformanceMetrics:
    render_time_ms: float
    total_items: int
    filtered_items: int
    filter_time_ms: float = 0.0
    permission_check_time_ms: float = 0.0


@dataclass(frozen=True)
class NavigationAnalyticsEvent:
    type: NavigationEventType
    timestamp: datetime
    session_id: str
    data: dict[str, Any] = field(default_factory=dict)
    user_id: str | None = None
    user_role: str | None = None
    tenant_id: str | None = None
    performance: NavigationPerformanceMetrics | None = None

    def to_payload(self) -> dict:
        payload = asdict(self)
        payload["timestamp"] = self.timestamp.isoformat()
        return payload


@dataclass(frozen=True)
class NavigationUsageStats:
    total_events: int
    unique_users: int
    popular_items: dict[str, int]
    error_rate: float
    average_render_time_ms: float
    session_duration_seconds: float
    bounce_rate: float


class NavigationAnalytics:
    """In-memory navigation usage tracker.

    Events are kept in arrival order and trimmed to the newest ``max_events``
    on every append. Tracking is a no-op while disabled.
    """

    def __init__(
        self,
        *,
        enabled: bool = True,
        max_events: int = 1000,
        session_id: str | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self._now = now or _utcnow
        self._enabled = enabled
        self._max_events = max_events
        self._events: list[NavigationAnalyticsEvent] = []
        self._lock = threading.RLock()
        self.session_id = session_id or generate_session_id(self._now())
        self._started_at = self._now()

    @classmethod
    def from_settings(cls, settings) -> "NavigationAnalytics":
        return cls(enabled=settings.NAV_ANALYTICS_ENABLED, max_events=settings.NAV_ANALYTICS_MAX_EVENTS)

    @property
    def is_enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def track(
        self,
        event_type: NavigationEventType,
        data: dict[str, Any] | None = None,
        context: UserPermissionContext | None = None,
        *,
        performance: NavigationPerformanceMetrics | None = None,
        session_id: str | None = None,
        user_role: str | None = None,
    ) -> NavigationAnalyticsEvent | None:
        if not self._enabled:
            return None

        event = NavigationAnalyticsEvent(
            type=event_type,
            timestamp=self._now(),
            session_id=session_id or self.session_id,
            data=dict(data or {}),
            user_id=context.user_id if context else None,
            user_role=context.role if context else user_role,
            tenant_id=context.tenant_id if context else None,
            performance=performance,
        )
        with self._lock:
            self._events.append(event)
            if len(self._events) > self._max_events:
                self._events = self._events[-self._max_events :]

        log_json(logger, {"event": "navigation_analytics", **event.to_payload()}, level=logging.DEBUG)
        return event

    def track_render_performance(
        self,
        performance: NavigationPerformanceMetrics,
        context: UserPermissionContext | None = None,
    ) -> NavigationAnalyticsEvent | None:
        return self.track(
            "performance_metric",
            {"metric": "navigation_render"},
            context,
            performance=performance,
        )

    def track_item_click(
        self,
        item_id: str,
        item_label: str,
        context: UserPermissionContext | None = None,
        *,
        source_location: str | None = None,
        session_id: str | None = None,
    ) -> NavigationAnalyticsEvent | None:
        return self.track(
            "item_click",
            {"item_id": item_id, "item_label": item_label, "source_location": source_location},
            context,
            session_id=session_id,
        )

    def track_group_toggle(
        self,
        group_id: str,
        expanded: bool,
        context: UserPermissionContext | None = None,
        *,
        session_id: str | None = None,
    ) -> NavigationAnalyticsEvent | None:
        return self.track(
            "group_toggle",
            {"group_id": group_id, "expanded": expanded},
            context,
            session_id=session_id,
        )

    def track_permission_check(
        self,
        resource: str,
        result: PermissionValidationResult,
        context: UserPermissionContext | None = None,
        *,
        resource_type: str = "navigation_item",
    ) -> NavigationAnalyticsEvent | None:
        return self.track(
            "permission_check",
            {
                "resource": resource,
                "resource_type": resource_type,
                "allowed": result.allowed,
                "reason": result.reason,
                "required_permission": result.required_permission,
            },
            context,
        )

    def track_route_access(
        self,
        path: str,
        result: PermissionValidationResult,
        context: UserPermissionContext | None = None,
    ) -> NavigationAnalyticsEvent | None:
        return self.track(
            "route_access",
            {"path": path, "allowed": result.allowed, "reason": result.reason},
            context,
        )

    def track_navigation_error(self, error: NavigationError) -> NavigationAnalyticsEvent | None:
        """Error-handler callback; errors carry a role at most, never a user id."""
        return self.track(
            "error_occurred",
            {
                "error_type": error.type,
                "error_code": error.code,
                "message": error.message,
                "recoverable": error.recoverable,
                "item_id": error.item.id if error.item else None,
            },
            user_role=error.user_role,
        )

    def get_events(self) -> list[NavigationAnalyticsEvent]:
        with self._lock:
            return list(self._events)

    def get_events_by_type(self, event_type: NavigationEventType) -> list[NavigationAnalyticsEvent]:
        with self._lock:
            return [event for event in self._events if event.type == event_type]

    def get_events_by_user(self, user_id: str) -> list[NavigationAnalyticsEvent]:
        with self._lock:
            return [event for event in self._events if event.user_id == user_id]

    def get_events_by_time_range(self, start: datetime, end: datetime) -> list[NavigationAnalyticsEvent]:
        with self._lock:
            return [event for event in self._events if start <= event.timestamp <= end]

    def get_usage_stats(self) -> NavigationUsageStats:
        events = self.get_events()
        total = len(events)

        clicks = [event for event in events if event.type == "item_click"]
        popular = Counter(event.data.get("item_id") for event in clicks if event.data.get("item_id"))

        render_times = [
            event.performance.render_time_ms
            for event in events
            if event.type == "performance_metric" and event.performance is not None
        ]
        errors = sum(1 for event in events if event.type == "error_occurred")

        sessions: dict[str, int] = {}
        for event in events:
            sessions.setdefault(event.session_id, 0)
            if event.type == "item_click":
                sessions[event.session_id] += 1
        bounced = sum(1 for count in sessions.values() if count <= 1)

        return NavigationUsageStats(
            total_events=total,
            unique_users=len({event.user_id for event in events if event.user_id}),
            popular_items=dict(popular.most_common()),
            error_rate=errors / total if total else 0.0,
            average_render_time_ms=sum(render_times) / len(render_times) if render_times else 0.0,
            session_duration_seconds=(self._now() - self._started_at).total_seconds(),
            bounce_rate=bounced / len(sessions) if sessions else 0.0,
        )

    def export_data(self, format: ExportFormat = "json") -> str:
        events = self.get_events()
        if format == "csv":
            return _export_csv(events)
        if format == "json":
            return json.dumps([event.to_payload() for event in events], indent=2, default=str)
        raise ValueError(f"Unsupported export format: {format}")

    def clear(self) -> None:
        with self._lock:
            self._events = []
            self._started_at = self._now()


def _export_csv(events: list[NavigationAnalyticsEvent]) -> str:
    if not events:
        return ""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for event in events:
        data = dict(event.data)
        if event.performance is not None:
            data["performance"] = asdict(event.performance)
        writer.writerow(
            [
                event.timestamp.isoformat(),
                event.type,
                event.user_id or "",
                event.user_role or "",
                event.tenant_id or "",
                event.session_id,
                json.dumps(data, default=str),
            ]
        )
    return buffer.getvalue()


def measure_render_time(fn: Callable[[], T]) -> tuple[T, float]:
    """Run ``fn`` and return its result with the elapsed time in milliseconds."""
    started = time.perf_counter()
    result = fn()
    return result, (time.perf_counter() - started) * 1000
