from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from app.village_nav.core.error_catalog import NAVIGATION_ERROR_DEFINITIONS, NavigationErrorType
from app.village_nav.core.logging import log_json
from app.village_nav.core.metrics import metrics
from app.village_nav.domain.models import NavigationItem, PermissionValidationResult

logger = logging.getLogger("village_nav.navigation")


@dataclass(frozen=True)
class NavigationError:
    type: NavigationErrorType
    message: str
    code: str
    recoverable: bool
    timestamp: datetime
    suggestions: tuple[str, ...] = field(default_factory=tuple)
    details: str | None = None
    item: NavigationItem | None = None
    user_role: str | None = None
    required_permission: str | None = None

    def to_log_payload(self) -> dict:
        return {
            "event": "navigation_error",
            "type": self.type,
            "message": self.message,
            "details": self.details,
            "code": self.code,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class ErrorNotification:
    title: str
    message: str
    type: str
    actions: tuple[str, ...] = ()


def _build_error(
    error_type: NavigationErrorType,
    message: str,
    *,
    details: str | None = None,
    item: NavigationItem | None = None,
    user_role: str | None = None,
    required_permission: str | None = None,
) -> NavigationError:
    definition = NAVIGATION_ERROR_DEFINITIONS[error_type]
    return NavigationError(
        type=error_type,
        message=message,
        code=definition.code,
        recoverable=definition.recoverable,
        timestamp=datetime.now(timezone.utc),
        suggestions=definition.suggestions,
        details=details,
        item=item,
        user_role=user_role,
        required_permission=required_permission,
    )


def create_permission_denied_error(item: NavigationItem, result: PermissionValidationResult) -> NavigationError:
    return _build_error(
        "permission_denied",
        f'Access denied to "{item.label}"',
        details=result.reason,
        item=item,
        user_role=result.user_role,
        required_permission=result.required_permission,
    )


def create_route_not_found_error(path: str, user_role: str | None = None) -> NavigationError:
    return _build_error(
        "route_not_found",
        f'Route "{path}" not found',
        details="The requested route is not available in the navigation configuration",
        user_role=user_role,
    )


def create_invalid_role_error(role: str) -> NavigationError:
    return _build_error(
        "invalid_role",
        f'Invalid user role: "{role}"',
        details="The user role is not recognized by the navigation system",
    )


def create_configuration_error(message: str, details: str | None = None) -> NavigationError:
    return _build_error("configuration_error", f"Navigation configuration error: {message}", details=details)


def create_authentication_required_error() -> NavigationError:
    return _build_error(
        "authentication_required",
        "Authentication required",
        details="You must be logged in to access navigation",
    )


def create_network_error(details: str | None = None) -> NavigationError:
    return _build_error(
        "network_error",
        "Network error loading navigation",
        details=details or "Unable to load navigation configuration",
    )


class NavigationErrorHandler:
    """In-memory collector for navigation errors.

    The list grows until ``clear_errors`` or ``clear_errors_by_type`` is
    called; nothing is evicted automatically.
    """

    def __init__(
        self,
        on_error: Callable[[NavigationError], None] | None = None,
        *,
        debug: bool = False,
    ) -> None:
        self._errors: list[NavigationError] = []
        self._on_error = on_error
        self._debug = debug
        self._lock = threading.RLock()

    def handle_error(self, error: NavigationError) -> None:
        with self._lock:
            self._errors.append(error)

        log_json(logger, error.to_log_payload(), level=logging.ERROR)
        metrics.increment_navigation_error(error.type)

        if self._on_error is not None:
            self._on_error(error)

        if self._debug:
            logger.warning("Navigation error details: %r", error)

    def get_errors(self) -> list[NavigationError]:
        with self._lock:
            return list(self._errors)

    def get_errors_by_type(self, error_type: NavigationErrorType) -> list[NavigationError]:
        with self._lock:
            return [error for error in self._errors if error.type == error_type]

    def clear_errors(self) -> None:
        with self._lock:
            self._errors = []

    def clear_errors_by_type(self, error_type: NavigationErrorType) -> None:
        with self._lock:
            self._errors = [error for error in self._errors if error.type != error_type]

    def has_errors(self) -> bool:
        return bool(self._errors)

    def has_recoverable_errors(self) -> bool:
        with self._lock:
            return any(error.recoverable for error in self._errors)

    def get_latest_error(self) -> NavigationError | None:
        with self._lock:
            return self._errors[-1] if self._errors else None


_USER_MESSAGES: dict[str, str] = {
    "route_not_found": "The requested page could not be found",
    "invalid_role": "Your account role is not recognized. Please contact support.",
    "authentication_required": "Please log in to continue",
    "configuration_error": "A system configuration error occurred. Please try again later.",
    "network_error": "Unable to load navigation. Please check your connection.",
}


def format_error_message(error: NavigationError) -> str:
    if error.type == "permission_denied":
        label = error.item.label if error.item else "this item"
        return f'You don\'t have permission to access "{label}"'
    return _USER_MESSAGES.get(error.type, "An unexpected error occurred")


def get_error_suggestions(error: NavigationError) -> list[str]:
    return list(error.suggestions)


def is_error_user_actionable(error: NavigationError) -> bool:
    return error.recoverable and bool(error.suggestions)


def create_error_notification(error: NavigationError) -> ErrorNotification:
    return ErrorNotification(
        title="Access Denied" if error.type == "permission_denied" else "Navigation Error",
        message=format_error_message(error),
        type="warning" if error.recoverable else "error",
        actions=("retry",) if error.recoverable else (),
    )
