from dataclasses import dataclass, field
from typing import Literal

from fastapi import status


NavigationErrorType = Literal[
    "permission_denied",
    "route_not_found",
    "invalid_role",
    "configuration_error",
    "authentication_required",
    "network_error",
]


@dataclass(frozen=True)
class ErrorDefinition:
    code: str
    message: str
    status_code: int
    recoverable: bool = False
    suggestions: tuple[str, ...] = field(default_factory=tuple)


class ErrorCatalog:
    INVALID_TOKEN = ErrorDefinition("INVALID_TOKEN", "Invalid token", status.HTTP_401_UNAUTHORIZED)
    VALIDATION_ERROR = ErrorDefinition(
        "VALIDATION_ERROR",
        "Validation error",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
    INTERNAL_ERROR = ErrorDefinition(
        "INTERNAL_ERROR",
        "Internal server error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    NAV_PERMISSION_DENIED = ErrorDefinition(
        "NAV_PERMISSION_DENIED",
        "Permission denied",
        status.HTTP_403_FORBIDDEN,
        recoverable=False,
        suggestions=(
            "Contact your administrator to request access",
            "Verify you are logged in with the correct role",
            "Check if your permissions have been updated",
        ),
    )
    NAV_ROUTE_NOT_FOUND = ErrorDefinition(
        "NAV_ROUTE_NOT_FOUND",
        "Route not found",
        status.HTTP_404_NOT_FOUND,
        recoverable=True,
        suggestions=(
            "Check the URL for typos",
            "Navigate using the menu instead",
            "Contact support if you believe this is an error",
        ),
    )
    NAV_INVALID_ROLE = ErrorDefinition(
        "NAV_INVALID_ROLE",
        "Invalid user role",
        status.HTTP_403_FORBIDDEN,
        recoverable=False,
        suggestions=(
            "Contact your administrator",
            "Log out and log back in",
            "Verify your account status",
        ),
    )
    NAV_CONFIG_ERROR = ErrorDefinition(
        "NAV_CONFIG_ERROR",
        "Navigation configuration error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        recoverable=False,
        suggestions=(
            "Report this issue to the development team",
            "Try refreshing the page",
            "Contact technical support",
        ),
    )
    NAV_AUTH_REQUIRED = ErrorDefinition(
        "NAV_AUTH_REQUIRED",
        "Authentication required",
        status.HTTP_401_UNAUTHORIZED,
        recoverable=True,
        suggestions=(
            "Please log in to continue",
            "Check if your session has expired",
            "Clear your browser cache and try again",
        ),
    )
    NAV_NETWORK_ERROR = ErrorDefinition(
        "NAV_NETWORK_ERROR",
        "Network error loading navigation",
        status.HTTP_503_SERVICE_UNAVAILABLE,
        recoverable=True,
        suggestions=(
            "Check your internet connection",
            "Try refreshing the page",
            "Contact support if the problem persists",
        ),
    )


NAVIGATION_ERROR_DEFINITIONS: dict[str, ErrorDefinition] = {
    "permission_denied": ErrorCatalog.NAV_PERMISSION_DENIED,
    "route_not_found": ErrorCatalog.NAV_ROUTE_NOT_FOUND,
    "invalid_role": ErrorCatalog.NAV_INVALID_ROLE,
    "configuration_error": ErrorCatalog.NAV_CONFIG_ERROR,
    "authentication_required": ErrorCatalog.NAV_AUTH_REQUIRED,
    "network_error": ErrorCatalog.NAV_NETWORK_ERROR,
}


class AppError(Exception):
    def __init__(self, error: ErrorDefinition, details: object | None = None):
        self.error = error
        self.details = details
        super().__init__(error.message)
