import logging

import pytest

from app.village_nav.domain.models import NavigationItem, PermissionValidationResult
from app.village_nav.services.navigation_errors import (
    NavigationErrorHandler,
    create_authentication_required_error,
    create_configuration_error,
    create_error_notification,
    create_invalid_role_error,
    create_network_error,
    create_permission_denied_error,
    create_route_not_found_error,
    format_error_message,
    get_error_suggestions,
    is_error_user_actionable,
)

FEES_ITEM = NavigationItem(id="fees", label="Fee Management", href="/fees", order=3, permission="manage_fees")


def _denied_error():
    result = PermissionValidationResult(
        allowed=False,
        reason="Insufficient permissions",
        required_permission="manage_fees",
        user_role="household_head",
    )
    return create_permission_denied_error(FEES_ITEM, result)


@pytest.mark.parametrize(
    ("error", "error_type", "code", "recoverable"),
    [
        (_denied_error(), "permission_denied", "NAV_PERMISSION_DENIED", False),
        (create_route_not_found_error("/nowhere"), "route_not_found", "NAV_ROUTE_NOT_FOUND", True),
        (create_invalid_role_error("janitor"), "invalid_role", "NAV_INVALID_ROLE", False),
        (create_configuration_error("bad"), "configuration_error", "NAV_CONFIG_ERROR", False),
        (create_authentication_required_error(), "authentication_required", "NAV_AUTH_REQUIRED", True),
        (create_network_error(), "network_error", "NAV_NETWORK_ERROR", True),
    ],
)
def test_constructors_use_catalog(error, error_type, code, recoverable):
    assert error.type == error_type
    assert error.code == code
    assert error.recoverable is recoverable
    assert len(error.suggestions) == 3


def test_constructor_messages():
    denied = _denied_error()
    assert denied.message == 'Access denied to "Fee Management"'
    assert denied.details == "Insufficient permissions"
    assert denied.required_permission == "manage_fees"
    assert denied.item is FEES_ITEM

    assert create_route_not_found_error("/x", "admin_head").message == 'Route "/x" not found'
    assert create_invalid_role_error("janitor").message == 'Invalid user role: "janitor"'
    assert create_configuration_error("bad", "oops").message == "Navigation configuration error: bad"
    assert create_configuration_error("bad", "oops").details == "oops"
    assert create_network_error().details == "Unable to load navigation configuration"
    assert create_network_error("timeout").details == "timeout"


def test_handler_collects_filters_and_clears(caplog):
    received = []
    handler = NavigationErrorHandler(on_error=received.append)
    assert handler.has_errors() is False
    assert handler.get_latest_error() is None

    with caplog.at_level(logging.ERROR, logger="village_nav.navigation"):
        handler.handle_error(_denied_error())
        handler.handle_error(create_route_not_found_error("/x"))
        handler.handle_error(create_route_not_found_error("/y"))

    assert len(received) == 3
    assert len(handler.get_errors()) == 3
    assert [error.message for error in handler.get_errors_by_type("route_not_found")] == [
        'Route "/x" not found',
        'Route "/y" not found',
    ]
    assert handler.get_latest_error().message == 'Route "/y" not found'
    assert handler.has_recoverable_errors() is True
    assert '"event": "navigation_error"' in caplog.records[0].getMessage()

    handler.clear_errors_by_type("route_not_found")
    assert [error.type for error in handler.get_errors()] == ["permission_denied"]
    assert handler.has_recoverable_errors() is False

    handler.clear_errors()
    assert handler.get_errors() == []


def test_get_errors_returns_a_copy():
    handler = NavigationErrorHandler()
    handler.handle_error(create_network_error())
    handler.get_errors().clear()
    assert handler.has_errors()


def test_presentation_helpers():
    denied = _denied_error()
    assert format_error_message(denied) == 'You don\'t have permission to access "Fee Management"'
    assert format_error_message(create_authentication_required_error()) == "Please log in to continue"
    assert get_error_suggestions(denied)[0] == "Contact your administrator to request access"
    assert is_error_user_actionable(denied) is False
    assert is_error_user_actionable(create_route_not_found_error("/x")) is True

    notification = create_error_notification(denied)
    assert notification.title == "Access Denied"
    assert notification.type == "error"
    assert notification.actions == ()

    network = create_error_notification(create_network_error())
    assert network.title == "Navigation Error"
    assert network.type == "warning"
    assert network.actions == ("retry",)
