from fastapi import Depends, Request
from jose import JWTError
from pydantic import ValidationError

from app.village_nav.core.context import RequestContext, build_request_context
from app.village_nav.core.error_catalog import AppError, ErrorCatalog
from app.village_nav.core.security import TokenData, decode_token, oauth2_scheme
from app.village_nav.domain.models import UserPermissionContext
from app.village_nav.services.access import NavigationAccessService
from app.village_nav.services.analytics import NavigationAnalytics
from app.village_nav.services.cache import NavigationCacheManager
from app.village_nav.services.navigation import is_valid_user_role
from app.village_nav.services.navigation_errors import (
    NavigationErrorHandler,
    create_authentication_required_error,
    create_invalid_role_error,
)
from app.village_nav.services.permissions import create_permission_context


def get_cache_manager(request: Request) -> NavigationCacheManager:
    return request.app.state.navigation_cache


def get_error_handler(request: Request) -> NavigationErrorHandler:
    return request.app.state.navigation_errors


def get_access_service(request: Request) -> NavigationAccessService:
    return request.app.state.navigation_access


def get_analytics(request: Request) -> NavigationAnalytics:
    return request.app.state.navigation_analytics


def get_current_token_data(
    token: str | None = Depends(oauth2_scheme),
    error_handler: NavigationErrorHandler = Depends(get_error_handler),
) -> TokenData:
    if not token:
        error_handler.handle_error(create_authentication_required_error())
        raise AppError(ErrorCatalog.INVALID_TOKEN, details={"reason": "missing bearer token"})
    try:
        payload = decode_token(token)
        return TokenData(**payload)
    except (JWTError, ValidationError, TypeError) as exc:
        raise AppError(ErrorCatalog.INVALID_TOKEN) from exc


def require_request_context(
    request: Request,
    token_data: TokenData = Depends(get_current_token_data),
) -> RequestContext:
    context = build_request_context(
        user_id=token_data.sub,
        tenant_id=token_data.tenant_id,
        role=token_data.role,
        permissions=tuple(token_data.permissions) if token_data.permissions is not None else None,
        trace_id=getattr(request.state, "trace_id", ""),
    )
    request.state.context = context
    return context


def require_permission_context(
    request: Request,
    token_data: TokenData = Depends(get_current_token_data),
    context: RequestContext = Depends(require_request_context),
    error_handler: NavigationErrorHandler = Depends(get_error_handler),
) -> UserPermissionContext:
    if not is_valid_user_role(token_data.role):
        error_handler.handle_error(create_invalid_role_error(token_data.role))
        raise AppError(ErrorCatalog.NAV_INVALID_ROLE, details={"role": token_data.role})
    permission_context = create_permission_context(
        token_data.role,
        token_data.permissions,
        user_id=context.user_id,
        tenant_id=context.tenant_id,
    )
    request.state.permission_context = permission_context
    return permission_context


def require_wildcard(
    permission_context: UserPermissionContext = Depends(require_permission_context),
) -> UserPermissionContext:
    if not permission_context.has_wildcard():
        raise AppError(ErrorCatalog.NAV_PERMISSION_DENIED, details={"role": permission_context.role})
    return permission_context


__all__ = [
    "get_access_service",
    "get_analytics",
    "get_cache_manager",
    "get_current_token_data",
    "get_error_handler",
    "require_permission_context",
    "require_request_context",
    "require_wildcard",
]
