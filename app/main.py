from fastapi import FastAPI

from app.village_nav.api import api_router
from app.village_nav.core.config import settings
from app.village_nav.core.errors import setup_exception_handlers
from app.village_nav.core.logging import configure_logging
from app.village_nav.middleware.observability import ObservabilityMiddleware
from app.village_nav.middleware.session import SessionContextMiddleware
from app.village_nav.middleware.trace import TraceIdMiddleware
from app.village_nav.services.access import NavigationAccessService
from app.village_nav.services.analytics import NavigationAnalytics
from app.village_nav.services.audit import AuditService
from app.village_nav.services.cache import NavigationCacheManager
from app.village_nav.services.navigation_errors import NavigationErrorHandler


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title=settings.APP_NAME)

    cache_manager = NavigationCacheManager.from_settings(settings)
    analytics = NavigationAnalytics.from_settings(settings)
    error_handler = NavigationErrorHandler(on_error=analytics.track_navigation_error, debug=settings.debug)
    app.state.navigation_cache = cache_manager
    app.state.navigation_errors = error_handler
    app.state.navigation_analytics = analytics
    app.state.navigation_access = NavigationAccessService(
        cache_manager,
        error_handler,
        AuditService(),
        analytics=analytics,
        log_access=settings.NAV_LOG_ACCESS,
    )

    app.add_middleware(SessionContextMiddleware)
    app.add_middleware(TraceIdMiddleware)
    app.add_middleware(ObservabilityMiddleware)
    setup_exception_handlers(app)
    app.include_router(api_router)
    return app


app = create_app()
