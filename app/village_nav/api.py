from fastapi import APIRouter

from app.village_nav.core.config import settings
from app.village_nav.routers.health import router as health_router
from app.village_nav.routers.metrics import router as metrics_router
from app.village_nav.routers.navigation import router as navigation_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(navigation_router, prefix="/vms/navigation", tags=["navigation"])
if settings.METRICS_ENABLED:
    api_router.include_router(metrics_router, tags=["ops"])
