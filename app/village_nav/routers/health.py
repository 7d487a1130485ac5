from fastapi import APIRouter, Request

from app.village_nav.domain.navigation_config import NAVIGATION_VERSION

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    trace_id = getattr(request.state, "trace_id", "")
    return {"status": "ok", "navigation_version": NAVIGATION_VERSION, "trace_id": trace_id}
