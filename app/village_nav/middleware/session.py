from jose import JWTError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from app.village_nav.core.context import build_request_context
from app.village_nav.core.security import decode_token


class SessionContextMiddleware(BaseHTTPMiddleware):
    """Best-effort decode of the bearer token for logging.

    Authentication itself happens in the route dependencies; a bad token
    here only leaves the request state empty.
    """

    async def dispatch(self, request: Request, call_next):
        request.state.tenant_id = None
        request.state.user_id = None
        request.state.role = None
        request.state.permissions = None

        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.lower().startswith("bearer "):
            token = auth_header.split(" ", 1)[1]
            try:
                payload = decode_token(token)
            except JWTError:
                payload = {}
            request.state.tenant_id = payload.get("tenant_id")
            request.state.user_id = payload.get("sub")
            request.state.role = payload.get("role")
            request.state.permissions = payload.get("permissions")

        request.state.context = build_request_context(
            user_id=request.state.user_id,
            tenant_id=request.state.tenant_id,
            role=request.state.role,
            permissions=request.state.permissions,
            trace_id=getattr(request.state, "trace_id", ""),
        )

        return await call_next(request)
