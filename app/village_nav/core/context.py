from dataclasses import dataclass


@dataclass(frozen=True)
class RequestContext:
    user_id: str | None
    tenant_id: str | None
    role: str | None
    permissions: tuple[str, ...]
    trace_id: str


def build_request_context(
    *,
    user_id: str | None,
    tenant_id: str | None,
    role: str | None,
    permissions: tuple[str, ...] | None = None,
    trace_id: str,
) -> RequestContext:
    return RequestContext(
        user_id=user_id,
        tenant_id=tenant_id,
        role=role,
        permissions=tuple(permissions or ()),
        trace_id=trace_id,
    )
