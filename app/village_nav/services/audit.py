import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Literal

from app.village_nav.core.logging import log_json
from app.village_nav.domain.models import PermissionValidationResult, UserPermissionContext

logger = logging.getLogger("village_nav.audit")

AuditAction = Literal["access_granted", "access_denied", "permission_check"]
AuditResourceType = Literal["navigation_item", "route", "role_navigation"]


@dataclass(frozen=True)
class SecurityAuditEntry:
    timestamp: datetime
    user_role: str
    action: AuditAction
    resource: str
    resource_type: AuditResourceType
    reason: str
    user_id: str | None = None
    tenant_id: str | None = None
    metadata: dict = field(default_factory=dict)

    def to_payload(self) -> dict:
        payload = asdict(self)
        payload["event"] = "security_audit"
        payload["timestamp"] = self.timestamp.isoformat()
        return payload


def create_security_audit_entry(
    result: PermissionValidationResult,
    context: UserPermissionContext,
    resource: str,
    resource_type: AuditResourceType = "navigation_item",
) -> SecurityAuditEntry:
    return SecurityAuditEntry(
        timestamp=datetime.now(timezone.utc),
        user_id=context.user_id,
        tenant_id=context.tenant_id,
        user_role=context.role,
        action="access_granted" if result.allowed else "access_denied",
        resource=resource,
        resource_type=resource_type,
        reason=result.reason or "Unknown",
        metadata={
            "required_permission": result.required_permission,
            "user_permissions": list(context.permissions),
        },
    )


class AuditService:
    """Best-effort audit logging.

    Strategy: sink failures are logged and swallowed to avoid breaking
    navigation rendering.
    """

    def __init__(self, sink: logging.Logger | None = None):
        self.sink = sink or logger

    def record_entry(self, entry: SecurityAuditEntry) -> None:
        try:
            log_json(self.sink, entry.to_payload())
        except Exception:
            logger.exception(
                "Failed to write audit entry",
                extra={
                    "action": entry.action,
                    "resource": entry.resource,
                    "user_id": entry.user_id,
                },
            )
