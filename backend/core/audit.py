# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Audit-trail helper for admin routers.

``audit()`` only *adds* the row to the session; the caller commits it
together with the change it describes, so the two land atomically.
"""

from typing import Optional

from fastapi import Request
from sqlalchemy.orm import Session

from core.security import get_client_ip
from models.audit_log import AuditLog


def audit(
    db: Session,
    request: Optional[Request],
    actor_id: Optional[int],
    action: str,
    resource_type: str,
    resource_id=None,
    details: Optional[dict] = None,
    severity: str = "info",
) -> AuditLog:
    entry = AuditLog(
        user_id=actor_id,
        action=action,
        resource_type=resource_type,
        resource_id=str(resource_id) if resource_id is not None else None,
        details=details,
        ip_address=get_client_ip(request) if request else None,
        user_agent=(request.headers.get("User-Agent") or "")[:512] if request else None,
        severity=severity,
    )
    db.add(entry)
    return entry
