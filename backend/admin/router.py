# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Admin endpoints – user lifecycle, permissions and the audit trail.

Every endpoint in this router except ``/admin/test`` is guarded by
``require_admin``.  A request that carries a valid JWT but belongs to a
``user`` role will receive 403 before any business logic runs.

Status changes are one-way (active/pending → suspended) apart from the
admin-initiated reactivation below.  Every mutation writes an audit_logs
row in the same commit.
"""

import io
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import StreamingResponse
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from sqlalchemy.orm import Session

from admin.schemas import (
    AuditLogListData,
    AuditLogRow,
    ChangeRoleRequest,
    GrantPermissionRequest,
    PermissionRow,
    UserListData,
    UserRow,
)
from core.audit import audit
from core.errors import ApiError
from core.schemas import ok
from core.security import require_admin, require_admin_token
from database import get_db, utcnow
from models.audit_log import AuditLog
from models.user import USER_STATUSES, Permission, User, UserPermission

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_user(db: Session, user_id: int) -> User:
    target = db.query(User).filter(User.id == user_id).first()
    if not target:
        raise ApiError(status.HTTP_404_NOT_FOUND, "User not found")
    return target


# ---------------------------------------------------------------------------
# GET /admin/test  – token-only admin gate
# ---------------------------------------------------------------------------


@router.get("/test")
def admin_test(claims: dict = Depends(require_admin_token)):
    """Echo the decoded token claims; proves the caller holds an admin token."""
    return ok(
        "Admin access granted",
        {"userId": claims["user_id"], "email": claims["email"], "role": claims["role"]},
    )


# ---------------------------------------------------------------------------
# GET /admin/users  – list users
# ---------------------------------------------------------------------------


@router.get("/users")
def list_users(
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = Query(None, description="Substring of email or name"),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Return user rows (no password data – handled by the schema)."""
    q = db.query(User)
    if status_filter:
        if status_filter not in USER_STATUSES:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Invalid status filter")
        q = q.filter(User.status == status_filter)
    if search:
        like = f"%{search}%"
        q = q.filter(User.email.ilike(like) | User.first_name.ilike(like) | User.last_name.ilike(like))
    users = q.order_by(User.id).all()
    return ok(
        "Users retrieved",
        UserListData(users=[UserRow.model_validate(u) for u in users], total=len(users)),
    )


# ---------------------------------------------------------------------------
# PUT /admin/users/{id}/suspend | reactivate | unlock
# ---------------------------------------------------------------------------


@router.put("/users/{user_id}/suspend")
def suspend_user(
    user_id: int,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Set ``status = suspended``.  The user can no longer log in, and any
    existing tokens will be rejected by ``get_current_user``.

    Guard: an admin cannot suspend their own account.
    """
    if user_id == admin.id:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Cannot suspend yourself")
    target = _get_user(db, user_id)
    if target.status == "suspended":
        raise ApiError(status.HTTP_400_BAD_REQUEST, "User is already suspended")

    previous = target.status
    target.status = "suspended"
    audit(db, request, admin.id, "suspend_user", "users", user_id, {"previousStatus": previous}, "warning")
    db.commit()
    return ok("User suspended")


@router.put("/users/{user_id}/reactivate")
def reactivate_user(
    user_id: int,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Admin-initiated return to ``active``; also marks the email verified."""
    target = _get_user(db, user_id)
    if target.status == "active":
        raise ApiError(status.HTTP_400_BAD_REQUEST, "User is already active")

    previous = target.status
    target.status = "active"
    target.email_verified = True
    audit(db, request, admin.id, "reactivate_user", "users", user_id, {"previousStatus": previous})
    db.commit()
    return ok("User reactivated")


@router.put("/users/{user_id}/unlock")
def unlock_user(
    user_id: int,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Clear the failed-login counter and any lockout."""
    target = _get_user(db, user_id)
    target.failed_login_attempts = 0
    target.locked_until = None
    audit(db, request, admin.id, "unlock_user", "users", user_id)
    db.commit()
    return ok("User unlocked")


# ---------------------------------------------------------------------------
# PUT /admin/users/{id}/change-role  – promote or demote a user
# ---------------------------------------------------------------------------


@router.put("/users/{user_id}/change-role")
def change_role(
    user_id: int,
    body: ChangeRoleRequest,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Change the role of an existing user.  An admin cannot change their own
    role (prevents accidental self-lockout).
    """
    if user_id == admin.id:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Cannot change your own role")
    target = _get_user(db, user_id)

    previous = target.role
    target.role = body.role
    audit(db, request, admin.id, "change_role", "users", user_id,
          {"previousRole": previous, "newRole": body.role})
    db.commit()
    return ok("Role updated")


# ---------------------------------------------------------------------------
# Permissions
# ---------------------------------------------------------------------------


@router.get("/permissions")
def list_permissions(
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    rows = db.query(Permission).order_by(Permission.category, Permission.name).all()
    return ok("Permissions retrieved", [PermissionRow.model_validate(p) for p in rows])


@router.get("/users/{user_id}/permissions")
def list_user_permissions(
    user_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    _get_user(db, user_id)
    rows = (
        db.query(Permission)
        .join(UserPermission, UserPermission.permission_id == Permission.id)
        .filter(UserPermission.user_id == user_id)
        .order_by(Permission.name)
        .all()
    )
    return ok("Permissions retrieved", [PermissionRow.model_validate(p) for p in rows])


@router.post("/users/{user_id}/permissions", status_code=status.HTTP_201_CREATED)
def grant_permission(
    user_id: int,
    body: GrantPermissionRequest,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    _get_user(db, user_id)
    perm = db.query(Permission).filter(Permission.name == body.permission).first()
    if not perm:
        raise ApiError(status.HTTP_404_NOT_FOUND, "Permission not found")

    exists = (
        db.query(UserPermission)
        .filter(UserPermission.user_id == user_id, UserPermission.permission_id == perm.id)
        .first()
    )
    if exists:
        raise ApiError(status.HTTP_409_CONFLICT, "Permission already granted")

    db.add(UserPermission(user_id=user_id, permission_id=perm.id, granted_by=admin.id))
    audit(db, request, admin.id, "grant_permission", "users", user_id, {"permission": perm.name})
    db.commit()
    return ok("Permission granted")


@router.delete("/users/{user_id}/permissions/{permission_name}")
def revoke_permission(
    user_id: int,
    permission_name: str,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    grant = (
        db.query(UserPermission)
        .join(Permission, UserPermission.permission_id == Permission.id)
        .filter(UserPermission.user_id == user_id, Permission.name == permission_name)
        .first()
    )
    if not grant:
        raise ApiError(status.HTTP_404_NOT_FOUND, "Permission not granted to this user")

    db.delete(grant)
    audit(db, request, admin.id, "revoke_permission", "users", user_id, {"permission": permission_name})
    db.commit()
    return ok("Permission revoked")


# ---------------------------------------------------------------------------
# GET /admin/audit-logs  – audit trail with optional filters
# ---------------------------------------------------------------------------


def _audit_query(db: Session, emails, action, since, until):
    q = db.query(AuditLog, User.email).outerjoin(User, AuditLog.user_id == User.id)
    if emails:
        q = q.filter(User.email.in_(emails))
    if action:
        q = q.filter(AuditLog.action == action)
    if since:
        q = q.filter(AuditLog.created_at >= since)
    if until:
        q = q.filter(AuditLog.created_at <= until)
    return q.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())


def _audit_row(entry: AuditLog, email: Optional[str]) -> AuditLogRow:
    return AuditLogRow(
        id=entry.id,
        user_email=email,
        action=entry.action,
        resource_type=entry.resource_type,
        resource_id=entry.resource_id,
        details=entry.details,
        ip_address=entry.ip_address,
        severity=entry.severity,
        created_at=entry.created_at,
    )


@router.get("/audit-logs")
def list_audit_logs(
    emails: Optional[list[str]] = Query(None, description="Filter by exact email(s) – repeated param"),
    action: Optional[str] = Query(None),
    since: Optional[datetime] = Query(None, description="ISO-8601 start of time window"),
    until: Optional[datetime] = Query(None, description="ISO-8601 end of time window"),
    limit: int = Query(200, ge=1, le=1000),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Return audit log rows newest-first.  Supports optional filters:

    * ``emails`` – one or more exact email addresses of the acting user.
    * ``action`` – exact action name, e.g. ``suspend_user``.
    * ``since`` / ``until`` – ISO-8601 bounds on ``created_at``.
    * ``limit`` – max rows returned (default 200, cap 1000).
    """
    rows = _audit_query(db, emails, action, since, until).limit(limit).all()
    return ok("Audit logs retrieved", AuditLogListData(logs=[_audit_row(e, m) for e, m in rows]))


# ---------------------------------------------------------------------------
# GET /admin/audit-logs/export  – download audit logs as Excel
# ---------------------------------------------------------------------------

_AUDIT_HEADER_FONT  = Font(name="Calibri", size=11, bold=True, color="FFFFFF")
_AUDIT_HEADER_FILL  = PatternFill(start_color="F97316", end_color="F97316", fill_type="solid")
_AUDIT_HEADER_ALIGN = Alignment(horizontal="center", vertical="center")
_AUDIT_THIN_BORDER  = Border(
    left=Side(style="thin", color="CCCCCC"),
    right=Side(style="thin", color="CCCCCC"),
    top=Side(style="thin", color="CCCCCC"),
    bottom=Side(style="thin", color="CCCCCC"),
)

AUDIT_EXPORT_HEADERS = ["ID", "Time", "User", "Action", "Resource", "Severity", "IP Address", "Details"]
_AUDIT_COL_WIDTHS = [8, 20, 28, 20, 20, 10, 16, 50]


@router.get("/audit-logs/export")
def export_audit_logs(
    emails: Optional[list[str]] = Query(None),
    action: Optional[str] = Query(None),
    since: Optional[datetime] = Query(None),
    until: Optional[datetime] = Query(None),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Export the (filtered) audit trail as an Excel file."""
    rows = _audit_query(db, emails, action, since, until).all()

    wb = Workbook()
    ws = wb.active
    ws.title = "Audit Logs"

    ws.append(AUDIT_EXPORT_HEADERS)
    for cell in ws[1]:
        cell.font = _AUDIT_HEADER_FONT
        cell.fill = _AUDIT_HEADER_FILL
        cell.alignment = _AUDIT_HEADER_ALIGN
        cell.border = _AUDIT_THIN_BORDER

    for entry, email in rows:
        resource = entry.resource_type or ""
        if entry.resource_id:
            resource = f"{resource}#{entry.resource_id}"
        ws.append([
            entry.id,
            entry.created_at.strftime("%Y-%m-%d %H:%M:%S") if entry.created_at else "",
            email or "",
            entry.action,
            resource,
            entry.severity,
            entry.ip_address or "",
            ", ".join(f"{k}={v}" for k, v in (entry.details or {}).items()),
        ])
        row_idx = ws.max_row
        for col_idx in range(1, len(AUDIT_EXPORT_HEADERS) + 1):
            ws.cell(row=row_idx, column=col_idx).border = _AUDIT_THIN_BORDER

    for col_idx, width in enumerate(_AUDIT_COL_WIDTHS, start=1):
        ws.column_dimensions[chr(64 + col_idx)].width = width

    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    wb.close()

    filename = f"audit-logs-{utcnow():%Y%m%d}.xlsx"
    return StreamingResponse(
        buf,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
