# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the admin endpoints."""

from datetime import datetime
from typing import List, Literal, Optional

from core.schemas import ApiModel


# -- Requests --------------------------------------------------------------


class ChangeRoleRequest(ApiModel):
    role: Literal["admin", "user"]


class GrantPermissionRequest(ApiModel):
    permission: str   # permission name, e.g. "project_manage"


# -- Responses -------------------------------------------------------------


class UserRow(ApiModel):
    id: int
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    role: str
    status: str
    email_verified: bool
    failed_login_attempts: int
    locked_until: Optional[datetime] = None
    two_factor_enabled: bool
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class UserListData(ApiModel):
    users: List[UserRow]
    total: int


class PermissionRow(ApiModel):
    id: int
    name: str
    description: Optional[str] = None
    category: str


# -- Audit log responses ---------------------------------------------------


class AuditLogRow(ApiModel):
    id: int
    user_email: Optional[str] = None      # resolved from user_id join
    action: str
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None
    details: Optional[dict] = None
    ip_address: Optional[str] = None
    severity: str
    created_at: datetime


class AuditLogListData(ApiModel):
    logs: List[AuditLogRow]
