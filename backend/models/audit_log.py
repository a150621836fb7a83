# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Event records.

* AuditLog  – every admin-facing mutation (who changed what).
* SystemLog – authentication activity (logins, registrations, logouts).

Both tables are append-only as far as the application is concerned: no
endpoint updates or deletes their rows.
"""

from sqlalchemy import Boolean, Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func

from database import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # The admin who performed the action
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    action = Column(String(64), nullable=False, index=True)   # e.g. "suspend_user"
    resource_type = Column(String(100), nullable=True)        # e.g. "users", "invoices"
    resource_id = Column(String(100), nullable=True)
    details = Column(JSON, nullable=True)
    ip_address = Column(String(45), nullable=True)            # supports IPv6
    user_agent = Column(String(512), nullable=True)
    severity = Column(String(20), nullable=False, server_default="info")
    created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)


class SystemLog(Base):
    __tablename__ = "system_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    action = Column(String(100), nullable=False, index=True)  # e.g. "LOGIN_FAILED"
    details = Column(Text, nullable=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)
    resource = Column(String(100), nullable=True)
    resource_id = Column(String(50), nullable=True)
    success = Column(Boolean, nullable=False, default=True, server_default="1")
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
