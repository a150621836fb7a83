# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""User, permission and session ORM models."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.sql import func

from database import Base

USER_ROLES = ("user", "admin")
USER_STATUSES = ("active", "pending", "suspended")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    # bcrypt hash string – the salt is embedded in it
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=True)
    role = Column(Enum(*USER_ROLES, name="user_role"), nullable=False, default="user", server_default="user")
    status = Column(
        Enum(*USER_STATUSES, name="user_status"),
        nullable=False,
        default="active",
        server_default="active",
    )
    email_verified = Column(Boolean, nullable=False, default=False, server_default="0")

    # Lockout bookkeeping – reset on every successful login
    failed_login_attempts = Column(Integer, nullable=False, default=0, server_default="0")
    locked_until = Column(DateTime, nullable=True)

    # TOTP secret: base64( ciphertext || GCM tag ) + base64( nonce ).
    # Stored while setup is pending; only honoured once two_factor_enabled.
    two_factor_enabled = Column(Boolean, nullable=False, default=False, server_default="0")
    two_factor_secret = Column(Text, nullable=True)
    two_factor_iv = Column(String(64), nullable=True)

    last_login = Column(DateTime, nullable=True)
    last_password_change = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


class Permission(Base):
    __tablename__ = "permissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(String(255), nullable=True)
    category = Column(String(50), nullable=False, server_default="general")
    created_at = Column(DateTime, server_default=func.now(), nullable=False)


class UserPermission(Base):
    __tablename__ = "user_permissions"
    __table_args__ = (UniqueConstraint("user_id", "permission_id", name="uq_user_permission"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    permission_id = Column(Integer, ForeignKey("permissions.id", ondelete="CASCADE"), nullable=False)
    granted_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    granted_at = Column(DateTime, server_default=func.now(), nullable=False)


class UserSession(Base):
    """One row per issued refresh token."""

    __tablename__ = "user_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # sha256 hex of the refresh token; the token itself is never stored
    refresh_token_hash = Column(String(64), unique=True, nullable=False)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default="1")
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)
