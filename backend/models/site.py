# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Contact / intake submissions, key-value settings, uploaded files."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.sql import func

from database import Base

# "contacted" and "responded" are the same stage under two names
SUBMISSION_STATUSES = ("new", "contacted", "responded", "closed")
SUBMISSION_TYPES = ("contact", "quote", "application")


class ContactSubmission(Base):
    __tablename__ = "contact_submissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    submission_type = Column(String(20), nullable=False, default="contact", server_default="contact")
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)
    company = Column(String(200), nullable=True)
    subject = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    service_type = Column(String(100), nullable=True)
    project_budget = Column(String(50), nullable=True)
    timeline = Column(String(100), nullable=True)
    # Full consolidated intake record (wizard fields, selections, attachments)
    payload = Column(JSON, nullable=True)
    status = Column(String(50), nullable=False, default="new", server_default="new")
    priority = Column(String(20), nullable=False, server_default="medium")
    assigned_to = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    notes = Column(Text, nullable=True)
    source = Column(String(100), nullable=False, server_default="website")
    ip_address = Column(String(45), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


class Setting(Base):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(100), unique=True, nullable=False)
    value = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(50), nullable=False, server_default="general")
    is_public = Column(Boolean, nullable=False, default=False, server_default="0")
    updated_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


class StoredFile(Base):
    __tablename__ = "files"

    id = Column(Integer, primary_key=True, autoincrement=True)
    filename = Column(String(255), nullable=False)
    original_name = Column(String(255), nullable=False)
    mime_type = Column(String(100), nullable=False)
    size = Column(Integer, nullable=False)  # bytes
    path = Column(String(500), nullable=False)
    url = Column(String(500), nullable=True)
    category = Column(String(100), nullable=True)       # project, profile, blog …
    entity_type = Column(String(100), nullable=True)    # project, user, blog_post …
    entity_id = Column(Integer, nullable=True)
    is_public = Column(Boolean, nullable=False, default=False, server_default="0")
    uploaded_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
