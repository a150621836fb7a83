# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the intake endpoints."""

import re
from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import EmailStr, field_validator

from core.schemas import ApiModel
from intake.engine import Action, IntakeSession

_NAME_RE = re.compile(r"^[a-zA-Z\s.-]+$")
_PHONE_RE = re.compile(r"^\+?[1-9]\d{0,15}$")


# -- Wizard ----------------------------------------------------------------


class IntakeActionRequest(ApiModel):
    session: IntakeSession
    action: Action


class IntakeSubmitData(ApiModel):
    session: IntakeSession
    submission_id: int


# -- Contact form ----------------------------------------------------------


class ContactRequest(ApiModel):
    name: str
    email: EmailStr
    subject: Optional[str] = None
    message: str
    phone: Optional[str] = None
    company: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_format(cls, v: str) -> str:
        v = v.strip()
        if not 2 <= len(v) <= 100:
            raise ValueError("Name must be between 2 and 100 characters")
        if not _NAME_RE.match(v):
            raise ValueError("Name can only contain letters, spaces, dots, and hyphens")
        return v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("subject")
    @classmethod
    def subject_length(cls, v: Optional[str]) -> Optional[str]:
        v = (v or "").strip()
        if len(v) > 200:
            raise ValueError("Subject must be less than 200 characters")
        return v or None

    @field_validator("message")
    @classmethod
    def message_length(cls, v: str) -> str:
        v = v.strip()
        if not 10 <= len(v) <= 2000:
            raise ValueError("Message must be between 10 and 2000 characters")
        return v

    @field_validator("phone")
    @classmethod
    def phone_format(cls, v: Optional[str]) -> Optional[str]:
        v = (v or "").strip()
        if v and not _PHONE_RE.match(v):
            raise ValueError("Please provide a valid phone number")
        return v or None

    @field_validator("company")
    @classmethod
    def company_length(cls, v: Optional[str]) -> Optional[str]:
        v = (v or "").strip()
        if len(v) > 100:
            raise ValueError("Company name must be less than 100 characters")
        return v or None


# -- Admin -----------------------------------------------------------------


class SubmissionStatusRequest(ApiModel):
    status: Literal["new", "contacted", "responded", "closed"]
    notes: Optional[str] = None


class SubmissionRow(ApiModel):
    id: int
    submission_type: str
    name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    subject: str
    message: str
    service_type: Optional[str] = None
    project_budget: Optional[str] = None
    timeline: Optional[str] = None
    payload: Optional[dict[str, Any]] = None
    status: str
    priority: str
    notes: Optional[str] = None
    created_at: datetime


class SubmissionListData(ApiModel):
    submissions: List[SubmissionRow]
    total: int
