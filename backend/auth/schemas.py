# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the auth endpoints."""

import re
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, field_validator

from core.schemas import ApiModel
from core.security import MAX_PASSWORD_BYTES

# At most 20 characters, the width of the phone columns
_PHONE_RE = re.compile(r"^\+?[0-9][0-9\s\-()]{6,18}$")


def password_policy_error(pw: str) -> Optional[str]:
    """
    Return an error string if the password does not meet the policy,
    or None if it is acceptable.

    Policy: >= 8 chars, at least one uppercase, one lowercase, one digit and
    one symbol; at most 72 bytes (the bcrypt input limit).
    """
    if len(pw) < 8:
        return "Password must be at least 8 characters long"
    if len(pw.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return f"Password must be at most {MAX_PASSWORD_BYTES} bytes long"
    if not (
        re.search(r"[a-z]", pw)
        and re.search(r"[A-Z]", pw)
        and re.search(r"[0-9]", pw)
        and re.search(r"[^A-Za-z0-9]", pw)
    ):
        return "Password must contain uppercase, lowercase, number and special character"
    return None


def _normalize_email(value: str) -> str:
    return value.strip().lower()


# -- Requests --------------------------------------------------------------


class LoginRequest(ApiModel):
    email: EmailStr
    password: str
    two_factor_code: Optional[str] = None
    remember_me: bool = False

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return _normalize_email(v)

    @field_validator("password")
    @classmethod
    def password_present(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        return v


class RegisterRequest(ApiModel):
    email: EmailStr
    password: str
    first_name: str
    last_name: str
    phone: Optional[str] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return _normalize_email(v)

    @field_validator("password")
    @classmethod
    def password_policy(cls, v: str) -> str:
        err = password_policy_error(v)
        if err:
            raise ValueError(err)
        return v

    @field_validator("first_name", "last_name")
    @classmethod
    def name_length(cls, v: str, info) -> str:
        v = v.strip()
        if not 2 <= len(v) <= 50:
            label = "First name" if info.field_name == "first_name" else "Last name"
            raise ValueError(f"{label} must be between 2 and 50 characters")
        return v

    @field_validator("phone")
    @classmethod
    def phone_format(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        v = v.strip()
        if not _PHONE_RE.match(v):
            raise ValueError("Please provide a valid phone number")
        return v


class RefreshRequest(ApiModel):
    # Browsers send the cookie instead; the body is for non-browser clients
    refresh_token: Optional[str] = None


class ChangePasswordRequest(ApiModel):
    old_password: str
    new_password: str


class TwoFactorCodeRequest(ApiModel):
    code: str


class TwoFactorDisableRequest(ApiModel):
    password: str


# -- Responses -------------------------------------------------------------


class UserSummary(ApiModel):
    id: int
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    role: str
    status: str
    email_verified: bool
    two_factor_enabled: bool = False
    last_login: Optional[datetime] = None


class LoginData(ApiModel):
    user: UserSummary
    access_token: str
    refresh_token: str


class LoginResponse(ApiModel):
    success: bool = True
    message: str
    data: LoginData


class TokenData(ApiModel):
    access_token: str


class TwoFactorSetupData(ApiModel):
    secret: str
    provisioning_uri: str
