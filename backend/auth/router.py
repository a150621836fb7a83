# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Auth endpoints – login, registration, token refresh, logout, current-user
info, password change and two-factor enrolment.

The routes are thin: every rule lives in :class:`auth.service.AuthService`.
Tokens are returned in the JSON body *and* set as http-only cookies so
browsers never need to touch them from script.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from auth.repository import SqlUserRepository
from auth.schemas import (
    ChangePasswordRequest,
    LoginData,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RegisterRequest,
    TokenData,
    TwoFactorCodeRequest,
    TwoFactorDisableRequest,
    TwoFactorSetupData,
    UserSummary,
)
from auth.service import AuthService, ClientInfo
from core.config import settings
from core.schemas import ok
from core.security import get_client_ip, get_current_user
from database import get_db
from models.user import User

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(SqlUserRepository(db))


def _client(request: Request) -> ClientInfo:
    return ClientInfo(get_client_ip(request), request.headers.get("User-Agent"))


def _set_cookie(response: Response, key: str, value: str, max_age: int) -> None:
    response.set_cookie(
        key,
        value,
        max_age=max_age,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )


# ---------------------------------------------------------------------------
# POST /auth/login
# ---------------------------------------------------------------------------


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service),
):
    """Authenticate and return a signed access / refresh token pair."""
    result = service.authenticate(body, _client(request))
    _set_cookie(response, "accessToken", result.access_token, settings.access_token_expire_minutes * 60)
    _set_cookie(response, "refreshToken", result.refresh_token, result.refresh_max_age)
    return LoginResponse(
        message="Login successful",
        data=LoginData(
            user=UserSummary.model_validate(result.user),
            access_token=result.access_token,
            refresh_token=result.refresh_token,
        ),
    )


# ---------------------------------------------------------------------------
# POST /auth/register
# ---------------------------------------------------------------------------


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    request: Request,
    service: AuthService = Depends(get_auth_service),
):
    user = service.register(body, _client(request))
    message = (
        "Registration successful. Please verify your email address."
        if user.status == "pending"
        else "Registration successful"
    )
    return ok(message, UserSummary.model_validate(user))


# ---------------------------------------------------------------------------
# POST /auth/refresh, POST /auth/logout
# ---------------------------------------------------------------------------


@router.post("/refresh")
def refresh(
    request: Request,
    response: Response,
    body: Optional[RefreshRequest] = None,
    service: AuthService = Depends(get_auth_service),
):
    token = (body.refresh_token if body else None) or request.cookies.get("refreshToken")
    access = service.refresh(token)
    _set_cookie(response, "accessToken", access, settings.access_token_expire_minutes * 60)
    return ok("Token refreshed", TokenData(access_token=access))


@router.post("/logout")
def logout(
    request: Request,
    response: Response,
    body: Optional[RefreshRequest] = None,
    current_user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    token = (body.refresh_token if body else None) or request.cookies.get("refreshToken")
    service.logout(token, current_user.id, _client(request))
    response.delete_cookie("accessToken")
    response.delete_cookie("refreshToken")
    return ok("Logged out successfully")


# ---------------------------------------------------------------------------
# GET /auth/me, PUT /auth/change-password
# ---------------------------------------------------------------------------


@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    """Return the authenticated user's public profile (no secrets)."""
    return ok("Current user", UserSummary.model_validate(current_user))


@router.put("/change-password")
def change_password(
    body: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    service.change_password(current_user, body.old_password, body.new_password)
    return ok("Password changed successfully")


# ---------------------------------------------------------------------------
# Two-factor enrolment
# ---------------------------------------------------------------------------


@router.post("/2fa/setup")
def two_factor_setup(
    current_user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    secret, uri = service.begin_two_factor(current_user)
    return ok(
        "Scan the code with your authenticator app, then confirm with a code",
        TwoFactorSetupData(secret=secret, provisioning_uri=uri),
    )


@router.post("/2fa/enable")
def two_factor_enable(
    body: TwoFactorCodeRequest,
    current_user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    service.enable_two_factor(current_user, body.code)
    return ok("Two-factor authentication enabled")


@router.post("/2fa/disable")
def two_factor_disable(
    body: TwoFactorDisableRequest,
    current_user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    service.disable_two_factor(current_user, body.password)
    return ok("Two-factor authentication disabled")
