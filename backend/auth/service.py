# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Authentication service – login, registration, token refresh and two-factor.

Security notes
--------------
* Login returns the *same* error message whether the email doesn't exist or
  the password is wrong.  This prevents user-enumeration attacks.
* Gates run in a fixed order: account status, email verification, lockout,
  password, two-factor.  A locked account is rejected before its password
  is looked at, so a correct guess during the lockout window reveals nothing.
* Refresh tokens are stored as sha256 fingerprints in user_sessions; the raw
  token only ever lives in the client's cookie / response body.
* Registration rejects a duplicate email *before* hashing, so the check is
  cheap and the response time does not depend on bcrypt.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

import pyotp
from fastapi import status

from auth.repository import UserRepository
from auth.schemas import LoginRequest, RegisterRequest, password_policy_error
from core import security
from core.config import settings
from core.errors import ApiError
from core.logger import logger
from database import utcnow
from models.user import User

# Generic message used for both "no such email" and "wrong password"
LOGIN_FAIL = "Invalid email or password"

TOTP_ISSUER = "Akibeks Engineering"


@dataclass
class LoginResult:
    user: User
    access_token: str
    refresh_token: str
    refresh_expires: datetime
    # Seconds, for the refreshToken cookie max-age
    refresh_max_age: int


@dataclass
class ClientInfo:
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class AuthService:
    def __init__(self, repo: UserRepository):
        self.repo = repo

    # -- login ---------------------------------------------------------------

    def authenticate(self, body: LoginRequest, client: Optional[ClientInfo] = None) -> LoginResult:
        """Run every login gate in order and issue tokens on success."""
        client = client or ClientInfo()
        user = self.repo.find_by_email(body.email)
        if not user:
            self.repo.log_activity(None, "LOGIN_FAILED", f"Unknown email: {body.email}",
                                   client.ip_address, client.user_agent, success=False)
            raise ApiError(status.HTTP_401_UNAUTHORIZED, LOGIN_FAIL)

        self._check_account_state(user)
        self._check_lockout(user)

        if not security.verify_password(body.password, user.password_hash):
            self._register_failure(user, client)
            raise ApiError(status.HTTP_401_UNAUTHORIZED, LOGIN_FAIL)

        if user.two_factor_enabled:
            if not body.two_factor_code:
                raise ApiError(
                    status.HTTP_401_UNAUTHORIZED,
                    "Two-factor authentication code required",
                    requires2FA=True,
                )
            if not self._verify_totp(user, body.two_factor_code):
                self.repo.log_activity(user.id, "LOGIN_FAILED", "Invalid two-factor code",
                                       client.ip_address, client.user_agent, success=False)
                raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid verification code")

        self.repo.record_successful_login(user)
        result = self.issue_tokens(user, body.remember_me, client)
        self.repo.log_activity(user.id, "LOGIN_SUCCESS", "User logged in",
                               client.ip_address, client.user_agent)
        logger.info("login: user_id=%s", user.id)
        return result

    def _check_account_state(self, user: User) -> None:
        if user.status == "pending":
            raise ApiError(
                status.HTTP_401_UNAUTHORIZED,
                "Please verify your email address first",
                accountStatus="pending",
            )
        if user.status == "suspended":
            raise ApiError(
                status.HTTP_401_UNAUTHORIZED,
                "Account is suspended",
                accountStatus="suspended",
            )
        if not user.email_verified:
            raise ApiError(
                status.HTTP_401_UNAUTHORIZED,
                "Please verify your email address first",
                requiresEmailVerification=True,
            )

    def _check_lockout(self, user: User) -> None:
        if user.locked_until and user.locked_until > utcnow():
            minutes = math.ceil((user.locked_until - utcnow()).total_seconds() / 60)
            raise ApiError(
                status.HTTP_401_UNAUTHORIZED,
                f"Account is temporarily locked. Please try again in {minutes} minutes.",
                accountLocked=True,
            )

    def _register_failure(self, user: User, client: ClientInfo) -> None:
        attempts = (user.failed_login_attempts or 0) + 1
        locked_until = None
        if attempts >= settings.max_failed_logins:
            locked_until = utcnow() + timedelta(minutes=settings.lockout_minutes)
            logger.warning("login: user_id=%s locked after %d failures", user.id, attempts)
        self.repo.record_failed_login(user, attempts, locked_until)
        self.repo.log_activity(user.id, "LOGIN_FAILED", f"Wrong password (attempt {attempts})",
                               client.ip_address, client.user_agent, success=False)

    # -- tokens --------------------------------------------------------------

    def issue_tokens(self, user: User, remember_me: bool = False,
                     client: Optional[ClientInfo] = None) -> LoginResult:
        client = client or ClientInfo()
        days = settings.remember_me_expire_days if remember_me else settings.refresh_token_expire_days
        lifetime = timedelta(days=days)
        access = security.create_access_token(user)
        refresh = security.create_refresh_token(user, lifetime)
        expires = utcnow() + lifetime
        self.repo.store_session(
            user,
            security.token_fingerprint(refresh),
            expires,
            client.ip_address,
            (client.user_agent or "")[:512] or None,
        )
        return LoginResult(user, access, refresh, expires, int(lifetime.total_seconds()))

    def refresh(self, refresh_token: Optional[str]) -> str:
        """Exchange a live refresh session for a new access token."""
        if not refresh_token:
            raise ApiError(status.HTTP_401_UNAUTHORIZED, "Refresh token required")
        claims = security.decode_refresh_token(refresh_token)
        session = self.repo.find_session(security.token_fingerprint(refresh_token))
        if not session or not session.is_active or session.expires_at <= utcnow():
            raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid or expired token")
        user = self.repo.find_by_id(claims["user_id"])
        if not user or user.status != "active":
            raise ApiError(status.HTTP_401_UNAUTHORIZED, "User not found or inactive")
        return security.create_access_token(user)

    def logout(self, refresh_token: Optional[str], user_id: Optional[int] = None,
               client: Optional[ClientInfo] = None) -> None:
        client = client or ClientInfo()
        if refresh_token:
            self.repo.deactivate_session(security.token_fingerprint(refresh_token))
        self.repo.log_activity(user_id, "LOGOUT", "User logged out",
                               client.ip_address, client.user_agent)

    # -- registration --------------------------------------------------------

    def register(self, body: RegisterRequest, client: Optional[ClientInfo] = None) -> User:
        client = client or ClientInfo()
        if self.repo.find_by_email(body.email):
            raise ApiError(status.HTTP_409_CONFLICT, "An account with this email already exists")

        verified = not settings.require_email_verification
        user = self.repo.insert(User(
            email=body.email,
            password_hash=security.hash_password(body.password),
            first_name=body.first_name,
            last_name=body.last_name,
            phone=body.phone,
            role="user",
            status="active" if verified else "pending",
            email_verified=verified,
            failed_login_attempts=0,
            two_factor_enabled=False,
        ))
        self.repo.log_activity(user.id, "REGISTER", "New user registered",
                               client.ip_address, client.user_agent)
        logger.info("register: user_id=%s", user.id)
        return user

    # -- password ------------------------------------------------------------

    def change_password(self, user: User, old_password: str, new_password: str) -> None:
        """
        Verify the old password before accepting the new one, so a stolen
        (but not yet expired) token alone cannot reset the password.
        """
        if not security.verify_password(old_password, user.password_hash):
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Old password is incorrect")
        err = password_policy_error(new_password)
        if err:
            raise ApiError(
                status.HTTP_400_BAD_REQUEST,
                "Validation failed",
                errors=[{"field": "newPassword", "message": err}],
            )
        self.repo.update_password(user, security.hash_password(new_password))
        self.repo.log_activity(user.id, "PASSWORD_CHANGED", "Password changed")

    # -- two-factor ----------------------------------------------------------

    def begin_two_factor(self, user: User) -> tuple[str, str]:
        """
        Generate and store (encrypted) a fresh TOTP secret.  Two-factor stays
        off until :meth:`enable_two_factor` confirms a code from it.
        """
        if user.two_factor_enabled:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Two-factor authentication is already enabled")
        secret = pyotp.random_base32()
        user.two_factor_secret, user.two_factor_iv = security.encrypt_value(secret)
        self.repo.save(user)
        uri = pyotp.TOTP(secret).provisioning_uri(name=user.email, issuer_name=TOTP_ISSUER)
        return secret, uri

    def enable_two_factor(self, user: User, code: str) -> None:
        if user.two_factor_enabled:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Two-factor authentication is already enabled")
        if not user.two_factor_secret:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Two-factor setup has not been started")
        if not self._verify_totp(user, code):
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Invalid verification code")
        user.two_factor_enabled = True
        self.repo.save(user)
        self.repo.log_activity(user.id, "2FA_ENABLED", "Two-factor authentication enabled")

    def disable_two_factor(self, user: User, password: str) -> None:
        if not security.verify_password(password, user.password_hash):
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Password is incorrect")
        user.two_factor_enabled = False
        user.two_factor_secret = None
        user.two_factor_iv = None
        self.repo.save(user)
        self.repo.log_activity(user.id, "2FA_DISABLED", "Two-factor authentication disabled")

    def _verify_totp(self, user: User, code: str) -> bool:
        if not user.two_factor_secret or not user.two_factor_iv:
            return False
        try:
            secret = security.decrypt_value(user.two_factor_secret, user.two_factor_iv)
        except ValueError:
            logger.error("2fa: stored secret for user_id=%s failed to decrypt", user.id)
            return False
        # One step of clock drift either side
        return pyotp.TOTP(secret).verify(code.strip(), valid_window=1)
