# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Central security module.  All cryptographic primitives and auth guards live
here.  No other module should touch raw crypto directly.

Responsibilities
----------------
1. Password hashing / verification          (bcrypt, cost from settings)
2. Two-factor secret encryption at rest     (AES-256-GCM)
3. JWT creation / decoding                  (PyJWT / HS256, one secret per token type)
4. FastAPI dependency guards                (get_token_claims, get_current_user,
                                             require_admin_token, require_admin)
"""

import base64
import hashlib
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt as _jwt        # PyJWT
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from fastapi import Depends, Request, status
from fastapi.security import OAuth2PasswordBearer

from core.config import settings
from core.errors import ApiError
from database import get_db

# ---------------------------------------------------------------------------
# 1.  bcrypt – password hashing
# ---------------------------------------------------------------------------
# bcrypt only looks at the first 72 bytes of its input and current releases
# refuse longer input outright.  Registration rejects such passwords, and
# verification treats them as a mismatch.
# ---------------------------------------------------------------------------

MAX_PASSWORD_BYTES = 72


def hash_password(plain: str) -> str:
    """
    Hash a plaintext password with bcrypt at ``settings.bcrypt_rounds``.

    Returns the full "$2b$<cost>$<salt><hash>" string; the salt is embedded.
    """
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, stored_hash: str) -> bool:
    """
    Constant-time verification of a plaintext password against a bcrypt
    hash produced by :func:`hash_password`.
    """
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), stored_hash.encode("utf-8"))
    except ValueError:
        # Over-long input or a malformed stored hash
        return False


# ---------------------------------------------------------------------------
# 2.  AES-256-GCM – two-factor secrets
# ---------------------------------------------------------------------------


def _get_master_key() -> bytes:
    """
    Decode the base64-encoded MASTER_ENCRYPTION_KEY from the environment.
    Called at use-time (not import-time) so deployments without two-factor
    users never need the key.  Must be exactly 32 bytes after decoding.
    """
    key = base64.b64decode(settings.master_encryption_key or "")
    if len(key) != 32:
        raise RuntimeError("MASTER_ENCRYPTION_KEY must decode to exactly 32 bytes")
    return key


def encrypt_value(plaintext: str) -> tuple[str, str]:
    """
    Encrypt *plaintext* with AES-256-GCM under a fresh 12-byte nonce.

    Returns
    -------
    encrypted_b64 : str   base64( ciphertext || 16-byte GCM tag )
    iv_b64        : str   base64( 12-byte nonce )
    """
    key = _get_master_key()
    iv = secrets.token_bytes(12)          # 96-bit nonce per NIST SP 800-38D
    ct_and_tag = AESGCM(key).encrypt(iv, plaintext.encode("utf-8"), None)
    return (
        base64.b64encode(ct_and_tag).decode("ascii"),
        base64.b64encode(iv).decode("ascii"),
    )


def decrypt_value(encrypted_b64: str, iv_b64: str) -> str:
    """
    Decrypt a value produced by :func:`encrypt_value`.

    Raises ``ValueError`` if the GCM authentication tag does not match
    (i.e. the data has been tampered with or the key is wrong).
    """
    key = _get_master_key()
    iv = base64.b64decode(iv_b64)
    ct_and_tag = base64.b64decode(encrypted_b64)
    try:
        plaintext_bytes = AESGCM(key).decrypt(iv, ct_and_tag, None)
    except Exception as exc:
        raise ValueError("Decryption failed – data may be tampered") from exc
    return plaintext_bytes.decode("utf-8")


# ---------------------------------------------------------------------------
# 3.  JWT – access and refresh tokens
# ---------------------------------------------------------------------------
# Access and refresh tokens are signed with different secrets, so a refresh
# token can never be replayed as an access token (and vice versa).


def _user_claims(user) -> dict:
    return {"sub": user.email, "user_id": user.id, "email": user.email, "role": user.role}


def create_access_token(user, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a short-lived access token carrying {user_id, email, role}."""
    now = datetime.now(timezone.utc)
    to_encode = _user_claims(user)
    to_encode.update(
        type="access",
        iat=now,
        exp=now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes)),
    )
    return _jwt.encode(to_encode, settings.secret_key, algorithm="HS256")


def create_refresh_token(user, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a refresh token.  ``jti`` makes every token unique, so two logins
    in the same second still produce distinct session rows.
    """
    now = datetime.now(timezone.utc)
    to_encode = _user_claims(user)
    to_encode.update(
        type="refresh",
        jti=uuid.uuid4().hex,
        iat=now,
        exp=now + (expires_delta or timedelta(days=settings.refresh_token_expire_days)),
    )
    return _jwt.encode(to_encode, settings.refresh_secret_key, algorithm="HS256")


def _decode(token: str, secret: str, token_type: str) -> dict:
    try:
        payload = _jwt.decode(token, secret, algorithms=["HS256"])
    except (_jwt.ExpiredSignatureError, _jwt.InvalidTokenError):
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid or expired token")
    if payload.get("type") != token_type:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid or expired token")
    return payload


def decode_access_token(token: str) -> dict:
    """
    Decode and verify an access token.  Raises HTTP 401 on any failure
    (expired, bad signature, malformed, wrong token type).
    """
    return _decode(token, settings.secret_key, "access")


def decode_refresh_token(token: str) -> dict:
    """Same as :func:`decode_access_token` for refresh tokens."""
    return _decode(token, settings.refresh_secret_key, "refresh")


def token_fingerprint(token: str) -> str:
    """sha256 hex of a token – what user_sessions stores instead of the token."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


# ---------------------------------------------------------------------------
# 4.  FastAPI dependency guards
# ---------------------------------------------------------------------------

# The tokenUrl here is only used by the auto-generated OpenAPI docs;
# the actual login endpoint is POST /auth/login (JSON body).
# auto_error=False so browsers can authenticate with the accessToken cookie.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def get_token_claims(request: Request, token: Optional[str] = Depends(oauth2_scheme)) -> dict:
    """
    Dependency: the verified claims of the caller's access token, taken from
    ``Authorization: Bearer`` or, failing that, the ``accessToken`` cookie.

    Raises 401 if no token is present or it does not verify.
    """
    token = token or request.cookies.get("accessToken")
    if not token:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Access token required")
    return decode_access_token(token)


def require_admin_token(claims: dict = Depends(get_token_claims)) -> dict:
    """
    Dependency: claims-only admin gate.  A valid token whose role claim is
    not ``admin`` gets 403; no database round trip.
    """
    if claims.get("role") != "admin":
        raise ApiError(status.HTTP_403_FORBIDDEN, "Admin access required")
    return claims


def get_current_user(
    claims: dict = Depends(get_token_claims),
    db=Depends(get_db),
):
    """
    Dependency: load the User row named by the token and verify the account
    is still active.  Returns the User ORM instance.

    Raises 401 if the user is gone or no longer active.
    """
    # Lazy import to avoid circular dependency at module load time
    from models.user import User  # noqa: E402

    user = db.query(User).filter(User.id == claims["user_id"]).first()
    if not user or user.status != "active":
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "User not found or inactive")
    return user


def require_admin(current_user=Depends(get_current_user)):
    """
    Dependency: wraps :func:`get_current_user` and additionally asserts the
    *stored* role is ``admin``.  Raises 403 otherwise.
    """
    if current_user.role != "admin":
        raise ApiError(status.HTTP_403_FORBIDDEN, "Admin access required")
    return current_user


# -- IP Address extraction ----------------------------------------------------


def get_client_ip(request: Request) -> str:
    """
    Extract the client IP address from the request.
    Checks X-Forwarded-For header first (for proxies), then falls back to client host.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # X-Forwarded-For can contain multiple IPs, take the first (original client)
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"
