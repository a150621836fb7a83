# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
from datetime import timedelta

import pytest

from conftest import PASSWORD, bearer
from core import security
from core.config import settings
from dbsetup.seed import run_seed
from models.audit_log import SystemLog


def test_login_success_sets_cookies_and_returns_tokens(client, make_user):
    make_user(email="jane@example.com")
    r = client.post("/auth/login", json={"email": "Jane@Example.com", "password": PASSWORD})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["data"]["user"]["email"] == "jane@example.com"
    assert "passwordHash" not in body["data"]["user"]
    assert body["data"]["accessToken"]
    assert body["data"]["refreshToken"]

    cookies = [c.lower() for c in r.headers.get_list("set-cookie")]
    access = next(c for c in cookies if c.startswith("accesstoken="))
    refresh = next(c for c in cookies if c.startswith("refreshtoken="))
    for cookie in (access, refresh):
        assert "httponly" in cookie
        assert "samesite=strict" in cookie
    assert "max-age=900" in access
    assert f"max-age={7 * 24 * 3600}" in refresh


def test_login_validation_errors(client):
    r = client.post("/auth/login", json={"email": "not-an-email", "password": ""})
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    fields = {e["field"] for e in body["errors"]}
    assert fields == {"email", "password"}


def test_login_unknown_email(client):
    r = client.post("/auth/login", json={"email": "ghost@example.com", "password": PASSWORD})
    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "Invalid email or password"}


def test_login_lockout_after_five_failures(client, make_user, db):
    user = make_user()
    for _ in range(5):
        r = client.post("/auth/login", json={"email": user.email, "password": "Wrong-pass1"})
        assert r.status_code == 401
        assert r.json()["message"] == "Invalid email or password"

    r = client.post("/auth/login", json={"email": user.email, "password": PASSWORD})
    assert r.status_code == 401
    assert r.json()["accountLocked"] is True

    db.expire_all()
    assert db.query(SystemLog).filter(SystemLog.action == "LOGIN_FAILED").count() == 5


def test_login_unverified_email(client, make_user):
    make_user(email_verified=False)
    r = client.post("/auth/login", json={"email": "user@example.com", "password": PASSWORD})
    assert r.status_code == 401
    assert r.json()["requiresEmailVerification"] is True


def test_admin_test_requires_token(client):
    r = client.get("/admin/test")
    assert r.status_code == 401
    assert r.json()["message"] == "Access token required"


def test_admin_test_rejects_bad_and_expired_tokens(client, admin):
    r = client.get("/admin/test", headers={"Authorization": "Bearer not.a.jwt"})
    assert r.status_code == 401

    expired = security.create_access_token(admin, timedelta(seconds=-10))
    r = client.get("/admin/test", headers={"Authorization": f"Bearer {expired}"})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid or expired token"


def test_admin_test_forbids_non_admin(client, make_user):
    user = make_user()
    r = client.get("/admin/test", headers=bearer(user))
    assert r.status_code == 403
    assert r.json()["message"] == "Admin access required"


def test_admin_test_returns_claims(client, admin, admin_headers):
    r = client.get("/admin/test", headers=admin_headers)
    assert r.status_code == 200
    data = r.json()["data"]
    assert data == {"userId": admin.id, "email": admin.email, "role": "admin"}


def test_cookie_authenticates_after_login(client, admin):
    client.post("/auth/login", json={"email": admin.email, "password": PASSWORD})
    r = client.get("/admin/test")
    assert r.status_code == 200


def test_register_creates_user_without_password(client):
    r = client.post("/auth/register", json={
        "email": "new@example.com",
        "password": "Str0ng!pass",
        "firstName": "John",
        "lastName": "Otieno",
        "phone": "+254 700 000001",
    })
    assert r.status_code == 201
    data = r.json()["data"]
    assert data["email"] == "new@example.com"
    assert data["firstName"] == "John"
    assert data["status"] == "active"
    assert "password" not in data and "passwordHash" not in data


@pytest.mark.parametrize("phone, status", [
    ("+254" + "7" * 16, 201),
    ("+254" + "7" * 17, 400),
    ("0712 345 678 901 234 56", 400),
])
def test_register_phone_fits_column(client, db, phone, status):
    r = client.post("/auth/register", json={
        "email": "new@example.com",
        "password": "Str0ng!pass",
        "firstName": "John",
        "lastName": "Otieno",
        "phone": phone,
    })
    assert r.status_code == status
    if status == 400:
        assert {e["field"] for e in r.json()["errors"]} == {"phone"}
    else:
        assert r.json()["data"]["phone"] == phone


def test_register_duplicate_email(client, make_user):
    make_user(email="taken@example.com")
    r = client.post("/auth/register", json={
        "email": "taken@example.com",
        "password": "Str0ng!pass",
        "firstName": "John",
        "lastName": "Otieno",
    })
    assert r.status_code == 409
    assert r.json()["message"] == "An account with this email already exists"


def test_register_weak_password_and_short_name(client):
    r = client.post("/auth/register", json={
        "email": "new@example.com",
        "password": "password",
        "firstName": "J",
        "lastName": "Otieno",
    })
    assert r.status_code == 400
    errors = {e["field"]: e["message"] for e in r.json()["errors"]}
    assert "password" in errors
    assert errors["firstName"] == "First name must be between 2 and 50 characters"


def test_me_and_suspended_token(client, make_user, db):
    user = make_user()
    headers = bearer(user)
    r = client.get("/auth/me", headers=headers)
    assert r.status_code == 200
    assert r.json()["data"]["email"] == user.email

    user.status = "suspended"
    db.commit()
    r = client.get("/auth/me", headers=headers)
    assert r.status_code == 401


def test_refresh_then_logout(client, make_user):
    make_user()
    r = client.post("/auth/login", json={"email": "user@example.com", "password": PASSWORD})
    refresh_token = r.json()["data"]["refreshToken"]

    r = client.post("/auth/refresh", json={"refreshToken": refresh_token})
    assert r.status_code == 200
    assert security.decode_access_token(r.json()["data"]["accessToken"])["email"] == "user@example.com"

    r = client.post("/auth/logout", json={"refreshToken": refresh_token})
    assert r.status_code == 200

    r = client.post("/auth/refresh", json={"refreshToken": refresh_token})
    assert r.status_code == 401


def test_change_password(client, make_user):
    user = make_user()
    headers = bearer(user)
    r = client.put("/auth/change-password", headers=headers,
                   json={"oldPassword": "Wrong-pass1", "newPassword": "N3w!password"})
    assert r.status_code == 400

    r = client.put("/auth/change-password", headers=headers,
                   json={"oldPassword": PASSWORD, "newPassword": "N3w!password"})
    assert r.status_code == 200

    r = client.post("/auth/login", json={"email": user.email, "password": "N3w!password"})
    assert r.status_code == 200


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_seeded_admin_login(client, db, monkeypatch):
    monkeypatch.setattr(settings, "first_admin_email", "admin@akibeks.co.ke")
    monkeypatch.setattr(settings, "first_admin_password", "Admin123!")
    run_seed(db)

    r = client.post("/auth/login", json={"email": "admin@akibeks.co.ke", "password": "Admin123!"})
    assert r.status_code == 200
    assert r.json()["data"]["user"]["role"] == "admin"
    assert len(r.headers.get_list("set-cookie")) == 2

    r = client.post("/auth/login", json={"email": "admin@akibeks.co.ke", "password": "wrong"})
    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "Invalid email or password"}
