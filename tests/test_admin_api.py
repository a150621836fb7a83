# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
import io

from openpyxl import load_workbook

from admin.router import AUDIT_EXPORT_HEADERS
from conftest import bearer
from database import utcnow
from models.audit_log import AuditLog
from models.user import Permission, UserPermission


def test_list_users_admin_only(client, admin, admin_headers, make_user):
    user = make_user()
    r = client.get("/admin/users", headers=admin_headers)
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["total"] == 2
    assert {u["email"] for u in data["users"]} == {admin.email, user.email}
    assert all("passwordHash" not in u for u in data["users"])

    r = client.get("/admin/users", headers=bearer(user))
    assert r.status_code == 403


def test_suspend_and_reactivate(client, admin, admin_headers, make_user, db):
    user = make_user()
    r = client.put(f"/admin/users/{user.id}/suspend", headers=admin_headers)
    assert r.status_code == 200
    db.refresh(user)
    assert user.status == "suspended"

    entry = db.query(AuditLog).filter(AuditLog.action == "suspend_user").one()
    assert entry.user_id == admin.id
    assert entry.resource_id == str(user.id)
    assert entry.details == {"previousStatus": "active"}

    # Suspended users can neither use old tokens nor be suspended twice
    assert client.get("/auth/me", headers=bearer(user)).status_code == 401
    assert client.put(f"/admin/users/{user.id}/suspend", headers=admin_headers).status_code == 400

    r = client.put(f"/admin/users/{user.id}/reactivate", headers=admin_headers)
    assert r.status_code == 200
    db.refresh(user)
    assert user.status == "active"


def test_cannot_suspend_self(client, admin, admin_headers):
    r = client.put(f"/admin/users/{admin.id}/suspend", headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Cannot suspend yourself"


def test_unknown_user_is_404(client, admin_headers):
    r = client.put("/admin/users/9999/unlock", headers=admin_headers)
    assert r.status_code == 404


def test_unlock(client, admin_headers, make_user, db):
    user = make_user(failed_login_attempts=5, locked_until=utcnow())
    r = client.put(f"/admin/users/{user.id}/unlock", headers=admin_headers)
    assert r.status_code == 200
    db.refresh(user)
    assert user.failed_login_attempts == 0
    assert user.locked_until is None


def test_change_role(client, admin, admin_headers, make_user, db):
    user = make_user()
    r = client.put(f"/admin/users/{user.id}/change-role", headers=admin_headers, json={"role": "superuser"})
    assert r.status_code == 400

    r = client.put(f"/admin/users/{user.id}/change-role", headers=admin_headers, json={"role": "admin"})
    assert r.status_code == 200
    db.refresh(user)
    assert user.role == "admin"

    r = client.put(f"/admin/users/{admin.id}/change-role", headers=admin_headers, json={"role": "user"})
    assert r.status_code == 400


def test_grant_and_revoke_permission(client, admin_headers, make_user, db):
    user = make_user()
    db.add(Permission(name="project_view", description="View projects", category="project"))
    db.commit()

    url = f"/admin/users/{user.id}/permissions"
    r = client.post(url, headers=admin_headers, json={"permission": "project_view"})
    assert r.status_code == 201
    r = client.post(url, headers=admin_headers, json={"permission": "project_view"})
    assert r.status_code == 409

    r = client.get(url, headers=admin_headers)
    assert [p["name"] for p in r.json()["data"]] == ["project_view"]

    r = client.delete(f"{url}/project_view", headers=admin_headers)
    assert r.status_code == 200
    db.expire_all()
    assert db.query(UserPermission).count() == 0

    r = client.delete(f"{url}/project_view", headers=admin_headers)
    assert r.status_code == 404


def test_audit_log_list_and_filters(client, admin, admin_headers, make_user):
    user = make_user()
    client.put(f"/admin/users/{user.id}/suspend", headers=admin_headers)
    client.put(f"/admin/users/{user.id}/unlock", headers=admin_headers)

    r = client.get("/admin/audit-logs", headers=admin_headers)
    logs = r.json()["data"]["logs"]
    assert [e["action"] for e in logs] == ["unlock_user", "suspend_user"]
    assert logs[0]["userEmail"] == admin.email

    r = client.get("/admin/audit-logs", headers=admin_headers, params={"action": "suspend_user"})
    assert [e["action"] for e in r.json()["data"]["logs"]] == ["suspend_user"]

    r = client.get("/admin/audit-logs", headers=admin_headers, params={"emails": "nobody@example.com"})
    assert r.json()["data"]["logs"] == []


def test_audit_log_export(client, admin_headers, make_user):
    user = make_user()
    client.put(f"/admin/users/{user.id}/suspend", headers=admin_headers)

    r = client.get("/admin/audit-logs/export", headers=admin_headers)
    assert r.status_code == 200
    assert r.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    ws = load_workbook(io.BytesIO(r.content)).active
    rows = list(ws.iter_rows(values_only=True))
    assert list(rows[0]) == AUDIT_EXPORT_HEADERS
    assert rows[1][3] == "suspend_user"
    assert rows[1][4] == f"users#{user.id}"
