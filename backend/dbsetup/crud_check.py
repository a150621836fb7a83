# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
CRUD verification harness.

For every table: insert a row, read it back by id, update it by id, delete
it by id.  Each step is a labelled pass/fail check in a running tally.
READ compares every written column with what comes back; UPDATE checks
the new value landed and that no other column moved, apart from
``onupdate`` timestamps.

Each table runs in its own connection and transaction that is always
rolled back, so the harness leaves no rows behind even against a live
database.  A failing table is tallied and the run moves on to the next.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable

from sqlalchemy import delete, insert, select, update

from core.logger import logger
from database import Base, utcnow

# Import every ORM model so that Base.metadata knows about all tables.
import models.audit_log  # noqa: F401
import models.billing    # noqa: F401
import models.content    # noqa: F401
import models.site       # noqa: F401
import models.user       # noqa: F401


@dataclass
class Check:
    label: str
    ok: bool
    detail: str = ""


@dataclass
class CrudTally:
    checks: list = field(default_factory=list)

    def check(self, label: str, ok: bool, detail: str = "") -> bool:
        self.checks.append(Check(label, bool(ok), detail))
        if ok:
            logger.info("crud: PASS %s", label)
        else:
            logger.error("crud: FAIL %s %s", label, detail)
        return bool(ok)

    @property
    def passed(self) -> int:
        return sum(1 for c in self.checks if c.ok)

    @property
    def failed(self) -> int:
        return sum(1 for c in self.checks if not c.ok)

    @property
    def success_rate(self) -> float:
        return 100.0 * self.passed / len(self.checks) if self.checks else 0.0


@dataclass(frozen=True)
class TableCase:
    table: str
    # (conn, tag) -> column values for the insert; may insert parent rows first
    values: Callable
    # Column rewritten by update
    field: str
    # Value for the update, or a callable taking the inserted values
    new_value: object


def _user(conn, tag: str) -> int:
    res = conn.execute(insert(Base.metadata.tables["users"]).values(
        email=f"crud.{tag}@example.com",
        password_hash="x" * 60,
        first_name="Crud",
        last_name="Check",
        role="user",
        status="active",
        email_verified=True,
    ))
    return res.inserted_primary_key[0]


def _project(conn, tag: str) -> int:
    res = conn.execute(insert(Base.metadata.tables["projects"]).values(
        title="Crud Project", slug=f"crud-project-{tag}", description="harness", status="planning",
    ))
    return res.inserted_primary_key[0]


def _permission(conn, tag: str) -> int:
    res = conn.execute(insert(Base.metadata.tables["permissions"]).values(
        name=f"crud_{tag}", description="harness", category="test",
    ))
    return res.inserted_primary_key[0]


def _quotation(conn, tag: str) -> int:
    res = conn.execute(insert(Base.metadata.tables["quotations"]).values(**_quotation_values(conn, tag)))
    return res.inserted_primary_key[0]


def _quotation_values(conn, tag: str) -> dict:
    return {
        "quotation_number": f"QUO-CRUD-{tag}",
        "client_name": "Crud Client",
        "client_email": f"client.{tag}@example.com",
        "project_title": "Crud Works",
        "items": [{"description": "Item", "quantity": "1", "unitPrice": "100.00"}],
        "subtotal": Decimal("100.00"),
        "tax_rate": Decimal("16.00"),
        "tax_amount": Decimal("16.00"),
        "discount": Decimal("0.00"),
        "total": Decimal("116.00"),
        "valid_until": utcnow() + timedelta(days=30),
        "status": "draft",
    }


CASES = (
    TableCase("users", lambda c, t: {
        "email": f"crud.user.{t}@example.com", "password_hash": "x" * 60,
        "first_name": "Test", "last_name": "User", "role": "user", "status": "active",
        "email_verified": True,
    }, "first_name", "Updated"),
    TableCase("permissions", lambda c, t: {
        "name": f"crud_perm_{t}", "description": "harness", "category": "test",
    }, "description", "updated"),
    TableCase("user_permissions", lambda c, t: {
        "user_id": _user(c, t), "permission_id": _permission(c, t),
    }, "granted_by", lambda v: v["user_id"]),
    TableCase("services", lambda c, t: {
        "title": "Test Service", "slug": f"test-service-{t}", "description": "harness",
        "starting_price": Decimal("1000.00"),
    }, "title", "Updated Test Service"),
    TableCase("projects", lambda c, t: {
        "title": "Test Project", "slug": f"test-project-{t}", "description": "harness",
        "status": "planning", "created_by": _user(c, t),
    }, "status", "in_progress"),
    TableCase("project_milestones", lambda c, t: {
        "project_id": _project(c, t), "title": "Foundation", "status": "pending",
    }, "status", "completed"),
    TableCase("project_media", lambda c, t: {
        "project_id": _project(c, t), "filename": f"{t}.jpg", "original_name": "site.jpg",
        "file_path": f"/uploads/{t}.jpg", "file_type": "image/jpeg", "file_size": 1024,
    }, "caption", "Updated caption"),
    TableCase("quotations", _quotation_values, "status", "sent"),
    TableCase("invoices", lambda c, t: {
        "invoice_number": f"INV-CRUD-{t}", "quotation_id": _quotation(c, t),
        "client_name": "Crud Client", "client_email": f"client.{t}@example.com",
        "items": [], "subtotal": Decimal("100.00"), "tax_rate": Decimal("16.00"),
        "tax_amount": Decimal("16.00"), "discount": Decimal("0.00"), "total": Decimal("116.00"),
        "amount_paid": Decimal("0.00"), "balance": Decimal("116.00"),
        "due_date": utcnow() + timedelta(days=30), "status": "draft",
    }, "status", "sent"),
    TableCase("blog_posts", lambda c, t: {
        "title": "Test Blog Post", "slug": f"test-blog-post-{t}", "content": "harness",
        "status": "draft",
    }, "status", "published"),
    TableCase("contact_submissions", lambda c, t: {
        "name": "Test Contact", "email": f"contact.{t}@example.com", "subject": "Test Subject",
        "message": "Harness message", "status": "new",
    }, "status", "responded"),
    TableCase("settings", lambda c, t: {
        "key": f"test_setting_{t}", "value": "test_value",
    }, "value", "updated_test_value"),
    TableCase("system_logs", lambda c, t: {
        "action": "test_action", "details": "harness", "resource": "test_resource",
    }, "details", "updated"),
    TableCase("audit_logs", lambda c, t: {
        "action": "test_action", "resource_type": "test_resource", "details": {"updated": False},
    }, "details", {"updated": True}),
    TableCase("files", lambda c, t: {
        "filename": f"{t}.pdf", "original_name": "plan.pdf", "mime_type": "application/pdf",
        "size": 2048, "path": f"/uploads/{t}.pdf",
    }, "category", "plans"),
    TableCase("user_sessions", lambda c, t: {
        "user_id": _user(c, t), "refresh_token_hash": uuid.uuid4().hex * 2,
        "expires_at": utcnow() + timedelta(days=7),
    }, "is_active", False),
)


def _same(written, stored) -> bool:
    # DATETIME columns drop sub-second precision on MySQL
    if isinstance(written, datetime) and isinstance(stored, datetime):
        return written.replace(microsecond=0) == stored.replace(microsecond=0)
    if isinstance(written, Decimal) and stored is not None:
        return written == Decimal(str(stored))
    return written == stored


def _diff(expected: dict, row, columns) -> list[str]:
    return [
        f"{name}: wrote {expected[name]!r}, read {row[name]!r}"
        for name in columns
        if not _same(expected[name], row[name])
    ]


def _label(table: str) -> str:
    return table.replace("_", " ").title()


def check_table(engine, case: TableCase, tally: CrudTally) -> None:
    table = Base.metadata.tables[case.table]
    label = _label(case.table)
    tag = uuid.uuid4().hex[:10]
    conn = engine.connect()
    trans = conn.begin()
    try:
        values = case.values(conn, tag)
        res = conn.execute(insert(table).values(**values))
        row_id = res.inserted_primary_key[0]
        tally.check(f"{label} CREATE", row_id is not None)

        before = conn.execute(select(table).where(table.c.id == row_id)).mappings().first()
        mismatch = _diff(values, before, values) if before is not None else ["row missing"]
        tally.check(f"{label} READ", not mismatch, "; ".join(mismatch))

        new_value = case.new_value(values) if callable(case.new_value) else case.new_value
        conn.execute(update(table).where(table.c.id == row_id).values({case.field: new_value}))
        after = conn.execute(select(table).where(table.c.id == row_id)).mappings().first()
        if after is None or before is None:
            mismatch = ["row missing"]
        else:
            untouched = [
                c.name for c in table.columns
                if c.name != case.field and c.onupdate is None
            ]
            mismatch = _diff({case.field: new_value}, after, [case.field]) + _diff(before, after, untouched)
        tally.check(f"{label} UPDATE", not mismatch, "; ".join(mismatch))

        res = conn.execute(delete(table).where(table.c.id == row_id))
        gone = conn.execute(select(table.c.id).where(table.c.id == row_id)).first() is None
        tally.check(f"{label} DELETE", res.rowcount == 1 and gone)
    except Exception as exc:
        tally.check(f"{label} CRUD", False, str(exc))
    finally:
        trans.rollback()
        conn.close()


def run_crud_check(engine, cases=CASES) -> CrudTally:
    tally = CrudTally()
    for case in cases:
        check_table(engine, case, tally)
    logger.info(
        "crud: %d passed, %d failed (%.1f%%)",
        tally.passed, tally.failed, tally.success_rate,
    )
    return tally
