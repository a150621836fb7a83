# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Bootstrap script – loads the first admin, permissions, services and
sample projects.

Run once after bin/migrate.py:
    python bin/seed.py

The admin comes from FIRST_ADMIN_EMAIL and FIRST_ADMIN_PASSWORD in
etc/app.conf.  The password is echoed only on the run that creates the
account; change it after the first login.
"""

import sys
import os

# ---------------------------------------------------------------------------
# Path setup so backend modules are importable
# ---------------------------------------------------------------------------
# bin/seed.py  →  ../  →  project root
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_BACKEND_DIR  = os.path.join(_PROJECT_ROOT, "backend")
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from sqlalchemy.exc import SQLAlchemyError  # noqa: E402

from core.config import settings            # noqa: E402
from database import SessionLocal           # noqa: E402
from dbsetup.seed import run_seed           # noqa: E402


def main() -> int:
    db = SessionLocal()
    try:
        summary = run_seed(db)
    except SQLAlchemyError as exc:
        print(f"[seed] Seeding failed: {exc}")
        return 1
    finally:
        db.close()

    print("[seed] Summary:")
    if summary.admin_created:
        print(f"[seed]   Admin user : {summary.admin_email} / {settings.first_admin_password}")
        print("[seed]   Change the default password after the first login.")
    elif summary.admin_email:
        print(f"[seed]   Admin user : {summary.admin_email} (already existed)")
    print(f"[seed]   Permissions: {summary.permissions_created} created, {summary.permissions_granted} granted")
    print(f"[seed]   Services   : {summary.services_created} created")
    print(f"[seed]   Projects   : {summary.projects_created} created")
    for note in summary.skipped:
        print(f"[seed]   Skipped    : {note}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
