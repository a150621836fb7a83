# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Create or upgrade the database schema.

    python bin/migrate.py

Safe to run repeatedly: existing tables and settings are left alone, only
what is missing is created.  Exits 1 if any statement fails.
"""

import sys
import os

# ---------------------------------------------------------------------------
# Path setup so backend modules are importable
# ---------------------------------------------------------------------------
# bin/migrate.py  →  ../  →  project root
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_BACKEND_DIR  = os.path.join(_PROJECT_ROOT, "backend")
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from database import engine                               # noqa: E402
from dbsetup.migrate import MigrationError, run_migrations  # noqa: E402


def main() -> int:
    try:
        result = run_migrations(engine)
    except MigrationError as exc:
        print(f"[migrate] Migration failed: {exc}")
        return 1

    print(f"[migrate] Tables created   : {', '.join(result.tables_created) or 'none'}")
    print(f"[migrate] Columns added    : {', '.join(result.columns_added) or 'none'}")
    print(f"[migrate] Settings inserted: {', '.join(result.settings_inserted) or 'none'}")
    print("[migrate] Database is up to date.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
