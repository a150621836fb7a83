# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Exercise insert / select / update / delete against every table.

    python bin/crud_check.py

Every table runs inside a transaction that is rolled back, so this is safe
against a live database.  Exits 1 if any check failed.
"""

import sys
import os

# ---------------------------------------------------------------------------
# Path setup so backend modules are importable
# ---------------------------------------------------------------------------
# bin/crud_check.py  →  ../  →  project root
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_BACKEND_DIR  = os.path.join(_PROJECT_ROOT, "backend")
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from database import engine                  # noqa: E402
from dbsetup.crud_check import run_crud_check  # noqa: E402


def main() -> int:
    tally = run_crud_check(engine)
    for c in tally.checks:
        mark = "PASS" if c.ok else "FAIL"
        print(f"[crud] {mark} {c.label}" + (f" - {c.detail}" if c.detail else ""))
    print(f"[crud] Passed: {tally.passed}  Failed: {tally.failed}  Success rate: {tally.success_rate:.1f}%")
    return 1 if tally.failed else 0


if __name__ == "__main__":
    sys.exit(main())
