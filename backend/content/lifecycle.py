# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Status rules for projects and blog posts.

Projects move forward only: planning → in_progress → completed.  on_hold
can be entered from either active state and left for in_progress (or
straight to completed).  completed is terminal.
"""

import re
import unicodedata
from typing import Optional

from database import utcnow

# Length of the slug columns
SLUG_MAX = 200

# Older rows and clients say "ongoing"
_PROJECT_ALIASES = {"ongoing": "in_progress"}

PROJECT_TRANSITIONS = {
    "planning": {"in_progress", "on_hold", "completed"},
    "in_progress": {"on_hold", "completed"},
    "on_hold": {"in_progress", "completed"},
    "completed": set(),
}


def normalize_project_status(value: str) -> str:
    return _PROJECT_ALIASES.get(value, value)


def can_transition_project(current: str, target: str) -> bool:
    current = normalize_project_status(current)
    target = normalize_project_status(target)
    return target in PROJECT_TRANSITIONS.get(current, set())


def apply_project_status(project, target: str) -> None:
    """Move *project* to *target*; raises ValueError on a backward move."""
    target = normalize_project_status(target)
    if target not in PROJECT_TRANSITIONS:
        raise ValueError(f"Unknown project status: {target}")
    if not can_transition_project(project.status, target):
        raise ValueError(f"Cannot move a project from {project.status} to {target}")
    project.status = target
    if target == "completed":
        project.completion_date = utcnow()


def publish(post) -> None:
    post.status = "published"
    if post.published_at is None:
        post.published_at = utcnow()


def unpublish(post) -> None:
    post.status = "draft"


def slugify(text: str, suffix: Optional[str] = None) -> str:
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    if suffix:
        # Trim the base so the suffix survives the column limit
        base = slug[:SLUG_MAX - len(suffix) - 1].rstrip("-")
        return f"{base}-{suffix}" if base else suffix[:SLUG_MAX]
    return slug[:SLUG_MAX]
