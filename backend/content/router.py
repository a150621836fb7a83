# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Content endpoints.

Public reads (no token): active services, public projects, published blog
posts and public settings.  Everything under ``/admin/content`` is guarded
by ``require_admin`` and audited.
"""

import secrets

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from content import lifecycle
from content.schemas import (
    BlogCreateRequest,
    BlogPostRow,
    ProjectCreateRequest,
    ProjectRow,
    ProjectStatusRequest,
    ServiceCreateRequest,
    ServiceRow,
    SettingUpdateRequest,
)
from core.audit import audit
from core.errors import ApiError
from core.schemas import ok
from core.security import require_admin
from database import get_db
from models.content import BlogPost, Project, Service
from models.site import Setting
from models.user import User

router = APIRouter(tags=["content"])


def _unique_slug(db: Session, model, title: str) -> str:
    slug = lifecycle.slugify(title)
    while db.query(model).filter(model.slug == slug).first():
        slug = lifecycle.slugify(title, secrets.token_hex(3))
    return slug


# ---------------------------------------------------------------------------
# Public reads
# ---------------------------------------------------------------------------


@router.get("/services")
def list_services(db: Session = Depends(get_db)):
    rows = (
        db.query(Service)
        .filter(Service.is_active.is_(True))
        .order_by(Service.sort_order, Service.id)
        .all()
    )
    return ok("Services retrieved", [ServiceRow.model_validate(r) for r in rows])


@router.get("/services/{slug}")
def get_service(slug: str, db: Session = Depends(get_db)):
    row = db.query(Service).filter(Service.slug == slug, Service.is_active.is_(True)).first()
    if not row:
        raise ApiError(status.HTTP_404_NOT_FOUND, "Service not found")
    return ok("Service retrieved", ServiceRow.model_validate(row))


@router.get("/projects")
def list_projects(db: Session = Depends(get_db)):
    rows = (
        db.query(Project)
        .filter(Project.is_public.is_(True))
        .order_by(Project.is_featured.desc(), Project.created_at.desc(), Project.id.desc())
        .all()
    )
    return ok("Projects retrieved", [ProjectRow.model_validate(r) for r in rows])


@router.get("/projects/{slug}")
def get_project(slug: str, db: Session = Depends(get_db)):
    row = db.query(Project).filter(Project.slug == slug, Project.is_public.is_(True)).first()
    if not row:
        raise ApiError(status.HTTP_404_NOT_FOUND, "Project not found")
    return ok("Project retrieved", ProjectRow.model_validate(row))


@router.get("/blog")
def list_posts(db: Session = Depends(get_db)):
    rows = (
        db.query(BlogPost)
        .filter(BlogPost.status == "published")
        .order_by(BlogPost.published_at.desc(), BlogPost.id.desc())
        .all()
    )
    return ok("Posts retrieved", [BlogPostRow.model_validate(r) for r in rows])


@router.get("/blog/{slug}")
def get_post(slug: str, db: Session = Depends(get_db)):
    post = db.query(BlogPost).filter(BlogPost.slug == slug, BlogPost.status == "published").first()
    if not post:
        raise ApiError(status.HTTP_404_NOT_FOUND, "Post not found")
    post.views = (post.views or 0) + 1
    db.commit()
    return ok("Post retrieved", BlogPostRow.model_validate(post))


@router.get("/settings")
def public_settings(db: Session = Depends(get_db)):
    rows = db.query(Setting).filter(Setting.is_public.is_(True)).order_by(Setting.key).all()
    return ok("Settings retrieved", {r.key: r.value for r in rows})


# ---------------------------------------------------------------------------
# Admin: services
# ---------------------------------------------------------------------------


@router.post("/admin/content/services", status_code=status.HTTP_201_CREATED)
def create_service(
    body: ServiceCreateRequest,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    row = Service(
        title=body.title,
        slug=_unique_slug(db, Service, body.title),
        description=body.description,
        short_description=body.short_description,
        icon=body.icon,
        features=body.features,
        starting_price=body.starting_price,
        sort_order=body.sort_order,
        is_active=True,
    )
    db.add(row)
    db.flush()
    audit(db, request, admin.id, "create_service", "services", row.id, {"slug": row.slug})
    db.commit()
    db.refresh(row)
    return ok("Service created", ServiceRow.model_validate(row))


# ---------------------------------------------------------------------------
# Admin: projects
# ---------------------------------------------------------------------------


@router.post("/admin/content/projects", status_code=status.HTTP_201_CREATED)
def create_project(
    body: ProjectCreateRequest,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    row = Project(
        title=body.title,
        slug=_unique_slug(db, Project, body.title),
        description=body.description,
        client=body.client,
        location=body.location,
        category=body.category,
        status="planning",
        start_date=body.start_date,
        end_date=body.end_date,
        budget=body.budget,
        is_public=body.is_public,
        is_featured=body.is_featured,
        created_by=admin.id,
    )
    db.add(row)
    db.flush()
    audit(db, request, admin.id, "create_project", "projects", row.id, {"slug": row.slug})
    db.commit()
    db.refresh(row)
    return ok("Project created", ProjectRow.model_validate(row))


@router.put("/admin/content/projects/{project_id}/status")
def update_project_status(
    project_id: int,
    body: ProjectStatusRequest,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    row = db.query(Project).filter(Project.id == project_id).first()
    if not row:
        raise ApiError(status.HTTP_404_NOT_FOUND, "Project not found")

    previous = row.status
    try:
        lifecycle.apply_project_status(row, body.status)
    except ValueError as exc:
        raise ApiError(status.HTTP_400_BAD_REQUEST, str(exc))
    audit(db, request, admin.id, "update_project_status", "projects", row.id,
          {"previousStatus": previous, "newStatus": row.status})
    db.commit()
    return ok("Project updated", ProjectRow.model_validate(row))


# ---------------------------------------------------------------------------
# Admin: blog
# ---------------------------------------------------------------------------


@router.post("/admin/content/blog", status_code=status.HTTP_201_CREATED)
def create_post(
    body: BlogCreateRequest,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    post = BlogPost(
        title=body.title,
        slug=_unique_slug(db, BlogPost, body.title),
        content=body.content,
        excerpt=body.excerpt,
        category=body.category,
        tags=body.tags,
        author_id=admin.id,
        status="draft",
        views=0,
    )
    if body.publish:
        lifecycle.publish(post)
    db.add(post)
    db.flush()
    audit(db, request, admin.id, "create_post", "blog_posts", post.id, {"slug": post.slug})
    db.commit()
    db.refresh(post)
    return ok("Post created", BlogPostRow.model_validate(post))


def _get_post(db: Session, post_id: int) -> BlogPost:
    post = db.query(BlogPost).filter(BlogPost.id == post_id).first()
    if not post:
        raise ApiError(status.HTTP_404_NOT_FOUND, "Post not found")
    return post


@router.put("/admin/content/blog/{post_id}/publish")
def publish_post(
    post_id: int,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    post = _get_post(db, post_id)
    lifecycle.publish(post)
    audit(db, request, admin.id, "publish_post", "blog_posts", post.id)
    db.commit()
    return ok("Post published", BlogPostRow.model_validate(post))


@router.put("/admin/content/blog/{post_id}/unpublish")
def unpublish_post(
    post_id: int,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    post = _get_post(db, post_id)
    lifecycle.unpublish(post)
    audit(db, request, admin.id, "unpublish_post", "blog_posts", post.id)
    db.commit()
    return ok("Post unpublished", BlogPostRow.model_validate(post))


# ---------------------------------------------------------------------------
# Admin: settings
# ---------------------------------------------------------------------------


@router.put("/admin/content/settings/{key}")
def update_setting(
    key: str,
    body: SettingUpdateRequest,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Update a setting, creating it (non-public unless stated) if absent."""
    row = db.query(Setting).filter(Setting.key == key).first()
    created = row is None
    if created:
        row = Setting(key=key, value=body.value, is_public=bool(body.is_public))
        db.add(row)
    else:
        row.value = body.value
        if body.is_public is not None:
            row.is_public = body.is_public
    if body.description is not None:
        row.description = body.description
    row.updated_by = admin.id
    audit(db, request, admin.id, "create_setting" if created else "update_setting", "settings", key,
          {"value": body.value})
    db.commit()
    return ok("Setting saved", {"key": row.key, "value": row.value, "isPublic": row.is_public})
