# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Seed loader – the first admin, the permission catalog, the services
catalog and a few sample projects.

Every row is guarded by its own existence check, so the loader can be run
again after a partial failure or on a database that already has data.
The admin is created only when FIRST_ADMIN_EMAIL / FIRST_ADMIN_PASSWORD
are configured.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from content.lifecycle import normalize_project_status, slugify
from core import security
from core.config import settings
from core.logger import logger
from models.content import Project, Service
from models.user import Permission, User, UserPermission

PERMISSIONS = (
    ("admin_access", "Full administrative access", "admin"),
    ("project_manage", "Manage projects", "project"),
    ("project_view", "View projects", "project"),
    ("invoice_manage", "Manage invoices", "financial"),
    ("invoice_view", "View invoices", "financial"),
    ("quotation_manage", "Manage quotations", "financial"),
    ("quotation_view", "View quotations", "financial"),
    ("user_manage", "Manage users", "admin"),
    ("user_view", "View users", "admin"),
    ("content_manage", "Manage content", "content"),
    ("content_view", "View content", "content"),
    ("analytics_view", "View analytics", "analytics"),
    ("settings_manage", "Manage settings", "admin"),
    ("settings_view", "View settings", "admin"),
    ("lead_manage", "Manage leads", "sales"),
    ("lead_view", "View leads", "sales"),
    ("document_manage", "Manage documents", "content"),
    ("document_view", "View documents", "content"),
    ("calendar_manage", "Manage calendar", "scheduling"),
    ("calendar_view", "View calendar", "scheduling"),
    ("audit_view", "View audit logs", "security"),
    ("security_manage", "Manage security settings", "security"),
)

SERVICES = (
    {
        "title": "Commercial Construction",
        "slug": "commercial-construction",
        "description": "Modern office buildings, retail spaces, and commercial complexes with sustainable design principles.",
        "short_description": "Professional commercial construction services for businesses and organizations.",
        "icon": "HiOfficeBuilding",
        "features": [
            "Office buildings and corporate headquarters",
            "Retail centers and shopping malls",
            "Hotels and hospitality facilities",
            "Mixed-use developments",
            "Sustainable and green building practices",
        ],
        "starting_price": Decimal("5000000"),
    },
    {
        "title": "Residential Construction",
        "slug": "residential-construction",
        "description": "Luxury homes, apartments, and residential complexes with modern amenities.",
        "short_description": "Custom residential construction for homes and apartments.",
        "icon": "HiHome",
        "features": [
            "Luxury residential homes",
            "Multi-family apartment complexes",
            "Gated communities",
            "Custom home design and build",
            "Residential renovations and extensions",
        ],
        "starting_price": Decimal("2000000"),
    },
    {
        "title": "Industrial Construction",
        "slug": "industrial-construction",
        "description": "Heavy industrial facilities, warehouses, and manufacturing plants with advanced engineering.",
        "short_description": "Specialized industrial construction and facility development.",
        "icon": "HiCog",
        "features": [
            "Manufacturing plants and factories",
            "Warehouses and distribution centers",
            "Processing facilities",
            "Industrial parks and zones",
            "Specialized industrial equipment installation",
        ],
        "starting_price": Decimal("10000000"),
    },
    {
        "title": "Infrastructure Development",
        "slug": "infrastructure-development",
        "description": "Roads, bridges, utilities, and public infrastructure projects.",
        "short_description": "Comprehensive infrastructure development and public works.",
        "icon": "HiLightningBolt",
        "features": [
            "Road and highway construction",
            "Bridge and tunnel projects",
            "Water and sewage systems",
            "Electrical infrastructure",
            "Public works and utilities",
        ],
        "starting_price": Decimal("15000000"),
    },
    {
        "title": "Renovation Services",
        "slug": "renovation-services",
        "description": "Comprehensive renovation and remodeling services for existing structures.",
        "short_description": "Professional renovation and remodeling services.",
        "icon": "HiWrench",
        "features": [
            "Building renovations and upgrades",
            "Interior and exterior remodeling",
            "Structural repairs and reinforcement",
            "Modernization and retrofitting",
            "Historical building restoration",
        ],
        "starting_price": Decimal("1000000"),
    },
    {
        "title": "Project Management",
        "slug": "project-management",
        "description": "Comprehensive project management services from planning to completion.",
        "short_description": "Expert project management and coordination services.",
        "icon": "HiChartBar",
        "features": [
            "Project planning and scheduling",
            "Cost estimation and budgeting",
            "Quality control and assurance",
            "Risk management",
            "Stakeholder coordination",
        ],
        "starting_price": Decimal("500000"),
    },
)

SAMPLE_PROJECTS = (
    {
        "title": "Nairobi Office Complex",
        "description": "Modern 10-story office complex in Westlands, Nairobi. Features sustainable design, smart building technology, and premium amenities.",
        "client": "Nairobi Business Park Ltd",
        "location": "Westlands, Nairobi",
        "budget": Decimal("250000000"),
        "start_date": datetime(2024, 1, 15),
        "end_date": datetime(2024, 12, 31),
        "status": "ongoing",
        "category": "commercial",
        "featured_image": "/images/projects/nairobi-office-complex.jpg",
    },
    {
        "title": "Luxury Residential Villa",
        "description": "Custom luxury villa in Karen, Nairobi. 5-bedroom design with modern amenities, swimming pool, and landscaped gardens.",
        "client": "Private Client",
        "location": "Karen, Nairobi",
        "budget": Decimal("45000000"),
        "start_date": datetime(2024, 3, 1),
        "end_date": datetime(2024, 8, 31),
        "status": "planning",
        "category": "residential",
        "featured_image": "/images/projects/luxury-villa.jpg",
    },
    {
        "title": "Industrial Warehouse Facility",
        "description": "Large-scale warehouse and distribution center in Mombasa. Includes loading docks, office space, and security systems.",
        "client": "Mombasa Logistics Ltd",
        "location": "Mombasa, Kenya",
        "budget": Decimal("120000000"),
        "start_date": datetime(2024, 2, 1),
        "end_date": datetime(2024, 7, 31),
        "status": "ongoing",
        "category": "industrial",
        "featured_image": "/images/projects/warehouse-facility.jpg",
    },
)


@dataclass
class SeedSummary:
    admin_email: Optional[str] = None
    admin_created: bool = False
    permissions_created: int = 0
    permissions_granted: int = 0
    services_created: int = 0
    projects_created: int = 0
    skipped: list = field(default_factory=list)


def _seed_admin(db: Session, summary: SeedSummary) -> Optional[User]:
    if not settings.first_admin_email or not settings.first_admin_password:
        summary.skipped.append("admin (FIRST_ADMIN_EMAIL / FIRST_ADMIN_PASSWORD not set)")
        return None

    email = settings.first_admin_email.strip().lower()
    summary.admin_email = email
    admin = db.query(User).filter(User.email == email).first()
    if admin:
        return admin

    admin = User(
        email=email,
        password_hash=security.hash_password(settings.first_admin_password),
        first_name="System",
        last_name="Administrator",
        role="admin",
        status="active",
        email_verified=True,
        failed_login_attempts=0,
        two_factor_enabled=False,
    )
    db.add(admin)
    db.flush()
    summary.admin_created = True
    logger.info("seed: created admin %s", email)
    return admin


def _seed_permissions(db: Session, admin: Optional[User], summary: SeedSummary) -> None:
    for name, description, category in PERMISSIONS:
        perm = db.query(Permission).filter(Permission.name == name).first()
        if not perm:
            perm = Permission(name=name, description=description, category=category)
            db.add(perm)
            db.flush()
            summary.permissions_created += 1
        if admin is None:
            continue
        granted = (
            db.query(UserPermission)
            .filter(UserPermission.user_id == admin.id, UserPermission.permission_id == perm.id)
            .first()
        )
        if not granted:
            db.add(UserPermission(user_id=admin.id, permission_id=perm.id, granted_by=admin.id))
            summary.permissions_granted += 1


def _seed_services(db: Session, summary: SeedSummary) -> None:
    for sort_order, entry in enumerate(SERVICES, start=1):
        if db.query(Service).filter(Service.slug == entry["slug"]).first():
            continue
        db.add(Service(
            currency="KSH",
            sort_order=sort_order,
            is_active=True,
            seo_title=f"{entry['title']} Services - Akibeks Engineering",
            seo_description=entry["short_description"],
            **entry,
        ))
        summary.services_created += 1


def _seed_projects(db: Session, admin: Optional[User], summary: SeedSummary) -> None:
    for entry in SAMPLE_PROJECTS:
        slug = slugify(entry["title"])
        if db.query(Project).filter(Project.slug == slug).first():
            continue
        db.add(Project(
            slug=slug,
            currency="KSH",
            is_public=True,
            created_by=admin.id if admin else None,
            **{**entry, "status": normalize_project_status(entry["status"])},
        ))
        summary.projects_created += 1


def run_seed(db: Session) -> SeedSummary:
    """Insert everything that is missing and commit once at the end."""
    summary = SeedSummary()
    try:
        admin = _seed_admin(db, summary)
        _seed_permissions(db, admin, summary)
        _seed_services(db, summary)
        _seed_projects(db, admin, summary)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(
        "seed: admin_created=%s permissions=%d grants=%d services=%d projects=%d",
        summary.admin_created, summary.permissions_created, summary.permissions_granted,
        summary.services_created, summary.projects_created,
    )
    return summary
