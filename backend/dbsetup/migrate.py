# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Schema / migration manager.

``run_migrations(engine)`` brings any database up to the current model
definitions and is safe to run any number of times:

1. every table in ``Base.metadata`` is created if it does not exist;
2. every model column missing from an existing table is added through
   Alembic operations (nullable unless the column has a server default);
3. the default site settings are inserted, each behind an existence check.

Any database error is re-raised as :class:`MigrationError`.  Nothing that
already ran is rolled back by hand; the caller decides whether to exit.
"""

from dataclasses import dataclass, field

from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import Column, inspect, insert, select
from sqlalchemy.exc import SQLAlchemyError

from core.logger import logger
from database import Base

# Import every ORM model so that Base.metadata knows about all tables.
import models.audit_log  # noqa: F401
import models.billing    # noqa: F401
import models.content    # noqa: F401
import models.site       # noqa: F401
import models.user       # noqa: F401
from models.site import Setting

DEFAULT_SETTINGS = (
    ("company_name", "Akibeks Engineering Solutions", "Company display name"),
    ("company_email", "info@akibeks.com", "Primary contact email"),
    ("company_phone", "+254700000000", "Primary contact phone"),
    ("company_address", "Nairobi, Kenya", "Head office address"),
    ("website_title", "Akibeks Engineering Solutions", "Browser title of the public site"),
    ("website_description", "Professional construction and engineering services", "Meta description"),
)


class MigrationError(RuntimeError):
    pass


@dataclass
class MigrationResult:
    tables_created: list = field(default_factory=list)
    columns_added: list = field(default_factory=list)
    settings_inserted: list = field(default_factory=list)


def _missing_column(col) -> Column:
    """A fresh, unbound copy of *col* suitable for ALTER TABLE ADD COLUMN."""
    default = col.server_default.arg if col.server_default is not None else None
    return Column(
        col.name,
        col.type,
        nullable=col.nullable if default is not None else True,
        server_default=default,
    )


def _add_missing_columns(conn, result: MigrationResult) -> None:
    inspector = inspect(conn)
    op = Operations(MigrationContext.configure(conn))
    for table in Base.metadata.sorted_tables:
        live = {c["name"] for c in inspector.get_columns(table.name)}
        for col in table.columns:
            if col.name in live:
                continue
            op.add_column(table.name, _missing_column(col))
            result.columns_added.append(f"{table.name}.{col.name}")
            logger.info("migrate: added column %s.%s", table.name, col.name)


def _insert_default_settings(conn, result: MigrationResult) -> None:
    for key, value, description in DEFAULT_SETTINGS:
        exists = conn.execute(select(Setting.id).where(Setting.key == key)).first()
        if exists:
            continue
        conn.execute(insert(Setting).values(
            key=key,
            value=value,
            description=description,
            category="company",
            is_public=True,
        ))
        result.settings_inserted.append(key)


def run_migrations(engine) -> MigrationResult:
    result = MigrationResult()
    try:
        with engine.begin() as conn:
            before = set(inspect(conn).get_table_names())
            Base.metadata.create_all(conn, checkfirst=True)
            result.tables_created = [t.name for t in Base.metadata.sorted_tables if t.name not in before]
            for name in result.tables_created:
                logger.info("migrate: created table %s", name)

            _add_missing_columns(conn, result)
            _insert_default_settings(conn, result)
    except SQLAlchemyError as exc:
        logger.error("migrate: failed: %s", exc)
        raise MigrationError(str(exc)) from exc

    logger.info(
        "migrate: done (%d tables created, %d columns added, %d settings inserted)",
        len(result.tables_created), len(result.columns_added), len(result.settings_inserted),
    )
    return result
