# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
import base64
import os

# Settings are read at import time; these must be in place before any
# backend module is imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-access-secret-0123456789abcdef0123456789abcdef")
os.environ.setdefault("REFRESH_SECRET_KEY", "test-refresh-secret-0123456789abcdef0123456789abcdef")
os.environ.setdefault("MASTER_ENCRYPTION_KEY", base64.b64encode(b"k" * 32).decode())
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core import security
from database import get_db
from dbsetup.migrate import run_migrations
from main import app
from models.user import User

PASSWORD = "Passw0rd!"


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    run_migrations(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    s = session_factory()
    yield s
    s.close()


@pytest.fixture
def client(session_factory):
    def _get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make(email="user@example.com", password=PASSWORD, role="user", status="active",
              email_verified=True, **extra):
        fields = dict(
            email=email,
            password_hash=security.hash_password(password),
            first_name="Jane",
            last_name="Wanjiru",
            role=role,
            status=status,
            email_verified=email_verified,
            failed_login_attempts=0,
            two_factor_enabled=False,
        )
        fields.update(extra)
        user = User(**fields)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def admin(make_user):
    return make_user(email="admin@example.com", role="admin")


def bearer(user) -> dict:
    return {"Authorization": f"Bearer {security.create_access_token(user)}"}


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)
