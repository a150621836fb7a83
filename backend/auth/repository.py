# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
User storage seen by the auth service.

``UserRepository`` is the capability the service depends on;
``SqlUserRepository`` is the production implementation over a request
session.  Tests drive the same service through an in-memory fake.

The repository commits its own writes: each login outcome (failed-attempt
counter, lockout, session row, activity log) must persist even when the
request itself ends in a 401.
"""

from datetime import datetime
from typing import Optional, Protocol

from sqlalchemy.orm import Session

from database import utcnow
from models.audit_log import SystemLog
from models.user import User, UserSession


class UserRepository(Protocol):
    def find_by_email(self, email: str) -> Optional[User]: ...

    def find_by_id(self, user_id: int) -> Optional[User]: ...

    def insert(self, user: User) -> User: ...

    def update_password(self, user: User, password_hash: str) -> None: ...

    def record_failed_login(self, user: User, attempts: int, locked_until: Optional[datetime]) -> None: ...

    def record_successful_login(self, user: User) -> None: ...

    def save(self, user: User) -> None: ...

    def store_session(self, user: User, token_hash: str, expires_at: datetime,
                      ip_address: Optional[str], user_agent: Optional[str]) -> None: ...

    def find_session(self, token_hash: str) -> Optional[UserSession]: ...

    def deactivate_session(self, token_hash: str) -> None: ...

    def log_activity(self, user_id: Optional[int], action: str, details: str,
                     ip_address: Optional[str] = None, user_agent: Optional[str] = None,
                     success: bool = True) -> None: ...


class SqlUserRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def find_by_id(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def insert(self, user: User) -> User:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def update_password(self, user: User, password_hash: str) -> None:
        user.password_hash = password_hash
        user.last_password_change = utcnow()
        self.db.commit()

    def record_failed_login(self, user: User, attempts: int, locked_until: Optional[datetime]) -> None:
        user.failed_login_attempts = attempts
        user.locked_until = locked_until
        self.db.commit()

    def record_successful_login(self, user: User) -> None:
        user.failed_login_attempts = 0
        user.locked_until = None
        user.last_login = utcnow()
        self.db.commit()

    def save(self, user: User) -> None:
        self.db.commit()

    def store_session(self, user, token_hash, expires_at, ip_address, user_agent) -> None:
        self.db.add(UserSession(
            user_id=user.id,
            refresh_token_hash=token_hash,
            expires_at=expires_at,
            ip_address=ip_address,
            user_agent=user_agent,
            is_active=True,
        ))
        self.db.commit()

    def find_session(self, token_hash: str) -> Optional[UserSession]:
        return (
            self.db.query(UserSession)
            .filter(UserSession.refresh_token_hash == token_hash)
            .first()
        )

    def deactivate_session(self, token_hash: str) -> None:
        session = self.find_session(token_hash)
        if session and session.is_active:
            session.is_active = False
            self.db.commit()

    def log_activity(self, user_id, action, details, ip_address=None, user_agent=None, success=True) -> None:
        self.db.add(SystemLog(
            user_id=user_id,
            action=action,
            details=details,
            ip_address=ip_address,
            user_agent=user_agent,
            resource="users",
            resource_id=str(user_id) if user_id is not None else None,
            success=success,
        ))
        self.db.commit()
