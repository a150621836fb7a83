# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Application configuration.
All secrets and connection strings are loaded exclusively from environment
variables (via etc/app.conf).  Nothing sensitive is hard-coded here.

The database connection is described either by the individual DB_* parts
or by a complete DATABASE_URL.  Missing DB_NAME / DB_USER (without a URL
override) is a fatal error: the Settings() call below raises and the
process refuses to start.
"""

from pathlib import Path
from typing import List

from pydantic import model_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL

# Project root is two levels up from this file  (backend/core/config.py → project/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    # Database – individual parts (MySQL)
    db_host: str = "localhost"
    db_port: int = 3306
    db_name: str = ""
    db_user: str = ""
    db_password: str = ""

    # Full SQLAlchemy URL; when set it wins over the DB_* parts
    database_url: str = ""

    # JWT signing secrets – long, random strings, one per token type
    secret_key: str
    refresh_secret_key: str

    # AES-256 key (base64, 32 bytes) protecting two-factor secrets at rest.
    # Only required once a user enables two-factor authentication.
    master_encryption_key: str = ""

    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 7
    remember_me_expire_days: int = 30

    # bcrypt work factor (each +1 doubles the hashing time)
    bcrypt_rounds: int = 12

    # Lockout policy
    max_failed_logins: int = 5
    lockout_minutes: int = 30

    # New registrations start "pending" / unverified when enabled
    require_email_verification: bool = False

    # Cookies are marked Secure behind TLS
    cookie_secure: bool = False

    cors_origins: List[str] = ["http://localhost:5173"]

    # log/app.log under the project root unless LOG_DIR is set
    log_dir: str = ""
    # Overrides the level of the "akibeks" logger from etc/logging.conf
    log_level: str = ""

    # Used only by bin/seed.py to bootstrap the first admin account.
    first_admin_email: str = ""
    first_admin_password: str = ""

    model_config = {"env_file": str(_PROJECT_ROOT / "etc" / "app.conf")}

    @model_validator(mode="after")
    def _check_database(self):
        if not self.database_url and (not self.db_name or not self.db_user):
            raise ValueError(
                "Database configuration is not complete: DB_NAME and DB_USER are required"
            )
        return self

    @property
    def sqlalchemy_url(self):
        """Connection URL handed to create_engine()."""
        if self.database_url:
            return self.database_url
        return URL.create(
            "mysql+pymysql",
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
            query={"charset": "utf8mb4"},
        )


# Module-level singleton – import this everywhere: from core.config import settings
settings = Settings()
