# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
import pytest
from pydantic import ValidationError

from core.config import Settings

SECRETS = {"secret_key": "a" * 40, "refresh_secret_key": "b" * 40}


def test_missing_database_name_is_fatal():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, database_url="", db_name="", db_user="akibeks", **SECRETS)


def test_mysql_url_from_parts():
    s = Settings(_env_file=None, database_url="", db_name="akibeks", db_user="akibeks",
                 db_password="p@ss", **SECRETS)
    url = s.sqlalchemy_url
    assert url.drivername == "mysql+pymysql"
    assert url.database == "akibeks"
    assert url.password == "p@ss"
    assert url.query["charset"] == "utf8mb4"


def test_database_url_wins():
    s = Settings(_env_file=None, database_url="sqlite://", **SECRETS)
    assert s.sqlalchemy_url == "sqlite://"
