# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Logging setup.

etc/logging.conf describes handlers and formats; this module fills in the
log file location, applies the file with ``fileConfig`` and hands out the
shared ``akibeks`` logger.  LOG_DIR moves the log file, LOG_LEVEL raises or
lowers the application logger without editing logging.conf.

    from core.logger import logger
"""

import configparser
import logging
import logging.config
from pathlib import Path

from core.config import settings

LOGGER_NAME = "akibeks"

# backend/core/logger.py  →  project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_LOGGING_CONF = _PROJECT_ROOT / "etc" / "logging.conf"


def log_file() -> Path:
    log_dir = Path(settings.log_dir) if settings.log_dir else _PROJECT_ROOT / "log"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / "app.log"


def configure() -> logging.Logger:
    # %(log_file)s is substituted by hand; RawConfigParser leaves the
    # %(asctime)s style format strings alone.  as_posix() keeps Windows
    # backslashes out of the handler args tuple.
    raw = _LOGGING_CONF.read_text(encoding="utf-8")
    raw = raw.replace("%(log_file)s", log_file().as_posix())
    parser = configparser.RawConfigParser()
    parser.read_string(raw)
    logging.config.fileConfig(parser, disable_existing_loggers=False)

    log = logging.getLogger(LOGGER_NAME)
    if settings.log_level:
        log.setLevel(settings.log_level.upper())
    return log


logger = configure()
