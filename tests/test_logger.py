# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
import logging

from core import logger as logmod
from core.config import settings


def test_shared_logger():
    assert logmod.logger is logging.getLogger("akibeks")
    assert logmod.logger.isEnabledFor(logging.INFO)


def test_log_dir_setting(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "log_dir", str(tmp_path / "logs"))
    path = logmod.log_file()
    assert path == tmp_path / "logs" / "app.log"
    assert path.parent.is_dir()


def test_log_level_override(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "log_dir", str(tmp_path))
    monkeypatch.setattr(settings, "log_level", "warning")
    try:
        log = logmod.configure()
        assert log.level == logging.WARNING
    finally:
        monkeypatch.setattr(settings, "log_level", "")
        monkeypatch.setattr(settings, "log_dir", "")
        logmod.configure()
