"""
Unit tests for SonicVision logging configuration
"""
import logging
import logging.handlers

import pytest
import structlog
from pythonjsonlogger import jsonlogger

from sonicvision.core.config import SonicVisionSettings
from sonicvision.core.logging import setup_logging


@pytest.fixture
def restore_logging():
    """Put the root logger and structlog back the way pytest left them"""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def make_settings(tmp_path, debug):
    return SonicVisionSettings(
        DEBUG=debug,
        LOG_LEVEL="DEBUG",
        DOWNLOADS_PATH=str(tmp_path / "downloads"),
        LOG_FILE_PATH=str(tmp_path / "logs" / "sonicvision.log")
    )


@pytest.mark.unit
class TestSetupLogging:

    def test_production_handlers(self, tmp_path, restore_logging):
        logger = setup_logging(make_settings(tmp_path, debug=False))

        root = logging.getLogger()
        console = [h for h in root.handlers if type(h) is logging.StreamHandler]
        rotating = [h for h in root.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]

        assert logger.name == "sonicvision"
        assert root.level == logging.DEBUG
        assert len(console) == 1
        assert isinstance(console[0].formatter, jsonlogger.JsonFormatter)
        assert len(rotating) == 1
        assert isinstance(rotating[0].formatter, jsonlogger.JsonFormatter)
        assert (tmp_path / "logs" / "sonicvision.log").exists()

    def test_development_console_is_plain_text(self, tmp_path, restore_logging):
        setup_logging(make_settings(tmp_path, debug=True))

        console = [h for h in logging.getLogger().handlers if type(h) is logging.StreamHandler]
        assert not isinstance(console[0].formatter, jsonlogger.JsonFormatter)

    def test_third_party_levels(self, tmp_path, restore_logging):
        setup_logging(make_settings(tmp_path, debug=False))

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        assert logging.getLogger("sonicvision.generation").level == logging.INFO
