"""Tests for logging setup."""

import logging

import pytest
from rich.logging import RichHandler

from aix.log import debug_enabled, setup_logging


@pytest.fixture(autouse=True)
def restore_logger():
    logger = logging.getLogger("aix")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


class TestSetupLogging:
    """Test setup_logging."""

    def test_default_level(self):
        assert setup_logging().level == logging.WARNING

    def test_verbose(self):
        assert setup_logging(verbose=True).level == logging.DEBUG

    def test_debug_env(self, monkeypatch):
        monkeypatch.setenv("AIX_DEBUG", "yes")
        assert debug_enabled()
        assert setup_logging().level == logging.DEBUG

    def test_falsy_env(self, monkeypatch):
        monkeypatch.setenv("AIX_DEBUG", "0")
        assert not debug_enabled()

    def test_single_handler(self):
        setup_logging()
        logger = setup_logging()
        assert sum(isinstance(h, RichHandler) for h in logger.handlers) == 1
