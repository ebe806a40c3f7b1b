"""
Tests for logging configuration.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from chanmorph.config import AppConfig
from chanmorph.logging import configure_from_config, configure_logging, get_logger, reset_logging


@pytest.fixture(autouse=True)
def clean_logging():
    reset_logging()
    yield
    reset_logging()


def test_configure_logging_basic() -> None:
    """Test basic logging configuration."""
    configure_logging(level="DEBUG")

    assert logging.getLogger().level == logging.DEBUG
    assert get_logger(__name__).level == logging.NOTSET


def test_configure_logging_with_file(tmp_path: Path) -> None:
    """Messages reach the log file, creating its directory."""
    log_file = tmp_path / "logs" / "nested" / "test.log"

    configure_logging(level="INFO", log_to_file=True, log_file=str(log_file))
    get_logger(__name__).info("parting detected")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_file.exists()
    assert "parting detected" in log_file.read_text(encoding="utf-8")


def test_configure_logging_default_file_in_log_dir(tmp_path: Path) -> None:
    """Without log_file, logs go to chanmorph.log in log_dir."""
    configure_logging(level="INFO", log_to_file=True, log_dir=str(tmp_path))

    assert (tmp_path / "chanmorph.log").exists()


def test_configure_logging_only_once() -> None:
    """Test that configure_logging only runs once."""
    configure_logging(level="DEBUG")
    root_logger = logging.getLogger()
    handler_count = len(root_logger.handlers)

    configure_logging(level="INFO")

    assert len(root_logger.handlers) == handler_count
    assert root_logger.level == logging.DEBUG


def test_configure_logging_quietens_matplotlib() -> None:
    """Chart library loggers stay at WARNING even in DEBUG mode."""
    configure_logging(level="DEBUG")

    assert logging.getLogger("matplotlib").level == logging.WARNING


def test_configure_from_config() -> None:
    """AppConfig log settings are applied."""
    configure_from_config(AppConfig(log_level="WARNING"))

    assert logging.getLogger().level == logging.WARNING


def test_reset_logging() -> None:
    """Test reset_logging clears handlers."""
    configure_logging(level="INFO")
    root_logger = logging.getLogger()
    assert len(root_logger.handlers) > 0

    reset_logging()

    assert len(root_logger.handlers) == 0
