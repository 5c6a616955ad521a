"""Tests for logging setup."""

import logging
from collections.abc import Iterator
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from activity_logger.config import LogRotationSettings, StoreSettings
from activity_logger.constants import LOGGER_NAME
from activity_logger.log_config import configure_logging, configure_logging_from_settings


@pytest.fixture(autouse=True)
def _restore_package_logger() -> Iterator[None]:
    package_logger = logging.getLogger(LOGGER_NAME)
    saved = (package_logger.level, package_logger.propagate, list(package_logger.handlers))
    yield
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(saved[0])
    package_logger.propagate = saved[1]
    for handler in saved[2]:
        package_logger.addHandler(handler)


def test_stream_handler_without_file() -> None:
    logger = configure_logging("info")

    assert logger.name == LOGGER_NAME
    assert logger.level == logging.INFO
    assert logger.propagate is False
    assert len(logger.handlers) == 1
    assert type(logger.handlers[0]) is logging.StreamHandler


def test_rotating_file_handler(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "activity.log"

    logger = configure_logging(
        "DEBUG", log_file, LogRotationSettings(max_size_mb=2, backup_count=4)
    )
    logger.debug("hello")

    (handler,) = logger.handlers
    assert isinstance(handler, RotatingFileHandler)
    assert handler.maxBytes == 2 * 1024 * 1024
    assert handler.backupCount == 4
    handler.flush()
    assert "hello" in log_file.read_text()


def test_plain_file_handler_when_rotation_disabled(tmp_path: Path) -> None:
    logger = configure_logging(
        "INFO", tmp_path / "activity.log", LogRotationSettings(enabled=False)
    )

    (handler,) = logger.handlers
    assert type(handler) is logging.FileHandler


def test_reconfiguring_does_not_stack_handlers(tmp_path: Path) -> None:
    configure_logging("INFO")
    configure_logging("INFO", tmp_path / "activity.log")
    logger = configure_logging("WARNING")

    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING


def test_unwritable_log_file_falls_back_to_stderr(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("x")

    logger = configure_logging("INFO", blocker / "activity.log")

    (handler,) = logger.handlers
    assert type(handler) is logging.StreamHandler


def test_configure_from_settings(tmp_path: Path) -> None:
    settings = StoreSettings(log_level="error", log_file=tmp_path / "a.log")

    logger = configure_logging_from_settings(settings)

    assert logger.level == logging.ERROR
    assert isinstance(logger.handlers[0], RotatingFileHandler)
