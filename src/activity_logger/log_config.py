"""Logging setup for activity-logger.

Modules log through ``logging.getLogger(__name__)``; this module only
attaches handlers to the package logger.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from activity_logger.config.settings import LogRotationSettings, StoreSettings
from activity_logger.constants import LOGGER_NAME


def configure_logging(
    log_level: str,
    log_file: Path | None = None,
    log_rotation: LogRotationSettings | None = None,
) -> logging.Logger:
    """Configure the activity_logger logger.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional log file path. Logs go to stderr when omitted.
        log_rotation: Optional log rotation configuration.

    Returns:
        The configured package logger.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(level)
    # Host applications configure the root logger themselves
    package_logger.propagate = False
    # Reconfiguring must not stack handlers
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)
        existing.close()

    if level == logging.DEBUG:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s",
            datefmt="%H:%M:%S",
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(message)s",
            datefmt="%H:%M:%S",
        )

    handler: logging.Handler
    if log_file:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            rotation = log_rotation or LogRotationSettings()
            if rotation.enabled:
                handler = RotatingFileHandler(
                    log_file,
                    mode="a",
                    maxBytes=rotation.max_bytes,
                    backupCount=rotation.backup_count,
                    encoding="utf-8",
                )
            else:
                handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as e:
            handler = logging.StreamHandler()
            handler.setFormatter(formatter)
            package_logger.addHandler(handler)
            package_logger.warning(f"Could not set up file logging to {log_file}: {e}")
            return package_logger
    else:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)
    package_logger.addHandler(handler)
    return package_logger


def configure_logging_from_settings(settings: StoreSettings) -> logging.Logger:
    """Configure logging from loaded store settings."""
    return configure_logging(settings.log_level, settings.log_file, settings.log_rotation)
