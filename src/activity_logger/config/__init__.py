"""Configuration for activity-logger."""

from activity_logger.config.settings import (
    LogRotationSettings,
    StoreSettings,
    load_settings,
)

__all__ = [
    "LogRotationSettings",
    "StoreSettings",
    "load_settings",
]
