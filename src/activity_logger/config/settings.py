"""Runtime configuration settings for activity-logger.

This module uses Pydantic Settings for configuration that can be
overridden via environment variables. This provides:
- Type validation
- Environment variable support (ACTIVITY_LOGGER_ prefix)
- Default values
- Easy testing via dependency injection

A YAML config file may also be given to load_settings(); values from its
``store:`` section take precedence over the environment.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from activity_logger.constants import (
    CONFIG_FILE_STORE_SECTION,
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_DB_DIR,
    DEFAULT_DB_FILENAME,
    DEFAULT_LOG_BACKUP_COUNT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_LOG_MAX_SIZE_MB,
    DEFAULT_LOG_ROTATION_ENABLED,
    ENV_PREFIX,
    MAX_LOG_BACKUP_COUNT,
    MAX_LOG_MAX_SIZE_MB,
    MIN_LOG_MAX_SIZE_MB,
    VALID_LOG_LEVELS,
)
from activity_logger.exceptions import ConfigurationError


class LogRotationSettings(BaseSettings):
    """Log file rotation settings.

    Can be overridden via environment variables with
    ACTIVITY_LOGGER_LOG_ROTATION_ prefix.
    """

    model_config = SettingsConfigDict(env_prefix=f"{ENV_PREFIX}LOG_ROTATION_")

    enabled: bool = Field(
        default=DEFAULT_LOG_ROTATION_ENABLED,
        description="Rotate the log file when it grows past max_size_mb",
    )
    max_size_mb: int = Field(
        default=DEFAULT_LOG_MAX_SIZE_MB,
        ge=MIN_LOG_MAX_SIZE_MB,
        le=MAX_LOG_MAX_SIZE_MB,
        description="Maximum log file size in megabytes before rotation",
    )
    backup_count: int = Field(
        default=DEFAULT_LOG_BACKUP_COUNT,
        ge=0,
        le=MAX_LOG_BACKUP_COUNT,
        description="Number of rotated files to keep",
    )

    @property
    def max_bytes(self) -> int:
        """Maximum log file size in bytes."""
        return self.max_size_mb * 1024 * 1024


class StoreSettings(BaseSettings):
    """Trip store settings.

    Can be overridden via environment variables with ACTIVITY_LOGGER_ prefix.
    """

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX)

    db_path: Path = Field(
        default=Path(DEFAULT_DB_DIR) / DEFAULT_DB_FILENAME,
        description="Path to the SQLite database file",
    )
    connect_timeout_seconds: float = Field(
        default=DEFAULT_CONNECT_TIMEOUT_SECONDS,
        gt=0,
        description="Seconds a connection waits on a locked database",
    )
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        description="Log level for the activity_logger logger",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional log file; logs go to stderr when unset",
    )
    log_rotation: LogRotationSettings = Field(default_factory=LogRotationSettings)

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(VALID_LOG_LEVELS)}")
        return level


def _read_store_section(config_file: Path) -> dict[str, Any]:
    """Read the store section of a YAML config file.

    Args:
        config_file: Path to the YAML file.

    Returns:
        The ``store:`` mapping, or an empty dict when the section is absent.

    Raises:
        ConfigurationError: If the file cannot be read or is malformed.
    """
    try:
        with open(config_file, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Could not read config file: {e}", config_file=str(config_file)
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            "Config file must contain a mapping", config_file=str(config_file)
        )
    section = data.get(CONFIG_FILE_STORE_SECTION) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(
            f"'{CONFIG_FILE_STORE_SECTION}' section must be a mapping",
            config_file=str(config_file),
            field=CONFIG_FILE_STORE_SECTION,
        )
    return section


def load_settings(config_file: Path | None = None) -> StoreSettings:
    """Load store settings from defaults, environment and an optional file.

    Args:
        config_file: Optional YAML config file with a ``store:`` section.

    Returns:
        Validated StoreSettings.

    Raises:
        ConfigurationError: If the file is unreadable or a value is invalid.
    """
    overrides: dict[str, Any] = {}
    if config_file is not None:
        overrides = _read_store_section(config_file)

    try:
        return StoreSettings(**overrides)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise ConfigurationError(
            f"Invalid setting: {first.get('msg', e)}",
            config_file=str(config_file) if config_file else None,
            field=field or None,
        ) from e
