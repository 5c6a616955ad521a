"""Custom exceptions for activity-logger.

All exceptions inherit from ActivityLoggerError, allowing callers to catch
every error raised by the package with a single except clause.

Exception hierarchy:
    ActivityLoggerError (base)
    ├── ConfigurationError
    └── StorageError
        ├── StoreConnectionError
        └── ConstraintError

Soft outcomes are not exceptions: updates and deletes that match no row
return 0, lookups of absent rows return None or ActivityKind.UNKNOWN.
"""

from typing import Any


class ActivityLoggerError(Exception):
    """Base exception for all activity-logger errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize the error.

        Args:
            message: Error description.
            details: Optional dictionary with additional context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation."""
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(ActivityLoggerError):
    """Raised when settings are invalid or a config file cannot be read."""

    def __init__(
        self,
        message: str,
        config_file: str | None = None,
        field: str | None = None,
    ):
        """Initialize configuration error.

        Args:
            message: Error description.
            config_file: Path to the config file involved.
            field: Name of the offending setting.
        """
        details: dict[str, Any] = {}
        if config_file:
            details["config_file"] = config_file
        if field:
            details["field"] = field
        super().__init__(message, details)
        self.config_file = config_file
        self.field = field


# =============================================================================
# Storage Errors
# =============================================================================


class StorageError(ActivityLoggerError):
    """Raised when a store operation fails.

    Base class for storage-related errors. Storage failures are never
    retried; they propagate to the caller of the failing operation.
    """

    def __init__(
        self,
        message: str,
        table: str | None = None,
        cause: Exception | None = None,
    ):
        """Initialize storage error.

        Args:
            message: Error description.
            table: The table involved, when known.
            cause: The underlying sqlite3 exception.
        """
        details: dict[str, Any] = {}
        if table:
            details["table"] = table
        super().__init__(message, details)
        self.table = table
        self.cause = cause


class StoreConnectionError(StorageError):
    """Raised when the store is not open, was closed, or cannot be reached.

    Examples:
        - Operation called before open() or after close()
        - Database file cannot be opened
    """

    pass


class ConstraintError(StorageError):
    """Raised when a write violates a NOT NULL, UNIQUE or CHECK constraint.

    The surrounding transaction is rolled back, so no partial row remains.
    """

    pass
