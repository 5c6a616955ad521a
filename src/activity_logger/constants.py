"""Constants for activity-logger.

This module centralizes table names, column names and defaults so that SQL
statements and row mappers never spell them out by hand.

Constants are organized by domain:
- Table names
- Column names (per table)
- Join aliases used by the trip range query
- Store and logging defaults
- Header labels
"""

from typing import Final

# =============================================================================
# Tables
# =============================================================================

TABLE_ACTIVITY: Final[str] = "activity"
TABLE_TRIP: Final[str] = "trip"
TABLE_LOCATION: Final[str] = "location"
TABLE_SCHEMA_VERSION: Final[str] = "schema_version"

# =============================================================================
# Activity table columns
# =============================================================================

ACTIVITY_ID: Final[str] = "activity_id"
ACTIVITY_NAME: Final[str] = "activity_name"

# =============================================================================
# Trip table columns
# =============================================================================

TRIP_ID: Final[str] = "trip_id"
TRIP_START_TIME: Final[str] = "start_time"
TRIP_END_TIME: Final[str] = "end_time"
TRIP_ACTIVITY_TYPE: Final[str] = "activity_type"
TRIP_START_LOCATION: Final[str] = "start_location"
TRIP_END_LOCATION: Final[str] = "end_location"

# =============================================================================
# Location table columns
# =============================================================================

LOCATION_ID: Final[str] = "location_id"
LOCATION_LATITUDE: Final[str] = "latitude"
LOCATION_LONGITUDE: Final[str] = "longitude"
LOCATION_ADDRESS: Final[str] = "address"

# =============================================================================
# Trip range query aliases
# =============================================================================

START_LATITUDE: Final[str] = "start_latitude"
START_LONGITUDE: Final[str] = "start_longitude"
START_ADDRESS: Final[str] = "start_address"
END_LATITUDE: Final[str] = "end_latitude"
END_LONGITUDE: Final[str] = "end_longitude"
END_ADDRESS: Final[str] = "end_address"

# =============================================================================
# Sentinels
# =============================================================================

# end_time of a trip that has not concluded yet
OPEN_TRIP_END_TIME: Final[int] = 0
# start_location / end_location of a trip with no location attached
UNSET_LOCATION_ID: Final[int] = 0
# activity_type used when neither the kind nor UNKNOWN has a stored id
UNMAPPED_ACTIVITY_ID: Final[int] = 0

# =============================================================================
# Store defaults
# =============================================================================

DEFAULT_DB_DIR: Final[str] = ".activity_logger"
DEFAULT_DB_FILENAME: Final[str] = "trips.db"
DEFAULT_CONNECT_TIMEOUT_SECONDS: Final[float] = 60.0
ENV_PREFIX: Final[str] = "ACTIVITY_LOGGER_"
CONFIG_FILE_STORE_SECTION: Final[str] = "store"

# =============================================================================
# Logging defaults
# =============================================================================

LOGGER_NAME: Final[str] = "activity_logger"
DEFAULT_LOG_LEVEL: Final[str] = "INFO"
VALID_LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LOG_ROTATION_ENABLED: Final[bool] = True
DEFAULT_LOG_MAX_SIZE_MB: Final[int] = 10
DEFAULT_LOG_BACKUP_COUNT: Final[int] = 3
MIN_LOG_MAX_SIZE_MB: Final[int] = 1
MAX_LOG_MAX_SIZE_MB: Final[int] = 100
MAX_LOG_BACKUP_COUNT: Final[int] = 10

# =============================================================================
# Header labels
# =============================================================================

HEADER_TODAY: Final[str] = "Today"
HEADER_YESTERDAY: Final[str] = "Yesterday"
# Days back (exclusive) for which the weekday name is used as the header
HEADER_WEEKDAY_WINDOW_DAYS: Final[int] = 7
HEADER_DATE_FORMAT: Final[str] = "%b %d, %Y"
