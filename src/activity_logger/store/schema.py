"""Database schema for the trip store.

Contains schema version and SQL for creating the database schema.
"""

from activity_logger.constants import (
    ACTIVITY_ID,
    ACTIVITY_NAME,
    LOCATION_ADDRESS,
    LOCATION_ID,
    LOCATION_LATITUDE,
    LOCATION_LONGITUDE,
    OPEN_TRIP_END_TIME,
    TABLE_ACTIVITY,
    TABLE_LOCATION,
    TABLE_SCHEMA_VERSION,
    TABLE_TRIP,
    TRIP_ACTIVITY_TYPE,
    TRIP_END_LOCATION,
    TRIP_END_TIME,
    TRIP_ID,
    TRIP_START_LOCATION,
    TRIP_START_TIME,
    UNSET_LOCATION_ID,
)

# Schema version for migrations
# v1: activity, location and trip tables
# v2: unique activity names, indexes on trip start/end time
SCHEMA_VERSION = 2

SCHEMA_SQL = f"""
-- Schema version tracking
CREATE TABLE IF NOT EXISTS {TABLE_SCHEMA_VERSION} (
    version INTEGER PRIMARY KEY
);

-- Activity kinds (seeded once; ids are assigned here, not in code)
CREATE TABLE IF NOT EXISTS {TABLE_ACTIVITY} (
    {ACTIVITY_ID} INTEGER PRIMARY KEY AUTOINCREMENT,
    {ACTIVITY_NAME} TEXT NOT NULL
);

CREATE UNIQUE INDEX IF NOT EXISTS idx_activity_name ON {TABLE_ACTIVITY}({ACTIVITY_NAME});

-- Locations (address is filled in later by reverse geocoding)
CREATE TABLE IF NOT EXISTS {TABLE_LOCATION} (
    {LOCATION_ID} INTEGER PRIMARY KEY AUTOINCREMENT,
    {LOCATION_LATITUDE} REAL NOT NULL,
    {LOCATION_LONGITUDE} REAL NOT NULL,
    {LOCATION_ADDRESS} TEXT
);

-- Trips. activity_type, start_location and end_location are logical
-- references: 0 means unset and dangling ids are tolerated by the range query.
CREATE TABLE IF NOT EXISTS {TABLE_TRIP} (
    {TRIP_ID} INTEGER PRIMARY KEY AUTOINCREMENT,
    {TRIP_START_TIME} INTEGER NOT NULL,
    {TRIP_END_TIME} INTEGER NOT NULL DEFAULT {OPEN_TRIP_END_TIME},
    {TRIP_ACTIVITY_TYPE} INTEGER NOT NULL,
    {TRIP_START_LOCATION} INTEGER DEFAULT {UNSET_LOCATION_ID},
    {TRIP_END_LOCATION} INTEGER DEFAULT {UNSET_LOCATION_ID}
);

CREATE INDEX IF NOT EXISTS idx_trip_start_time ON {TABLE_TRIP}({TRIP_START_TIME});
CREATE INDEX IF NOT EXISTS idx_trip_end_time ON {TABLE_TRIP}({TRIP_END_TIME});
"""
