"""Database migration functions for the trip store.

Contains all migration logic for upgrading database schema versions.
"""

import logging
import sqlite3

from activity_logger.constants import (
    ACTIVITY_ID,
    ACTIVITY_NAME,
    TABLE_ACTIVITY,
    TABLE_TRIP,
    TRIP_ACTIVITY_TYPE,
    TRIP_END_TIME,
    TRIP_START_TIME,
)

logger = logging.getLogger(__name__)


def apply_migrations(conn: sqlite3.Connection, from_version: int) -> None:
    """Apply schema migrations from current version to latest.

    Args:
        conn: Database connection (within transaction).
        from_version: Current schema version.
    """
    if from_version < 2:
        _migrate_v1_to_v2(conn)


def _migrate_v1_to_v2(conn: sqlite3.Connection) -> None:
    """Migrate schema from v1 to v2: unique activity names and trip time indexes.

    v1 databases could hold the same activity name more than once when two
    writers seeded concurrently. Duplicates are collapsed onto the lowest id
    (trips pointing at a dropped id are repointed) before the unique index
    is created.

    Idempotent: every statement is a no-op when already applied.
    """
    logger.info("Migrating trip store schema v1 -> v2 (activity name uniqueness)")

    duplicates = conn.execute(
        f"SELECT a.{ACTIVITY_ID} AS dup_id, keep.keep_id AS keep_id "
        f"FROM {TABLE_ACTIVITY} a "
        f"JOIN (SELECT {ACTIVITY_NAME}, MIN({ACTIVITY_ID}) AS keep_id "
        f"      FROM {TABLE_ACTIVITY} GROUP BY {ACTIVITY_NAME}) keep "
        f"ON a.{ACTIVITY_NAME} = keep.{ACTIVITY_NAME} "
        f"WHERE a.{ACTIVITY_ID} != keep.keep_id"
    ).fetchall()
    for row in duplicates:
        conn.execute(
            f"UPDATE {TABLE_TRIP} SET {TRIP_ACTIVITY_TYPE} = ? WHERE {TRIP_ACTIVITY_TYPE} = ?",
            (row["keep_id"], row["dup_id"]),
        )
        conn.execute(
            f"DELETE FROM {TABLE_ACTIVITY} WHERE {ACTIVITY_ID} = ?",
            (row["dup_id"],),
        )
    if duplicates:
        logger.info(f"Collapsed {len(duplicates)} duplicate activity rows")

    conn.execute(
        f"CREATE UNIQUE INDEX IF NOT EXISTS idx_activity_name "
        f"ON {TABLE_ACTIVITY}({ACTIVITY_NAME})"
    )
    conn.execute(
        f"CREATE INDEX IF NOT EXISTS idx_trip_start_time ON {TABLE_TRIP}({TRIP_START_TIME})"
    )
    conn.execute(f"CREATE INDEX IF NOT EXISTS idx_trip_end_time ON {TABLE_TRIP}({TRIP_END_TIME})")

    logger.info("Migration v1 -> v2 complete")
