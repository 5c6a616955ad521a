"""Trip operations for the trip store.

Functions for opening, updating, reading and deleting trips. Updates and
deletes return the number of affected rows; 0 means no such trip.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from activity_logger.constants import (
    OPEN_TRIP_END_TIME,
    TABLE_TRIP,
    TRIP_ACTIVITY_TYPE,
    TRIP_END_LOCATION,
    TRIP_END_TIME,
    TRIP_ID,
    TRIP_START_LOCATION,
    TRIP_START_TIME,
    UNSET_LOCATION_ID,
)
from activity_logger.models.enums import ActivityKind
from activity_logger.store.models import Trip

if TYPE_CHECKING:
    from activity_logger.store.core import TripStore

logger = logging.getLogger(__name__)

_TRIP_COLUMNS = (
    f"{TRIP_ID}, {TRIP_START_TIME}, {TRIP_END_TIME}, {TRIP_ACTIVITY_TYPE}, "
    f"{TRIP_START_LOCATION}, {TRIP_END_LOCATION}"
)


def add_trip(
    store: TripStore, kind: ActivityKind | str | None, start_time: int | None = None
) -> int:
    """Open a new trip.

    The trip starts with no end time and no locations. A kind without a
    stored id is recorded under the UNKNOWN row's id (0 if that is missing
    too). A plain name is resolved with ActivityKind.from_name(); anything
    else is recorded as UNKNOWN.

    Args:
        store: The TripStore instance.
        kind: Detected activity kind.
        start_time: Start, seconds since epoch (defaults to now).

    Returns:
        ID of the inserted trip.
    """
    if not isinstance(kind, ActivityKind):
        kind = ActivityKind.from_name(kind if isinstance(kind, str) else None)
    started = int(time.time()) if start_time is None else int(start_time)

    with store._transaction() as conn:
        activity_id = store.activity_kinds.id_for_kind(kind)
        cursor = conn.execute(
            f"INSERT INTO {TABLE_TRIP} ({TRIP_START_TIME}, {TRIP_END_TIME}, {TRIP_ACTIVITY_TYPE}, "
            f"{TRIP_START_LOCATION}, {TRIP_END_LOCATION}) VALUES (?, ?, ?, ?, ?)",
            (started, OPEN_TRIP_END_TIME, activity_id, UNSET_LOCATION_ID, UNSET_LOCATION_ID),
        )
        trip_id = cursor.lastrowid or 0

    logger.debug(f"Opened trip {trip_id} ({kind.value}, activity_id={activity_id})")
    return trip_id


def _update_trip_column(store: TripStore, trip_id: int, column: str, value: int) -> int:
    """Set one column of a trip, returning the affected row count."""
    with store._transaction() as conn:
        cursor = conn.execute(
            f"UPDATE {TABLE_TRIP} SET {column} = ? WHERE {TRIP_ID} = ?",
            (value, trip_id),
        )
        updated = cursor.rowcount

    if not updated:
        logger.debug(f"Trip {trip_id} not found, {column} not updated")
    return updated


def end_trip(store: TripStore, trip_id: int, end_time: int) -> int:
    """Set a trip's end time.

    Args:
        store: The TripStore instance.
        trip_id: Trip to close.
        end_time: End, seconds since epoch.

    Returns:
        Number of rows updated (0 if the trip does not exist).
    """
    return _update_trip_column(store, trip_id, TRIP_END_TIME, int(end_time))


def update_trip_start_location(store: TripStore, trip_id: int, location_id: int) -> int:
    """Set a trip's start location id (0 clears it)."""
    return _update_trip_column(store, trip_id, TRIP_START_LOCATION, int(location_id))


def update_trip_end_location(store: TripStore, trip_id: int, location_id: int) -> int:
    """Set a trip's end location id (0 clears it)."""
    return _update_trip_column(store, trip_id, TRIP_END_LOCATION, int(location_id))


def is_trip_start_location_set(store: TripStore, trip_id: int) -> bool:
    """Check whether a trip exists and has a positive start location id.

    Args:
        store: The TripStore instance.
        trip_id: Trip to check.

    Returns:
        True if the start location is set, False if unset or no such trip.
    """
    with store._read() as conn:
        row = conn.execute(
            f"SELECT {TRIP_START_LOCATION} FROM {TABLE_TRIP} WHERE {TRIP_ID} = ?",
            (trip_id,),
        ).fetchone()
    if row is None:
        return False
    return (row[TRIP_START_LOCATION] or UNSET_LOCATION_ID) > 0


def delete_trip(store: TripStore, trip_id: int) -> int:
    """Delete a trip.

    Locations referenced by the trip are kept; they may be shared with
    other trips.

    Args:
        store: The TripStore instance.
        trip_id: Trip to delete.

    Returns:
        Number of rows deleted (0 if the trip does not exist).
    """
    with store._transaction() as conn:
        cursor = conn.execute(f"DELETE FROM {TABLE_TRIP} WHERE {TRIP_ID} = ?", (trip_id,))
        deleted = cursor.rowcount

    if deleted:
        logger.info(f"Deleted trip {trip_id}")
    return deleted


def get_trip_activity(store: TripStore, trip_id: int) -> ActivityKind:
    """Get a trip's activity kind.

    Returns:
        The kind, or UNKNOWN if the trip is absent or its id is unmapped.
    """
    with store._read() as conn:
        row = conn.execute(
            f"SELECT {TRIP_ACTIVITY_TYPE} FROM {TABLE_TRIP} WHERE {TRIP_ID} = ?",
            (trip_id,),
        ).fetchone()
    if row is None:
        return ActivityKind.UNKNOWN
    return store.activity_kinds.kind_for_id(row[TRIP_ACTIVITY_TYPE])


def get_trip(store: TripStore, trip_id: int) -> Trip | None:
    """Get a trip by ID."""
    with store._read() as conn:
        row = conn.execute(
            f"SELECT {_TRIP_COLUMNS} FROM {TABLE_TRIP} WHERE {TRIP_ID} = ?",
            (trip_id,),
        ).fetchone()
    return Trip.from_row(row) if row else None


def get_open_trips(store: TripStore) -> list[Trip]:
    """Get trips that have not ended, oldest first.

    Lets a caller resume the trip that was in progress when the host
    application stopped.
    """
    with store._read() as conn:
        cursor = conn.execute(
            f"SELECT {_TRIP_COLUMNS} FROM {TABLE_TRIP} "
            f"WHERE {TRIP_END_TIME} = ? ORDER BY {TRIP_START_TIME}, {TRIP_ID}",
            (OPEN_TRIP_END_TIME,),
        )
        return [Trip.from_row(row) for row in cursor.fetchall()]
