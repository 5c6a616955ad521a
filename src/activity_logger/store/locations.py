"""Location operations for the trip store.

Locations are created from raw coordinates and get their address later,
once reverse geocoding has resolved it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from activity_logger.constants import (
    LOCATION_ADDRESS,
    LOCATION_ID,
    LOCATION_LATITUDE,
    LOCATION_LONGITUDE,
    TABLE_LOCATION,
)
from activity_logger.store.models import Location

if TYPE_CHECKING:
    from activity_logger.store.core import TripStore

logger = logging.getLogger(__name__)


def add_location(store: TripStore, latitude: float, longitude: float) -> int:
    """Add a location with no address.

    Args:
        store: The TripStore instance.
        latitude: Latitude in decimal degrees (required).
        longitude: Longitude in decimal degrees (required).

    Returns:
        ID of inserted location.

    Raises:
        ConstraintError: If latitude or longitude is missing.
    """
    with store._transaction() as conn:
        cursor = conn.execute(
            f"INSERT INTO {TABLE_LOCATION} ({LOCATION_LATITUDE}, {LOCATION_LONGITUDE}) "
            "VALUES (?, ?)",
            (latitude, longitude),
        )
        location_id = cursor.lastrowid or 0

    logger.debug(f"Added location {location_id} ({latitude}, {longitude})")
    return location_id


def update_location_address(store: TripStore, location_id: int, address: str) -> int:
    """Set a location's address.

    Returns:
        Number of rows updated (0 if the location does not exist).
    """
    with store._transaction() as conn:
        cursor = conn.execute(
            f"UPDATE {TABLE_LOCATION} SET {LOCATION_ADDRESS} = ? WHERE {LOCATION_ID} = ?",
            (address, location_id),
        )
        return cursor.rowcount


def get_location(store: TripStore, location_id: int) -> Location | None:
    """Get a location by ID."""
    with store._read() as conn:
        row = conn.execute(
            f"SELECT {LOCATION_ID}, {LOCATION_LATITUDE}, {LOCATION_LONGITUDE}, {LOCATION_ADDRESS} "
            f"FROM {TABLE_LOCATION} WHERE {LOCATION_ID} = ?",
            (location_id,),
        ).fetchone()
    return Location.from_row(row) if row else None
