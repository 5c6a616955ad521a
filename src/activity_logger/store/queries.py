"""Trip range queries for the trip store.

Reconstructs closed trips together with their start and end locations and
activity kind, then groups them under date headers.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from activity_logger.constants import (
    END_ADDRESS,
    END_LATITUDE,
    END_LONGITUDE,
    LOCATION_ADDRESS,
    LOCATION_ID,
    LOCATION_LATITUDE,
    LOCATION_LONGITUDE,
    OPEN_TRIP_END_TIME,
    START_ADDRESS,
    START_LATITUDE,
    START_LONGITUDE,
    TABLE_LOCATION,
    TABLE_TRIP,
    TRIP_ACTIVITY_TYPE,
    TRIP_END_LOCATION,
    TRIP_END_TIME,
    TRIP_ID,
    TRIP_START_LOCATION,
    TRIP_START_TIME,
)
from activity_logger.store.headers import assign_headers
from activity_logger.store.models import UserActivity

if TYPE_CHECKING:
    from activity_logger.store.core import TripStore

logger = logging.getLogger(__name__)

# Each trip is joined twice against location (start side l1, end side l2).
# LEFT JOIN keeps trips whose location ids are unset or dangling.
TRIP_RANGE_SQL = f"""
SELECT t.{TRIP_ID}, t.{TRIP_START_TIME}, t.{TRIP_END_TIME}, t.{TRIP_ACTIVITY_TYPE},
       l1.{LOCATION_LATITUDE} AS {START_LATITUDE},
       l1.{LOCATION_LONGITUDE} AS {START_LONGITUDE},
       l1.{LOCATION_ADDRESS} AS {START_ADDRESS},
       l2.{LOCATION_LATITUDE} AS {END_LATITUDE},
       l2.{LOCATION_LONGITUDE} AS {END_LONGITUDE},
       l2.{LOCATION_ADDRESS} AS {END_ADDRESS}
FROM {TABLE_TRIP} AS t
LEFT JOIN {TABLE_LOCATION} AS l1 ON t.{TRIP_START_LOCATION} = l1.{LOCATION_ID}
LEFT JOIN {TABLE_LOCATION} AS l2 ON t.{TRIP_END_LOCATION} = l2.{LOCATION_ID}
WHERE t.{TRIP_START_TIME} > ? AND t.{TRIP_START_TIME} < ?
  AND t.{TRIP_END_TIME} > ?
ORDER BY t.{TRIP_ID}
"""


def get_trips(
    store: TripStore, start_time: int | None = None, end_time: int | None = None
) -> list[UserActivity]:
    """Get closed trips whose start time lies strictly inside a range.

    Open trips (end time 0) are never returned. Rows come back in trip id
    order with header_text/header_id assigned by the store's header labeler.

    Args:
        store: The TripStore instance.
        start_time: Exclusive lower bound, seconds since epoch (default 0).
        end_time: Exclusive upper bound, seconds since epoch (default now).

    Returns:
        List of UserActivity views.
    """
    lower = 0 if start_time is None else int(start_time)
    upper = int(time.time()) if end_time is None else int(end_time)

    with store._read() as conn:
        rows = conn.execute(TRIP_RANGE_SQL, (lower, upper, OPEN_TRIP_END_TIME)).fetchall()

    kinds = store.activity_kinds
    activities = [
        UserActivity.from_row(row, kinds.kind_for_id(row[TRIP_ACTIVITY_TYPE])) for row in rows
    ]
    logger.debug(f"Loaded {len(activities)} trips between {lower} and {upper}")
    return assign_headers(activities, store.header_labeler)
