"""Data models for the trip store.

Dataclasses representing persisted trips and locations, and the
UserActivity view reconstructed by the trip range query.
"""

import sqlite3
from dataclasses import dataclass, field

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
    TRIP_ACTIVITY_TYPE,
    TRIP_END_LOCATION,
    TRIP_END_TIME,
    TRIP_ID,
    TRIP_START_LOCATION,
    TRIP_START_TIME,
    UNSET_LOCATION_ID,
)
from activity_logger.models.enums import ActivityKind


@dataclass
class Trip:
    """A persisted trip row."""

    id: int | None = None
    start_time: int = 0
    end_time: int = OPEN_TRIP_END_TIME
    activity_id: int = 0
    start_location: int = UNSET_LOCATION_ID
    end_location: int = UNSET_LOCATION_ID

    @property
    def is_open(self) -> bool:
        """True while the trip has not concluded."""
        return self.end_time == OPEN_TRIP_END_TIME

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Trip":
        """Create from database row."""
        return cls(
            id=row[TRIP_ID],
            start_time=row[TRIP_START_TIME],
            end_time=row[TRIP_END_TIME] or OPEN_TRIP_END_TIME,
            activity_id=row[TRIP_ACTIVITY_TYPE],
            start_location=row[TRIP_START_LOCATION] or UNSET_LOCATION_ID,
            end_location=row[TRIP_END_LOCATION] or UNSET_LOCATION_ID,
        )


@dataclass
class Location:
    """A persisted location row."""

    id: int | None = None
    latitude: float = 0.0
    longitude: float = 0.0
    address: str | None = None  # Filled in by reverse geocoding

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Location":
        """Create from database row."""
        return cls(
            id=row[LOCATION_ID],
            latitude=row[LOCATION_LATITUDE],
            longitude=row[LOCATION_LONGITUDE],
            address=row[LOCATION_ADDRESS],
        )


@dataclass(frozen=True)
class ActivityLocation:
    """Location side of a UserActivity.

    A trip whose location is unset or missing gets zero coordinates and an
    empty address rather than being dropped from the result.
    """

    latitude: float = 0.0
    longitude: float = 0.0
    address: str = ""

    @classmethod
    def from_columns(
        cls, latitude: float | None, longitude: float | None, address: str | None
    ) -> "ActivityLocation":
        """Create from (possibly NULL) joined columns."""
        return cls(
            latitude=latitude or 0.0,
            longitude=longitude or 0.0,
            address=address or "",
        )


@dataclass
class UserActivity:
    """A closed trip joined with its locations and activity kind.

    header_text and header_id group consecutive rows sharing a date bucket
    for sticky-header list rendering. Both are assigned per query.
    """

    id: int
    start_time: int
    end_time: int
    activity: ActivityKind = ActivityKind.UNKNOWN
    start_location: ActivityLocation = field(default_factory=ActivityLocation)
    end_location: ActivityLocation = field(default_factory=ActivityLocation)
    header_text: str = ""
    header_id: int = 0

    @property
    def duration_seconds(self) -> int:
        """Trip duration in seconds (never negative)."""
        return max(0, self.end_time - self.start_time)

    @classmethod
    def from_row(cls, row: sqlite3.Row, activity: ActivityKind) -> "UserActivity":
        """Create from a trip range query row, without header fields."""
        return cls(
            id=row[TRIP_ID],
            start_time=row[TRIP_START_TIME],
            end_time=row[TRIP_END_TIME],
            activity=activity,
            start_location=ActivityLocation.from_columns(
                row[START_LATITUDE], row[START_LONGITUDE], row[START_ADDRESS]
            ),
            end_location=ActivityLocation.from_columns(
                row[END_LATITUDE], row[END_LONGITUDE], row[END_ADDRESS]
            ),
        )
