"""Trip store package.

Modules:
- schema.py: Database schema version and SQL
- migrations.py: Schema migration logic
- models.py: Data models (Trip, Location, ActivityLocation, UserActivity)
- activity_kinds.py: Activity table seeding and the id <-> kind map
- core.py: Main TripStore class with connection management
- trips.py: Trip CRUD operations
- locations.py: Location CRUD operations
- queries.py: Trip range query
- headers.py: Date bucket headers for trip lists
"""

from activity_logger.store.core import TripStore, get_trip_store, reset_trip_store
from activity_logger.store.headers import assign_headers, trip_header_label
from activity_logger.store.models import ActivityLocation, Location, Trip, UserActivity
from activity_logger.store.schema import SCHEMA_SQL, SCHEMA_VERSION

__all__ = [
    # Main class and shared instance
    "TripStore",
    "get_trip_store",
    "reset_trip_store",
    # Data models
    "ActivityLocation",
    "Location",
    "Trip",
    "UserActivity",
    # Headers
    "assign_headers",
    "trip_header_label",
    # Schema constants
    "SCHEMA_VERSION",
    "SCHEMA_SQL",
]
