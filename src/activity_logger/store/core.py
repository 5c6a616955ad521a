"""Core TripStore class for the trip store.

Contains the main TripStore class with connection management, schema
setup and delegation to operation modules, plus the process-wide shared
instance.
"""

import logging
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from activity_logger.config.settings import StoreSettings, load_settings
from activity_logger.constants import DEFAULT_CONNECT_TIMEOUT_SECONDS, TABLE_SCHEMA_VERSION
from activity_logger.exceptions import (
    ConstraintError,
    StorageError,
    StoreConnectionError,
)
from activity_logger.models.enums import ActivityKind
from activity_logger.store import locations, queries, trips
from activity_logger.store.activity_kinds import (
    ActivityKindMap,
    load_activity_rows,
    seed_activity_table,
)
from activity_logger.store.headers import HeaderLabeler, trip_header_label
from activity_logger.store.migrations import apply_migrations
from activity_logger.store.models import Location, Trip, UserActivity
from activity_logger.store.schema import SCHEMA_SQL, SCHEMA_VERSION

logger = logging.getLogger(__name__)


def translate_error(error: sqlite3.Error) -> StorageError:
    """Map a sqlite3 exception onto the package's storage errors."""
    message = str(error)
    if isinstance(error, sqlite3.IntegrityError):
        return ConstraintError(f"Constraint violated: {message}", cause=error)
    if isinstance(error, sqlite3.ProgrammingError) and "closed" in message.lower():
        return StoreConnectionError(f"Trip store connection is closed: {message}", cause=error)
    if isinstance(error, sqlite3.OperationalError) and "unable to open" in message.lower():
        return StoreConnectionError(f"Trip store is unreachable: {message}", cause=error)
    return StorageError(f"Trip store operation failed: {message}", cause=error)


class TripStore:
    """SQLite-based store for trips and locations.

    Lifecycle: construct, open(), use, close(). Every operation raises
    StoreConnectionError while the store is not open. A closed store can
    be opened again.

    Each thread gets its own connection; close() closes the connections of
    all threads.
    """

    def __init__(
        self,
        db_path: Path,
        *,
        timeout: float = DEFAULT_CONNECT_TIMEOUT_SECONDS,
        header_labeler: HeaderLabeler | None = None,
    ):
        """Initialize the trip store without touching the database.

        Args:
            db_path: Path to SQLite database file.
            timeout: Seconds a connection waits on a locked database.
            header_labeler: Maps a trip start time to its list header label.
        """
        self.db_path = Path(db_path)
        self.timeout = timeout
        self.header_labeler: HeaderLabeler = header_labeler or trip_header_label
        self.activity_kinds = ActivityKindMap()
        self._local = threading.local()
        # (owning thread, connection) pairs, closed by close()
        self._connections: list[tuple[threading.Thread, sqlite3.Connection]] = []
        self._connections_lock = threading.Lock()
        # Serializes open/close, which also serializes schema setup and seeding
        self._lifecycle_lock = threading.Lock()
        self._open = False
        # Bumped on every open so thread-local connections from a previous
        # lifetime are never reused
        self._generation = 0

    # ==========================================================================
    # Lifecycle
    # ==========================================================================

    @property
    def is_open(self) -> bool:
        """True between open() and close()."""
        return self._open

    def open(self) -> "TripStore":
        """Open the store: create or migrate the schema and load activity kinds.

        No-op when already open.

        Returns:
            The store itself, for chaining.

        Raises:
            StoreConnectionError: If the database cannot be opened.
            StorageError: If schema setup fails.
        """
        with self._lifecycle_lock:
            if self._open:
                return self

            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StoreConnectionError(
                    f"Cannot create database directory {self.db_path.parent}: {e}"
                ) from e

            self._generation += 1
            self._open = True
            try:
                self._ensure_schema()
                self._load_activity_kinds()
            except Exception:
                self._open = False
                self._close_connections()
                raise

        logger.info(f"Trip store opened at {self.db_path} ({len(self.activity_kinds)} kinds)")
        return self

    def close(self) -> None:
        """Close every connection. Safe to call repeatedly."""
        with self._lifecycle_lock:
            if not self._open:
                return
            self._open = False
            self._close_connections()
            self.activity_kinds.clear()
        logger.info(f"Trip store closed at {self.db_path}")

    def __enter__(self) -> "TripStore":
        return self.open()

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ==========================================================================
    # Connections
    # ==========================================================================

    def _connect(self) -> sqlite3.Connection:
        """Create a new connection and register it for close().

        Connections of threads that have exited are closed and dropped from
        the registry first.
        """
        try:
            conn = sqlite3.connect(
                str(self.db_path),
                check_same_thread=False,
                timeout=self.timeout,
            )
        except sqlite3.Error as e:
            raise StoreConnectionError(f"Cannot open trip store at {self.db_path}: {e}") from e

        try:
            conn.row_factory = sqlite3.Row
            # WAL lets readers proceed while another thread writes
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA synchronous=NORMAL")
            conn.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as e:
            conn.close()
            raise StoreConnectionError(f"Cannot open trip store at {self.db_path}: {e}") from e

        with self._connections_lock:
            if not self._open:
                conn.close()
                raise StoreConnectionError("Trip store is not open")
            stale = [c for t, c in self._connections if not t.is_alive()]
            self._connections = [(t, c) for t, c in self._connections if t.is_alive()]
            self._connections.append((threading.current_thread(), conn))
        for stale_conn in stale:
            stale_conn.close()
        logger.debug(f"Opened connection to {self.db_path} on {threading.current_thread().name}")
        return conn

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection.

        Raises:
            StoreConnectionError: If the store is not open.
        """
        if not self._open:
            raise StoreConnectionError("Trip store is not open")
        conn = getattr(self._local, "conn", None)
        if conn is None or getattr(self._local, "generation", None) != self._generation:
            conn = self._connect()
            self._local.conn = conn
            self._local.generation = self._generation
        return conn

    def _close_connections(self) -> None:
        with self._connections_lock:
            connections = [conn for _, conn in self._connections]
            self._connections.clear()
        for conn in connections:
            try:
                conn.close()
            except sqlite3.Error as e:
                logger.warning(f"Error closing trip store connection: {e}")
        self._local.conn = None

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database transactions.

        Commits on success. On failure rolls back and raises the translated
        StorageError, so no partial write is left behind.
        """
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            try:
                conn.rollback()
            except sqlite3.Error as rollback_error:
                # Connection already unusable (e.g. closed by another thread)
                logger.debug(f"Rollback skipped: {rollback_error}")
            logger.error(f"Database transaction error: {e}", exc_info=True)
            raise translate_error(e) from e

    @contextmanager
    def _read(self) -> Iterator[sqlite3.Connection]:
        """Context manager for read-only queries with error translation."""
        conn = self._get_connection()
        try:
            yield conn
        except sqlite3.Error as e:
            logger.error(f"Database query error: {e}", exc_info=True)
            raise translate_error(e) from e

    # ==========================================================================
    # Schema
    # ==========================================================================

    def _ensure_schema(self) -> None:
        """Create database schema if needed, applying migrations for existing databases."""
        with self._transaction() as conn:
            try:
                row = conn.execute(
                    f"SELECT MAX(version) FROM {TABLE_SCHEMA_VERSION} WHERE version <= ?",
                    (SCHEMA_VERSION,),
                ).fetchone()
                current_version = row[0] if row and row[0] is not None else 0
            except sqlite3.OperationalError:
                current_version = 0

            if current_version >= SCHEMA_VERSION:
                return

            if current_version == 0:
                # Fresh database - apply full schema
                conn.executescript(SCHEMA_SQL)
            else:
                apply_migrations(conn, current_version)

            conn.execute(f"DELETE FROM {TABLE_SCHEMA_VERSION}")
            conn.execute(
                f"INSERT INTO {TABLE_SCHEMA_VERSION} (version) VALUES (?)",
                (SCHEMA_VERSION,),
            )
            logger.info(f"Trip store schema initialized (v{SCHEMA_VERSION})")

    def _load_activity_kinds(self) -> None:
        """Seed the activity table if empty, then load the id <-> kind map."""
        with self._transaction() as conn:
            seed_activity_table(conn)
            rows = load_activity_rows(conn)
        self.activity_kinds.replace(rows)

    def get_schema_version(self) -> int:
        """Get current database schema version."""
        with self._read() as conn:
            row = conn.execute(
                f"SELECT version FROM {TABLE_SCHEMA_VERSION} ORDER BY version DESC LIMIT 1"
            ).fetchone()
            return row[0] if row else 0

    # ==========================================================================
    # Trip operations - delegate to trips module
    # ==========================================================================

    def add_trip(self, kind: ActivityKind | str | None, start_time: int | None = None) -> int:
        """Open a new trip for an activity kind."""
        return trips.add_trip(self, kind, start_time)

    def end_trip(self, trip_id: int, end_time: int) -> int:
        """Set a trip's end time."""
        return trips.end_trip(self, trip_id, end_time)

    def update_trip_start_location(self, trip_id: int, location_id: int) -> int:
        """Attach a start location to a trip."""
        return trips.update_trip_start_location(self, trip_id, location_id)

    def update_trip_end_location(self, trip_id: int, location_id: int) -> int:
        """Attach an end location to a trip."""
        return trips.update_trip_end_location(self, trip_id, location_id)

    def is_trip_start_location_set(self, trip_id: int) -> bool:
        """Check whether a trip has a start location."""
        return trips.is_trip_start_location_set(self, trip_id)

    def delete_trip(self, trip_id: int) -> int:
        """Delete a trip (its locations are kept)."""
        return trips.delete_trip(self, trip_id)

    def get_trip_activity(self, trip_id: int) -> ActivityKind:
        """Get the activity kind of a trip."""
        return trips.get_trip_activity(self, trip_id)

    def get_trip(self, trip_id: int) -> Trip | None:
        """Get a trip by ID."""
        return trips.get_trip(self, trip_id)

    def get_open_trips(self) -> list[Trip]:
        """Get trips that have not ended yet."""
        return trips.get_open_trips(self)

    # ==========================================================================
    # Location operations - delegate to locations module
    # ==========================================================================

    def add_location(self, latitude: float, longitude: float) -> int:
        """Add a location without an address."""
        return locations.add_location(self, latitude, longitude)

    def update_location_address(self, location_id: int, address: str) -> int:
        """Set a location's address."""
        return locations.update_location_address(self, location_id, address)

    def get_location(self, location_id: int) -> Location | None:
        """Get a location by ID."""
        return locations.get_location(self, location_id)

    # ==========================================================================
    # Range queries - delegate to queries module
    # ==========================================================================

    def get_trips(
        self, start_time: int | None = None, end_time: int | None = None
    ) -> list[UserActivity]:
        """Get closed trips started strictly between start_time and end_time."""
        return queries.get_trips(self, start_time, end_time)


# =============================================================================
# Shared instance
# =============================================================================

_shared_store: TripStore | None = None
_shared_store_lock = threading.Lock()


def get_trip_store(settings: StoreSettings | None = None) -> TripStore:
    """Get the process-wide TripStore, opening it on first access.

    The instance is constructed exactly once even when several threads call
    this at the same time. Settings are only used on the first call.

    Args:
        settings: Store settings (defaults to load_settings()).

    Returns:
        The shared TripStore.
    """
    global _shared_store
    with _shared_store_lock:
        if _shared_store is None:
            settings = settings or load_settings()
            store = TripStore(settings.db_path, timeout=settings.connect_timeout_seconds)
            store.open()
            _shared_store = store
        return _shared_store


def reset_trip_store() -> None:
    """Close and forget the shared TripStore.

    Useful for testing or when the database path changes.
    """
    global _shared_store
    with _shared_store_lock:
        if _shared_store is not None:
            _shared_store.close()
        _shared_store = None
