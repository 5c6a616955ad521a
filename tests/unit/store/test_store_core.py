"""Tests for TripStore lifecycle, schema setup and the shared instance.

Covers:
- open(): schema creation, activity seeding, idempotent re-open
- close(): repeated close, fail-fast operations afterwards, re-open
- get_trip_store(): exactly one instance under concurrent first access
"""

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path
from unittest.mock import patch

import pytest

from activity_logger.config.settings import StoreSettings
from activity_logger.exceptions import StorageError, StoreConnectionError
from activity_logger.models.enums import ActivityKind
from activity_logger.store import core
from activity_logger.store.core import TripStore, get_trip_store, reset_trip_store
from activity_logger.store.schema import SCHEMA_VERSION


def _activity_rows(db_path: Path) -> list[tuple[int, str]]:
    conn = sqlite3.connect(str(db_path))
    try:
        return conn.execute(
            "SELECT activity_id, activity_name FROM activity ORDER BY activity_id"
        ).fetchall()
    finally:
        conn.close()


# ==========================================================================
# open()
# ==========================================================================


class TestOpen:
    """Schema creation and activity seeding."""

    def test_open_creates_database_and_parent_dirs(self, db_path: Path) -> None:
        store = TripStore(db_path)
        assert not db_path.exists()

        store.open()
        try:
            assert db_path.exists()
            assert store.is_open
            assert store.get_schema_version() == SCHEMA_VERSION
        finally:
            store.close()

    def test_seeds_one_row_per_kind(self, store: TripStore, db_path: Path) -> None:
        names = [name for _, name in _activity_rows(db_path)]

        assert sorted(names) == sorted(ActivityKind.values())
        assert set(store.activity_kinds.as_dict().values()) == set(ActivityKind)

    def test_reopen_does_not_duplicate_rows(self, db_path: Path) -> None:
        store = TripStore(db_path).open()
        first = _activity_rows(db_path)
        store.close()
        store.open()
        store.open()  # already open: no-op
        store.close()

        second_store = TripStore(db_path).open()
        second_store.close()

        assert _activity_rows(db_path) == first
        assert len(first) == len(ActivityKind)

    def test_loads_existing_ids_instead_of_reseeding(self, db_path: Path) -> None:
        TripStore(db_path).open().close()
        ids_before = dict(_activity_rows(db_path))

        store = TripStore(db_path).open()
        try:
            mapping = store.activity_kinds.as_dict()
        finally:
            store.close()

        assert {k: v.value for k, v in mapping.items()} == ids_before

    def test_unrecognized_stored_name_maps_to_unknown(self, db_path: Path) -> None:
        TripStore(db_path).open().close()
        conn = sqlite3.connect(str(db_path))
        try:
            cursor = conn.execute("INSERT INTO activity (activity_name) VALUES ('tilting')")
            tilting_id = cursor.lastrowid
            conn.commit()
        finally:
            conn.close()

        store = TripStore(db_path).open()
        try:
            assert store.activity_kinds.kind_for_id(tilting_id) is ActivityKind.UNKNOWN
            # The real UNKNOWN row still wins for reverse lookups
            unknown_id = dict((name, i) for i, name in _activity_rows(db_path))["unknown"]
            assert store.activity_kinds.id_for_kind(ActivityKind.UNKNOWN) == unknown_id
        finally:
            store.close()

    def test_concurrent_open_seeds_once(self, db_path: Path) -> None:
        store = TripStore(db_path)
        barrier = threading.Barrier(6)

        def _open() -> None:
            barrier.wait()
            store.open()

        with patch.object(core, "seed_activity_table", wraps=core.seed_activity_table) as seed:
            threads = [threading.Thread(target=_open) for _ in range(6)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

        try:
            assert seed.call_count == 1
            assert len(_activity_rows(db_path)) == len(ActivityKind)
        finally:
            store.close()

    def test_context_manager_opens_and_closes(self, db_path: Path) -> None:
        with TripStore(db_path) as store:
            assert store.is_open
            store.add_trip(ActivityKind.STILL)
        assert not store.is_open

    def test_open_fails_for_unusable_path(self, tmp_path: Path) -> None:
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("x")
        store = TripStore(blocker / "trips.db")

        with pytest.raises(StorageError):
            store.open()
        assert not store.is_open

    def test_open_fails_for_file_that_is_not_a_database(self, db_path: Path) -> None:
        db_path.parent.mkdir(parents=True)
        db_path.write_bytes(b"definitely not sqlite " * 100)
        store = TripStore(db_path)

        with pytest.raises(StoreConnectionError):
            store.open()
        assert not store.is_open
        assert store._connections == []


# ==========================================================================
# close()
# ==========================================================================


class TestClose:
    """Closing releases connections and makes operations fail fast."""

    def test_close_twice_is_safe(self, store: TripStore) -> None:
        store.close()
        store.close()
        assert not store.is_open

    def test_close_before_open_is_safe(self, db_path: Path) -> None:
        TripStore(db_path).close()

    @pytest.mark.parametrize(
        "operation",
        [
            lambda s: s.add_trip(ActivityKind.WALKING),
            lambda s: s.end_trip(1, 100),
            lambda s: s.update_trip_start_location(1, 1),
            lambda s: s.update_trip_end_location(1, 1),
            lambda s: s.is_trip_start_location_set(1),
            lambda s: s.delete_trip(1),
            lambda s: s.get_trip_activity(1),
            lambda s: s.add_location(1.0, 2.0),
            lambda s: s.update_location_address(1, "somewhere"),
            lambda s: s.get_trips(),
        ],
    )
    def test_operations_after_close_raise(self, store: TripStore, operation) -> None:
        store.close()

        with pytest.raises(StoreConnectionError, match="not open"):
            operation(store)

    def test_operations_before_open_raise(self, db_path: Path) -> None:
        with pytest.raises(StoreConnectionError):
            TripStore(db_path).get_trips()

    def test_close_releases_connections_of_all_threads(self, store: TripStore) -> None:
        barrier = threading.Barrier(3)

        def _work() -> None:
            store.add_location(1.0, 2.0)
            # Keep every worker alive until all have connected
            barrier.wait()

        threads = [threading.Thread(target=_work) for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(store._connections) >= 3

        store.close()

        assert store._connections == []

    def test_connections_of_exited_threads_are_released(self, store: TripStore) -> None:
        worker_connections: list[sqlite3.Connection] = []

        def _work() -> None:
            store.add_location(1.0, 2.0)
            worker_connections.append(store._get_connection())

        for _ in range(20):
            t = threading.Thread(target=_work)
            t.start()
            t.join()

        # Main thread's connection plus the last worker's
        assert len(store._connections) <= 2
        for conn in worker_connections[:-1]:
            with pytest.raises(sqlite3.ProgrammingError):
                conn.execute("SELECT 1")
        assert store.get_trips() == []

    def test_reopen_after_close(self, store: TripStore) -> None:
        trip_id = store.add_trip(ActivityKind.RUNNING)
        store.close()

        store.open()

        assert store.get_trip_activity(trip_id) is ActivityKind.RUNNING


# ==========================================================================
# Concurrent use
# ==========================================================================


def test_concurrent_writers_share_one_store(store: TripStore) -> None:
    barrier = threading.Barrier(4)

    def _writer() -> None:
        barrier.wait()
        for _ in range(10):
            store.add_trip(ActivityKind.WALKING)

    threads = [threading.Thread(target=_writer) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store.get_open_trips()) == 40


# ==========================================================================
# Shared instance
# ==========================================================================


class TestSharedStore:
    """get_trip_store() / reset_trip_store()."""

    def test_returns_same_open_instance(self, db_path: Path) -> None:
        settings = StoreSettings(db_path=db_path)

        first = get_trip_store(settings)
        second = get_trip_store()

        assert first is second
        assert first.is_open
        assert first.db_path == db_path

    def test_concurrent_first_access_constructs_once(self, db_path: Path) -> None:
        settings = StoreSettings(db_path=db_path)
        barrier = threading.Barrier(8)
        results: list[TripStore] = []
        results_lock = threading.Lock()

        def _get() -> None:
            barrier.wait()
            s = get_trip_store(settings)
            with results_lock:
                results.append(s)

        with patch.object(core, "TripStore", wraps=TripStore) as ctor:
            threads = [threading.Thread(target=_get) for _ in range(8)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

        assert ctor.call_count == 1
        assert len(results) == 8
        assert all(r is results[0] for r in results)

    def test_reset_closes_shared_store(self, db_path: Path) -> None:
        shared = get_trip_store(StoreSettings(db_path=db_path))

        reset_trip_store()

        assert not shared.is_open
        assert get_trip_store(StoreSettings(db_path=db_path)) is not shared

    def test_uses_environment_settings(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        env_db = tmp_path / "env" / "trips.db"
        monkeypatch.setenv("ACTIVITY_LOGGER_DB_PATH", str(env_db))

        shared = get_trip_store()

        assert shared.db_path == env_db
        assert env_db.exists()
