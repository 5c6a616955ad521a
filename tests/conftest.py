"""Pytest configuration and fixtures for activity-logger tests."""

import os
from collections.abc import Iterator
from pathlib import Path

import pytest

from activity_logger.store.core import TripStore, reset_trip_store


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path to a not-yet-created trip database."""
    return tmp_path / "data" / "trips.db"


@pytest.fixture
def store(db_path: Path) -> Iterator[TripStore]:
    """Open a TripStore backed by a real temp SQLite database.

    Yields:
        Open TripStore; closed after the test.
    """
    trip_store = TripStore(db_path).open()
    try:
        yield trip_store
    finally:
        trip_store.close()


@pytest.fixture(autouse=True)
def _reset_shared_store() -> Iterator[None]:
    """Make sure no test leaks the process-wide store into another."""
    yield
    reset_trip_store()


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop ACTIVITY_LOGGER_* variables inherited from the developer's shell."""
    for key in list(os.environ):
        if key.startswith("ACTIVITY_LOGGER_"):
            monkeypatch.delenv(key, raising=False)
