"""Activity kind mapping for the trip store.

The activity table assigns each ActivityKind an integer id when it is first
seeded. ActivityKindMap keeps the id <-> kind table in memory; it is rebuilt
as a whole and swapped in under a lock, so readers always see a complete
table without taking the lock themselves.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from activity_logger.constants import (
    ACTIVITY_ID,
    ACTIVITY_NAME,
    TABLE_ACTIVITY,
    UNMAPPED_ACTIVITY_ID,
)
from activity_logger.models.enums import ActivityKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _KindTable:
    by_id: Mapping[int, ActivityKind] = field(default_factory=lambda: MappingProxyType({}))
    by_kind: Mapping[ActivityKind, int] = field(default_factory=lambda: MappingProxyType({}))


class ActivityKindMap:
    """Read-mostly id <-> ActivityKind table."""

    def __init__(self) -> None:
        self._table = _KindTable()
        self._lock = threading.Lock()

    def replace(self, rows: Iterable[tuple[int, str | None]]) -> None:
        """Rebuild the table from (activity_id, activity_name) rows and swap it in.

        Unrecognized names map to UNKNOWN by id. The reverse lookup only uses
        rows whose stored name is exactly the kind's name, lowest id first.
        """
        by_id: dict[int, ActivityKind] = {}
        by_kind: dict[ActivityKind, int] = {}
        for activity_id, name in sorted(rows):
            kind = ActivityKind.from_name(name)
            by_id[activity_id] = kind
            if name == kind.value:
                by_kind.setdefault(kind, activity_id)

        table = _KindTable(MappingProxyType(by_id), MappingProxyType(by_kind))
        with self._lock:
            self._table = table

    def clear(self) -> None:
        """Forget all ids."""
        with self._lock:
            self._table = _KindTable()

    def kind_for_id(self, activity_id: int | None) -> ActivityKind:
        """Resolve a stored activity id; UNKNOWN when unmapped."""
        if activity_id is None:
            return ActivityKind.UNKNOWN
        return self._table.by_id.get(activity_id, ActivityKind.UNKNOWN)

    def id_for_kind(self, kind: ActivityKind) -> int:
        """Resolve a kind to its stored id.

        Falls back to the UNKNOWN row's id, then to 0, when the kind has no
        stored row.
        """
        table = self._table
        activity_id = table.by_kind.get(kind)
        if activity_id is not None:
            return activity_id
        return table.by_kind.get(ActivityKind.UNKNOWN, UNMAPPED_ACTIVITY_ID)

    def as_dict(self) -> dict[int, ActivityKind]:
        """Snapshot copy of the id -> kind table."""
        return dict(self._table.by_id)

    def __len__(self) -> int:
        return len(self._table.by_id)


def seed_activity_table(conn: sqlite3.Connection) -> bool:
    """Insert one row per ActivityKind if the activity table is empty.

    Args:
        conn: Database connection (within transaction).

    Returns:
        True if rows were inserted, False if the table was already seeded.
    """
    count = conn.execute(f"SELECT COUNT(*) FROM {TABLE_ACTIVITY}").fetchone()[0]
    if count:
        return False

    # INSERT OR IGNORE: another process may have seeded since the count
    conn.executemany(
        f"INSERT OR IGNORE INTO {TABLE_ACTIVITY} ({ACTIVITY_NAME}) VALUES (?)",
        [(kind.value,) for kind in ActivityKind],
    )
    logger.info(f"Seeded activity table with {len(ActivityKind)} kinds")
    return True


def load_activity_rows(conn: sqlite3.Connection) -> list[tuple[int, str | None]]:
    """Read every (activity_id, activity_name) row."""
    cursor = conn.execute(
        f"SELECT {ACTIVITY_ID}, {ACTIVITY_NAME} FROM {TABLE_ACTIVITY} ORDER BY {ACTIVITY_ID}"
    )
    return [(row[ACTIVITY_ID], row[ACTIVITY_NAME]) for row in cursor.fetchall()]
