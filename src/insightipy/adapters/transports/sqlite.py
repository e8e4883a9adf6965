"""SQLite outbox transport for telemetry records.

Records are written synchronously on the logging caller's thread (sqlite3)
and drained asynchronously by a shipper (aiosqlite). Uses WAL mode so the
writer and the reader do not block each other on file databases.

On :memory: only the synchronous side (track, read_sync, clear_sync)
sees the stored rows; use a file path when an async reader must see them.
"""

import json
from collections.abc import AsyncIterable
from typing import Any

from insightipy.adapters.transports.sqlite_base import (
    SyncConnections,
    async_connection,
)
from insightipy.core.encoding.ndjson import encode_record
from insightipy.core.models import TelemetryRecord

_TELEMETRY_SCHEMA = """
CREATE TABLE IF NOT EXISTS telemetry (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp REAL NOT NULL,
    kind TEXT NOT NULL,
    payload TEXT NOT NULL DEFAULT '{}'
);
CREATE INDEX IF NOT EXISTS idx_telemetry_timestamp ON telemetry(timestamp);
CREATE INDEX IF NOT EXISTS idx_telemetry_kind_timestamp ON telemetry(kind, timestamp);
"""

_INSERT_TELEMETRY = """
INSERT INTO telemetry (timestamp, kind, payload) VALUES (?, ?, ?)
"""

_SELECT_TELEMETRY = """
SELECT payload
FROM telemetry
WHERE timestamp > ?
ORDER BY timestamp ASC, id ASC
"""

_SELECT_TELEMETRY_BY_KIND = """
SELECT payload
FROM telemetry
WHERE timestamp > ? AND kind = ?
ORDER BY timestamp ASC, id ASC
"""

_COUNT_TELEMETRY = """
SELECT COUNT(*) FROM telemetry
"""

_DELETE_TELEMETRY_BEFORE = """
DELETE FROM telemetry WHERE timestamp < ?
"""

_CLEAR_TELEMETRY = """
DELETE FROM telemetry
"""


def _decode_payload(payload: str) -> dict[str, Any]:
    try:
        decoded: dict[str, Any] = json.loads(payload)
    except json.JSONDecodeError:
        return {}
    return decoded


class SQLiteTelemetryTransport:
    """SQLite implementation of TelemetryTransportPort.

    ``track`` stores each record as its NDJSON payload. Readers get the
    decoded payload dicts back (see ``encoding.ndjson.record_to_dict``).

    Args:
        db_path: Database file path, or ":memory:".
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._sync = SyncConnections(db_path, _TELEMETRY_SCHEMA)

    # --- TelemetryTransportPort ---

    def track(self, record: TelemetryRecord) -> None:
        """Store a telemetry record."""
        with self._sync.connection() as conn:
            conn.execute(
                _INSERT_TELEMETRY,
                (record.timestamp.timestamp(), record.kind, encode_record(record)),
            )
            conn.commit()

    def flush(self) -> None:
        """Every track commits immediately; nothing is pending."""

    # --- Async reader side ---

    async def read(
        self, since: float = 0, kind: str | None = None
    ) -> AsyncIterable[dict[str, Any]]:
        """Read stored records with timestamp > since, oldest first.

        Args:
            since: Unix timestamp. Default 0 returns all records.
            kind: Optional record kind filter ("trace", "event", "exception").
        """
        query, params = (
            (_SELECT_TELEMETRY, (since,))
            if kind is None
            else (_SELECT_TELEMETRY_BY_KIND, (since, kind))
        )
        async with async_connection(self._db_path, _TELEMETRY_SCHEMA) as db:
            async with db.execute(query, params) as cursor:
                async for row in cursor:
                    yield _decode_payload(row[0])

    async def count(self) -> int:
        """Return the number of stored records."""
        async with async_connection(self._db_path, _TELEMETRY_SCHEMA) as db:
            async with db.execute(_COUNT_TELEMETRY) as cursor:
                row = await cursor.fetchone()
                return row[0] if row else 0

    async def delete_before(self, timestamp: float) -> int:
        """Delete records older than timestamp; return how many were deleted."""
        async with async_connection(self._db_path, _TELEMETRY_SCHEMA) as db:
            cursor = await db.execute(_DELETE_TELEMETRY_BEFORE, (timestamp,))
            deleted = cursor.rowcount
            await db.commit()
            return deleted

    async def clear(self) -> None:
        """Delete all stored records."""
        async with async_connection(self._db_path, _TELEMETRY_SCHEMA) as db:
            await db.execute(_CLEAR_TELEMETRY)
            await db.commit()

    async def close(self) -> None:
        """Release the :memory: database; file databases hold no open connection."""
        self._sync.close()

    # --- Sync reader side (testing, non-async hosts) ---

    def read_sync(self, since: float = 0) -> list[dict[str, Any]]:
        """Synchronous read for non-async contexts."""
        with self._sync.connection() as conn:
            cursor = conn.execute(_SELECT_TELEMETRY, (since,))
            return [_decode_payload(row[0]) for row in cursor]

    def clear_sync(self) -> None:
        """Synchronous clear for non-async contexts."""
        with self._sync.connection() as conn:
            conn.execute(_CLEAR_TELEMETRY)
            conn.commit()
