"""Connections for the SQLite telemetry outbox.

File databases get one connection per call and run in WAL mode, so the
writer thread and async readers do not block each other. A :memory:
database lives only as long as its connection: the writer keeps a single
one open, shared under a lock. Async readers never see it; on :memory: each
async call opens a new, empty database.
"""

import sqlite3
import threading
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager

import aiosqlite

MEMORY_DB = ":memory:"


@asynccontextmanager
async def async_connection(
    db_path: str, schema: str
) -> AsyncIterator[aiosqlite.Connection]:
    """Open an aiosqlite connection with the schema in place."""
    async with aiosqlite.connect(db_path) as db:
        await db.executescript(schema)
        yield db


class SyncConnections:
    """sqlite3 connections for the writer, which runs on the caller's thread."""

    def __init__(self, db_path: str, schema: str) -> None:
        self._db_path = db_path
        self._schema = schema
        self._lock = threading.Lock()
        self._memory_conn: sqlite3.Connection | None = None
        self._file_ready = False

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        if self._db_path == MEMORY_DB:
            with self._lock:
                if self._memory_conn is None:
                    self._memory_conn = sqlite3.connect(
                        MEMORY_DB, check_same_thread=False
                    )
                    self._memory_conn.executescript(self._schema)
                yield self._memory_conn
            return

        self._prepare_file()
        conn = sqlite3.connect(self._db_path)
        try:
            yield conn
        finally:
            conn.close()

    def _prepare_file(self) -> None:
        with self._lock:
            if self._file_ready:
                return
            conn = sqlite3.connect(self._db_path)
            try:
                conn.execute("PRAGMA journal_mode=WAL")
                conn.executescript(self._schema)
            finally:
                conn.close()
            self._file_ready = True

    def close(self) -> None:
        """Drop the :memory: database, if one was opened."""
        with self._lock:
            if self._memory_conn is not None:
                self._memory_conn.close()
                self._memory_conn = None
