"""SQLite-backed review store for local runs without a MongoDB server."""

from __future__ import annotations

import asyncio
import logging
import os
import sqlite3
from collections.abc import Sequence
from datetime import datetime, timezone

import aiosqlite

from reviewdesk.errors import BackendUnavailableError, WriteFailedError
from reviewdesk.models import Review

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "data/reviews.db"


class SqliteReviewStore:
    """Async SQLite writer for review snapshots.

    One connection is shared by every submission. Opening it and each bulk
    write run under ``_lock`` so overlapping submissions neither open a second
    connection nor commit or roll back each other's rows.
    """

    name = "sqlite"

    def __init__(self, db_path: str = DEFAULT_DB_PATH) -> None:
        self.db_path = db_path
        self._conn: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    async def init_db(self) -> None:
        """Open the database and create the reviews table if it doesn't exist."""
        directory = os.path.dirname(self.db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        conn = await aiosqlite.connect(self.db_path)
        try:
            await conn.execute(
                """
                CREATE TABLE IF NOT EXISTS reviews (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    category TEXT NOT NULL,
                    question TEXT NOT NULL,
                    rating INTEGER NOT NULL,
                    advice TEXT NOT NULL DEFAULT '',
                    submitted_at TEXT NOT NULL
                )
                """
            )
            await conn.commit()
        except sqlite3.Error:
            await conn.close()
            raise
        self._conn = conn

    async def _ensure_conn(self) -> aiosqlite.Connection:
        """Open the connection on first use. Caller must hold ``_lock``."""
        if self._conn is None:
            try:
                await self.init_db()
            except (OSError, sqlite3.Error) as e:
                logger.warning("SQLite unavailable at %s: %s", self.db_path, e)
                raise BackendUnavailableError(
                    f"Persistence backend unavailable: {e}"
                ) from e
        assert self._conn is not None
        return self._conn

    async def insert_many(self, reviews: Sequence[Review]) -> None:
        """Insert all reviews in a single transaction."""
        submitted_at = _now_iso()
        rows = [
            (r.category, r.question, r.rating, r.advice, submitted_at) for r in reviews
        ]
        async with self._lock:
            conn = await self._ensure_conn()
            try:
                await conn.executemany(
                    "INSERT INTO reviews (category, question, rating, advice, submitted_at) "
                    "VALUES (?, ?, ?, ?, ?)",
                    rows,
                )
                await conn.commit()
            except sqlite3.Error as e:
                await conn.rollback()
                logger.warning("SQLite write failed: %s", e)
                raise WriteFailedError(str(e)) from e
            except asyncio.CancelledError:
                # Timed out by the caller: the next writer must not commit these rows
                await conn.rollback()
                raise
        logger.info("Inserted %d reviews into %s", len(rows), self.db_path)

    async def fetch_all(self) -> list[Review]:
        """All stored reviews in insertion order."""
        async with self._lock:
            conn = await self._ensure_conn()
            cursor = await conn.execute(
                "SELECT category, question, rating, advice FROM reviews ORDER BY id"
            )
            rows = await cursor.fetchall()
        return [
            Review(category=r[0], question=r[1], rating=r[2], advice=r[3]) for r in rows
        ]

    async def close(self) -> None:
        """Close the database connection."""
        async with self._lock:
            if self._conn:
                await self._conn.close()
                self._conn = None


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(timezone.utc).isoformat()
