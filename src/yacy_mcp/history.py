"""Search and crawl history persisted in SQLite.

The store is a fire-and-forget sink: logging methods never raise, so a
broken or locked database cannot fail a tool call.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path
from typing import Any

from yacy_mcp.config import default_database_path

logger = logging.getLogger(__name__)

# Seconds to wait on a locked database before giving up on a write
LOCK_TIMEOUT = 1.0


class HistoryStore:
    """SQLite-based storage for search and crawl history.

    The connection is opened lazily and may be used from any thread;
    access is serialized by an internal lock.
    """

    def __init__(self, db_path: Path | None = None) -> None:
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file. Defaults to
                ~/.yacy-mcp/yacy_mcp.db.
        """
        self._db_path = db_path or default_database_path()
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    @property
    def db_path(self) -> Path:
        """Return the database file path."""
        return self._db_path

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create a database connection."""
        if self._conn is None:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(
                self._db_path, timeout=LOCK_TIMEOUT, check_same_thread=False
            )
            self._conn.row_factory = sqlite3.Row
            self._initialize_schema(self._conn)
        return self._conn

    def _initialize_schema(self, conn: sqlite3.Connection) -> None:
        """Create the history tables if they don't exist."""
        conn.execute("""
            CREATE TABLE IF NOT EXISTS search_history (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                query TEXT NOT NULL,
                timestamp TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                result_count INTEGER,
                execution_time_ms INTEGER
            )
        """)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS crawl_history (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                url TEXT NOT NULL,
                depth INTEGER,
                timestamp TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                status TEXT
            )
        """)
        conn.commit()

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def log_search(self, query: str, result_count: int, elapsed_ms: int) -> None:
        """Record a completed search.

        Args:
            query: Search query.
            result_count: Number of results returned.
            elapsed_ms: Time the search took in milliseconds.
        """
        self._insert(
            "INSERT INTO search_history (query, result_count, execution_time_ms) "
            "VALUES (?, ?, ?)",
            (query, result_count, elapsed_ms),
        )

    def log_crawl(self, url: str, depth: int, status: str) -> None:
        """Record a crawl request.

        Args:
            url: Crawl start URL.
            depth: Crawl depth.
            status: Crawl status label.
        """
        self._insert(
            "INSERT INTO crawl_history (url, depth, status) VALUES (?, ?, ?)",
            (url, depth, status),
        )

    def _insert(self, sql: str, params: tuple[Any, ...]) -> None:
        try:
            with self._lock:
                conn = self._get_connection()
                conn.execute(sql, params)
                conn.commit()
        except (sqlite3.Error, OSError):
            logger.exception("Failed to write history to %s", self._db_path)

    def __enter__(self) -> HistoryStore:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
