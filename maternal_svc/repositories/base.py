"""
Base database connection and initialization.

This module provides the key-value persistence substrate the record store is
built on: one row per key holding a whole serialized collection, replaced in a
single write. Optimized for SQLite with WAL mode and busy_timeout.

IMPORTANT: Database instantiation should be done through the dependency providers.
Use maternal_svc.core.dependencies.get_database() instead of a module-level global.
"""
import sqlite3
import logging
from typing import Optional, Tuple
from pathlib import Path

from maternal_svc.core.datetime_utils import utc_now, format_iso

logger = logging.getLogger(__name__)


class Database:
    """
    SQLite-backed key-value store.

    Features:
    - WAL mode so readers never observe a half-written value
    - Busy timeout to handle lock contention gracefully
    - Each value carries the format version it was written with
    - UTC update timestamps

    Usage:
        # Via dependency providers (recommended):
        from maternal_svc.core.dependencies import get_database
        db = get_database()

        # Direct instantiation (for testing):
        db = Database(db_path="/tmp/test.db")
    """

    def __init__(self, db_path: str, busy_timeout: int = 5000):
        """
        Initialize database connection.

        Args:
            db_path: Path to SQLite database file.
            busy_timeout: SQLite busy timeout in milliseconds.
        """
        self.db_path = db_path
        self.busy_timeout = busy_timeout

        # Ensure database directory exists
        db_dir = Path(self.db_path).parent
        db_dir.mkdir(parents=True, exist_ok=True)

        self._init_db()

    def _configure_connection(self, conn: sqlite3.Connection) -> None:
        """Set busy timeout to wait for locks instead of failing immediately."""
        conn.execute(f"PRAGMA busy_timeout = {self.busy_timeout}")

    def _init_db(self) -> None:
        """Initialize database schema and enable WAL mode if not already enabled."""
        conn = sqlite3.connect(self.db_path)
        self._configure_connection(conn)
        cursor = conn.cursor()

        # WAL mode persists in the database file, so this only needs to run once
        cursor.execute("PRAGMA journal_mode = WAL")
        result = cursor.fetchone()
        if result and result[0].lower() == 'wal':
            logger.info(f"SQLite WAL mode enabled for {self.db_path}")
        else:
            logger.warning(f"Failed to enable WAL mode, current mode: {result}")

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                format_version INTEGER NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        conn.commit()
        conn.close()

        logger.info(
            f"Database initialized: {self.db_path} "
            f"(busy_timeout={self.busy_timeout}ms)"
        )

    def get_connection(self) -> sqlite3.Connection:
        """
        Get a new database connection with the busy timeout set.

        Returns:
            sqlite3.Connection: A new configured connection.
        """
        conn = sqlite3.connect(self.db_path)
        self._configure_connection(conn)
        return conn

    def get(self, key: str) -> Optional[Tuple[str, int]]:
        """
        Read the value stored under a key.

        Returns:
            Tuple of (value, format_version), or None if the key was never written.
        """
        conn = self.get_connection()
        try:
            cursor = conn.execute(
                "SELECT value, format_version FROM kv_store WHERE key = ?",
                (key,)
            )
            row = cursor.fetchone()
        finally:
            conn.close()

        if row is None:
            return None
        return row[0], row[1]

    def put(self, key: str, value: str, format_version: int) -> None:
        """
        Replace the value stored under a key in a single transaction.

        Raises:
            sqlite3.Error: If the write fails; nothing is committed in that case.
        """
        conn = self.get_connection()
        try:
            with conn:
                conn.execute("""
                    INSERT INTO kv_store (key, value, format_version, updated_at)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        format_version = excluded.format_version,
                        updated_at = excluded.updated_at
                """, (key, value, format_version, format_iso(utc_now())))
        finally:
            conn.close()
