"""Database manager for the catalog."""

import sqlite3
from pathlib import Path
from typing import Any, final

from catalogsync.config.paths import default_database_path
from catalogsync.platform.filesystem import ensure_parent_directory
from catalogsync.platform.logging import logger

_EXPECTED_TABLES = frozenset({"tracks", "art", "sync_state", "media_types", "failed_files"})


@final
class DatabaseManager:
    """Owns the SQLite connection shared by the catalog DAOs."""

    db_path: str | Path
    conn: sqlite3.Connection | None

    def __init__(self, db_path: Path | str | None = None) -> None:
        """Initialize database manager.

        Args:
            db_path: Path to database file. If None, use the default catalog path in the
                   data directory. If ":memory:", use in-memory database.
        """
        if db_path == ":memory:":
            self.db_path = ":memory:"
        elif db_path is None:
            self.db_path = default_database_path()
        else:
            self.db_path = Path(db_path) if isinstance(db_path, str) else db_path
        self.conn = None

    def connect(self) -> sqlite3.Connection:
        """Connect to database and initialize schema."""
        try:
            if isinstance(self.db_path, Path):
                _ = ensure_parent_directory(self.db_path)

            try:
                self.conn = sqlite3.connect(
                    self.db_path,
                    timeout=30.0,  # Wait up to 30 seconds for locks
                    isolation_level="IMMEDIATE",  # Acquire write lock immediately
                    check_same_thread=False,  # The orchestrator may run on a worker thread
                )
            except sqlite3.OperationalError as e:
                if "unable to open database file" in str(e):
                    raise PermissionError(f"Unable to open database at {self.db_path}") from e
                raise

            # WAL keeps readers on the last committed batch
            _ = self.conn.execute("PRAGMA synchronous = NORMAL")
            _ = self.conn.execute("PRAGMA journal_mode = WAL")
            _ = self.conn.execute("PRAGMA busy_timeout = 30000")

            self._init_schema()
            return self.conn

        except sqlite3.Error as e:
            logger.error("Failed to connect to database: %s", e)
            raise

    def _init_schema(self) -> None:
        """Initialize database schema."""
        if self.conn is None:
            return

        try:
            cursor = self.conn.cursor()

            _ = cursor.execute(
                """
                SELECT name FROM sqlite_master
                WHERE type='table' AND name IN ('tracks', 'art', 'sync_state', 'media_types', 'failed_files')
                """
            )
            existing_tables = {row[0] for row in cursor.fetchall()}
            if existing_tables.issuperset(_EXPECTED_TABLES):
                logger.debug("Tables already exist, skipping schema initialization")
                return

            _ = cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS tracks (
                    id TEXT PRIMARY KEY,
                    directory TEXT NOT NULL,
                    file_name TEXT NOT NULL,
                    title TEXT,
                    album TEXT,
                    album_artist TEXT,
                    performer TEXT,
                    track_number INTEGER,
                    year INTEGER,
                    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                    UNIQUE (directory, file_name)
                )
                """
            )

            _ = cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS art (
                    id TEXT PRIMARY KEY,
                    directory TEXT NOT NULL,
                    file_name TEXT NOT NULL,
                    original_dimension INTEGER NOT NULL,
                    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                    UNIQUE (directory, file_name)
                )
                """
            )

            _ = cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS sync_state (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
                )
                """
            )

            _ = cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS media_types (
                    extension TEXT PRIMARY KEY,
                    mime_type TEXT NOT NULL
                )
                """
            )

            # Files whose tags could not be read, retried every run
            _ = cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS failed_files (
                    directory TEXT NOT NULL,
                    file_name TEXT NOT NULL,
                    reason TEXT NOT NULL,
                    attempts INTEGER NOT NULL DEFAULT 1,
                    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                    PRIMARY KEY (directory, file_name)
                )
                """
            )

            _ = cursor.execute("CREATE INDEX IF NOT EXISTS idx_tracks_directory ON tracks(directory)")
            _ = cursor.execute("CREATE INDEX IF NOT EXISTS idx_art_directory ON art(directory)")

            self.conn.commit()
            logger.info("Successfully initialized database schema")

        except sqlite3.Error as e:
            logger.error("Failed to initialize schema: %s", e)
            self.conn.rollback()
            raise

    def close(self) -> None:
        """Close database connection."""
        if self.conn:
            try:
                self.conn.close()
                self.conn = None
            except sqlite3.Error as e:
                logger.error("Failed to close database connection: %s", e)

    def __enter__(self) -> "DatabaseManager":
        _ = self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any | None,
    ) -> None:
        self.close()
