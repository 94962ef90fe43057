"""Data access object for files whose tags could not be read."""

import sqlite3
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from sqlite3 import Connection
from typing import final

from catalogsync.platform.logging import logger
from catalogsync.shared.catalog import split_path
from catalogsync.shared.errors import CatalogWriteError


@final
class FailedFileDAO:
    """Data access object for the ``failed_files`` table.

    A row stays until the file is read successfully or disappears, so the
    file is retried on every run regardless of the watermark.
    """

    conn: Connection

    def __init__(self, conn: Connection):
        self.conn = conn

    def iter_paths(self) -> Iterator[Path]:
        cursor = self.conn.execute("SELECT directory, file_name FROM failed_files ORDER BY directory, file_name")
        for directory, file_name in cursor.fetchall():
            yield Path(directory) / file_name

    def get_reason(self, path: Path) -> str | None:
        cursor = self.conn.execute(
            "SELECT reason FROM failed_files WHERE directory = ? AND file_name = ?",
            split_path(path),
        )
        row = cursor.fetchone()
        return str(row[0]) if row else None

    def record(self, failures: Sequence[tuple[Path, str]]) -> int:
        """Store ``(path, reason)`` pairs, bumping the attempt count of known paths.

        Raises:
            CatalogWriteError: If the transaction cannot be committed.
        """
        if not failures:
            return 0
        try:
            _ = self.conn.executemany(
                """
                INSERT INTO failed_files (directory, file_name, reason) VALUES (?, ?, ?)
                ON CONFLICT(directory, file_name) DO UPDATE SET
                    reason = excluded.reason,
                    attempts = failed_files.attempts + 1,
                    updated_at = CURRENT_TIMESTAMP
                """,
                [(*split_path(path), reason) for path, reason in failures],
            )
            self.conn.commit()
            return len(failures)

        except sqlite3.Error as e:
            logger.error("Failed to record %d unreadable files: %s", len(failures), e)
            self.conn.rollback()
            raise CatalogWriteError(f"Failed to record {len(failures)} unreadable files: {e}") from e

    def clear(self, paths: Iterable[Path]) -> int:
        """Forget ``paths``; unknown paths are ignored.

        Raises:
            CatalogWriteError: If the transaction cannot be committed.
        """
        pairs = [split_path(path) for path in paths]
        if not pairs:
            return 0
        try:
            cursor = self.conn.executemany(
                "DELETE FROM failed_files WHERE directory = ? AND file_name = ?",
                pairs,
            )
            self.conn.commit()
            return cursor.rowcount

        except sqlite3.Error as e:
            logger.error("Failed to clear %d unreadable files: %s", len(pairs), e)
            self.conn.rollback()
            raise CatalogWriteError(f"Failed to clear {len(pairs)} unreadable files: {e}") from e


__all__ = ["FailedFileDAO"]
