"""Data access object for run bookkeeping values."""

import sqlite3
from sqlite3 import Connection
from typing import Final, final

from catalogsync.platform.logging import logger
from catalogsync.shared.errors import CatalogWriteError

WATERMARK_KEY: Final[str] = "last_scan_started"


@final
class SyncStateDAO:
    """Key/value access to the ``sync_state`` table."""

    conn: Connection

    def __init__(self, conn: Connection):
        self.conn = conn

    def get_watermark(self) -> float | None:
        """Return the stored watermark (epoch seconds) or None before the first run."""
        cursor = self.conn.execute("SELECT value FROM sync_state WHERE key = ?", (WATERMARK_KEY,))
        row = cursor.fetchone()
        if row is None:
            return None
        try:
            return float(row[0])
        except ValueError:
            logger.warning("Ignoring unreadable watermark value %r", row[0])
            return None

    def set_watermark(self, value: float) -> bool:
        """Store ``value`` unless it is older than the stored watermark.

        Returns:
            bool: True when the stored value changed.

        Raises:
            CatalogWriteError: If the write cannot be committed.
        """
        try:
            cursor = self.conn.execute(
                """
                INSERT INTO sync_state (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
                WHERE CAST(excluded.value AS REAL) > CAST(sync_state.value AS REAL)
                """,
                (WATERMARK_KEY, repr(float(value))),
            )
            self.conn.commit()
            changed = cursor.rowcount > 0
            if not changed:
                logger.debug("Watermark %.3f not newer than stored value; kept", value)
            return changed

        except sqlite3.Error as e:
            logger.error("Failed to store watermark: %s", e)
            self.conn.rollback()
            raise CatalogWriteError(f"Failed to store watermark: {e}") from e


__all__ = ["SyncStateDAO", "WATERMARK_KEY"]
