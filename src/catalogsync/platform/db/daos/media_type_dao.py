"""Data access object for the extension to MIME type mirror."""

import sqlite3
from collections.abc import Mapping
from sqlite3 import Connection
from typing import final

from catalogsync.platform.logging import logger
from catalogsync.shared.errors import CatalogWriteError


@final
class MediaTypeDAO:
    """Access to the ``media_types`` table read by the streaming side."""

    conn: Connection

    def __init__(self, conn: Connection):
        self.conn = conn

    def replace_all(self, mapping: Mapping[str, str]) -> None:
        """Replace the stored mapping with ``mapping`` in one transaction.

        Raises:
            CatalogWriteError: If the transaction cannot be committed.
        """
        try:
            _ = self.conn.execute("DELETE FROM media_types")
            _ = self.conn.executemany(
                "INSERT INTO media_types (extension, mime_type) VALUES (?, ?)",
                sorted(mapping.items()),
            )
            self.conn.commit()

        except sqlite3.Error as e:
            logger.error("Failed to store media types: %s", e)
            self.conn.rollback()
            raise CatalogWriteError(f"Failed to store media types: {e}") from e

    def get_mime_type(self, extension: str) -> str | None:
        """Return the MIME type for ``extension`` (with or without the leading dot)."""
        cursor = self.conn.execute(
            "SELECT mime_type FROM media_types WHERE extension = ?",
            (extension.lstrip(".").lower(),),
        )
        row = cursor.fetchone()
        return str(row[0]) if row else None

    def get_all(self) -> dict[str, str]:
        cursor = self.conn.execute("SELECT extension, mime_type FROM media_types ORDER BY extension")
        return {str(extension): str(mime_type) for extension, mime_type in cursor.fetchall()}


__all__ = ["MediaTypeDAO"]
