"""Data access object for catalogued artwork."""

import sqlite3
from collections.abc import Iterable, Iterator, Sequence
from itertools import batched
from pathlib import Path
from sqlite3 import Connection
from typing import final

from catalogsync.platform.logging import logger
from catalogsync.shared.catalog import ArtRecord, split_path
from catalogsync.shared.errors import CatalogWriteError

from .track_dao import LOOKUP_CHUNK_SIZE


@final
class ArtDAO:
    """Data access object for the ``art`` table."""

    conn: Connection

    def __init__(self, conn: Connection):
        self.conn = conn

    def lookup_by_paths(self, paths: Iterable[Path]) -> dict[Path, ArtRecord]:
        """Return the art rows stored for ``paths``, keyed by source path."""
        pairs = sorted({split_path(path) for path in paths})
        found: dict[Path, ArtRecord] = {}
        try:
            cursor = self.conn.cursor()
            for chunk in batched(pairs, LOOKUP_CHUNK_SIZE):
                placeholders = ", ".join("(?, ?)" for _ in chunk)
                params = [value for pair in chunk for value in pair]
                _ = cursor.execute(
                    f"""
                    SELECT id, directory, file_name, original_dimension
                    FROM art
                    WHERE (directory, file_name) IN (VALUES {placeholders})
                    """,
                    params,
                )
                for art_id, directory, file_name, original_dimension in cursor.fetchall():
                    record = ArtRecord(
                        art_id=art_id,
                        directory=directory,
                        file_name=file_name,
                        original_dimension=int(original_dimension),
                    )
                    found[record.path] = record
            return found

        except sqlite3.Error as e:
            logger.error("Failed to look up art: %s", e)
            raise

    def iter_all(self, fetch_size: int = 1024) -> Iterator[ArtRecord]:
        """Yield every art record."""
        cursor = self.conn.cursor()
        _ = cursor.execute(
            "SELECT id, directory, file_name, original_dimension FROM art ORDER BY directory, file_name"
        )
        while rows := cursor.fetchmany(fetch_size):
            for art_id, directory, file_name, original_dimension in rows:
                yield ArtRecord(
                    art_id=art_id,
                    directory=directory,
                    file_name=file_name,
                    original_dimension=int(original_dimension),
                )

    def upsert(self, records: Sequence[ArtRecord]) -> int:
        """Insert or update art rows in one transaction, keyed on the source path.

        Raises:
            CatalogWriteError: If the transaction cannot be committed.
        """
        if not records:
            return 0
        try:
            _ = self.conn.executemany(
                """
                INSERT INTO art (id, directory, file_name, original_dimension)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(directory, file_name) DO UPDATE SET
                    original_dimension = excluded.original_dimension,
                    updated_at = CURRENT_TIMESTAMP
                """,
                [
                    (record.art_id, record.directory, record.file_name, record.original_dimension)
                    for record in records
                ],
            )
            self.conn.commit()
            return len(records)

        except sqlite3.Error as e:
            logger.error("Failed to upsert %d art records: %s", len(records), e)
            self.conn.rollback()
            raise CatalogWriteError(f"Failed to upsert {len(records)} art records: {e}") from e

    def delete_by_ids(self, art_ids: Sequence[str]) -> int:
        """Delete art rows by identifier in one transaction.

        Raises:
            CatalogWriteError: If the transaction cannot be committed.
        """
        if not art_ids:
            return 0
        try:
            cursor = self.conn.executemany(
                "DELETE FROM art WHERE id = ?",
                [(art_id,) for art_id in art_ids],
            )
            self.conn.commit()
            return cursor.rowcount

        except sqlite3.Error as e:
            logger.error("Failed to delete %d art records: %s", len(art_ids), e)
            self.conn.rollback()
            raise CatalogWriteError(f"Failed to delete {len(art_ids)} art records: {e}") from e

    def count(self) -> int:
        cursor = self.conn.execute("SELECT COUNT(*) FROM art")
        return int(cursor.fetchone()[0])


__all__ = ["ArtDAO"]
