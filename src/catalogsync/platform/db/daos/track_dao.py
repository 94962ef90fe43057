"""Data access object for catalogued tracks."""

import sqlite3
from collections.abc import Iterable, Iterator, Sequence
from itertools import batched
from pathlib import Path
from sqlite3 import Connection
from typing import Final, final

from catalogsync.platform.logging import logger
from catalogsync.shared.catalog import TrackRecord, split_path
from catalogsync.shared.errors import CatalogWriteError

# Path pairs per lookup statement, two bound parameters each
LOOKUP_CHUNK_SIZE: Final[int] = 400

_COLUMNS: Final[str] = "id, directory, file_name, title, album, album_artist, performer, track_number, year"


def _row_to_record(row: tuple[object, ...]) -> TrackRecord:
    return TrackRecord(
        track_id=str(row[0]),
        directory=str(row[1]),
        file_name=str(row[2]),
        title=row[3] if isinstance(row[3], str) else None,
        album=row[4] if isinstance(row[4], str) else None,
        album_artist=row[5] if isinstance(row[5], str) else None,
        performer=row[6] if isinstance(row[6], str) else None,
        track_number=row[7] if isinstance(row[7], int) else None,
        year=row[8] if isinstance(row[8], int) else None,
    )


@final
class TrackDAO:
    """Data access object for the ``tracks`` table."""

    conn: Connection

    def __init__(self, conn: Connection):
        """Initialize DAO.

        Args:
            conn: Database connection.
        """
        self.conn = conn

    def lookup_by_paths(self, paths: Iterable[Path]) -> dict[Path, TrackRecord]:
        """Return the catalog rows stored for ``paths``, keyed by path.

        Paths without a row are absent from the result.
        """
        pairs = sorted({split_path(path) for path in paths})
        found: dict[Path, TrackRecord] = {}
        try:
            cursor = self.conn.cursor()
            for chunk in batched(pairs, LOOKUP_CHUNK_SIZE):
                placeholders = ", ".join("(?, ?)" for _ in chunk)
                params = [value for pair in chunk for value in pair]
                _ = cursor.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM tracks
                    WHERE (directory, file_name) IN (VALUES {placeholders})
                    """,
                    params,
                )
                for row in cursor.fetchall():
                    record = _row_to_record(row)
                    found[record.path] = record
            return found

        except sqlite3.Error as e:
            logger.error("Failed to look up tracks: %s", e)
            raise

    def get(self, track_id: str) -> TrackRecord | None:
        """Get one track by identifier."""
        cursor = self.conn.cursor()
        _ = cursor.execute(f"SELECT {_COLUMNS} FROM tracks WHERE id = ?", (track_id,))
        row = cursor.fetchone()
        return _row_to_record(row) if row else None

    def upsert(self, records: Sequence[TrackRecord]) -> int:
        """Insert or update ``records`` in one transaction.

        Rows are matched on (directory, file_name); an existing row keeps its identifier.

        Returns:
            int: Number of records written.

        Raises:
            CatalogWriteError: If the transaction cannot be committed.
        """
        if not records:
            return 0
        try:
            _ = self.conn.executemany(
                """
                INSERT INTO tracks (
                    id, directory, file_name, title, album, album_artist,
                    performer, track_number, year
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(directory, file_name) DO UPDATE SET
                    title = excluded.title,
                    album = excluded.album,
                    album_artist = excluded.album_artist,
                    performer = excluded.performer,
                    track_number = excluded.track_number,
                    year = excluded.year,
                    updated_at = CURRENT_TIMESTAMP
                """,
                [
                    (
                        record.track_id,
                        record.directory,
                        record.file_name,
                        record.title,
                        record.album,
                        record.album_artist,
                        record.performer,
                        record.track_number,
                        record.year,
                    )
                    for record in records
                ],
            )
            self.conn.commit()
            return len(records)

        except sqlite3.Error as e:
            logger.error("Failed to upsert %d tracks: %s", len(records), e)
            self.conn.rollback()
            raise CatalogWriteError(f"Failed to upsert {len(records)} tracks: {e}") from e

    def iter_locations(self, fetch_size: int = 1024) -> Iterator[tuple[str, Path]]:
        """Yield ``(track_id, path)`` for every catalogued track."""
        cursor = self.conn.cursor()
        _ = cursor.execute("SELECT id, directory, file_name FROM tracks ORDER BY directory, file_name")
        while rows := cursor.fetchmany(fetch_size):
            for track_id, directory, file_name in rows:
                yield str(track_id), Path(directory) / file_name

    def delete_by_ids(self, track_ids: Sequence[str]) -> int:
        """Delete tracks by identifier in one transaction.

        Raises:
            CatalogWriteError: If the transaction cannot be committed.
        """
        if not track_ids:
            return 0
        try:
            cursor = self.conn.executemany(
                "DELETE FROM tracks WHERE id = ?",
                [(track_id,) for track_id in track_ids],
            )
            self.conn.commit()
            return cursor.rowcount

        except sqlite3.Error as e:
            logger.error("Failed to delete %d tracks: %s", len(track_ids), e)
            self.conn.rollback()
            raise CatalogWriteError(f"Failed to delete {len(track_ids)} tracks: {e}") from e

    def count(self) -> int:
        cursor = self.conn.execute("SELECT COUNT(*) FROM tracks")
        return int(cursor.fetchone()[0])


__all__ = ["LOOKUP_CHUNK_SIZE", "TrackDAO"]
