"""Summary: Port describing the catalog store used by every sync phase.
Why: Keep use cases independent of SQLite so tests can pass any store."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from pathlib import Path
from sqlite3 import Connection
from typing import Protocol, runtime_checkable

from catalogsync.shared.catalog import ArtRecord, TrackRecord


@runtime_checkable
class DatabaseManagerPort(Protocol):
    """Port for database lifecycle management."""

    conn: Connection | None

    def connect(self) -> Connection:
        """Open the connection and ensure the schema exists."""
        ...

    def close(self) -> None:
        """Tear down the managed connection."""
        ...


@runtime_checkable
class CatalogStorePort(Protocol):
    """Persistent catalog of tracks, artwork and run bookkeeping.

    Batched writes each run in one transaction and raise ``CatalogWriteError``
    when it cannot be committed.
    """

    def lookup_tracks_by_path(self, paths: Iterable[Path]) -> dict[Path, TrackRecord]:
        """Return stored tracks for ``paths``; unknown paths are absent."""
        ...

    def upsert_tracks(self, records: Sequence[TrackRecord]) -> int:
        """Insert or update tracks keyed on their path."""
        ...

    def iter_track_locations(self) -> Iterator[tuple[str, Path]]:
        """Yield ``(track_id, path)`` for every stored track."""
        ...

    def delete_tracks(self, track_ids: Sequence[str]) -> int:
        """Delete tracks by identifier."""
        ...

    def lookup_art_by_path(self, paths: Iterable[Path]) -> dict[Path, ArtRecord]:
        """Return stored art for source ``paths``; unknown paths are absent."""
        ...

    def iter_art(self) -> Iterator[ArtRecord]:
        """Yield every stored art record."""
        ...

    def upsert_art(self, records: Sequence[ArtRecord]) -> int:
        """Insert or update art records keyed on their source path."""
        ...

    def delete_art(self, art_ids: Sequence[str]) -> int:
        """Delete art records by identifier."""
        ...

    def get_watermark(self) -> float | None:
        """Return the stored watermark, None before the first run."""
        ...

    def set_watermark(self, value: float) -> bool:
        """Store ``value`` unless it would move the watermark backwards."""
        ...

    def replace_media_types(self, mapping: Mapping[str, str]) -> None:
        """Mirror the extension to MIME type mapping."""
        ...

    def iter_failed_files(self) -> Iterator[Path]:
        """Yield files whose tags could not be read on an earlier run."""
        ...

    def record_failed_files(self, failures: Sequence[tuple[Path, str]]) -> int:
        """Remember unreadable files with the reason they failed."""
        ...

    def clear_failed_files(self, paths: Iterable[Path]) -> int:
        """Forget files that were read successfully or are gone."""
        ...


__all__ = ["CatalogStorePort", "DatabaseManagerPort"]
