"""Summary: SQLite implementation of ``CatalogStorePort``.
Why: Compose the per-table DAOs behind the single port the use cases depend on."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from pathlib import Path
from sqlite3 import Connection
from typing import final

from catalogsync.platform.db.daos import ArtDAO, FailedFileDAO, MediaTypeDAO, SyncStateDAO, TrackDAO
from catalogsync.shared.catalog import ArtRecord, TrackRecord


@final
class SqliteCatalogStore:
    """Catalog store backed by one SQLite connection."""

    def __init__(self, conn: Connection) -> None:
        self.conn: Connection = conn
        self.tracks: TrackDAO = TrackDAO(conn)
        self.art: ArtDAO = ArtDAO(conn)
        self.state: SyncStateDAO = SyncStateDAO(conn)
        self.media_types: MediaTypeDAO = MediaTypeDAO(conn)
        self.failed_files: FailedFileDAO = FailedFileDAO(conn)

    def lookup_tracks_by_path(self, paths: Iterable[Path]) -> dict[Path, TrackRecord]:
        return self.tracks.lookup_by_paths(paths)

    def upsert_tracks(self, records: Sequence[TrackRecord]) -> int:
        return self.tracks.upsert(records)

    def iter_track_locations(self) -> Iterator[tuple[str, Path]]:
        return self.tracks.iter_locations()

    def delete_tracks(self, track_ids: Sequence[str]) -> int:
        return self.tracks.delete_by_ids(track_ids)

    def lookup_art_by_path(self, paths: Iterable[Path]) -> dict[Path, ArtRecord]:
        return self.art.lookup_by_paths(paths)

    def iter_art(self) -> Iterator[ArtRecord]:
        return self.art.iter_all()

    def upsert_art(self, records: Sequence[ArtRecord]) -> int:
        return self.art.upsert(records)

    def delete_art(self, art_ids: Sequence[str]) -> int:
        return self.art.delete_by_ids(art_ids)

    def get_watermark(self) -> float | None:
        return self.state.get_watermark()

    def set_watermark(self, value: float) -> bool:
        return self.state.set_watermark(value)

    def replace_media_types(self, mapping: Mapping[str, str]) -> None:
        self.media_types.replace_all(mapping)

    def iter_failed_files(self) -> Iterator[Path]:
        return self.failed_files.iter_paths()

    def record_failed_files(self, failures: Sequence[tuple[Path, str]]) -> int:
        return self.failed_files.record(failures)

    def clear_failed_files(self, paths: Iterable[Path]) -> int:
        return self.failed_files.clear(paths)


__all__ = ["SqliteCatalogStore"]
