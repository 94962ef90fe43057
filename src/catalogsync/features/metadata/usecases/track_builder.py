"""
Summary: Turn changed media files into catalog track deltas.
Why: Tag reads are the slow part of a run, so only added and updated files are opened.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from catalogsync.features.scan.usecases.change_detector import ChangeSet
from catalogsync.platform.logging import SyncEvent, log_event, logger
from catalogsync.shared.cancellation import CancellationToken, ProgressCallback
from catalogsync.shared.catalog import TrackDelta, TrackRecord, new_identifier, split_path
from catalogsync.shared.errors import MetadataExtractionError
from catalogsync.shared.track_metadata import TrackMetadata

from .ports import MetadataExtractorPort, TrackLookupPort


@dataclass
class TrackBuildResult:
    """Deltas produced for one run plus per-file outcome counts."""

    deltas: list[TrackDelta] = field(default_factory=list)
    added: int = 0
    updated: int = 0
    unchanged: int = 0
    skipped: int = 0
    failures: list[tuple[Path, str]] = field(default_factory=list)


def build_record(path: Path, metadata: TrackMetadata, track_id: str) -> TrackRecord:
    """Build the catalog row for ``path``, filling gaps in the tags.

    Title falls back to the file name without extension; performer and album
    artist each fall back to the other.
    """
    directory, file_name = split_path(path)
    return TrackRecord(
        track_id=track_id,
        directory=directory,
        file_name=file_name,
        title=metadata.title or path.stem,
        album=metadata.album,
        album_artist=metadata.album_artist or metadata.performer,
        performer=metadata.performer or metadata.album_artist,
        track_number=metadata.track_number,
        year=metadata.year,
    )


class TrackBuilder:
    """Read tags for changed files and compute the track deltas."""

    def __init__(self, extractor: MetadataExtractorPort, catalog: TrackLookupPort) -> None:
        self._extractor: MetadataExtractorPort = extractor
        self._catalog: TrackLookupPort = catalog

    def build(
        self,
        change_set: ChangeSet,
        *,
        cancel: CancellationToken | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> TrackBuildResult:
        """Compute deltas for the added and updated paths of ``change_set``.

        Stored rows are resolved in one lookup before any file is opened. A
        path with a stored row keeps its identifier and is dropped when its
        fields did not change; a path without one gets a fresh identifier.
        Files whose tags cannot be read are skipped and retried next run.

        Raises:
            SyncCancelledError: If cancellation was requested.
        """
        paths = sorted(change_set.added) + sorted(change_set.updated)
        stored = self._catalog.lookup_tracks_by_path(paths) if paths else {}

        result = TrackBuildResult()
        total = len(paths)
        for index, path in enumerate(paths, start=1):
            if cancel is not None:
                cancel.raise_if_cancelled()

            try:
                metadata = self._extractor.extract(path)
            except MetadataExtractionError as e:
                self._record_failure(result, path, e.reason)
                continue
            except OSError as e:
                self._record_failure(result, path, e.strerror or str(e))
                continue
            finally:
                if on_progress is not None:
                    on_progress(index, total)

            existing = stored.get(path)
            if existing is None:
                record = build_record(path, metadata, new_identifier())
                result.deltas.append(TrackDelta(record=record, is_new=True))
                result.added += 1
                continue

            record = build_record(path, metadata, existing.track_id)
            if existing.has_same_data(record):
                result.unchanged += 1
            else:
                result.deltas.append(TrackDelta(record=record, is_new=False))
                result.updated += 1

        logger.debug(
            "Track deltas: %d added, %d updated, %d unchanged, %d skipped",
            result.added,
            result.updated,
            result.unchanged,
            result.skipped,
        )
        return result

    @staticmethod
    def _record_failure(result: TrackBuildResult, path: Path, reason: str) -> None:
        result.skipped += 1
        result.failures.append((path, reason))
        log_event(
            logger,
            logging.WARNING,
            SyncEvent.FILE_ERROR,
            "Skipping %s: %s",
            path,
            reason,
            path=path,
            error_message=reason,
        )


__all__ = ["TrackBuildResult", "TrackBuilder", "build_record"]
