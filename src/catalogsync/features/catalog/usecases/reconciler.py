"""
Summary: Apply one run's deltas to the catalog in bounded batches.
Why: Orphan removal and upserts are the only catalog writes of a run; batching caps memory and transaction size.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import batched
from pathlib import Path

from catalogsync.features.artwork.usecases.art_pipeline import ArtBuildResult
from catalogsync.features.artwork.usecases.rendition_ladder import iter_renditions, remove_renditions
from catalogsync.features.metadata.usecases.track_builder import TrackBuildResult
from catalogsync.features.scan.usecases.change_detector import ChangeSet
from catalogsync.platform.logging import SyncEvent, log_event, logger
from catalogsync.shared.cancellation import CancellationToken, ProgressCallback
from catalogsync.shared.catalog import ArtRecord
from catalogsync.shared.errors import CatalogWriteError

from .ports import CatalogStorePort


@dataclass
class ReconcileResult:
    """Rows written by the reconciler.

    Counts are partial when ``cancelled`` or ``error`` is set; batches committed
    before the stop are included.
    """

    removed: int = 0
    tracks_added: int = 0
    tracks_updated: int = 0
    art_added: int = 0
    art_updated: int = 0
    art_removed: int = 0
    renditions_pruned: int = 0
    cancelled: bool = False
    error: CatalogWriteError | None = None


class CatalogReconciler:
    """Delete orphans, then upsert deltas, one transaction per batch."""

    def __init__(self, catalog: CatalogStorePort, batch_size: int, artwork_dir: Path) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self._catalog: CatalogStorePort = catalog
        self._batch_size: int = batch_size
        self._artwork_dir: Path = artwork_dir

    def find_orphans(self, change_set: ChangeSet) -> list[str]:
        """Identifiers of stored tracks whose file is gone.

        Tracks below a directory that could not be enumerated are kept.
        """
        present = change_set.present
        return [
            track_id
            for track_id, path in self._catalog.iter_track_locations()
            if path not in present and not change_set.is_under_failed(path)
        ]

    def find_stale_art(self, change_set: ChangeSet, art: ArtBuildResult) -> list[ArtRecord]:
        """Stored art whose source is gone or no longer its directory's winner."""
        return [
            record
            for record in self._catalog.iter_art()
            if record.path not in art.winners
            and not change_set.is_under_failed(record.path)
            and Path(record.directory) not in art.failed_directories
        ]

    def reconcile(
        self,
        change_set: ChangeSet,
        tracks: TrackBuildResult,
        art: ArtBuildResult,
        *,
        cancel: CancellationToken | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ReconcileResult:
        """Write the run's changes to the catalog.

        Deletions are applied before upserts. Cancellation is honoured between
        batches; a started batch always commits or rolls back as a whole. A
        batch that cannot be committed stops the reconciliation and is
        reported on ``ReconcileResult.error`` alongside the counts already
        written.
        """
        result = ReconcileResult()
        if cancel is not None and cancel.cancelled:
            result.cancelled = True
            return result

        try:
            self._apply(result, change_set, tracks, art, cancel, on_progress)
        except CatalogWriteError as e:
            result.error = e
            logger.error(
                "Reconciliation stopped after %d removed, %d added, %d updated: %s",
                result.removed,
                result.tracks_added,
                result.tracks_updated,
                e,
            )
        return result

    def _apply(
        self,
        result: ReconcileResult,
        change_set: ChangeSet,
        tracks: TrackBuildResult,
        art: ArtBuildResult,
        cancel: CancellationToken | None,
        on_progress: ProgressCallback | None,
    ) -> None:
        orphans = self.find_orphans(change_set)
        stale_art = self.find_stale_art(change_set, art)
        track_records = [delta.record for delta in tracks.deltas]
        art_records = [delta.record for delta in art.deltas]

        batches_total = sum(
            self._batch_count(len(items))
            for items in (orphans, stale_art, track_records, art_records)
        )
        batches_done = 0

        def advance() -> bool:
            nonlocal batches_done
            batches_done += 1
            if on_progress is not None:
                on_progress(batches_done, batches_total)
            if cancel is not None and cancel.cancelled:
                result.cancelled = True
            return result.cancelled

        for chunk in batched(orphans, self._batch_size):
            result.removed += self._catalog.delete_tracks(chunk)
            self._log_batch("delete_tracks", len(chunk))
            if advance():
                return

        for chunk in batched(stale_art, self._batch_size):
            result.art_removed += self._catalog.delete_art([record.art_id for record in chunk])
            for record in chunk:
                _ = remove_renditions(self._artwork_dir, record.art_id)
            self._log_batch("delete_art", len(chunk))
            if advance():
                return

        if orphans or stale_art:
            log_event(
                logger,
                logging.INFO,
                SyncEvent.ORPHANS_REMOVED,
                "Removed %d tracks and %d art records",
                result.removed,
                result.art_removed,
                removed=result.removed,
                art_removed=result.art_removed,
            )

        new_tracks = {delta.record.track_id for delta in tracks.deltas if delta.is_new}
        for chunk in batched(track_records, self._batch_size):
            _ = self._catalog.upsert_tracks(chunk)
            added = sum(1 for record in chunk if record.track_id in new_tracks)
            result.tracks_added += added
            result.tracks_updated += len(chunk) - added
            self._log_batch("upsert_tracks", len(chunk))
            if advance():
                return

        new_art = {delta.record.art_id for delta in art.deltas if delta.is_new}
        for chunk in batched(art_records, self._batch_size):
            _ = self._catalog.upsert_art(chunk)
            added = sum(1 for record in chunk if record.art_id in new_art)
            result.art_added += added
            result.art_updated += len(chunk) - added
            self._log_batch("upsert_art", len(chunk))
            if advance():
                return

        result.renditions_pruned = self.prune_renditions()

    def prune_renditions(self) -> int:
        """Delete rendition files whose identifier has no art record."""
        known = {record.art_id for record in self._catalog.iter_art()}
        pruned = 0
        for path, art_id in iter_renditions(self._artwork_dir):
            if art_id in known:
                continue
            path.unlink(missing_ok=True)
            pruned += 1
        if pruned:
            logger.info("Pruned %d unreferenced renditions", pruned)
        return pruned

    def _batch_count(self, size: int) -> int:
        return -(-size // self._batch_size)

    @staticmethod
    def _log_batch(operation: str, rows: int) -> None:
        log_event(
            logger,
            logging.DEBUG,
            SyncEvent.BATCH_COMMIT,
            "Committed %s batch of %d rows",
            operation,
            rows,
            phase=operation,
            rows=rows,
        )


__all__ = ["CatalogReconciler", "ReconcileResult"]
