"""
Summary: Sequence one synchronization run from scan to catalog write.
Why: Own the watermark, run state, cancellation and progress so phases stay single-purpose.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from pathlib import Path

from catalogsync.config.config import Config
from catalogsync.features.artwork.usecases.art_pipeline import ArtPipeline
from catalogsync.features.artwork.usecases.ports import ImageCodecPort
from catalogsync.features.catalog.usecases.ports import CatalogStorePort
from catalogsync.features.catalog.usecases.reconciler import CatalogReconciler
from catalogsync.features.metadata.usecases.ports import MetadataExtractorPort
from catalogsync.features.metadata.usecases.track_builder import TrackBuildResult, TrackBuilder
from catalogsync.features.scan.usecases.change_detector import (
    ChangeKind,
    ChangeSet,
    FileTimes,
    detect_changes,
    read_file_times,
)
from catalogsync.platform.logging import SyncEvent, log_event, logger
from catalogsync.shared.cancellation import CancellationToken, ProgressCallback
from catalogsync.shared.errors import SyncAlreadyRunningError, SyncCancelledError

from .sync_types import RunProgressCallback, RunResult, RunStatus, SyncPhase, SyncState


class SyncOrchestrator:
    """Run synchronizations for one library configuration and catalog store.

    At most one run is active at a time; a concurrent ``synchronize`` call is
    refused with ``SyncAlreadyRunningError``.
    """

    def __init__(
        self,
        config: Config,
        catalog: CatalogStorePort,
        extractor: MetadataExtractorPort,
        codec: ImageCodecPort,
        *,
        clock: Callable[[], float] = time.time,
        read_times: Callable[[Path], FileTimes] = read_file_times,
    ) -> None:
        self._config: Config = config
        self._catalog: CatalogStorePort = catalog
        self._extractor: MetadataExtractorPort = extractor
        self._codec: ImageCodecPort = codec
        self._clock: Callable[[], float] = clock
        self._read_times: Callable[[Path], FileTimes] = read_times
        self._lock: threading.Lock = threading.Lock()
        self._state: SyncState = SyncState.IDLE

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    def synchronize(
        self,
        cancel: CancellationToken | None = None,
        *,
        full_rescan: bool = False,
        on_progress: RunProgressCallback | None = None,
    ) -> RunResult:
        """Run one synchronization.

        Args:
            cancel: Token polled at every file and batch boundary.
            full_rescan: Ignore the stored watermark and re-read every file.
            on_progress: Called with the current phase and its completed fraction.

        Returns:
            RunResult: Outcome with counts; failures are reported, not raised.

        Raises:
            SyncAlreadyRunningError: If another run is in progress.
        """
        if not self._lock.acquire(blocking=False):
            log_event(
                logger,
                logging.WARNING,
                SyncEvent.RUN_REFUSED,
                "Synchronization already running; request refused",
            )
            raise SyncAlreadyRunningError("A synchronization run is already in progress")

        try:
            return self._run(cancel or CancellationToken(), full_rescan, on_progress)
        finally:
            self._lock.release()

    def _run(
        self,
        cancel: CancellationToken,
        full_rescan: bool,
        on_progress: RunProgressCallback | None,
    ) -> RunResult:
        self._state = SyncState.IDLE
        started = self._clock()
        result = RunResult(status=RunStatus.SUCCEEDED, started_at=started)
        config = self._config
        artwork_dir = config.resolved_artwork_dir()

        log_event(
            logger,
            logging.INFO,
            SyncEvent.RUN_START,
            "Synchronization started (%d roots%s)",
            len(config.library_roots),
            ", full rescan" if full_rescan else "",
        )

        try:
            cancel.raise_if_cancelled()
            watermark = None if full_rescan else self._catalog.get_watermark()

            self._state = SyncState.SCANNING_FILESYSTEM
            _ = self._catalog.set_watermark(started - config.watermark_grace_seconds)
            self._catalog.replace_media_types(config.mime_types)
            change_set = detect_changes(
                config.library_roots,
                config.extensions,
                watermark,
                cancel=cancel,
                read_times=self._read_times,
                on_progress=self._phase_progress(on_progress, SyncPhase.SCANNING),
            )
            result.warnings.extend(change_set.warnings)
            previously_failed = self._requeue_failed_files(change_set)

            self._state = SyncState.BUILDING_DELTAS
            tracks = TrackBuilder(self._extractor, self._catalog).build(
                change_set,
                cancel=cancel,
                on_progress=self._phase_progress(on_progress, SyncPhase.READING_TAGS),
            )
            _ = self._catalog.record_failed_files(tracks.failures)
            art = ArtPipeline(
                self._codec,
                self._catalog,
                artwork_dir,
                config.artwork_file_names,
                config.thumbnail_sizes,
                config.rendition_format,
            ).run(
                change_set.directories,
                watermark,
                cancel=cancel,
                on_progress=self._phase_progress(on_progress, SyncPhase.RENDERING_ART),
            )
            result.skipped = tracks.skipped + art.skipped
            result.warnings.extend(f"Skipped {path}: {reason}" for path, reason in tracks.failures)
            result.warnings.extend(f"Skipped artwork {path}: {reason}" for path, reason in art.failures)

            self._state = SyncState.RECONCILING
            reconciled = CatalogReconciler(self._catalog, config.batch_size, artwork_dir).reconcile(
                change_set,
                tracks,
                art,
                cancel=cancel,
                on_progress=self._phase_progress(on_progress, SyncPhase.RECONCILING),
            )
            result.added = reconciled.tracks_added
            result.updated = reconciled.tracks_updated
            result.removed = reconciled.removed
            result.art_added = reconciled.art_added
            result.art_updated = reconciled.art_updated
            result.art_removed = reconciled.art_removed
            if reconciled.error is not None:
                raise reconciled.error
            if reconciled.cancelled:
                raise SyncCancelledError("Synchronization cancelled during reconciliation")
            self._clear_resolved_failures(previously_failed, change_set, tracks)

            self._state = SyncState.IDLE

        except SyncCancelledError:
            result.status = RunStatus.CANCELLED
            self._state = SyncState.CANCELLED

        except Exception as e:
            result.status = RunStatus.FAILED
            result.error = e
            self._state = SyncState.FAILED
            logger.debug("Synchronization failure details", exc_info=True)

        result.finished_at = self._clock()
        self._log_outcome(result)
        return result

    def _requeue_failed_files(self, change_set: ChangeSet) -> set[Path]:
        """Put files that failed on an earlier run back in line for a tag read.

        The watermark has moved past them, so without this they would stay
        unchanged until touched again.
        """
        failed = set(self._catalog.iter_failed_files())
        waiting = failed & change_set.unchanged
        if not waiting:
            return failed

        stored = self._catalog.lookup_tracks_by_path(waiting)
        for path in waiting:
            _ = change_set.requeue(path, ChangeKind.UPDATED if path in stored else ChangeKind.ADDED)
        logger.info("Retrying %d files that could not be read before", len(waiting))
        return failed

    def _clear_resolved_failures(
        self,
        previously_failed: set[Path],
        change_set: ChangeSet,
        tracks: TrackBuildResult,
    ) -> None:
        """Forget failures that were read this run or whose file is gone."""
        still_failing = {path for path, _ in tracks.failures}
        resolved = [
            path
            for path in previously_failed
            if path not in still_failing
            and (path in change_set.present or not change_set.is_under_failed(path))
        ]
        if resolved:
            _ = self._catalog.clear_failed_files(resolved)

    @staticmethod
    def _phase_progress(
        on_progress: RunProgressCallback | None,
        phase: SyncPhase,
    ) -> ProgressCallback | None:
        if on_progress is None:
            return None

        def report(done: int, total: int) -> None:
            fraction = 1.0 if total <= 0 else min(1.0, max(0.0, done / total))
            on_progress(phase, fraction)

        return report

    @staticmethod
    def _log_outcome(result: RunResult) -> None:
        counts = {
            "added": result.added,
            "updated": result.updated,
            "removed": result.removed,
            "skipped": result.skipped,
            "art_added": result.art_added,
            "art_updated": result.art_updated,
            "art_removed": result.art_removed,
            "duration_seconds": result.duration_seconds,
        }
        match result.status:
            case RunStatus.SUCCEEDED:
                log_event(
                    logger,
                    logging.INFO,
                    SyncEvent.RUN_COMPLETE,
                    "Synchronization complete: %d added, %d updated, %d removed, %d skipped",
                    result.added,
                    result.updated,
                    result.removed,
                    result.skipped,
                    **counts,
                )
            case RunStatus.CANCELLED:
                log_event(
                    logger,
                    logging.WARNING,
                    SyncEvent.RUN_CANCELLED,
                    "Synchronization cancelled",
                    **counts,
                )
            case RunStatus.FAILED:
                log_event(
                    logger,
                    logging.ERROR,
                    SyncEvent.RUN_FAILED,
                    "Synchronization failed: %s",
                    result.error,
                    error_message=str(result.error),
                    **counts,
                )


__all__ = ["SyncOrchestrator"]
