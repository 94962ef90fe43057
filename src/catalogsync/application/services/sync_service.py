"""Application service for synchronizing the catalog.

This layer centralizes construction of the database, adapters and the
orchestrator so the CLI (and any scheduler) only deals with requests and
results.
"""

from __future__ import annotations

import sqlite3
import threading
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import Callable, final

from catalogsync.config.config import Config
from catalogsync.features.artwork.adapters import PillowImageCodec
from catalogsync.features.artwork.usecases.ports import ImageCodecPort
from catalogsync.features.catalog.adapters import SqliteCatalogStore
from catalogsync.features.catalog.usecases.ports import CatalogStorePort, DatabaseManagerPort
from catalogsync.features.metadata.usecases.extraction import MutagenMetadataExtractor
from catalogsync.features.metadata.usecases.ports import MetadataExtractorPort
from catalogsync.features.sync.usecases import RunProgressCallback, RunResult, SyncOrchestrator
from catalogsync.platform.db.db_manager import DatabaseManager
from catalogsync.platform.logging import logger
from catalogsync.shared.cancellation import CancellationToken
from catalogsync.shared.errors import SyncAlreadyRunningError


@dataclass(frozen=True)
class SyncRequest:
    """Input parameters for one synchronization.

    Attributes:
        full_rescan: Ignore the stored watermark and re-read every file.
    """

    full_rescan: bool = False


OrchestratorFactory = Callable[
    [Config, CatalogStorePort, MetadataExtractorPort, ImageCodecPort],
    SyncOrchestrator,
]


@final
class SyncService:
    """Owns the catalog connection and runs synchronizations on demand or on a timer."""

    def __init__(
        self,
        config: Config,
        *,
        db_factory: Callable[[Path], DatabaseManagerPort] | None = None,
        catalog_factory: Callable[[sqlite3.Connection], CatalogStorePort] | None = None,
        extractor_factory: Callable[[], MetadataExtractorPort] | None = None,
        codec_factory: Callable[[], ImageCodecPort] | None = None,
        orchestrator_factory: OrchestratorFactory | None = None,
    ) -> None:
        """Create a service with overridable infrastructure factories.

        Tests can inject light-weight doubles while production code relies on
        the default adapters and DAOs.
        """
        self._config: Config = config
        self._db_factory: Callable[[Path], DatabaseManagerPort] = db_factory or DatabaseManager
        self._catalog_factory: Callable[[sqlite3.Connection], CatalogStorePort] = (
            catalog_factory or SqliteCatalogStore
        )
        self._extractor_factory: Callable[[], MetadataExtractorPort] = (
            extractor_factory or MutagenMetadataExtractor
        )
        self._codec_factory: Callable[[], ImageCodecPort] = codec_factory or PillowImageCodec
        self._orchestrator_factory: OrchestratorFactory = orchestrator_factory or SyncOrchestrator

        self._db_manager: DatabaseManagerPort | None = None
        self._orchestrator: SyncOrchestrator | None = None
        self._stop_event: threading.Event = threading.Event()
        self._loop_event: threading.Event | None = None
        self._active_token: CancellationToken | None = None
        self._token_lock: threading.Lock = threading.Lock()

    @property
    def config(self) -> Config:
        return self._config

    def open(self) -> SyncOrchestrator:
        """Connect to the catalog and build the orchestrator (idempotent)."""
        if self._orchestrator is not None:
            return self._orchestrator

        db_manager = self._db_factory(self._config.resolved_database_path())
        conn = db_manager.connect()
        if conn is None:
            raise RuntimeError("Database connection could not be established")

        self._db_manager = db_manager
        self._orchestrator = self._orchestrator_factory(
            self._config,
            self._catalog_factory(conn),
            self._extractor_factory(),
            self._codec_factory(),
        )
        return self._orchestrator

    def close(self) -> None:
        if self._db_manager is not None:
            self._db_manager.close()
        self._db_manager = None
        self._orchestrator = None

    def __enter__(self) -> "SyncService":
        _ = self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def run_once(
        self,
        request: SyncRequest | None = None,
        *,
        cancel: CancellationToken | None = None,
        on_progress: RunProgressCallback | None = None,
    ) -> RunResult:
        """Run a single synchronization with a fresh cancellation token.

        Raises:
            SyncAlreadyRunningError: If a run is already active.
        """
        orchestrator = self.open()
        token = cancel or CancellationToken()
        with self._token_lock:
            self._active_token = token
        try:
            return orchestrator.synchronize(
                token,
                full_rescan=(request or SyncRequest()).full_rescan,
                on_progress=on_progress,
            )
        finally:
            with self._token_lock:
                if self._active_token is token:
                    self._active_token = None

    def run_periodic(
        self,
        interval: float | None = None,
        *,
        stop_event: threading.Event | None = None,
        on_result: Callable[[RunResult], None] | None = None,
        on_progress: RunProgressCallback | None = None,
        max_runs: int | None = None,
    ) -> int:
        """Run synchronizations every ``interval`` seconds until stopped.

        The loop ends when ``stop_event`` (or ``stop()``) is set, or after
        ``max_runs`` runs. Every run gets its own cancellation token.

        Returns:
            int: Number of runs executed.
        """
        seconds = float(interval if interval is not None else self._config.sync_interval_seconds)
        if seconds <= 0:
            raise ValueError("interval must be positive")
        if stop_event is None:
            # A stop() from an earlier loop must not end this one
            self._stop_event.clear()
        stop = stop_event or self._stop_event
        self._loop_event = stop

        runs = 0
        while not stop.is_set():
            try:
                result = self.run_once(on_progress=on_progress)
            except SyncAlreadyRunningError:
                logger.warning("Skipping scheduled run: previous run still active")
            else:
                runs += 1
                if on_result is not None:
                    on_result(result)

            if max_runs is not None and runs >= max_runs:
                break
            if stop.wait(seconds):
                break
        return runs

    def stop(self) -> None:
        """Stop the periodic loop and cancel the active run, if any."""
        self._stop_event.set()
        if self._loop_event is not None:
            self._loop_event.set()
        with self._token_lock:
            if self._active_token is not None:
                self._active_token.cancel()


__all__ = ["OrchestratorFactory", "SyncRequest", "SyncService"]
