"""
Summary: End-to-end tests for synchronization runs against an in-memory catalog.
Why: Pin watermark, identifier and cancellation behaviour across consecutive runs.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image
from pytest_mock import MockerFixture

from catalogsync.config.config import Config
from catalogsync.features.artwork.adapters import PillowImageCodec
from catalogsync.features.catalog.adapters import SqliteCatalogStore
from catalogsync.features.scan.usecases import FileTimes
from catalogsync.features.sync.usecases import (
    RunResult,
    RunStatus,
    SyncOrchestrator,
    SyncPhase,
    SyncState,
)
from catalogsync.shared.cancellation import CancellationToken
from catalogsync.shared.catalog import TrackRecord
from catalogsync.shared.errors import (
    CatalogWriteError,
    MetadataExtractionError,
    SyncAlreadyRunningError,
)
from catalogsync.shared.track_metadata import TrackMetadata

BASE = time.time() + 1_000


class FakeClock:
    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakeTimes:
    """File times keyed by path; files not listed predate every run."""

    def __init__(self) -> None:
        self.times: dict[Path, FileTimes] = {}

    def __call__(self, path: Path) -> FileTimes:
        return self.times.get(path, FileTimes(created=BASE - 500, modified=BASE - 500))


class FakeExtractor:
    def __init__(self) -> None:
        self.tags: dict[Path, TrackMetadata] = {}
        self.broken: set[Path] = set()
        self.calls: list[Path] = []

    def extract(self, path: Path) -> TrackMetadata:
        self.calls.append(path)
        if path in self.broken:
            raise MetadataExtractionError(path, "unsupported audio format")
        return self.tags.get(path, TrackMetadata(title=path.stem, performer="Artist"))


class Harness:
    def __init__(self, tmp_path: Path, catalog: SqliteCatalogStore) -> None:
        self.library = tmp_path / "library"
        self.library.mkdir()
        self.artwork_dir = tmp_path / "artwork"
        self.catalog = catalog
        self.clock = FakeClock(BASE)
        self.times = FakeTimes()
        self.extractor = FakeExtractor()
        self.config = Config(
            library_roots=[self.library],
            artwork_dir=self.artwork_dir,
            thumbnail_sizes=[192, 384],
            batch_size=2,
        )
        self.orchestrator = SyncOrchestrator(
            self.config,
            catalog,
            self.extractor,
            PillowImageCodec(),
            clock=self.clock,
            read_times=self.times,
        )

    def add_file(self, relative: str) -> Path:
        path = self.library / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch()
        return path

    def add_cover(self, relative: str, width: int, height: int) -> Path:
        path = self.library / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", (width, height), "purple").save(path, "JPEG")
        return path

    def advance(self, seconds: float = 1_000) -> None:
        self.clock.now += seconds

    def stored(self, path: Path) -> TrackRecord | None:
        return self.catalog.lookup_tracks_by_path([path]).get(path)


@pytest.fixture
def harness(tmp_path: Path, catalog: SqliteCatalogStore) -> Harness:
    return Harness(tmp_path, catalog)


def test_first_sync_adds_everything(harness: Harness) -> None:
    first = harness.add_file("Artist/Album/01.mp3")
    second = harness.add_file("Artist/Album/02.flac")
    _ = harness.add_cover("Artist/Album/cover.jpg", 400, 400)

    result = harness.orchestrator.synchronize()

    assert result.status is RunStatus.SUCCEEDED
    assert (result.added, result.updated, result.removed, result.skipped) == (2, 0, 0, 0)
    assert result.art_added == 1
    assert harness.catalog.get_watermark() == BASE
    assert harness.stored(first) is not None and harness.stored(second) is not None
    (art,) = list(harness.catalog.iter_art())
    assert sorted(path.name for path in harness.artwork_dir.iterdir()) == [
        f"{art.art_id}_192.jpg",
        f"{art.art_id}_384.jpg",
    ]
    assert harness.catalog.media_types.get_mime_type("flac") == "audio/flac"
    assert harness.orchestrator.state is SyncState.IDLE


def test_rerun_without_changes_writes_nothing(harness: Harness) -> None:
    song = harness.add_file("Album/01.mp3")
    _ = harness.add_cover("Album/cover.jpg", 400, 400)
    _ = harness.orchestrator.synchronize()
    track_id = harness.stored(song).track_id
    calls_before = len(harness.extractor.calls)
    harness.advance()

    result = harness.orchestrator.synchronize()

    assert (result.added, result.updated, result.removed) == (0, 0, 0)
    assert (result.art_added, result.art_updated, result.art_removed) == (0, 0, 0)
    assert len(harness.extractor.calls) == calls_before
    assert harness.stored(song).track_id == track_id


def test_modified_file_is_updated_under_same_identifier(harness: Harness) -> None:
    song = harness.add_file("Album/01.mp3")
    _ = harness.orchestrator.synchronize()
    track_id = harness.stored(song).track_id
    harness.times.times[song] = FileTimes(created=BASE - 500, modified=BASE + 10)
    harness.extractor.tags[song] = TrackMetadata(title="Retagged", album="Album", year=2020)
    harness.advance()

    result = harness.orchestrator.synchronize()

    assert (result.added, result.updated) == (0, 1)
    stored = harness.stored(song)
    assert stored.track_id == track_id
    assert (stored.title, stored.album, stored.year) == ("Retagged", "Album", 2020)


def test_new_file_after_first_run_is_added(harness: Harness) -> None:
    _ = harness.add_file("Album/01.mp3")
    _ = harness.orchestrator.synchronize()
    late = harness.add_file("Album/02.mp3")
    harness.times.times[late] = FileTimes(created=BASE + 10, modified=BASE + 10)
    harness.advance()

    result = harness.orchestrator.synchronize()

    assert (result.added, result.updated) == (1, 0)
    assert harness.extractor.calls[-1] == late


def test_deleted_file_is_removed(harness: Harness) -> None:
    keep = harness.add_file("Album/01.mp3")
    gone = harness.add_file("Album/02.mp3")
    _ = harness.orchestrator.synchronize()
    gone.unlink()
    harness.advance()

    result = harness.orchestrator.synchronize()

    assert result.removed == 1
    assert harness.stored(gone) is None
    assert harness.stored(keep) is not None


def test_unparsable_update_keeps_stored_row(harness: Harness) -> None:
    song = harness.add_file("Album/01.mp3")
    _ = harness.orchestrator.synchronize()
    before = harness.stored(song)
    harness.times.times[song] = FileTimes(created=BASE - 500, modified=BASE + 10)
    harness.extractor.broken.add(song)
    harness.advance()

    result = harness.orchestrator.synchronize()

    assert result.status is RunStatus.SUCCEEDED
    assert result.skipped == 1
    assert any("unsupported audio format" in warning for warning in result.warnings)
    assert harness.stored(song) == before


def test_unparsable_new_file_is_not_catalogued(harness: Harness) -> None:
    broken = harness.add_file("Album/broken.mp3")
    harness.extractor.broken.add(broken)

    result = harness.orchestrator.synchronize()

    assert result.status is RunStatus.SUCCEEDED
    assert (result.added, result.skipped) == (0, 1)
    assert harness.stored(broken) is None


def test_unparsable_update_is_retried_until_it_reads(harness: Harness) -> None:
    song = harness.add_file("Album/01.mp3")
    _ = harness.orchestrator.synchronize()
    harness.times.times[song] = FileTimes(created=BASE - 500, modified=BASE + 10)
    harness.extractor.broken.add(song)
    harness.advance()
    assert harness.orchestrator.synchronize().skipped == 1
    harness.advance()

    # The watermark has passed the file's times; it is retried anyway
    result = harness.orchestrator.synchronize()

    assert result.skipped == 1
    assert harness.extractor.calls.count(song) == 3
    assert harness.catalog.failed_files.get_reason(song) == "unsupported audio format"

    harness.extractor.broken.clear()
    harness.extractor.tags[song] = TrackMetadata(title="Readable again")
    harness.advance()
    result = harness.orchestrator.synchronize()

    assert (result.updated, result.skipped) == (1, 0)
    assert harness.stored(song).title == "Readable again"
    assert list(harness.catalog.iter_failed_files()) == []

    harness.advance()
    _ = harness.orchestrator.synchronize()
    assert harness.extractor.calls.count(song) == 4


def test_unparsable_new_file_is_catalogued_once_readable(harness: Harness) -> None:
    broken = harness.add_file("Album/broken.mp3")
    harness.extractor.broken.add(broken)
    _ = harness.orchestrator.synchronize()
    harness.advance()

    result = harness.orchestrator.synchronize()

    assert (result.added, result.skipped) == (0, 1)
    assert harness.stored(broken) is None

    harness.extractor.broken.clear()
    harness.advance()
    result = harness.orchestrator.synchronize()

    assert (result.added, result.skipped) == (1, 0)
    assert harness.stored(broken) is not None
    assert list(harness.catalog.iter_failed_files()) == []


def test_deleted_unparsable_file_is_forgotten(harness: Harness) -> None:
    broken = harness.add_file("Album/broken.mp3")
    harness.extractor.broken.add(broken)
    _ = harness.orchestrator.synchronize()
    assert list(harness.catalog.iter_failed_files()) == [broken]
    broken.unlink()
    harness.advance()

    result = harness.orchestrator.synchronize()

    assert result.skipped == 0
    assert list(harness.catalog.iter_failed_files()) == []


def test_full_rescan_rereads_every_file(harness: Harness) -> None:
    song = harness.add_file("Album/01.mp3")
    _ = harness.orchestrator.synchronize()
    harness.advance()

    result = harness.orchestrator.synchronize(full_rescan=True)

    assert harness.extractor.calls.count(song) == 2
    assert (result.added, result.updated) == (0, 0)


def test_missing_root_keeps_its_tracks(harness: Harness, tmp_path: Path) -> None:
    song = harness.add_file("Album/01.mp3")
    _ = harness.orchestrator.synchronize()
    harness.library.rename(tmp_path / "unmounted")
    harness.advance()

    result = harness.orchestrator.synchronize()

    assert result.status is RunStatus.SUCCEEDED
    assert result.removed == 0
    assert harness.stored(song) is not None
    assert result.warnings


def test_cancel_before_start_writes_nothing(harness: Harness) -> None:
    _ = harness.add_file("Album/01.mp3")
    token = CancellationToken()
    token.cancel()

    result = harness.orchestrator.synchronize(token)

    assert result.status is RunStatus.CANCELLED
    assert harness.catalog.get_watermark() is None
    assert harness.catalog.tracks.count() == 0
    assert harness.orchestrator.state is SyncState.CANCELLED


def test_cancel_while_reading_tags(harness: Harness) -> None:
    for index in range(3):
        _ = harness.add_file(f"Album/{index:02d}.mp3")
    token = CancellationToken()

    def on_progress(phase: SyncPhase, _fraction: float) -> None:
        if phase is SyncPhase.READING_TAGS:
            token.cancel()

    result = harness.orchestrator.synchronize(token, on_progress=on_progress)

    assert result.status is RunStatus.CANCELLED
    assert harness.catalog.tracks.count() == 0
    # The watermark written at scan start stands
    assert harness.catalog.get_watermark() == BASE


def test_concurrent_run_is_refused(harness: Harness) -> None:
    song = harness.add_file("Album/01.mp3")
    entered = threading.Event()
    release = threading.Event()
    original = harness.extractor.extract

    def blocking_extract(path: Path) -> TrackMetadata:
        entered.set()
        _ = release.wait(5)
        return original(path)

    harness.extractor.extract = blocking_extract  # type: ignore[method-assign]
    results: list[RunResult] = []
    worker = threading.Thread(target=lambda: results.append(harness.orchestrator.synchronize()))
    worker.start()
    try:
        assert entered.wait(5)
        assert harness.orchestrator.is_running
        with pytest.raises(SyncAlreadyRunningError):
            _ = harness.orchestrator.synchronize()
    finally:
        release.set()
        worker.join(5)

    assert results[0].status is RunStatus.SUCCEEDED
    assert harness.stored(song) is not None
    assert not harness.orchestrator.is_running


def test_write_failure_reports_failed_run(harness: Harness, mocker: MockerFixture) -> None:
    _ = harness.add_file("Album/01.mp3")
    _ = mocker.patch.object(harness.catalog, "upsert_tracks", side_effect=CatalogWriteError("disk I/O error"))

    result = harness.orchestrator.synchronize()

    assert result.status is RunStatus.FAILED
    assert isinstance(result.error, CatalogWriteError)
    assert harness.orchestrator.state is SyncState.FAILED


def test_failed_run_reports_batches_already_written(harness: Harness, mocker: MockerFixture) -> None:
    _ = harness.add_file("Album/01.mp3")
    gone = harness.add_file("Album/02.mp3")
    _ = harness.orchestrator.synchronize()
    gone.unlink()
    late = harness.add_file("Album/03.mp3")
    harness.times.times[late] = FileTimes(created=BASE + 10, modified=BASE + 10)
    harness.advance()
    _ = mocker.patch.object(harness.catalog, "upsert_tracks", side_effect=CatalogWriteError("disk I/O error"))

    result = harness.orchestrator.synchronize()

    assert result.status is RunStatus.FAILED
    assert isinstance(result.error, CatalogWriteError)
    assert (result.removed, result.added) == (1, 0)
    assert harness.stored(gone) is None


def test_progress_phases_in_order(harness: Harness) -> None:
    _ = harness.add_file("Album/01.mp3")
    _ = harness.add_cover("Album/cover.jpg", 200, 200)
    seen: list[tuple[SyncPhase, float]] = []

    _ = harness.orchestrator.synchronize(on_progress=lambda phase, fraction: seen.append((phase, fraction)))

    phases: list[SyncPhase] = []
    for phase, fraction in seen:
        assert 0.0 <= fraction <= 1.0
        if not phases or phases[-1] is not phase:
            phases.append(phase)
    assert phases == [
        SyncPhase.SCANNING,
        SyncPhase.READING_TAGS,
        SyncPhase.RENDERING_ART,
        SyncPhase.RECONCILING,
    ]


def test_removed_cover_drops_art_and_renditions(harness: Harness) -> None:
    _ = harness.add_file("Album/01.mp3")
    cover = harness.add_cover("Album/cover.jpg", 400, 400)
    _ = harness.orchestrator.synchronize()
    cover.unlink()
    harness.advance()

    result = harness.orchestrator.synchronize()

    assert result.art_removed == 1
    assert list(harness.catalog.iter_art()) == []
    assert list(harness.artwork_dir.iterdir()) == []


def test_run_durations_use_injected_clock(harness: Harness, mocker: MockerFixture) -> None:
    ticks: Callable[[], float] = mocker.Mock(side_effect=[BASE, BASE + 2.5])
    orchestrator = SyncOrchestrator(
        harness.config,
        harness.catalog,
        harness.extractor,
        PillowImageCodec(),
        clock=ticks,
        read_times=harness.times,
    )

    result = orchestrator.synchronize()

    assert result.duration_seconds == pytest.approx(2.5)
