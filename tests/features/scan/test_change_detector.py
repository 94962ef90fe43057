"""
Summary: Tests for filesystem enumeration and watermark classification.
Why: Classification decides which files get their tags read, so its edges are pinned here.
"""

from collections.abc import Callable
from pathlib import Path
from types import SimpleNamespace

import pytest
from pytest_mock import MockerFixture

from catalogsync.features.scan.usecases import (
    ChangeKind,
    ChangeSet,
    FileTimes,
    classify,
    detect_changes,
    read_file_times,
)
from catalogsync.shared.cancellation import CancellationToken
from catalogsync.shared.errors import SyncCancelledError

EXTENSIONS = frozenset({".mp3", ".flac"})


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.touch()
    return path


def _fixed_times(times: dict[str, FileTimes], default: FileTimes) -> Callable[[Path], FileTimes]:
    def read(path: Path) -> FileTimes:
        return times.get(path.name, default)

    return read


@pytest.mark.parametrize(
    ("times", "watermark", "expected"),
    [
        (FileTimes(created=5, modified=5), None, ChangeKind.ADDED),
        (FileTimes(created=15, modified=15), 10, ChangeKind.ADDED),
        (FileTimes(created=5, modified=15), 10, ChangeKind.UPDATED),
        (FileTimes(created=5, modified=10), 10, ChangeKind.UNCHANGED),
    ],
)
def test_classify(times: FileTimes, watermark: float | None, expected: ChangeKind) -> None:
    assert classify(times, watermark) is expected


def test_first_run_adds_every_media_file(tmp_path: Path) -> None:
    song = _touch(tmp_path / "Artist" / "Album" / "01.mp3")
    upper = _touch(tmp_path / "Artist" / "Album" / "02.FLAC")
    _ = _touch(tmp_path / "Artist" / "Album" / "cover.jpg")
    _ = _touch(tmp_path / "notes.txt")

    changes = detect_changes([tmp_path], EXTENSIONS, None)

    assert changes.added == {song, upper}
    assert not changes.updated and not changes.unchanged
    assert changes.directories == {song.parent}


def test_classification_against_watermark(tmp_path: Path) -> None:
    new = _touch(tmp_path / "new.mp3")
    edited = _touch(tmp_path / "edited.mp3")
    old = _touch(tmp_path / "old.mp3")
    read = _fixed_times(
        {
            "new.mp3": FileTimes(created=200, modified=200),
            "edited.mp3": FileTimes(created=50, modified=150),
        },
        FileTimes(created=50, modified=50),
    )

    changes = detect_changes([tmp_path], EXTENSIONS, 100, read_times=read)

    assert changes.added == {new}
    assert changes.updated == {edited}
    assert changes.unchanged == {old}
    assert changes.present == {new, edited, old}


def test_missing_root_is_reported_not_raised(tmp_path: Path) -> None:
    present = _touch(tmp_path / "lib" / "a.mp3")
    missing = tmp_path / "unmounted"

    changes = detect_changes([missing, tmp_path / "lib"], EXTENSIONS, None)

    assert changes.added == {present}
    assert changes.failed_directories == {missing}
    assert changes.is_under_failed(missing / "Artist" / "song.mp3")
    assert not changes.is_under_failed(present)
    assert any("unmounted" in warning for warning in changes.warnings)


def test_stat_failure_keeps_file_unchanged(tmp_path: Path) -> None:
    broken = _touch(tmp_path / "broken.mp3")
    vanished = _touch(tmp_path / "vanished.mp3")

    def read(path: Path) -> FileTimes:
        if path == broken:
            raise PermissionError(13, "Permission denied", str(path))
        if path == vanished:
            raise FileNotFoundError(2, "No such file", str(path))
        return FileTimes(created=1, modified=1)

    changes = detect_changes([tmp_path], EXTENSIONS, 10, read_times=read)

    assert changes.unchanged == {broken}
    assert vanished not in changes.present
    assert len(changes.warnings) == 1


def test_cancellation_is_checked_per_file(tmp_path: Path) -> None:
    _ = _touch(tmp_path / "a.mp3")
    token = CancellationToken()
    token.cancel()

    with pytest.raises(SyncCancelledError):
        _ = detect_changes([tmp_path], EXTENSIONS, None, cancel=token)


def test_progress_reported_per_root(tmp_path: Path) -> None:
    first = tmp_path / "one"
    second = tmp_path / "two"
    _ = _touch(first / "a.mp3")
    _ = _touch(second / "b.mp3")
    calls: list[tuple[int, int]] = []

    _ = detect_changes(
        [first, second],
        EXTENSIONS,
        None,
        on_progress=lambda done, total: calls.append((done, total)),
    )

    assert calls == [(1, 2), (2, 2)]


def test_change_set_buckets_are_disjoint() -> None:
    changes = ChangeSet()
    changes.add(Path("/m/a.mp3"), ChangeKind.ADDED)
    changes.add(Path("/m/b.mp3"), ChangeKind.UPDATED)
    changes.add(Path("/m/c.mp3"), ChangeKind.UNCHANGED)

    assert changes.added.isdisjoint(changes.updated)
    assert changes.updated.isdisjoint(changes.unchanged)
    assert len(changes.present) == 3


def test_requeue_moves_only_unchanged_paths() -> None:
    kept = Path("/m/a.mp3")
    already_added = Path("/m/b.mp3")
    changes = ChangeSet(unchanged={kept}, added={already_added})

    assert changes.requeue(kept, ChangeKind.UPDATED)
    assert not changes.requeue(already_added, ChangeKind.UPDATED)
    assert not changes.requeue(Path("/m/missing.mp3"), ChangeKind.ADDED)

    assert changes.updated == {kept}
    assert changes.added == {already_added}
    assert not changes.unchanged


def test_read_file_times_prefers_birth_time(mocker: MockerFixture) -> None:
    path = mocker.Mock(spec=Path)
    path.stat.return_value = SimpleNamespace(st_birthtime=10.0, st_ctime=30.0, st_mtime=20.0)

    assert read_file_times(path) == FileTimes(created=10.0, modified=20.0)


def test_read_file_times_falls_back_to_change_time(mocker: MockerFixture) -> None:
    # Without a birth time a content write moves ctime too, so such a file
    # classifies as added; the track builder still keeps its stored identifier.
    path = mocker.Mock(spec=Path)
    path.stat.return_value = SimpleNamespace(st_ctime=30.0, st_mtime=30.0)

    times = read_file_times(path)

    assert times == FileTimes(created=30.0, modified=30.0)
    assert classify(times, 25.0) is ChangeKind.ADDED
