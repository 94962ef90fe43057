"""Tests for persisting files whose tags could not be read."""

import sqlite3
from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from catalogsync.features.catalog.adapters import SqliteCatalogStore
from catalogsync.platform.db.daos import FailedFileDAO
from catalogsync.shared.errors import CatalogWriteError


def _attempts(catalog: SqliteCatalogStore, path: Path) -> int:
    cursor = catalog.conn.execute(
        "SELECT attempts FROM failed_files WHERE directory = ? AND file_name = ?",
        (str(path.parent), path.name),
    )
    return int(cursor.fetchone()[0])


def test_record_and_list(catalog: SqliteCatalogStore) -> None:
    first = Path("/m/B/02.mp3")
    second = Path("/m/A/01.flac")

    assert catalog.record_failed_files([(first, "bad header"), (second, "truncated")]) == 2

    assert list(catalog.iter_failed_files()) == [second, first]
    assert catalog.failed_files.get_reason(first) == "bad header"


def test_recording_again_counts_attempts(catalog: SqliteCatalogStore) -> None:
    path = Path("/m/A/01.mp3")
    _ = catalog.record_failed_files([(path, "bad header")])
    _ = catalog.record_failed_files([(path, "unsupported audio format")])

    assert _attempts(catalog, path) == 2
    assert catalog.failed_files.get_reason(path) == "unsupported audio format"
    assert list(catalog.iter_failed_files()) == [path]


def test_clear_ignores_unknown_paths(catalog: SqliteCatalogStore) -> None:
    kept = Path("/m/A/01.mp3")
    cleared = Path("/m/A/02.mp3")
    _ = catalog.record_failed_files([(kept, "bad header"), (cleared, "bad header")])

    assert catalog.clear_failed_files([cleared, Path("/m/never.mp3")]) == 1
    assert catalog.clear_failed_files([]) == 0
    assert list(catalog.iter_failed_files()) == [kept]


def test_record_rolls_back_on_failure(mocker: MockerFixture) -> None:
    conn = mocker.Mock(spec=sqlite3.Connection)
    conn.executemany.side_effect = sqlite3.OperationalError("database is locked")

    with pytest.raises(CatalogWriteError):
        _ = FailedFileDAO(conn).record([(Path("/m/a.mp3"), "bad header")])

    conn.rollback.assert_called_once()
    conn.commit.assert_not_called()
