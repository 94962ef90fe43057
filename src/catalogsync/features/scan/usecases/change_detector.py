"""
Summary: Enumerate library roots and classify files against the sync watermark.
Why: Only files created or modified since the last run need their tags read.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Collection, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from catalogsync.platform.logging import SyncEvent, log_event, logger
from catalogsync.shared.cancellation import CancellationToken, ProgressCallback


@dataclass(frozen=True, slots=True)
class FileTimes:
    """Creation and last-write time of a file, in epoch seconds."""

    created: float
    modified: float


def read_file_times(path: Path) -> FileTimes:
    """Read creation and modification times for ``path``.

    ``st_birthtime`` is used where the platform reports it; elsewhere the
    inode change time stands in for the creation time.
    """
    stat_result = path.stat()
    created = getattr(stat_result, "st_birthtime", None)
    if created is None:
        created = stat_result.st_ctime
    return FileTimes(created=float(created), modified=float(stat_result.st_mtime))


class ChangeKind(StrEnum):
    ADDED = "added"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


def classify(times: FileTimes, watermark: float | None) -> ChangeKind:
    """Classify a file against the watermark of the previous run."""

    if watermark is None or times.created > watermark:
        return ChangeKind.ADDED
    if times.modified > watermark:
        return ChangeKind.UPDATED
    return ChangeKind.UNCHANGED


@dataclass
class ChangeSet:
    """Result of one filesystem enumeration.

    ``added``, ``updated`` and ``unchanged`` are disjoint.
    """

    added: set[Path] = field(default_factory=set)
    updated: set[Path] = field(default_factory=set)
    unchanged: set[Path] = field(default_factory=set)
    failed_directories: set[Path] = field(default_factory=set)
    warnings: list[str] = field(default_factory=list)

    @property
    def present(self) -> set[Path]:
        return self.added | self.updated | self.unchanged

    @property
    def directories(self) -> set[Path]:
        """Every directory holding at least one present media file."""
        return {path.parent for path in self.present}

    def is_under_failed(self, path: Path) -> bool:
        """Return True when ``path`` lies in a directory that could not be enumerated."""
        return any(path.is_relative_to(directory) for directory in self.failed_directories)

    def add(self, path: Path, kind: ChangeKind) -> None:
        match kind:
            case ChangeKind.ADDED:
                self.added.add(path)
            case ChangeKind.UPDATED:
                self.updated.add(path)
            case ChangeKind.UNCHANGED:
                self.unchanged.add(path)

    def requeue(self, path: Path, kind: ChangeKind) -> bool:
        """Move an unchanged ``path`` into ``kind`` so its tags are read again.

        Returns:
            bool: False when ``path`` was not classified unchanged.
        """
        if path not in self.unchanged:
            return False
        self.unchanged.discard(path)
        self.add(path, kind)
        return True


def detect_changes(
    roots: Sequence[Path],
    extensions: Collection[str],
    watermark: float | None,
    *,
    cancel: CancellationToken | None = None,
    read_times: Callable[[Path], FileTimes] = read_file_times,
    on_progress: ProgressCallback | None = None,
) -> ChangeSet:
    """Walk ``roots`` and classify every file whose suffix is in ``extensions``.

    Args:
        roots: Library root directories.
        extensions: Suffixes including the leading dot, compared case-insensitively.
        watermark: Start time of the previous run, None on the first run.
        cancel: Token checked before each file.
        read_times: Time reader, replaceable in tests.
        on_progress: Called with ``(roots_done, roots_total)``.

    Returns:
        ChangeSet: Classified paths plus the directories that could not be read.

    Raises:
        SyncCancelledError: If cancellation was requested.
    """
    wanted = {extension.lower() for extension in extensions}
    changes = ChangeSet()

    def record_failure(directory: Path, error: OSError | str) -> None:
        message = f"Cannot enumerate {directory}: {error}"
        changes.failed_directories.add(directory)
        changes.warnings.append(message)
        log_event(
            logger,
            logging.WARNING,
            SyncEvent.SCAN_WARNING,
            message,
            path=directory,
            error_message=str(error),
        )

    def on_walk_error(error: OSError) -> None:
        record_failure(Path(error.filename) if error.filename else Path("."), error)

    for index, root in enumerate(roots, start=1):
        if not root.is_dir():
            record_failure(root, "library root is missing or not a directory")
            if on_progress is not None:
                on_progress(index, len(roots))
            continue

        for dirpath, dirnames, filenames in os.walk(root, onerror=on_walk_error):
            dirnames.sort()
            directory = Path(dirpath)
            for filename in sorted(filenames):
                if cancel is not None:
                    cancel.raise_if_cancelled()

                path = directory / filename
                if path.suffix.lower() not in wanted:
                    continue

                try:
                    times = read_times(path)
                except FileNotFoundError:
                    logger.debug("File vanished during scan: %s", path)
                    continue
                except OSError as e:
                    # Keep the stored row; the file is reclassified next run
                    message = f"Cannot stat {path}: {e}"
                    changes.warnings.append(message)
                    log_event(
                        logger,
                        logging.WARNING,
                        SyncEvent.SCAN_WARNING,
                        message,
                        path=path,
                        error_message=str(e),
                    )
                    changes.unchanged.add(path)
                    continue

                changes.add(path, classify(times, watermark))

        if on_progress is not None:
            on_progress(index, len(roots))

    log_event(
        logger,
        logging.INFO,
        SyncEvent.SCAN_COMPLETE,
        "Scan complete: %d added, %d updated, %d unchanged",
        len(changes.added),
        len(changes.updated),
        len(changes.unchanged),
        added=len(changes.added),
        updated=len(changes.updated),
        unchanged=len(changes.unchanged),
    )
    return changes


__all__ = [
    "ChangeKind",
    "ChangeSet",
    "FileTimes",
    "classify",
    "detect_changes",
    "read_file_times",
]
