"""Catalog record types shared across features.

Where: catalogsync/shared/catalog.py
What: Track and art records, the deltas computed for them, and path splitting helpers.
Why: Every phase of a run exchanges these values, so they live outside any one feature.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from pathlib import Path


def new_identifier() -> str:
    """Return a fresh catalog identifier."""

    return uuid.uuid4().hex


def split_path(path: Path) -> tuple[str, str]:
    """Split ``path`` into the (directory, file name) pair stored in the catalog."""

    return str(path.parent), path.name


def join_path(directory: str, file_name: str) -> Path:
    """Recombine a stored (directory, file name) pair for filesystem access."""

    return Path(directory) / file_name


@dataclass(frozen=True, slots=True)
class TrackRecord:
    """A catalogued media file and its tag fields."""

    track_id: str
    directory: str
    file_name: str
    title: str | None = None
    album: str | None = None
    album_artist: str | None = None
    performer: str | None = None
    track_number: int | None = None
    year: int | None = None

    @property
    def path(self) -> Path:
        return join_path(self.directory, self.file_name)

    def has_same_data(self, other: TrackRecord) -> bool:
        """Return True when ``other`` would not change anything stored for this row."""

        return (
            self.directory == other.directory
            and self.file_name == other.file_name
            and self.title == other.title
            and self.album == other.album
            and self.album_artist == other.album_artist
            and self.performer == other.performer
            and self.track_number == other.track_number
            and self.year == other.year
        )


@dataclass(frozen=True, slots=True)
class ArtRecord:
    """A catalogued artwork source image."""

    art_id: str
    directory: str
    file_name: str
    original_dimension: int

    @property
    def path(self) -> Path:
        return join_path(self.directory, self.file_name)


@dataclass(frozen=True, slots=True)
class TrackDelta:
    """Insert-or-update instruction for one track row."""

    record: TrackRecord
    is_new: bool


@dataclass(frozen=True, slots=True)
class ArtDelta:
    """Insert-or-update instruction for one art row, with the renditions already written."""

    record: ArtRecord
    is_new: bool
    renditions: tuple[Path, ...] = field(default_factory=tuple)


__all__ = [
    "ArtDelta",
    "ArtRecord",
    "TrackDelta",
    "TrackRecord",
    "join_path",
    "new_identifier",
    "split_path",
]
