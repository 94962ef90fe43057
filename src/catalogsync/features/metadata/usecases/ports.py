"""Summary: Ports defining track builder dependencies.
Why: Decouple the builder from mutagen and SQLite so tests can supply fakes."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Protocol, runtime_checkable

from catalogsync.shared.catalog import TrackRecord
from catalogsync.shared.track_metadata import TrackMetadata


@runtime_checkable
class MetadataExtractorPort(Protocol):
    """Port for reading tags from one media file."""

    def extract(self, path: Path) -> TrackMetadata:
        """Return the tags of ``path``; raise ``MetadataExtractionError`` when unreadable."""
        ...


@runtime_checkable
class TrackLookupPort(Protocol):
    """Port for resolving stored tracks by path."""

    def lookup_tracks_by_path(self, paths: Iterable[Path]) -> dict[Path, TrackRecord]:
        """Return stored tracks for ``paths``; unknown paths are absent."""
        ...


__all__ = ["MetadataExtractorPort", "TrackLookupPort"]
