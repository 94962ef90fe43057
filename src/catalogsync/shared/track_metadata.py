# Where: catalogsync.shared.track_metadata
# What: Tag fields returned by a metadata extractor.
# Why: Keep the extractor output independent from the catalog row layout.

from dataclasses import dataclass


@dataclass
class TrackMetadata:
    """Metadata read from a media file's tags."""

    title: str | None = None
    album: str | None = None
    album_artist: str | None = None
    performer: str | None = None
    track_number: int | None = None
    year: int | None = None
    file_extension: str | None = None


__all__ = ["TrackMetadata"]
