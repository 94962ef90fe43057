"""Shared base classes for metadata extractors.

Where: catalogsync/features/metadata/usecases/extraction/_base_extractors.py
What: Abstract extractor plus the common open-and-map logic built on mutagen.
Why: Format extractors only declare their file class and tag keys.
"""

from __future__ import annotations

import abc
from pathlib import Path
from typing import Any, ClassVar, override

from mutagen import MutagenError

from catalogsync.platform.logging import logger
from catalogsync.shared.errors import MetadataExtractionError
from catalogsync.shared.track_metadata import TrackMetadata

from ._tag_utils import first_text, parse_slash_separated, parse_year

__all__ = [
    "AudioFormatExtractor",
    "BaseAudioExtractor",
]


class AudioFormatExtractor(abc.ABC):
    """Abstract base class for audio metadata extractors."""

    @abc.abstractmethod
    def extract_metadata(self, file_path: Path) -> TrackMetadata:
        """Extract metadata from an audio file."""
        raise NotImplementedError


class BaseAudioExtractor(AudioFormatExtractor, abc.ABC):
    """Base class for mutagen-backed extractors."""

    FILE_CLASS: ClassVar[type | None] = None
    FILE_INIT_PARAMS: ClassVar[dict[str, Any]] = {}

    TAG_MAPPING: ClassVar[dict[str, str]] = {
        "title": "title",
        "artist": "artist",
        "album_artist": "albumartist",
        "album": "album",
        "track": "tracknumber",
        "date": "date",
    }

    def _open_file(self, file_path: Path) -> Any:
        """Open the audio file and return its tag mapping."""
        if self.FILE_CLASS is None:
            raise NotImplementedError("FILE_CLASS must be defined in subclass")

        try:
            audio = self.FILE_CLASS(file_path, **self.FILE_INIT_PARAMS)
        except MutagenError as exc:
            raise MetadataExtractionError(file_path, str(exc)) from exc
        except OSError as exc:
            raise MetadataExtractionError(file_path, exc.strerror or str(exc)) from exc

        tags = getattr(audio, "tags", None)
        return tags if tags is not None else {}

    def _get_tag_value(self, tags: Any, key: str) -> str | None:
        if not key:
            return None
        return first_text(tags.get(key))

    def _get_track_number(self, tags: Any) -> int | None:
        track_number, _ = parse_slash_separated(self._get_tag_value(tags, self.TAG_MAPPING["track"]) or "")
        return track_number

    @override
    def extract_metadata(self, file_path: Path) -> TrackMetadata:
        tags = self._open_file(file_path)
        logger.debug("Opened %s with tags type: %s", file_path, type(tags).__name__)

        metadata = TrackMetadata(
            title=self._get_tag_value(tags, self.TAG_MAPPING["title"]),
            performer=self._get_tag_value(tags, self.TAG_MAPPING["artist"]),
            album_artist=self._get_tag_value(tags, self.TAG_MAPPING["album_artist"]),
            album=self._get_tag_value(tags, self.TAG_MAPPING["album"]),
            track_number=self._get_track_number(tags),
            year=parse_year(self._get_tag_value(tags, self.TAG_MAPPING["date"])),
            file_extension=file_path.suffix.lower(),
        )
        logger.debug("Extracted metadata: %s", metadata)
        return metadata
