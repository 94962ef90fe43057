"""Audio file metadata extraction.

Where: catalogsync/features/metadata/usecases/extraction/track_metadata_extractor.py
What: ``MutagenMetadataExtractor`` routes a path to its format extractor.
Why: Callers depend on one ``extract(path)`` method with a single failure type.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar

import mutagen
from mutagen import MutagenError

from catalogsync.shared.errors import MetadataExtractionError
from catalogsync.shared.track_metadata import TrackMetadata

from ._base_extractors import AudioFormatExtractor
from ._tag_utils import first_text, parse_slash_separated, parse_year
from .format_extractors import (
    DsfExtractor,
    FlacExtractor,
    M4aExtractor,
    Mp3Extractor,
    OggVorbisExtractor,
    OpusExtractor,
)

__all__ = ["MutagenMetadataExtractor"]


class MutagenMetadataExtractor:
    """Read track tags with mutagen, selecting the extractor by file extension.

    Extensions without a dedicated extractor go through ``mutagen.File`` with
    easy tags, so any container mutagen recognises can be catalogued.
    """

    _format_map: ClassVar[dict[str, AudioFormatExtractor]] = {
        ".mp3": Mp3Extractor(),
        ".flac": FlacExtractor(),
        ".m4a": M4aExtractor(),
        ".dsf": DsfExtractor(),
        ".opus": OpusExtractor(),
        ".ogg": OggVorbisExtractor(),
    }

    def extract(self, path: Path) -> TrackMetadata:
        """Extract metadata from an audio file.

        Raises:
            MetadataExtractionError: If the file cannot be opened or is not a recognised container.
        """
        extractor = self._format_map.get(path.suffix.lower())
        if extractor is not None:
            return extractor.extract_metadata(path)
        return self._extract_generic(path)

    def _extract_generic(self, path: Path) -> TrackMetadata:
        try:
            audio: Any = mutagen.File(path, easy=True)
        except MutagenError as exc:
            raise MetadataExtractionError(path, str(exc)) from exc
        except OSError as exc:
            raise MetadataExtractionError(path, exc.strerror or str(exc)) from exc

        if audio is None:
            raise MetadataExtractionError(path, "unsupported audio format")

        tags = audio.tags if audio.tags is not None else {}
        track_number, _ = parse_slash_separated(first_text(tags.get("tracknumber")) or "")
        return TrackMetadata(
            title=first_text(tags.get("title")),
            performer=first_text(tags.get("artist")),
            album_artist=first_text(tags.get("albumartist")),
            album=first_text(tags.get("album")),
            track_number=track_number,
            year=parse_year(first_text(tags.get("date"))),
            file_extension=path.suffix.lower(),
        )
