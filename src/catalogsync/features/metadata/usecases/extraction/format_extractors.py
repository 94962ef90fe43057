"""Format-specific metadata extractors.

Where: catalogsync/features/metadata/usecases/extraction/format_extractors.py
What: Concrete extractors for the audio containers read through mutagen.
Why: Keep per-format tag keys out of the facade.
"""

from __future__ import annotations

from typing import Any, ClassVar, cast, override

from mutagen.dsf import DSF
from mutagen.easyid3 import EasyID3
from mutagen.flac import FLAC
from mutagen.mp3 import MP3
from mutagen.mp4 import MP4
from mutagen.oggopus import OggOpus
from mutagen.oggvorbis import OggVorbis

from ._base_extractors import BaseAudioExtractor
from ._tag_utils import parse_tuple_numbers

__all__ = [
    "DsfExtractor",
    "FlacExtractor",
    "M4aExtractor",
    "Mp3Extractor",
    "OggVorbisExtractor",
    "OpusExtractor",
]


class Mp3Extractor(BaseAudioExtractor):
    """Extractor for MP3 files using EasyID3 tags."""

    FILE_CLASS: ClassVar[type | None] = MP3
    FILE_INIT_PARAMS: ClassVar[dict[str, Any]] = {"ID3": EasyID3}


class FlacExtractor(BaseAudioExtractor):
    FILE_CLASS: ClassVar[type | None] = FLAC


class OpusExtractor(BaseAudioExtractor):
    """Extractor for Opus (.opus) files using Vorbis comments."""

    FILE_CLASS: ClassVar[type | None] = OggOpus


class OggVorbisExtractor(BaseAudioExtractor):
    """Extractor for Ogg Vorbis (.ogg) files."""

    FILE_CLASS: ClassVar[type | None] = OggVorbis


class M4aExtractor(BaseAudioExtractor):
    """Extractor for M4A/AAC files using MP4 atoms."""

    FILE_CLASS: ClassVar[type | None] = MP4

    TAG_MAPPING: ClassVar[dict[str, str]] = {
        "title": "\xa9nam",
        "artist": "\xa9ART",
        "album_artist": "aART",
        "album": "\xa9alb",
        "track": "trkn",
        "date": "\xa9day",
    }

    @override
    def _get_track_number(self, tags: Any) -> int | None:
        value = cast(list[tuple[int, int]] | None, tags.get(self.TAG_MAPPING["track"]))
        track_number, _ = parse_tuple_numbers(data=value)
        return track_number


class DsfExtractor(BaseAudioExtractor):
    """Extractor for DSF files, which embed a raw ID3 tag."""

    FILE_CLASS: ClassVar[type | None] = DSF

    TAG_MAPPING: ClassVar[dict[str, str]] = {
        "title": "TIT2",
        "artist": "TPE1",
        "album_artist": "TPE2",
        "album": "TALB",
        "track": "TRCK",
        "date": "TDRC",
    }
