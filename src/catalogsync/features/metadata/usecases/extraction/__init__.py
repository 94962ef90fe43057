"""
Summary: Public surface for metadata extraction modules.
Why: Provide a stable import path for the service wiring and tests.
"""

from .format_extractors import (
    DsfExtractor,
    FlacExtractor,
    M4aExtractor,
    Mp3Extractor,
    OggVorbisExtractor,
    OpusExtractor,
)
from .track_metadata_extractor import MutagenMetadataExtractor

__all__ = [
    "MutagenMetadataExtractor",
    "Mp3Extractor",
    "FlacExtractor",
    "OpusExtractor",
    "OggVorbisExtractor",
    "M4aExtractor",
    "DsfExtractor",
]
