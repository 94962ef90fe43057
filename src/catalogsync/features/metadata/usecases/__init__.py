"""Metadata use cases."""

from .ports import MetadataExtractorPort, TrackLookupPort
from .track_builder import TrackBuilder, TrackBuildResult, build_record

__all__ = [
    "MetadataExtractorPort",
    "TrackBuildResult",
    "TrackBuilder",
    "TrackLookupPort",
    "build_record",
]
