"""Artwork use cases."""

from .art_pipeline import ArtBuildResult, ArtPipeline
from .ports import ArtLookupPort, DecodedImage, ImageCodecPort
from .rendition_ladder import (
    RENDITION_EXTENSIONS,
    RenditionSpec,
    expected_dimensions,
    iter_renditions,
    parse_rendition_file_name,
    plan_renditions,
    remove_renditions,
    rendition_file_name,
)

__all__ = [
    "ArtBuildResult",
    "ArtLookupPort",
    "ArtPipeline",
    "DecodedImage",
    "ImageCodecPort",
    "RENDITION_EXTENSIONS",
    "RenditionSpec",
    "expected_dimensions",
    "iter_renditions",
    "parse_rendition_file_name",
    "plan_renditions",
    "remove_renditions",
    "rendition_file_name",
]
