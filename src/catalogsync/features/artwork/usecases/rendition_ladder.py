"""Rendition sizing and naming.

Where: catalogsync/features/artwork/usecases/rendition_ladder.py
What: Plan the resized sizes for a source image and name the files written for them.
Why: The pipeline, the reconciler and tests share one definition of both.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

# Encoder name -> rendition file extension
RENDITION_EXTENSIONS: Final[dict[str, str]] = {
    "jpeg": "jpg",
    "png": "png",
    "webp": "webp",
}

_RENDITION_NAME: Final[re.Pattern[str]] = re.compile(r"^(?P<art_id>[^_]+)_(?P<dimension>\d+)\.[A-Za-z0-9]+$")


@dataclass(frozen=True, slots=True)
class RenditionSpec:
    """One rung of the ladder: the long edge ``dimension`` and the resulting size."""

    dimension: int
    width: int
    height: int


def plan_renditions(width: int, height: int, ladder: Sequence[int]) -> list[RenditionSpec]:
    """Return the renditions to produce for a ``width`` x ``height`` source.

    ``ladder`` is ascending; the first size larger than the source's long edge
    ends the plan, so no rendition is ever upscaled. The short edge keeps the
    aspect ratio, rounded to the nearest pixel.
    """
    original = max(width, height)
    short = min(width, height)
    portrait = height > width

    specs: list[RenditionSpec] = []
    for dimension in ladder:
        if dimension > original:
            break
        scaled = round(dimension * short / original)
        if portrait:
            specs.append(RenditionSpec(dimension=dimension, width=scaled, height=dimension))
        else:
            specs.append(RenditionSpec(dimension=dimension, width=dimension, height=scaled))
    return specs


def expected_dimensions(original_dimension: int, ladder: Sequence[int]) -> list[int]:
    """Ladder sizes a source with long edge ``original_dimension`` produces."""
    dimensions: list[int] = []
    for dimension in ladder:
        if dimension > original_dimension:
            break
        dimensions.append(dimension)
    return dimensions


def rendition_file_name(art_id: str, dimension: int, extension: str) -> str:
    return f"{art_id}_{dimension}.{extension}"


def parse_rendition_file_name(name: str) -> tuple[str, int] | None:
    """Return ``(art_id, dimension)`` for a rendition file name, None for anything else."""
    match = _RENDITION_NAME.match(name)
    if match is None:
        return None
    return match.group("art_id"), int(match.group("dimension"))


def iter_renditions(artwork_dir: Path) -> Iterator[tuple[Path, str]]:
    """Yield ``(path, art_id)`` for every rendition file in ``artwork_dir``."""
    if not artwork_dir.is_dir():
        return
    for entry in sorted(artwork_dir.iterdir()):
        parsed = parse_rendition_file_name(entry.name)
        if parsed is not None and entry.is_file():
            yield entry, parsed[0]


def remove_renditions(artwork_dir: Path, art_id: str) -> int:
    """Delete every rendition written for ``art_id``; return how many were removed."""
    removed = 0
    for path in artwork_dir.glob(f"{art_id}_*"):
        parsed = parse_rendition_file_name(path.name)
        if parsed is None or parsed[0] != art_id:
            continue
        path.unlink(missing_ok=True)
        removed += 1
    return removed


__all__ = [
    "RENDITION_EXTENSIONS",
    "RenditionSpec",
    "expected_dimensions",
    "iter_renditions",
    "parse_rendition_file_name",
    "plan_renditions",
    "remove_renditions",
    "rendition_file_name",
]
