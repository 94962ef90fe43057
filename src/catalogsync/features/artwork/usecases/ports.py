"""Summary: Ports defining artwork pipeline dependencies.
Why: Keep the pipeline independent of Pillow and SQLite."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Protocol, runtime_checkable

from catalogsync.shared.catalog import ArtRecord


@runtime_checkable
class DecodedImage(Protocol):
    """An opened source image ready to be resized."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def save_rendition(self, width: int, height: int, destination: Path, rendition_format: str) -> None:
        """Write a resized copy to ``destination``; raise ``ImageDecodeError`` on failure."""
        ...

    def close(self) -> None: ...


@runtime_checkable
class ImageCodecPort(Protocol):
    """Port for decoding artwork files."""

    def decode(self, path: Path) -> DecodedImage:
        """Open ``path``; raise ``ImageDecodeError`` when it is not a readable image."""
        ...


@runtime_checkable
class ArtLookupPort(Protocol):
    """Port for resolving stored art by source path."""

    def lookup_art_by_path(self, paths: Iterable[Path]) -> dict[Path, ArtRecord]:
        """Return stored art for ``paths``; unknown paths are absent."""
        ...


__all__ = ["ArtLookupPort", "DecodedImage", "ImageCodecPort"]
