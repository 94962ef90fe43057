"""Summary: Pillow implementation of ``ImageCodecPort``.
Why: Decode artwork once per directory and write deterministic resized copies."""

from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar, final

from PIL import Image, ImageOps

from catalogsync.shared.errors import ImageDecodeError


@final
class PillowDecodedImage:
    """Decoded source image held in memory until closed."""

    # Fixed encoder settings so re-rendering the same source yields identical bytes
    _SAVE_OPTIONS: ClassVar[dict[str, dict[str, Any]]] = {
        "jpeg": {"format": "JPEG", "quality": 90, "subsampling": 0, "optimize": False},
        "webp": {"format": "WEBP", "quality": 90, "method": 6},
        "png": {"format": "PNG", "optimize": False},
    }

    def __init__(self, path: Path, image: Image.Image) -> None:
        self.path: Path = path
        self._image: Image.Image = image

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    def save_rendition(self, width: int, height: int, destination: Path, rendition_format: str) -> None:
        options = self._SAVE_OPTIONS.get(rendition_format)
        if options is None:
            raise ValueError(f"Unsupported rendition format: {rendition_format}")

        try:
            resized = self._image.resize((width, height), Image.Resampling.LANCZOS)
            if rendition_format == "jpeg" and resized.mode != "RGB":
                resized = resized.convert("RGB")
            resized.save(destination, **options)
        except (OSError, ValueError) as e:
            raise ImageDecodeError(self.path, f"cannot write {destination.name}: {e}") from e

    def close(self) -> None:
        self._image.close()


@final
class PillowImageCodec:
    """Open artwork files with Pillow, honouring EXIF orientation."""

    def decode(self, path: Path) -> PillowDecodedImage:
        try:
            with Image.open(path) as opened:
                opened.load()
                image = ImageOps.exif_transpose(opened)
                if image.mode not in ("RGB", "RGBA"):
                    image = image.convert("RGB")
                elif image is opened:
                    image = opened.copy()
        except Image.DecompressionBombError as e:
            raise ImageDecodeError(path, str(e)) from e
        except (OSError, ValueError) as e:
            raise ImageDecodeError(path, str(e)) from e
        return PillowDecodedImage(path, image)


__all__ = ["PillowDecodedImage", "PillowImageCodec"]
