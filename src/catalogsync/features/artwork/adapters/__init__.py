"""Image codec adapters."""

from .pillow_codec import PillowDecodedImage, PillowImageCodec

__all__ = ["PillowDecodedImage", "PillowImageCodec"]
