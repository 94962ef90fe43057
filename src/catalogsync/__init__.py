"""catalogsync - keep a media catalog in step with the library on disk."""

__version__ = "0.1.0"

__all__ = ["__version__"]
