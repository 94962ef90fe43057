"""
Summary: Exception hierarchy shared by every synchronization component.
Why: Let callers tell recoverable per-file failures apart from run-fatal catalog failures.
"""

from __future__ import annotations

from pathlib import Path


class CatalogSyncError(Exception):
    """Base class for all catalogsync errors."""


class ConfigError(CatalogSyncError):
    """Raised when the configuration file is missing or invalid."""


class MetadataExtractionError(CatalogSyncError):
    """Raised when tags cannot be read from a media file."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to read tags from {path}: {reason}")
        self.path: Path = path
        self.reason: str = reason


class ImageDecodeError(CatalogSyncError):
    """Raised when an artwork file cannot be decoded or re-encoded."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to decode image {path}: {reason}")
        self.path: Path = path
        self.reason: str = reason


class CatalogWriteError(CatalogSyncError):
    """Raised when a batched catalog write cannot be committed."""


class SyncCancelledError(CatalogSyncError):
    """Raised at a file or batch boundary once cancellation was requested."""


class SyncAlreadyRunningError(CatalogSyncError):
    """Raised when a run is requested while another one is active."""


__all__ = [
    "CatalogSyncError",
    "ConfigError",
    "MetadataExtractionError",
    "ImageDecodeError",
    "CatalogWriteError",
    "SyncCancelledError",
    "SyncAlreadyRunningError",
]
