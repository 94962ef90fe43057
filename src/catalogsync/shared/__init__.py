# Where: catalogsync.shared.__init__
# What: Re-export record types and errors used across features.
# Why: Give feature modules one import path for cross-cutting values.

from .catalog import (
    ArtDelta,
    ArtRecord,
    TrackDelta,
    TrackRecord,
    join_path,
    new_identifier,
    split_path,
)
from .cancellation import CancellationToken, ProgressCallback
from .errors import (
    CatalogSyncError,
    CatalogWriteError,
    ConfigError,
    ImageDecodeError,
    MetadataExtractionError,
    SyncAlreadyRunningError,
    SyncCancelledError,
)
from .track_metadata import TrackMetadata

__all__ = [
    "CancellationToken",
    "ProgressCallback",
    "ArtDelta",
    "ArtRecord",
    "TrackDelta",
    "TrackRecord",
    "TrackMetadata",
    "join_path",
    "new_identifier",
    "split_path",
    "CatalogSyncError",
    "CatalogWriteError",
    "ConfigError",
    "ImageDecodeError",
    "MetadataExtractionError",
    "SyncAlreadyRunningError",
    "SyncCancelledError",
]
