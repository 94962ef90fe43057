"""Application services."""

from .sync_service import SyncRequest, SyncService

__all__ = ["SyncRequest", "SyncService"]
