"""Synchronization use cases."""

from .orchestrator import SyncOrchestrator
from .sync_types import RunProgressCallback, RunResult, RunStatus, SyncPhase, SyncState

__all__ = [
    "RunProgressCallback",
    "RunResult",
    "RunStatus",
    "SyncOrchestrator",
    "SyncPhase",
    "SyncState",
]
