"""Summary: States, phases and the result value of a synchronization run.
Why: Callers and the CLI read run outcomes without touching orchestrator internals."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum


class SyncState(StrEnum):
    IDLE = "idle"
    SCANNING_FILESYSTEM = "scanning_filesystem"
    BUILDING_DELTAS = "building_deltas"
    RECONCILING = "reconciling"
    FAILED = "failed"
    CANCELLED = "cancelled"


class SyncPhase(StrEnum):
    """Units of work reported through the progress callback."""

    SCANNING = "scanning"
    READING_TAGS = "reading_tags"
    RENDERING_ART = "rendering_art"
    RECONCILING = "reconciling"


class RunStatus(StrEnum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


# (phase, fraction in [0, 1])
RunProgressCallback = Callable[[SyncPhase, float], None]


@dataclass
class RunResult:
    """Outcome of one ``synchronize`` call.

    Counts reflect rows actually written; a cancelled or failed run reports
    the batches committed before it stopped.
    """

    status: RunStatus
    added: int = 0
    updated: int = 0
    removed: int = 0
    skipped: int = 0
    art_added: int = 0
    art_updated: int = 0
    art_removed: int = 0
    warnings: list[str] = field(default_factory=list)
    error: BaseException | None = None
    started_at: float = 0.0
    finished_at: float = 0.0

    @property
    def duration_seconds(self) -> float:
        return max(0.0, self.finished_at - self.started_at)

    @property
    def succeeded(self) -> bool:
        return self.status is RunStatus.SUCCEEDED


__all__ = [
    "RunProgressCallback",
    "RunResult",
    "RunStatus",
    "SyncPhase",
    "SyncState",
]
