"""Cooperative cancellation for synchronization runs.

Where: catalogsync/shared/cancellation.py
What: A thread-safe token checked at file and batch boundaries, and the progress callback type.
Why: Every phase checks the same token without depending on the orchestrator.
"""

from __future__ import annotations

import threading
from collections.abc import Callable

from .errors import SyncCancelledError

# (completed, total) for the current phase
ProgressCallback = Callable[[int, int], None]


class CancellationToken:
    """Flag set from any thread and polled by the running phase."""

    def __init__(self) -> None:
        self._event: threading.Event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        """Raise ``SyncCancelledError`` once cancellation was requested."""

        if self._event.is_set():
            raise SyncCancelledError("Synchronization cancelled")


__all__ = ["CancellationToken", "ProgressCallback"]
