"""Structured log events emitted during a synchronization run.

Where: platform/logging/events.py
What: Event identifiers and a helper that attaches them to log records.
Why: The console handler renders these events with dedicated styling while
the file handler keeps the plain message.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from pathlib import PurePath
from typing import Any


class SyncEvent(StrEnum):
    """Identifiers stored on ``LogRecord.sync_event``."""

    RUN_START = "sync.run.start"
    RUN_COMPLETE = "sync.run.complete"
    RUN_FAILED = "sync.run.failed"
    RUN_CANCELLED = "sync.run.cancelled"
    RUN_REFUSED = "sync.run.refused"
    SCAN_COMPLETE = "sync.scan.complete"
    SCAN_WARNING = "sync.scan.warning"
    FILE_ERROR = "sync.file.error"
    ART_RENDERED = "sync.art.rendered"
    ART_ERROR = "sync.art.error"
    BATCH_COMMIT = "sync.batch.commit"
    ORPHANS_REMOVED = "sync.catalog.orphans"


def log_event(
    logger: logging.Logger,
    level: int,
    event: SyncEvent,
    message: str,
    *args: object,
    **context: Any,
) -> None:
    """Log ``message`` with ``event`` and ``context`` attached as record attributes.

    Path values are stringified so every handler can format them.
    """

    extra: dict[str, Any] = {"sync_event": str(event)}
    for key, value in context.items():
        extra[key] = str(value) if isinstance(value, PurePath) else value
    logger.log(level, message, *args, extra=extra, stacklevel=2)


__all__ = ["SyncEvent", "log_event"]
