"""Logging facade exports.

Where: platform/logging/__init__.py
What: Re-export the application logger, setup helper, event helpers and Rich handler.
Why: Provide a single canonical import path.
"""

from __future__ import annotations

from .config import DEFAULT_LOG_FILE, LOGGER_NAME, logger, setup_logger
from .events import SyncEvent, log_event
from .handlers import SyncRichHandler

__all__ = [
    "DEFAULT_LOG_FILE",
    "LOGGER_NAME",
    "SyncEvent",
    "SyncRichHandler",
    "log_event",
    "logger",
    "setup_logger",
]
