"""Rich console handler for synchronization events.

Where: platform/logging/handlers.py
What: ``SyncRichHandler`` renders ``sync_event`` records with icons, colours and compact paths.
Why: Keep presentation logic out of the logger bootstrap.
"""

from __future__ import annotations

import logging
from pathlib import PurePath, PurePosixPath, PureWindowsPath
from typing import Any, ClassVar, override

from rich.console import ConsoleRenderable
from rich.logging import RichHandler
from rich.style import Style
from rich.text import Text

from .events import SyncEvent


class SyncRichHandler(RichHandler):
    """Rich handler that renders structured sync events and compact paths."""

    _EVENT_STYLES: ClassVar[dict[str, tuple[str, str]]] = {
        SyncEvent.RUN_START: ("🚀", "cyan"),
        SyncEvent.RUN_COMPLETE: ("✅", "green"),
        SyncEvent.RUN_FAILED: ("❌", "red"),
        SyncEvent.RUN_CANCELLED: ("⏹️", "yellow"),
        SyncEvent.RUN_REFUSED: ("⏳", "yellow"),
        SyncEvent.SCAN_COMPLETE: ("🔎", "blue"),
        SyncEvent.SCAN_WARNING: ("⚠️", "yellow"),
        SyncEvent.FILE_ERROR: ("⛔", "red"),
        SyncEvent.ART_RENDERED: ("🖼️", "magenta"),
        SyncEvent.ART_ERROR: ("⛔", "red"),
        SyncEvent.BATCH_COMMIT: ("💾", "blue"),
        SyncEvent.ORPHANS_REMOVED: ("🧹", "magenta"),
    }
    _EVENT_LABELS: ClassVar[dict[str, str]] = {
        SyncEvent.RUN_START: "Sync started",
        SyncEvent.RUN_COMPLETE: "Sync complete",
        SyncEvent.RUN_FAILED: "Sync failed",
        SyncEvent.RUN_CANCELLED: "Sync cancelled",
        SyncEvent.RUN_REFUSED: "Sync already running",
        SyncEvent.SCAN_COMPLETE: "Scan complete",
        SyncEvent.SCAN_WARNING: "Scan warning",
        SyncEvent.FILE_ERROR: "Skipped ",
        SyncEvent.ART_RENDERED: "Rendered ",
        SyncEvent.ART_ERROR: "Skipped artwork ",
        SyncEvent.BATCH_COMMIT: "Committed batch",
        SyncEvent.ORPHANS_REMOVED: "Removed orphans",
    }
    _METRIC_KEYS: ClassVar[tuple[str, ...]] = (
        "phase",
        "added",
        "updated",
        "unchanged",
        "removed",
        "skipped",
        "art_added",
        "art_updated",
        "art_removed",
        "rows",
        "renditions",
    )
    _PATH_SEGMENT_LIMIT: ClassVar[int] = 4

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs["show_time"] = False
        kwargs["show_path"] = False
        kwargs["show_level"] = False
        kwargs["rich_tracebacks"] = True
        kwargs["markup"] = False
        kwargs["omit_repeated_times"] = False
        super().__init__(*args, **kwargs)

    def _format_path(self, path: str, base: str | None = None) -> Text:
        """Format a path with coloured separators, trimming to the last few segments.

        Args:
            path: Absolute or relative path string to format.
            base: Optional library root used to relativize ``path`` when possible.

        Returns:
            Text: Styled path.
        """
        pure_path = self._to_pure_path(path)
        base_path = self._to_pure_path(base) if base else None

        display_path: PurePath = pure_path
        if base_path is not None and pure_path.is_relative_to(base_path):
            relative_path = pure_path.relative_to(base_path)
            if str(relative_path) not in {"", "."}:
                display_path = relative_path

        separator = "\\" if isinstance(display_path, PureWindowsPath) else "/"
        anchor = display_path.anchor
        body_parts = [part for part in display_path.parts if part and part != anchor]

        truncated = len(body_parts) > self._PATH_SEGMENT_LIMIT
        if truncated:
            body_parts = body_parts[-self._PATH_SEGMENT_LIMIT :]

        display = ""
        if anchor and not truncated:
            display = anchor if anchor.endswith(separator) else anchor + separator
        if truncated:
            display = "…" + separator
        display += separator.join(body_parts)
        return self._style_path_string(display or ".", separator)

    @staticmethod
    def _to_pure_path(raw_path: str) -> PurePath:
        if "\\" in raw_path:
            return PureWindowsPath(raw_path)
        return PurePosixPath(raw_path)

    @staticmethod
    def _style_path_string(path_string: str, separator: str) -> Text:
        text = Text()
        for char in path_string:
            if char in {separator, "…"}:
                _ = text.append(char, style=Style(color="magenta"))
            else:
                _ = text.append(char, style=Style(color="white"))
        return text

    def _render_sync_message(self, record: logging.LogRecord) -> Text | None:
        """Render records carrying a ``sync_event`` attribute; other records return None."""

        event = getattr(record, "sync_event", None)
        if not isinstance(event, str):
            return None

        icon, color = self._EVENT_STYLES.get(event, ("ℹ️", "blue"))
        text = Text()
        _ = text.append(f"{icon} ", style=Style(color=color, bold=True))

        body = Text(style=Style(color=color))
        label = self._EVENT_LABELS.get(event)
        if label is None:
            _ = body.append(record.getMessage())
        else:
            _ = body.append(label)

        path = getattr(record, "path", None)
        if path:
            if not body.plain.endswith(" "):
                _ = body.append(" @ ")
            _ = body.append_text(
                self._format_path(str(path), base=getattr(record, "library_root", None))
            )

        details: list[str] = []
        for key in self._METRIC_KEYS:
            value = getattr(record, key, None)
            if isinstance(value, int) and not isinstance(value, bool):
                details.append(f"{key}={value}")
            elif isinstance(value, str) and value:
                details.append(f"{key}={value}")
        duration = getattr(record, "duration_seconds", None)
        if isinstance(duration, (int, float)):
            details.append(f"duration={duration:.2f}s")
        error_message = getattr(record, "error_message", None)
        if error_message:
            details.append(str(error_message))
        if details:
            _ = body.append(" (" + ", ".join(details) + ")")

        _ = text.append_text(body)
        return text

    @override
    def render_message(self, record: logging.LogRecord, message: str) -> ConsoleRenderable:
        sync_text = self._render_sync_message(record)
        if sync_text is not None:
            return sync_text
        return super().render_message(record, message)


__all__ = ["SyncRichHandler"]
