"""Render user-facing summaries for sync runs."""

from __future__ import annotations

from typing import Final, final

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from catalogsync.features.sync.usecases import RunResult, RunStatus

WARNING_PREVIEW_LIMIT: Final[int] = 10

_STATUS_STYLES: Final[dict[RunStatus, str]] = {
    RunStatus.SUCCEEDED: "green",
    RunStatus.FAILED: "red",
    RunStatus.CANCELLED: "yellow",
}


@final
class ResultDisplay:
    """Handles result display in CLI."""

    console: Console

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def show_result(self, result: RunResult, *, quiet: bool = False) -> None:
        """Display the counts and warnings of one run.

        Failed runs are always shown, even in quiet mode.
        """
        if quiet and result.status is not RunStatus.FAILED:
            return

        style = _STATUS_STYLES[result.status]
        table = Table(title=f"[bold {style}]Sync {result.status.value}[/bold {style}]")
        table.add_column("", style="bold")
        table.add_column("Tracks", justify="right")
        table.add_column("Artwork", justify="right")
        table.add_row("Added", str(result.added), str(result.art_added))
        table.add_row("Updated", str(result.updated), str(result.art_updated))
        table.add_row("Removed", str(result.removed), str(result.art_removed))
        table.add_row("Skipped", str(result.skipped), "")
        self.console.print(table)
        self.console.print(f"Duration: {result.duration_seconds:.2f}s")

        if result.error is not None:
            self.console.print(f"[red]Error: {escape(str(result.error))}[/red]")

        if not result.warnings or quiet:
            return
        self.console.print(f"[yellow]Warnings: {len(result.warnings)}[/yellow]")
        for warning in result.warnings[:WARNING_PREVIEW_LIMIT]:
            self.console.print(f"  • {warning}", markup=False)
        remaining = len(result.warnings) - WARNING_PREVIEW_LIMIT
        if remaining > 0:
            self.console.print(f"...and {remaining} more.")


__all__ = ["ResultDisplay"]
