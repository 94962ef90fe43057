"""Progress display functionality for CLI."""

from typing import Any, Callable, final

from rich.console import Console
from rich.progress import BarColumn, Progress, TaskID, TextColumn, TimeElapsedColumn

from catalogsync.features.sync.usecases import RunProgressCallback, RunResult, SyncPhase
from catalogsync.platform.logging import SyncRichHandler, logger

_PHASE_LABELS: dict[SyncPhase, str] = {
    SyncPhase.SCANNING: "Scanning library",
    SyncPhase.READING_TAGS: "Reading tags",
    SyncPhase.RENDERING_ART: "Rendering artwork",
    SyncPhase.RECONCILING: "Writing catalog",
}


def find_log_console() -> Console | None:
    """Return the console used by the installed Rich log handler, if any."""

    for handler in logger.handlers:
        if isinstance(handler, SyncRichHandler):
            return handler.console
    return None


@final
class ProgressDisplay:
    """Shows one progress bar per sync phase while a run executes."""

    def __init__(self, *, quiet: bool = False) -> None:
        self.quiet: bool = quiet

    def run(self, action: Callable[[RunProgressCallback | None], RunResult]) -> RunResult:
        """Execute ``action`` with a progress callback wired to a Rich progress bar.

        Args:
            action: Callable running the sync; it receives the callback to forward.

        Returns:
            RunResult: Whatever ``action`` returned.
        """
        if self.quiet:
            return action(None)

        progress_kwargs: dict[str, Any] = {
            "transient": True,
            "redirect_stdout": False,
            "redirect_stderr": False,
        }
        console = find_log_console()
        if console is not None:
            progress_kwargs["console"] = console

        columns = (
            TextColumn("[cyan]{task.description}"),
            BarColumn(),
            TextColumn("{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
        )
        with Progress(*columns, **progress_kwargs) as progress:
            tasks: dict[SyncPhase, TaskID] = {}

            def _cb(phase: SyncPhase, fraction: float) -> None:
                task_id = tasks.get(phase)
                if task_id is None:
                    task_id = progress.add_task(_PHASE_LABELS.get(phase, str(phase)), total=100)
                    tasks[phase] = task_id
                _ = progress.update(task_id, completed=round(fraction * 100))

            return action(_cb)


__all__ = ["ProgressDisplay", "find_log_console"]
