"""src/catalogsync/ui/cli/commands/executor.py
What: Provide shared wiring for CLI command executors.
Why: Both commands build the same service and displays and run work off the main thread.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Callable, TypeVar

from catalogsync.application.services.sync_service import SyncService
from catalogsync.ui.cli.args.options import SyncArgs, WatchArgs
from catalogsync.ui.cli.display.progress import ProgressDisplay
from catalogsync.ui.cli.display.result import ResultDisplay

T = TypeVar("T")


class CommandExecutor(ABC):
    """Base class for command execution."""

    args: SyncArgs | WatchArgs
    app: SyncService
    progress_display: ProgressDisplay
    result_display: ResultDisplay

    def __init__(
        self,
        args: SyncArgs | WatchArgs,
        *,
        service_factory: Callable[..., SyncService] = SyncService,
    ) -> None:
        self.args = args
        self.app = service_factory(args.config)
        self.progress_display = ProgressDisplay(quiet=args.quiet)
        self.result_display = ResultDisplay()

    @abstractmethod
    def execute(self) -> int:
        """Execute the command.

        Returns:
            int: Process exit code.
        """
        pass

    def run_interruptible(self, work: Callable[[], T], on_interrupt: Callable[[], None]) -> T:
        """Run ``work`` on a worker thread, calling ``on_interrupt`` on Ctrl-C.

        The worker is always joined, so ``work`` finishes its current batch
        before this returns. ``KeyboardInterrupt`` is re-raised afterwards.
        """
        outcome: dict[str, T] = {}
        failure: list[BaseException] = []

        def _target() -> None:
            try:
                outcome["value"] = work()
            except BaseException as e:  # re-raised on the calling thread
                failure.append(e)

        worker = threading.Thread(target=_target, name="catalogsync-worker", daemon=True)
        worker.start()
        interrupted = False
        while worker.is_alive():
            try:
                worker.join(timeout=0.2)
            except KeyboardInterrupt:
                interrupted = True
                on_interrupt()

        if failure:
            raise failure[0]
        if interrupted:
            raise KeyboardInterrupt
        return outcome["value"]
