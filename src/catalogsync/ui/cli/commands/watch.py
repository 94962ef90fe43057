"""src/catalogsync/ui/cli/commands/watch.py
What: Run synchronizations on a fixed interval until interrupted.
Why: Stand-in scheduler for deployments without an external one.
"""

from __future__ import annotations

from typing import override

from catalogsync.features.sync.usecases import RunResult
from catalogsync.platform.logging import logger
from catalogsync.ui.cli.args.options import WatchArgs
from catalogsync.ui.cli.commands.executor import CommandExecutor
from catalogsync.ui.cli.commands.sync import EXIT_CODES


class WatchCommand(CommandExecutor):
    """Command for periodic synchronization."""

    @override
    def execute(self) -> int:
        assert isinstance(self.args, WatchArgs)
        interval = self.args.interval
        last: list[RunResult] = []

        def _on_result(result: RunResult) -> None:
            last.append(result)
            self.result_display.show_result(result, quiet=self.args.quiet)

        def _work() -> int:
            with self.app:
                return self.app.run_periodic(interval, on_result=_on_result)

        logger.info("Watching library every %.0f seconds; press Ctrl-C to stop", interval)
        try:
            _ = self.run_interruptible(_work, self.app.stop)
        except KeyboardInterrupt:
            return 130

        if not last:
            return 0
        return EXIT_CODES[last[-1].status]
