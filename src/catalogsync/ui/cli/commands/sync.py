"""src/catalogsync/ui/cli/commands/sync.py
What: Execute a single synchronization via the CLI.
Why: Bridge parsed arguments with the application service and map outcomes to exit codes.
"""

from __future__ import annotations

from typing import override

from catalogsync.application.services.sync_service import SyncRequest
from catalogsync.features.sync.usecases import RunResult, RunStatus
from catalogsync.shared.cancellation import CancellationToken
from catalogsync.ui.cli.args.options import SyncArgs
from catalogsync.ui.cli.commands.executor import CommandExecutor

EXIT_CODES: dict[RunStatus, int] = {
    RunStatus.SUCCEEDED: 0,
    RunStatus.FAILED: 1,
    RunStatus.CANCELLED: 130,
}


class SyncCommand(CommandExecutor):
    """Command for running one synchronization."""

    @override
    def execute(self) -> int:
        assert isinstance(self.args, SyncArgs)
        request = SyncRequest(full_rescan=self.args.full_rescan)
        token = CancellationToken()

        def _work() -> RunResult:
            with self.app:
                return self.progress_display.run(
                    lambda on_progress: self.app.run_once(request, cancel=token, on_progress=on_progress)
                )

        try:
            result = self.run_interruptible(_work, token.cancel)
        except KeyboardInterrupt:
            return EXIT_CODES[RunStatus.CANCELLED]

        self.result_display.show_result(result, quiet=self.args.quiet)
        return EXIT_CODES[result.status]
