"""Command line interface for catalogsync."""

import sys
from typing import final

from catalogsync.platform.logging import logger
from catalogsync.ui.cli.args import ArgumentParser
from catalogsync.ui.cli.args.options import CLIArgs, SyncArgs
from catalogsync.ui.cli.commands import SyncCommand, WatchCommand


@final
class CommandProcessor:
    """Command line interface processor."""

    @staticmethod
    def process_command(args_list: list[str] | None = None) -> None:
        """Process command line arguments.

        Exits with 1 when a run failed and 130 when it was cancelled.

        Args:
            args_list: List of command line arguments (for testing).
        """
        try:
            args: CLIArgs = ArgumentParser.process_args(args_list)

            if isinstance(args, SyncArgs):
                exit_code = SyncCommand(args).execute()
            else:
                exit_code = WatchCommand(args).execute()

            if exit_code == 130:
                logger.info("Operation cancelled by user")
            if exit_code != 0:
                sys.exit(exit_code)

        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            sys.exit(130)
        except Exception as e:
            logger.error("An unexpected error occurred: %s", str(e))
            sys.exit(1)


def main() -> int:
    """Main entry point.

    Returns:
        int: Process exit code (0 on success). Non-zero outcomes leave through
        ``sys.exit`` inside command processing.
    """
    CommandProcessor.process_command()
    return 0
