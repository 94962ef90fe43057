"""Command line argument parser."""

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import final

from catalogsync.config.config import Config
from catalogsync.platform.logging import DEFAULT_LOG_FILE, logger, setup_logger
from catalogsync.shared.errors import ConfigError
from catalogsync.ui.cli.args.options import CLIArgs, SyncArgs, WatchArgs


@final
class ArgumentParser:
    """Command line argument parser."""

    @staticmethod
    def create_parser() -> argparse.ArgumentParser:
        """Create argument parser.

        Returns:
            argparse.ArgumentParser: Configured argument parser.
        """
        parser = argparse.ArgumentParser(
            prog="catalogsync",
            description="catalogsync - keep a music catalog in step with the library on disk.",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        subparsers = parser.add_subparsers(dest="command", required=True)

        sync_parser = subparsers.add_parser(
            "sync",
            help="Run one synchronization and exit",
        )
        ArgumentParser._add_common_arguments(sync_parser)
        _ = sync_parser.add_argument(
            "--full-rescan",
            action="store_true",
            help="Ignore the stored watermark and re-read every file",
        )

        watch_parser = subparsers.add_parser(
            "watch",
            help="Synchronize repeatedly until interrupted",
        )
        ArgumentParser._add_common_arguments(watch_parser)
        _ = watch_parser.add_argument(
            "--interval",
            type=float,
            metavar="SECONDS",
            help="Seconds between runs (defaults to sync_interval_seconds from the config)",
        )

        return parser

    @staticmethod
    def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
        _ = parser.add_argument(
            "--config",
            type=str,
            metavar="CONFIG_PATH",
            help="Configuration file (defaults to config/config.toml in the repository root)",
        )
        _ = parser.add_argument(
            "--verbose",
            action="store_true",
            help="Show debug output, including every committed batch",
        )
        _ = parser.add_argument(
            "--quiet",
            action="store_true",
            help="Suppress all output except errors",
        )

    @staticmethod
    def process_args(args_list: Sequence[str] | None = None) -> CLIArgs:
        """Process command line arguments.

        Loads the configuration and installs the log handlers before returning.

        Args:
            args_list: List of command line arguments (for testing).

        Returns:
            CLIArgs: Processed command line arguments.

        Raises:
            SystemExit: If the configuration is missing or invalid, or an option is out of range.
        """
        parser = ArgumentParser.create_parser()
        parsed_args = parser.parse_args(args_list)

        if parsed_args.quiet:
            log_level = logging.ERROR
        elif parsed_args.verbose:
            log_level = logging.DEBUG
        else:
            log_level = logging.INFO

        # Console only until the configuration names the log file
        _ = setup_logger(console_level=log_level)

        config_path = Path(parsed_args.config).expanduser() if parsed_args.config else None
        try:
            configuration = Config.load(config_path)
        except ConfigError as e:
            logger.error("%s", e)
            sys.exit(1)

        log_file_path = configuration.log_file or DEFAULT_LOG_FILE
        _ = setup_logger(log_file=log_file_path, console_level=log_level)

        command: str = parsed_args.command

        if command == "sync":
            return SyncArgs(
                command="sync",
                config=configuration,
                full_rescan=parsed_args.full_rescan,
                verbose=parsed_args.verbose,
                quiet=parsed_args.quiet,
            )

        if command == "watch":
            interval = (
                parsed_args.interval
                if parsed_args.interval is not None
                else float(configuration.sync_interval_seconds)
            )
            if interval <= 0:
                logger.error("Interval must be positive; received %s", interval)
                sys.exit(1)
            return WatchArgs(
                command="watch",
                config=configuration,
                interval=interval,
                verbose=parsed_args.verbose,
                quiet=parsed_args.quiet,
            )

        logger.error("Unsupported command: %s", command)
        sys.exit(2)
