"""Command execution package for CLI."""

from catalogsync.ui.cli.commands.executor import CommandExecutor
from catalogsync.ui.cli.commands.sync import SyncCommand
from catalogsync.ui.cli.commands.watch import WatchCommand

__all__ = ["CommandExecutor", "SyncCommand", "WatchCommand"]
