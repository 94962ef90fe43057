"""Command line argument handling package."""

from catalogsync.ui.cli.args.options import CLIArgs, SyncArgs, WatchArgs
from catalogsync.ui.cli.args.parser import ArgumentParser

__all__ = ["ArgumentParser", "CLIArgs", "SyncArgs", "WatchArgs"]
