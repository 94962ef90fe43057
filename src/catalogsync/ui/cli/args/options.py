"""Command line argument options."""

from dataclasses import dataclass
from typing import Literal, final

from catalogsync.config.config import Config


@final
@dataclass(slots=True)
class SyncArgs:
    """Command line arguments for the ``sync`` subcommand."""

    command: Literal["sync"]
    config: Config
    full_rescan: bool
    verbose: bool
    quiet: bool


@final
@dataclass(slots=True)
class WatchArgs:
    """Command line arguments for the ``watch`` subcommand."""

    command: Literal["watch"]
    config: Config
    interval: float
    verbose: bool
    quiet: bool


CLIArgs = SyncArgs | WatchArgs

__all__ = ["CLIArgs", "SyncArgs", "WatchArgs"]
