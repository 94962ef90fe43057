"""Display management for CLI interface."""

from catalogsync.ui.cli.display.progress import ProgressDisplay
from catalogsync.ui.cli.display.result import ResultDisplay

__all__ = ["ProgressDisplay", "ResultDisplay"]
