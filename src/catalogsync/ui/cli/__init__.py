"""Command line interface."""

from catalogsync.ui.cli.cli import CommandProcessor, main

__all__ = ["CommandProcessor", "main"]
