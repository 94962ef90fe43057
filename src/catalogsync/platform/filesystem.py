"""Filesystem helpers shared by adapters.

Where: platform/filesystem.py
What: Directory creation helpers.
Why: Callers creating output locations should not repeat ``mkdir`` flags.
"""

from __future__ import annotations

from pathlib import Path


def ensure_directory(path: Path) -> Path:
    """Create ``path`` (and parents) when missing and return it."""

    path.mkdir(parents=True, exist_ok=True)
    return path


def ensure_parent_directory(path: Path) -> Path:
    """Create the parent directory of ``path`` when missing and return ``path``."""

    _ = ensure_directory(path.parent)
    return path


__all__ = ["ensure_directory", "ensure_parent_directory"]
