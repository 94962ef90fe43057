"""Change detection use cases."""

from .change_detector import (
    ChangeKind,
    ChangeSet,
    FileTimes,
    classify,
    detect_changes,
    read_file_times,
)

__all__ = [
    "ChangeKind",
    "ChangeSet",
    "FileTimes",
    "classify",
    "detect_changes",
    "read_file_times",
]
