"""SQLite persistence for the catalog."""

from .db_manager import DatabaseManager

__all__ = ["DatabaseManager"]
