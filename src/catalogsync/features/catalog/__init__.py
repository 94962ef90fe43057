"""Catalog persistence port, SQLite adapter and reconciler."""
