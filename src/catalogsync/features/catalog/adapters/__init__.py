"""Catalog store adapters."""

from .sqlite_catalog import SqliteCatalogStore

__all__ = ["SqliteCatalogStore"]
