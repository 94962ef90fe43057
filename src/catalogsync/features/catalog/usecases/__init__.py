"""Catalog use cases."""

from .ports import CatalogStorePort, DatabaseManagerPort
from .reconciler import CatalogReconciler, ReconcileResult

__all__ = ["CatalogReconciler", "CatalogStorePort", "DatabaseManagerPort", "ReconcileResult"]
