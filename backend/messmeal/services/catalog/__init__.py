"""Catalog of selectable items: built-in defaults or the remote product endpoint."""

from messmeal.services.catalog.models import Catalog, CatalogCategory, SelectableItem
from messmeal.services.catalog.providers import (
    RemoteCatalogProvider,
    StaticCatalogProvider,
    build_catalog_provider,
)

__all__ = [
    "Catalog",
    "CatalogCategory",
    "SelectableItem",
    "RemoteCatalogProvider",
    "StaticCatalogProvider",
    "build_catalog_provider",
]
