"""
FUTURY - Catalog Package
Read-only game data and its remote/offline sources.
"""

from .models import BuildingType, Catalog, NationProfile, RouteTable
from .defaults import default_catalog
from .client import CatalogClient, catalog_from_dict, load_catalog, load_catalog_file

__all__ = [
    "BuildingType",
    "Catalog",
    "NationProfile",
    "RouteTable",
    "default_catalog",
    "CatalogClient",
    "catalog_from_dict",
    "load_catalog",
    "load_catalog_file",
]
