"""BigCommerce upstream: provider protocol, REST client and fixture-backed mock."""

from product_tables.bigcommerce.client import BigCommerceClient
from product_tables.bigcommerce.mock import FixtureCatalogProvider
from product_tables.bigcommerce.protocol import CatalogProvider
from product_tables.bigcommerce.scripts import (
    LOADER_SCRIPT_NAME,
    cleanup_loader_scripts,
    ensure_loader_script,
    loader_script_src,
)

__all__ = [
    "BigCommerceClient",
    "FixtureCatalogProvider",
    "CatalogProvider",
    "LOADER_SCRIPT_NAME",
    "cleanup_loader_scripts",
    "ensure_loader_script",
    "loader_script_src",
]
