"""Shared CLI helpers: console, logger, provider selection, JSON output."""

import json
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.syntax import Syntax

from product_tables.bigcommerce.client import BigCommerceClient
from product_tables.bigcommerce.mock import FixtureCatalogProvider
from product_tables.bigcommerce.protocol import CatalogProvider
from product_tables.config import BIGCOMMERCE_ACCESS_TOKEN, BIGCOMMERCE_STORE_HASH
from product_tables.db.repositories import store_repo
from product_tables.utils.logger import get_logger

console = Console()
logger = get_logger("product_tables.cli")


def get_provider(fixture: Optional[Path] = None, store_hash: Optional[str] = None) -> Optional[CatalogProvider]:
    """Fixture provider when --fixture is given, else stored then environment credentials."""
    if fixture is not None:
        return FixtureCatalogProvider.from_file(fixture)
    store = store_repo.get_by_hash(store_hash) if store_hash else store_repo.get_first_installed()
    if store is not None and store.is_installed and store.access_token:
        return BigCommerceClient(store.store_hash, store.access_token)
    if BIGCOMMERCE_STORE_HASH and BIGCOMMERCE_ACCESS_TOKEN:
        return BigCommerceClient(BIGCOMMERCE_STORE_HASH, BIGCOMMERCE_ACCESS_TOKEN)
    return None


async def close_provider(provider: CatalogProvider) -> None:
    if isinstance(provider, BigCommerceClient):
        await provider.aclose()


def print_json(payload: Any) -> None:
    console.print(Syntax(json.dumps(payload, indent=2, default=str), "json", theme="ansi_dark"))
