"""Store install/uninstall lifecycle."""

import asyncio
from typing import Any, Optional

import httpx

from product_tables.bigcommerce.client import BigCommerceClient
from product_tables.bigcommerce.protocol import CatalogProvider
from product_tables.bigcommerce.scripts import ScriptInstallResult, ensure_loader_script, loader_script_src
from product_tables.config import APP_URL
from product_tables.db.models import Store
from product_tables.db.repositories import store_repo
from product_tables.utils.logger import get_logger

logger = get_logger("product_tables.stores")


async def install_store(
    store_hash: str,
    access_token: str,
    scopes: Optional[list[Any]] = None,
    provider: Optional[CatalogProvider] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    app_url: str = APP_URL,
) -> tuple[Store, Optional[ScriptInstallResult]]:
    """Save credentials and mark the store installed, then try to add the storefront loader script.

    Script injection never fails the install; its result is None when APP_URL is not configured.
    """
    store = await asyncio.to_thread(store_repo.upsert_installed, store_hash, access_token, scopes)
    logger.info("store.install", store_hash=store_hash, store_id=store.id)

    if not app_url:
        logger.error("store.install.no_app_url", store_hash=store_hash)
        return store, None

    client = None
    if provider is None:
        client = BigCommerceClient(store_hash, access_token, http_client=http_client)
        provider = client
    try:
        result = await ensure_loader_script(provider, loader_script_src(app_url))
    finally:
        if client is not None:
            await client.aclose()
    logger.info("store.install.loader_script", store_hash=store_hash, status=result.status)
    return store, result


def uninstall_store(store_hash: str) -> Optional[Store]:
    store = store_repo.mark_uninstalled(store_hash)
    if store is None:
        logger.warning("store.uninstall.unknown", store_hash=store_hash)
    else:
        logger.info("store.uninstall", store_hash=store_hash)
    return store
