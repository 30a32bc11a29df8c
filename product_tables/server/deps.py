"""Request-scoped dependencies: store scoping and the catalog provider."""

import asyncio
from typing import AsyncIterator, Optional

from fastapi import HTTPException, Query, Request

from product_tables.bigcommerce.client import BigCommerceClient
from product_tables.bigcommerce.protocol import CatalogProvider
from product_tables.config import BIGCOMMERCE_ACCESS_TOKEN, BIGCOMMERCE_STORE_HASH
from product_tables.db.models import Store
from product_tables.db.repositories import store_repo
from product_tables.utils.logger import get_logger

logger = get_logger("product_tables.server.deps")

NO_CONNECTION = "BigCommerce connection not available"


async def lookup_store(store_hash: Optional[str]) -> Optional[Store]:
    """The installed store named by store_hash, else the first installed store."""
    if store_hash:
        store = await asyncio.to_thread(store_repo.get_by_hash, store_hash)
        return store if store is not None and store.is_installed else None
    return await asyncio.to_thread(store_repo.get_first_installed)


async def get_store(store_hash: Optional[str] = Query(None, alias="storeHash")) -> Optional[Store]:
    return await lookup_store(store_hash)


async def get_provider(
    request: Request,
    store_hash: Optional[str] = Query(None, alias="storeHash"),
) -> AsyncIterator[CatalogProvider]:
    """Injected provider (tests/offline) first, then stored credentials, then environment credentials."""
    injected = getattr(request.app.state, "provider", None)
    if injected is not None:
        yield injected
        return

    credentials = None
    store = await lookup_store(store_hash)
    if store is not None and store.access_token:
        credentials = (store.store_hash, store.access_token)
    elif BIGCOMMERCE_STORE_HASH and BIGCOMMERCE_ACCESS_TOKEN:
        credentials = (BIGCOMMERCE_STORE_HASH, BIGCOMMERCE_ACCESS_TOKEN)
    if credentials is None:
        logger.error("server.provider.unavailable", store_hash=store_hash)
        raise HTTPException(status_code=500, detail=NO_CONNECTION)

    client = BigCommerceClient(*credentials, http_client=getattr(request.app.state, "http_client", None))
    try:
        yield client
    finally:
        await client.aclose()


async def get_optional_provider(
    request: Request,
    store_hash: Optional[str] = Query(None, alias="storeHash"),
) -> AsyncIterator[Optional[CatalogProvider]]:
    """Like get_provider but yields None instead of failing when no credentials exist."""
    injected = getattr(request.app.state, "provider", None)
    if injected is not None:
        yield injected
        return
    store = await lookup_store(store_hash)
    if store is None or not store.access_token:
        yield None
        return
    client = BigCommerceClient(
        store.store_hash,
        store.access_token,
        http_client=getattr(request.app.state, "http_client", None),
    )
    try:
        yield client
    finally:
        await client.aclose()
