"""Storefront catalog proxy routes: products, collections, category resolution, cart."""

import re
import time
from typing import Any, Optional
from urllib.parse import urlparse

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from product_tables.bigcommerce.protocol import CatalogProvider
from product_tables.config import CATEGORY_CACHE_TTL_SECONDS
from product_tables.errors import ProductTablesError
from product_tables.resolvers import apply_price_records, load_group_price_records
from product_tables.server.deps import get_provider
from product_tables.server.models import AddToCartBody
from product_tables.utils.logger import get_logger

logger = get_logger("product_tables.server.catalog")

router = APIRouter(prefix="/api", tags=["catalog"])

PRODUCTS_CACHE_CONTROL = "public, max-age=300"
MAX_PAGE_SIZE = 250

_SORTS: dict[str, dict[str, str]] = {
    "price-asc": {"sort": "price", "direction": "asc"},
    "price-desc": {"sort": "price", "direction": "desc"},
    "newest": {"sort": "date_created", "direction": "desc"},
    "oldest": {"sort": "date_created", "direction": "asc"},
    "sku": {"sort": "sku"},
    "name": {"sort": "name"},
}

_SLUG_PATTERN = re.compile(r"/([^/]+)/?$")


def build_product_query(
    category: Optional[str],
    search: Optional[str],
    page: int,
    limit: int,
    sort: str,
) -> dict[str, Any]:
    params: dict[str, Any] = {
        "limit": limit,
        "page": page,
        "include": "variants,images,custom_fields",
    }
    if category:
        params["categories:in"] = category
    if search:
        params["keyword"] = search
    params.update(_SORTS.get(sort, _SORTS["name"]))
    return params


def extract_slug(url: Optional[str], slug: Optional[str]) -> Optional[str]:
    """Category slug from an explicit slug or the last path segment of a URL/path."""
    if slug and slug.strip():
        return slug.strip().strip("/")
    if not url:
        return None
    path = urlparse(url).path if url.startswith("http") else url
    match = _SLUG_PATTERN.search(path)
    return match.group(1) if match else None


def _category_slug(category: dict[str, Any]) -> Optional[str]:
    custom_url = category.get("custom_url") or {}
    match = _SLUG_PATTERN.search(custom_url.get("url") or "")
    return match.group(1).lower() if match else None


@router.get("/products")
async def list_products(
    category: Optional[str] = Query(None),
    collection: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(25, ge=1),
    sort: str = Query("name"),
    user_group: str = Query("guest", alias="userGroup"),
    customer_group_id: Optional[int] = Query(None, alias="customerGroupId"),
    provider: CatalogProvider = Depends(get_provider),
) -> JSONResponse:
    """One page of catalog products; customerGroupId applies that group's assigned price list."""
    limit = min(limit, MAX_PAGE_SIZE)
    # Collections are categories on the storefront side
    params = build_product_query(category or collection, search, page, limit, sort)
    logger.info("server.products.fetch", params=params, user_group=user_group, customer_group_id=customer_group_id)
    try:
        products, meta = await provider.list_products(params)
    except ProductTablesError as e:
        logger.error("server.products.error", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch products") from e

    if customer_group_id:
        records = await load_group_price_records(provider, customer_group_id)
        products = [apply_price_records(p, records) for p in products]

    pagination = (meta or {}).get("pagination") or {}
    body = {
        "products": products,
        "pagination": {
            "total": pagination.get("total", len(products)),
            "count": pagination.get("count", len(products)),
            "per_page": pagination.get("per_page", limit),
            "current_page": pagination.get("current_page", page),
            "total_pages": pagination.get("total_pages", 1),
        },
    }
    return JSONResponse(content=body, headers={"Cache-Control": PRODUCTS_CACHE_CONTROL})


@router.get("/collections")
async def list_collections(provider: CatalogProvider = Depends(get_provider)) -> dict[str, Any]:
    try:
        categories = await provider.list_categories()
    except ProductTablesError as e:
        logger.error("server.collections.error", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch categories") from e
    return {
        "success": True,
        "collections": [
            {
                "id": c.get("id"),
                "name": c.get("name"),
                "parent_id": c.get("parent_id"),
                "sort_order": c.get("sort_order"),
                "is_visible": c.get("is_visible"),
            }
            for c in categories
        ],
    }


@router.get("/resolve-category")
async def resolve_category(
    request: Request,
    url: Optional[str] = Query(None),
    slug: Optional[str] = Query(None),
    provider: CatalogProvider = Depends(get_provider),
) -> JSONResponse:
    """Map a category page URL or slug to its category ID (themes that omit it from page data)."""
    if not url and not slug:
        raise HTTPException(status_code=400, detail="Either 'url' or 'slug' parameter is required")
    category_slug = extract_slug(url, slug)
    if not category_slug:
        raise HTTPException(status_code=400, detail="Could not extract category slug from URL")

    cache: dict[str, tuple[float, dict[str, Any]]] = request.app.state.category_cache
    key = category_slug.lower()
    cached = cache.get(key)
    if cached and time.monotonic() - cached[0] < CATEGORY_CACHE_TTL_SECONDS:
        logger.debug("server.resolve_category.cache_hit", slug=key)
        return JSONResponse({"success": True, **cached[1], "cached": True})

    try:
        categories = await provider.list_categories()
    except ProductTablesError as e:
        logger.error("server.resolve_category.error", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch categories from BigCommerce") from e
    if not categories:
        raise HTTPException(status_code=404, detail="No categories found in store")

    match = next((c for c in categories if _category_slug(c) == key), None)
    if match is None:
        logger.warning("server.resolve_category.not_found", slug=key)
        return JSONResponse(
            status_code=404,
            content={
                "success": False,
                "error": f"Category not found for slug: {category_slug}",
                "availableCategories": [
                    {"id": c.get("id"), "name": c.get("name"), "url": (c.get("custom_url") or {}).get("url")}
                    for c in categories
                ],
            },
        )

    resolved = {
        "categoryId": str(match.get("id")),
        "categoryName": match.get("name"),
        "categoryUrl": (match.get("custom_url") or {}).get("url"),
    }
    cache[key] = (time.monotonic(), resolved)
    logger.info("server.resolve_category.resolved", slug=key, category_id=resolved["categoryId"])
    return JSONResponse({"success": True, **resolved})


@router.post("/add-to-cart")
async def add_to_cart(body: AddToCartBody, provider: CatalogProvider = Depends(get_provider)) -> dict[str, Any]:
    line_item = body.line_item()
    logger.info("server.add_to_cart", line_item=line_item)
    try:
        cart = await provider.create_cart([line_item])
    except ProductTablesError as e:
        logger.error("server.add_to_cart.error", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to add item to cart") from e
    return {"success": True, "cart": cart}
