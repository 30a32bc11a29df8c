"""Storefront pricing and customer context routes."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from product_tables.bigcommerce.protocol import CatalogProvider
from product_tables.errors import InvalidInput, NotFound, ProductTablesError
from product_tables.resolvers import resolve_customer_context, resolve_price
from product_tables.server.deps import get_provider
from product_tables.utils.logger import get_logger

logger = get_logger("product_tables.server.pricing")

router = APIRouter(prefix="/api", tags=["pricing"])

PRICING_CACHE_CONTROL = "private, max-age=120"
CUSTOMER_CACHE_CONTROL = "private, no-cache"


def split_tags(raw: Optional[str]) -> list[str]:
    if not raw:
        return []
    return [t.strip() for t in raw.split(",") if t.strip()]


@router.get("/pricing")
async def get_pricing(
    product_id: Optional[str] = Query(None, alias="productId"),
    variant_id: Optional[str] = Query(None, alias="variantId"),
    customer_group: Optional[str] = Query(None, alias="customerGroup"),
    user_group: Optional[str] = Query(None, alias="userGroup"),
    customer_tags: Optional[str] = Query(None, alias="customerTags"),
    quantity: Optional[str] = Query(None),
    provider: CatalogProvider = Depends(get_provider),
) -> JSONResponse:
    """Price quote for a product/variant, customer group and quantity."""
    try:
        quote = await resolve_price(
            provider,
            product_id,
            variant_id=variant_id,
            customer_group=customer_group or user_group,
            quantity=quantity,
            customer_tags=split_tags(customer_tags),
        )
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except NotFound as e:
        logger.info("server.pricing.not_found", product_id=product_id, variant_id=variant_id)
        raise HTTPException(status_code=404, detail="Product not found") from e
    except ProductTablesError as e:
        logger.error("server.pricing.error", product_id=product_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error") from e
    return JSONResponse(
        content=quote.model_dump(mode="json", by_alias=True),
        headers={"Cache-Control": PRICING_CACHE_CONTROL},
    )


@router.get("/customer-context")
async def get_customer_context(
    customer_id: Optional[str] = Query(None, alias="customerId"),
    provider: CatalogProvider = Depends(get_provider),
) -> JSONResponse:
    """Customer classification; upstream failures fall back to a guest context, never an error."""
    context = await resolve_customer_context(provider, customer_id)
    return JSONResponse(
        content=context.model_dump(mode="json", by_alias=True),
        headers={"Cache-Control": CUSTOMER_CACHE_CONTROL},
    )
