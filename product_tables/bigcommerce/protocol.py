"""Catalog provider protocol (the BigCommerce operations this service consumes)."""

from typing import Any, Optional, Protocol

from product_tables.bigcommerce.models import (
    BulkPricingRule,
    CustomerGroup,
    CustomerRecord,
    PriceList,
    PriceListAssignment,
    PriceListRecord,
    ProductPricing,
    StoreInfo,
    VariantPricing,
)


class CatalogProvider(Protocol):
    """Abstract interface over one store's catalog, pricing, customer and content APIs.

    Lookups of a single entity raise NotFound when it does not exist upstream;
    any other failure raises UpstreamUnavailable.
    """

    async def get_product(self, product_id: str) -> ProductPricing:
        ...

    async def get_variant(self, product_id: str, variant_id: str) -> VariantPricing:
        ...

    async def list_price_lists(self) -> list[PriceList]:
        ...

    async def list_price_list_records(self, price_list_id: int, product_id: str) -> list[PriceListRecord]:
        """Records of one price list covering product_id (product-level and variant records)."""
        ...

    async def list_quantity_breaks(self, product_id: str) -> list[BulkPricingRule]:
        ...

    async def get_customer(self, customer_id: str) -> CustomerRecord:
        ...

    async def get_customer_group(self, group_id: int) -> CustomerGroup:
        ...

    async def get_store_default_guest_group_id(self) -> Optional[int]:
        ...

    async def get_store_info(self) -> StoreInfo:
        ...

    async def list_products(self, params: dict[str, Any]) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        """One page of catalog products: (products, meta)."""
        ...

    async def list_categories(self) -> list[dict[str, Any]]:
        ...

    async def list_price_list_assignments(self, customer_group_id: int) -> list[PriceListAssignment]:
        ...

    async def list_all_price_list_records(self, price_list_id: int, max_pages: int = 5) -> list[PriceListRecord]:
        ...

    async def list_scripts(self) -> list[dict[str, Any]]:
        ...

    async def create_script(self, payload: dict[str, Any]) -> dict[str, Any]:
        ...

    async def delete_script(self, script_uuid: str) -> None:
        ...

    async def list_content(self, kind: str) -> list[dict[str, Any]]:
        """Content API listing; kind is one of widget-templates, placements, widgets."""
        ...

    async def create_cart(self, line_items: list[dict[str, Any]]) -> dict[str, Any]:
        ...
