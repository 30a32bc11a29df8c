"""Fixture-backed catalog provider: reads a JSON store snapshot, keeps writes in memory."""

import json
import uuid
from pathlib import Path
from typing import Any, Optional

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
from product_tables.errors import NotFound
from product_tables.utils.logger import get_logger

logger = get_logger("product_tables.bigcommerce.mock")


class FixtureCatalogProvider:
    """Mock provider over an in-memory snapshot of one store.

    Snapshot keys: store, products, variants, price_lists, price_list_records,
    price_list_assignments, bulk_pricing_rules, customers, customer_groups,
    categories, scripts, content. Entity maps are keyed by string IDs.

    ``failures`` maps an operation name ("list_price_lists") or an operation
    and key ("get_customer_group:7") to the exception that call should raise.
    Every call is appended to ``calls`` as (operation, args).
    """

    def __init__(self, data: Optional[dict[str, Any]] = None, failures: Optional[dict[str, Exception]] = None):
        data = data or {}
        self.store: dict[str, Any] = dict(data.get("store") or {})
        self.products: dict[str, dict[str, Any]] = _keyed(data.get("products"))
        self.variants: dict[str, dict[str, Any]] = {
            str(pid): _keyed(items) for pid, items in (data.get("variants") or {}).items()
        }
        self.price_lists: list[dict[str, Any]] = list(data.get("price_lists") or [])
        self.price_list_records: dict[str, list[dict[str, Any]]] = {
            str(k): list(v) for k, v in (data.get("price_list_records") or {}).items()
        }
        self.price_list_assignments: list[dict[str, Any]] = list(data.get("price_list_assignments") or [])
        self.bulk_pricing_rules: dict[str, list[dict[str, Any]]] = {
            str(k): list(v) for k, v in (data.get("bulk_pricing_rules") or {}).items()
        }
        self.customers: dict[str, dict[str, Any]] = _keyed(data.get("customers"))
        self.customer_groups: dict[str, dict[str, Any]] = _keyed(data.get("customer_groups"))
        self.categories: list[dict[str, Any]] = list(data.get("categories") or [])
        self.scripts: list[dict[str, Any]] = list(data.get("scripts") or [])
        self.content: dict[str, list[dict[str, Any]]] = dict(data.get("content") or {})
        self.carts: list[dict[str, Any]] = []
        self.failures: dict[str, Exception] = dict(failures or {})
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        logger.debug("bigcommerce.mock.init", products=len(self.products), customers=len(self.customers))

    @classmethod
    def from_file(cls, path: Path, failures: Optional[dict[str, Exception]] = None) -> "FixtureCatalogProvider":
        if not path.exists():
            logger.warning("bigcommerce.mock.fixture_missing", path=str(path))
            return cls(failures=failures)
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        logger.info("bigcommerce.mock.fixture_loaded", path=str(path))
        return cls(data, failures=failures)

    def _record(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, args))
        for key in (operation, *(f"{operation}:{a}" for a in args)):
            if key in self.failures:
                logger.debug("bigcommerce.mock.injected_failure", key=key)
                raise self.failures[key]

    def call_count(self, operation: str) -> int:
        return sum(1 for name, _ in self.calls if name == operation)

    async def get_product(self, product_id: str) -> ProductPricing:
        self._record("get_product", str(product_id))
        item = self.products.get(str(product_id))
        if item is None:
            raise NotFound(f"Product {product_id} not found")
        return ProductPricing.model_validate(item)

    async def get_variant(self, product_id: str, variant_id: str) -> VariantPricing:
        self._record("get_variant", str(product_id), str(variant_id))
        item = self.variants.get(str(product_id), {}).get(str(variant_id))
        if item is None:
            raise NotFound(f"Variant {variant_id} of product {product_id} not found")
        return VariantPricing.model_validate(item)

    async def list_price_lists(self) -> list[PriceList]:
        self._record("list_price_lists")
        return [PriceList.model_validate(item) for item in self.price_lists]

    async def list_price_list_records(self, price_list_id: int, product_id: str) -> list[PriceListRecord]:
        self._record("list_price_list_records", str(price_list_id))
        records = self.price_list_records.get(str(price_list_id), [])
        return [
            PriceListRecord.model_validate(r)
            for r in records
            if str(r.get("product_id")) == str(product_id)
        ]

    async def list_quantity_breaks(self, product_id: str) -> list[BulkPricingRule]:
        self._record("list_quantity_breaks", str(product_id))
        return [BulkPricingRule.model_validate(r) for r in self.bulk_pricing_rules.get(str(product_id), [])]

    async def get_customer(self, customer_id: str) -> CustomerRecord:
        self._record("get_customer", str(customer_id))
        item = self.customers.get(str(customer_id))
        if item is None:
            raise NotFound(f"Customer {customer_id} not found")
        return CustomerRecord.model_validate(item)

    async def get_customer_group(self, group_id: int) -> CustomerGroup:
        self._record("get_customer_group", str(group_id))
        item = self.customer_groups.get(str(group_id))
        if item is None:
            raise NotFound(f"Customer group {group_id} not found")
        return CustomerGroup.model_validate(item)

    async def get_store_info(self) -> StoreInfo:
        self._record("get_store_info")
        return StoreInfo.model_validate(self.store)

    async def get_store_default_guest_group_id(self) -> Optional[int]:
        self._record("get_store_default_guest_group_id")
        return StoreInfo.model_validate(self.store).default_customer_group_id

    async def list_products(self, params: dict[str, Any]) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        self._record("list_products")
        items = list(self.products.values())
        category = params.get("categories:in")
        if category:
            wanted = {int(c) for c in str(category).split(",") if c.strip().isdigit()}
            items = [p for p in items if wanted.intersection(p.get("categories") or [])]
        keyword = (params.get("keyword") or "").lower()
        if keyword:
            items = [p for p in items if keyword in (p.get("name") or "").lower()]
        limit = int(params.get("limit", 25))
        page = int(params.get("page", 1))
        total = len(items)
        page_items = items[(page - 1) * limit: page * limit]
        meta = {
            "pagination": {
                "total": total,
                "count": len(page_items),
                "per_page": limit,
                "current_page": page,
                "total_pages": max(1, -(-total // limit)),
            }
        }
        return [dict(p) for p in page_items], meta

    async def list_categories(self) -> list[dict[str, Any]]:
        self._record("list_categories")
        return [dict(c) for c in self.categories]

    async def list_price_list_assignments(self, customer_group_id: int) -> list[PriceListAssignment]:
        self._record("list_price_list_assignments", str(customer_group_id))
        return [
            PriceListAssignment.model_validate(a)
            for a in self.price_list_assignments
            if str(a.get("customer_group_id")) == str(customer_group_id)
        ]

    async def list_all_price_list_records(self, price_list_id: int, max_pages: int = 5) -> list[PriceListRecord]:
        self._record("list_all_price_list_records", str(price_list_id))
        records = self.price_list_records.get(str(price_list_id), [])[: max_pages * 250]
        return [PriceListRecord.model_validate(r) for r in records]

    async def list_scripts(self) -> list[dict[str, Any]]:
        self._record("list_scripts")
        return [dict(s) for s in self.scripts]

    async def create_script(self, payload: dict[str, Any]) -> dict[str, Any]:
        self._record("create_script")
        script = {"uuid": str(uuid.uuid4()), **payload}
        self.scripts.append(script)
        logger.info("bigcommerce.mock.create_script", name=payload.get("name"), uuid=script["uuid"])
        return script

    async def delete_script(self, script_uuid: str) -> None:
        self._record("delete_script", script_uuid)
        before = len(self.scripts)
        self.scripts = [s for s in self.scripts if s.get("uuid") != script_uuid]
        if len(self.scripts) == before:
            raise NotFound(f"Script {script_uuid} not found")

    async def list_content(self, kind: str) -> list[dict[str, Any]]:
        self._record("list_content", kind)
        return [dict(item) for item in self.content.get(kind, [])]

    async def create_cart(self, line_items: list[dict[str, Any]]) -> dict[str, Any]:
        self._record("create_cart")
        cart = {
            "id": str(uuid.uuid4()),
            "line_items": {"physical_items": [dict(item) for item in line_items]},
            "redirect_urls": {},
        }
        self.carts.append(cart)
        return cart


def _keyed(items: Any) -> dict[str, dict[str, Any]]:
    """Accept either a {id: entity} map or a list of entities with an "id" field."""
    if not items:
        return {}
    if isinstance(items, dict):
        return {str(k): dict(v) for k, v in items.items()}
    return {str(item["id"]): dict(item) for item in items}
