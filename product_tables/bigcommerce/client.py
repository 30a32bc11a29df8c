"""BigCommerce REST API provider (async, httpx)."""

from typing import Any, Optional

import httpx
from opentelemetry.trace import SpanKind, Status, StatusCode

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
from product_tables.config import BIGCOMMERCE_API_URL, BIGCOMMERCE_TIMEOUT_SECONDS
from product_tables.errors import NotFound, UpstreamUnavailable
from product_tables.utils.logger import get_logger
from product_tables.utils.tracing import get_tracer

logger = get_logger("product_tables.bigcommerce.client")

CONTENT_KINDS = ("widget-templates", "placements", "widgets")
RECORDS_PAGE_SIZE = 250


def _unwrap(body: Any) -> Any:
    """v3 responses wrap payloads in {"data": ..., "meta": ...}; v2 returns them bare."""
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


def _as_list(body: Any) -> list[Any]:
    data = _unwrap(body)
    return data if isinstance(data, list) else []


class BigCommerceClient:
    """Catalog provider backed by the BigCommerce v2/v3 REST API for one store.

    Each call is a single attempt: HTTP 404 raises NotFound, every other HTTP
    error, timeout or transport failure raises UpstreamUnavailable. Pass a shared
    http_client to reuse one connection pool across stores; it is then not closed here.
    """

    def __init__(
        self,
        store_hash: str,
        access_token: str,
        api_url: str = BIGCOMMERCE_API_URL,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = BIGCOMMERCE_TIMEOUT_SECONDS,
    ):
        if not store_hash or not access_token:
            raise ValueError("store_hash and access_token are required")
        self.store_hash = store_hash
        self.base_url = f"{api_url.rstrip('/')}/stores/{store_hash}"
        self._headers = {
            "X-Auth-Token": access_token,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        logger.debug("bigcommerce.client.init", store_hash=store_hash)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> "BigCommerceClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        version: str = "v3",
        params: Optional[dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        url = f"{self.base_url}/{version}{path}"
        attrs = {"http.method": method, "bigcommerce.path": path, "bigcommerce.api_version": version}
        tracer = get_tracer()
        with tracer.start_as_current_span("bigcommerce.request", kind=SpanKind.CLIENT, attributes=attrs) as span:
            try:
                response = await self._http.request(method, url, params=params, json=json, headers=self._headers)
            except httpx.TimeoutException as e:
                span.set_status(Status(StatusCode.ERROR, "timeout"))
                logger.warning("bigcommerce.request.timeout", method=method, path=path)
                raise UpstreamUnavailable(f"{method} {path} timed out") from e
            except httpx.HTTPError as e:
                span.set_status(Status(StatusCode.ERROR, type(e).__name__))
                logger.warning("bigcommerce.request.transport_error", method=method, path=path, error=str(e))
                raise UpstreamUnavailable(f"{method} {path} failed: {e}") from e

            span.set_attribute("http.status_code", response.status_code)
            if response.status_code == 404:
                logger.debug("bigcommerce.request.not_found", method=method, path=path)
                raise NotFound(f"{path} not found")
            if response.is_error:
                span.set_status(Status(StatusCode.ERROR, str(response.status_code)))
                logger.warning(
                    "bigcommerce.request.error",
                    method=method,
                    path=path,
                    status_code=response.status_code,
                )
                raise UpstreamUnavailable(
                    f"{method} {path} returned {response.status_code}",
                    status_code=response.status_code,
                )
            if response.status_code == 204 or not response.content:
                return None
            try:
                return response.json()
            except ValueError as e:
                raise UpstreamUnavailable(f"{method} {path} returned invalid JSON", response.status_code) from e

    # Pricing resolver operations

    async def get_product(self, product_id: str) -> ProductPricing:
        body = await self._request("GET", f"/catalog/products/{product_id}")
        data = _unwrap(body)
        if not data:
            raise NotFound(f"Product {product_id} not found")
        return ProductPricing.model_validate(data)

    async def get_variant(self, product_id: str, variant_id: str) -> VariantPricing:
        body = await self._request("GET", f"/catalog/products/{product_id}/variants/{variant_id}")
        data = _unwrap(body)
        if not data:
            raise NotFound(f"Variant {variant_id} of product {product_id} not found")
        return VariantPricing.model_validate(data)

    async def list_price_lists(self) -> list[PriceList]:
        body = await self._request("GET", "/pricelists")
        return [PriceList.model_validate(item) for item in _as_list(body)]

    async def list_price_list_records(self, price_list_id: int, product_id: str) -> list[PriceListRecord]:
        body = await self._request(
            "GET",
            f"/pricelists/{price_list_id}/records",
            params={"product_id:in": product_id},
        )
        return [PriceListRecord.model_validate(item) for item in _as_list(body)]

    async def list_quantity_breaks(self, product_id: str) -> list[BulkPricingRule]:
        body = await self._request("GET", f"/catalog/products/{product_id}/bulk-pricing-rules")
        return [BulkPricingRule.model_validate(item) for item in _as_list(body)]

    # Customer context operations

    async def get_customer(self, customer_id: str) -> CustomerRecord:
        body = await self._request("GET", "/customers", params={"id:in": customer_id})
        customers = _as_list(body)
        if not customers:
            raise NotFound(f"Customer {customer_id} not found")
        return CustomerRecord.model_validate(customers[0])

    async def get_customer_group(self, group_id: int) -> CustomerGroup:
        body = await self._request("GET", f"/customer_groups/{group_id}", version="v2")
        if not body:
            raise NotFound(f"Customer group {group_id} not found")
        return CustomerGroup.model_validate(body)

    async def get_store_info(self) -> StoreInfo:
        body = await self._request("GET", "/store", version="v2")
        return StoreInfo.model_validate(body or {})

    async def get_store_default_guest_group_id(self) -> Optional[int]:
        info = await self.get_store_info()
        return info.default_customer_group_id

    # Proxy and admin operations

    async def list_products(self, params: dict[str, Any]) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        body = await self._request("GET", "/catalog/products", params=params)
        meta = body.get("meta", {}) if isinstance(body, dict) else {}
        return _as_list(body), meta or {}

    async def list_categories(self) -> list[dict[str, Any]]:
        body = await self._request("GET", "/catalog/categories", params={"limit": RECORDS_PAGE_SIZE})
        return _as_list(body)

    async def list_price_list_assignments(self, customer_group_id: int) -> list[PriceListAssignment]:
        body = await self._request(
            "GET",
            "/pricelists/assignments",
            params={"customer_group_id:in": customer_group_id},
        )
        return [PriceListAssignment.model_validate(item) for item in _as_list(body)]

    async def list_all_price_list_records(self, price_list_id: int, max_pages: int = 5) -> list[PriceListRecord]:
        records: list[PriceListRecord] = []
        page = 1
        while page <= max_pages:
            body = await self._request(
                "GET",
                f"/pricelists/{price_list_id}/records",
                params={"limit": RECORDS_PAGE_SIZE, "page": page},
            )
            records.extend(PriceListRecord.model_validate(item) for item in _as_list(body))
            pagination = (body.get("meta") or {}).get("pagination") if isinstance(body, dict) else None
            if not pagination or pagination.get("current_page", page) >= pagination.get("total_pages", page):
                break
            page += 1
        logger.debug("bigcommerce.price_list_records.loaded", price_list_id=price_list_id, count=len(records))
        return records

    async def list_scripts(self) -> list[dict[str, Any]]:
        body = await self._request("GET", "/content/scripts")
        return _as_list(body)

    async def create_script(self, payload: dict[str, Any]) -> dict[str, Any]:
        body = await self._request("POST", "/content/scripts", json=payload)
        return _unwrap(body) or {}

    async def delete_script(self, script_uuid: str) -> None:
        await self._request("DELETE", f"/content/scripts/{script_uuid}")

    async def list_content(self, kind: str) -> list[dict[str, Any]]:
        if kind not in CONTENT_KINDS:
            raise ValueError(f"Unknown content kind: {kind}")
        body = await self._request("GET", f"/content/{kind}")
        return _as_list(body)

    async def create_cart(self, line_items: list[dict[str, Any]]) -> dict[str, Any]:
        body = await self._request("POST", "/carts", json={"line_items": line_items})
        return _unwrap(body) or {}
