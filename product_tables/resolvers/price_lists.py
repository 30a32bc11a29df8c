"""Customer-group price list lookup applied to catalog product listings."""

from typing import Any, Optional

from pydantic import ValidationError

from product_tables.bigcommerce.models import PriceListRecord
from product_tables.bigcommerce.protocol import CatalogProvider
from product_tables.errors import ProductTablesError
from product_tables.models.money import to_decimal
from product_tables.utils.logger import get_logger

logger = get_logger("product_tables.resolvers.price_lists")

PriceRecordIndex = dict[str, PriceListRecord]


def _product_key(product_id: Any) -> str:
    return f"product_{product_id}"


def _variant_key(variant_id: Any) -> str:
    return f"variant_{variant_id}"


def index_price_records(records: list[PriceListRecord]) -> PriceRecordIndex:
    index: PriceRecordIndex = {}
    for record in records:
        if record.variant_id is not None:
            index[_variant_key(record.variant_id)] = record
        elif record.product_id is not None:
            index[_product_key(record.product_id)] = record
    return index


async def load_group_price_records(
    provider: CatalogProvider,
    customer_group_id: int,
    max_pages: int = 5,
) -> PriceRecordIndex:
    """Records of the first price list assigned to the group, keyed by product/variant. Empty on any failure."""
    try:
        assignments = await provider.list_price_list_assignments(customer_group_id)
        if not assignments:
            return {}
        price_list_id = assignments[0].price_list_id
        records = await provider.list_all_price_list_records(price_list_id, max_pages=max_pages)
    except (ProductTablesError, ValidationError) as e:
        logger.error("price_lists.load_failed", customer_group_id=customer_group_id, error=str(e))
        return {}
    logger.debug("price_lists.loaded", customer_group_id=customer_group_id, price_list_id=price_list_id, count=len(records))
    return index_price_records(records)


def _positive(value: Any) -> Optional[float]:
    amount = to_decimal(value)
    return float(amount) if amount is not None and amount > 0 else None


def _money(value: Any) -> Optional[float]:
    amount = to_decimal(value)
    return float(amount) if amount is not None else None


def apply_price_records(product: dict[str, Any], records: PriceRecordIndex) -> dict[str, Any]:
    """Set calculated_price / calculated_sale_price on a catalog product and its variants.

    Variant precedence: variant record, then product record, then the variant's own
    positive price, then the product price.
    """
    product = dict(product)
    product_record = records.get(_product_key(product.get("id")))
    if product_record is not None:
        product["calculated_price"] = _money(product_record.price)
        product["calculated_sale_price"] = _positive(product_record.sale_price)
    else:
        product["calculated_price"] = _money(product.get("price"))
        product["calculated_sale_price"] = _positive(product.get("sale_price"))

    variants = product.get("variants")
    if isinstance(variants, list):
        priced = []
        for variant in variants:
            record = records.get(_variant_key(variant.get("id"))) or product_record
            if record is not None:
                price = _money(record.price)
                sale_price = _positive(record.sale_price)
            else:
                price = _positive(variant.get("price"))
                if price is None:
                    price = _money(product.get("price"))
                sale_price = _positive(variant.get("sale_price"))
                if sale_price is None:
                    sale_price = _money(product.get("sale_price"))
            priced.append({**variant, "calculated_price": price, "calculated_sale_price": sale_price})
        product["variants"] = priced
    return product
