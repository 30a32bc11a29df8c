"""Pricing and customer context resolution."""

from product_tables.resolvers.customer_context import resolve_customer_context
from product_tables.resolvers.price_lists import apply_price_records, load_group_price_records
from product_tables.resolvers.pricing import coerce_quantity, resolve_price

__all__ = [
    "resolve_customer_context",
    "apply_price_records",
    "load_group_price_records",
    "coerce_quantity",
    "resolve_price",
]
