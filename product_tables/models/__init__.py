"""Pydantic models for the product table service."""

from product_tables.models.customer import CustomerContext, is_wholesale_name
from product_tables.models.outcomes import ContextResolution, StageOutcome
from product_tables.models.pricing import PriceQuote, Prices, QuantityBreak
from product_tables.models.tables import (
    DEFAULT_COLUMNS,
    AdminRecord,
    ProductTableParams,
    ProductTablePublicConfig,
    WidgetInstanceParams,
    WidgetPublicConfig,
)

__all__ = [
    "CustomerContext",
    "is_wholesale_name",
    "ContextResolution",
    "StageOutcome",
    "PriceQuote",
    "Prices",
    "QuantityBreak",
    "DEFAULT_COLUMNS",
    "AdminRecord",
    "ProductTableParams",
    "ProductTablePublicConfig",
    "WidgetInstanceParams",
    "WidgetPublicConfig",
]
