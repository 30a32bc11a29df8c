"""Pydantic models for the BigCommerce REST payloads the service consumes.

Field aliases are the upstream snake_case names; unknown fields are ignored.
"""

from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, Field, field_validator

from product_tables.models.money import OptionalMoney, to_decimal


def _zero_to_none(value: Any) -> Any:
    # BigCommerce uses 0 for "no group" / "no limit"
    if value in (0, "0", ""):
        return None
    return value


OptionalId = Annotated[Optional[int], BeforeValidator(_zero_to_none)]


class ProductPricing(BaseModel):
    """Catalog product (v3 /catalog/products/{id}), pricing-relevant fields only."""

    id: Optional[int] = None
    name: Optional[str] = None
    base_price: OptionalMoney = Field(None, alias="price")
    sale_price: OptionalMoney = None
    calculated_price: OptionalMoney = None
    currency: Optional[str] = None
    min_quantity: OptionalId = Field(None, alias="order_quantity_minimum")
    max_quantity: OptionalId = Field(None, alias="order_quantity_maximum")

    model_config = {"populate_by_name": True, "extra": "ignore"}


class VariantPricing(BaseModel):
    """Product variant (v3 /catalog/products/{id}/variants/{variant_id})."""

    id: Optional[int] = None
    price: OptionalMoney = None
    sale_price: OptionalMoney = None
    calculated_price: OptionalMoney = None

    model_config = {"extra": "ignore"}


class PriceList(BaseModel):
    id: int
    name: str = ""
    active: bool = True

    model_config = {"extra": "ignore"}


class PriceListRecord(BaseModel):
    price_list_id: Optional[int] = None
    product_id: Optional[int] = None
    variant_id: OptionalId = None
    price: OptionalMoney = None
    sale_price: OptionalMoney = None

    model_config = {"extra": "ignore"}


class PriceListAssignment(BaseModel):
    price_list_id: int
    customer_group_id: Optional[int] = None
    channel_id: Optional[int] = None

    model_config = {"extra": "ignore"}


class BulkPricingRule(BaseModel):
    """Quantity-break rule (v3 /catalog/products/{id}/bulk-pricing-rules)."""

    quantity_min: int = 1
    quantity_max: OptionalId = None
    type: str = "price"
    amount: Decimal = Decimal("0")

    model_config = {"extra": "ignore"}

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_from_json(cls, value: Any) -> Decimal:
        amount = to_decimal(value)
        return amount if amount is not None else Decimal("0")


class CustomerRecord(BaseModel):
    id: int | str
    customer_group_id: OptionalId = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    tags: list[str] = Field(default_factory=list)

    model_config = {"extra": "ignore"}

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        return [str(t).strip() for t in value if t is not None and str(t).strip()]


class CustomerGroup(BaseModel):
    id: Optional[int] = None
    name: str = ""

    model_config = {"extra": "ignore"}


class StoreInfo(BaseModel):
    """v2 /store; only the fields this service reads."""

    id: Optional[str] = None
    domain: Optional[str] = None
    name: Optional[str] = None
    currency: Optional[str] = None
    default_customer_group_id: OptionalId = None

    model_config = {"extra": "ignore"}
