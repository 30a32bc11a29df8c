"""Price quote models returned by the pricing resolver and /api/pricing."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from product_tables.models.money import Money, OptionalMoney
from product_tables.models.outcomes import StageOutcome


class QuantityBreak(BaseModel):
    """One resolved quantity-break tier: [min, max] inclusive, max None = unbounded."""

    min: int
    max: Optional[int] = None
    price: Money

    def contains(self, quantity: int) -> bool:
        return quantity >= self.min and (self.max is None or quantity <= self.max)


class Prices(BaseModel):
    base: OptionalMoney = None
    sale: OptionalMoney = None
    calculated: Money
    retail: Money
    wholesale: Money
    final: Money


class PriceQuote(BaseModel):
    """Per-request price quote. Never persisted."""

    product_id: str = Field(..., alias="productId")
    variant_id: Optional[str] = Field(None, alias="variantId")
    user_group: str = Field("guest", alias="userGroup")
    customer_tags: list[str] = Field(default_factory=list, alias="customerTags")
    quantity: int = 1
    prices: Prices
    price_list_price: OptionalMoney = Field(None, alias="priceListPrice")
    price_list_name: Optional[str] = Field(None, alias="priceListName")
    quantity_break_price: OptionalMoney = Field(None, alias="quantityBreakPrice")
    currency: str = "USD"
    tax_included: bool = Field(False, alias="taxIncluded")
    quantity_breaks: list[QuantityBreak] = Field(default_factory=list, alias="quantityBreaks")
    min_quantity: int = Field(1, alias="minQuantity")
    max_quantity: Optional[int] = Field(None, alias="maxQuantity")
    diagnostics: list[StageOutcome] = Field(default_factory=list, exclude=True)

    model_config = {"populate_by_name": True}

    @property
    def final_price(self) -> Decimal:
        return self.prices.final

    @property
    def calculated_price(self) -> Decimal:
        return self.prices.calculated

    def outcome(self, stage: str) -> Optional[StageOutcome]:
        """Return the diagnostic outcome recorded for a stage, if it ran."""
        for item in self.diagnostics:
            if item.stage == stage:
                return item
        return None
