"""Request bodies for the JSON API routes."""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class AddToCartBody(BaseModel):
    product_id: int = Field(..., alias="productId")
    variant_id: Optional[int] = Field(None, alias="variantId")
    quantity: int = Field(..., ge=1)

    model_config = {"populate_by_name": True}

    @field_validator("variant_id", mode="before")
    @classmethod
    def _blank_variant(cls, value: Any) -> Any:
        return None if value in ("", 0, "0") else value

    def line_item(self) -> dict[str, Any]:
        item: dict[str, Any] = {"quantity": self.quantity, "product_id": self.product_id}
        if self.variant_id is not None:
            item["variant_id"] = self.variant_id
        return item


class StoreInstallBody(BaseModel):
    store_hash: str = Field(..., alias="storeHash", min_length=1)
    access_token: str = Field(..., alias="accessToken", min_length=1)
    scopes: Optional[list[str]] = None

    model_config = {"populate_by_name": True}
