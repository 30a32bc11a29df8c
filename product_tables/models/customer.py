"""Customer context model returned by the customer context resolver and /api/customer-context."""

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from product_tables.models.outcomes import ContextResolution

GUEST_GROUP = "guest"
RETAIL_GROUP = "retail"
WHOLESALE_MARKERS = ("wholesale", "b2b")


def is_wholesale_name(name: Optional[str]) -> bool:
    """Case-insensitive substring match for wholesale/b2b group or price-list names."""
    lowered = (name or "").lower()
    return any(marker in lowered for marker in WHOLESALE_MARKERS)


class CustomerContext(BaseModel):
    """Effective customer classification for pricing and visibility. Never persisted."""

    customer_id: Optional[str] = Field(None, alias="customerId")
    customer_group: str = Field(GUEST_GROUP, alias="customerGroup")
    customer_group_id: Optional[int] = Field(None, alias="customerGroupId")
    customer_tags: list[str] = Field(default_factory=list, alias="customerTags")
    is_logged_in: bool = Field(False, alias="isLoggedIn")
    is_wholesale: bool = Field(False, alias="isWholesale")
    email: Optional[str] = None
    name: Optional[str] = None
    resolution: ContextResolution = Field(
        default_factory=lambda: ContextResolution(status="guest_default"),
        exclude=True,
    )

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _logged_in_matches_customer(self) -> "CustomerContext":
        if self.is_logged_in != (self.customer_id is not None):
            raise ValueError("isLoggedIn must be true exactly when customerId is set")
        return self

    @classmethod
    def guest(cls, reason: Optional[str] = None, degraded: bool = False) -> "CustomerContext":
        """The literal guest default; degraded marks a fallback caused by an upstream failure."""
        status = "degraded" if degraded else "guest_default"
        return cls(resolution=ContextResolution(status=status, reason=reason))
