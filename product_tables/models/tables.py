"""Pydantic schemas for product table and legacy widget instance configuration.

Request payloads use the storefront/admin camelCase names; field names match
the ORM columns so validated payloads can be applied to records directly.
"""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

DEFAULT_COLUMNS = ["image", "sku", "name", "price", "stock", "addToCart"]

DefaultSort = Literal["name", "price-asc", "price-desc", "newest", "oldest", "sku"]
PlacementLocation = Literal["homepage", "pdp", "category", "custom"]
ProductTableDisplayFormat = Literal["folded", "grouped-variants", "grouped-category"]
WidgetDisplayFormat = Literal["folded", "grouped-variants", "grouped-category", "grouped-collection"]
ProductTableSource = Literal[
    "all-products",
    "specific-categories",
    "current-product-variants",
    "current-category",
]
WidgetSource = Literal["all-collections", "specific-collections", "current-category"]


class TableConfigFields(BaseModel):
    """Display and targeting settings shared by product tables and widget instances."""

    allow_view_switching: Optional[bool] = Field(None, alias="allowViewSwitching")
    columns: Optional[list[str]] = None
    columns_order: Optional[list[str]] = Field(None, alias="columnsOrder")
    created_by: Optional[str] = Field(None, alias="createdBy")
    default_sort: Optional[DefaultSort] = Field(None, alias="defaultSort")
    default_to_table_view: Optional[bool] = Field(None, alias="defaultToTableView")
    enable_customer_sorting: Optional[bool] = Field(None, alias="enableCustomerSorting")
    is_active: Optional[bool] = Field(None, alias="isActive")
    items_per_page: Optional[int] = Field(None, alias="itemsPerPage", ge=1, le=250)
    notes: Optional[str] = None
    page_builder_id: Optional[str] = Field(None, alias="pageBuilderId")
    page_context: Optional[dict[str, Any]] = Field(None, alias="pageContext")
    placement_location: Optional[PlacementLocation] = Field(None, alias="placementLocation")
    selected_categories: Optional[list[Any]] = Field(None, alias="selectedCategories")
    target_all_customers: Optional[bool] = Field(None, alias="targetAllCustomers")
    target_customer_tags: Optional[list[str]] = Field(None, alias="targetCustomerTags")
    target_logged_in_only: Optional[bool] = Field(None, alias="targetLoggedInOnly")
    target_retail_only: Optional[bool] = Field(None, alias="targetRetailOnly")
    target_wholesale_only: Optional[bool] = Field(None, alias="targetWholesaleOnly")
    version: Optional[str] = None

    model_config = {"populate_by_name": True, "extra": "ignore"}

    def to_params(self) -> dict[str, Any]:
        """Column-named params to apply to a record; unset and null fields are left alone."""
        return self.model_dump(exclude_none=True)


class ProductTableParams(TableConfigFields):
    product_table_id: Optional[str] = Field(None, alias="productTableId")
    product_table_name: Optional[str] = Field(None, alias="productTableName")
    display_format: Optional[ProductTableDisplayFormat] = Field(None, alias="displayFormat")
    product_source: Optional[ProductTableSource] = Field(None, alias="productSource")
    show_variants_on_pdp: Optional[bool] = Field(None, alias="showVariantsOnPDP")
    variant_columns: Optional[list[str]] = Field(None, alias="variantColumns")


class WidgetInstanceParams(TableConfigFields):
    widget_id: Optional[str] = Field(None, alias="widgetId")
    widget_name: Optional[str] = Field(None, alias="widgetName")
    display_format: Optional[WidgetDisplayFormat] = Field(None, alias="displayFormat")
    product_source: Optional[WidgetSource] = Field(None, alias="productSource")
    selected_collections: Optional[list[Any]] = Field(None, alias="selectedCollections")


class _PublicConfig(BaseModel):
    """Configuration the storefront needs to render a table (read from ORM rows)."""

    display_format: Optional[str] = Field(None, alias="displayFormat")
    columns: Optional[list[str]] = None
    columns_order: Optional[list[str]] = Field(None, alias="columnsOrder")
    product_source: Optional[str] = Field(None, alias="productSource")
    selected_categories: Optional[list[Any]] = Field(None, alias="selectedCategories")
    target_all_customers: bool = Field(True, alias="targetAllCustomers")
    target_retail_only: bool = Field(False, alias="targetRetailOnly")
    target_wholesale_only: bool = Field(False, alias="targetWholesaleOnly")
    target_logged_in_only: bool = Field(False, alias="targetLoggedInOnly")
    target_customer_tags: Optional[list[str]] = Field(None, alias="targetCustomerTags")
    allow_view_switching: bool = Field(True, alias="allowViewSwitching")
    default_to_table_view: bool = Field(False, alias="defaultToTableView")
    enable_customer_sorting: bool = Field(True, alias="enableCustomerSorting")
    default_sort: Optional[str] = Field(None, alias="defaultSort")
    items_per_page: int = Field(25, alias="itemsPerPage")
    placement_location: Optional[str] = Field(None, alias="placementLocation")

    model_config = {"populate_by_name": True, "from_attributes": True}


class ProductTablePublicConfig(_PublicConfig):
    product_table_id: str = Field(..., alias="productTableId")
    product_table_name: Optional[str] = Field(None, alias="productTableName")
    show_variants_on_pdp: bool = Field(False, alias="showVariantsOnPDP")
    variant_columns: Optional[list[str]] = Field(None, alias="variantColumns")


class WidgetPublicConfig(_PublicConfig):
    widget_id: str = Field(..., alias="widgetId")
    widget_name: Optional[str] = Field(None, alias="widgetName")
    selected_collections: Optional[list[Any]] = Field(None, alias="selectedCollections")


class AdminRecord(BaseModel):
    """Admin view of a stored record: public config plus bookkeeping fields."""

    id: int
    store_id: int = Field(..., alias="storeId")
    is_active: bool = Field(..., alias="isActive")
    version: Optional[str] = None
    notes: Optional[str] = None
    created_by: Optional[str] = Field(None, alias="createdBy")
    page_builder_id: Optional[str] = Field(None, alias="pageBuilderId")
    page_context: Optional[dict[str, Any]] = Field(None, alias="pageContext")
    last_checked: Optional[datetime] = Field(None, alias="lastChecked")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    model_config = {"populate_by_name": True, "from_attributes": True}
