"""ORM models for storefront table configuration: ProductTable and legacy WidgetInstance."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from product_tables.db.base import Base, TimestampMixin
from product_tables.db.models.store import Store


class TableConfigMixin:
    """Display and targeting columns shared by both table models."""

    store_id: Mapped[int] = mapped_column(ForeignKey("stores.id"), nullable=False, index=True)

    allow_view_switching: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    columns: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    columns_order: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(256), nullable=True)
    default_sort: Mapped[str | None] = mapped_column(String(32), nullable=True)
    default_to_table_view: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    display_format: Mapped[str | None] = mapped_column(String(32), nullable=True)
    enable_customer_sorting: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    items_per_page: Mapped[int] = mapped_column(Integer, nullable=False, default=25)
    last_checked: Mapped[datetime | None] = mapped_column(nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    page_builder_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    page_context: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    placement_location: Mapped[str | None] = mapped_column(String(32), nullable=True)
    product_source: Mapped[str | None] = mapped_column(String(64), nullable=True)
    selected_categories: Mapped[list[Any] | None] = mapped_column(JSON, nullable=True)
    target_all_customers: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    target_customer_tags: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    target_logged_in_only: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    target_retail_only: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    target_wholesale_only: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    version: Mapped[str | None] = mapped_column(String(32), nullable=True)


class ProductTable(Base, TimestampMixin, TableConfigMixin):
    __tablename__ = "product_tables"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    product_table_id: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    product_table_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    show_variants_on_pdp: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    variant_columns: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)

    store: Mapped[Store] = relationship("Store", back_populates="product_tables")


class WidgetInstance(Base, TimestampMixin, TableConfigMixin):
    """Legacy widget configuration; superseded by ProductTable but still served."""

    __tablename__ = "widget_instances"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    widget_id: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    widget_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    selected_collections: Mapped[list[Any] | None] = mapped_column(JSON, nullable=True)

    store: Mapped[Store] = relationship("Store", back_populates="widget_instances")
