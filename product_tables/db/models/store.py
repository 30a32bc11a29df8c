"""Installed BigCommerce store (credentials and install state)."""

from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from product_tables.db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from product_tables.db.models.table_config import ProductTable, WidgetInstance


class Store(Base, TimestampMixin):
    """One merchant store; owns its product tables and widget instances."""

    __tablename__ = "stores"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    store_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    access_token: Mapped[str | None] = mapped_column(String(256), nullable=True)
    scopes: Mapped[list[Any] | None] = mapped_column(JSON, nullable=True)
    is_installed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    product_tables: Mapped[list["ProductTable"]] = relationship(
        "ProductTable", back_populates="store", cascade="all, delete-orphan"
    )
    widget_instances: Mapped[list["WidgetInstance"]] = relationship(
        "WidgetInstance", back_populates="store", cascade="all, delete-orphan"
    )
