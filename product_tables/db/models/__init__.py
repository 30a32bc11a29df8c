"""Re-export all ORM models so Base.metadata has all tables."""

from product_tables.db.models.store import Store
from product_tables.db.models.table_config import ProductTable, TableConfigMixin, WidgetInstance

__all__ = [
    "Store",
    "ProductTable",
    "TableConfigMixin",
    "WidgetInstance",
]
