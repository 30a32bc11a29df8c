"""DB repositories: sync functions/objects returning detached ORM rows."""

from product_tables.db.repositories import store_repo
from product_tables.db.repositories.table_repo import (
    TableConfigRepository,
    generate_public_id,
    product_tables,
    widget_instances,
)

__all__ = [
    "store_repo",
    "TableConfigRepository",
    "generate_public_id",
    "product_tables",
    "widget_instances",
]
