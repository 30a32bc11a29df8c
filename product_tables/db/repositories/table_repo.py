"""Product table / widget instance repository: the create, update and delete hooks plus lookups.

create applies params, fills the public ID, version and column defaults; update
applies params and stamps last_checked. Rows are returned detached.
"""

import secrets
import string
import time
from datetime import datetime, timezone
from typing import Any, Generic, Optional, TypeVar

from sqlalchemy import select

from product_tables.db import get_session
from product_tables.db.models import ProductTable, Store, WidgetInstance
from product_tables.models.tables import DEFAULT_COLUMNS
from product_tables.utils.logger import get_logger

logger = get_logger("product_tables.db.table_repo")

T = TypeVar("T", ProductTable, WidgetInstance)

_BASE36 = string.digits + string.ascii_lowercase


def generate_public_id(prefix: str) -> str:
    """e.g. product-table-1718000000000-k3j9x0a"""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(7))
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"


def apply_params(record: Any, params: dict[str, Any]) -> None:
    """Copy known column values onto the record; unknown keys are ignored."""
    for key, value in params.items():
        if key in ("id", "store_id", "created_at", "updated_at"):
            continue
        if hasattr(record, key):
            setattr(record, key, value)


class TableConfigRepository(Generic[T]):
    def __init__(self, model: type[T], public_id_field: str, id_prefix: str, default_version: str, label: str):
        self.model = model
        self.public_id_field = public_id_field
        self.id_prefix = id_prefix
        self.default_version = default_version
        self.label = label

    @property
    def _public_id_column(self):
        return getattr(self.model, self.public_id_field)

    def public_id(self, record: T) -> str:
        return getattr(record, self.public_id_field)

    def create(self, store_id: int, params: dict[str, Any]) -> T:
        with get_session() as session:
            record = self.model(store_id=store_id)
            apply_params(record, params)
            if not getattr(record, self.public_id_field, None):
                setattr(record, self.public_id_field, generate_public_id(self.id_prefix))
            if not record.version:
                record.version = self.default_version
            if not record.columns:
                record.columns = list(DEFAULT_COLUMNS)
            if not record.columns_order:
                record.columns_order = list(DEFAULT_COLUMNS)
            logger.info(f"{self.label}.create", public_id=self.public_id(record), store_id=store_id)
            session.add(record)
            session.flush()
            session.refresh(record)
            session.expunge(record)
            return record

    def update(self, public_id: str, params: dict[str, Any]) -> Optional[T]:
        with get_session() as session:
            record = session.scalars(select(self.model).where(self._public_id_column == public_id)).first()
            if record is None:
                return None
            params = {k: v for k, v in params.items() if k != self.public_id_field}
            apply_params(record, params)
            record.last_checked = datetime.now(timezone.utc)
            logger.info(f"{self.label}.update", public_id=public_id)
            session.flush()
            session.refresh(record)
            session.expunge(record)
            return record

    def delete(self, public_id: str) -> bool:
        with get_session() as session:
            record = session.scalars(select(self.model).where(self._public_id_column == public_id)).first()
            if record is None:
                return False
            logger.info(f"{self.label}.delete", public_id=public_id)
            session.delete(record)
            return True

    def touch(self, public_id: str) -> bool:
        """Stamp last_checked without other changes (widget version checks)."""
        with get_session() as session:
            record = session.scalars(select(self.model).where(self._public_id_column == public_id)).first()
            if record is None:
                return False
            record.last_checked = datetime.now(timezone.utc)
            return True

    def get(self, public_id: str, active_only: bool = True) -> Optional[T]:
        with get_session() as session:
            q = select(self.model).where(self._public_id_column == public_id)
            if active_only:
                q = q.where(self.model.is_active == True)  # noqa: E712
            record = session.scalars(q).first()
            if record is not None:
                session.expunge(record)
            return record

    def list_records(
        self,
        store_id: Optional[int] = None,
        store_hash: Optional[str] = None,
        active_only: bool = True,
    ) -> list[T]:
        """Records ordered by creation time, optionally scoped to one store."""
        with get_session() as session:
            q = select(self.model)
            if store_id is not None:
                q = q.where(self.model.store_id == store_id)
            if store_hash:
                q = q.join(Store, Store.id == self.model.store_id).where(Store.store_hash == store_hash)
            if active_only:
                q = q.where(self.model.is_active == True)  # noqa: E712
            q = q.order_by(self.model.created_at, self.model.id)
            rows = list(session.scalars(q).all())
            for row in rows:
                session.expunge(row)
            return rows


product_tables = TableConfigRepository(ProductTable, "product_table_id", "product-table", "1.0.30", "product_table")
widget_instances = TableConfigRepository(WidgetInstance, "widget_id", "widget", "1.0.0", "widget_instance")
