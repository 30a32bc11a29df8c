"""Store repository: installed stores and their API credentials."""

from typing import Any, Optional

from sqlalchemy import select

from product_tables.db import get_session
from product_tables.db.models import Store


def get_by_hash(store_hash: str) -> Optional[Store]:
    with get_session() as session:
        row = session.scalars(select(Store).where(Store.store_hash == store_hash)).first()
        if row is not None:
            session.expunge(row)
        return row


def get_first_installed() -> Optional[Store]:
    with get_session() as session:
        q = select(Store).where(Store.is_installed == True).order_by(Store.id)  # noqa: E712
        row = session.scalars(q).first()
        if row is not None:
            session.expunge(row)
        return row


def list_stores() -> list[Store]:
    with get_session() as session:
        rows = list(session.scalars(select(Store).order_by(Store.id)).all())
        for row in rows:
            session.expunge(row)
        return rows


def upsert_installed(store_hash: str, access_token: str, scopes: Optional[list[Any]] = None) -> Store:
    """Create the store or refresh its credentials; either way it ends up installed."""
    with get_session() as session:
        row = session.scalars(select(Store).where(Store.store_hash == store_hash)).first()
        if row is None:
            row = Store(store_hash=store_hash)
            session.add(row)
        row.access_token = access_token
        if scopes is not None:
            row.scopes = scopes
        row.is_installed = True
        session.flush()
        session.refresh(row)
        session.expunge(row)
        return row


def mark_uninstalled(store_hash: str) -> Optional[Store]:
    with get_session() as session:
        row = session.scalars(select(Store).where(Store.store_hash == store_hash)).first()
        if row is None:
            return None
        row.is_installed = False
        session.flush()
        session.refresh(row)
        session.expunge(row)
        return row
