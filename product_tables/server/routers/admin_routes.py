"""Admin API: product table / widget instance CRUD and store install state."""

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from product_tables.db.models import Store
from product_tables.db.repositories import TableConfigRepository, product_tables, store_repo, widget_instances
from product_tables.models.tables import (
    AdminRecord,
    ProductTableParams,
    ProductTablePublicConfig,
    WidgetInstanceParams,
    WidgetPublicConfig,
)
from product_tables.server.deps import get_store
from product_tables.server.models import StoreInstallBody
from product_tables.stores import install_store, uninstall_store

router = APIRouter(prefix="/admin", tags=["admin"])


def _serialize(repo: TableConfigRepository, record: Any) -> dict[str, Any]:
    public_model = ProductTablePublicConfig if repo is product_tables else WidgetPublicConfig
    return {
        **public_model.model_validate(record).model_dump(mode="json", by_alias=True),
        **AdminRecord.model_validate(record).model_dump(mode="json", by_alias=True),
    }


def _serialize_store(store: Store) -> dict[str, Any]:
    return {
        "id": store.id,
        "storeHash": store.store_hash,
        "isInstalled": store.is_installed,
        "scopes": store.scopes or [],
        "createdAt": store.created_at.isoformat(),
        "updatedAt": store.updated_at.isoformat(),
    }


def _register_crud(prefix: str, repo: TableConfigRepository, params_model: type, label: str) -> None:
    """Register list/create/get/update/delete routes for one table config model."""

    def list_records(
        store: Optional[Store] = Depends(get_store),
        include_inactive: bool = Query(False, alias="includeInactive"),
    ) -> list[dict[str, Any]]:
        if store is None:
            raise HTTPException(status_code=404, detail="Store not found")
        records = repo.list_records(store_id=store.id, active_only=not include_inactive)
        return [_serialize(repo, r) for r in records]

    def create_record(body: params_model, store: Optional[Store] = Depends(get_store)) -> dict[str, Any]:
        if store is None:
            raise HTTPException(status_code=404, detail="Store not found")
        return _serialize(repo, repo.create(store.id, body.to_params()))

    def get_record(public_id: str) -> dict[str, Any]:
        record = repo.get(public_id, active_only=False)
        if record is None:
            raise HTTPException(status_code=404, detail=f"{label} not found")
        return _serialize(repo, record)

    def update_record(public_id: str, body: params_model) -> dict[str, Any]:
        record = repo.update(public_id, body.to_params())
        if record is None:
            raise HTTPException(status_code=404, detail=f"{label} not found")
        return _serialize(repo, record)

    def delete_record(public_id: str) -> dict[str, Any]:
        if not repo.delete(public_id):
            raise HTTPException(status_code=404, detail=f"{label} not found")
        return {"deleted": True, "id": public_id}

    router.add_api_route(prefix, list_records, methods=["GET"])
    router.add_api_route(prefix, create_record, methods=["POST"], status_code=201)
    router.add_api_route(f"{prefix}/{{public_id}}", get_record, methods=["GET"])
    router.add_api_route(f"{prefix}/{{public_id}}", update_record, methods=["PATCH"])
    router.add_api_route(f"{prefix}/{{public_id}}", delete_record, methods=["DELETE"])


_register_crud("/product-tables", product_tables, ProductTableParams, "Product table")
_register_crud("/widgets", widget_instances, WidgetInstanceParams, "Widget")


@router.get("/stores")
def list_stores() -> list[dict[str, Any]]:
    return [_serialize_store(s) for s in store_repo.list_stores()]


@router.post("/stores", status_code=201)
async def install(body: StoreInstallBody, request: Request) -> dict[str, Any]:
    """Record already-issued store credentials and inject the storefront loader script."""
    store, script = await install_store(
        body.store_hash,
        body.access_token,
        scopes=body.scopes,
        provider=getattr(request.app.state, "provider", None),
        http_client=getattr(request.app.state, "http_client", None),
    )
    return {
        "store": _serialize_store(store),
        "loaderScript": script.model_dump(mode="json") if script is not None else None,
    }


@router.post("/stores/{store_hash}/uninstall")
def uninstall(store_hash: str) -> dict[str, Any]:
    store = uninstall_store(store_hash)
    if store is None:
        raise HTTPException(status_code=404, detail="Store not found")
    return _serialize_store(store)
