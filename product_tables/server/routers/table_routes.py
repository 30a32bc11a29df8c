"""Public product table / widget configuration routes used by the storefront and Page Builder."""

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from product_tables.config import LATEST_WIDGET_RELEASE_DATE, LATEST_WIDGET_VERSION
from product_tables.db.models import Store
from product_tables.db.repositories import product_tables, widget_instances
from product_tables.models.tables import ProductTablePublicConfig, WidgetPublicConfig
from product_tables.server.deps import get_store
from product_tables.utils.logger import get_logger
from product_tables.utils.versions import compare_versions

logger = get_logger("product_tables.server.tables")

router = APIRouter(prefix="/api", tags=["tables"])

CONFIG_CACHE_CONTROL = "public, max-age=300"
VERSION_CACHE_CONTROL = "public, max-age=3600"

CHANGELOG: dict[str, list[str]] = {
    "1.0.0": [
        "Initial release",
        "Product table widget with customer group pricing",
        "Multi-location placement support",
        "Customizable columns and display formats",
    ],
}


def _dropdown_option(name: Optional[str], public_id: str, fallback: str, display_format, placement) -> dict[str, str]:
    return {
        "label": name or f"{fallback} {public_id}",
        "value": public_id,
        "caption": f"{display_format or 'standard'} - {placement or 'any'}",
    }


@router.get("/product-tables")
def get_product_table(product_table_id: Optional[str] = Query(None, alias="productTableId")) -> JSONResponse:
    if not product_table_id:
        raise HTTPException(status_code=400, detail="Product Table ID is required as query parameter")
    record = product_tables.get(product_table_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Product Table not found or inactive")
    config = ProductTablePublicConfig.model_validate(record)
    return JSONResponse(
        content={"success": True, "productTable": config.model_dump(mode="json", by_alias=True)},
        headers={"Cache-Control": CONFIG_CACHE_CONTROL},
    )


@router.get("/product-tables-list")
def list_product_tables(store: Optional[Store] = Depends(get_store)) -> dict[str, Any]:
    """Active tables of the current store as Page Builder dropdown options."""
    if store is None:
        raise HTTPException(status_code=401, detail="Store not identified")
    records = product_tables.list_records(store_id=store.id)
    return {
        "success": True,
        "productTables": [
            _dropdown_option(r.product_table_name, r.product_table_id, "Product Table", r.display_format, r.placement_location)
            for r in records
        ],
    }


@router.get("/page-builder-product-tables")
def page_builder_product_tables(store_hash: Optional[str] = Query(None, alias="storeHash")) -> list[dict[str, Any]]:
    """Page Builder option list; all active tables unless storeHash narrows it."""
    records = product_tables.list_records(store_hash=store_hash)
    options = []
    for r in records:
        info = [part for part in (r.display_format, r.placement_location) if part]
        option: dict[str, Any] = {
            "label": r.product_table_name or f"Product Table {r.product_table_id}",
            "value": r.product_table_id,
        }
        if info:
            option["caption"] = " • ".join(info)
        options.append(option)
    return options


@router.get("/widgets/list")
def list_widgets(store: Optional[Store] = Depends(get_store)) -> dict[str, Any]:
    if store is None:
        raise HTTPException(status_code=401, detail="Store not identified")
    records = widget_instances.list_records(store_id=store.id)
    return {
        "success": True,
        "widgets": [
            _dropdown_option(r.widget_name, r.widget_id, "Widget", r.display_format, r.placement_location)
            for r in records
        ],
    }


@router.get("/widgets/{widget_id}")
def get_widget(widget_id: str) -> JSONResponse:
    record = widget_instances.get(widget_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Widget not found or inactive")
    config = WidgetPublicConfig.model_validate(record)
    return JSONResponse(
        content={"success": True, "widget": config.model_dump(mode="json", by_alias=True)},
        headers={"Cache-Control": CONFIG_CACHE_CONTROL},
    )


@router.get("/version-check")
def version_check(
    widget_id: Optional[str] = Query(None, alias="widgetId"),
    current_version: str = Query("0.0.0", alias="currentVersion"),
) -> JSONResponse:
    """Compare the widget's version with the latest release; stamps last_checked on the widget."""
    info = {
        "widgetId": widget_id,
        "currentVersion": current_version,
        "latestVersion": LATEST_WIDGET_VERSION,
        "updateAvailable": compare_versions(current_version, LATEST_WIDGET_VERSION) < 0,
        "changelog": CHANGELOG.get(LATEST_WIDGET_VERSION, []),
        "releaseDate": LATEST_WIDGET_RELEASE_DATE,
        "breakingChanges": False,
        "requiredUpdate": False,
    }
    if widget_id and not widget_instances.touch(widget_id):
        product_tables.touch(widget_id)
    logger.info("server.version_check", widget_id=widget_id, update_available=info["updateAvailable"])
    return JSONResponse(content=info, headers={"Cache-Control": VERSION_CACHE_CONTROL})
