"""Store connection diagnostics and storefront loader script management routes."""

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from product_tables.bigcommerce.protocol import CatalogProvider
from product_tables.bigcommerce.scripts import (
    cleanup_loader_scripts,
    ensure_loader_script,
    loader_script_src,
    manual_instructions,
    reinstall_instructions,
)
from product_tables.config import APP_URL
from product_tables.db.models import Store
from product_tables.errors import ProductTablesError, UpstreamUnavailable
from product_tables.server.deps import get_optional_provider, get_provider, get_store
from product_tables.utils.logger import get_logger

logger = get_logger("product_tables.server.scripts")

router = APIRouter(prefix="/api", tags=["scripts"])

REQUIRED_SCOPES = ["store_v2_content", "store_storefront_api", "store_themes_manage"]
CONTENT_SECTIONS = (("templates", "widget-templates"), ("placements", "placements"), ("widgets", "widgets"))


def _app_url(request: Request) -> str:
    return APP_URL or str(request.base_url).rstrip("/")


def _auth_required(script_src: str) -> dict[str, Any]:
    return {
        "success": False,
        "error": "AUTHENTICATION_REQUIRED",
        "message": "The app needs to be reinstalled to refresh authentication credentials.",
        "instructions": reinstall_instructions(script_src),
    }


@router.get("/connection-status")
async def connection_status(
    store: Optional[Store] = Depends(get_store),
    provider: Optional[CatalogProvider] = Depends(get_optional_provider),
) -> dict[str, Any]:
    status: dict[str, Any] = {
        "hasConnection": provider is not None,
        "storeFound": store is not None,
        "credentialsValid": False,
        "scopes": list(store.scopes or []) if store is not None else [],
        "requiredScopes": REQUIRED_SCOPES,
        "storeHash": store.store_hash if store is not None else None,
        "error": None,
    }
    if provider is None:
        status["error"] = "No store found in database"
        return status
    try:
        await provider.get_store_info()
        status["credentialsValid"] = True
    except ProductTablesError as e:
        logger.warning("server.connection_status.failed", error=str(e))
        status["error"] = f"Connection test failed: {e}"
    return status


@router.get("/list-widgets")
async def list_widgets_content(provider: Optional[CatalogProvider] = Depends(get_optional_provider)) -> dict[str, Any]:
    """Widget templates, scripts, placements and widgets in the store; each section is best-effort."""
    if provider is None:
        return {"success": False, "error": "NO_CONNECTION", "message": "No BigCommerce connection available"}

    result: dict[str, Any] = {"templates": [], "scripts": [], "placements": [], "widgets": []}
    for key, kind in CONTENT_SECTIONS:
        try:
            result[key] = await provider.list_content(kind)
        except ProductTablesError as e:
            logger.warning("server.list_widgets.section_failed", section=key, error=str(e))
            result[f"{key}Error"] = str(e)
    try:
        result["scripts"] = await provider.list_scripts()
    except ProductTablesError as e:
        logger.warning("server.list_widgets.section_failed", section="scripts", error=str(e))
        result["scriptsError"] = str(e)
    return {"success": True, "data": result}


@router.post("/inject-widget-script")
async def inject_widget_script(
    request: Request,
    provider: Optional[CatalogProvider] = Depends(get_optional_provider),
) -> dict[str, Any]:
    """Install the storefront loader script, or explain how to add it by hand."""
    script_src = loader_script_src(_app_url(request))
    if provider is None:
        logger.warning("server.inject_script.no_connection")
        return {
            "success": True,
            "manualSetup": True,
            "scriptSrc": script_src,
            "message": "Please add the widget script manually using one of the methods below.",
            "instructions": manual_instructions(script_src),
        }

    result = await ensure_loader_script(provider, script_src)
    if result.status == "installed":
        return {
            "success": True,
            "scriptUuid": result.script_uuid,
            "scriptSrc": script_src,
            "message": "Widget script installed successfully. Widgets will now work on your storefront.",
        }
    if result.status == "already_installed":
        return {"success": True, "alreadyInstalled": True, "message": "Widget script is already installed"}
    if result.status == "auth_required":
        return _auth_required(script_src)
    return {
        "success": True,
        "manualSetup": True,
        "scriptSrc": script_src,
        "message": "Automatic script injection is not available. Please add the script manually.",
        "instructions": manual_instructions(script_src),
    }


@router.post("/cleanup-widget-scripts")
async def cleanup_widget_scripts(
    request: Request,
    provider: CatalogProvider = Depends(get_provider),
) -> JSONResponse:
    """Delete every product-table loader script from the store."""
    try:
        result = await cleanup_loader_scripts(provider)
    except UpstreamUnavailable as e:
        if e.is_auth_error:
            return JSONResponse(_auth_required(loader_script_src(_app_url(request))))
        logger.error("server.cleanup_scripts.error", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch scripts") from e

    if not result.deleted and not result.failed:
        return JSONResponse(
            {
                "success": True,
                "message": "No Product Table Widget scripts found to delete",
                "deletedCount": 0,
                "allScripts": result.all_scripts,
            }
        )
    message = f"Deleted {len(result.deleted)} script(s)."
    if result.failed:
        message += f" Failed to delete {len(result.failed)}."
    return JSONResponse(
        {
            "success": True,
            "message": message,
            "deletedCount": len(result.deleted),
            "failedCount": len(result.failed),
            "deleted": result.deleted,
            "failed": result.failed,
        }
    )
