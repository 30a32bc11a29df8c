"""Storefront loader script management (BigCommerce Script Manager)."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from product_tables.bigcommerce.protocol import CatalogProvider
from product_tables.config import APP_URL, WIDGET_LOADER_VERSION
from product_tables.errors import NotFound, UpstreamUnavailable
from product_tables.utils.logger import get_logger

logger = get_logger("product_tables.bigcommerce.scripts")

LOADER_SCRIPT_NAME = "Product Table Widget Loader"
LOADER_SCRIPT_DESCRIPTION = "Loads and initializes Product Table Widgets on the storefront"
# Any script whose name contains this is treated as ours during cleanup
SCRIPT_NAME_MARKER = "Product Table"


class ScriptInstallResult(BaseModel):
    status: Literal["installed", "already_installed", "manual", "auth_required"]
    script_src: str
    script_uuid: Optional[str] = None
    reason: Optional[str] = None


class ScriptCleanupResult(BaseModel):
    deleted: list[dict[str, Any]] = Field(default_factory=list)
    failed: list[dict[str, Any]] = Field(default_factory=list)
    all_scripts: list[dict[str, Any]] = Field(default_factory=list)


def loader_script_src(app_url: str = APP_URL, version: str = WIDGET_LOADER_VERSION) -> str:
    """Loader URL with a version query for storefront cache busting."""
    return f"{app_url.rstrip('/')}/widget-loader.js?v={version}"


def build_loader_script(script_src: str) -> dict[str, Any]:
    return {
        "name": LOADER_SCRIPT_NAME,
        "description": LOADER_SCRIPT_DESCRIPTION,
        "src": script_src,
        "auto_uninstall": True,
        "load_method": "defer",
        "location": "footer",
        "visibility": "all_pages",
        "kind": "src",
        "consent_category": "essential",
    }


def manual_instructions(script_src: str) -> list[str]:
    return [
        "Option 1: Use Script Manager (Recommended)",
        "1. Go to Storefront → Script Manager",
        "2. Click 'Create a Script'",
        f"3. Name: {LOADER_SCRIPT_NAME}",
        f"4. Script URL: {script_src}",
        "5. Location: Footer, Load method: Defer, Pages: All pages",
        "",
        "Option 2: Edit Theme Files",
        "1. Go to Storefront → Themes → [Active Theme] → Advanced → Edit Theme Files",
        "2. Open templates/layout/base.html",
        f'3. Add before </body>: <script src="{script_src}" defer></script>',
    ]


def reinstall_instructions(script_src: str) -> list[str]:
    return [
        "The BigCommerce connection has expired or is invalid.",
        "1. Go to BigCommerce Admin → Apps & Customizations → My Apps",
        "2. Uninstall the 'Product Table Widget' app",
        "3. Reinstall it and approve all permission requests",
        "",
        f"Or add the loader manually in Script Manager: {script_src}",
    ]


async def ensure_loader_script(provider: CatalogProvider, script_src: Optional[str] = None) -> ScriptInstallResult:
    """Install the loader script unless a script with the loader name already exists.

    Listing failures are tolerated (treated as "no scripts"); creation failures
    degrade to manual setup. 401/403 from either call yields auth_required.
    """
    script_src = script_src or loader_script_src()
    try:
        scripts = await provider.list_scripts()
    except UpstreamUnavailable as e:
        if e.is_auth_error:
            logger.error("scripts.ensure.auth_required", status_code=e.status_code)
            return ScriptInstallResult(status="auth_required", script_src=script_src, reason=str(e))
        logger.warning("scripts.ensure.list_failed", error=str(e))
        scripts = []

    if any(s.get("name") == LOADER_SCRIPT_NAME for s in scripts):
        logger.info("scripts.ensure.already_installed")
        return ScriptInstallResult(status="already_installed", script_src=script_src)

    try:
        created = await provider.create_script(build_loader_script(script_src))
    except UpstreamUnavailable as e:
        if e.is_auth_error:
            logger.error("scripts.ensure.auth_required", status_code=e.status_code)
            return ScriptInstallResult(status="auth_required", script_src=script_src, reason=str(e))
        logger.warning("scripts.ensure.create_failed", error=str(e))
        return ScriptInstallResult(status="manual", script_src=script_src, reason=str(e))

    script_uuid = created.get("uuid")
    if not script_uuid:
        logger.warning("scripts.ensure.no_uuid", response=created)
        return ScriptInstallResult(status="manual", script_src=script_src, reason="no uuid in response")
    logger.info("scripts.ensure.installed", script_uuid=script_uuid, script_src=script_src)
    return ScriptInstallResult(status="installed", script_src=script_src, script_uuid=script_uuid)


async def cleanup_loader_scripts(provider: CatalogProvider) -> ScriptCleanupResult:
    """Delete every product-table script. Listing errors propagate; per-script failures are collected."""
    scripts = await provider.list_scripts()
    result = ScriptCleanupResult(
        all_scripts=[{"name": s.get("name"), "uuid": s.get("uuid")} for s in scripts],
    )
    for script in scripts:
        name = script.get("name") or ""
        if SCRIPT_NAME_MARKER not in name:
            continue
        entry = {"uuid": script.get("uuid"), "name": name}
        try:
            await provider.delete_script(script["uuid"])
        except (NotFound, UpstreamUnavailable) as e:
            logger.error("scripts.cleanup.delete_failed", script_uuid=script.get("uuid"), error=str(e))
            result.failed.append({**entry, "error": str(e)})
            continue
        result.deleted.append(entry)
    logger.info("scripts.cleanup.done", deleted=len(result.deleted), failed=len(result.failed))
    return result
