"""FastAPI application: storefront proxy routes and admin API."""

from contextlib import asynccontextmanager
from typing import Any, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from product_tables import __version__
from product_tables.bigcommerce.protocol import CatalogProvider
from product_tables.config import BIGCOMMERCE_TIMEOUT_SECONDS
from product_tables.db import init_db
from product_tables.server.routers.admin_routes import router as admin_router
from product_tables.server.routers.catalog_routes import router as catalog_router
from product_tables.server.routers.pricing_routes import router as pricing_router
from product_tables.server.routers.script_routes import router as script_router
from product_tables.server.routers.storefront_routes import router as storefront_router
from product_tables.server.routers.table_routes import router as table_router
from product_tables.utils.logger import get_logger, request_context
from product_tables.utils.tracing import init_tracing, shutdown_tracing

logger = get_logger("product_tables.server")


@asynccontextmanager
async def _lifespan(app: FastAPI):
    """Shared upstream HTTP pool for per-store clients; closed on shutdown."""
    init_db()
    init_tracing()
    app.state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(BIGCOMMERCE_TIMEOUT_SECONDS),
        limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
    )
    logger.info("server.lifespan.start", injected_provider=app.state.provider is not None)

    yield

    try:
        await app.state.http_client.aclose()
    except httpx.HTTPError as e:
        logger.debug("server.lifespan.http_client_close_error", error=str(e))
    app.state.http_client = None
    shutdown_tracing()
    logger.info("server.lifespan.stop")


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def create_app(provider: Optional[CatalogProvider] = None) -> FastAPI:
    """
    Create the FastAPI app. When provider is passed every route uses it instead of
    per-store BigCommerce credentials (tests and offline fixture mode).
    """
    app = FastAPI(title="Product Tables", version=__version__, lifespan=_lifespan)
    app.state.provider = provider
    app.state.http_client = None
    app.state.category_cache = {}

    # Storefront widgets call from any merchant domain
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=86400,
    )
    app.add_exception_handler(StarletteHTTPException, _http_error)

    @app.middleware("http")
    async def _log_context(request: Request, call_next):
        with request_context(
            method=request.method,
            path=request.url.path,
            store_hash=request.query_params.get("storeHash"),
        ):
            return await call_next(request)

    app.include_router(pricing_router)
    app.include_router(catalog_router)
    app.include_router(table_router)
    app.include_router(script_router)
    app.include_router(storefront_router)
    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {"status": "ok", "version": __version__}

    return app
