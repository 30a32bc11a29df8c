"""HTTP server: FastAPI app factory and routers."""

from product_tables.server.server import create_app

__all__ = ["create_app"]
