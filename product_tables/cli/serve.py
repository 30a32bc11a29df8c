"""Serve mode: run the storefront proxy and admin API with uvicorn."""

import sys
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from product_tables.bigcommerce.mock import FixtureCatalogProvider
from product_tables.config import APP_URL, BIGCOMMERCE_STORE_HASH, SERVER_PORT
from product_tables.db import init_db
from product_tables.server import create_app

from .shared import console, logger


def serve(
    port: int = typer.Option(SERVER_PORT, "--port", "-p", help="Port for the HTTP server"),
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Bind host"),
    fixture: Optional[Path] = typer.Option(
        None,
        "--fixture",
        "-f",
        help="Serve from a JSON store snapshot instead of the BigCommerce API",
    ),
) -> None:
    """Start the HTTP server."""
    init_db()
    log = logger.bind(command="serve", port=port)
    log.info("serve.start", fixture=str(fixture) if fixture else None)

    provider = None
    if fixture is not None:
        if not fixture.exists():
            console.print(f"[red]Fixture not found: {fixture}[/red]")
            raise typer.Exit(1)
        provider = FixtureCatalogProvider.from_file(fixture)
        console.print(f"[yellow]Offline mode: serving catalog data from {fixture}[/yellow]")
    elif not BIGCOMMERCE_STORE_HASH:
        console.print("[dim]No BIGCOMMERCE_STORE_HASH set; requests use installed store credentials.[/dim]")
    if not APP_URL:
        console.print("[dim]APP_URL not set; loader script URLs use the request host.[/dim]")

    app = create_app(provider=provider)
    console.print(f"[green]Starting server on http://{host}:{port}[/green]")
    console.print("[dim]Endpoints: /api/*, /admin/*, /widget-loader.js, GET /health[/dim]")
    try:
        uvicorn.run(
            app,
            host=host,
            port=port,
            log_level="info",
            timeout_graceful_shutdown=15,
        )
    except KeyboardInterrupt:
        console.print("\n[dim]Shutting down...[/dim]")
        sys.exit(0)


def init_database() -> None:
    """Create the database tables."""
    init_db()
    console.print("[green]Database ready.[/green]")
