"""Store install commands."""

import asyncio
from typing import Optional

import typer

from product_tables.db.repositories import store_repo
from product_tables.stores import install_store as install_store_lifecycle
from product_tables.stores import uninstall_store as uninstall_store_lifecycle

from .shared import console, logger


def install_store(
    store_hash: str = typer.Argument(..., help="BigCommerce store hash"),
    access_token: str = typer.Option(..., "--token", "-t", help="API access token for the store"),
    scopes: Optional[str] = typer.Option(None, "--scopes", help="Comma-separated granted scopes"),
) -> None:
    """Save store credentials and install the storefront loader script."""
    scope_list = [s.strip() for s in scopes.split(",") if s.strip()] if scopes else None
    store, script = asyncio.run(install_store_lifecycle(store_hash, access_token, scopes=scope_list))
    logger.info("cli.install_store", store_hash=store_hash, store_id=store.id)
    console.print(f"[green]Store {store.store_hash} installed (id {store.id}).[/green]")
    if script is None:
        console.print("[yellow]APP_URL not set; loader script was not injected.[/yellow]")
    elif script.status in ("installed", "already_installed"):
        console.print(f"[green]Loader script: {script.status}[/green]")
    else:
        console.print(f"[yellow]Loader script: {script.status} ({script.reason or 'add it manually'})[/yellow]")


def uninstall_store(store_hash: str = typer.Argument(..., help="BigCommerce store hash")) -> None:
    """Mark a store uninstalled."""
    if uninstall_store_lifecycle(store_hash) is None:
        console.print(f"[red]Unknown store: {store_hash}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Store {store_hash} uninstalled.[/green]")


def list_stores() -> None:
    """List known stores."""
    from rich.table import Table

    table = Table(title="Stores")
    table.add_column("ID", justify="right")
    table.add_column("Store hash", style="cyan")
    table.add_column("Installed", justify="center")
    table.add_column("Scopes")
    for store in store_repo.list_stores():
        table.add_row(str(store.id), store.store_hash, "yes" if store.is_installed else "no", ", ".join(store.scopes or []))
    console.print(table)
