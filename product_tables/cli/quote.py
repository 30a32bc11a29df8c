"""Resolve a price quote or a customer context from the command line."""

import asyncio
from pathlib import Path
from typing import Optional

import typer

from product_tables.errors import InvalidInput, NotFound
from product_tables.resolvers import resolve_customer_context, resolve_price
from product_tables.utils.logger import bind_context, clear_context

from .shared import close_provider, console, get_provider, logger, print_json


def _require_provider(fixture: Optional[Path], store_hash: Optional[str]):
    provider = get_provider(fixture, store_hash)
    if provider is None:
        console.print("[red]No BigCommerce connection: pass --fixture or install a store.[/red]")
        raise typer.Exit(1)
    return provider


def quote(
    product_id: str = typer.Argument(..., help="Product ID"),
    variant_id: Optional[str] = typer.Option(None, "--variant", "-v", help="Variant ID"),
    customer_group: str = typer.Option("guest", "--group", "-g", help="Customer group name"),
    quantity: int = typer.Option(1, "--quantity", "-q", help="Quantity"),
    fixture: Optional[Path] = typer.Option(None, "--fixture", "-f", help="JSON store snapshot"),
    store_hash: Optional[str] = typer.Option(None, "--store", "-s", help="Installed store hash"),
    explain: bool = typer.Option(False, "--explain", help="Show the outcome of each pricing stage"),
) -> None:
    """Print the price quote for a product."""
    provider = _require_provider(fixture, store_hash)
    bind_context(command="quote", product_id=product_id)

    async def _run():
        try:
            return await resolve_price(provider, product_id, variant_id, customer_group, quantity)
        finally:
            await close_provider(provider)

    try:
        result = asyncio.run(_run())
    except (InvalidInput, NotFound) as e:
        console.print(f"[red]{e}[/red]")
        logger.warning("quote.failed", error=str(e))
        raise typer.Exit(1) from e
    finally:
        clear_context()

    print_json(result.model_dump(mode="json", by_alias=True))
    if explain:
        from rich.table import Table

        table = Table(title="Pricing stages")
        table.add_column("Stage", style="cyan")
        table.add_column("Status", style="green")
        table.add_column("Reason")
        for outcome in result.diagnostics:
            table.add_row(outcome.stage, outcome.status, outcome.reason or "")
        console.print(table)


def customer_context(
    customer_id: Optional[str] = typer.Argument(None, help="Customer ID (omit for a guest)"),
    fixture: Optional[Path] = typer.Option(None, "--fixture", "-f", help="JSON store snapshot"),
    store_hash: Optional[str] = typer.Option(None, "--store", "-s", help="Installed store hash"),
) -> None:
    """Print the resolved customer context."""
    provider = _require_provider(fixture, store_hash)

    async def _run():
        try:
            return await resolve_customer_context(provider, customer_id)
        finally:
            await close_provider(provider)

    context = asyncio.run(_run())
    print_json(context.model_dump(mode="json", by_alias=True))
    console.print(f"[dim]resolution: {context.resolution.status} {context.resolution.reason or ''}[/dim]")
