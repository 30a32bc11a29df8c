"""CLI commands: serve, quote, customer-context and store install."""

from typer import Typer

from product_tables.cli import quote, serve, stores

app = Typer(help="Product table widgets for BigCommerce")


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command()(serve.serve)
    app.command(name="init-db")(serve.init_database)
    app.command()(quote.quote)
    app.command(name="customer-context")(quote.customer_context)
    app.command(name="install-store")(stores.install_store)
    app.command(name="uninstall-store")(stores.uninstall_store)
    app.command(name="list-stores")(stores.list_stores)


register_commands()
