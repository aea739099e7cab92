# smart_shopping/cli/runner.py

"""Headless CLI runner that reuses the shopping session."""

import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from smart_shopping.config.settings import Settings
from smart_shopping.models.product import LoadingState, Product
from smart_shopping.services.shopping_session import ShoppingSession
from smart_shopping.storage.file_manager import FileManager
from smart_shopping.storage.preferences import PreferenceStore
from smart_shopping.ui.category_icons import category_glyph
from smart_shopping.ui.formatting import format_price

logger = logging.getLogger("smart_shopping.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def validate_currency(code: str) -> str:
    """Normalise *code* and check it is supported.

    Raises ``SystemExit`` on unknown codes.
    """
    normalised = code.strip().upper()
    if Settings.find_currency(normalised) is None:
        valid = ", ".join(Settings.currency_codes())
        _err.print(f"[red]Unsupported currency: {code}[/red]")
        _err.print(f"[dim]Available: {valid}[/dim]")
        raise SystemExit(1)
    return normalised


def _print_table(products: list[Product]) -> None:
    """Render a Rich table of recommendations to stdout."""
    table = Table(
        title="Top Recommendations",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Product", max_width=40)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Category", style="magenta")
    table.add_column("Why", overflow="fold", style="dim")

    for idx, p in enumerate(products, 1):
        table.add_row(
            str(idx),
            p.name,
            format_price(p.estimated_price, p.currency),
            f"{category_glyph(p.category)} {p.category}",
            p.reason,
        )

    Console().print(table)


async def cli_search(
    query: str,
    currency: str | None,
    output_format: str,
    output_dir: str | None,
) -> int:
    """Run a headless search and return an exit code (0=ok, 1=fail)."""
    session = ShoppingSession()
    if currency is not None:
        # One-off override; the stored preference is left alone
        session.state.currency = validate_currency(currency)

    if not query.strip():
        _err.print("[yellow]Please provide a non-empty query.[/yellow]")
        return 1

    _err.print(
        f"[bold]Searching:[/bold] {query}  "
        f"[dim]currency={session.state.currency}[/dim]"
    )

    status = await session.search(query)
    if status is LoadingState.ERROR:
        _err.print(f"[red]{session.state.last_error}[/red]")
        return 1

    products = session.state.products
    if not products:
        _err.print("[yellow]No products found.[/yellow]")
        return 1

    _err.print(f"[green]✓ {len(products)} recommendations[/green]")

    if output_dir is not None:
        try:
            path = FileManager(Path(output_dir)).export_shopping_list(
                products
            )
            _err.print(f"[dim]Saved → {path}[/dim]")
        except Exception as exc:
            logger.error("Export failed: %s", exc, exc_info=True)
            _err.print(f"[red]Export failed: {exc}[/red]")

    if output_format == "table":
        _print_table(products)
    else:
        sys.stdout.write(FileManager.serialize_products(products))
        sys.stdout.write("\n")

    return 0


def set_default_currency(code: str) -> int:
    """Persist the preferred currency and return an exit code."""
    normalised = validate_currency(code)
    store = PreferenceStore()
    try:
        store.save_currency(normalised)
    except OSError as exc:
        logger.error("Could not save preference: %s", exc, exc_info=True)
        _err.print(f"[red]Could not save preference: {exc}[/red]")
        return 1
    _err.print(f"[green]✓ Default currency set to {normalised}[/green]")
    return 0
