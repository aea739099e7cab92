# smart_shopping/ui/app.py

"""Terminal UI for the smart_shopping assistant."""

import logging

from rich.text import Text
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import (
    Button,
    Footer,
    Header,
    Input,
    LoadingIndicator,
    Static,
)

from smart_shopping.models.product import LoadingState, Product
from smart_shopping.services.shopping_session import (
    ERROR_MESSAGE,
    SearchTicket,
    ShoppingSession,
    StateSnapshot,
)
from smart_shopping.ui.components import EmptyState, ProductCard, SavedItemRow
from smart_shopping.ui.formatting import format_price
from smart_shopping.ui.settings_screen import SettingsScreen

logger = logging.getLogger("smart_shopping.ui")


def status_text(snap: StateSnapshot) -> Text:
    """One-line status for the current search state."""
    if snap.status is LoadingState.LOADING:
        return Text(f"🔍 Generating recommendations for '{snap.query}'...")
    if snap.status is LoadingState.SUCCESS:
        return Text(
            f"✅ Found {len(snap.products)} products for '{snap.query}'"
        )
    if snap.status is LoadingState.ERROR:
        return Text("❌ Search failed")
    return Text("Ready")


class SmartShoppingApp(App[None]):
    """Terminal UI for the smart_shopping assistant."""

    CSS_PATH = "styles.css"
    TITLE = "SmartShopping"
    SUB_TITLE = "AI-powered shopping helper"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("s", "open_settings", "Settings"),
        Binding("l", "toggle_list", "Your List"),
        Binding("e", "export", "Export JSON"),
    ]

    def __init__(self, session: ShoppingSession | None = None) -> None:
        super().__init__()
        self.session = session or ShoppingSession()
        self._rendered_products: tuple[Product, ...] | None = None
        self._rendered_saved: tuple[Product, ...] | None = None

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        with Horizontal(id="body"):
            with Vertical(id="main_container"):
                yield Static("🛒 Welcome to SmartShopping", id="title")
                yield Static(
                    "Our AI assistant curates the perfect products for your "
                    "needs, whether it's a gift, a hobby, or a new project.",
                    id="subtitle",
                )
                with Horizontal(id="search_bar"):
                    yield Input(id="search_input")
                    yield Button(
                        "✨ Generate",
                        variant="primary",
                        id="search_btn",
                        disabled=True,
                    )
                with Horizontal(id="toolbar"):
                    yield Static(id="currency_hint")
                    yield Button("⚙ Settings", id="settings_btn")
                    yield Button("🛍 List (0)", id="list_btn")
                yield Static("Ready", id="status")
                yield LoadingIndicator(id="loader")
                yield Static(ERROR_MESSAGE, id="error_banner")
                yield Static(id="results_header")
                yield VerticalScroll(id="results")
                yield EmptyState(id="empty_state")
            with Vertical(id="saved_panel"):
                with Horizontal(id="saved_header"):
                    yield Static(id="saved_title")
                    yield Button("✕", id="close_panel_btn")
                yield VerticalScroll(id="saved_items")
                yield Static(id="saved_total")
                yield Button(
                    "⬇ Download List (JSON)",
                    variant="primary",
                    id="export_btn",
                )
        yield Footer()

    async def on_mount(self) -> None:
        """Render the initial state."""
        await self.refresh_view()

    # ── Rendering ────────────────────────────────────────

    async def refresh_view(self) -> None:
        """Re-render every widget from a fresh state snapshot."""
        snap = self.session.snapshot()

        self.query_one("#currency_hint", Static).update(
            Text(f"Results will be in {snap.currency}")
        )
        self.query_one("#search_input", Input).placeholder = (
            f"E.g., 'A beginner photography kit under 1000 {snap.currency}'..."
        )
        self.query_one("#list_btn", Button).label = (
            f"🛍 List ({len(snap.saved)})"
        )
        self.query_one("#status", Static).update(status_text(snap))
        self.query_one("#loader", LoadingIndicator).display = (
            snap.status is LoadingState.LOADING
        )
        self.query_one("#error_banner", Static).display = (
            snap.status is LoadingState.ERROR
        )
        self.query_one("#empty_state", EmptyState).display = (
            snap.status is LoadingState.IDLE and not snap.products
        )

        await self._render_results(snap)
        await self._render_saved(snap)

    async def _render_results(self, snap: StateSnapshot) -> None:
        """Show the recommendation cards when a search succeeded."""
        showing = bool(snap.products) and snap.status is LoadingState.SUCCESS
        header = self.query_one("#results_header", Static)
        results = self.query_one("#results", VerticalScroll)
        header.display = showing
        results.display = showing
        header.update(
            Text(f"Top Recommendations · {len(snap.products)} items found")
        )

        if snap.products != self._rendered_products:
            await results.remove_children()
            if snap.products:
                await results.mount_all(
                    ProductCard(p, snap.is_saved(p.id))
                    for p in snap.products
                )
            self._rendered_products = snap.products
        else:
            for card in results.query(ProductCard):
                card.set_saved(snap.is_saved(card.product.id))

    async def _render_saved(self, snap: StateSnapshot) -> None:
        """Render the saved-list side panel."""
        self.query_one("#saved_panel", Vertical).display = snap.panel_open
        self.query_one("#saved_title", Static).update(
            Text(f"🛍 Your List ({len(snap.saved)})")
        )

        total = self.query_one("#saved_total", Static)
        total.display = bool(snap.saved)
        total.update(
            Text(
                "Total Est. "
                + format_price(snap.saved_total, snap.saved_total_currency)
            )
        )
        self.query_one("#export_btn", Button).display = bool(snap.saved)

        if snap.saved == self._rendered_saved:
            return
        items = self.query_one("#saved_items", VerticalScroll)
        await items.remove_children()
        if snap.saved:
            await items.mount_all(SavedItemRow(p) for p in snap.saved)
        else:
            await items.mount(
                Static(
                    "Your list is empty.\n"
                    "Start adding products from your search results!",
                    classes="saved-empty",
                )
            )
        self._rendered_saved = snap.saved

    # ── Events ───────────────────────────────────────────

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button click events."""
        button_id = event.button.id
        if button_id == "search_btn":
            await self.perform_search()
        elif button_id == "settings_btn":
            self.action_open_settings()
        elif button_id in ("list_btn", "close_panel_btn"):
            await self.action_toggle_list()
        elif button_id == "export_btn":
            self.action_export()

    def on_input_changed(self, event: Input.Changed) -> None:
        """Enable the Generate button only for a non-blank query."""
        if event.input.id == "search_input":
            self.query_one("#search_btn", Button).disabled = (
                not event.value.strip()
            )

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle Enter key in the search input."""
        if event.input.id == "search_input":
            await self.perform_search()

    async def on_product_card_add_requested(
        self, message: ProductCard.AddRequested
    ) -> None:
        self.session.add_to_saved(message.product)
        await self.refresh_view()

    async def on_saved_item_row_remove_requested(
        self, message: SavedItemRow.RemoveRequested
    ) -> None:
        self.session.remove_from_saved(message.product_id)
        await self.refresh_view()

    # ── Search ───────────────────────────────────────────

    async def perform_search(self) -> None:
        """Submit the current query; blank input only warns."""
        search_input = self.query_one("#search_input", Input)
        ticket = self.session.begin_search(search_input.value)
        if ticket is None:
            self.notify(
                "Please describe what you're looking for",
                severity="warning",
            )
            return

        await self.refresh_view()
        self.run_search(ticket)

    @work(exclusive=True, group="search")
    async def run_search(self, ticket: SearchTicket) -> None:
        """Fetch recommendations; a newer search cancels this worker."""
        await self.session.run_search(ticket)
        await self.refresh_view()

    # ── Actions ──────────────────────────────────────────

    def action_open_settings(self) -> None:
        """Show the currency picker."""
        self.session.open_settings()
        self.push_screen(
            SettingsScreen(self.session.state.currency),
            self._on_settings_closed,
        )

    async def _on_settings_closed(self, currency: str | None) -> None:
        """Apply the picked currency, if any."""
        self.session.close_settings()
        if currency is not None:
            try:
                cleared = self.session.change_currency(currency)
            except Exception as e:
                logger.error("Failed to change currency", exc_info=True)
                self.notify(
                    f"Currency change failed: {e}", severity="error"
                )
            else:
                if cleared:
                    self.notify(
                        f"Prices now in {currency}. Search again to "
                        "refresh recommendations."
                    )
        await self.refresh_view()

    async def action_toggle_list(self) -> None:
        """Show or hide the saved-list panel."""
        self.session.toggle_panel()
        await self.refresh_view()

    def action_export(self) -> None:
        """Export the saved list to a JSON file."""
        if not self.session.state.saved:
            self.notify("Your list is empty", severity="warning")
            return
        try:
            path = self.session.export_saved()
            logger.info("Shopping list exported to %s", path)
            self.notify(f"Exported to {path}")
        except Exception as e:
            logger.error("Failed to export shopping list", exc_info=True)
            self.notify(f"Export failed: {e}", severity="error")
