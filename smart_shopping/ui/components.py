# smart_shopping/ui/components.py

"""Stateless widgets rendering products and the empty placeholder."""

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Button, Static

from smart_shopping.config.settings import Settings
from smart_shopping.models.product import Product
from smart_shopping.ui.category_icons import category_glyph
from smart_shopping.ui.formatting import capitalize_words, format_price

ADD_LABEL = "🛍 Add to List"
SAVED_LABEL = "🏷 Saved to List"


def category_badge(category: str) -> str:
    """Return the glyph-prefixed, capitalised category label."""
    return f"{category_glyph(category)} {capitalize_words(category)}"


class ProductCard(Vertical):
    """One recommended product with an add-to-list button."""

    class AddRequested(Message):
        """The user asked to save the card's product."""

        def __init__(self, product: Product) -> None:
            super().__init__()
            self.product = product

    def __init__(self, product: Product, is_saved: bool = False) -> None:
        super().__init__(classes="product-card")
        self.product = product
        self.is_saved = is_saved

    def compose(self) -> ComposeResult:
        p = self.product
        with Horizontal(classes="card-heading"):
            yield Static(Text(p.name, style="bold"), classes="card-name")
            yield Static(
                Text(format_price(p.estimated_price, p.currency)),
                classes="card-price",
            )
        yield Static(Text(category_badge(p.category)), classes="card-category")
        yield Static(Text(p.description), classes="card-description")
        yield Static(Text(f"ℹ {p.reason}"), classes="card-reason")
        yield Button(
            SAVED_LABEL if self.is_saved else ADD_LABEL,
            variant="default" if self.is_saved else "primary",
            disabled=self.is_saved,
            classes="add-btn",
        )

    def set_saved(self, is_saved: bool) -> None:
        """Refresh the button after the saved list changed."""
        if is_saved == self.is_saved:
            return
        self.is_saved = is_saved
        button = self.query_one(".add-btn", Button)
        button.label = SAVED_LABEL if is_saved else ADD_LABEL
        button.variant = "default" if is_saved else "primary"
        button.disabled = is_saved

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if not self.is_saved:
            self.post_message(self.AddRequested(self.product))


class SavedItemRow(Horizontal):
    """A saved product inside the shopping-list panel."""

    class RemoveRequested(Message):
        """The user asked to drop a product from the saved list."""

        def __init__(self, product_id: str) -> None:
            super().__init__()
            self.product_id = product_id

    def __init__(self, product: Product) -> None:
        super().__init__(classes="saved-row")
        self.product = product

    def compose(self) -> ComposeResult:
        p = self.product
        with Vertical(classes="saved-info"):
            yield Static(Text(p.name, style="bold"), classes="saved-name")
            yield Static(
                Text(format_price(p.estimated_price, p.currency)),
                classes="saved-price",
            )
            yield Static(Text(p.category), classes="saved-category")
        yield Button("🗑", classes="remove-btn")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.post_message(self.RemoveRequested(self.product.id))


class EmptyState(Vertical):
    """Placeholder shown before the first search."""

    def compose(self) -> ComposeResult:
        yield Static("✨", classes="empty-icon")
        yield Static("Ready to go shopping?", classes="empty-title")
        yield Static(
            "Describe what you're looking for, and our AI will curate a "
            "personalized list of products just for you.",
            classes="empty-text",
        )
        for example in Settings.EXAMPLE_QUERIES:
            yield Static(Text(f'"{example}"'), classes="example-query")
