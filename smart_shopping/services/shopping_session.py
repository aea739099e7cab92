# smart_shopping/services/shopping_session.py

"""Application state and the event handlers that mutate it.

:class:`ShoppingSession` owns every piece of mutable UI state (query,
results, loading status, saved list, panel visibility, currency) in one
:class:`AppState`. Views never touch that state directly. They render
immutable :class:`StateSnapshot` objects and call the session's handlers
in response to user events.

Overlapping searches follow a cancel-and-replace policy. Every
:meth:`ShoppingSession.begin_search` issues a new :class:`SearchTicket`
and supersedes all earlier ones. Completions for superseded tickets are
dropped, so the newest submission always decides the final state.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from smart_shopping.config.settings import Settings
from smart_shopping.models.product import LoadingState, Product, SearchRecord
from smart_shopping.services.recommendation_client import RecommendationClient
from smart_shopping.storage.file_manager import FileManager
from smart_shopping.storage.preferences import PreferenceStore

logger = logging.getLogger("smart_shopping.session")

ERROR_MESSAGE = (
    "Oops! Something went wrong while fetching recommendations. "
    "Please try again."
)


class UnsupportedCurrencyError(ValueError):
    """The requested currency code is not in the supported list."""


@dataclass(frozen=True)
class SearchTicket:
    """Identifies one submitted search and the currency active at submit."""

    number: int
    query: str
    currency: str


@dataclass
class AppState:
    """All mutable UI state, owned by a single session."""

    currency: str = Settings.DEFAULT_CURRENCY
    query: str = ""
    products: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    status: LoadingState = LoadingState.IDLE
    saved: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    panel_open: bool = False
    settings_open: bool = False
    last_search: SearchRecord | None = None
    last_error: str = ""


@dataclass(frozen=True)
class StateSnapshot:
    """Read-only view of :class:`AppState` handed to render code."""

    currency: str
    query: str
    products: tuple[Product, ...]
    status: LoadingState
    saved: tuple[Product, ...]
    panel_open: bool
    settings_open: bool
    last_search: SearchRecord | None
    last_error: str
    saved_total: float
    saved_total_currency: str

    def is_saved(self, product_id: str) -> bool:
        """Return whether *product_id* is already in the saved list."""
        return any(p.id == product_id for p in self.saved)


class ShoppingSession:
    """Owns :class:`AppState` and wires user events to state changes."""

    def __init__(
        self,
        client: RecommendationClient | None = None,
        preferences: PreferenceStore | None = None,
        file_manager: FileManager | None = None,
    ) -> None:
        self.client = client or RecommendationClient()
        self.preferences = preferences or PreferenceStore()
        self.file_manager = file_manager or FileManager()
        self.state = AppState(currency=self.preferences.load_currency())
        self._latest_ticket = 0

    # ── Snapshots ────────────────────────────────────────

    def snapshot(self) -> StateSnapshot:
        """Return an immutable copy of the current state."""
        total, total_currency = self.saved_total()
        s = self.state
        return StateSnapshot(
            currency=s.currency,
            query=s.query,
            products=tuple(s.products),
            status=s.status,
            saved=tuple(s.saved),
            panel_open=s.panel_open,
            settings_open=s.settings_open,
            last_search=s.last_search,
            last_error=s.last_error,
            saved_total=total,
            saved_total_currency=total_currency,
        )

    # ── Search lifecycle ─────────────────────────────────

    def begin_search(self, query: str) -> SearchTicket | None:
        """Move to LOADING and clear results; ``None`` for a blank query."""
        query = query.strip()
        if not query:
            logger.debug("Ignoring search submission with empty query")
            return None

        self._latest_ticket += 1
        ticket = SearchTicket(
            number=self._latest_ticket,
            query=query,
            currency=self.state.currency,
        )
        self.state.query = query
        self.state.products = []
        self.state.status = LoadingState.LOADING
        self.state.last_error = ""
        logger.info(
            "Search #%d started: '%s' (%s)",
            ticket.number,
            query,
            ticket.currency,
        )
        return ticket

    def is_current(self, ticket: SearchTicket) -> bool:
        """Return whether *ticket* has not been superseded."""
        return ticket.number == self._latest_ticket

    def resolve_search(
        self, ticket: SearchTicket, products: list[Product]
    ) -> bool:
        """Apply a successful result; returns False if superseded."""
        if not self.is_current(ticket):
            logger.info(
                "Dropping result of superseded search #%d", ticket.number
            )
            return False

        self.state.products = list(products)
        self.state.status = LoadingState.SUCCESS
        self.state.last_search = SearchRecord(
            query=ticket.query,
            products=tuple(products),
            timestamp=time.time(),
        )
        logger.info(
            "Search #%d succeeded with %d products",
            ticket.number,
            len(products),
        )
        return True

    def reject_search(
        self, ticket: SearchTicket, error: BaseException
    ) -> bool:
        """Apply a failed result; returns False if superseded."""
        if not self.is_current(ticket):
            logger.info(
                "Dropping failure of superseded search #%d: %s",
                ticket.number,
                error,
            )
            return False

        self.state.products = []
        self.state.status = LoadingState.ERROR
        self.state.last_error = ERROR_MESSAGE
        logger.error(
            "Search #%d failed for '%s': %s",
            ticket.number,
            ticket.query,
            error,
            exc_info=error,
        )
        return True

    async def run_search(self, ticket: SearchTicket) -> bool:
        """Call the client off the event loop and apply the outcome."""
        try:
            products = await asyncio.to_thread(
                self.client.generate_recommendations,
                ticket.query,
                ticket.currency,
            )
        except Exception as exc:
            return self.reject_search(ticket, exc)
        return self.resolve_search(ticket, products)

    async def search(self, query: str) -> LoadingState:
        """Submit *query* and wait for it; returns the resulting status."""
        ticket = self.begin_search(query)
        if ticket is None:
            return self.state.status
        await self.run_search(ticket)
        return self.state.status

    # ── Saved list ───────────────────────────────────────

    def is_saved(self, product_id: str) -> bool:
        """Return whether *product_id* is already in the saved list."""
        return any(p.id == product_id for p in self.state.saved)

    def add_to_saved(self, product: Product) -> bool:
        """Append *product* unless present; always opens the panel."""
        self.state.panel_open = True
        if self.is_saved(product.id):
            return False
        self.state.saved.append(product)
        logger.info("Saved '%s' (%s)", product.name, product.id)
        return True

    def remove_from_saved(self, product_id: str) -> bool:
        """Drop the product with *product_id*; no-op when absent."""
        before = len(self.state.saved)
        self.state.saved = [
            p for p in self.state.saved if p.id != product_id
        ]
        removed = len(self.state.saved) < before
        if removed:
            logger.info("Removed %s from saved list", product_id)
        return removed

    def saved_total(self) -> tuple[float, str]:
        """Sum saved prices, shown in the first item's currency.

        Mixed currencies are summed as raw numbers.
        """
        saved = self.state.saved
        total = sum(p.estimated_price for p in saved)
        display_currency = saved[0].currency if saved else self.state.currency
        return total, display_currency

    def export_saved(self) -> Path:
        """Write the whole saved list, in order, to the export file."""
        return self.file_manager.export_shopping_list(list(self.state.saved))

    # ── Panels ───────────────────────────────────────────

    def open_panel(self) -> None:
        self.state.panel_open = True

    def close_panel(self) -> None:
        self.state.panel_open = False

    def toggle_panel(self) -> bool:
        self.state.panel_open = not self.state.panel_open
        return self.state.panel_open

    def open_settings(self) -> None:
        self.state.settings_open = True

    def close_settings(self) -> None:
        self.state.settings_open = False

    # ── Currency ─────────────────────────────────────────

    def _results_currency_mismatch(self, currency: str) -> bool:
        """Heuristic: displayed results are priced in another currency.

        Only the first result is inspected since one batch shares a single
        currency.
        """
        products = self.state.products
        return bool(products) and products[0].currency != currency

    def change_currency(self, currency: str) -> bool:
        """Persist *currency*; returns True if stale results were cleared."""
        if Settings.find_currency(currency) is None:
            raise UnsupportedCurrencyError(
                f"Unsupported currency: {currency}"
            )

        self.state.currency = currency
        self.preferences.save_currency(currency)
        logger.info("Currency preference set to %s", currency)

        if self._results_currency_mismatch(currency):
            self.state.products = []
            self.state.status = LoadingState.IDLE
            logger.info(
                "Cleared results priced in another currency than %s",
                currency,
            )
            return True
        return False
