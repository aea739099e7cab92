# smart_shopping/ui/settings_screen.py

"""Modal dialog for choosing the preferred currency."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Static

from smart_shopping.config.settings import Settings


def currency_label(currency: dict[str, str], is_current: bool) -> str:
    """Build the option label, e.g. ``€  EUR  Euro ✓``."""
    mark = " ✓" if is_current else ""
    return f"{currency['symbol']}  {currency['code']}  {currency['name']}{mark}"


class SettingsScreen(ModalScreen[str | None]):
    """Lists supported currencies; dismisses with the chosen code."""

    BINDINGS = [Binding("escape", "close", "Close")]

    def __init__(self, current_currency: str) -> None:
        super().__init__()
        self.current_currency = current_currency

    def compose(self) -> ComposeResult:
        with Vertical(id="settings_dialog"):
            with Horizontal(id="settings_header"):
                yield Static("Settings", id="settings_title")
                yield Button("✕", id="settings_close")
            yield Static("Preferred Currency", id="currency_prompt")
            with VerticalScroll(id="currency_list"):
                for currency in Settings.SUPPORTED_CURRENCIES:
                    is_current = currency["code"] == self.current_currency
                    yield Button(
                        currency_label(currency, is_current),
                        id=f"currency_{currency['code']}",
                        variant="primary" if is_current else "default",
                        classes="currency-option",
                    )
            yield Static(
                "Prices will be estimated in this currency for future searches.",
                id="settings_hint",
            )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        button_id = event.button.id or ""
        if button_id.startswith("currency_"):
            self.dismiss(button_id.removeprefix("currency_"))
        else:
            self.dismiss(None)

    def action_close(self) -> None:
        self.dismiss(None)
