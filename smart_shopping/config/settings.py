# smart_shopping/config/settings.py

"""Central configuration for the smart_shopping assistant."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _first_env(*names: str) -> str:
    """Return the first non-empty environment variable among *names*."""
    for name in names:
        value = os.getenv(name, "").strip()
        if value:
            return value
    return ""


class Settings:
    """Central configuration for the smart_shopping assistant."""

    # --- Generative model ---
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    GOOGLE_API_KEY: str = _first_env(
        "GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY"
    )
    MIN_RECOMMENDATIONS: int = 6        # Lower bound asked of the model
    MAX_RECOMMENDATIONS: int = 8        # Upper bound asked of the model

    # --- Currency ---
    DEFAULT_CURRENCY: str = "USD"
    CURRENCY_PREF_KEY: str = "currency"
    SUPPORTED_CURRENCIES: list[dict[str, str]] = [
        {"code": "USD", "name": "US Dollar", "symbol": "$"},
        {"code": "PKR", "name": "Pakistani Rupee", "symbol": "Rs"},
        {"code": "EUR", "name": "Euro", "symbol": "€"},
        {"code": "GBP", "name": "British Pound", "symbol": "£"},
        {"code": "INR", "name": "Indian Rupee", "symbol": "₹"},
        {"code": "CAD", "name": "Canadian Dollar", "symbol": "C$"},
        {"code": "AUD", "name": "Australian Dollar", "symbol": "A$"},
        {"code": "JPY", "name": "Japanese Yen", "symbol": "¥"},
        {"code": "AED", "name": "UAE Dirham", "symbol": "dh"},
        {"code": "SAR", "name": "Saudi Riyal", "symbol": "SR"},
    ]

    # --- Empty state ---
    EXAMPLE_QUERIES: list[str] = [
        "Camping gear for 2 people under $300",
        "Outfit for a summer garden wedding",
        "Tech starter pack for a home office",
    ]

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    PREFS_PATH: Path = BASE_DIR / "preferences.json"
    EXPORTS_DIR: Path = BASE_DIR / "exports"
    EXPORT_FILENAME: str = "smart-shopping-list.json"
    LOGS_DIR: Path = BASE_DIR / "logs"
    LOG_RETENTION: int = 20             # Run logs kept, including the current one

    @classmethod
    def currency_codes(cls) -> list[str]:
        """Return the supported currency codes in display order."""
        return [c["code"] for c in cls.SUPPORTED_CURRENCIES]

    @classmethod
    def find_currency(cls, code: str) -> dict[str, str] | None:
        """Look up a supported currency entry by its code."""
        for currency in cls.SUPPORTED_CURRENCIES:
            if currency["code"] == code:
                return currency
        return None
