# smart_shopping/ui/formatting.py

"""Display formatting for prices."""

from decimal import ROUND_HALF_UP, Decimal

from smart_shopping.config.settings import Settings


def format_price(amount: float, currency: str) -> str:
    """Format *amount* with no fractional digits, e.g. ``$1,299``.

    Letter symbols (``Rs``, ``dh``) and unknown codes are separated from
    the number by a space.
    """
    rounded = Decimal(str(amount)).to_integral_value(rounding=ROUND_HALF_UP)
    number = f"{rounded:,.0f}"

    entry = Settings.find_currency(currency)
    symbol = entry["symbol"] if entry else currency
    if symbol.isalpha():
        return f"{symbol} {number}"
    return f"{symbol}{number}"


def capitalize_words(label: str) -> str:
    """Upper-case the first letter of each word, leaving the rest as is."""
    return " ".join(word[:1].upper() + word[1:] for word in label.split())
