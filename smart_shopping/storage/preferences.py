# smart_shopping/storage/preferences.py

"""Single-file key-value store for user preferences."""

import json
import logging
from pathlib import Path
from typing import Any

from smart_shopping.config.settings import Settings

logger = logging.getLogger("smart_shopping.storage")


class PreferenceStore:
    """Persists small user preferences as one JSON object on disk.

    There is no migration or versioning: unknown keys are preserved and a
    corrupt file is treated as empty.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path: Path = path or Settings.PREFS_PATH

    def _read(self) -> dict[str, Any]:
        """Load the stored object, or an empty dict when unusable."""
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning(
                "Ignoring unreadable preferences file %s: %s",
                self.path,
                exc,
            )
            return {}
        if not isinstance(data, dict):
            logger.warning(
                "Ignoring preferences file %s: expected a JSON object",
                self.path,
            )
            return {}
        return data

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value for *key*, or *default*."""
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Store *value* under *key*, keeping the other entries."""
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        logger.debug("Preference %s=%r written to %s", key, value, self.path)

    def load_currency(self) -> str:
        """Return the stored currency, falling back to the default."""
        code = self.get(Settings.CURRENCY_PREF_KEY)
        if code is None:
            return Settings.DEFAULT_CURRENCY
        if code not in Settings.currency_codes():
            logger.warning(
                "Stored currency %r is not supported; using %s",
                code,
                Settings.DEFAULT_CURRENCY,
            )
            return Settings.DEFAULT_CURRENCY
        return str(code)

    def save_currency(self, code: str) -> None:
        """Persist the preferred currency code."""
        self.set(Settings.CURRENCY_PREF_KEY, code)
