# smart_shopping/storage/file_manager.py

"""Handles exporting the saved shopping list to disk."""

import json
import logging
from pathlib import Path
from typing import Any

from smart_shopping.config.settings import Settings
from smart_shopping.models.product import Product

logger = logging.getLogger("smart_shopping.storage")


class FileManager:
    """Handles exporting the saved shopping list to disk."""

    def __init__(self, exports_dir: Path | None = None) -> None:
        self.exports_dir: Path = exports_dir or Settings.EXPORTS_DIR
        logger.debug(
            "FileManager initialised, exports_dir=%s", self.exports_dir
        )

    @staticmethod
    def serialize_products(products: list[Product]) -> str:
        """Render products as a pretty-printed JSON array, order kept."""
        return json.dumps(
            [p.to_dict() for p in products],
            ensure_ascii=False,
            indent=2,
        )

    def export_shopping_list(self, products: list[Product]) -> Path:
        """Write the list to ``smart-shopping-list.json``, overwriting."""
        self.exports_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.exports_dir / Settings.EXPORT_FILENAME

        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self.serialize_products(products))
            f.write("\n")

        logger.info(
            "Exported %d saved products to %s", len(products), filepath
        )
        return filepath

    @staticmethod
    def load_shopping_list(filepath: Path) -> list[Product]:
        """Read an exported list back into products."""
        with open(filepath, encoding="utf-8") as f:
            data: list[dict[str, Any]] = json.load(f)
        return [Product.from_dict(item) for item in data]
