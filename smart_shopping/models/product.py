# smart_shopping/models/product.py

"""Product data model for inter-module data flow."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class LoadingState(Enum):
    """Status of the most recent recommendation search."""

    IDLE = "IDLE"
    LOADING = "LOADING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


@dataclass(frozen=True)
class Product:
    """A single AI-recommended product."""

    id: str
    name: str
    description: str
    estimated_price: float
    currency: str
    category: str
    reason: str

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the camelCase shape used in exported lists."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "estimatedPrice": self.estimated_price,
            "currency": self.currency,
            "category": self.category,
            "reason": self.reason,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Product":
        """Rebuild a product from its exported dict form."""
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            description=str(data["description"]),
            estimated_price=float(data["estimatedPrice"]),
            currency=str(data["currency"]),
            category=str(data["category"]),
            reason=str(data["reason"]),
        )


@dataclass(frozen=True)
class SearchRecord:
    """The query and products of the last completed search."""

    query: str
    products: tuple[Product, ...] = field(
        default_factory=lambda: tuple[Product, ...]()
    )
    timestamp: float = 0.0
