# smart_shopping/ui/category_icons.py

"""Category badge selection by ordered keyword rules."""

from collections.abc import Callable
from enum import Enum


class CategoryTag(Enum):
    """Badge shown next to a product's category."""

    CLOTHING = "clothing"
    BEAUTY = "beauty"
    TECH = "tech"
    HOME = "home"
    SPORT = "sport"
    WORK = "work"
    GENERIC = "generic"


CATEGORY_GLYPHS: dict[CategoryTag, str] = {
    CategoryTag.CLOTHING: "👕",
    CategoryTag.BEAUTY: "✨",
    CategoryTag.TECH: "📱",
    CategoryTag.HOME: "🏠",
    CategoryTag.SPORT: "🏃",
    CategoryTag.WORK: "💼",
    CategoryTag.GENERIC: "🏷",
}


def _contains_any(*keywords: str) -> Callable[[str], bool]:
    """Build a predicate matching any keyword as a substring."""

    def predicate(category: str) -> bool:
        return any(k in category for k in keywords)

    return predicate


# First match wins
CATEGORY_RULES: list[tuple[Callable[[str], bool], CategoryTag]] = [
    (
        _contains_any(
            "cloth", "fashion", "wear", "shirt", "pant", "dress", "outfit"
        ),
        CategoryTag.CLOTHING,
    ),
    (
        _contains_any("cosmetic", "beauty", "skin", "makeup", "hair"),
        CategoryTag.BEAUTY,
    ),
    (
        _contains_any("tech", "phone", "electronic", "laptop", "gadget"),
        CategoryTag.TECH,
    ),
    (
        _contains_any("home", "decor", "furniture", "kitchen"),
        CategoryTag.HOME,
    ),
    (_contains_any("sport", "fitness", "gym"), CategoryTag.SPORT),
    (_contains_any("work", "office", "business"), CategoryTag.WORK),
]


def category_tag(category: str) -> CategoryTag:
    """Return the badge tag for a free-text category label."""
    lowered = category.lower()
    for predicate, tag in CATEGORY_RULES:
        if predicate(lowered):
            return tag
    return CategoryTag.GENERIC


def category_glyph(category: str) -> str:
    """Return the badge glyph for a free-text category label."""
    return CATEGORY_GLYPHS[category_tag(category)]
